"""Concurrent fan-out of discovery queries across a service-type catalog.

One :class:`~mdns_discover.worker.DiscoveryWorker` task per catalog entry,
at most ``concurrency`` of them in flight.  Every task posts exactly one
:class:`~mdns_discover.worker.QueryResult` onto a queue; a single aggregator
drains exactly ``len(catalog)`` messages and is the only code that touches
the run-wide dedup set and :class:`DiscoveryStats`.

Results arrive in completion order, so the ``count`` column and the order of
the returned list differ from run to run.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass, field
from typing import IO, Iterable, Sequence

from mdns_discover.errors import (
    DiscoveryError,
    NoServicesConfiguredError,
    TimedOutZeroError,
)
from mdns_discover.formatter import render_line
from mdns_discover.service import (
    OutputField,
    OutputMode,
    Service,
    build_key,
    normalize_output_fields,
)
from mdns_discover.worker import (
    DEFAULT_DOMAIN,
    DEFAULT_TIMEOUT,
    DiscoveryWorker,
    QueryResult,
    ResolverFactory,
)

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 10


@dataclass
class DiscoveryStats:
    """Aggregate metadata for one multi-service run."""

    attempts: int = 0
    errors: int = 0
    suppressed_timeouts: int = 0
    service_type_counts: dict[str, int] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)


class Orchestrator:
    """Runs a whole catalog through bounded-concurrency discovery workers."""

    def __init__(
        self,
        resolver_factory: ResolverFactory,
        concurrency: int = DEFAULT_CONCURRENCY,
        verbose: bool = False,
        out: IO[str] | None = None,
        domain: str = DEFAULT_DOMAIN,
    ) -> None:
        if isinstance(concurrency, bool) or not isinstance(concurrency, int) or concurrency < 1:
            raise ValueError(f"concurrency must be a positive integer, got {concurrency!r}")
        self.resolver_factory = resolver_factory
        self.concurrency = concurrency
        self.verbose = verbose
        self.out = out
        self.domain = domain

    async def discover_all(
        self,
        catalog: Sequence[str],
        output_fields: Iterable[str] | None = None,
        emit_immediately: bool = True,
        output_mode: OutputMode = OutputMode.TEXT,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> tuple[list[Service], DiscoveryStats]:
        """Query every service type in *catalog* and merge the results.

        Raises :class:`NoServicesConfiguredError` for an empty catalog.
        Individual query failures never raise; they land in the returned
        :class:`DiscoveryStats`.
        """
        if not catalog:
            raise NoServicesConfiguredError()

        selected = normalize_output_fields(output_fields)
        # Workers never print in fan-out mode; the aggregator does.
        worker = DiscoveryWorker(self.resolver_factory, out=self.out, domain=self.domain)
        semaphore = asyncio.Semaphore(self.concurrency)
        queue: asyncio.Queue[QueryResult] = asyncio.Queue()

        stopping = False

        async def _run(service_type: str) -> None:
            result: QueryResult | None = None
            try:
                async with semaphore:
                    result = await worker.run_query(service_type, selected, False, timeout)
            except asyncio.CancelledError:
                if stopping:
                    raise
                # Cancellation from below the worker, not from this run.
                logger.debug("worker for %s was cancelled", service_type)
                result = QueryResult(service_type=service_type, error=DiscoveryError("cancelled"))
            except Exception as exc:
                logger.debug("worker for %s crashed", service_type, exc_info=True)
                result = QueryResult(service_type=service_type, error=DiscoveryError(str(exc)))
            finally:
                if result is not None:
                    queue.put_nowait(result)

        tasks = [asyncio.create_task(_run(s)) for s in catalog]
        stats = DiscoveryStats(attempts=len(catalog))
        seen: set[str] = set()
        discovered: list[Service] = []
        emit = emit_immediately and output_mode is OutputMode.TEXT
        try:
            for _ in range(len(tasks)):
                result = await queue.get()
                self._aggregate(result, stats, seen, discovered, selected, emit)
        finally:
            stopping = True
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
        return discovered, stats

    def _aggregate(
        self,
        result: QueryResult,
        stats: DiscoveryStats,
        seen: set[str],
        discovered: list[Service],
        selected: list[OutputField],
        emit: bool,
    ) -> None:
        name = result.service_type
        if result.error is not None:
            if isinstance(result.error, TimedOutZeroError) and not self.verbose:
                stats.suppressed_timeouts += 1
                stats.warnings.append(f"discover {name}: {result.error} (suppressed)")
                logger.debug("discover %s: %s (suppressed)", name, result.error)
                return
            stats.errors += 1
            msg = f"discover {name}: {result.error}"
            stats.warnings.append(msg)
            logger.warning("%s", msg)
            return

        for svc in result.services:
            key = build_key(svc.hostname, svc.address, svc.port)
            if key in seen:
                continue
            seen.add(key)
            svc.service_type = name
            stats.service_type_counts[name] = stats.service_type_counts.get(name, 0) + 1
            discovered.append(svc)
            if emit:
                line = render_line(
                    selected,
                    len(discovered),
                    name,
                    svc.hostname,
                    svc.address,
                    svc.port,
                    svc.text,
                )
                print(line, file=self.out or sys.stdout, flush=True)
