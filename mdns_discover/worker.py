"""Single service-type query: one resolver stream, one deadline, one batch."""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass, field
from typing import IO, Callable, Iterable

from mdns_discover.errors import (
    BrowseError,
    DiscoveryError,
    ResolverInitError,
    TimedOutZeroError,
)
from mdns_discover.formatter import render_line
from mdns_discover.resolver.base import RawEntry, Resolver
from mdns_discover.service import (
    OutputField,
    Service,
    build_key,
    normalize_output_fields,
    parse_txt,
)

logger = logging.getLogger(__name__)

DEFAULT_DOMAIN = "local."
DEFAULT_TIMEOUT = 15.0

ResolverFactory = Callable[[], Resolver]


@dataclass
class QueryResult:
    """What one worker hands back to the orchestrator."""

    service_type: str
    services: list[Service] = field(default_factory=list)
    error: DiscoveryError | None = None


class DiscoveryWorker:
    """Runs one service-type browse end to end.

    A fresh resolver is built per query and always closed afterwards.
    Duplicates reported by the resolver within the query are dropped; the
    first advertisement of a ``hostname|address|port`` key wins, TXT payload
    included.
    """

    def __init__(
        self,
        resolver_factory: ResolverFactory,
        out: IO[str] | None = None,
        domain: str = DEFAULT_DOMAIN,
    ) -> None:
        self.resolver_factory = resolver_factory
        self.out = out
        self.domain = domain

    async def run_query(
        self,
        service_type: str,
        output_fields: Iterable[str] | None = None,
        emit_immediately: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> QueryResult:
        selected = normalize_output_fields(output_fields)
        if emit_immediately:
            logger.debug("Showing: %s", " ".join(f.value for f in selected))

        result = QueryResult(service_type=service_type)
        try:
            resolver = self.resolver_factory()
        except DiscoveryError as exc:
            result.error = exc if isinstance(exc, ResolverInitError) else ResolverInitError(str(exc))
            return result
        except Exception as exc:
            result.error = ResolverInitError(str(exc))
            return result

        try:
            await self._collect(resolver, result, selected, emit_immediately, timeout)
        except Exception as exc:
            logger.debug("discovery for %s failed", service_type, exc_info=True)
            result.error = DiscoveryError(str(exc) or type(exc).__name__)
        finally:
            await resolver.close()
        return result

    async def _collect(
        self,
        resolver: Resolver,
        result: QueryResult,
        selected: list[OutputField],
        emit_immediately: bool,
        timeout: float,
    ) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        service_type = result.service_type

        try:
            stream = await resolver.browse(service_type, self.domain, deadline)
        except DiscoveryError as exc:
            result.error = exc if isinstance(exc, BrowseError) else BrowseError(str(exc))
            return
        except Exception as exc:
            result.error = BrowseError(str(exc))
            return

        seen: set[str] = set()

        async def _consume() -> None:
            async for entry in stream:
                self._accept(entry, result, seen, selected, emit_immediately)

        timed_out = False
        try:
            await asyncio.wait_for(_consume(), timeout=max(deadline - loop.time(), 0.0))
        except asyncio.TimeoutError:
            timed_out = True
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()

        # A resolver that stops on its own at the deadline still counts as expiry.
        if timed_out or loop.time() >= deadline:
            logger.debug(
                "discovery for %s timed out after %ss (%d results)",
                service_type, timeout, len(result.services),
            )
            if not result.services:
                result.error = TimedOutZeroError()
            return

        logger.debug(
            "discovery stream closed for %s (%d results)",
            service_type, len(result.services),
        )

    def _accept(
        self,
        entry: RawEntry,
        result: QueryResult,
        seen: set[str],
        selected: list[OutputField],
        emit_immediately: bool,
    ) -> None:
        joined, attributes = parse_txt(entry.txt)
        for address in [*entry.ipv4, *entry.ipv6]:
            key = build_key(entry.hostname, address, entry.port)
            if key in seen:
                continue
            seen.add(key)
            if emit_immediately:
                line = render_line(
                    selected,
                    len(result.services) + 1,
                    result.service_type,
                    entry.hostname,
                    address,
                    entry.port,
                    joined,
                )
                print(line, file=self.out or sys.stdout, flush=True)
            result.services.append(
                Service(
                    hostname=entry.hostname,
                    address=address,
                    port=entry.port,
                    text=joined,
                    service_type=result.service_type,
                    txt_attributes=dict(attributes) if attributes else None,
                )
            )
