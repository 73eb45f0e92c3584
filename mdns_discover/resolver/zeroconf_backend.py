"""python-zeroconf backed resolver.

Browses with :class:`~zeroconf.asyncio.AsyncServiceBrowser`, resolves every
added or updated instance with :class:`~zeroconf.asyncio.AsyncServiceInfo` and
hands the results to the caller through an :class:`asyncio.Queue`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator

from zeroconf import IPVersion, ServiceStateChange, Zeroconf
from zeroconf.asyncio import AsyncServiceBrowser, AsyncServiceInfo, AsyncZeroconf

from mdns_discover.errors import BrowseError, ResolverInitError

from .base import RawEntry, Resolver

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT_MS = 3000

_RESOLVE_STATES = (ServiceStateChange.Added, ServiceStateChange.Updated)


def qualify_service_type(service_type: str, domain: str) -> str:
    """``("_http._tcp", "local.")`` -> ``"_http._tcp.local."``."""
    service_type = service_type.strip().rstrip(".")
    domain = domain.strip().strip(".")
    if service_type.endswith("." + domain):
        return service_type + "."
    return f"{service_type}.{domain}."


def split_txt(raw: bytes | None) -> list[str]:
    """Split TXT rdata into its length-prefixed strings, keeping wire order."""
    if not raw:
        return []
    segments: list[str] = []
    i = 0
    while i < len(raw):
        length = raw[i]
        chunk = raw[i + 1:i + 1 + length]
        i += 1 + length
        if chunk:
            segments.append(chunk.decode("utf-8", errors="replace"))
    return segments


def entry_from_info(info: AsyncServiceInfo) -> RawEntry:
    return RawEntry(
        hostname=info.server or "",
        port=info.port or 0,
        ipv4=list(info.parsed_addresses(IPVersion.V4Only)),
        ipv6=list(info.parsed_addresses(IPVersion.V6Only)),
        txt=split_txt(info.text),
    )


class ZeroconfResolver(Resolver):
    """Resolver backed by one :class:`AsyncZeroconf` instance."""

    def __init__(
        self,
        ip_version: IPVersion = IPVersion.All,
        request_timeout_ms: int = DEFAULT_REQUEST_TIMEOUT_MS,
    ) -> None:
        try:
            self._aiozc: AsyncZeroconf | None = AsyncZeroconf(ip_version=ip_version)
        except Exception as exc:
            raise ResolverInitError(str(exc)) from exc
        self.request_timeout_ms = request_timeout_ms

    async def browse(
        self,
        service_type: str,
        domain: str,
        deadline: float,
    ) -> AsyncIterator[RawEntry]:
        if self._aiozc is None:
            raise BrowseError("resolver is closed")
        type_ = qualify_service_type(service_type, domain)
        queue: asyncio.Queue[RawEntry] = asyncio.Queue()
        pending: set[asyncio.Task] = set()

        def _on_change(
            zeroconf: Zeroconf,
            service_type: str,
            name: str,
            state_change: ServiceStateChange,
        ) -> None:
            if state_change not in _RESOLVE_STATES:
                return
            task = asyncio.ensure_future(self._resolve(zeroconf, service_type, name, queue))
            pending.add(task)
            task.add_done_callback(pending.discard)

        try:
            browser = AsyncServiceBrowser(self._aiozc.zeroconf, type_, handlers=[_on_change])
        except Exception as exc:
            raise BrowseError(f"{type_}: {exc}") from exc
        logger.debug("Browsing %s", type_)
        return self._entries(queue, browser, pending, deadline)

    async def close(self) -> None:
        if self._aiozc is not None:
            await self._aiozc.async_close()
            self._aiozc = None

    # ------------------------------------------------------------------ #
    # Internal helpers                                                     #
    # ------------------------------------------------------------------ #

    async def _resolve(
        self,
        zeroconf: Zeroconf,
        service_type: str,
        name: str,
        queue: asyncio.Queue[RawEntry],
    ) -> None:
        info = AsyncServiceInfo(service_type, name)
        if not await info.async_request(zeroconf, self.request_timeout_ms):
            logger.debug("No answer resolving %s", name)
            return
        queue.put_nowait(entry_from_info(info))

    @staticmethod
    async def _entries(
        queue: asyncio.Queue[RawEntry],
        browser: AsyncServiceBrowser,
        pending: set[asyncio.Task],
        deadline: float,
    ) -> AsyncIterator[RawEntry]:
        loop = asyncio.get_running_loop()
        try:
            while True:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    return
                try:
                    entry = await asyncio.wait_for(queue.get(), timeout=remaining)
                except asyncio.TimeoutError:
                    return
                yield entry
        finally:
            for task in list(pending):
                task.cancel()
            await browser.async_cancel()
