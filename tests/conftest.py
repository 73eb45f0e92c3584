"""pytest configuration for mdns-discover tests."""

from __future__ import annotations

import asyncio
from typing import AsyncIterator

import pytest

from mdns_discover.errors import BrowseError, ResolverInitError
from mdns_discover.resolver.base import RawEntry, Resolver


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: mark test as async"
    )


class FakeNetwork:
    """Resolver factory that serves canned entries per service type.

    ``entries`` maps service type -> list of RawEntry.  When ``hang`` is set
    the stream stays open until the worker's deadline cancels it, like a real
    browse would; otherwise it closes right after the last entry.  ``stream_error``
    is raised from the stream once the entries are exhausted.
    """

    def __init__(
        self,
        entries: dict[str, list[RawEntry]] | None = None,
        hang: bool = False,
        delay: float = 0.0,
        init_error: Exception | None = None,
        browse_error: Exception | None = None,
        stream_error: BaseException | None = None,
    ) -> None:
        self.entries = entries or {}
        self.hang = hang
        self.delay = delay
        self.init_error = init_error
        self.browse_error = browse_error
        self.stream_error = stream_error
        self.created = 0
        self.closed = 0
        self.active = 0
        self.max_active = 0
        self.browsed: list[tuple[str, str]] = []

    def __call__(self) -> Resolver:
        if self.init_error is not None:
            raise self.init_error
        return _FakeResolver(self)


class _FakeResolver(Resolver):
    def __init__(self, network: FakeNetwork) -> None:
        self.network = network
        network.created += 1
        network.active += 1
        network.max_active = max(network.max_active, network.active)
        self._closed = False

    async def browse(self, service_type: str, domain: str, deadline: float) -> AsyncIterator[RawEntry]:
        self.network.browsed.append((service_type, domain))
        if self.network.browse_error is not None:
            raise self.network.browse_error
        return self._stream(list(self.network.entries.get(service_type, [])))

    async def _stream(self, entries: list[RawEntry]) -> AsyncIterator[RawEntry]:
        for entry in entries:
            # yield control so sibling workers interleave
            await asyncio.sleep(self.network.delay)
            yield entry
        if self.network.stream_error is not None:
            raise self.network.stream_error
        if self.network.hang:
            await asyncio.sleep(3600)

    async def close(self) -> None:
        if not self._closed:
            self._closed = True
            self.network.closed += 1
            self.network.active -= 1


def entry(
    hostname: str = "host.local.",
    ipv4: list[str] | None = None,
    ipv6: list[str] | None = None,
    port: int = 22,
    txt: list[str] | None = None,
) -> RawEntry:
    return RawEntry(
        hostname=hostname,
        port=port,
        ipv4=["10.0.0.5"] if ipv4 is None else ipv4,
        ipv6=ipv6 or [],
        txt=txt or [],
    )


@pytest.fixture
def make_network():
    return FakeNetwork


@pytest.fixture
def make_entry():
    return entry


@pytest.fixture
def init_failure():
    return ResolverInitError("socket bind refused")


@pytest.fixture
def browse_failure():
    return BrowseError("bad service type")
