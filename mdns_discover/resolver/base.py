"""Abstract resolver interface for mdns-discover.

Any mDNS / DNS-SD browsing backend implements this interface.  The core only
ever sees :class:`RawEntry` objects coming out of :meth:`Resolver.browse`.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import AsyncIterator


@dataclass
class RawEntry:
    """One resolved advertisement as reported by the resolver."""

    hostname: str
    port: int
    ipv4: list[str] = field(default_factory=list)
    ipv6: list[str] = field(default_factory=list)
    txt: list[str] = field(default_factory=list)


class Resolver(abc.ABC):
    """Abstract interface for a DNS-SD browser.

    Constructing a resolver may raise
    :class:`~mdns_discover.errors.ResolverInitError`.
    """

    @abc.abstractmethod
    async def browse(
        self,
        service_type: str,
        domain: str,
        deadline: float,
    ) -> AsyncIterator[RawEntry]:
        """Start browsing *service_type* in *domain*.

        *deadline* is an event-loop timestamp (``loop.time()``).  Returns an
        async iterator of entries that ends once the deadline passes or the
        resolver has nothing more to report.  Entries are unordered and may
        repeat.

        Raises :class:`~mdns_discover.errors.BrowseError` when the browse
        cannot be issued.
        """
        raise NotImplementedError

    async def close(self) -> None:
        """Release sockets and background tasks.  Safe to call twice."""
        return None
