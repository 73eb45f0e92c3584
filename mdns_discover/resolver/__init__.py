"""Resolver factory for mdns-discover.

Usage::

    from mdns_discover.resolver import get_resolver
    resolver = get_resolver()            # auto from environment
    resolver = get_resolver("zeroconf")
"""

from __future__ import annotations

import os
from typing import Any

from .base import RawEntry, Resolver
from .zeroconf_backend import ZeroconfResolver

__all__ = ["RawEntry", "Resolver", "ZeroconfResolver", "get_resolver"]

_RESOLVERS = {
    "zeroconf": ZeroconfResolver,
}


def get_resolver(resolver_name: str | None = None, **kwargs: Any) -> Resolver:
    """Return a new Resolver.

    If *resolver_name* is omitted, reads ``MDNS_RESOLVER`` from the environment
    (default: ``"zeroconf"``).  Construction errors surface as
    :class:`~mdns_discover.errors.ResolverInitError`.
    """
    if resolver_name is None:
        resolver_name = os.environ.get("MDNS_RESOLVER", "zeroconf")

    resolver_name = resolver_name.lower().replace("-", "_")
    cls = _RESOLVERS.get(resolver_name)
    if cls is None:
        raise ValueError(
            f"Unknown resolver '{resolver_name}'. "
            f"Choose from: {list(_RESOLVERS)}"
        )
    return cls(**kwargs)
