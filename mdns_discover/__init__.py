"""mdns-discover — multicast DNS service discovery across a catalog of service types.

Quickstart::

    import asyncio
    from mdns_discover.catalog import load_catalog
    from mdns_discover.orchestrator import Orchestrator
    from mdns_discover.resolver import get_resolver

    orchestrator = Orchestrator(get_resolver, concurrency=10)
    services, stats = asyncio.run(orchestrator.discover_all(load_catalog()))
"""

__version__ = "1.0.0"
