"""Text and JSON rendering of discovered services."""

from __future__ import annotations

import json
import time
from typing import TYPE_CHECKING, Any, Iterable, Sequence

from mdns_discover.service import OutputField, Service

if TYPE_CHECKING:
    from mdns_discover.orchestrator import DiscoveryStats


def render_line(
    selected: Iterable[OutputField],
    seq: int,
    service_type: str,
    hostname: str,
    address: str,
    port: int,
    text: str,
) -> str:
    """Space-join the selected fields.

    Fields always come out in :class:`OutputField` order no matter how the
    selection was ordered; ``text`` is dropped when empty.
    """
    chosen = set(selected)
    values = {
        OutputField.COUNT: str(seq),
        OutputField.SERVICE: service_type,
        OutputField.HOSTNAME: hostname,
        OutputField.ADDRESS: address,
        OutputField.PORT: str(port),
        OutputField.TEXT: text,
    }
    parts = []
    for field in OutputField:
        if field not in chosen:
            continue
        if field is OutputField.TEXT and not text:
            continue
        parts.append(values[field])
    return " ".join(parts)


def format_duration(seconds: float) -> str:
    """Render a duration the way Go prints a ``time.Duration``.

    Truncated to whole milliseconds: ``0s``, ``250ms``, ``1.5s``, ``2m3.25s``,
    ``1h0m5s``.
    """
    ms = int(seconds * 1000)
    if ms <= 0:
        return "0s"
    if ms < 1000:
        return f"{ms}ms"
    hours, rem = divmod(ms, 3_600_000)
    minutes, rem = divmod(rem, 60_000)
    secs = f"{rem // 1000}.{rem % 1000:03d}".rstrip("0").rstrip(".")
    if hours:
        return f"{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{minutes}m{secs}s"
    return f"{secs}s"


def build_summary(
    services: Sequence[Service],
    started: float,
    stats: DiscoveryStats,
    now: float | None = None,
) -> dict[str, Any]:
    """Summary block for the JSON envelope.

    *started* and *now* are :func:`time.monotonic` readings.
    """
    if now is None:
        now = time.monotonic()
    elapsed = max(now - started, 0.0)
    instances = len(services)
    return {
        "elapsed": format_duration(elapsed),
        "service_types": len({s.service_type for s in services if s.service_type}),
        "instances": instances,
        "instances_per_second": instances / elapsed if elapsed > 0 else 0.0,
        "suppressed_timeouts": stats.suppressed_timeouts,
        "errors": stats.errors,
    }


def render_json(services: Sequence[Service], summary: dict[str, Any] | None = None) -> str:
    """Array of services, or a ``{"results", "summary"}`` envelope."""
    results = [s.to_dict() for s in services]
    if summary is None:
        return json.dumps(results, indent=2)
    return json.dumps({"results": results, "summary": summary}, indent=2)
