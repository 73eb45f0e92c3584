"""Human-readable run summary, written to the diagnostic stream."""

from __future__ import annotations

import sys
import time
from typing import IO, Sequence

from mdns_discover.formatter import format_duration
from mdns_discover.orchestrator import DiscoveryStats
from mdns_discover.service import Service

RESET = "\033[0m"
BOLD = "\033[1m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
RED = "\033[31m"


def stream_supports_color(stream: IO[str]) -> bool:
    """True when *stream* is attached to a terminal."""
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        # closed stream
        return False


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


def print_summary(
    services: Sequence[Service],
    started: float,
    enabled: bool,
    stats: DiscoveryStats,
    color: bool,
    stream: IO[str] | None = None,
    now: float | None = None,
) -> None:
    """Print elapsed time, counts, rate and the per-type breakdown.

    *started* / *now* are :func:`time.monotonic` readings.  Output goes to
    *stream* (stderr by default), never to the results stream.
    """
    if not enabled:
        return
    stream = stream or sys.stderr
    if now is None:
        now = time.monotonic()
    elapsed_sec = max(now - started, 0.0)
    elapsed = format_duration(elapsed_sec)

    def paint(text: str, code: str) -> str:
        return f"{code}{text}{RESET}" if color else text

    if not services:
        msg = f"Summary: Completed in {elapsed} — No services found"
        if stats.suppressed_timeouts > 0:
            msg += f" ({stats.suppressed_timeouts} suppressed timeouts)"
        print(paint(msg, BOLD), file=stream)
        return

    instances = len(services)
    unique = len({s.service_type for s in services if s.service_type})
    rate = instances / elapsed_sec if elapsed_sec > 0 else 0.0

    extras = [f"{rate:.2f} inst/s"]
    if stats.suppressed_timeouts > 0:
        extras.append(paint(f"{stats.suppressed_timeouts} suppressed timeouts", YELLOW))
    if stats.errors > 0:
        extras.append(paint(f"{stats.errors} errors", RED))

    print(
        f"{paint('Summary:', BOLD)} Completed in {elapsed} — "
        f"{paint(_plural(unique, 'service type'), GREEN)}, "
        f"{paint(_plural(instances, 'instance'), GREEN)} ({', '.join(extras)})",
        file=stream,
    )

    if not stats.service_type_counts:
        return
    ranked = sorted(stats.service_type_counts.items(), key=lambda kv: (-kv[1], kv[0]))
    print(paint("Top services:", BOLD), file=stream)
    for name, count in ranked:
        pct = count / instances * 100
        print(paint(f"  {name}: {count} ({pct:.1f}%)", GREEN), file=stream)
