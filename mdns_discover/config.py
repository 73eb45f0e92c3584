"""Run configuration: defaults, ``MDNS_*`` environment variables, CLI overrides."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Mapping

from mdns_discover.orchestrator import DEFAULT_CONCURRENCY
from mdns_discover.service import OutputMode
from mdns_discover.worker import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

_DURATION_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ms|h|m|s)")
_UNIT_SECONDS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_duration(text: str) -> float:
    """Parse a Go-style duration (``500ms``, ``10s``, ``1m30s``) into seconds."""
    raw = text.strip()
    if raw == "0":
        return 0.0
    pos = 0
    total = 0.0
    for match in _DURATION_RE.finditer(raw):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        pos = match.end()
    if not raw or pos != len(raw):
        raise ValueError(f"invalid duration: {text!r}")
    return total


def split_fields(value: str) -> list[str]:
    """``"hostname, port"`` -> ``["hostname", "port"]``."""
    return [v.strip() for v in value.split(",") if v.strip()]


def _is_truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true")


@dataclass
class DiscoverConfig:
    """Everything a discovery run needs besides the catalog."""

    service_filter: str = ""
    fields: list[str] = field(default_factory=list)
    timeout: float = DEFAULT_TIMEOUT
    concurrency: int = DEFAULT_CONCURRENCY
    debug: bool = False
    summary: bool = False
    color: bool = True
    output_mode: OutputMode = OutputMode.TEXT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> DiscoverConfig:
        """Defaults overlaid with the ``MDNS_*`` environment variables.

        Unparseable values are reported and the default is kept.
        """
        env = os.environ if environ is None else environ
        config = cls()

        config.service_filter = env.get("MDNS_SERVICE_FILTER", "").strip()

        field_filter = env.get("MDNS_FIELD_FILTER", "")
        if field_filter:
            config.fields = split_fields(field_filter)

        config.debug = _is_truthy(env.get("MDNS_DEBUG"))

        concurrency = env.get("MDNS_CONCURRENCY", "").strip()
        if concurrency:
            try:
                n = int(concurrency)
            except ValueError:
                n = 0
            if n > 0:
                config.concurrency = n
            else:
                logger.warning("invalid MDNS_CONCURRENCY '%s' (using default %d)", concurrency, config.concurrency)

        timeout = env.get("MDNS_TIMEOUT", "")
        if timeout:
            try:
                config.timeout = parse_duration(timeout)
            except ValueError:
                logger.warning("invalid MDNS_TIMEOUT '%s' (using default %ss)", timeout, config.timeout)

        return config
