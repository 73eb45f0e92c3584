"""Built-in catalog of DNS-SD service types.

Every ``*.txt`` file under ``data/`` contributes one service type per line.
Blank lines and ``#`` comments are skipped.  The catalog is read once and
returned as a tuple.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"


def parse_catalog(text: str) -> list[str]:
    """Service types from one catalog file's text, in file order."""
    entries = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        entries.append(line)
    return entries


def load_catalog(data_dir: Path | None = None) -> tuple[str, ...]:
    """Read every catalog file in *data_dir* (default: the packaged data).

    Files are read in name order; a service type listed twice is kept at its
    first position.
    """
    data_dir = Path(data_dir) if data_dir is not None else DATA_DIR
    if not data_dir.is_dir():
        logger.warning("Catalog directory not found: %s", data_dir)
        return ()

    seen: set[str] = set()
    catalog: list[str] = []
    for path in sorted(data_dir.glob("*.txt")):
        for service_type in parse_catalog(path.read_text(encoding="utf-8")):
            if service_type in seen:
                continue
            seen.add(service_type)
            catalog.append(service_type)
    logger.debug("Loaded %d service types from %s", len(catalog), data_dir)
    return tuple(catalog)
