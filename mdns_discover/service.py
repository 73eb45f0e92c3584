"""Discovered-service record and the helpers shared by worker, orchestrator and formatter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable


class OutputField(str, Enum):
    """Fields a text line can show. Definition order is the rendering order."""

    COUNT = "count"
    SERVICE = "service"
    HOSTNAME = "hostname"
    ADDRESS = "address"
    PORT = "port"
    TEXT = "text"


class OutputMode(Enum):
    TEXT = "text"
    JSON = "json"


DEFAULT_FIELDS: tuple[OutputField, ...] = tuple(OutputField)

_FIELDS_BY_NAME = {f.value: f for f in OutputField}


@dataclass
class Service:
    """One discovered service instance, one record per resolved address."""

    hostname: str
    address: str
    port: int
    text: str = ""
    service_type: str = ""
    txt_attributes: dict[str, str] | None = None

    @property
    def key(self) -> str:
        return build_key(self.hostname, self.address, self.port)

    def to_dict(self) -> dict[str, Any]:
        """JSON mapping: ``service`` and ``txtMap`` are omitted when empty."""
        data: dict[str, Any] = {}
        if self.service_type:
            data["service"] = self.service_type
        data["hostname"] = self.hostname
        data["address"] = self.address
        data["port"] = self.port
        data["text"] = self.text
        if self.txt_attributes:
            data["txtMap"] = dict(self.txt_attributes)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Service:
        txt_map = data.get("txtMap")
        return cls(
            hostname=data["hostname"],
            address=data["address"],
            port=int(data["port"]),
            text=data.get("text", ""),
            service_type=data.get("service", ""),
            txt_attributes=dict(txt_map) if txt_map else None,
        )


def build_key(hostname: str, address: str, port: int) -> str:
    """Dedup key for a physical instance: ``hostname|address|port``."""
    return f"{hostname}|{address}|{port}"


def parse_txt(segments: Iterable[str]) -> tuple[str, dict[str, str] | None]:
    """Join TXT segments with ``;`` and collect the ``key=value`` pairs.

    Segments without ``=`` (or with an empty key) stay in the joined string
    but are left out of the mapping.  The mapping is ``None`` when nothing
    parsed.
    """
    segments = list(segments)
    if not segments:
        return "", None
    joined = ";".join(segments)
    attributes: dict[str, str] = {}
    for raw in segments:
        if not raw:
            continue
        key, sep, value = raw.partition("=")
        if sep and key:
            attributes[key] = value
    return joined, (attributes or None)


def normalize_output_fields(fields: Iterable[str] | None) -> list[OutputField]:
    """Resolve requested field names into an ordered, duplicate-free selection.

    No names at all selects every field.  Blank and unknown names are
    dropped; the first occurrence of a name decides its position.
    """
    names = [] if fields is None else list(fields)
    if not names:
        return list(DEFAULT_FIELDS)
    selected: list[OutputField] = []
    for name in names:
        if isinstance(name, OutputField):
            field: OutputField | None = name
        else:
            field = _FIELDS_BY_NAME.get(str(name).strip())
        if field is not None and field not in selected:
            selected.append(field)
    return selected
