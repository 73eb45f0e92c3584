"""Tests for text-line and JSON rendering."""

from __future__ import annotations

import json

from mdns_discover.formatter import build_summary, format_duration, render_json, render_line
from mdns_discover.orchestrator import DiscoveryStats
from mdns_discover.service import OutputField, Service, normalize_output_fields


def _line(fields, text="fv=1;junk"):
    return render_line(
        normalize_output_fields(fields), 3, "_ssh._tcp", "host.local.", "10.0.0.5", 22, text
    )


class TestRenderLine:
    def test_all_fields(self):
        assert _line(None) == "3 _ssh._tcp host.local. 10.0.0.5 22 fv=1;junk"

    def test_hostname_and_port_only(self):
        assert _line(["hostname", "port"]) == "host.local. 22"

    def test_canonical_order_regardless_of_selection_order(self):
        assert _line(["port", "address", "count"]) == "3 10.0.0.5 22"

    def test_empty_text_omitted(self):
        assert _line(["hostname", "text"], text="") == "host.local."

    def test_text_only_when_selected(self):
        assert _line(["address"]) == "10.0.0.5"

    def test_no_known_fields(self):
        assert render_line([], 1, "s", "h", "a", 1, "t") == ""

    def test_accepts_plain_set(self):
        line = render_line({OutputField.SERVICE, OutputField.COUNT}, 7, "_ipp._tcp", "h", "a", 631, "")
        assert line == "7 _ipp._tcp"


class TestFormatDuration:
    def test_zero(self):
        assert format_duration(0) == "0s"

    def test_milliseconds(self):
        assert format_duration(0.25) == "250ms"

    def test_truncates_to_ms(self):
        assert format_duration(1.2349) == "1.234s"

    def test_whole_seconds(self):
        assert format_duration(15) == "15s"

    def test_minutes(self):
        assert format_duration(62.5) == "1m2.5s"

    def test_hours(self):
        assert format_duration(3605) == "1h0m5s"


class TestJson:
    def _services(self):
        return [
            Service("a.local.", "10.0.0.1", 22, "", "_ssh._tcp"),
            Service("b.local.", "10.0.0.2", 80, "k=v", "_http._tcp", {"k": "v"}),
            Service("c.local.", "10.0.0.3", 80, "", "_http._tcp"),
        ]

    def test_array(self):
        data = json.loads(render_json(self._services()))
        assert isinstance(data, list)
        assert len(data) == 3
        assert data[1]["txtMap"] == {"k": "v"}

    def test_empty_array(self):
        assert json.loads(render_json([])) == []

    def test_envelope(self):
        services = self._services()
        stats = DiscoveryStats(attempts=5, errors=1, suppressed_timeouts=2)
        summary = build_summary(services, started=100.0, stats=stats, now=102.0)
        data = json.loads(render_json(services, summary))
        assert set(data) == {"results", "summary"}
        assert len(data["results"]) == 3
        assert data["summary"] == {
            "elapsed": "2s",
            "service_types": 2,
            "instances": 3,
            "instances_per_second": 1.5,
            "suppressed_timeouts": 2,
            "errors": 1,
        }

    def test_summary_zero_elapsed(self):
        summary = build_summary([], started=5.0, stats=DiscoveryStats(), now=5.0)
        assert summary["instances_per_second"] == 0.0
        assert summary["elapsed"] == "0s"
