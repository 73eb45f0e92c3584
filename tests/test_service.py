"""Tests for the Service record, dedup keys, TXT parsing and field selection."""

from __future__ import annotations

import json

from mdns_discover.service import (
    DEFAULT_FIELDS,
    OutputField,
    Service,
    build_key,
    normalize_output_fields,
    parse_txt,
)


class TestBuildKey:
    def test_pipe_delimited(self):
        assert build_key("host.local.", "10.0.0.5", 22) == "host.local.|10.0.0.5|22"

    def test_ipv6_address(self):
        assert build_key("nas.local.", "fe80::1", 445) == "nas.local.|fe80::1|445"

    def test_same_triple_same_key(self):
        assert build_key("a", "b", 1) == build_key("a", "b", 1)

    def test_service_key_ignores_type_and_text(self):
        a = Service("h", "10.0.0.1", 80, text="x", service_type="_http._tcp")
        b = Service("h", "10.0.0.1", 80, text="y", service_type="_ipp._tcp")
        assert a.key == b.key


class TestParseTxt:
    def test_joined_and_mapping(self):
        joined, attrs = parse_txt(["fv=p20.1", "junk"])
        assert joined == "fv=p20.1;junk"
        assert attrs == {"fv": "p20.1"}

    def test_empty(self):
        assert parse_txt([]) == ("", None)

    def test_no_pairs_gives_no_mapping(self):
        joined, attrs = parse_txt(["junk", "more"])
        assert joined == "junk;more"
        assert attrs is None

    def test_split_on_first_equals(self):
        _, attrs = parse_txt(["path=/a=b"])
        assert attrs == {"path": "/a=b"}

    def test_empty_value_kept(self):
        _, attrs = parse_txt(["flag="])
        assert attrs == {"flag": ""}

    def test_empty_key_ignored(self):
        joined, attrs = parse_txt(["=value", "k=v"])
        assert joined == "=value;k=v"
        assert attrs == {"k": "v"}

    def test_order_preserved(self):
        joined, _ = parse_txt(["z=1", "a=2", "m=3"])
        assert joined == "z=1;a=2;m=3"


class TestNormalizeOutputFields:
    def test_default_when_none(self):
        assert normalize_output_fields(None) == list(DEFAULT_FIELDS)

    def test_default_when_empty(self):
        assert normalize_output_fields([]) == list(OutputField)

    def test_drops_blanks_and_duplicates(self):
        result = normalize_output_fields(["port", " ", "hostname", "port", ""])
        assert result == [OutputField.PORT, OutputField.HOSTNAME]

    def test_strips_whitespace(self):
        assert normalize_output_fields([" address "]) == [OutputField.ADDRESS]

    def test_unknown_names_ignored(self):
        assert normalize_output_fields(["bogus", "port"]) == [OutputField.PORT]

    def test_accepts_enum_members(self):
        assert normalize_output_fields([OutputField.TEXT, "text"]) == [OutputField.TEXT]


class TestServiceJson:
    def test_omits_empty_optional_fields(self):
        svc = Service(hostname="h.local.", address="10.0.0.1", port=80)
        assert svc.to_dict() == {
            "hostname": "h.local.",
            "address": "10.0.0.1",
            "port": 80,
            "text": "",
        }

    def test_includes_optional_fields(self):
        svc = Service(
            hostname="h.local.",
            address="10.0.0.1",
            port=80,
            text="fv=1;junk",
            service_type="_http._tcp",
            txt_attributes={"fv": "1"},
        )
        data = svc.to_dict()
        assert data["service"] == "_http._tcp"
        assert data["txtMap"] == {"fv": "1"}
        assert data["text"] == "fv=1;junk"

    def test_json_round_trip(self):
        services = [
            Service("a.local.", "10.0.0.1", 22, "", "_ssh._tcp", None),
            Service("b.local.", "fe80::2", 80, "path=/;x", "_http._tcp", {"path": "/"}),
            Service("c.local.", "10.0.0.3", 9, "", "", None),
        ]
        encoded = json.dumps([s.to_dict() for s in services])
        decoded = [Service.from_dict(d) for d in json.loads(encoded)]
        assert decoded == services
        raw = json.loads(encoded)
        assert "txtMap" not in raw[0]
        assert "service" not in raw[2]
        assert raw[1]["txtMap"] == {"path": "/"}
