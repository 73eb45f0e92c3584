"""Tests for the built-in service-type catalog."""

from __future__ import annotations

from mdns_discover.catalog import load_catalog, parse_catalog


class TestParseCatalog:
    def test_skips_comments_and_blanks(self):
        text = "# header\n_http._tcp\n\n  _ssh._tcp  \n# trailing\n"
        assert parse_catalog(text) == ["_http._tcp", "_ssh._tcp"]


class TestLoadCatalog:
    def test_builtin_catalog(self):
        catalog = load_catalog()
        assert isinstance(catalog, tuple)
        assert "_http._tcp" in catalog
        assert "_ssh._tcp" in catalog
        assert len(catalog) == len(set(catalog))
        assert all(s.startswith("_") for s in catalog)
        assert all(s.endswith(("._tcp", "._udp")) for s in catalog)
        assert len(catalog) >= 200

    def test_reads_all_files_in_name_order(self, tmp_path):
        (tmp_path / "b.txt").write_text("_ssh._tcp\n_ipp._tcp\n")
        (tmp_path / "a.txt").write_text("_http._tcp\n_ssh._tcp\n")
        (tmp_path / "ignored.md").write_text("_nope._tcp\n")
        assert load_catalog(tmp_path) == ("_http._tcp", "_ssh._tcp", "_ipp._tcp")

    def test_missing_directory(self, tmp_path):
        assert load_catalog(tmp_path / "absent") == ()
