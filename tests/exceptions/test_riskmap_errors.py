"""Tests for the riskmap exception hierarchy."""

import pytest

from riskmap.exceptions import (
    CatalogError,
    ConfigurationError,
    HierarchyError,
    InvalidConfigError,
    MalformedNodeError,
    NegativeValueError,
    RiskMapError,
)
from riskmap.hierarchy import from_mapping
from riskmap.taxonomy import load_catalog


class TestRiskMapError:
    def test_message_only(self):
        assert str(RiskMapError("boom")) == "boom"

    def test_details_rendered(self):
        err = RiskMapError("boom", details={"path": "a/b"})
        assert str(err) == "boom (path=a/b)"
        assert err.details == {"path": "a/b"}

    @pytest.mark.parametrize(
        "error",
        [
            ConfigurationError("x"),
            InvalidConfigError("width", 0, "too small"),
            NegativeValueError(("a",), -1),
            MalformedNodeError((), "bad"),
            CatalogError("bad"),
        ],
    )
    def test_all_derive_from_base(self, error):
        assert isinstance(error, RiskMapError)


class TestConfigErrors:
    def test_invalid_config_fields(self):
        err = InvalidConfigError("max_depth", 0, "must be at least 1")
        assert isinstance(err, ConfigurationError)
        assert err.key == "max_depth"
        assert err.details["reason"] == "must be at least 1"


class TestHierarchyErrors:
    """Producer input errors raised by from_mapping."""

    def test_negative_value(self):
        with pytest.raises(NegativeValueError) as exc_info:
            from_mapping({"name": "r", "children": [{"name": "a", "value": -2}]})
        assert exc_info.value.path == ("a",)
        assert isinstance(exc_info.value, HierarchyError)

    def test_negative_root_location(self):
        err = NegativeValueError((), -1)
        assert err.details["path"] == "<root>"

    @pytest.mark.parametrize(
        "data",
        [
            {"value": 1},
            {"name": "r", "value": "many"},
            {"name": "r", "value": float("nan")},
            {"name": "r", "children": {"name": "a"}},
            {"name": "r", "children": ["a"]},
        ],
    )
    def test_malformed(self, data):
        with pytest.raises(MalformedNodeError):
            from_mapping(data)


class TestCatalogErrors:
    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError) as exc_info:
            load_catalog(tmp_path / "nope.json")
        assert exc_info.value.source.endswith("nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(CatalogError, match="invalid JSON"):
            load_catalog(path)

    def test_missing_section(self, tmp_path):
        path = tmp_path / "partial.json"
        path.write_text('{"contexts": []}', encoding="utf-8")
        with pytest.raises(CatalogError, match="missing key"):
            load_catalog(path)

    def test_duplicate_names(self, tmp_path):
        path = tmp_path / "dup.json"
        path.write_text(
            '{"contexts": ["A", "A"], "equipment": [], "mechanisms": []}', encoding="utf-8"
        )
        with pytest.raises(CatalogError, match="duplicate"):
            load_catalog(path)
