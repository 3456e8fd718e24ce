"""Tests for value coercion and blank handling."""

from __future__ import annotations

from decimal import Decimal

import pytest

from hasscope.core.scope.values import dig, is_blank, normalize_blanks, parse_value
from hasscope.models.scope import ScopeType
from hasscope.params import Params


class TestParseValue:
    """Tests for the type table."""

    @pytest.mark.parametrize(
        ("scope_type", "value", "expected"),
        [
            (ScopeType.DEFAULT, "abc", "abc"),
            (ScopeType.DEFAULT, 3.5, 3.5),
            (ScopeType.DEFAULT, Decimal("9.99"), Decimal("9.99")),
            (ScopeType.DEFAULT, True, None),
            (ScopeType.DEFAULT, None, None),
            (ScopeType.ARRAY, ["a"], ["a"]),
            (ScopeType.ARRAY, ("a",), ("a",)),
            (ScopeType.ARRAY, "a", None),
            (ScopeType.HASH, {"a": 1}, {"a": 1}),
            (ScopeType.HASH, [("a", 1)], None),
            (ScopeType.BOOLEAN, "true", True),
            (ScopeType.BOOLEAN, "TRUE", False),
            (ScopeType.BOOLEAN, None, False),
        ],
    )
    def test_shapes(self, scope_type, value, expected):
        """Test shape checks and coercion per type."""
        assert parse_value(scope_type, value) == expected


class TestIsBlank:
    """Tests for blank detection."""

    @pytest.mark.parametrize("value", [None, False, "", " \t", [], {}, (), Params()])
    def test_blank(self, value):
        """Test values treated as blank."""
        assert is_blank(value) is True

    @pytest.mark.parametrize(
        "value", [0, 0.0, Decimal("0"), True, "0", "a", [None], {"a": None}, object()]
    )
    def test_present(self, value):
        """Test values that are never blank."""
        assert is_blank(value) is False


class TestNormalizeBlanks:
    """Tests for blank stripping."""

    def test_scalars_pass_through(self):
        """Test scalars pass through."""
        assert normalize_blanks("") == ""
        assert normalize_blanks(None) is None

    def test_sequences_keep_present_elements(self):
        """Test sequences keep present elements."""
        assert normalize_blanks(["a", "", [], "b"]) == ["a", "b"]

    def test_nested_blank_mappings_are_dropped(self):
        """Test nested blank mappings are dropped."""
        value = {"a": {"b": {"c": ""}}, "d": "1"}

        assert normalize_blanks(value) == {"d": "1"}

    def test_params_become_dicts(self):
        """Test params become dicts."""
        normalized = normalize_blanks(Params({"a": {"b": "1"}, "c": ""}))

        assert normalized == {"a": {"b": "1"}}
        assert type(normalized["a"]) is dict


class TestDig:
    """Tests for nested lookups."""

    def test_walks_nested_mappings(self):
        """Test walks nested mappings."""
        assert dig({"a": {"b": {"c": 1}}}, ["a", "b", "c"]) == 1

    def test_empty_path_returns_container(self):
        """Test empty path returns container."""
        data = {"a": 1}

        assert dig(data, ()) is data

    def test_missing_or_scalar_level_returns_none(self):
        """Test missing or scalar level returns none."""
        assert dig({"a": {}}, ["a", "b"]) is None
        assert dig({"a": "x"}, ["a", "b"]) is None
