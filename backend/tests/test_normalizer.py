"""
Portfolio Backend — Normalizer Unit Tests
===========================================

What we test:
    ✅ tech from comma-separated strings and from lists
    ✅ trimming, empty-entry removal, order and duplicates kept
    ✅ loose boolean coercion
    ✅ integer coercion of ints, floats and digit strings
"""

import pytest

from app.services.normalizer import normalize_tech, to_boolean, to_int


class TestNormalizeTech:

    def test_comma_separated_string(self):
        assert normalize_tech("React, Node , ,MongoDB") == ["React", "Node", "MongoDB"]

    def test_list_entries_are_trimmed(self):
        assert normalize_tech([" React ", "", "  ", "Node"]) == ["React", "Node"]

    def test_non_string_list_entries_are_stringified(self):
        assert normalize_tech(["Python", 3]) == ["Python", "3"]

    def test_order_and_duplicates_preserved(self):
        assert normalize_tech("b, a, b") == ["b", "a", "b"]

    def test_blank_string_gives_empty_list(self):
        assert normalize_tech("  ") == []

    @pytest.mark.parametrize("value", [None, 42, {"a": 1}, True])
    def test_other_types_give_empty_list(self, value):
        assert normalize_tech(value) == []

    def test_idempotent_on_own_output(self):
        once = normalize_tech(" x ,y,, z")
        assert normalize_tech(once) == once


class TestToBoolean:

    @pytest.mark.parametrize("value", ["", "0", "false", "FALSE", " False ", False, 0, None])
    def test_falsy_values(self, value):
        assert to_boolean(value) is False

    @pytest.mark.parametrize("value", ["true", "1", "yes", "on", True, 1])
    def test_truthy_values(self, value):
        assert to_boolean(value) is True


class TestToInt:

    @pytest.mark.parametrize("value, expected", [
        (3, 3),
        ("12", 12),
        (" -4 ", -4),
        ("+7", 7),
        (2.0, 2),
    ])
    def test_coercible(self, value, expected):
        assert to_int(value) == expected

    @pytest.mark.parametrize("value", ["abc", "1.5", 1.5, "", None, True, [1]])
    def test_not_coercible(self, value):
        assert to_int(value) is None
