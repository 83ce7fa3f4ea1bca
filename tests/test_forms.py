import unittest

import pytest

from aquatools.forms import (
    choose,
    coerce_numeric,
    is_blank,
    missing_fields,
    parse_number,
    require_any,
    require_fields,
    safe_ratio,
)


class TestCoerceNumeric(unittest.TestCase):
    def test_plain_numbers(self):
        self.assertEqual(coerce_numeric(3, "x"), 3.0)
        self.assertEqual(coerce_numeric(2.5, "x"), 2.5)

    def test_formatted_strings(self):
        self.assertEqual(coerce_numeric("1,200", "x"), 1200.0)
        self.assertEqual(coerce_numeric("$45", "x"), 45.0)
        self.assertEqual(coerce_numeric(" 85% ", "x"), 85.0)

    def test_rejects_text_and_bools(self):
        with self.assertRaises(ValueError) as ctx:
            coerce_numeric("abc", "pondArea")
        self.assertIn("pondArea", str(ctx.exception))
        with self.assertRaises(ValueError):
            coerce_numeric(True, "flag")
        with self.assertRaises(ValueError):
            coerce_numeric([1], "list")

    def test_rejects_non_finite_values(self):
        for raw in ("nan", "NaN", "inf", "-Infinity", "1e999", float("nan"), float("inf"), 10**400):
            with self.assertRaisesRegex(ValueError, "depth"):
                coerce_numeric(raw, "depth")


def test_parse_number_rejects_nan_text():
    with pytest.raises(ValueError, match="finite"):
        parse_number("nan", "temperature")


def test_is_blank():
    assert is_blank(None)
    assert is_blank("  ")
    assert is_blank([])
    assert not is_blank(0)
    assert not is_blank("0")


def test_parse_number_defaults_for_blank():
    assert parse_number("", "x") == 0.0
    assert parse_number(None, "x", default=None) is None
    assert parse_number("4.5", "x") == 4.5


def test_require_fields_lists_every_missing_field():
    form = {"a": 1, "b": "", "c": None}
    assert missing_fields(form, ["a", "b", "c"]) == ["b", "c"]
    with pytest.raises(ValueError, match="Liming: missing required field\\(s\\): b, c"):
        require_fields(form, ["a", "b", "c"], context="Liming")
    require_fields(form, ["a"])


def test_require_any():
    require_any({"ph": 7}, ["ph", "temperature"])
    with pytest.raises(ValueError, match="enter at least one of"):
        require_any({"ph": ""}, ["ph", "temperature"], context="Monitor")


def test_choose_suggests_close_matches():
    assert choose("Summer", ["Spring", "Summer"], "season") == "Summer"
    with pytest.raises(ValueError, match="Did you mean: Summer"):
        choose("Sumer", ["Spring", "Summer"], "season")


def test_safe_ratio():
    assert safe_ratio(6, 3) == 2
    assert safe_ratio(1, 0) == 0.0
    assert safe_ratio(1, 0, default=None) is None
