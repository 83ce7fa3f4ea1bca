import unittest
from pathlib import Path

import pytest

from aquatools.reference_data import (
    REQUIRED_TABLES,
    load_reference_data,
    lookup,
    options,
    table,
    table_frame,
    validate_reference_data,
)


class TestReferenceDataLoading(unittest.TestCase):
    def test_all_required_tables_present(self):
        data = load_reference_data()
        for name in REQUIRED_TABLES:
            self.assertIn(name, data)
            self.assertTrue(data[name], f"{name} is empty")

    def test_load_is_cached(self):
        self.assertIs(load_reference_data(), load_reference_data())

    def test_missing_file_raises(self):
        with self.assertRaises(ValueError):
            load_reference_data(Path("does/not/exist.yaml"))

    def test_malformed_yaml_raises(self):
        tmp = Path("reference_bad.yaml")
        try:
            tmp.write_text("a: [1, 2\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_reference_data(tmp)
        finally:
            if tmp.exists():
                tmp.unlink()


def test_validate_rejects_inverted_range():
    data = dict(load_reference_data())
    data["water_quality_ranges"] = {"tilapia": {"ph": {"min": 9, "max": 6}}}
    with pytest.raises(ValueError, match="Inverted range"):
        validate_reference_data(data)


def test_validate_rejects_missing_table():
    data = dict(load_reference_data())
    data.pop("lime_types")
    with pytest.raises(ValueError, match="lime_types"):
        validate_reference_data(data)


def test_lookup_hints_on_typo():
    assert lookup("lime_types", "hydrated", "lime type")["neutralizing_value"] == 136
    with pytest.raises(ValueError, match="Did you mean: hydrated"):
        lookup("lime_types", "hydratd", "lime type")


def test_unknown_table_hints():
    with pytest.raises(ValueError, match="lime_types"):
        table("lime_type")


def test_options_keep_file_order():
    assert options("evaporation_season_factors") == ["Summer", "Spring", "Fall", "Winter"]


def test_table_frame_flat_and_nested():
    df = table_frame("fcr_targets")
    assert list(df.columns) == ["key", "value"]
    assert set(df["key"]) >= {"tilapia", "carp"}
    lime = table_frame("lime_types")
    assert "cost_per_ton" in lime.columns
