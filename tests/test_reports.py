import json
import unittest
from datetime import datetime

import pytest
import yaml

from aquatools.reports import (
    ReportConfig,
    build_preview,
    export_filename,
    export_report,
    preview_frame,
    report_types,
    sections_for,
)

NOW = datetime(2025, 6, 1, 9, 30)


def _config(**overrides):
    form = {
        "type": "Production Performance",
        "sections": ["Growth Rate Analysis", "Survival Rate"],
        "start": "2025-01-01",
        "end": "2025-05-31",
    }
    form.update(overrides)
    return ReportConfig.from_form(form)


class TestReportConfig(unittest.TestCase):
    def test_default_title(self):
        self.assertEqual(_config().title, "Production Performance Report")

    def test_sections_must_belong_to_type(self):
        with self.assertRaisesRegex(ValueError, "Revenue Analysis"):
            _config(sections=["Revenue Analysis"])

    def test_needs_sections(self):
        with self.assertRaises(ValueError):
            _config(sections=[])

    def test_dates_in_order(self):
        with self.assertRaisesRegex(ValueError, "start date"):
            _config(start="2025-06-01", end="2025-01-01")

    def test_unknown_format(self):
        with self.assertRaises(ValueError):
            _config(format="PDF")

    def test_unknown_type(self):
        with self.assertRaises(ValueError):
            _config(type="Weekly Gossip")


def test_report_types_and_sections():
    assert "Financial Statement" in report_types()
    assert sections_for("Financial Statement")[0] == "Revenue Analysis"


def test_preview_sample_data():
    preview = build_preview(_config(), now=NOW)
    growth, survival = preview.sections
    assert growth.data["dailyGrowth"] == 2.5
    assert survival.data == {"status": "Data available", "lastUpdated": "2025-06-01T09:30:00"}


def test_preview_frame_flattens_lists():
    frame = preview_frame(build_preview(_config(), now=NOW))
    assert list(frame.columns) == ["section", "metric", "value"]
    trend = frame[frame["metric"] == "trendData"]["value"].iloc[0]
    assert trend == "2.3, 2.4, 2.5, 2.6, 2.5"


def test_exports():
    preview = build_preview(_config(), now=NOW)
    csv_text = export_report(preview, "CSV")
    assert csv_text.splitlines()[0] == "section,metric,value"
    data = json.loads(export_report(preview, "JSON"))
    assert data["start"] == "2025-01-01"
    assert [s["name"] for s in data["sections"]] == ["Growth Rate Analysis", "Survival Rate"]
    assert yaml.safe_load(export_report(preview, "YAML"))["title"] == "Production Performance Report"
    with pytest.raises(ValueError):
        export_report(preview, "XLSX")


def test_export_filename():
    preview = build_preview(_config(), now=NOW)
    assert export_filename(preview, "JSON") == "production_performance_report.json"
