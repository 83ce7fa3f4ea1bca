from __future__ import annotations

import json
import random
import unittest
from datetime import date
from pathlib import Path

import pytest

from aquatools.io_paths import PRESETS_DIR
from aquatools.reports import ReportConfig, build_preview
from run_calculator import load_inputs
from ui.services import LogService, ToolService, ValidationService
from ui.services.log_service import SESSION_MARKER

LINES = [
    "2025-06-01 08:00:00,000 | INFO | ui | UI: session started",
    "2025-06-01 08:00:01,000 | INFO | aquatools.pond | Liming: 2925.0 kg",
    "2025-06-01 09:00:00,000 | INFO | ui | UI: session started",
    "2025-06-01 09:00:01,000 | WARNING | ui | Unknown tool in query string: 'x'",
    "2025-06-01 09:00:02,000 | INFO | aquatools.growth | Predicted 120 days",
    "2025-06-01 09:00:03,000 | ERROR | ui | Fish calculator: missing fields: pondArea",
]


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    path = tmp_path / "run.log"
    path.write_text("\n".join(LINES) + "\n", encoding="utf-8")
    return path


def test_session_view_starts_at_last_marker(log_file):
    lines = LogService(log_file).read_log_from_last_session()
    assert lines[0] == LINES[2]
    assert len(lines) == 4


def test_session_view_without_marker_returns_everything(tmp_path: Path):
    path = tmp_path / "run.log"
    path.write_text("a | INFO | x | one\nb | INFO | x | two\n", encoding="utf-8")
    assert len(LogService(path).read_log_from_last_session()) == 2


def test_level_and_substring_filters(log_file):
    svc = LogService(log_file)
    assert svc.read_log_full(level="warning") == [LINES[3]]
    assert svc.read_log_full(level="INFO", contains="Liming") == [LINES[1]]
    assert svc.read_log_from_last_session(level="ERROR") == [LINES[5]]


def test_tail_limits_lines(log_file):
    svc = LogService(log_file)
    assert svc.tail_log(max_lines=2) == LINES[-2:]
    assert svc.tail_log(max_lines=0) == LINES


def test_missing_log_file(tmp_path: Path):
    svc = LogService(tmp_path / "nope.log")
    assert svc.log_stats() == {"exists": False}
    assert svc.tail_log() == []


def test_stats(log_file):
    stats = LogService(log_file).log_stats()
    assert stats["exists"] is True
    assert stats["size_bytes"] > 0
    assert stats["path"].endswith("run.log")


def test_marker_text_matches_filter():
    assert SESSION_MARKER in LINES[0]


class TestValidationService(unittest.TestCase):
    def setUp(self):
        self.svc = ValidationService()

    def test_ready(self):
        ok, msg = self.svc.ready({"a": 1, "b": ""}, ["a", "b"])
        self.assertFalse(ok)
        self.assertEqual(msg, "Fill in: b")
        self.assertEqual(self.svc.ready({"a": 1}, ["a"]), (True, ""))

    def test_ready_any_of(self):
        self.assertFalse(self.svc.ready({"ph": None}, [], any_of=["ph", "temperature"])[0])
        self.assertTrue(self.svc.ready({"ph": 7}, [], any_of=["ph", "temperature"])[0])


class TestToolService(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.svc = ToolService()

    def test_resolve(self):
        self.assertEqual(self.svc.resolve("pond-liming").name, "Pond Liming")
        self.assertIsNone(self.svc.resolve("pond-limming"))
        self.assertIsNone(self.svc.resolve(""))
        self.assertIsNone(self.svc.resolve(None))

    def test_run_goes_through_registry(self):
        _, form = load_inputs(PRESETS_DIR / "harvest_plan.yaml")
        result = self.svc.run(
            "harvest-timing",
            form,
            rng=random.Random(3),
            today=date(2025, 6, 1),
        )
        self.assertEqual(result.timing.days_to_harvest, 60)

    def test_run_propagates_validation_errors(self):
        with self.assertRaises(ValueError):
            self.svc.run("pond-liming", {"pondArea": 10})

    def test_export(self):
        preview = build_preview(
            ReportConfig.from_form({"type": "Production Performance", "sections": ["Survival Rate"]})
        )
        content, name, mime = self.svc.export(preview, "JSON")
        self.assertEqual(json.loads(content)["title"], "Production Performance Report")
        self.assertEqual(name, "production_performance_report.json")
        self.assertEqual(mime, "application/json")
