from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

import run_calculator
from run_calculator import load_inputs, main, to_jsonable


@pytest.fixture
def workdirs(tmp_path: Path, monkeypatch):
    out = tmp_path / "output"
    monkeypatch.setattr(run_calculator, "OUTPUT_DIR", out)
    monkeypatch.setattr(run_calculator, "LOGS_DIR", tmp_path / "logs")
    return out


def test_list_prints_every_calculator(workdirs, capsys):
    assert main(["--list"]) == 0
    printed = capsys.readouterr().out
    assert "pond-liming" in printed
    assert "harvest-timing" in printed
    assert "growth-tracker" not in printed


def test_preset_writes_json(workdirs):
    assert main(["--preset", "pond_liming", "--output-name", "demo"]) == 0
    data = json.loads((workdirs / "pond-liming_demo.json").read_text(encoding="utf-8"))
    assert data["lime_required"] == pytest.approx(2925.0)
    assert data["pond_volume"] == pytest.approx(3000.0)


def test_today_and_seed_make_runs_repeatable(workdirs):
    args = ["--preset", "harvest_plan", "--today", "2024-06-01", "--seed", "11"]
    assert main(args + ["--output-name", "a"]) == 0
    assert main(args + ["--output-name", "b"]) == 0
    a = json.loads((workdirs / "harvest-timing_a.json").read_text(encoding="utf-8"))
    b = json.loads((workdirs / "harvest-timing_b.json").read_text(encoding="utf-8"))
    assert a == b
    assert a["timing"]["optimal_date"] == "2024-07-31"
    assert a["timing"]["days_to_harvest"] == 60


def test_tool_flag_with_plain_input_file(workdirs, tmp_path: Path):
    path = tmp_path / "carp_pond.json"
    path.write_text(json.dumps({"species": "carp", "ph": 7.5, "temperature": 24}), encoding="utf-8")
    assert main(["--tool", "water-quality", "--input", str(path)]) == 0
    data = json.loads((workdirs / "water-quality_carp_pond.json").read_text(encoding="utf-8"))
    assert [s["status"] for s in data["statuses"]] == ["success", "success"]


def test_validation_failure_exits_with_1(workdirs, tmp_path: Path):
    path = tmp_path / "bad.yaml"
    path.write_text(yaml.safe_dump({"tool": "pond-liming", "inputs": {"pondArea": 100}}), encoding="utf-8")
    assert main(["--input", str(path)]) == 1
    assert not workdirs.exists()


@pytest.mark.parametrize(
    "argv",
    [
        ["--preset", "no_such_preset"],
        ["--tool", "pond-limming", "--preset", "pond_liming"],
        ["--preset", "pond_liming", "--today", "soon"],
        [],
    ],
)
def test_bad_arguments_exit_with_1(workdirs, argv):
    assert main(argv) == 1


def test_missing_tool_key(workdirs, tmp_path: Path):
    path = tmp_path / "no_tool.yaml"
    path.write_text("pondArea: 10\n", encoding="utf-8")
    assert main(["--input", str(path)]) == 1


def test_load_inputs_shapes(tmp_path: Path):
    wrapped = tmp_path / "wrapped.yaml"
    wrapped.write_text("tool: fcr-calculator\ninputs:\n  species: carp\n", encoding="utf-8")
    assert load_inputs(wrapped) == ("fcr-calculator", {"species": "carp"})
    flat = tmp_path / "flat.yaml"
    flat.write_text("tool: fcr-calculator\nspecies: carp\n", encoding="utf-8")
    assert load_inputs(flat) == ("fcr-calculator", {"species": "carp"})
    listing = tmp_path / "list.yaml"
    listing.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError, match="mapping"):
        load_inputs(listing)


def test_to_jsonable_handles_dates_and_tuples():
    from datetime import date

    assert to_jsonable({"d": date(2025, 1, 2), "t": (1, 2)}) == {"d": "2025-01-02", "t": [1, 2]}


def test_unplannable_harvest_exits_with_1(workdirs, tmp_path: Path):
    _, form = load_inputs(run_calculator.PRESETS_DIR / "harvest_plan.yaml")
    form.update(currentWeight=100, targetWeight=5000, growthRate=0.001)
    path = tmp_path / "slow.yaml"
    path.write_text(yaml.safe_dump({"tool": "harvest-timing", "inputs": form}), encoding="utf-8")
    assert main(["--input", str(path), "--today", "2025-06-01"]) == 1
    assert not workdirs.exists()
