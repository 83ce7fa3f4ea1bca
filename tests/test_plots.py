from __future__ import annotations

import random
from datetime import date
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import pytest

from aquatools.registry import run
from viz.interactive import cash_flow_figure, forecast_figure, growth_figure
from viz.plots import PLOTTERS, generate_plots

FORMS = {
    "water-quality-predictor": {
        "species": "tilapia",
        "temperature": 29,
        "pH": 7.6,
        "dissolvedOxygen": 5.2,
        "ammonia": 0.3,
    },
    "growth-predictor": {
        "species": "Tilapia",
        "initialWeight": 10,
        "feedingRate": 3,
        "waterTemperature": 28,
        "growthPeriod": 120,
    },
    "fish-stress": {"species": "tilapia", "waterTemperature": 30, "dissolvedOxygen": 4},
    "disease-risk": {"species": "carp", "temperature": 26, "dissolvedOxygen": 5, "pH": 7},
}


@pytest.mark.parametrize("slug", sorted(FORMS))
def test_generate_plots_writes_pngs(slug, tmp_path: Path):
    result = run(slug, FORMS[slug], rng=random.Random(0), today=date(2025, 6, 1))
    paths = generate_plots(slug, result, name="smoke", plots_dir=tmp_path)
    assert paths, "No plots were generated"
    for p in paths:
        assert p.exists(), f"Plot not created: {p}"
        assert p.stat().st_size > 0, f"Plot file is empty: {p}"
        assert p.name.startswith(f"{slug}_smoke")


def test_tools_without_charts(tmp_path: Path):
    assert generate_plots("pond-liming", object(), plots_dir=tmp_path) == []
    assert "pond-liming" not in PLOTTERS


def test_interactive_figures_have_traces():
    result = run("water-quality-predictor", FORMS["water-quality-predictor"], rng=random.Random(0))
    fig = forecast_figure(result.hourly, "temperature", {"min": 25, "max": 32})
    assert len(fig.data) == 1
    flow = [{"month": "Jan", "income": 10.0, "expenses": 4.0, "balance": 6.0}]
    assert len(cash_flow_figure(flow).data) == 3
    assert len(growth_figure([{"date": "2025-01-01", "weight": 10}, {"date": "2025-01-08", "weight": 15}]).data) == 1
