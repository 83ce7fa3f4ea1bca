from __future__ import annotations

"""
Static PNG charts for calculator results.

Read-only plotting functions that take a result object returned by an
`aquatools` calculator and write PNGs under `output/plots/` (or a directory
passed by the caller). Nothing here changes a result.

Usage:
    from viz.plots import generate_plots
    generate_plots("water-quality-predictor", result, name="pond_a")
"""

from pathlib import Path
from typing import Any, Callable, Dict, List

import matplotlib.pyplot as plt
import pandas as pd

from aquatools.growth import projections_frame
from aquatools.io_paths import PLOTS_DIR


def _ensure_plots_dir(plots_dir: Path | None = None) -> Path:
    """Ensure the plots directory exists and return it."""
    out = Path(plots_dir) if plots_dir is not None else PLOTS_DIR
    out.mkdir(parents=True, exist_ok=True)
    return out


def _save_fig(fig: plt.Figure, filename: str, plots_dir: Path | None = None) -> Path:
    out_path = _ensure_plots_dir(plots_dir) / filename
    fig.savefig(out_path, bbox_inches="tight", dpi=150)
    plt.close(fig)
    return out_path


def _line_chart(df: pd.DataFrame, x: str, columns: List[str], title: str, ylabel: str) -> plt.Figure:
    fig, ax = plt.subplots(figsize=(10, 5))
    for col in columns:
        if col in df.columns:
            ax.plot(df[x], df[col], label=col)
    ax.set_title(title)
    ax.set_xlabel(x)
    ax.set_ylabel(ylabel)
    ax.grid(True, alpha=0.3)
    ax.legend(loc="best", fontsize=8)
    if len(df) > 12:
        step = max(1, len(df) // 12)
        ax.set_xticks(list(df[x])[::step])
    ax.tick_params(axis="x", rotation=45)
    return fig


def _bar_chart(labels: List[str], values: List[float], title: str, ylabel: str) -> plt.Figure:
    fig, ax = plt.subplots(figsize=(8, 4.5))
    ax.bar(labels, values, color="#1976d2")
    ax.set_title(title)
    ax.set_ylabel(ylabel)
    ax.grid(True, axis="y", alpha=0.3)
    ax.tick_params(axis="x", rotation=30)
    return fig


def plot_water_quality_forecast(result: Any, name: str, plots_dir: Path | None = None) -> List[Path]:
    """One panel per parameter across the 48 hour projection."""
    df = pd.DataFrame(result.hourly)
    params = [("temperature", "°C"), ("dissolvedOxygen", "mg/L"), ("pH", ""), ("ammonia", "mg/L")]
    fig, axes = plt.subplots(2, 2, figsize=(12, 7), sharex=True)
    for ax, (col, unit) in zip(axes.flat, params):
        ax.plot(range(len(df)), df[col])
        ax.set_title(f"{col} {unit}".strip())
        ax.grid(True, alpha=0.3)
    for ax in axes[1]:
        ax.set_xlabel("hour")
    fig.suptitle(f"48 h water quality projection ({result.species})")
    return [_save_fig(fig, f"{name}_forecast.png", plots_dir)]


def plot_growth_projection(result: Any, name: str, plots_dir: Path | None = None) -> List[Path]:
    df = projections_frame(result)
    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(df["month"], df["weight"], marker="o", label="Average weight (g)")
    ax.set_xlabel("Month")
    ax.set_ylabel("Weight (g)")
    ax2 = ax.twinx()
    ax2.bar(df["month"], df["feed_required"], alpha=0.3, color="#ef6c00", label="Feed (kg)")
    ax2.set_ylabel("Feed required (kg)")
    ax.set_title("Monthly growth projection")
    ax.grid(True, alpha=0.3)
    return [_save_fig(fig, f"{name}_growth.png", plots_dir)]


def plot_environment_history(result: Any, name: str, plots_dir: Path | None = None) -> List[Path]:
    df = pd.DataFrame(result.history)
    cols = [c for c in df.columns if c != "time"]
    fig = _line_chart(df, "time", cols, "Recent parameter history", "value")
    return [_save_fig(fig, f"{name}_history.png", plots_dir)]


def plot_price_history(result: Any, name: str, plots_dir: Path | None = None) -> List[Path]:
    df = pd.DataFrame(result.price_history)
    fig = _line_chart(df, "month", ["price", "demand", "supply"], "Market price, demand and supply", "value")
    return [_save_fig(fig, f"{name}_market.png", plots_dir)]


def plot_cash_flow(result: Any, name: str, plots_dir: Path | None = None) -> List[Path]:
    df = pd.DataFrame(result.cash_flow)
    fig, ax = plt.subplots(figsize=(10, 5))
    x = range(len(df))
    ax.bar([i - 0.2 for i in x], df["income"], width=0.4, label="Income")
    ax.bar([i + 0.2 for i in x], df["expenses"], width=0.4, label="Expenses")
    ax.plot(list(x), df["balance"].cumsum(), color="black", marker=".", label="Cumulative balance")
    ax.set_xticks(list(x))
    ax.set_xticklabels(df["month"])
    ax.set_title("Monthly cash flow")
    ax.set_ylabel("Amount")
    ax.grid(True, alpha=0.3)
    ax.legend(loc="best", fontsize=8)
    return [_save_fig(fig, f"{name}_cash_flow.png", plots_dir)]


def plot_harvest_projection(result: Any, name: str, plots_dir: Path | None = None) -> List[Path]:
    df = pd.DataFrame(result.growth_projection)
    if df.empty:
        return []
    fig = _line_chart(df, "week", ["weight", "profit"], "Weekly weight and profit to harvest", "value")
    return [_save_fig(fig, f"{name}_harvest.png", plots_dir)]


def plot_stress_factors(result: Any, name: str, plots_dir: Path | None = None) -> List[Path]:
    labels = list(result.risk_factors.keys())
    fig = _bar_chart(labels, [result.risk_factors[k] for k in labels], "Stress risk factors", "score")
    return [_save_fig(fig, f"{name}_stress.png", plots_dir)]


def plot_disease_risks(result: Any, name: str, plots_dir: Path | None = None) -> List[Path]:
    labels = [d.disease for d in result.disease_risks]
    fig = _bar_chart(labels, [d.probability for d in result.disease_risks], "Disease probability", "%")
    return [_save_fig(fig, f"{name}_disease_risk.png", plots_dir)]


def plot_nutrients(result: Any, name: str, plots_dir: Path | None = None) -> List[Path]:
    n = result.nutrient_content
    labels = ["Nitrogen", "Phosphorus", "Potassium", "Organic Matter"]
    values = [n.nitrogen, n.phosphorus, n.potassium, n.organic_matter]
    fig = _bar_chart(labels, values, "Fertilizer nutrient content", "kg")
    return [_save_fig(fig, f"{name}_nutrients.png", plots_dir)]


def plot_energy_savings(result: Any, name: str, plots_dir: Path | None = None) -> List[Path]:
    labels = [s.measure for s in result.savings_potential]
    fig = _bar_chart(labels, [s.savings for s in result.savings_potential], "Annual savings potential", "Amount")
    return [_save_fig(fig, f"{name}_energy.png", plots_dir)]


PLOTTERS: Dict[str, Callable[..., List[Path]]] = {
    "water-quality-predictor": plot_water_quality_forecast,
    "growth-predictor": plot_growth_projection,
    "environment-monitor": plot_environment_history,
    "market-analysis": plot_price_history,
    "profitability": plot_cash_flow,
    "harvest-timing": plot_harvest_projection,
    "fish-stress": plot_stress_factors,
    "disease-risk": plot_disease_risks,
    "waste-fertilizer": plot_nutrients,
    "energy-efficiency": plot_energy_savings,
}


def generate_plots(slug: str, result: Any, name: str = "result", plots_dir: Path | None = None) -> List[Path]:
    """Write the charts for one tool's result. Tools without charts return []."""
    plotter = PLOTTERS.get(slug)
    if plotter is None:
        return []
    return plotter(result, f"{slug}_{name}", plots_dir)
