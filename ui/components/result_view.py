from __future__ import annotations

"""Generic rendering of calculator results, plus per-tool charts.

Result objects are dataclasses. Scalars become metrics, string lists become
bullet lists, lists of records become tables, and nested dataclasses or
mappings are rendered under their own subheading.
"""

import dataclasses
from typing import Any, Callable, Dict, List, Optional

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from aquatools.growth import projections_frame
from aquatools.reference_data import table
from ui.utils.helpers import fmt_value, humanize, rows_frame
from viz.interactive import bar_figure, cash_flow_figure, forecast_figure, line_figure, pie_figure

_SCALARS = (int, float, str, bool, type(None))
_METRICS_PER_ROW = 4


def _is_record(value: Any) -> bool:
    return (dataclasses.is_dataclass(value) and not isinstance(value, type)) or isinstance(value, dict)


def _as_dict(value: Any) -> Dict[str, Any]:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    return dict(value)


def _metrics(items: List[tuple]) -> None:
    for start in range(0, len(items), _METRICS_PER_ROW):
        cols = st.columns(_METRICS_PER_ROW)
        for col, (name, value) in zip(cols, items[start:start + _METRICS_PER_ROW]):
            col.metric(humanize(name), fmt_value(value))


def render_record(record: Any, depth: int = 0) -> None:
    data = _as_dict(record)
    scalars = [(k, v) for k, v in data.items() if isinstance(v, _SCALARS) or hasattr(v, "isoformat")]
    if scalars:
        _metrics(scalars)
    for key, value in data.items():
        if isinstance(value, _SCALARS) or hasattr(value, "isoformat"):
            continue
        heading = humanize(key)
        if isinstance(value, (list, tuple)):
            if not value:
                continue
            st.markdown(f"**{heading}**")
            if all(isinstance(v, str) for v in value):
                st.markdown("\n".join(f"- {v}" for v in value))
            elif all(_is_record(v) for v in value):
                st.dataframe(rows_frame(value), hide_index=True, use_container_width=True)
            else:
                st.write(", ".join(fmt_value(v) for v in value))
        elif _is_record(value):
            st.markdown(f"**{heading}**")
            inner = _as_dict(value)
            if all(isinstance(v, _SCALARS) for v in inner.values()):
                frame = pd.DataFrame({"Item": [humanize(k) for k in inner], "Value": [fmt_value(v) for v in inner.values()]})
                st.dataframe(frame, hide_index=True, use_container_width=True)
            elif depth < 2:
                render_record(value, depth + 1)


# ---------------------------------------------------------------------------
# Charts
# ---------------------------------------------------------------------------


def _forecast_charts(result: Any) -> List[go.Figure]:
    bands = table("predictor_species").get(result.species, {})
    return [
        forecast_figure(result.hourly, param, bands.get(param))
        for param in ("temperature", "dissolvedOxygen", "pH", "ammonia")
    ]


def _growth_chart(result: Any) -> List[go.Figure]:
    df = projections_frame(result)
    return [line_figure(df.to_dict("records"), "month", ["weight"], "Projected average weight", "g")]


def _history_chart(result: Any) -> List[go.Figure]:
    cols = [k for k in (result.history[0] if result.history else {}) if k != "time"]
    return [line_figure(result.history, "time", cols, "Recent parameter history")]


def _price_chart(result: Any) -> List[go.Figure]:
    return [line_figure(result.price_history, "month", ["price", "demand", "supply"], "Market trend")]


def _harvest_chart(result: Any) -> List[go.Figure]:
    return [line_figure(result.growth_projection, "week", ["weight", "profit"], "Weekly projection to harvest")]


def _stress_chart(result: Any) -> List[go.Figure]:
    labels = list(result.risk_factors)
    return [bar_figure([humanize(k) for k in labels], [result.risk_factors[k] for k in labels], "Stress factors", "score")]


def _risk_chart(result: Any) -> List[go.Figure]:
    return [bar_figure([d.disease for d in result.disease_risks], [d.probability for d in result.disease_risks],
                       "Disease probability", "%")]


def _energy_chart(result: Any) -> List[go.Figure]:
    return [bar_figure([s.measure for s in result.savings_potential], [s.savings for s in result.savings_potential],
                       "Annual savings potential", "Amount")]


def _profitability_charts(result: Any) -> List[go.Figure]:
    return [
        cash_flow_figure(result.cash_flow),
        pie_figure(result.operating_costs.breakdown, "Operating costs"),
    ]


CHARTS: Dict[str, Callable[[Any], List[go.Figure]]] = {
    "water-quality-predictor": _forecast_charts,
    "growth-predictor": _growth_chart,
    "environment-monitor": _history_chart,
    "market-analysis": _price_chart,
    "profitability": _profitability_charts,
    "harvest-timing": _harvest_chart,
    "fish-stress": _stress_chart,
    "disease-risk": _risk_chart,
    "energy-efficiency": _energy_chart,
}


def render_result(slug: str, result: Any, title: Optional[str] = "Results") -> None:
    if title:
        st.subheader(title)
    if isinstance(result, list):
        if not result:
            st.info("No matches for these conditions.")
            return
        st.dataframe(rows_frame(result), hide_index=True, use_container_width=True)
        for item in result:
            label = getattr(item, "name", None) or str(item)
            with st.expander(label):
                render_record(item)
    else:
        render_record(result)
    charts = CHARTS.get(slug)
    if charts is not None:
        figures = charts(result)
        cols = st.columns(2) if len(figures) > 1 else [st.container()]
        for i, fig in enumerate(figures):
            with cols[i % len(cols)]:
                st.plotly_chart(fig, use_container_width=True)
