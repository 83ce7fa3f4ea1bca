from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional

import streamlit as st

from .base_component import BaseComponent
from .result_view import render_result
from aquatools.business import market_demand_table, market_trend_table
from aquatools.catalog import Tool
from ui.layouts import Field, Layout
from ui.services import ToolService, ValidationService

log = logging.getLogger("ui")


class CalculatorPage(BaseComponent):
    """A form-driven calculator page.

    Draws the widgets of a `Layout`, keeps Calculate disabled until the
    required fields are filled, runs the tool through `ToolService` and
    shows the last result for this tool.
    """

    def __init__(
        self,
        state,
        tool: Tool,
        layout: Layout,
        tool_service: ToolService,
        validation_service: ValidationService,
    ) -> None:
        super().__init__(state)
        self.tool = tool
        self.layout = layout
        self.tool_service = tool_service
        self.validation_service = validation_service

    def _key(self, field: Field) -> str:
        return f"{self.tool.slug}:{field.key}"

    def _widget(self, field: Field) -> Any:
        key = self._key(field)
        label = field.label + (" *" if field.required else "")
        if field.kind == "number":
            return st.number_input(label, value=field.default, step=0.1, format="%g", key=key, help=field.help)
        if field.kind == "select":
            return st.selectbox(
                label,
                field.options(),
                index=None,
                placeholder="Select…",
                format_func=field.display,
                key=key,
                help=field.help,
            )
        if field.kind == "multiselect":
            return st.multiselect(label, field.options(), format_func=field.display, key=key, help=field.help)
        if field.kind == "text":
            return st.text_input(label, value=field.default or "", key=key, help=field.help)
        if field.kind == "date":
            return st.date_input(label, value=field.default, key=key, help=field.help)
        if field.kind == "checkbox":
            return st.checkbox(label, value=bool(field.default), key=key, help=field.help)
        if field.kind == "range":
            lo, hi = field.bounds
            return list(st.slider(label, lo, hi, value=tuple(field.default), step=0.1, key=key, help=field.help))
        raise ValueError(f"Unknown widget kind {field.kind!r} for {field.key}")

    def collect(self) -> Dict[str, Any]:
        form: Dict[str, Any] = {}
        cols = st.columns(self.layout.columns)
        for i, field in enumerate(self.layout.fields):
            with cols[i % self.layout.columns]:
                form[field.key] = self._widget(field)
        return form

    def submit(self, form: Dict[str, Any]) -> Optional[Any]:
        try:
            result = self.tool_service.run(self.tool.slug, form)
        except ValueError as exc:
            log.warning("UI: %s rejected input: %s", self.tool.slug, exc)
            st.error(str(exc))
            return None
        self.state.remember(self.tool.slug, result)
        self.after_run(form, result)
        return result

    def after_run(self, form: Dict[str, Any], result: Any) -> None:
        if self.tool.slug == "water-quality":
            readings = {k: v for k, v in form.items() if k != "species" and v is not None}
            self.state.water_history.record(form["species"], readings, when=datetime.now())

    def render(self) -> None:
        self.render_header(self.tool)

        form = self.collect()
        ready, hint = self.validation_service.ready(form, self.layout.required, self.layout.any_of)

        col_run, col_reset = st.columns([1, 1])
        with col_run:
            clicked = st.button("Calculate", type="primary", disabled=not ready, key=f"{self.tool.slug}:run")
        with col_reset:
            if st.button("Clear result", key=f"{self.tool.slug}:clear"):
                self.state.forget(self.tool.slug)
        if not ready:
            st.caption(hint)
        if clicked:
            self.submit(form)

        result = self.state.last_result(self.tool.slug)
        if result is not None:
            render_result(self.tool.slug, result)
            self.render_extras(result)

    def render_extras(self, result: Any) -> None:
        """Tool-specific follow-ups below the result."""
        if self.tool.slug == "water-quality":
            history = self.state.water_history.frame()
            if not history.empty:
                st.subheader("Reading history")
                st.dataframe(history, hide_index=True, use_container_width=True)
                if st.button("Clear history", key="water-quality:clear-history"):
                    self.state.water_history.clear()
        elif self.tool.slug == "feeding-calculator":
            self._feeding_log(result)
        elif self.tool.slug == "harvest-timing":
            self._market_context()

    @staticmethod
    def _market_context() -> None:
        with st.expander("Market seasons and demand levels"):
            for name, entry in market_trend_table().items():
                st.markdown(f"**{name}** (price x{entry['price_multiplier']}, {entry['demand_level']} demand)")
                st.caption("Opportunities: " + "; ".join(entry["opportunities"]))
                st.caption("Risks: " + "; ".join(entry["risks"]))
            st.divider()
            for level, entry in market_demand_table().items():
                st.markdown(f"**{level} demand** (price x{entry['price_impact']})")
                st.caption("; ".join(entry["strategies"]))

    def _feeding_log(self, result: Any) -> None:
        st.subheader("Feeding log")
        notes = st.text_input("Notes", key="feeding-calculator:notes")
        if st.button("Log a feeding of one portion", key="feeding-calculator:log"):
            self.state.feeding_history.add(result.amount_per_feeding, notes=notes)
        for entry in list(self.state.feeding_history.entries):
            c1, c2, c3 = st.columns([3, 4, 1])
            c1.write(f"{entry.timestamp:%Y-%m-%d %H:%M} · {entry.amount:.2f} kg")
            edited = c2.text_input("Notes", value=entry.notes, key=f"feeding-notes:{entry.id}", label_visibility="collapsed")
            if edited != entry.notes:
                self.state.feeding_history.edit(entry.id, edited)
            if c3.button("Delete", key=f"feeding-del:{entry.id}"):
                self.state.feeding_history.delete(entry.id)
                st.rerun()


def render_calculator_page(state, tool: Tool, layout: Layout, tool_service: ToolService,
                           validation_service: ValidationService) -> None:
    CalculatorPage(state, tool, layout, tool_service, validation_service).render()
