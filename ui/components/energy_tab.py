from __future__ import annotations

import pandas as pd
import streamlit as st

from .base_component import BaseComponent
from .result_view import render_result
from aquatools.catalog import Tool
from aquatools.reference_data import options
from ui.services import ToolService

_COLUMNS = ["name", "power", "hours", "quantity", "efficiency"]
_DEFAULT_ROWS = [{"name": "aerator", "power": 0.75, "hours": 12.0, "quantity": 2, "efficiency": None}]


class EnergyTab(BaseComponent):
    """Energy efficiency: an editable equipment table plus tariff options."""

    def __init__(self, state, tool: Tool, tool_service: ToolService) -> None:
        super().__init__(state)
        self.tool = tool
        self.tool_service = tool_service

    def render(self) -> None:
        self.render_header(self.tool)

        st.subheader("Equipment")
        edited = st.data_editor(
            pd.DataFrame(_DEFAULT_ROWS, columns=_COLUMNS),
            num_rows="dynamic",
            hide_index=True,
            use_container_width=True,
            key="energy:equipment",
            column_config={
                "name": st.column_config.SelectboxColumn("Type", options=options("equipment_types"), required=True),
                "power": st.column_config.NumberColumn("Power (kW)", min_value=0.0, step=0.05),
                "hours": st.column_config.NumberColumn("Hours/day", min_value=0.0, max_value=24.0),
                "quantity": st.column_config.NumberColumn("Units", min_value=1, step=1),
                "efficiency": st.column_config.NumberColumn(
                    "Efficiency (0-1)", min_value=0.0, max_value=1.0, help="Blank uses the typical value"
                ),
            },
        )
        equipment = [
            {k: (None if pd.isna(v) else v) for k, v in row.items()}
            for row in edited.to_dict("records")
            if not pd.isna(row.get("name"))
        ]

        c1, c2, c3 = st.columns(3)
        with c1:
            rate = st.number_input("Electricity rate (per kWh) *", value=None, step=0.01, format="%g", key="energy:rate")
        with c2:
            solar = st.checkbox("Site suits solar panels", key="energy:solar")
        with c3:
            backup = st.checkbox("Backup power required", key="energy:backup")

        ready = bool(equipment) and rate is not None
        if st.button("Analyze", type="primary", disabled=not ready, key="energy:run"):
            form = {"equipment": equipment, "electricityRate": rate, "solarPotential": solar, "backupRequired": backup}
            try:
                self.state.remember(self.tool.slug, self.tool_service.run(self.tool.slug, form))
            except ValueError as exc:
                st.error(str(exc))
        if not ready:
            st.caption("Add at least one piece of equipment and the electricity rate")

        result = self.state.last_result(self.tool.slug)
        if result is not None:
            render_result(self.tool.slug, result)


def render_energy_tab(state, tool: Tool, tool_service: ToolService) -> None:
    EnergyTab(state, tool, tool_service).render()
