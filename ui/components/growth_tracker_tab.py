from __future__ import annotations

from datetime import date

import streamlit as st

from .base_component import BaseComponent
from aquatools.catalog import Tool
from aquatools.reference_data import options
from viz.interactive import growth_figure


class GrowthTrackerTab(BaseComponent):
    """Growth batches with dated weight/length samples."""

    def __init__(self, state, tool: Tool) -> None:
        super().__init__(state)
        self.tool = tool

    def _create_batch(self) -> None:
        with st.form("growth-tracker:new", clear_on_submit=True):
            st.subheader("New batch")
            c1, c2 = st.columns(2)
            species = c1.selectbox("Species", options("benchmark_species"), index=None, placeholder="Select…")
            batch_id = c2.text_input("Batch ID")
            if st.form_submit_button("Create batch"):
                try:
                    batch = self.state.growth_batches.create(species or "", batch_id)
                except ValueError as exc:
                    st.error(str(exc))
                else:
                    self.state.selected_batch = batch.id

    def _add_sample(self, batch_id: str) -> None:
        with st.form("growth-tracker:sample", clear_on_submit=True):
            st.subheader("Add sample")
            c1, c2, c3, c4 = st.columns(4)
            form = {
                "date": c1.date_input("Date", value=date.today()),
                "weight": c2.number_input("Average weight (g)", min_value=0.0, step=0.1),
                "length": c3.number_input("Average length (cm)", min_value=0.0, step=0.1),
                "sampleSize": c4.number_input("Sample size", min_value=0, step=1),
                "notes": st.text_input("Notes"),
            }
            if st.form_submit_button("Add sample"):
                try:
                    self.state.growth_batches.add_sample(batch_id, form)
                except ValueError as exc:
                    st.error(str(exc))

    def render(self) -> None:
        self.render_header(self.tool)
        store = self.state.growth_batches
        self._create_batch()

        if not store.batches:
            st.info("Create a batch to start recording samples.")
            return

        labels = {b.id: f"{b.batch_id} ({b.species})" for b in store.batches}
        ids = list(labels)
        current = self.state.selected_batch if self.state.selected_batch in labels else ids[0]
        selected = st.selectbox("Batch", ids, index=ids.index(current), format_func=labels.get, key="growth-tracker:batch")
        self.state.selected_batch = selected
        batch = store.get(selected)

        self._add_sample(selected)

        c1, c2 = st.columns(2)
        c1.metric("Samples", len(batch.data))
        rate = batch.growth_rate
        c2.metric("Average growth", f"{rate:.2f} g/day" if rate is not None else "n/a")

        if batch.data:
            frame = store.frame(selected)
            st.dataframe(frame, hide_index=True, use_container_width=True)
            st.plotly_chart(growth_figure(frame.to_dict("records")), use_container_width=True)

        if st.button("Delete batch", key="growth-tracker:delete"):
            store.delete(selected)
            self.state.selected_batch = None
            st.rerun()


def render_growth_tracker_tab(state, tool: Tool) -> None:
    GrowthTrackerTab(state, tool).render()
