from __future__ import annotations

import streamlit as st

from .base_component import BaseComponent
from aquatools.catalog import Tool
from aquatools.records import DEFAULT_STOCK
from ui.utils.helpers import rows_frame

FEED_TYPES = [ft for ft, _ in DEFAULT_STOCK]


class FeedManagementTab(BaseComponent):
    """Daily feeding schedule and feed stock levels."""

    def __init__(self, state, tool: Tool) -> None:
        super().__init__(state)
        self.tool = tool

    def _schedule_form(self, key: str, defaults=None) -> dict:
        c1, c2, c3 = st.columns(3)
        feed_types = FEED_TYPES + [s.feed_type for s in self.state.feed.stock if s.feed_type not in FEED_TYPES]
        current = defaults.feed_type if defaults else feed_types[0]
        return {
            "time": c1.text_input("Time (HH:MM)", value=defaults.time if defaults else "", key=f"{key}:time"),
            "amount": c2.number_input(
                "Amount (kg)", min_value=0.0, step=0.1, value=float(defaults.amount) if defaults else 0.0, key=f"{key}:amount"
            ),
            "feedType": c3.selectbox(
                "Feed type", feed_types, index=feed_types.index(current) if current in feed_types else 0, key=f"{key}:type"
            ),
            "notes": st.text_input("Notes", value=defaults.notes if defaults else "", key=f"{key}:notes"),
        }

    def render(self) -> None:
        self.render_header(self.tool)
        feed = self.state.feed

        st.subheader("Feeding schedule")
        for sched in sorted(feed.schedules, key=lambda s: s.time):
            with st.expander(f"{sched.time} · {sched.amount:g} kg {sched.feed_type}"):
                form = self._schedule_form(f"feed-edit:{sched.id}", sched)
                c1, c2 = st.columns(2)
                if c1.button("Save", key=f"feed-save:{sched.id}"):
                    try:
                        feed.update_schedule(sched.id, form)
                        st.rerun()
                    except ValueError as exc:
                        st.error(str(exc))
                if c2.button("Delete", key=f"feed-del:{sched.id}"):
                    feed.delete_schedule(sched.id)
                    st.rerun()

        with st.expander("Add feeding time", expanded=not feed.schedules):
            form = self._schedule_form("feed-new")
            if st.button("Add", key="feed-add"):
                try:
                    feed.add_schedule(form)
                    st.rerun()
                except ValueError as exc:
                    st.error(str(exc))

        st.subheader("Feed stock")
        summary = feed.summary()
        for status in summary:
            if status.low_stock:
                st.warning(f"{status.feed_type}: about {status.days_remaining} days of feed left")
        st.dataframe(rows_frame(summary), hide_index=True, use_container_width=True)

        c1, c2, c3 = st.columns([2, 2, 1])
        feed_type = c1.selectbox("Feed type", [s.feed_type for s in feed.stock], key="feed-stock:type")
        amount = c2.number_input("New stock level (kg)", min_value=0.0, step=1.0, key="feed-stock:amount")
        if c3.button("Update stock", key="feed-stock:save"):
            feed.set_stock(feed_type, amount)
            st.rerun()


def render_feed_management_tab(state, tool: Tool) -> None:
    FeedManagementTab(state, tool).render()
