from __future__ import annotations

import streamlit as st

from .base_component import BaseComponent
from ui.services import LogService


class LogsTab(BaseComponent):
    """Logs display.

    - Shows `logs/run.log` (written by both the UI and the CLI runner)
    - Level and substring filters
    - Session view (from this browser session's start marker) or tail view
    - Download of the visible lines
    """

    TAIL_LINES = 2000

    def __init__(self, state, log_service: LogService) -> None:
        super().__init__(state)
        self.log_service = log_service

    def render(self) -> None:
        st.header("Logs")

        col1, col2, col3, col4 = st.columns([1, 1, 1, 2])
        with col1:
            level = st.selectbox("Level", ["", "DEBUG", "INFO", "WARNING", "ERROR"], index=0, key="logs_level")
        with col2:
            view_mode = st.selectbox("View", ["From session start", "Tail"], index=0, key="logs_view_mode")
        with col3:
            contains = st.text_input("Contains", value="", key="logs_contains")
        with col4:
            st.button("Refresh", key="logs_refresh")

        stats = self.log_service.log_stats()
        if not stats.get("exists"):
            st.info("No log file yet. Run a calculator to generate log lines.")
            return
        st.caption(f"Log path: {stats['path']} – size: {stats['size_bytes']} bytes")

        if view_mode == "From session start":
            lines = self.log_service.read_log_from_last_session(level=level or None, contains=contains or None)
            label = "run.log (from current session start)"
        else:
            lines = self.log_service.tail_log(max_lines=self.TAIL_LINES, level=level or None, contains=contains or None)
            label = f"run.log tail (last {self.TAIL_LINES} lines)"
        text = "\n".join(lines)
        st.text_area(label, value=text, height=500)

        st.download_button(
            label="Download shown content",
            data=text,
            file_name=("run_session.txt" if view_mode == "From session start" else "run_tail.txt"),
            mime="text/plain",
        )


def render_logs_tab(state, log_service: LogService) -> None:
    LogsTab(state, log_service).render()
