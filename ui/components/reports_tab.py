from __future__ import annotations

import streamlit as st

from .base_component import BaseComponent
from aquatools.catalog import Tool
from aquatools.reports import REPORT_FORMATS, preview_frame, report_types, sections_for
from ui.services import ToolService


class ReportsTab(BaseComponent):
    """Report builder: pick a type and sections, preview, then download."""

    def __init__(self, state, tool: Tool, tool_service: ToolService) -> None:
        super().__init__(state)
        self.tool = tool
        self.tool_service = tool_service

    def render(self) -> None:
        self.render_header(self.tool)

        c1, c2 = st.columns(2)
        with c1:
            rtype = st.selectbox("Report type *", report_types(), index=None, placeholder="Select…", key="reports:type")
            title = st.text_input("Title", placeholder=f"{rtype or 'Farm'} Report", key="reports:title")
        with c2:
            start = st.date_input("From", value=None, key="reports:start")
            end = st.date_input("To", value=None, key="reports:end")
        sections = st.multiselect(
            "Sections *",
            sections_for(rtype) if rtype else [],
            default=sections_for(rtype) if rtype else [],
            key=f"reports:sections:{rtype}",
        )
        fmt = st.radio("Format", REPORT_FORMATS, horizontal=True, key="reports:format")

        ready = bool(rtype) and bool(sections)
        if st.button("Generate preview", type="primary", disabled=not ready, key="reports:run"):
            form = {"type": rtype, "sections": sections, "title": title, "start": start, "end": end, "format": fmt}
            try:
                self.state.remember(self.tool.slug, self.tool_service.run(self.tool.slug, form))
            except ValueError as exc:
                st.error(str(exc))

        preview = self.state.last_result(self.tool.slug)
        if preview is None:
            return
        st.subheader(preview.title)
        if preview.start or preview.end:
            st.caption(f"{preview.start or '…'} to {preview.end or '…'}")
        st.dataframe(preview_frame(preview), hide_index=True, use_container_width=True)
        content, file_name, mime = self.tool_service.export(preview, fmt)
        st.download_button(f"Download {fmt}", data=content, file_name=file_name, mime=mime, key="reports:download")


def render_reports_tab(state, tool: Tool, tool_service: ToolService) -> None:
    ReportsTab(state, tool, tool_service).render()
