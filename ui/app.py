"""
AquaTools Streamlit UI.

Sidebar navigation by category, one page per tool, information pages and a
log viewer. Pages are addressable with `?tool=<slug>` (tools) or
`?page=<name>` (about, team, contact, privacy-policy, disclaimer, logs).
"""

from pathlib import Path
import sys
import streamlit as st

# Ensure project root is on sys.path to enable package imports
project_root = Path(__file__).resolve().parents[1]
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from aquatools.catalog import INFO_PAGES
from aquatools.io_paths import LOGS_DIR
from aquatools.utils_logging import configure_logging
from ui.state import UIState
from ui.layouts import layouts
from ui.services import LogService, ToolService, ValidationService
from ui.components.calculator_page import render_calculator_page
from ui.components.calendar_tab import render_calendar_tab
from ui.components.energy_tab import render_energy_tab
from ui.components.feed_management_tab import render_feed_management_tab
from ui.components.growth_tracker_tab import render_growth_tracker_tab
from ui.components.home_tab import render_home_tab, render_info_page
from ui.components.inventory_tab import render_inventory_tab
from ui.components.logs_tab import render_logs_tab
from ui.components.reports_tab import render_reports_tab


st.set_page_config(page_title="AquaTools", page_icon="🐟", layout="wide", initial_sidebar_state="expanded")

CUSTOM_PAGES = {
    "growth-tracker": render_growth_tracker_tab,
    "feed-management": render_feed_management_tab,
    "inventory": render_inventory_tab,
    "calendar": render_calendar_tab,
}
TOOL_SERVICE_PAGES = {
    "energy-efficiency": render_energy_tab,
    "reports": render_reports_tab,
}


def _go(**params: str) -> None:
    st.query_params.clear()
    for key, value in params.items():
        st.query_params[key] = value
    st.rerun()


def render_sidebar(tool_service: ToolService, active: str) -> None:
    with st.sidebar:
        st.markdown(f"## {tool_service.catalog.title}")
        if st.button("🏠 Home", use_container_width=True, key="nav:home"):
            _go()
        for category in tool_service.categories():
            expanded = any(t.slug == active for t in category.tools)
            with st.expander(category.label, expanded=expanded):
                for tool in category.tools:
                    kind = "primary" if tool.slug == active else "secondary"
                    if st.button(tool.name, key=f"nav:{tool.slug}", type=kind, use_container_width=True):
                        _go(tool=tool.slug)
        st.divider()
        for name in INFO_PAGES:
            if st.button(tool_service.catalog.page(name).get("title", name), key=f"nav:{name}", use_container_width=True):
                _go(page=name)
        if st.button("📜 Logs", key="nav:logs", use_container_width=True):
            _go(page="logs")


def main() -> None:
    configure_logging(LOGS_DIR, append=True)

    # Initialize state
    log_service = LogService()
    if "ui_state" not in st.session_state:
        st.session_state["ui_state"] = UIState()
        log_service.mark_session_start()
    state: UIState = st.session_state["ui_state"]

    # Initialize services
    tool_service = ToolService()
    validation_service = ValidationService()

    slug = st.query_params.get("tool")
    page = st.query_params.get("page")
    tool = tool_service.resolve(slug)
    render_sidebar(tool_service, tool.slug if tool else "")

    if slug and tool is None:
        st.warning(f"Unknown tool '{slug}'. Pick one from the sidebar.")

    if tool is not None:
        if tool.slug in CUSTOM_PAGES:
            CUSTOM_PAGES[tool.slug](state, tool)
        elif tool.slug in TOOL_SERVICE_PAGES:
            TOOL_SERVICE_PAGES[tool.slug](state, tool, tool_service)
        else:
            render_calculator_page(state, tool, layouts()[tool.slug], tool_service, validation_service)
    elif page == "logs":
        render_logs_tab(state, log_service)
    elif page in INFO_PAGES:
        render_info_page(state, tool_service.catalog, page)
    else:
        render_home_tab(state, tool_service.catalog)


if __name__ == "__main__":
    main()
