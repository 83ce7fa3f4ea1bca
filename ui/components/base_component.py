from __future__ import annotations

"""Base component class for the Streamlit UI.

All pages inherit from `BaseComponent` and implement `render()`. Pages
receive the per-session UI state and any services they need through their
constructor so they stay decoupled from each other.
"""

from dataclasses import dataclass

import streamlit as st

from aquatools.catalog import Tool


@dataclass
class BaseComponent:
    """Base class for all UI pages.

    Attributes:
        state: Per-session `UIState` holding records and last results
    """

    state: object

    def render(self) -> None:
        """Draw the page. Subclasses must override this method."""
        raise NotImplementedError("Subclasses must implement render()")

    @staticmethod
    def render_header(tool: Tool) -> None:
        """Title, description and the collapsible usage guide for a tool."""
        st.header(tool.name)
        if tool.description:
            st.caption(tool.description)
        if tool.guide or tool.tips:
            with st.expander("How to use this tool"):
                if tool.guide:
                    st.markdown(tool.guide)
                if tool.tips:
                    st.markdown("**Tips**")
                    st.markdown("\n".join(f"- {t}" for t in tool.tips))
