from __future__ import annotations

import streamlit as st

from .base_component import BaseComponent
from aquatools.catalog import Catalog


class HomeTab(BaseComponent):
    """Landing page: every category with links to its tools."""

    def __init__(self, state, catalog: Catalog) -> None:
        super().__init__(state)
        self.catalog = catalog

    def render(self) -> None:
        st.title(self.catalog.title)
        if self.catalog.tagline:
            st.caption(self.catalog.tagline)

        for category in self.catalog.categories:
            st.subheader(category.label)
            cols = st.columns(3)
            for i, tool in enumerate(category.tools):
                with cols[i % 3]:
                    with st.container(border=True):
                        st.markdown(f"**[{tool.name}](?tool={tool.slug})**")
                        st.caption(tool.description)


class InfoPage(BaseComponent):
    """About, team, contact, privacy policy and disclaimer pages."""

    def __init__(self, state, catalog: Catalog, name: str) -> None:
        super().__init__(state)
        self.page = catalog.page(name)

    def render(self) -> None:
        st.title(self.page.get("title", ""))
        if self.page.get("body"):
            st.write(self.page["body"])
        for feature in self.page.get("features", []):
            st.markdown(f"**{feature['title']}**  \n{feature['description']}")
        for member in self.page.get("members", []):
            with st.container(border=True):
                st.markdown(f"**{member['name']}**  \n{member.get('title', '')}")
                st.caption(" · ".join(x for x in (member.get("department"), member.get("affiliation")) if x))
                if member.get("expertise"):
                    st.write(", ".join(member["expertise"]))
        for detail in self.page.get("details", []):
            st.markdown(f"**{detail['title']}**")
            st.write("\n\n".join(detail.get("lines", [])))


def render_home_tab(state, catalog: Catalog) -> None:
    HomeTab(state, catalog).render()


def render_info_page(state, catalog: Catalog, name: str) -> None:
    InfoPage(state, catalog, name).render()
