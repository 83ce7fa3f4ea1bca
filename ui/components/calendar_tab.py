from __future__ import annotations

from datetime import date
from typing import List

import streamlit as st

from .base_component import BaseComponent
from aquatools.catalog import Tool
from aquatools.records import TASK_PRIORITIES, TASK_TYPES, Task

_PRIORITY_BADGE = {"High": "🔴", "Medium": "🟠", "Low": "🟢"}


class CalendarTab(BaseComponent):
    """Production calendar: scheduled farm tasks grouped by due state."""

    def __init__(self, state, tool: Tool) -> None:
        super().__init__(state)
        self.tool = tool

    def _task_form(self) -> None:
        with st.form("calendar:new", clear_on_submit=True):
            st.subheader("Schedule task")
            c1, c2, c3 = st.columns(3)
            form = {
                "title": c1.text_input("Title *"),
                "date": c2.date_input("Date *", value=date.today()),
                "type": c3.selectbox("Type", TASK_TYPES),
                "priority": c1.selectbox("Priority", TASK_PRIORITIES, index=1),
                "description": st.text_area("Description", height=80),
            }
            if st.form_submit_button("Add task"):
                try:
                    self.state.calendar.add(form)
                except ValueError as exc:
                    st.error(str(exc))

    def _task_list(self, title: str, tasks: List[Task]) -> None:
        st.subheader(f"{title} ({len(tasks)})")
        if not tasks:
            st.caption("Nothing here.")
            return
        for task in tasks:
            c1, c2, c3 = st.columns([6, 1, 1])
            badge = _PRIORITY_BADGE.get(task.priority, "")
            c1.markdown(f"{badge} **{task.title}** · {task.date.isoformat()} · {task.type}")
            if task.description:
                c1.caption(task.description)
            label = "Reopen" if task.status == "Completed" else "Done"
            if c2.button(label, key=f"calendar-toggle:{task.id}"):
                self.state.calendar.toggle(task.id)
                st.rerun()
            if c3.button("Delete", key=f"calendar-del:{task.id}"):
                self.state.calendar.delete(task.id)
                st.rerun()

    def render(self) -> None:
        self.render_header(self.tool)
        self._task_form()
        today = date.today()
        cal = self.state.calendar
        self._task_list("Overdue", cal.overdue(today))
        self._task_list("Upcoming", cal.upcoming(today))
        self._task_list("Completed", cal.completed())


def render_calendar_tab(state, tool: Tool) -> None:
    CalendarTab(state, tool).render()
