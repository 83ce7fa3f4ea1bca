from __future__ import annotations

from datetime import date

import streamlit as st

from .base_component import BaseComponent
from aquatools.catalog import Tool
from aquatools.records import INVENTORY_CATEGORIES, INVENTORY_UNITS


class InventoryTab(BaseComponent):
    """Farm supplies with low-stock and expiry alerts."""

    def __init__(self, state, tool: Tool) -> None:
        super().__init__(state)
        self.tool = tool

    def _item_form(self) -> None:
        with st.form("inventory:new", clear_on_submit=True):
            st.subheader("Add item")
            c1, c2, c3 = st.columns(3)
            form = {
                "name": c1.text_input("Name *"),
                "category": c2.selectbox("Category *", INVENTORY_CATEGORIES),
                "unit": c3.selectbox("Unit *", INVENTORY_UNITS),
                "quantity": c1.number_input("Quantity *", min_value=0.0, step=1.0, value=None),
                "minThreshold": c2.number_input("Minimum threshold", min_value=0.0, step=1.0),
                "cost": c3.number_input("Unit cost", min_value=0.0, step=0.5),
                "lastRestocked": c1.date_input("Last restocked", value=None),
                "expiryDate": c2.date_input("Expiry date", value=None),
                "supplier": c3.text_input("Supplier"),
            }
            if st.form_submit_button("Add item"):
                try:
                    self.state.inventory.add(form)
                except ValueError as exc:
                    st.error(str(exc))

    def render(self) -> None:
        self.render_header(self.tool)
        store = self.state.inventory
        self._item_form()

        low = store.low_stock()
        expiring = store.expiring(date.today())
        c1, c2, c3 = st.columns(3)
        c1.metric("Items", len(store.items))
        c2.metric("Total value", f"{store.total_value():,.2f}")
        c3.metric("Alerts", len(low) + len(expiring))
        for item in low:
            st.warning(f"Low stock: {item.name} ({item.quantity:g} {item.unit}, minimum {item.min_threshold:g})")
        for item in expiring:
            st.warning(f"Expiring soon: {item.name} on {item.expiry_date.isoformat()}")

        category = st.selectbox("Category", ["All", *INVENTORY_CATEGORIES], key="inventory:filter")
        items = store.by_category(category)
        if not items:
            st.info("No items in this category.")
            return
        st.dataframe(store.frame(items).drop(columns=["id"]), hide_index=True, use_container_width=True)

        names = {item.id: item.name for item in items}
        c1, c2, c3 = st.columns([2, 1, 1])
        target = c1.selectbox("Item", list(names), format_func=names.get, key="inventory:target")
        qty = c2.number_input("Quantity", min_value=0.0, step=1.0, key="inventory:qty")
        if c3.button("Set quantity", key="inventory:set"):
            item = next(i for i in items if i.id == target)
            store.update(target, {
                "name": item.name,
                "category": item.category,
                "quantity": qty,
                "unit": item.unit,
                "minThreshold": item.min_threshold,
                "lastRestocked": date.today(),
                "expiryDate": item.expiry_date,
                "supplier": item.supplier,
                "cost": item.cost,
            })
            st.rerun()
        if st.button("Delete item", key="inventory:delete"):
            store.delete(target)
            st.rerun()


def render_inventory_tab(state, tool: Tool) -> None:
    InventoryTab(state, tool).render()
