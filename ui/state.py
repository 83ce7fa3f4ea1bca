from __future__ import annotations

"""
Per-session UI state for the Streamlit app.

Everything a visitor creates (growth batches, feed schedules, inventory,
calendar tasks, histories) lives here, inside `st.session_state`, and is
discarded when the browser session ends. Calculator results are cached per
tool slug so a page keeps showing its last result across reruns.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from aquatools.records import (
    CalendarStore,
    FeedingHistory,
    FeedManagementStore,
    GrowthBatchStore,
    InventoryStore,
    WaterQualityHistory,
)


@dataclass
class UIState:
    growth_batches: GrowthBatchStore = field(default_factory=GrowthBatchStore)
    feed: FeedManagementStore = field(default_factory=FeedManagementStore)
    inventory: InventoryStore = field(default_factory=InventoryStore)
    calendar: CalendarStore = field(default_factory=CalendarStore)
    water_history: WaterQualityHistory = field(default_factory=WaterQualityHistory)
    feeding_history: FeedingHistory = field(default_factory=FeedingHistory)

    # Last result per tool slug
    results: Dict[str, Any] = field(default_factory=dict)
    selected_batch: Optional[str] = None

    def remember(self, slug: str, result: Any) -> None:
        self.results[slug] = result

    def last_result(self, slug: str) -> Any:
        return self.results.get(slug)

    def forget(self, slug: str) -> None:
        self.results.pop(slug, None)
