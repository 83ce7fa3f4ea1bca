from __future__ import annotations

from aquatools.records import GrowthBatchStore, WaterQualityHistory
from ui.state import UIState


def test_fresh_state_is_empty():
    state = UIState()
    assert isinstance(state.growth_batches, GrowthBatchStore)
    assert isinstance(state.water_history, WaterQualityHistory)
    assert state.results == {}
    assert state.selected_batch is None


def test_sessions_do_not_share_stores():
    a, b = UIState(), UIState()
    assert a.growth_batches is not b.growth_batches
    assert a.inventory is not b.inventory
    a.remember("pond-liming", {"lime_required": 2925.0})
    assert b.last_result("pond-liming") is None


def test_result_cache_round_trip():
    state = UIState()
    state.remember("fcr-calculator", "first")
    state.remember("fcr-calculator", "second")
    assert state.last_result("fcr-calculator") == "second"
    state.forget("fcr-calculator")
    assert state.last_result("fcr-calculator") is None
    state.forget("fcr-calculator")
