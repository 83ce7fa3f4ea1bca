import unittest
from datetime import date, datetime

import pytest

from aquatools.records import (
    COMPLETED,
    PENDING,
    CalendarStore,
    FeedManagementStore,
    FeedingHistory,
    GrowthBatchStore,
    InventoryStore,
    RecordNotFound,
    WaterQualityHistory,
)


class TestGrowthBatchStore(unittest.TestCase):
    def setUp(self):
        self.store = GrowthBatchStore()
        self.batch = self.store.create("Tilapia", "B-01")

    def test_samples_and_rate(self):
        self.store.add_sample(self.batch.id, {"date": "2025-05-01", "weight": 50, "length": 12, "sampleSize": 20})
        self.assertIsNone(self.batch.growth_rate)
        self.store.add_sample(self.batch.id, {"date": "2025-05-21", "weight": 90, "length": 15})
        self.assertEqual(self.batch.growth_rate, 2.0)
        frame = self.store.frame(self.batch.id)
        self.assertEqual(list(frame["weight"]), [50, 90])
        self.assertEqual(frame.loc[0, "date"], "2025-05-01")
        self.assertEqual(frame.loc[0, "sampleSize"], 20)

    def test_weight_and_length_required(self):
        with self.assertRaises(ValueError):
            self.store.add_sample(self.batch.id, {"date": "2025-05-01", "weight": 50})

    def test_create_requires_names(self):
        with self.assertRaises(ValueError):
            self.store.create("", "B-02")

    def test_delete(self):
        self.store.delete(self.batch.id)
        self.assertEqual(self.store.batches, [])
        with self.assertRaises(RecordNotFound):
            self.store.get(self.batch.id)


class TestFeedManagementStore(unittest.TestCase):
    def setUp(self):
        self.store = FeedManagementStore(today=date(2025, 6, 1))

    def test_defaults(self):
        self.assertEqual([s.feed_type for s in self.store.schedules], ["Starter", "Grower", "Finisher"])
        days = {s.feed_type: s.days_remaining for s in self.store.summary()}
        self.assertEqual(days, {"Starter": 20, "Grower": 37, "Finisher": 66})
        self.assertEqual(self.store.low_stock(), [])
        self.assertEqual(self.store.stock[0].last_updated, "2025-06-01")

    def test_schedule_crud(self):
        added = self.store.add_schedule({"time": "20:00", "amount": "1.5", "feedType": "Grower"})
        self.assertEqual(len(self.store.schedules), 4)
        self.store.update_schedule(added.id, {"time": "21:00", "amount": 1, "feedType": "Grower", "notes": "late"})
        self.assertEqual(self.store.schedules[-1].notes, "late")
        self.store.delete_schedule(added.id)
        self.assertEqual(len(self.store.schedules), 3)
        with self.assertRaises(ValueError):
            self.store.add_schedule({"time": "20:00", "amount": ""})

    def test_set_stock_flags_low(self):
        self.store.set_stock("Grower", "10", today=date(2025, 6, 2))
        self.assertEqual(self.store.stock_for("Grower").last_updated, "2025-06-02")
        self.assertEqual([s.feed_type for s in self.store.low_stock()], ["Grower"])
        self.store.set_stock("Medicated", 5)
        self.assertEqual(self.store.stock_for("Medicated").amount, 5.0)
        with self.assertRaises(RecordNotFound):
            self.store.stock_for("Unknown")


ITEM = {
    "name": "Grower pellets",
    "category": "Feed",
    "quantity": 40,
    "unit": "kg",
    "minThreshold": 50,
    "expiryDate": "2025-06-20",
    "cost": 1.5,
}


def test_inventory_alerts_and_value():
    store = InventoryStore()
    pellets = store.add(ITEM)
    store.add(dict(ITEM, name="Salt", category="Medication", quantity=100, expiryDate="", cost=0.5))
    today = date(2025, 6, 1)
    assert [i.name for i in store.low_stock()] == ["Grower pellets"]
    assert [i.name for i in store.expiring(today)] == ["Grower pellets"]
    assert store.expiring(date(2025, 6, 21)) == []
    assert store.total_value() == pytest.approx(40 * 1.5 + 100 * 0.5)
    assert [i.name for i in store.by_category("Medication")] == ["Salt"]
    assert len(store.by_category("All")) == 2

    store.update(pellets.id, dict(ITEM, quantity=80))
    assert store.low_stock() == []
    frame = store.frame()
    assert "min_threshold" in frame.columns
    assert len(frame) == 2
    store.delete(pellets.id)
    assert [i.name for i in store.items] == ["Salt"]


def test_inventory_empty_frame_has_columns():
    assert "expiry_date" in InventoryStore().frame().columns


def test_inventory_requires_fields():
    with pytest.raises(ValueError, match="unit"):
        InventoryStore().add({"name": "x", "category": "Feed", "quantity": 1})


class TestCalendarStore(unittest.TestCase):
    TODAY = date(2025, 6, 1)

    def setUp(self):
        self.store = CalendarStore()
        self.late = self.store.add({"title": "Lime pond 2", "date": "2025-05-28", "type": "Pond Preparation"})
        self.soon = self.store.add({"title": "Sample growth", "date": "2025-06-10", "priority": "High"})
        self.today_task = self.store.add({"title": "Test water", "date": "2025-06-01"})

    def test_grouping(self):
        self.assertEqual([t.title for t in self.store.overdue(self.TODAY)], ["Lime pond 2"])
        self.assertEqual([t.title for t in self.store.upcoming(self.TODAY)], ["Test water", "Sample growth"])
        self.assertEqual(self.store.completed(), [])

    def test_toggle(self):
        self.assertEqual(self.store.toggle(self.late.id).status, COMPLETED)
        self.assertEqual(self.store.overdue(self.TODAY), [])
        self.assertEqual([t.title for t in self.store.completed()], ["Lime pond 2"])
        self.assertEqual(self.store.toggle(self.late.id).status, PENDING)

    def test_update_keeps_status(self):
        self.store.toggle(self.soon.id)
        updated = self.store.update(self.soon.id, {"title": "Sample growth (pond 1)", "date": "2025-06-11"})
        self.assertEqual(updated.status, COMPLETED)
        self.assertEqual(updated.priority, "Medium")

    def test_invalid_priority(self):
        with self.assertRaises(ValueError):
            self.store.add({"title": "x", "date": "2025-06-01", "priority": "Urgent"})

    def test_delete_unknown(self):
        with self.assertRaises(RecordNotFound):
            self.store.delete("missing")


def test_water_quality_history():
    history = WaterQualityHistory()
    history.record("tilapia", {"ph": 7.2}, when=datetime(2025, 6, 1, 8))
    history.record("tilapia", {"ph": 7.4, "temperature": 28}, when=datetime(2025, 6, 1, 16))
    frame = history.frame()
    assert list(frame.columns) == ["timestamp", "species", "ph", "temperature"]
    assert len(frame) == 2
    history.clear()
    assert history.frame().empty


def test_feeding_history():
    history = FeedingHistory()
    entry = history.add(2.5, when=datetime(2025, 6, 1, 7))
    history.edit(entry.id, "ate well")
    assert history.entries[0].notes == "ate well"
    history.delete(entry.id)
    assert history.entries == []
    with pytest.raises(RecordNotFound):
        history.edit(entry.id, "gone")
