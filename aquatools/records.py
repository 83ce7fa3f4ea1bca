from __future__ import annotations

"""In-memory record stores backing the record-keeping tools.

Each store is a plain object kept in the Streamlit session (see
``ui/state.py``). Nothing is written to disk; a page reload starts fresh.
Every mutation is logged at INFO so the Logs page shows what changed.
"""

import logging
import uuid
from dataclasses import asdict, dataclass, field, fields, replace
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional

import pandas as pd

from .feeding import FeedSchedule, FeedStock, StockStatus, stock_summary
from .forms import coerce_numeric, is_blank, parse_number, require_fields
from .growth import GrowthSample, growth_rate, parse_date, tracker_rows

log = logging.getLogger(__name__)

INVENTORY_CATEGORIES = ("Feed", "Medication", "Equipment", "Testing Supplies", "Spare Parts", "Other")
INVENTORY_UNITS = ("kg", "g", "L", "ml", "pieces", "sets")
EXPIRY_WINDOW_DAYS = 30

TASK_TYPES = (
    "Water Quality Testing",
    "Feeding Schedule",
    "Health Check",
    "Harvesting",
    "Pond Preparation",
    "Stocking",
    "Maintenance",
    "Treatment",
    "Inventory Check",
)
TASK_PRIORITIES = ("Low", "Medium", "High")
PENDING = "Pending"
COMPLETED = "Completed"


def new_id() -> str:
    return uuid.uuid4().hex[:9]


class RecordNotFound(KeyError):
    """Raised when an id does not match any stored record."""


def _index(items: List[Any], record_id: str, kind: str) -> int:
    for i, item in enumerate(items):
        if item.id == record_id:
            return i
    raise RecordNotFound(f"No {kind} with id {record_id!r}")


# ---------------------------------------------------------------------------
# Growth tracker
# ---------------------------------------------------------------------------


@dataclass
class GrowthBatch:
    id: str
    species: str
    batch_id: str
    data: List[GrowthSample] = field(default_factory=list)

    @property
    def growth_rate(self) -> Optional[float]:
        return growth_rate(self.data)


class GrowthBatchStore:
    def __init__(self) -> None:
        self.batches: List[GrowthBatch] = []

    def create(self, species: str, batch_id: str) -> GrowthBatch:
        if is_blank(species) or is_blank(batch_id):
            raise ValueError("Growth tracker: species and batch ID are required to create a batch")
        batch = GrowthBatch(id=new_id(), species=species, batch_id=batch_id)
        self.batches.append(batch)
        log.info("Created growth batch %s (%s)", batch_id, species)
        return batch

    def get(self, record_id: str) -> GrowthBatch:
        return self.batches[_index(self.batches, record_id, "growth batch")]

    def add_sample(self, record_id: str, form: Mapping[str, Any]) -> GrowthSample:
        batch = self.get(record_id)
        weight = parse_number(form.get("weight"), "weight")
        length = parse_number(form.get("length"), "length")
        if not weight or not length:
            raise ValueError("Growth tracker: weight and length are required")
        sample = GrowthSample(
            date=parse_date(form.get("date") or date.today(), "date"),
            weight=weight,
            length=length,
            sample_size=int(parse_number(form.get("sampleSize"), "sampleSize")),
            notes=str(form.get("notes") or ""),
        )
        batch.data.append(sample)
        log.info("Added growth sample to %s: %.1f g on %s", batch.batch_id, weight, sample.date)
        return sample

    def delete(self, record_id: str) -> None:
        batch = self.batches.pop(_index(self.batches, record_id, "growth batch"))
        log.info("Deleted growth batch %s", batch.batch_id)

    def frame(self, record_id: str) -> pd.DataFrame:
        return pd.DataFrame(tracker_rows(self.get(record_id).data))


# ---------------------------------------------------------------------------
# Feed management
# ---------------------------------------------------------------------------

DEFAULT_SCHEDULES = (
    ("08:00", 2.5, "Starter"),
    ("14:00", 2.0, "Grower"),
    ("18:00", 1.5, "Finisher"),
)
DEFAULT_STOCK = (("Starter", 50.0), ("Grower", 75.0), ("Finisher", 100.0))


class FeedManagementStore:
    def __init__(self, today: Optional[date] = None) -> None:
        stamp = (today or date.today()).isoformat()
        self.schedules: List[FeedSchedule] = [
            FeedSchedule(id=str(i + 1), time=t, amount=a, feed_type=ft)
            for i, (t, a, ft) in enumerate(DEFAULT_SCHEDULES)
        ]
        self.stock: List[FeedStock] = [FeedStock(feed_type=ft, amount=a, last_updated=stamp) for ft, a in DEFAULT_STOCK]

    def _schedule_from_form(self, form: Mapping[str, Any], record_id: str) -> FeedSchedule:
        require_fields(form, ["time", "amount", "feedType"], context="Feed schedule")
        return FeedSchedule(
            id=record_id,
            time=str(form["time"]),
            amount=coerce_numeric(form["amount"], "amount"),
            feed_type=str(form["feedType"]),
            notes=str(form.get("notes") or ""),
        )

    def add_schedule(self, form: Mapping[str, Any]) -> FeedSchedule:
        schedule = self._schedule_from_form(form, new_id())
        self.schedules.append(schedule)
        log.info("Added feed schedule %s %.2f kg %s", schedule.time, schedule.amount, schedule.feed_type)
        return schedule

    def update_schedule(self, record_id: str, form: Mapping[str, Any]) -> FeedSchedule:
        i = _index(self.schedules, record_id, "feed schedule")
        self.schedules[i] = self._schedule_from_form(form, record_id)
        log.info("Updated feed schedule %s", record_id)
        return self.schedules[i]

    def delete_schedule(self, record_id: str) -> None:
        self.schedules.pop(_index(self.schedules, record_id, "feed schedule"))
        log.info("Deleted feed schedule %s", record_id)

    def set_stock(self, feed_type: str, amount: Any, today: Optional[date] = None) -> FeedStock:
        value = coerce_numeric(amount, "amount")
        stamp = (today or date.today()).isoformat()
        for i, item in enumerate(self.stock):
            if item.feed_type == feed_type:
                self.stock[i] = replace(item, amount=value, last_updated=stamp)
                break
        else:
            self.stock.append(FeedStock(feed_type=feed_type, amount=value, last_updated=stamp))
        log.info("Set %s stock to %.1f kg", feed_type, value)
        return self.stock_for(feed_type)

    def stock_for(self, feed_type: str) -> FeedStock:
        for item in self.stock:
            if item.feed_type == feed_type:
                return item
        raise RecordNotFound(f"No stock recorded for {feed_type!r}")

    def summary(self) -> List[StockStatus]:
        return stock_summary(self.schedules, self.stock)

    def low_stock(self) -> List[StockStatus]:
        return [s for s in self.summary() if s.low_stock]


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------


@dataclass
class InventoryItem:
    id: str
    name: str
    category: str
    quantity: float
    unit: str
    min_threshold: float
    last_restocked: Optional[date] = None
    expiry_date: Optional[date] = None
    supplier: str = ""
    cost: float = 0.0

    @property
    def value(self) -> float:
        return self.quantity * self.cost

    @classmethod
    def from_form(cls, form: Mapping[str, Any], record_id: str) -> "InventoryItem":
        require_fields(form, ["name", "category", "quantity", "unit"], context="Inventory item")
        return cls(
            id=record_id,
            name=str(form["name"]),
            category=str(form["category"]),
            quantity=coerce_numeric(form["quantity"], "quantity"),
            unit=str(form["unit"]),
            min_threshold=parse_number(form.get("minThreshold"), "minThreshold"),
            last_restocked=None if is_blank(form.get("lastRestocked")) else parse_date(form["lastRestocked"], "lastRestocked"),
            expiry_date=None if is_blank(form.get("expiryDate")) else parse_date(form["expiryDate"], "expiryDate"),
            supplier=str(form.get("supplier") or ""),
            cost=parse_number(form.get("cost"), "cost"),
        )


class InventoryStore:
    def __init__(self) -> None:
        self.items: List[InventoryItem] = []

    def add(self, form: Mapping[str, Any]) -> InventoryItem:
        item = InventoryItem.from_form(form, new_id())
        self.items.append(item)
        log.info("Added inventory item %s (%g %s)", item.name, item.quantity, item.unit)
        return item

    def update(self, record_id: str, form: Mapping[str, Any]) -> InventoryItem:
        i = _index(self.items, record_id, "inventory item")
        self.items[i] = InventoryItem.from_form(form, record_id)
        log.info("Updated inventory item %s", self.items[i].name)
        return self.items[i]

    def delete(self, record_id: str) -> None:
        item = self.items.pop(_index(self.items, record_id, "inventory item"))
        log.info("Deleted inventory item %s", item.name)

    def low_stock(self) -> List[InventoryItem]:
        return [item for item in self.items if item.quantity <= item.min_threshold]

    def expiring(self, today: Optional[date] = None, days: int = EXPIRY_WINDOW_DAYS) -> List[InventoryItem]:
        today = today or date.today()
        horizon = today + timedelta(days=days)
        return [item for item in self.items if item.expiry_date and today <= item.expiry_date <= horizon]

    def total_value(self) -> float:
        return sum(item.value for item in self.items)

    def by_category(self, category: Optional[str] = None) -> List[InventoryItem]:
        if not category or category == "All":
            return list(self.items)
        return [item for item in self.items if item.category == category]

    def frame(self, items: Optional[Iterable[InventoryItem]] = None) -> pd.DataFrame:
        rows = [asdict(item) for item in (self.items if items is None else items)]
        return pd.DataFrame(rows, columns=[f.name for f in fields(InventoryItem)])


# ---------------------------------------------------------------------------
# Production calendar
# ---------------------------------------------------------------------------


@dataclass
class Task:
    id: str
    title: str
    date: date
    type: str
    description: str = ""
    priority: str = "Medium"
    status: str = PENDING

    @classmethod
    def from_form(cls, form: Mapping[str, Any], record_id: str, status: str = PENDING) -> "Task":
        require_fields(form, ["title", "date"], context="Calendar task")
        priority = str(form.get("priority") or "Medium")
        if priority not in TASK_PRIORITIES:
            raise ValueError(f"Unknown priority {priority!r}. Expected one of: {', '.join(TASK_PRIORITIES)}")
        return cls(
            id=record_id,
            title=str(form["title"]),
            date=parse_date(form["date"], "date"),
            type=str(form.get("type") or ""),
            description=str(form.get("description") or ""),
            priority=priority,
            status=status,
        )


class CalendarStore:
    def __init__(self) -> None:
        self.tasks: List[Task] = []

    def add(self, form: Mapping[str, Any]) -> Task:
        task = Task.from_form(form, new_id())
        self.tasks.append(task)
        log.info("Scheduled task %r on %s", task.title, task.date)
        return task

    def update(self, record_id: str, form: Mapping[str, Any]) -> Task:
        i = _index(self.tasks, record_id, "task")
        self.tasks[i] = Task.from_form(form, record_id, status=self.tasks[i].status)
        log.info("Updated task %r", self.tasks[i].title)
        return self.tasks[i]

    def delete(self, record_id: str) -> None:
        task = self.tasks.pop(_index(self.tasks, record_id, "task"))
        log.info("Deleted task %r", task.title)

    def toggle(self, record_id: str) -> Task:
        i = _index(self.tasks, record_id, "task")
        task = self.tasks[i]
        task.status = COMPLETED if task.status == PENDING else PENDING
        log.info("Task %r is now %s", task.title, task.status)
        return task

    def _sorted(self, tasks: Iterable[Task]) -> List[Task]:
        return sorted(tasks, key=lambda t: t.date)

    def upcoming(self, today: Optional[date] = None) -> List[Task]:
        today = today or date.today()
        return self._sorted(t for t in self.tasks if t.status == PENDING and t.date >= today)

    def overdue(self, today: Optional[date] = None) -> List[Task]:
        today = today or date.today()
        return self._sorted(t for t in self.tasks if t.status == PENDING and t.date < today)

    def completed(self) -> List[Task]:
        return self._sorted(t for t in self.tasks if t.status == COMPLETED)


# ---------------------------------------------------------------------------
# Session histories
# ---------------------------------------------------------------------------


@dataclass
class WaterQualityReading:
    timestamp: datetime
    species: str
    readings: Dict[str, float]


class WaterQualityHistory:
    """Readings recorded by each water quality check."""

    def __init__(self) -> None:
        self.entries: List[WaterQualityReading] = []

    def record(self, species: str, readings: Mapping[str, float], when: Optional[datetime] = None) -> WaterQualityReading:
        entry = WaterQualityReading(timestamp=when or datetime.now(), species=species, readings=dict(readings))
        self.entries.append(entry)
        log.info("Recorded water quality reading for %s (%d parameters)", species, len(entry.readings))
        return entry

    def clear(self) -> None:
        self.entries.clear()
        log.info("Cleared water quality history")

    def frame(self) -> pd.DataFrame:
        rows = [{"timestamp": e.timestamp, "species": e.species, **e.readings} for e in self.entries]
        return pd.DataFrame(rows)


@dataclass
class FeedingEntry:
    id: str
    timestamp: datetime
    amount: float
    notes: str = ""


class FeedingHistory:
    def __init__(self) -> None:
        self.entries: List[FeedingEntry] = []

    def add(self, amount: float, notes: str = "", when: Optional[datetime] = None) -> FeedingEntry:
        entry = FeedingEntry(id=new_id(), timestamp=when or datetime.now(), amount=amount, notes=notes)
        self.entries.append(entry)
        log.info("Logged feeding of %.2f kg", amount)
        return entry

    def edit(self, record_id: str, notes: str) -> FeedingEntry:
        i = _index(self.entries, record_id, "feeding")
        self.entries[i] = replace(self.entries[i], notes=notes)
        log.info("Edited feeding %s", record_id)
        return self.entries[i]

    def delete(self, record_id: str) -> None:
        self.entries.pop(_index(self.entries, record_id, "feeding"))
        log.info("Deleted feeding %s", record_id)
