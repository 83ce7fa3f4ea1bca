from __future__ import annotations

"""General-purpose helpers for the UI."""

import dataclasses
import re
from datetime import date, datetime
from typing import Any, Dict, Iterable, List

import pandas as pd


def humanize(key: str) -> str:
    """'dissolvedOxygen' or 'daily_feed' -> 'Dissolved oxygen' / 'Daily feed'."""
    words = re.sub(r"([a-z])([A-Z])", r"\1 \2", key).replace("_", " ").lower()
    return words[:1].upper() + words[1:]


def fmt_value(value: Any) -> str:
    if value is None:
        return "n/a"
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, float):
        return f"{value:,.2f}"
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def as_rows(items: Iterable[Any]) -> List[Dict[str, Any]]:
    """Dataclass instances or mappings -> flat dicts for a DataFrame."""
    rows = []
    for item in items:
        if dataclasses.is_dataclass(item) and not isinstance(item, type):
            item = dataclasses.asdict(item)
        rows.append({humanize(k): v for k, v in dict(item).items() if not isinstance(v, (dict, list))})
    return rows


def rows_frame(items: Iterable[Any]) -> pd.DataFrame:
    return pd.DataFrame(as_rows(items))
