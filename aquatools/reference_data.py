from __future__ import annotations

"""
Reference Data Loader

Loads the static coefficient tables (species profiles, parameter ranges,
material and lime catalogues, market tables) from the packaged
`data/reference_data.yaml` and validates them once per process.

Validation rules
- Every required table must be present and non-empty.
- Any mapping that carries both `min` and `max` must hold numbers with
  `min <= max`. This covers species ranges, optimal/warning/critical bands and
  critical-parameter windows.

Lookups raise `ValueError` with close-match hints so a misspelled species or
option name in a CLI input file points at the intended key.
"""

import difflib
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Tuple

import pandas as pd
import yaml

from .io_paths import REFERENCE_DATA_FILE

log = logging.getLogger(__name__)

REQUIRED_TABLES: Tuple[str, ...] = (
    "water_quality_ranges",
    "monitor_parameters",
    "predictor_species",
    "predictor_risk_thresholds",
    "evaporation_cloud_factors",
    "evaporation_season_factors",
    "sediment_types",
    "sediment_disposal_methods",
    "lime_types",
    "soil_types",
    "lining_materials",
    "benchmark_species",
    "benchmark_feed_factors",
    "growth_predictor_species",
    "production_species",
    "stocking_species",
    "yield_species",
    "yield_modifiers",
    "stress_species",
    "stress_behaviors",
    "stress_feeding_responses",
    "stress_economic_impact",
    "fcr_targets",
    "feeding_guides",
    "prevention_diseases",
    "risk_diseases",
    "seasonal_disease_patterns",
    "fertilizer_species",
    "fertilizer_processing",
    "fertilizer_storage",
    "fertilizer_crops",
    "environmental_limits",
    "environment_parameters",
    "equipment_types",
    "weather_species",
    "weather_cloud_cover",
    "aeration_species",
    "suitability_species",
    "experience_levels",
    "harvest_species",
    "harvest_seasonal_factors",
    "market_trends",
    "market_demands",
    "report_sections",
    "report_sample_metrics",
)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _walk_ranges(node: Any, path: str) -> Iterator[Tuple[str, Mapping[str, Any]]]:
    """Yield (path, mapping) for every nested mapping with `min` and `max`."""
    if isinstance(node, Mapping):
        if "min" in node and "max" in node:
            yield path, node
        for key, child in node.items():
            yield from _walk_ranges(child, f"{path}.{key}")
    elif isinstance(node, list):
        for i, child in enumerate(node):
            yield from _walk_ranges(child, f"{path}[{i}]")


def validate_reference_data(data: Mapping[str, Any]) -> None:
    """Raise ValueError when a table is missing or a range is malformed."""
    missing = [name for name in REQUIRED_TABLES if not data.get(name)]
    if missing:
        raise ValueError(f"Reference data missing tables: {missing}")
    for path, rng in _walk_ranges(data, "reference"):
        lo, hi = rng["min"], rng["max"]
        if not (_is_number(lo) and _is_number(hi)):
            raise ValueError(f"Non-numeric range at {path}: min={lo!r} max={hi!r}")
        if lo > hi:
            raise ValueError(f"Inverted range at {path}: min={lo} > max={hi}")


@lru_cache(maxsize=4)
def load_reference_data(path: Path = REFERENCE_DATA_FILE) -> Dict[str, Any]:
    """Load and validate the coefficient tables. Cached per path."""
    log.info("Loading reference data: %s", path)
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ValueError(f"Reference data not found at {path}") from exc
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Malformed YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Reference data root must be a mapping: {path}")
    validate_reference_data(data)
    log.debug("Reference data loaded: tables=%d", len(data))
    return data


def table(name: str) -> Any:
    """Return one table by name."""
    data = load_reference_data()
    if name not in data:
        hints = difflib.get_close_matches(name, list(data.keys()), n=3)
        hint = f" Did you mean: {', '.join(hints)}?" if hints else ""
        raise ValueError(f"Unknown reference table '{name}'.{hint}")
    return data[name]


def options(name: str) -> List[str]:
    """Keys of a mapping table, in file order (select-box options)."""
    return list(table(name).keys())


def lookup(table_name: str, key: str, label: str = "key") -> Any:
    """Return `table_name[key]`, raising ValueError with hints for unknown keys."""
    tbl = table(table_name)
    if key in tbl:
        return tbl[key]
    keys = [str(k) for k in tbl.keys()]
    hints = difflib.get_close_matches(str(key), keys, n=3)
    hint = f" Did you mean: {', '.join(hints)}?" if hints else ""
    log.warning("Unknown %s %r in %s", label, key, table_name)
    raise ValueError(f"Unknown {label} {key!r}. Expected one of: {', '.join(keys)}.{hint}")


def table_frame(name: str) -> pd.DataFrame:
    """Return a flat mapping table as a DataFrame, one row per key."""
    tbl = table(name)
    if isinstance(tbl, list):
        return pd.json_normalize(tbl)
    rows = []
    for key, value in tbl.items():
        row = {"key": key}
        if isinstance(value, Mapping):
            row.update(pd.json_normalize(value).iloc[0].to_dict())
        else:
            row["value"] = value
        rows.append(row)
    return pd.DataFrame(rows)
