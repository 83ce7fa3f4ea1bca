from __future__ import annotations

"""Form input parsing and required-field checks.

Every calculator receives its inputs the way a form delivers them: numbers
may arrive as strings (possibly blank or decorated with units/currency),
choices arrive as strings that may be empty. The helpers here turn those raw
values into floats and enforce the "required fields must be non-empty"
rule before any calculation runs.

Errors are raised as `ValueError` with messages that name the offending
field so the UI and the CLI can surface them unchanged.
"""

import difflib
import math
import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence

log = logging.getLogger(__name__)

_STRIP_CHARS = ["%", "$", "€", "£", ","]


def is_blank(value: Any) -> bool:
    """Return True for values a form would treat as "not filled in"."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


def coerce_numeric(value: object, field_name: str) -> float:
    """Coerce a form value to float, stripping simple formatting symbols.

    Accepts ints, floats and strings such as "1,200", "$45" or "85%". The
    percent sign is only stripped; callers decide whether a value is a
    percentage.
    """
    if isinstance(value, bool):
        raise ValueError(f"Non-numeric value for '{field_name}': {value!r}")
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError as exc:
            raise ValueError(f"Value for '{field_name}' is out of range: {value!r}") from exc
    elif isinstance(value, str):
        s = value.strip()
        for ch in _STRIP_CHARS:
            s = s.replace(ch, "")
        try:
            number = float(s)
        except ValueError as exc:
            raise ValueError(f"Non-numeric value for '{field_name}': {value!r}") from exc
    else:
        raise ValueError(f"Non-numeric value for '{field_name}': {value!r}")
    if not math.isfinite(number):
        raise ValueError(f"Value for '{field_name}' must be a finite number, got {value!r}")
    return number


def parse_number(value: Any, field_name: str = "value", default: Optional[float] = 0.0) -> Optional[float]:
    """Parse an optional numeric form field.

    Blank values return `default`; anything else must be numeric.
    """
    if is_blank(value):
        return default
    return coerce_numeric(value, field_name)


def missing_fields(form: Mapping[str, Any], required: Iterable[str]) -> List[str]:
    """Return the required field names that are blank in `form`, in order."""
    return [name for name in required if is_blank(form.get(name))]


def require_fields(form: Mapping[str, Any], required: Iterable[str], *, context: str = "form") -> None:
    """Raise ValueError if any required field is blank."""
    missing = missing_fields(form, required)
    if missing:
        log.warning("%s: missing required fields %s", context, missing)
        raise ValueError(f"{context}: missing required field(s): {', '.join(missing)}")


def require_any(form: Mapping[str, Any], fields: Iterable[str], *, context: str = "form") -> None:
    """Raise ValueError unless at least one of `fields` is filled in."""
    names = list(fields)
    if all(is_blank(form.get(name)) for name in names):
        log.warning("%s: no fields filled in", context)
        raise ValueError(f"{context}: enter at least one of: {', '.join(names)}")


def choose(value: str, options: Sequence[str], field_name: str) -> str:
    """Validate a select-box value against its options.

    Unknown values raise a ValueError that suggests the nearest options.
    """
    if value in options:
        return value
    hints = difflib.get_close_matches(str(value), list(options), n=3)
    hint = f" Did you mean: {', '.join(hints)}?" if hints else ""
    raise ValueError(f"Unknown {field_name} {value!r}. Expected one of: {', '.join(options)}.{hint}")


def safe_ratio(numerator: float, denominator: float, default: Optional[float] = 0.0) -> Optional[float]:
    """Divide, returning `default` instead of raising on a zero denominator."""
    if denominator == 0:
        return default
    return numerator / denominator
