from __future__ import annotations

"""Validation helpers for UI input fields.

Keeps the checks that decide whether a Calculate button is enabled local to
the UI; full validation happens in each calculator's `from_form`, whose
ValueError the page reports.
"""

from typing import Any, List, Mapping, Sequence, Tuple

from aquatools.forms import is_blank, missing_fields


class ValidationService:
    """Readiness checks for the Calculate button."""

    def missing(self, form: Mapping[str, Any], required: Sequence[str]) -> List[str]:
        return missing_fields(form, required)

    def ready(self, form: Mapping[str, Any], required: Sequence[str], any_of: Sequence[str] = ()) -> Tuple[bool, str]:
        """Whether a form can be submitted, and a hint when it cannot."""
        missing = self.missing(form, required)
        if missing:
            return False, "Fill in: " + ", ".join(missing)
        if any_of and all(is_blank(form.get(k)) for k in any_of):
            return False, "Enter at least one reading"
        return True, ""
