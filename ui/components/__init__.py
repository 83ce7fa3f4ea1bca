"""UI components package for the Streamlit application.

Each page is a class inheriting from `BaseComponent` with a `render()`
method, plus a module-level `render_*` function the app calls.
Form-driven calculators share `CalculatorPage`; tools that keep records or
need custom widgets have their own tab module.
"""

from .base_component import BaseComponent  # re-export for convenience

__all__ = [
    "BaseComponent",
]
