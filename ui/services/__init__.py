"""Service layer for the UI.

These services encapsulate log file access, validation, and calculator
execution so UI components can remain thin and focused on presentation.
"""

from .log_service import LogService
from .tool_service import ToolService
from .validation_service import ValidationService

__all__ = [
    "LogService",
    "ToolService",
    "ValidationService",
]
