from __future__ import annotations

"""Read access to `logs/run.log` for the Logs page.

The UI appends to the same log file the CLI runner writes. A marker line is
written when a browser session starts so the page can show only the lines
from the current session.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from aquatools.io_paths import RUN_LOG_FILE

SESSION_MARKER = "UI: session started"


class LogService:
    def __init__(self, log_file: Path = RUN_LOG_FILE) -> None:
        self.log_file = Path(log_file)

    def mark_session_start(self) -> None:
        logging.getLogger("ui").info(SESSION_MARKER)

    def _read(self) -> List[str]:
        if not self.log_file.exists():
            return []
        return self.log_file.read_text(encoding="utf-8", errors="ignore").splitlines()

    @staticmethod
    def _filter(lines: List[str], level: Optional[str], contains: Optional[str]) -> List[str]:
        if level:
            token = f"| {level.upper()} |"
            lines = [ln for ln in lines if token in ln]
        if contains:
            lines = [ln for ln in lines if contains in ln]
        return lines

    def tail_log(self, *, max_lines: int = 200, level: Optional[str] = None, contains: Optional[str] = None) -> List[str]:
        """Return up to the last `max_lines` lines with optional filtering.

        Args:
            max_lines: Maximum number of lines to return from the end of the file.
            level: Optional level filter (DEBUG, INFO, WARNING, ERROR).
            contains: Optional substring filter applied after level filtering.
        """
        lines = self._filter(self._read(), level, contains)
        if max_lines > 0 and len(lines) > max_lines:
            return lines[-max_lines:]
        return lines

    def read_log_full(self, *, level: Optional[str] = None, contains: Optional[str] = None) -> List[str]:
        return self._filter(self._read(), level, contains)

    def read_log_from_last_session(self, *, level: Optional[str] = None, contains: Optional[str] = None) -> List[str]:
        """Return log lines from the last session marker onward (whole file if none)."""
        lines = self._read()
        for i in range(len(lines) - 1, -1, -1):
            if SESSION_MARKER in lines[i]:
                lines = lines[i:]
                break
        return self._filter(lines, level, contains)

    def log_stats(self) -> Dict[str, Any]:
        """Return basic statistics about the log file for UI display."""
        if not self.log_file.exists():
            return {"exists": False}
        st = self.log_file.stat()
        return {
            "exists": True,
            "size_bytes": int(st.st_size),
            "modified_epoch": float(st.st_mtime),
            "path": str(self.log_file),
        }
