from __future__ import annotations

"""Logging utilities.

Set up a consistent logging configuration to both console and a file
in the `logs/` directory. The Streamlit app reruns its script on every
interaction, so configuration is applied once per process and later
calls are no-ops.
"""

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_configured = False


def configure_logging(log_dir: Path, debug: bool = False, *, append: bool = False) -> Path:
    """Configure root logging for the application.

    - Creates the log directory if missing
    - Streams logs to both stdout and `logs/run.log`
    - Uses DEBUG level if `debug=True`, otherwise INFO
    - `append=True` keeps earlier sessions in the file (used by the UI)

    Returns the path of the log file.
    """
    global _configured

    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "run.log"
    if _configured:
        logging.getLogger().setLevel(logging.DEBUG if debug else logging.INFO)
        return log_file

    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_file, mode="a" if append else "w", encoding="utf-8"),
        ],
    )
    # Third-party chatter drowns the calculator logs at DEBUG
    for noisy in ("matplotlib", "PIL", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
    _configured = True
    return log_file
