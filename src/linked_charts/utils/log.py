"""Diagnostic log for the chart session.

Entries are appended to a plain text file; a failed write is dropped so a
broken log never takes a redraw down with it.
"""

import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

DEFAULT_LOG_PATH = Path.home() / "linked_charts.log"
MAX_MESSAGE_LEN = 800


def _one_line(value: Any, max_len: int = MAX_MESSAGE_LEN) -> str:
    text = str(value).replace("\r", "\\r").replace("\n", "\\n")
    if len(text) > max_len:
        return text[: max_len - 3] + "..."
    return text


def _header(context: str) -> str:
    return f"{datetime.now().isoformat(timespec='seconds')}  |  {context}"


def _append(text: str, log_path: Optional[Path]) -> bool:
    try:
        with open(log_path or DEFAULT_LOG_PATH, "a", encoding="utf-8") as f:
            f.write(text)
    except OSError:
        return False
    return True


def log_event(context: str, message: Any, log_path: Optional[Path] = None) -> bool:
    """One line per event, e.g. a rejected dropdown value."""
    return _append(f"{_header(context)}  |  {_one_line(message)}\n", log_path)


def log_exception(context: str, log_path: Optional[Path] = None) -> bool:
    """The exception being handled, with its traceback, under ``context``."""
    return _append(f"{_header(context)}\n{traceback.format_exc()}\n", log_path)
