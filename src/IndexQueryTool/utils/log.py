"""IndexQueryTool logging utilities.

One package logger with a timestamp + abbreviated level prefix. Query results
never go through this logger: they are written to the output sink, while
diagnostics go to stderr and, optionally, to a per-action log file.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Final, TextIO

_LEVEL_ABBREV: Final[dict[int, str]] = {
    logging.DEBUG: "DEBG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERRO",
    logging.CRITICAL: "ERRO",
}

_FORMAT: Final[str] = "%(asctime)s [%(levelabbr)s] %(message)s"
_DATE_FORMAT: Final[str] = "%m-%d %H:%M:%S"


class _AbbrevLevelFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 - record is stdlib name
        record.levelabbr = _LEVEL_ABBREV.get(record.levelno, record.levelname[:4])
        return super().format(record)


log = logging.getLogger("IndexQueryTool")


def log_file_path(log_dir: str | Path, action: str) -> Path:
    """Return a fresh log file path ``<log_dir>/<action>/<action>_<mmddHHMMSS>.log``."""
    timestamp = datetime.now().strftime("%m%d%H%M%S")
    return Path(log_dir) / action / f"{action}_{timestamp}.log"


def configure_logging(
    *,
    level: str = "WARNING",
    action: str | None = None,
    log_to_file: bool = False,
    log_dir: str = "log",
    stream: TextIO | None = None,
) -> Path | None:
    """Configure the IndexQueryTool logger.

    Uses format: mm-dd HH:MM:SS [<LVL>] <message>
    where LVL is one of: DEBG/INFO/WARN/ERRO.

    Args:
        level: Level of the stream handler (e.g., WARNING, DEBUG).
        action: CLI action name used to build the log file path.
        log_to_file: Whether to mirror every record (DEBUG and up) to a file.
        log_dir: Base directory for log files.
        stream: Diagnostic stream; stderr when None.

    Returns:
        Path of the log file, or None when logging to the stream only.
    """
    resolved_level = getattr(logging, (level or "WARNING").upper(), logging.WARNING)
    formatter = _AbbrevLevelFormatter(fmt=_FORMAT, datefmt=_DATE_FORMAT)

    stream_handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    stream_handler.setLevel(resolved_level)
    stream_handler.setFormatter(formatter)
    handlers: list[logging.Handler] = [stream_handler]

    path: Path | None = None
    if log_to_file and action:
        path = log_file_path(log_dir or "log", action)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    for handler in log.handlers:
        handler.close()
    log.handlers.clear()
    for handler in handlers:
        log.addHandler(handler)
    log.setLevel(logging.DEBUG if path is not None else resolved_level)
    log.propagate = False
    return path
