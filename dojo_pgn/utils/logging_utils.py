# ==============================================================================
# logging_utils.py  –  Consistent console (+ optional file) logging
#
# Features:
#   ✔ Console output on stdout (redirect_console moves it, e.g. to stderr)
#   ✔ Timestamped file output when DOJO_PGN_LOG_TO_FILE is set
#   ✔ Idempotent: clears handlers before re-adding
# ==============================================================================

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, TextIO, Union

from dojo_pgn.utils.env_utils import get_log_level, get_logs_dir, log_to_file

# ------------------------------------------------------------------------------
# Constants
# ------------------------------------------------------------------------------

_FMT = "%(asctime)s | %(levelname)-8s | %(message)s"

# Console handlers by logger name, so redirect_console can move them all
_CONSOLE_HANDLERS: Dict[str, logging.StreamHandler] = {}
_console_stream: Optional[TextIO] = None


# ------------------------------------------------------------------------------
# Internal helpers
# ------------------------------------------------------------------------------


def _detect_logs_dir() -> Path:
    """
    Detect where log files should be stored.

    • DOJO_PGN_LOGS_DIR if set
    • otherwise <repo>/logs
    """
    return get_logs_dir() or Path(__file__).resolve().parents[2] / "logs"


def _init_file_handler(
    logs_dir: Path, logger_name: str, fmt: logging.Formatter
) -> Optional[logging.Handler]:
    """
    Create a timestamped FileHandler if directory is writable.
    Falls back to console logging if not.
    """
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        file_path = logs_dir / f"{logger_name}_{timestamp}.log"

        fh = logging.FileHandler(file_path, encoding="utf-8")
        fh.setFormatter(fmt)
        return fh
    except PermissionError:
        logging.getLogger().warning("Cannot write logs to %s", logs_dir)
        return None


# ------------------------------------------------------------------------------
# Public factory
# ------------------------------------------------------------------------------


def setup_logger(
    name: str,
    level: Optional[int] = None,
    logs_dir: Union[str, Path, None] = None,
    to_file: Optional[bool] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Return a fresh `logging.Logger`.

    Parameters
    ----------
    name : str
        Logger name (used in file naming).
    level : int | None
        Logging level (DOJO_PGN_LOG_LEVEL, INFO by default).
    logs_dir : str | Path | None
        Override log directory (default: auto-detect).
    to_file : bool | None
        Force file logging on/off (default: DOJO_PGN_LOG_TO_FILE).
    stream : TextIO | None
        Console stream (default: the redirect_console target, else stdout).
    """
    logger = logging.getLogger(name)
    logger.setLevel(level if level is not None else get_log_level())

    # Clear existing handlers for idempotency
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(_FMT)

    # Console handler
    console = logging.StreamHandler(stream or _console_stream or sys.stdout)
    console.setFormatter(formatter)
    logger.addHandler(console)
    _CONSOLE_HANDLERS[name] = console

    # File handler
    if to_file if to_file is not None else log_to_file():
        target_dir = Path(logs_dir) if logs_dir else _detect_logs_dir()
        file_handler = _init_file_handler(target_dir, name, formatter)
        if file_handler:
            logger.addHandler(file_handler)

    return logger


def redirect_console(stream: TextIO) -> None:
    """
    Point every console handler made by `setup_logger` at *stream*.

    Loggers set up afterwards use *stream* too. The CLI calls this with
    sys.stderr so stdout carries only its JSON output.
    """
    global _console_stream
    _console_stream = stream
    for handler in _CONSOLE_HANDLERS.values():
        handler.setStream(stream)
