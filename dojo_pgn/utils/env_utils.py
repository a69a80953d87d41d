# ==============================================================================
# env_utils.py  –  Tiny helper for environment-driven settings
#
# Centralizes:
#   • Lichess base URL + API token
#   • HTTP timeout for study downloads
#   • Logging level / file destination
# ==============================================================================

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ROOT_ENV = Path(__file__).resolve().parents[2] / ".env"
load_dotenv(dotenv_path=ROOT_ENV, override=False)  # env values override file

_DEFAULT_LICHESS_URL = "https://lichess.org"


# ------------------------------------------------------------------------------
# Internal helpers
# ------------------------------------------------------------------------------


def _bool_env(var_name: str, default: str = "false") -> bool:
    """Convert TRUE / true / 1 style env vars to bool."""
    return os.getenv(var_name, default).strip().lower() in {"1", "true", "yes"}


# ------------------------------------------------------------------------------
# Public API
# ------------------------------------------------------------------------------


def get_lichess_base_url() -> str:
    """Return the Lichess origin, without a trailing slash."""
    return os.getenv("LICHESS_BASE_URL", _DEFAULT_LICHESS_URL).rstrip("/")


def get_lichess_token() -> Optional[str]:
    """Return the bearer token for Lichess API calls (or None)."""
    return os.getenv("LICHESS_TOKEN")


def get_http_timeout() -> Optional[float]:
    """
    Seconds to wait on Lichess before giving up.

    Unset or blank means no timeout; a study fetch is a single attempt.
    """
    raw = os.getenv("DOJO_PGN_HTTP_TIMEOUT", "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        logging.getLogger(__name__).warning(
            "Ignoring non-numeric DOJO_PGN_HTTP_TIMEOUT=%r", raw
        )
        return None


def get_log_level() -> int:
    """Map DOJO_PGN_LOG_LEVEL (name) to a logging level, INFO by default."""
    name = os.getenv("DOJO_PGN_LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def log_to_file() -> bool:
    return _bool_env("DOJO_PGN_LOG_TO_FILE")


def get_logs_dir() -> Optional[Path]:
    raw = os.getenv("DOJO_PGN_LOGS_DIR")
    return Path(raw) if raw else None
