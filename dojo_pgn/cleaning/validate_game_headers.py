# ==============================================================================
# validate_game_headers.py
# ------------------------------------------------------------------------------
# Required-tag and date-shape checks applied to a parsed PGN tag block.
#
# Steps:
#   • Every required tag must be present (first missing one is reported)
#   • `Date` must look like YYYY.MM.DD (shape only, no calendar check)
# ==============================================================================

from __future__ import annotations

import re
from typing import Dict, Iterable, Tuple

from dojo_pgn.errors import InvalidDateFormat, MissingRequiredTag

# ------------------------------------------------------------------------------
# Config
# ------------------------------------------------------------------------------

REQUIRED_CREATE_TAGS: Tuple[str, ...] = ("White", "Black", "Date")
REQUIRED_UPDATE_TAGS: Tuple[str, ...] = ("White", "Black")
DATE_RE = re.compile(r"\d{4}\.\d{2}\.\d{2}", re.ASCII)

# ------------------------------------------------------------------------------
# Validators
# ------------------------------------------------------------------------------


def require_tags(headers: Dict[str, str], tags: Iterable[str]) -> None:
    """Raise `MissingRequiredTag` for the first tag absent from `headers`."""
    missing = next((t for t in tags if t not in headers), None)
    if missing is not None:
        raise MissingRequiredTag(missing)


def validate_date(value: str) -> None:
    if not DATE_RE.fullmatch(value):
        raise InvalidDateFormat(value)
