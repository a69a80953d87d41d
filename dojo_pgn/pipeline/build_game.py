# ==============================================================================
# build_game.py  –  Turn raw PGN text into store-ready game objects
#
#   build_game         – create path, returns a full GameRecord
#   build_game_update  – update path, returns a GameUpdate delta
#
# Both scan the tag block, check the required tags and add a PlyCount header
# when the PGN lacks one. A PlyCount failure is logged, never fatal.
# ==============================================================================

from __future__ import annotations

import uuid
from typing import Dict

from dojo_pgn.cleaning.validate_game_headers import (
    REQUIRED_CREATE_TAGS,
    REQUIRED_UPDATE_TAGS,
    require_tags,
    validate_date,
)
from dojo_pgn.db.models import NOT_FEATURED, GameRecord, GameUpdate, User
from dojo_pgn.errors import PgnParseError
from dojo_pgn.utils.logging_utils import setup_logger
from dojo_pgn.utils.pgn_parser import add_ply_count, get_headers

LOGGER = setup_logger("build_game")


def _with_ply_count(headers: Dict[str, str], pgn_text: str) -> str:
    """Add a PlyCount header unless one is present; keep the input on failure."""
    if "PlyCount" in headers:
        return pgn_text

    try:
        return add_ply_count(headers, pgn_text)
    except PgnParseError as exc:
        # Log only: a game without PlyCount is still importable
        LOGGER.warning("Failed to add PlyCount header: %s", exc)
        return pgn_text


def build_game(user: User, pgn_text: str) -> GameRecord:
    """
    Validate a single-game PGN and build the record to create.

    Raises
    ------
    MalformedHeader, MissingRequiredTag, InvalidDateFormat, MalformedPgn
    """
    headers = get_headers(pgn_text)
    require_tags(headers, REQUIRED_CREATE_TAGS)

    date = headers["Date"]
    validate_date(date)

    pgn_text = _with_ply_count(headers, pgn_text)

    game = GameRecord(
        cohort=user.dojo_cohort,
        id=f"{date}_{uuid.uuid4()}",
        white=headers["White"].lower(),
        black=headers["Black"].lower(),
        date=date,
        owner=user.username,
        owner_display_name=user.display_name,
        owner_previous_cohort=user.previous_cohort,
        headers=headers,
        is_featured=False,
        featured_at=NOT_FEATURED,
        pgn=pgn_text,
    )
    LOGGER.info("Built game %s for %s", game.id, user.username)
    return game


def build_game_update(pgn_text: str) -> GameUpdate:
    """Validate a replacement PGN and build the fields it changes."""
    headers = get_headers(pgn_text)
    require_tags(headers, REQUIRED_UPDATE_TAGS)

    pgn_text = _with_ply_count(headers, pgn_text)

    return GameUpdate(
        white=headers["White"].lower(),
        black=headers["Black"].lower(),
        headers=headers,
        pgn=pgn_text,
    )
