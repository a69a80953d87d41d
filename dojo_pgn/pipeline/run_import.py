# ==============================================================================
# run_import.py  –  Entry point for game imports
#   Dispatches on the import type:
#     lichessChapter → one chapter URL
#     lichessStudy   → every chapter of a study URL
#     manual         → PGN text pasted by the user
# ==============================================================================

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Union

from dojo_pgn.db.models import GameRecord, User
from dojo_pgn.errors import InvalidImportRequest, PgnImportError
from dojo_pgn.ingestion.lichess_study import get_lichess_chapter, get_lichess_study
from dojo_pgn.pipeline.build_game import build_game
from dojo_pgn.utils.logging_utils import setup_logger

LOGGER = setup_logger("run_import")


class ImportType(str, Enum):
    LICHESS_CHAPTER = "lichessChapter"
    LICHESS_STUDY = "lichessStudy"
    MANUAL = "manual"


def _parse_import_type(value: Union[ImportType, str]) -> ImportType:
    try:
        return ImportType(value)
    except ValueError:
        raise InvalidImportRequest(
            f"Invalid request: type `{value}` not supported"
        ) from None


def import_games(
    user: User,
    import_type: Union[ImportType, str],
    url: Optional[str] = None,
    pgn_text: Optional[str] = None,
) -> List[GameRecord]:
    """
    Build the game records for one import request.

    A study import is all-or-nothing: the first chapter that fails aborts it.
    """
    kind = _parse_import_type(import_type)

    if kind is ImportType.MANUAL:
        if not pgn_text:
            raise InvalidImportRequest("Invalid request: pgnText is required")
        return [build_game(user, pgn_text)]

    if not url:
        raise InvalidImportRequest(f"Invalid request: url is required for {kind.value}")

    if kind is ImportType.LICHESS_CHAPTER:
        return [build_game(user, get_lichess_chapter(url))]

    games: List[GameRecord] = []
    for i, pgn in enumerate(get_lichess_study(url), start=1):
        try:
            games.append(build_game(user, pgn))
        except PgnImportError as exc:
            LOGGER.error("Chapter %d of %s rejected – %s", i, url, exc)
            raise
    return games
