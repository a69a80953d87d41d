# ==============================================================================
# lichess_study.py
# ------------------------------------------------------------------------------
# Downloads the source PGN of a Lichess study (or one of its chapters) and
# splits multi-chapter dumps into one PGN per game.
#
# Execution flow:
#   1. Check the URL shape (chapter: /study/<id>/<id>, study: /study/<id>)
#   2. GET <url>.pgn?source=true through a shared requests.Session
#   3. Non-200 → StudyNotFound (private or missing study)
#   4. Study dumps are split on the blank-lines-then-"[" separator
# ==============================================================================

from __future__ import annotations

import re
from typing import Final, List

import requests

from dojo_pgn.errors import (
    InvalidStudyUrl,
    StudyEncodingError,
    StudyFetchError,
    StudyNotFound,
)
from dojo_pgn.utils.env_utils import (
    get_http_timeout,
    get_lichess_base_url,
    get_lichess_token,
)
from dojo_pgn.utils.logging_utils import setup_logger

LOGGER = setup_logger("lichess_study")

GAME_SEPARATOR: Final[str] = "\n\n\n["
_STUDY_ID: Final[str] = "[A-Za-z0-9]{8}"

# ------------------------------------------------------------------------------
# Lichess API session
# ------------------------------------------------------------------------------

HTTP = requests.Session()
if get_lichess_token():
    HTTP.headers.update({"Authorization": f"Bearer {get_lichess_token()}"})

# ==============================================================================
# Public entry points
# ==============================================================================


def get_lichess_chapter(url: str) -> str:
    """Return the PGN of a single study chapter (`…/study/<id>/<id>`)."""
    if not _chapter_url_re().fullmatch(url):
        raise InvalidStudyUrl(url, "chapter")

    return _fetch_lichess_study(url)


def get_lichess_study(url: str) -> List[str]:
    """Return one PGN per chapter of a whole study (`…/study/<id>`)."""
    if not _study_url_re().fullmatch(url):
        raise InvalidStudyUrl(url, "study")

    all_pgns = _fetch_lichess_study(url)
    LOGGER.debug("PGN data before splitting: %s", all_pgns)

    games = split_study_pgn(all_pgns)
    LOGGER.info("Study %s split into %d game(s)", url, len(games))
    return games


def split_study_pgn(text: str) -> List[str]:
    """
    Split a multi-game dump into single-game PGN texts.

    Games are separated by two blank lines followed by the next game's first
    header. The `[` eaten by the split is put back on every fragment after the
    first; fragments are trimmed and empty ones dropped.
    """
    result: List[str] = []
    for i, fragment in enumerate(text.split(GAME_SEPARATOR)):
        fragment = fragment.strip()
        if not fragment:
            continue
        result.append(fragment if i == 0 else f"[{fragment}")
    return result


# ==============================================================================
# Helpers
# ==============================================================================


def _study_url_re() -> re.Pattern:
    base = re.escape(get_lichess_base_url())
    return re.compile(f"{base}/study/{_STUDY_ID}")


def _chapter_url_re() -> re.Pattern:
    base = re.escape(get_lichess_base_url())
    return re.compile(f"{base}/study/{_STUDY_ID}/{_STUDY_ID}")


def _fetch_lichess_study(url: str) -> str:
    """Single GET of the study source PGN; no retries."""
    LOGGER.info("Fetching %s", url)
    try:
        resp = HTTP.get(
            f"{url}.pgn", params={"source": "true"}, timeout=get_http_timeout()
        )
    except requests.RequestException as exc:
        LOGGER.error("Request to %s failed – %s", url, exc)
        raise StudyFetchError(url, exc) from exc

    if resp.status_code != 200:
        LOGGER.warning("Lichess returned %s for %s", resp.status_code, url)
        raise StudyNotFound(url, resp.status_code)

    try:
        return resp.content.decode("utf-8")
    except UnicodeDecodeError as exc:
        LOGGER.warning("Study %s is not valid UTF-8 – %s", url, exc)
        raise StudyEncodingError(url, exc) from exc
