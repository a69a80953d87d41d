# ==============================================================================
# pgn_parser.py  –  Utility for reading PGN tag-pairs and movetext
#
#   • get_headers    – ordered `[Key "Value"]` block at the top of a PGN
#   • count_plies    – main-line positions of a single game (python-chess)
#   • add_ply_count  – insert a `[PlyCount "n"]` line at the end of the headers
# ==============================================================================

from __future__ import annotations

import io
from typing import Dict, List

import chess.pgn

from dojo_pgn.errors import MalformedHeader, MalformedPgn, PgnParseError

_VALUE_DELIMITER = ' "'


def _strip_cr(raw_line: str) -> str:
    return raw_line[:-1] if raw_line.endswith("\r") else raw_line


def _is_header_line(line: str) -> bool:
    return line.startswith("[") and line.endswith('"]')


def _count_header_lines(lines: List[str]) -> int:
    """Number of leading lines that make up the tag-pair block."""
    count = 0
    for raw_line in lines:
        if not _is_header_line(_strip_cr(raw_line)):
            break
        count += 1
    return count


def get_headers(pgn_text: str) -> Dict[str, str]:
    """
    Parse the leading tag-pair block of a PGN.

    Parameters
    ----------
    pgn_text : str
        Raw PGN text of a single game.

    Returns
    -------
    Dict[str, str]
        Tag name → value, in the order the tags first appear. A repeated tag
        keeps its first position and takes the last value.

    Raises
    ------
    MalformedHeader
        A line looks like a header but has no ``" "`` between key and value.
    """
    headers: Dict[str, str] = {}

    for raw_line in pgn_text.split("\n"):
        line = _strip_cr(raw_line)
        if not _is_header_line(line):
            break

        # Example: [Result "1-0"] → key='Result', value='1-0'
        value_index = line.find(_VALUE_DELIMITER)
        if value_index < 0:
            raise MalformedHeader(line)

        key = line[1:value_index]
        headers[key] = line[value_index + 2 : -2]

    return headers


def count_plies(pgn_text: str) -> int:
    """
    Count the plies of a single game, as the PlyCount tag is written here.

    Every position on the main line is counted, the starting one included,
    so `1. e4 e5 2. Nf3` gives 4 and a game without moves gives 1. Move
    numbers, comments, NAGs and side variations are ignored.

    Raises
    ------
    PgnParseError
        No game could be read, or python-chess reported an error in it.
    """
    try:
        game = chess.pgn.read_game(io.StringIO(pgn_text))
    except ValueError as exc:
        raise PgnParseError("Failed to parse PGN text", str(exc)) from exc

    if game is None:
        raise PgnParseError("Failed to parse PGN text", "no game found")
    if game.errors:
        raise PgnParseError("Failed to parse PGN text", str(game.errors[0]))

    # root node + one node per main-line move
    return 1 + sum(1 for _ in game.mainline())


def add_ply_count(headers: Dict[str, str], pgn_text: str) -> str:
    """
    Return `pgn_text` with a `[PlyCount "n"]` header appended to its tag block.

    The new line goes right after the last tag-pair line, which must be
    followed by a blank line; nothing else in the text changes. `headers`
    gains a ``PlyCount`` entry only when the rewrite succeeds.

    Raises
    ------
    PgnParseError
        The movetext could not be parsed.
    MalformedPgn
        The tag-pair block is missing or not followed by a blank line.
    """
    plies = count_plies(pgn_text)

    lines = pgn_text.split("\n")
    n_headers = _count_header_lines(lines)
    if n_headers == 0 or n_headers == len(lines) or _strip_cr(lines[n_headers]):
        raise MalformedPgn(
            "Invalid request: PGN headers must be followed by a blank line",
            "failed to find PGN header end",
        )

    # index of the "\n" closing the last tag-pair line
    end = sum(len(line) + 1 for line in lines[:n_headers]) - 1
    newline = "\n"
    if lines[n_headers - 1].endswith("\r"):
        end -= 1
        newline = "\r\n"

    headers["PlyCount"] = str(plies)
    return f'{pgn_text[:end]}{newline}[PlyCount "{plies}"]{pgn_text[end:]}'
