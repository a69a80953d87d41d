#!/usr/bin/env python3
# ==============================================================================
#  dojo-pgn - main.py
#  Purpose: one-shot runner for a game import
#           (fetch/read PGN → validate → build records → print JSON)
# ==============================================================================

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from dojo_pgn.db.models import User
from dojo_pgn.errors import ClientInputError, PgnImportError
from dojo_pgn.pipeline.run_import import ImportType, import_games
from dojo_pgn.utils.logging_utils import redirect_console, setup_logger

logger = setup_logger("main")

EXIT_OK = 0
EXIT_CLIENT_ERROR = 1
EXIT_SERVER_ERROR = 2

# ------------------------------------------------------------------------------
# Arguments
# ------------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dojo-pgn",
        description="Build store-ready game records from PGN text or Lichess studies.",
    )
    parser.add_argument(
        "--type",
        dest="import_type",
        choices=[t.value for t in ImportType],
        default=ImportType.MANUAL.value,
    )
    parser.add_argument("--url", help="Lichess study or chapter URL")
    parser.add_argument("--pgn-file", type=Path, help="PGN file for manual imports")
    parser.add_argument("--username", required=True)
    parser.add_argument("--display-name", default="")
    parser.add_argument("--cohort", default="")
    parser.add_argument("--previous-cohort", default="")
    parser.add_argument(
        "--output", type=Path, help="Write the JSON here instead of stdout"
    )
    return parser


# ------------------------------------------------------------------------------
# Entry point
# ------------------------------------------------------------------------------


def main(argv: Optional[Sequence[str]] = None) -> int:
    # stdout carries the JSON items only
    redirect_console(sys.stderr)
    args = _build_parser().parse_args(argv)

    user = User(
        username=args.username,
        display_name=args.display_name,
        dojo_cohort=args.cohort,
        previous_cohort=args.previous_cohort,
    )
    pgn_text = (
        args.pgn_file.read_text(encoding="utf-8") if args.pgn_file else None
    )

    logger.info("Import (%s) – started", args.import_type)
    try:
        games = import_games(user, args.import_type, url=args.url, pgn_text=pgn_text)
    except PgnImportError as exc:
        logger.error("Import (%s) – failed: %s", args.import_type, exc)
        return (
            EXIT_CLIENT_ERROR if isinstance(exc, ClientInputError) else EXIT_SERVER_ERROR
        )

    items: List[dict] = [game.to_item() for game in games]
    if args.output:
        args.output.write_text(json.dumps(items, indent=2), encoding="utf-8")
    else:
        print(json.dumps(items))
    logger.info("Import (%s) – finished, %d game(s)", args.import_type, len(items))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
