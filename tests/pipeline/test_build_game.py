# ==============================================================================
# test_build_game.py  –  Create/update paths of the game builder
# ==============================================================================

import logging
import uuid
from unittest.mock import patch

import pytest

from dojo_pgn.db.models import NOT_FEATURED, User
from dojo_pgn.errors import (
    InvalidDateFormat,
    MalformedHeader,
    MalformedPgn,
    MissingRequiredTag,
)
from dojo_pgn.pipeline.build_game import build_game, build_game_update

OWNER = User(
    username="bob123",
    display_name="Bob",
    dojo_cohort="0-300",
    previous_cohort="",
)

SCENARIO_PGN = '[White "Alice"]\n[Black "Bob"]\n[Date "2024.01.02"]\n\n1. e4 e5 2. Nf3 *'


# --- build_game --- #
def test_build_game_scenario():
    game = build_game(OWNER, SCENARIO_PGN)

    assert game.white == "alice"
    assert game.black == "bob"
    assert game.date == "2024.01.02"
    assert game.id.startswith("2024.01.02_")
    assert game.cohort == "0-300"
    assert game.owner == "bob123"
    assert game.owner_display_name == "Bob"
    assert game.owner_previous_cohort == ""
    assert game.is_featured is False
    assert game.featured_at == NOT_FEATURED

    # start position + e4, e5, Nf3
    assert game.headers["PlyCount"] == "4"
    assert game.pgn == (
        '[White "Alice"]\n[Black "Bob"]\n[Date "2024.01.02"]\n'
        '[PlyCount "4"]\n\n1. e4 e5 2. Nf3 *'
    )


def test_build_game_id_is_date_plus_uuid():
    game = build_game(OWNER, SCENARIO_PGN)

    date, _, suffix = game.id.partition("_")
    assert date == "2024.01.02"
    assert str(uuid.UUID(suffix)) == suffix


def test_build_game_ids_are_unique():
    ids = {build_game(OWNER, SCENARIO_PGN).id for _ in range(20)}
    assert len(ids) == 20


def test_build_game_ids_sort_by_date():
    older = build_game(OWNER, SCENARIO_PGN.replace("2024.01.02", "2023.12.31"))
    newer = build_game(OWNER, SCENARIO_PGN)
    assert older.id < newer.id


def test_build_game_keeps_header_order():
    pgn = (
        '[Event "Club"]\n[Date "2024.01.02"]\n[Black "Bob"]\n[White "Alice"]\n'
        "\n1. d4 *"
    )
    game = build_game(OWNER, pgn)
    assert list(game.headers) == ["Event", "Date", "Black", "White", "PlyCount"]


@pytest.mark.parametrize("missing", ["White", "Black", "Date"])
def test_build_game_missing_required_tag(missing):
    lines = [
        line for line in SCENARIO_PGN.split("\n") if not line.startswith(f"[{missing} ")
    ]
    with pytest.raises(MissingRequiredTag) as exc_info:
        build_game(OWNER, "\n".join(lines))
    assert exc_info.value.tag == missing


@pytest.mark.parametrize("date", ["2024-01-02", "2024.1.2", "????.??.??", "02.01.2024"])
def test_build_game_invalid_date(date):
    with pytest.raises(InvalidDateFormat):
        build_game(OWNER, SCENARIO_PGN.replace("2024.01.02", date))


def test_build_game_accepts_impossible_calendar_date():
    game = build_game(OWNER, SCENARIO_PGN.replace("2024.01.02", "2024.13.45"))
    assert game.id.startswith("2024.13.45_")


def test_build_game_malformed_header():
    with pytest.raises(MalformedHeader):
        build_game(OWNER, '[White"Alice"]\n[Black "Bob"]\n[Date "2024.01.02"]\n\n*')


def test_build_game_existing_ply_count_is_kept():
    pgn = SCENARIO_PGN.replace('[Date "2024.01.02"]', '[Date "2024.01.02"]\n[PlyCount "99"]')

    with patch("dojo_pgn.pipeline.build_game.add_ply_count") as mock_add:
        game = build_game(OWNER, pgn)

    mock_add.assert_not_called()
    assert game.headers["PlyCount"] == "99"
    assert game.pgn == pgn


def test_build_game_ply_count_failure_is_not_fatal(caplog):
    pgn = '[White "Alice"]\n[Black "Bob"]\n[Date "2024.01.02"]\n\n1. e4 e5 2. Ke3 *'

    with caplog.at_level(logging.WARNING):
        game = build_game(OWNER, pgn)

    assert game.pgn == pgn
    assert "PlyCount" not in game.headers
    assert "Failed to add PlyCount header" in caplog.text


def test_build_game_without_blank_line_is_rejected():
    pgn = '[White "Alice"]\n[Black "Bob"]\n[Date "2024.01.02"]\n1. e4 *'
    with pytest.raises(MalformedPgn):
        build_game(OWNER, pgn)


def test_build_game_blank_line_only_in_movetext_is_rejected():
    pgn = '[White "A"]\n[Black "B"]\n[Date "2024.01.02"]\n1. e4 e5\n\n2. Nf3 *'
    with pytest.raises(MalformedPgn):
        build_game(OWNER, pgn)


def test_build_game_record_is_frozen():
    game = build_game(OWNER, SCENARIO_PGN)
    with pytest.raises(AttributeError):
        game.white = "carol"


# --- build_game_update --- #
def test_build_game_update():
    update = build_game_update(SCENARIO_PGN)

    assert update.white == "alice"
    assert update.black == "bob"
    assert update.headers["PlyCount"] == "4"
    assert '[PlyCount "4"]' in update.pgn


def test_build_game_update_does_not_need_date():
    update = build_game_update('[White "A"]\n[Black "B"]\n\n1. e4 *')
    assert "Date" not in update.headers
    assert update.headers["PlyCount"] == "2"


def test_build_game_update_ignores_bad_date():
    update = build_game_update(SCENARIO_PGN.replace("2024.01.02", "sometime"))
    assert update.headers["Date"] == "sometime"


@pytest.mark.parametrize("missing", ["White", "Black"])
def test_build_game_update_missing_player(missing):
    lines = [
        line for line in SCENARIO_PGN.split("\n") if not line.startswith(f"[{missing} ")
    ]
    with pytest.raises(MissingRequiredTag):
        build_game_update("\n".join(lines))


def test_build_game_update_existing_ply_count_is_kept():
    pgn = '[White "A"]\n[Black "B"]\n[PlyCount "7"]\n\n1. e4 *'

    with patch("dojo_pgn.pipeline.build_game.add_ply_count") as mock_add:
        update = build_game_update(pgn)

    mock_add.assert_not_called()
    assert update.pgn == pgn
