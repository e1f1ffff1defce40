# tests/core/test_status_formatter.py
import pytest

from ogs_client.core.status_formatter import (
    game_overview,
    game_result,
    game_status,
    last_move_text,
    player_ranking,
    player_summary,
    whose_turn,
)
from ogs_client.models import Game, GameState, Player
from ogs_client.types import PASS, OriginCoordinate

ALICE, BOB = 1, 2

@pytest.fixture
def game():
    return Game.model_validate({
        "game_id": 42,
        "game_name": "Friendly",
        "phase": "play",
        "width": 19,
        "height": 19,
        "black_player_id": ALICE,
        "white_player_id": BOB,
        "players": {
            "black": {"id": ALICE, "username": "alice", "rank": 31},
            "white": {"id": BOB, "username": "bob", "rank": 25},
        },
        "clock": {"current_player": BOB},
        "moves": [[3, 15, 1200], [15, 3, 900]],
    })

def make_state(**kwargs):
    defaults = {"phase": "play", "move_number": 12, "last_move": OriginCoordinate(3, 15), "player_to_move": BOB}
    defaults.update(kwargs)
    return GameState(**defaults)

@pytest.mark.parametrize("rank, professional, expected", [
    (39, True, "3p"),
    (1037.1, False, "1p"),
    (30.0001, False, "1d"),
    (29.9999, False, "1k"),
    (20, False, "10k"),
    (0.9999, False, "?"),
])
def test_player_ranking(rank, professional, expected):
    assert player_ranking(Player(rank=rank, professional=professional)) == expected

def test_player_summary():
    assert player_summary(Player(username="alice", rank=31)) == "alice[2d]"

def test_status_without_state(game):
    assert game_status(game, None) == "Unknown board state"

def test_status_before_first_move(game):
    assert game_status(game, make_state(move_number=0)) == "Game ready, (B) alice[2d] to start"

def test_status_for_spectator(game):
    assert game_status(game, make_state()) == "12 moves, Black played D4, White's turn"

def test_status_phrased_for_participants(game):
    state = make_state()
    assert game_status(game, state, viewer_id=ALICE) == "12 moves, You played D4, bob's turn"
    assert game_status(game, state, viewer_id=BOB) == "12 moves, alice played D4, your turn"

def test_status_for_outsider_viewer_uses_colors(game):
    assert game_status(game, make_state(), viewer_id=999) == "12 moves, Black played D4, White's turn"

def test_pass_is_rendered_as_passed(game):
    state = make_state(last_move=PASS, player_to_move=ALICE)
    assert last_move_text(game, state) == "passed"
    assert game_status(game, state) == "12 moves, White passed, Black's turn"

def test_off_board_move_falls_back_to_raw_coordinate(game):
    assert last_move_text(game, make_state(last_move=OriginCoordinate(30, 2))) == "played [30,2]"

def test_whose_turn(game):
    assert whose_turn(game, make_state(player_to_move=ALICE)) == "Black's turn"
    assert whose_turn(game, make_state(player_to_move=ALICE), viewer_id=ALICE) == "your turn"

def test_result_is_empty_while_playing(game):
    assert game_result(game, make_state()) == ""

def test_finished_game(game):
    finished = game.model_copy(update={"phase": "finished", "winner_id": BOB})
    state = make_state(phase="finished", outcome="Resignation")
    assert game_result(finished, state) == "(W) bob[5k] won by Resignation"
    assert game_status(finished, state) == "Game has finished, (W) bob[5k] won by Resignation"

def test_result_uses_state_phase_when_game_data_lags(game):
    state = make_state(phase="finished", outcome="B+3.5")
    game = game.model_copy(update={"winner_id": ALICE})
    assert game_result(game, state) == "(B) alice[2d] won by B+3.5"

def test_game_overview(game):
    assert game_overview(game) == '42 "Friendly" (B) alice[2d] vs (W) bob[5k], 2 moves, White to play'

def test_result_without_outcome_uses_placeholder(game):
    finished = game.model_copy(update={"phase": "finished", "winner_id": BOB})
    assert game_result(finished, None) == "(W) bob[5k] won by unknown outcome"
    assert game_result(finished, make_state(phase="finished")) == "(W) bob[5k] won by unknown outcome"
