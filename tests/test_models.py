# tests/test_models.py
import json
from datetime import datetime, timezone

import pytest

from ogs_client.exceptions import DecodeError
from ogs_client.models import (
    Clock,
    Game,
    GameMove,
    GameState,
    Overview,
    PlayerTime,
    TimeControl,
    User,
    decode_payload,
    parse_timestamp,
)
from ogs_client.types import PASS, Color, OriginCoordinate, TimeSystem

def test_parse_timestamp_seconds_and_milliseconds():
    expected = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
    assert parse_timestamp(1714564800) == expected
    assert parse_timestamp(1714564800000) == expected
    assert parse_timestamp(1714564800.0) == expected

@pytest.mark.parametrize("value", ["1714564800", True, None, [1]])
def test_parse_timestamp_rejects_non_numbers(value):
    with pytest.raises(ValueError):
        parse_timestamp(value)

def test_player_time_structured_record():
    pt = PlayerTime.model_validate({"thinking_time": 120.5, "periods": 3, "period_time": 30})
    assert not pt.is_deadline
    assert pt.thinking_time == 120.5
    assert pt.periods == 3

def test_player_time_bare_timestamp():
    pt = PlayerTime.model_validate(1714564800000)
    assert pt.is_deadline
    assert pt.value == datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
    assert pt.thinking_time == 0

def test_clock_decodes_from_json():
    payload = json.dumps({
        "game_id": 7,
        "current_player": 1,
        "black_player_id": 1,
        "white_player_id": 2,
        "black_time": {"thinking_time": 50, "skip_bonus": False},
        "white_time": 1714564800000,
        "last_move": 1714564790000,
        "now": 1714564800000,
    })
    clock = decode_payload(Clock, payload)
    assert clock.player_time(1).thinking_time == 50
    assert clock.player_time(2).is_deadline
    assert clock.player_time(3) is None
    assert clock.taken_at == datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)

def test_clock_taken_at_falls_back_to_last_move():
    clock = Clock.model_validate({"last_move": 1714564790})
    assert clock.taken_at == datetime(2024, 5, 1, 11, 59, 50, tzinfo=timezone.utc)

def test_move_array_decoding():
    message = GameMove.model_validate({"game_id": 7, "move_number": 3, "move": [3, 15, 1234.5, None]})
    assert message.move.coordinate == OriginCoordinate(3, 15)
    assert message.move.time_delta == 1234.5

@pytest.mark.parametrize("move", [[3, 15], ["a", 1, 0], [1.5, 2, 0]])
def test_move_array_rejects_malformed(move):
    with pytest.raises(DecodeError):
        decode_payload(GameMove, {"move": move})

def test_user_ratings_drop_version():
    user = User.model_validate({
        "id": 5,
        "username": "alice",
        "ratings": {
            "version": 5,
            "overall": {"rating": 1500, "deviation": 60, "volatility": 0.06, "games_played": 12},
        },
    })
    assert list(user.ratings) == ["overall"]
    assert user.ratings["overall"].games_played == 12

def test_time_control_discipline():
    assert TimeControl(system="Byoyomi").discipline == TimeSystem.BYOYOMI
    assert TimeControl(system="none").discipline is None

def test_game_state_defaults_to_pass():
    state = GameState.model_validate({"board": [[0, 0], [0, 0]]})
    assert state.last_move == PASS
    assert state.board_size == 2

def test_game_state_last_move_object():
    state = GameState.model_validate({"last_move": {"x": 3, "y": 4}, "player_to_move": 9})
    assert state.last_move == OriginCoordinate(3, 4)
    assert state.is_my_turn(9)

def test_game_player_helpers():
    game = Game.model_validate({
        "game_id": 11,
        "height": 9,
        "width": 9,
        "winner": 2,
        "players": {"black": {"id": 1, "username": "alice"}, "white": {"id": 2, "username": "bob"}},
        "player_pool": {"1": {"id": 1, "username": "alice"}},
        "clock": {"current_player": 1},
    })
    assert game.winner_id == 2
    assert game.board_size == 9
    assert game.black_id == 1 and game.white_id == 2
    assert game.color_of(2) == Color.WHITE
    assert game.color_of(3) is None
    assert game.opponent(1).username == "bob"
    assert game.player_by_id(2).username == "bob"
    assert game.is_my_game(1)
    assert not game.is_my_game(3)
    assert game.is_my_turn(1)
    assert game.url("https://online-go.com/") == "https://online-go.com/game/11"

def test_overview_nests_game_under_json():
    overview = Overview.model_validate({"active_games": [{"json": {"game_id": 3, "phase": "play"}}]})
    assert overview.active_games[0].game.game_id == 3

def test_decode_payload_reports_model_name():
    with pytest.raises(DecodeError) as exc_info:
        decode_payload(Clock, b"{not json")
    assert exc_info.value.model == "Clock"
    assert exc_info.value.errors
