# tests/services/test_realtime_service.py
from unittest.mock import AsyncMock, MagicMock

import pytest

from ogs_client.services.realtime_service import RealtimeService, game_event
from ogs_client.types import OriginCoordinate

class FakeStream:
    """Records subscriptions and emitted commands."""

    def __init__(self):
        self.handlers = {}
        self.emit = AsyncMock()
        self.close = AsyncMock()

    def on(self, event, handler):
        self.handlers[event] = handler

    def push(self, event, payload):
        self.handlers[event](payload)

@pytest.fixture
def stream():
    return FakeStream()

@pytest.fixture
def service(stream):
    return RealtimeService(stream)

def test_game_event_name():
    assert game_event(123, "move") == "game/123/move"

def test_on_move_decodes_payload(service, stream):
    callback = MagicMock()
    service.on_move(7, callback)
    stream.push("game/7/move", {"game_id": 7, "move_number": 12, "move": [3, 15, 800]})
    received = callback.call_args.args[0]
    assert received.move.coordinate == OriginCoordinate(3, 15)
    assert received.move_number == 12

def test_on_clock_decodes_payload(service, stream):
    callback = MagicMock()
    service.on_clock(7, callback)
    stream.push("game/7/clock", {"current_player": 1, "black_time": 1714564800000})
    assert callback.call_args.args[0].black_time.is_deadline

def test_undecodable_push_is_dropped(service, stream):
    callback = MagicMock()
    service.on_move(7, callback)
    stream.push("game/7/move", {"move": [1]})
    callback.assert_not_called()

@pytest.mark.asyncio
async def test_game_connect_subscribes_to_gamedata(service, stream):
    on_gamedata = MagicMock()
    await service.game_connect(7, 5, on_gamedata=on_gamedata)
    stream.emit.assert_awaited_once_with("game/connect", {"game_id": 7, "player_id": 5, "chat": False})

    stream.push("game/7/gamedata", {"game_id": 7, "phase": "play"})
    assert on_gamedata.call_args.args[0].phase == "play"

@pytest.mark.asyncio
async def test_game_connect_without_gamedata_callback(service, stream):
    await service.game_connect(7, 5)
    assert "game/7/gamedata" not in stream.handlers

@pytest.mark.asyncio
async def test_commands(service, stream):
    await service.authenticate("token")
    await service.game_move(7, 5, OriginCoordinate(3, 15))
    await service.pass_turn(7, 5)
    await service.resign(7)
    await service.game_disconnect(7)

    assert [c.args for c in stream.emit.await_args_list] == [
        ("authenticate", {"jwt": "token"}),
        ("game/move", {"game_id": 7, "player_id": 5, "move": "dp"}),
        ("game/move", {"game_id": 7, "player_id": 5, "move": ".."}),
        ("game/resign", {"game_id": 7}),
        ("game/disconnect", {"game_id": 7}),
    ]

@pytest.mark.asyncio
async def test_disconnect_closes_stream(service, stream):
    await service.disconnect()
    stream.close.assert_awaited_once()
