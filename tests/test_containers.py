# tests/test_containers.py
from unittest.mock import AsyncMock, MagicMock

import pytest

from ogs_client.client import OgsClient
from ogs_client.config.settings import Settings
from ogs_client.containers import create_client, get_container
from ogs_client.orchestration.game_session import GameSession
from ogs_client.services.rest_service import RestService

@pytest.fixture
def transport():
    return AsyncMock()

@pytest.fixture
def event_stream():
    stream = MagicMock()
    stream.close = AsyncMock()
    return stream

def test_container_wires_client(transport, event_stream):
    settings = Settings(base_url="https://beta.online-go.com")
    container = get_container(transport, event_stream, settings)

    client = container.resolve(OgsClient)
    assert client.settings is settings
    assert client is container.resolve(OgsClient)
    assert client.rest is container.resolve(RestService)

def test_session_shares_services(transport, event_stream):
    client = create_client(transport, event_stream, Settings())
    session = client.session(7, viewer_id=3)
    assert isinstance(session, GameSession)
    assert session.game_id == 7
    assert session.viewer_id == 3

def test_game_url(transport, event_stream):
    client = create_client(transport, event_stream, Settings(base_url="https://online-go.com/"))
    assert client.game_url(12) == "https://online-go.com/game/12"

@pytest.mark.asyncio
async def test_close_disconnects_stream(transport, event_stream):
    client = create_client(transport, event_stream, Settings())
    await client.close()
    event_stream.close.assert_awaited_once()
