# ogs_client/client.py
"""
The top-level entry point of the library.

`OgsClient` bundles the REST and realtime services with the settings they
share and hands out `GameSession`s. It is normally obtained from the DI
container in `ogs_client.containers` rather than built by hand.
"""

from typing import Optional

import structlog

from ogs_client.config.settings import Settings
from ogs_client.orchestration.game_session import GameSession
from ogs_client.services.realtime_service import RealtimeService
from ogs_client.services.rest_service import RestService
from ogs_client.types import GameID, PlayerID

logger = structlog.get_logger(__name__)


class OgsClient:
    """Facade over the REST and realtime services."""

    def __init__(self, rest: RestService, realtime: RealtimeService, settings: Settings):
        self.rest = rest
        self.realtime = realtime
        self.settings = settings

    def session(self, game_id: GameID, viewer_id: Optional[PlayerID] = None) -> GameSession:
        """Creates a session following `game_id`. Call `start()` on it to begin."""
        return GameSession(game_id, self.rest, self.realtime, self.settings, viewer_id=viewer_id)

    def game_url(self, game_id: GameID) -> str:
        return f"{self.settings.base_url.rstrip('/')}/game/{game_id}"

    async def close(self) -> None:
        """Closes the realtime connection."""
        logger.info("Closing OGS client.")
        await self.realtime.disconnect()
