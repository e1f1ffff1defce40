# ogs_client/services/rest_service.py
"""
Provides a service for the request/response side of the OGS API.

This module contains the `RestService`, a thin adapter between the library
and an injected `Transport`. It builds the endpoint URIs, retries transient
transport failures, decodes response bodies into wire models and validates
board shapes. It also keeps the one piece of REST data that never changes
during a game, its time control, in a per-game cache.
"""

import time
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, TYPE_CHECKING

import structlog
from pydantic import BaseModel

from ogs_client.exceptions import BoardValidationError
from ogs_client.models import Game, GameState, Overview, TimeControl, User, decode_payload
from ogs_client.tracing import trace_call
from ogs_client.types import GameID, Transport
from ogs_client.utils import metrics
from ogs_client.utils.retry import retry_from_settings

if TYPE_CHECKING:
    from ogs_client.config.settings import Settings

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

ME_URI = "/api/v1/me"
OVERVIEW_URI = "/api/v1/ui/overview"
GAME_URI = "/api/v1/games/{game_id}"
GAME_STATE_URI = "/termination-api/game/{game_id}/state"


class _GameEnvelope(BaseModel):
    # /api/v1/games/:id nests the game data; the termination API equivalent
    # does not work for private games.
    gamedata: Game


class RestService:
    """An async service exposing the OGS REST queries the library needs."""

    def __init__(self, transport: Transport, settings: "Settings"):
        """
        Initializes the RestService.

        Args:
            transport: An object conforming to the `Transport` protocol.
            settings: Library settings; the retry policy and board limits are read from it.
        """
        self._transport = transport
        self._settings = settings
        self._time_controls: Dict[GameID, TimeControl] = {}

    async def _get(
        self, endpoint: str, uri: str, model: Type[ModelT], params: Optional[Mapping[str, Any]] = None
    ) -> ModelT:
        """Fetches `uri` with retries and decodes the body into `model`."""
        fetch = retry_from_settings(self._settings.retry, operation=endpoint)(self._transport.get)
        started = time.perf_counter()
        try:
            body = await fetch(uri, params)
            result = decode_payload(model, body)
        except Exception:
            metrics.API_REQUESTS_TOTAL.labels(endpoint=endpoint, outcome="error").inc()
            logger.warning("REST request failed.", endpoint=endpoint, uri=uri, exc_info=True)
            raise
        finally:
            metrics.API_REQUEST_DURATION_SECONDS.labels(endpoint=endpoint).observe(time.perf_counter() - started)
        metrics.API_REQUESTS_TOTAL.labels(endpoint=endpoint, outcome="ok").inc()
        return result

    @trace_call
    async def about_me(self) -> User:
        """Returns the profile of the authenticated user."""
        return await self._get("me", ME_URI, User)

    @trace_call
    async def overview(self) -> Overview:
        """Returns the user's active games."""
        return await self._get("overview", OVERVIEW_URI, Overview)

    @trace_call
    async def game(self, game_id: GameID) -> Game:
        """
        Fetches the general, mostly static information of a game.

        The time control is cached as a side effect, so a later
        `time_control` call for the same game does not hit the network.

        Raises:
            BoardValidationError: If the board is empty or not square.
        """
        envelope = await self._get("game", GAME_URI.format(game_id=game_id), _GameEnvelope)
        game = envelope.gamedata
        if game.height <= 0 or game.width <= 0 or game.height != game.width:
            raise BoardValidationError(f"invalid Board dimension {game.width} x {game.height}")
        self._time_controls.setdefault(game_id, game.time_control)
        return game

    @trace_call
    async def game_state(self, game_id: GameID) -> GameState:
        """
        Fetches the current board of a game.

        Raises:
            BoardValidationError: If the board is empty, not square or larger
                than the notation can address.
        """
        state = await self._get("game_state", GAME_STATE_URI.format(game_id=game_id), GameState)
        if not state.board or not state.board[0]:
            raise BoardValidationError("invalid empty Board")
        rows, cols = len(state.board), len(state.board[0])
        if rows != cols or rows > self._settings.max_board_size:
            raise BoardValidationError(f"invalid Board dimension {rows} x {cols}")
        return state

    async def time_control(self, game_id: GameID) -> TimeControl:
        """Returns the game's time control, fetching the game only on the first call."""
        if (cached := self._time_controls.get(game_id)) is not None:
            metrics.TIME_CONTROL_CACHE_TOTAL.labels(result="hit").inc()
            return cached
        metrics.TIME_CONTROL_CACHE_TOTAL.labels(result="miss").inc()
        game = await self.game(game_id)
        return self._time_controls.setdefault(game_id, game.time_control)

    def forget(self, game_id: GameID) -> None:
        """Drops cached data of a game that is no longer followed."""
        self._time_controls.pop(game_id, None)
