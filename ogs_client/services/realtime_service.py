# ogs_client/services/realtime_service.py
"""
Provides a service for the realtime (socket.io) side of the OGS API.

The `RealtimeService` wraps an injected `EventStream`. It knows the event
names and command payloads of the realtime protocol, decodes pushed payloads
into wire models before handing them to callbacks, and drops pushes that do
not decode instead of letting them crash the stream's dispatch loop.
"""

from typing import Any, Callable, Dict, Optional, Type, TypeVar

import structlog
from pydantic import BaseModel

from ogs_client.core.coordinates import encode_sgf_move
from ogs_client.exceptions import DecodeError
from ogs_client.models import Clock, Game, GameMove, decode_payload
from ogs_client.types import PASS, EventStream, GameID, OriginCoordinate, PlayerID
from ogs_client.utils import metrics

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def game_event(game_id: GameID, kind: str) -> str:
    """Returns the event name of a per-game push, e.g. "game/123/move"."""
    return f"game/{game_id}/{kind}"


class RealtimeService:
    """An async adapter that subscribes to game events and emits game commands."""

    def __init__(self, stream: EventStream):
        """
        Initializes the RealtimeService.

        Args:
            stream: An object conforming to the `EventStream` protocol, already connected.
        """
        self._stream = stream

    def _subscribe(
        self, game_id: GameID, kind: str, model: Type[ModelT], callback: Callable[[ModelT], None]
    ) -> None:
        event = game_event(game_id, kind)

        def handler(payload: Any) -> None:
            metrics.EVENTS_RECEIVED_TOTAL.labels(kind=kind).inc()
            try:
                decoded = decode_payload(model, payload)
            except DecodeError as e:
                metrics.EVENT_DECODE_ERRORS_TOTAL.labels(kind=kind).inc()
                logger.warning("Dropping undecodable realtime push.", event=event, error=str(e))
                return
            callback(decoded)

        self._stream.on(event, handler)
        logger.debug("Subscribed to realtime event.", event=event)

    async def _emit(self, command: str, payload: Dict[str, Any]) -> None:
        logger.debug("Emitting realtime command.", command=command, game_id=payload.get("game_id"))
        await self._stream.emit(command, payload)
        metrics.COMMANDS_SENT_TOTAL.labels(command=command).inc()

    async def authenticate(self, jwt: str) -> None:
        """Authenticates the socket; chat and notification channels are joined implicitly."""
        await self._emit("authenticate", {"jwt": jwt})

    async def game_connect(
        self, game_id: GameID, player_id: PlayerID, on_gamedata: Optional[Callable[[Game], None]] = None
    ) -> None:
        """Starts receiving a game's events, optionally watching its game data pushes."""
        if on_gamedata is not None:
            self._subscribe(game_id, "gamedata", Game, on_gamedata)
        await self._emit("game/connect", {"game_id": game_id, "player_id": player_id, "chat": False})

    async def game_disconnect(self, game_id: GameID) -> None:
        await self._emit("game/disconnect", {"game_id": game_id})

    def on_move(self, game_id: GameID, callback: Callable[[GameMove], None]) -> None:
        """Watches moves played in a game (`game_connect` must be called too)."""
        self._subscribe(game_id, "move", GameMove, callback)

    def on_clock(self, game_id: GameID, callback: Callable[[Clock], None]) -> None:
        """Watches clock snapshots pushed for a game."""
        self._subscribe(game_id, "clock", Clock, callback)

    async def game_move(self, game_id: GameID, player_id: PlayerID, coord: OriginCoordinate) -> None:
        """Submits a move. The server answers with a move push, or nothing if the move is illegal."""
        await self._emit(
            "game/move", {"game_id": game_id, "player_id": player_id, "move": encode_sgf_move(coord)}
        )

    async def pass_turn(self, game_id: GameID, player_id: PlayerID) -> None:
        await self.game_move(game_id, player_id, PASS)

    async def resign(self, game_id: GameID) -> None:
        await self._emit("game/resign", {"game_id": game_id})

    async def disconnect(self) -> None:
        await self._stream.close()
