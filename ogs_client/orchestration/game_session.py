# ogs_client/orchestration/game_session.py
"""
Follows a single game and renders its status and clocks on demand.

A `GameSession` is the only stateful piece of the library. It keeps the most
recent game data, board state and clock snapshot of one game, each replaced
wholesale whenever the server pushes or a poll returns a newer one. Rendering
reads a consistent set of snapshots under a lock and hands them to the pure
core functions, which never see a snapshot change underneath them.
"""

import asyncio
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Set, TYPE_CHECKING

import structlog

from ogs_client.core.clock_engine import compute_clock
from ogs_client.core.clock_format import render_clock
from ogs_client.core.status_formatter import FINISHED_PHASE, UNKNOWN_STATE_TEXT, game_result, game_status
from ogs_client.types import ComputedClock, GameID, PlayerID

if TYPE_CHECKING:
    from ogs_client.config.settings import Settings
    from ogs_client.models import Clock, Game, GameMove, GameState, TimeControl
    from ogs_client.services.realtime_service import RealtimeService
    from ogs_client.services.rest_service import RestService

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SessionSnapshot:
    """The snapshots a session holds at one instant. Any of them may still be missing."""
    game: Optional["Game"]
    state: Optional["GameState"]
    clock: Optional["Clock"]
    time_control: Optional["TimeControl"]


class GameSession:
    """Holds the latest snapshots of one game and renders them through the core."""

    def __init__(
        self,
        game_id: GameID,
        rest: "RestService",
        realtime: "RealtimeService",
        settings: "Settings",
        viewer_id: Optional[PlayerID] = None,
    ):
        """
        Initializes the GameSession.

        Args:
            game_id: The game to follow.
            rest: Service used for the initial fetch and for board refreshes.
            realtime: Service delivering game data, move and clock pushes.
            settings: Library settings; clock thresholds are read from it.
            viewer_id: The user watching the game, used to phrase the status.
        """
        self.game_id = game_id
        self.viewer_id = viewer_id
        self._rest = rest
        self._realtime = realtime
        self._settings = settings
        self._lock = threading.Lock()
        self._game: Optional["Game"] = None
        self._state: Optional["GameState"] = None
        self._clock: Optional["Clock"] = None
        self._time_control: Optional["TimeControl"] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._refresh_tasks: Set[asyncio.Task] = set()

    # --- Lifecycle ---

    async def start(self) -> None:
        """Fetches the game and its board, then subscribes to its realtime events."""
        self._loop = asyncio.get_running_loop()
        self.apply_game(await self._rest.game(self.game_id))
        self._set_time_control(await self._rest.time_control(self.game_id))
        await self.refresh_state()

        self._realtime.on_clock(self.game_id, self.apply_clock)
        self._realtime.on_move(self.game_id, self._on_move)
        await self._realtime.game_connect(self.game_id, self.viewer_id or 0, on_gamedata=self.apply_game)
        logger.info("Game session started.", game_id=self.game_id, viewer_id=self.viewer_id)

    async def stop(self) -> None:
        """Leaves the game and cancels any board refresh still in flight."""
        for task in list(self._refresh_tasks):
            task.cancel()
        await self._realtime.game_disconnect(self.game_id)
        self._rest.forget(self.game_id)
        logger.info("Game session stopped.", game_id=self.game_id)

    async def refresh_state(self) -> "GameState":
        """Polls the current board and stores it."""
        state = await self._rest.game_state(self.game_id)
        self.apply_state(state)
        return state

    # --- Snapshot intake ---

    def apply_game(self, game: "Game") -> None:
        with self._lock:
            self._game = game
            if self._clock is None and game.clock.last_move is not None:
                self._clock = game.clock
        self._set_time_control(game.time_control)
        logger.debug("Game data replaced.", game_id=self.game_id, phase=game.phase)

    def apply_state(self, state: "GameState") -> None:
        with self._lock:
            self._state = state
        logger.debug("Board state replaced.", game_id=self.game_id, move_number=state.move_number)

    def apply_clock(self, clock: "Clock") -> None:
        with self._lock:
            self._clock = clock
        logger.debug("Clock snapshot replaced.", game_id=self.game_id, current_player=clock.current_player)

    def _set_time_control(self, time_control: "TimeControl") -> None:
        # Fixed for the game's lifetime: the first one wins.
        with self._lock:
            if self._time_control is None:
                self._time_control = time_control

    def _on_move(self, move: "GameMove") -> None:
        """Schedules a board refresh; move pushes do not carry the resulting board."""
        logger.debug("Move received.", game_id=self.game_id, move_number=move.move_number)
        if self._loop is None or self._loop.is_closed():
            return
        # Pushes may be dispatched from the stream's own thread.
        self._loop.call_soon_threadsafe(self._spawn_refresh)

    def _spawn_refresh(self) -> None:
        task = asyncio.ensure_future(self._refresh_after_move())
        self._refresh_tasks.add(task)
        task.add_done_callback(self._refresh_tasks.discard)

    async def _refresh_after_move(self) -> None:
        try:
            await self.refresh_state()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.warning("Board refresh after move failed.", game_id=self.game_id, exc_info=True)

    # --- Rendering ---

    def snapshot(self) -> SessionSnapshot:
        """Returns the current snapshots as one consistent set."""
        with self._lock:
            return SessionSnapshot(self._game, self._state, self._clock, self._time_control)

    @property
    def is_finished(self) -> bool:
        snap = self.snapshot()
        return any(item is not None and item.phase == FINISHED_PHASE for item in (snap.game, snap.state))

    def status(self) -> str:
        snap = self.snapshot()
        if snap.game is None:
            return UNKNOWN_STATE_TEXT
        return game_status(snap.game, snap.state, self.viewer_id)

    def result(self) -> str:
        snap = self.snapshot()
        if snap.game is None:
            return ""
        return game_result(snap.game, snap.state)

    def computed_clock(self, player_id: PlayerID, now: Optional[datetime] = None) -> Optional[ComputedClock]:
        """Computes a player's remaining time from the latest clock snapshot."""
        snap = self.snapshot()
        if snap.clock is None or snap.time_control is None:
            return None
        return compute_clock(snap.clock, snap.time_control, player_id, now, self._settings.clock)

    def clock_text(self, player_id: PlayerID, now: Optional[datetime] = None) -> str:
        return render_clock(self.computed_clock(player_id, now))
