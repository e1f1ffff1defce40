# ogs_client/core/status_formatter.py
"""
Produces human-readable status lines for games and players.

This module provides pure functions that combine a game's static data, the
latest board state and, optionally, the identity of the viewing user. It
follows a "Prepare, Decide, Render" pattern: the turn context is derived once,
the phrasing is chosen based on whether the viewer takes part in the game, and
small render helpers build the final strings. No input is ever modified.
"""

import json
import math
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from ogs_client.core.coordinates import origin_to_a1
from ogs_client.exceptions import CoordinateError
from ogs_client.types import Color, PlayerID

if TYPE_CHECKING:
    from ogs_client.models import Game, GameState, Player

UNKNOWN_STATE_TEXT = "Unknown board state"
FINISHED_PHASE = "finished"
UNKNOWN_OUTCOME_TEXT = "unknown outcome"

# Offsets of the service's numeric rank scale.
_PRO_RANK_OFFSET = 36
_AMATEUR_PRO_THRESHOLD = 1037
_AMATEUR_PRO_OFFSET = 1036
_DAN_THRESHOLD = 30
_DAN_OFFSET = 29
_KYU_THRESHOLD = 1
_KYU_BASE = 30


# --- Players ---

def player_ranking(player: "Player") -> str:
    """
    Returns the player's rank in notation like "1p", "2d" or "3k".

    Professionals are ranked on their own scale; amateurs are split into
    professional-equivalent, dan and kyu bands. A rank below 1 is unknown.
    """
    rank = player.rank
    if player.professional:
        return f"{rank - _PRO_RANK_OFFSET:.0f}p"
    if rank >= _AMATEUR_PRO_THRESHOLD:
        return f"{rank - _AMATEUR_PRO_OFFSET:.0f}p"
    if rank >= _DAN_THRESHOLD:
        return f"{rank - _DAN_OFFSET:.0f}d"
    if rank >= _KYU_THRESHOLD:
        return f"{_KYU_BASE - math.floor(rank):.0f}k"
    return "?"


def player_summary(player: "Player") -> str:
    """Renders a player as "name[rank]"."""
    return f"{player.username}[{player_ranking(player)}]"


def black_player_summary(game: "Game") -> str:
    return "(B) " + player_summary(game.players.black)


def white_player_summary(game: "Game") -> str:
    return "(W) " + player_summary(game.players.white)


# --- 1. PREPARE: Turn context ---

@dataclass(frozen=True, slots=True)
class _TurnContext:
    mover: Color          # The color that played the last move
    to_move: Color
    mover_id: PlayerID
    to_move_id: PlayerID


def _build_turn_context(game: "Game", state: "GameState") -> _TurnContext:
    if state.player_to_move == game.black_id:
        return _TurnContext(Color.WHITE, Color.BLACK, game.white_id, game.black_id)
    return _TurnContext(Color.BLACK, Color.WHITE, game.black_id, game.white_id)


# --- 2. DECIDE: Phrasing relative to the viewer ---

def _is_participant(game: "Game", viewer_id: Optional[PlayerID]) -> bool:
    return viewer_id is not None and viewer_id in (game.black_id, game.white_id)


def whose_turn(game: "Game", state: "GameState", viewer_id: Optional[PlayerID] = None) -> str:
    """
    Describes whose turn it is, e.g. "White's turn", "your turn" or "bob's turn".

    Participants see the game from their own side; everyone else by color.
    """
    context = _build_turn_context(game, state)
    if not _is_participant(game, viewer_id):
        return f"{context.to_move.value}'s turn"
    if context.to_move_id == viewer_id:
        return "your turn"
    return f"{game.opponent(viewer_id).username}'s turn"


def _who_moved(game: "Game", context: _TurnContext, viewer_id: Optional[PlayerID]) -> str:
    if not _is_participant(game, viewer_id):
        return context.mover.value
    if context.mover_id == viewer_id:
        return "You"
    return game.opponent(viewer_id).username


# --- 3. RENDER ---

def last_move_text(game: "Game", state: "GameState") -> str:
    """
    Renders the last move as "passed" or "played D4".

    A move that does not fit the board is shown in its raw [x,y] form rather
    than failing the whole status line.
    """
    if state.last_move.is_pass():
        return "passed"
    try:
        return f"played {origin_to_a1(state.last_move, game.board_size)}"
    except CoordinateError:
        return f"played {state.last_move}"


def game_overview(game: "Game") -> str:
    """One-line overview, e.g. '123 "Friendly" (B) a[1d] vs (W) b[2k], 10 moves, Black to play'."""
    to_play = Color.WHITE if game.clock.current_player == game.white_id else Color.BLACK
    name = f"{json.dumps(game.game_name, ensure_ascii=False):<10}"
    return (
        f"{game.game_id} {name} {black_player_summary(game)} vs {white_player_summary(game)}, "
        f"{len(game.moves)} moves, {to_play.value} to play"
    )


def game_result(game: "Game", state: Optional["GameState"]) -> str:
    """Returns "<winner> won by <outcome>" for a finished game, otherwise an empty string."""
    # The board state may report the end before the next game data push does.
    finished = game.phase == FINISHED_PHASE or (state is not None and state.phase == FINISHED_PHASE)
    if not finished:
        return ""
    winner = white_player_summary(game) if game.winner_id == game.white_id else black_player_summary(game)
    outcome = (state.outcome if state is not None else "") or UNKNOWN_OUTCOME_TEXT
    return f"{winner} won by {outcome}"


def game_status(
    game: "Game", state: Optional["GameState"], viewer_id: Optional[PlayerID] = None
) -> str:
    """
    Builds the status line shown under the board.

    Args:
        game: Static game data.
        state: The latest board state, or None if none has been received yet.
        viewer_id: The user looking at the board. Participants get the status
            phrased from their side ("You played D4, bob's turn").

    Returns:
        e.g. "12 moves, Black played D4, White's turn".
    """
    if state is None:
        return UNKNOWN_STATE_TEXT
    if state.move_number == 0:
        return f"Game ready, {black_player_summary(game)} to start"
    if state.phase == FINISHED_PHASE:
        return "Game has finished, " + game_result(game, state)

    context = _build_turn_context(game, state)
    who = _who_moved(game, context, viewer_id)
    return f"{state.move_number} moves, {who} {last_move_text(game, state)}, {whose_turn(game, state, viewer_id)}"
