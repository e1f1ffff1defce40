# ogs_client/core/clock_engine.py
"""
Computes a player's remaining time from a server clock snapshot.

The server reports remaining time only when something happens (a move, a
clock push), so every snapshot is stale by the time it is displayed. Rather
than running a countdown per game, this module recomputes the remaining time
on demand from the snapshot and the time elapsed since it was taken. The
result is a pure function of (snapshot, time control, player, instant), which
keeps it deterministic under an injected `now`.

Each timing discipline is handled by its own evaluator, selected from a
dispatch table keyed by `TimeSystem`. Adding a discipline means adding one
evaluator and one table entry.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Final, Optional, Tuple, TYPE_CHECKING

from ogs_client.types import ComputedClock, PlayerID, TimeSystem

if TYPE_CHECKING:
    from ogs_client.config.settings import ClockSettings
    from ogs_client.models import Clock, PlayerTime, TimeControl

DEFAULT_SUDDEN_DEATH_SECONDS: Final[float] = 10.0
DEFAULT_TIMEOUT_EPSILON: Final[float] = 1e-7
DEFAULT_BLOCK_SUDDEN_DEATH_MOVES: Final[int] = 2


@dataclass(frozen=True, slots=True)
class _Thresholds:
    sudden_death_seconds: float
    epsilon: float
    block_sudden_death_moves: int


@dataclass(frozen=True, slots=True)
class _Evaluation:
    """Everything an evaluator needs besides the time control."""
    player_time: "PlayerTime"
    on_turn: bool
    elapsed: float
    thresholds: _Thresholds


def _thresholds_from(settings: Optional["ClockSettings"]) -> _Thresholds:
    if settings is None:
        return _Thresholds(
            DEFAULT_SUDDEN_DEATH_SECONDS, DEFAULT_TIMEOUT_EPSILON, DEFAULT_BLOCK_SUDDEN_DEATH_MOVES
        )
    return _Thresholds(
        settings.sudden_death_seconds, settings.timeout_epsilon, settings.block_sudden_death_moves
    )


def elapsed_seconds(clock: "Clock", on_turn: bool, now: datetime) -> float:
    """
    Seconds the player's clock has been running since the snapshot was taken.

    Only the player holding the turn loses time, and nobody does while the
    game is still in start mode.
    """
    taken_at = clock.taken_at
    if not on_turn or clock.start_mode or taken_at is None:
        return 0.0
    return max(0.0, (now - taken_at).total_seconds())


def _deplete_main(thinking_time: float, ev: _Evaluation) -> Tuple[float, float]:
    """Runs the main time down first. Returns (main time left, overtime spent past it)."""
    if not ev.on_turn:
        return thinking_time, 0.0
    remaining = thinking_time - ev.elapsed
    if remaining > 0:
        return remaining, 0.0
    return 0.0, -remaining


# --- Per-discipline evaluators ---

def _evaluate_single_pool(system: TimeSystem, pool: float, ev: _Evaluation) -> ComputedClock:
    main_time = max(0.0, pool - ev.elapsed) if ev.on_turn else pool
    return ComputedClock(
        system=system,
        main_time=main_time,
        sudden_death=main_time < ev.thresholds.sudden_death_seconds,
        timed_out=main_time <= ev.thresholds.epsilon,
    )


def _evaluate_absolute(tc: "TimeControl", ev: _Evaluation) -> ComputedClock:
    return _evaluate_single_pool(TimeSystem.ABSOLUTE, ev.player_time.thinking_time, ev)


def _evaluate_fischer(tc: "TimeControl", ev: _Evaluation) -> ComputedClock:
    # Increments are already folded into thinking_time by the server.
    return _evaluate_single_pool(TimeSystem.FISCHER, ev.player_time.thinking_time, ev)


def _evaluate_simple(tc: "TimeControl", ev: _Evaluation) -> ComputedClock:
    return _evaluate_single_pool(TimeSystem.SIMPLE, tc.per_move, ev)


def _evaluate_byoyomi(tc: "TimeControl", ev: _Evaluation) -> ComputedClock:
    pt = ev.player_time
    eps = ev.thresholds.epsilon
    period_length = tc.period_time or pt.period_time

    if not ev.on_turn:
        periods_left = pt.periods
        period_time_left = pt.period_time_left or pt.period_time or period_length
        main_time = pt.thinking_time
        exhausted = False
    else:
        main_time, overtime = _deplete_main(pt.thinking_time, ev)
        periods_used = math.floor(overtime / period_length) if period_length > 0 else 0
        periods_left = max(0, pt.periods - periods_used)
        period_time_left = max(0.0, period_length - (overtime - periods_used * period_length))
        # Every period counts the one being played, so using them all up is a timeout.
        exhausted = overtime > eps and (period_length <= 0 or pt.periods - periods_used <= 0)

    return ComputedClock(
        system=TimeSystem.BYOYOMI,
        main_time=main_time,
        periods_left=periods_left,
        period_time_left=period_time_left,
        sudden_death=periods_left <= 1,
        timed_out=main_time <= eps and exhausted,
    )


def _evaluate_canadian(tc: "TimeControl", ev: _Evaluation) -> ComputedClock:
    pt = ev.player_time
    th = ev.thresholds

    block_time, moves_left = pt.block_time, pt.moves_left
    if pt.thinking_time > 0 and block_time <= 0 and moves_left <= 0:
        # Still in main time; the server has not sent the overtime block yet.
        block_time, moves_left = tc.period_time, tc.stones_per_period

    main_time, overtime = _deplete_main(pt.thinking_time, ev)
    block_time_left = max(0.0, block_time - overtime)
    in_overtime = main_time <= th.epsilon

    return ComputedClock(
        system=TimeSystem.CANADIAN,
        main_time=main_time,
        moves_left=moves_left,
        block_time_left=block_time_left,
        sudden_death=in_overtime and (
            block_time_left < th.sudden_death_seconds or moves_left < th.block_sudden_death_moves
        ),
        timed_out=in_overtime and block_time_left <= th.epsilon,
    )


_EVALUATORS: Dict[TimeSystem, Callable[["TimeControl", _Evaluation], ComputedClock]] = {
    TimeSystem.ABSOLUTE: _evaluate_absolute,
    TimeSystem.FISCHER: _evaluate_fischer,
    TimeSystem.SIMPLE: _evaluate_simple,
    TimeSystem.BYOYOMI: _evaluate_byoyomi,
    TimeSystem.CANADIAN: _evaluate_canadian,
}


def compute_clock(
    clock: "Clock",
    time_control: "TimeControl",
    player_id: PlayerID,
    now: Optional[datetime] = None,
    settings: Optional["ClockSettings"] = None,
) -> Optional[ComputedClock]:
    """
    Computes the remaining time of `player_id` at the instant `now`.

    Args:
        clock: The latest clock snapshot received from the server.
        time_control: The game's time-control configuration.
        player_id: The player to evaluate; must be the black or white player.
        now: The evaluation instant. Defaults to the current UTC time.
        settings: Optional thresholds; library defaults are used when omitted.

    Returns:
        A `ComputedClock`, or None if the player is not part of the clock or
        the time-control system is not one this library understands.
    """
    player_time = clock.player_time(player_id)
    system = time_control.discipline
    if player_time is None or system is None:
        return None

    if player_time.is_deadline:
        # Team games report the bank as an absolute deadline; nothing to compute.
        return ComputedClock(system=system, deadline=player_time.value)

    now = now or datetime.now(timezone.utc)
    on_turn = clock.current_player == player_id
    evaluation = _Evaluation(
        player_time=player_time,
        on_turn=on_turn,
        elapsed=elapsed_seconds(clock, on_turn, now),
        thresholds=_thresholds_from(settings),
    )
    return _EVALUATORS[system](time_control, evaluation)
