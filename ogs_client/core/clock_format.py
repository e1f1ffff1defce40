# ogs_client/core/clock_format.py
"""
Renders computed clocks and durations as short, human-readable strings.
"""

from typing import Optional

from ogs_client.types import ComputedClock, TimeSystem

_MINUTE = 60
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR

TIMEOUT_TEXT = "Timeout"
SUDDEN_DEATH_SUFFIX = " (SD)"


def format_duration(seconds: float) -> str:
    """
    Formats a number of seconds, largest unit first.

    Examples: 45 -> "0:45", 245 -> "4:05", 7200 -> "2h", 7500 -> "2h5m",
    93600 -> "1d2h", 172800 -> "48h". Fractions are dropped and negative
    values render as "0:00".
    """
    total = max(0, int(seconds))
    days, rest = divmod(total, _DAY)
    hours, rest = divmod(rest, _HOUR)
    minutes, secs = divmod(rest, _MINUTE)

    if days:
        # A bare "1d" would hide whether it means 24 or 47 hours.
        return f"{days}d{hours}h" if hours else f"{days * 24}h"
    if hours:
        return f"{hours}h{minutes}m" if minutes else f"{hours}h"
    return f"{minutes}:{secs:02d}"


def _render_byoyomi(clock: ComputedClock) -> str:
    period = format_duration(clock.period_time_left)
    if clock.sudden_death:
        return period + SUDDEN_DEATH_SUFFIX
    if clock.main_time > 0:
        return f"{format_duration(clock.main_time)} +{period} ({clock.periods_left})"
    return f"{period} ({clock.periods_left})"


def _render_canadian(clock: ComputedClock) -> str:
    block = f"{format_duration(clock.block_time_left)}/{clock.moves_left}"
    if clock.sudden_death:
        return block + SUDDEN_DEATH_SUFFIX
    if clock.main_time > 0:
        return f"{format_duration(clock.main_time)} +{block}"
    return block


def render_clock(clock: Optional[ComputedClock]) -> str:
    """
    Renders a computed clock for display next to a player's name.

    Returns an empty string for None, so callers can render an unknown
    discipline or player as nothing at all.
    """
    if clock is None:
        return ""
    if clock.deadline is not None:
        return f"until {clock.deadline:%Y-%m-%d %H:%M:%S} UTC"
    if clock.timed_out:
        return TIMEOUT_TEXT

    if clock.system == TimeSystem.BYOYOMI:
        return _render_byoyomi(clock)
    if clock.system == TimeSystem.CANADIAN:
        return _render_canadian(clock)
    text = format_duration(clock.main_time)
    return text + SUDDEN_DEATH_SUFFIX if clock.sudden_death else text
