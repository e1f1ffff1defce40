# ogs_client/types.py
"""
A central module for shared data structures and collaborator interfaces (Protocols).
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping, Optional, Protocol, TypeAlias, runtime_checkable

PlayerID: TypeAlias = int
GameID: TypeAlias = int

class TimeSystem(str, Enum):
    ABSOLUTE = "absolute"; BYOYOMI = "byoyomi"; CANADIAN = "canadian"
    FISCHER = "fischer"; SIMPLE = "simple"

    @classmethod
    def from_wire(cls, value: Optional[str]) -> Optional["TimeSystem"]:
        """Maps a wire `system` string to a known discipline, or None for anything else."""
        try:
            return cls((value or "").lower())
        except ValueError:
            return None

class Color(str, Enum):
    BLACK = "Black"; WHITE = "White"

# --- DATA CONTRACTS ---

@dataclass(frozen=True, slots=True)
class OriginCoordinate:
    """Zero-based board coordinate, (0, 0) is the top-left point. (-1, -1) means pass."""
    x: int
    y: int

    def is_pass(self) -> bool:
        return self.x == -1 or self.y == -1

    def __str__(self) -> str:
        return f"[{self.x},{self.y}]"

PASS = OriginCoordinate(-1, -1)

@dataclass(frozen=True, slots=True)
class A1Coordinate:
    """Human-readable coordinate such as "D4". The column letter 'I' is never used."""
    col: str
    row: int

    def __str__(self) -> str:
        return f"{self.col}{self.row}"

@dataclass(frozen=True, slots=True)
class ComputedClock:
    """
    The remaining time of one player at a given instant.

    Recomputed on every query and never stored. Only the counters relevant to
    `system` carry meaning; the rest stay zero. `deadline` is set instead of
    the counters when the server reported the player's bank as a timestamp.
    """
    system: TimeSystem
    main_time: float = 0.0
    periods_left: int = 0
    period_time_left: float = 0.0
    moves_left: int = 0
    block_time_left: float = 0.0
    sudden_death: bool = False
    timed_out: bool = False
    deadline: Optional[datetime] = None


# --- PROTOCOLS: Abstract Interfaces for Collaborators ---
# The library never opens sockets itself. Callers hand in objects matching
# these contracts, which also makes the services trivial to mock in tests.

EventHandler: TypeAlias = Callable[[Any], None]

@runtime_checkable
class Transport(Protocol):
    """Request/response collaborator returning raw response bodies."""
    async def get(self, uri: str, params: Optional[Mapping[str, Any]] = None) -> bytes: ...
    async def post(self, uri: str, data: Mapping[str, Any]) -> bytes: ...

@runtime_checkable
class EventStream(Protocol):
    """Publish/subscribe collaborator wrapping the realtime socket connection."""
    def on(self, event: str, handler: EventHandler) -> None: ...
    def emit(self, event: str, payload: Mapping[str, Any]) -> Awaitable[None]: ...
    async def close(self) -> None: ...
