# ogs_client/models.py
"""
Defines the wire models for payloads served by the OGS REST and realtime APIs.

All models are immutable pydantic models. Unknown fields are ignored so that
new server-side fields never break decoding. A few entities arrive in more
than one shape; their custom validators normalize the payload before field
validation runs:

- timestamps are Unix seconds or milliseconds,
- a player's clock is either a bare deadline timestamp (rengo games) or a
  structured record,
- moves are `[x, y, time_delta, ...]` arrays,
- user ratings carry a stray `"version"` entry next to the real ratings.
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Dict, Final, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError, field_validator, model_validator

from ogs_client.exceptions import DecodeError
from ogs_client.types import PASS, Color, OriginCoordinate, PlayerID, TimeSystem

# Any timestamp above this is taken to be in milliseconds.
MILLISECONDS_THRESHOLD: Final[int] = 1_000_000_000_000


def parse_timestamp(value: Any) -> datetime:
    """
    Converts a numeric Unix timestamp, in seconds or milliseconds, into a UTC datetime.

    Already-decoded datetimes pass through, naive ones being taken as UTC.

    Raises:
        ValueError: If the value is not a number.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"expected a numeric Unix timestamp, but got {value!r}")
    if value > MILLISECONDS_THRESHOLD:
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    return datetime.fromtimestamp(value, tz=timezone.utc)


Timestamp = Annotated[datetime, BeforeValidator(parse_timestamp)]


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


# --- Users and players ---

class Glicko2(_WireModel):
    deviation: float = 0.0
    games_played: int = 0
    rating: float = 0.0
    volatility: float = 0.0


class User(_WireModel):
    """Full profile of a user, as returned by `/api/v1/me`."""
    id: PlayerID = 0
    username: str = ""
    country: str = ""
    professional: bool = False
    about: str = ""
    ranking: float = 0.0
    ratings: Dict[str, Glicko2] = Field(default_factory=dict)
    is_bot: bool = False
    is_friend: bool = False
    ui_class: str = ""

    @field_validator("ratings", mode="before")
    @classmethod
    def _drop_version(cls, value: Any) -> Any:
        # Ratings are keyed by board size ("overall", "19x19", ...) next to a bare "version": 5.
        if isinstance(value, dict):
            return {key: rating for key, rating in value.items() if key != "version"}
        return value


class Player(_WireModel):
    """Basic player information embedded in a game."""
    id: PlayerID = 0
    username: str = ""
    professional: bool = False
    rank: float = 0.0


class Players(_WireModel):
    black: Player = Field(default_factory=Player)
    white: Player = Field(default_factory=Player)


# --- Clocks and time controls ---

class TimeControl(_WireModel):
    """
    The time-control configuration of a game, fixed for its whole lifetime.

    Only the fields of the active `system` are meaningful.
    """
    system: str = ""
    time_control: str = ""
    speed: str = ""
    pause_on_weekends: bool = False
    total_time: float = 0.0          # absolute
    main_time: float = 0.0           # byoyomi, canadian
    period_time: float = 0.0         # byoyomi period length, canadian block length
    periods: int = 0                 # byoyomi
    periods_min: int = 0
    periods_max: int = 0
    stones_per_period: int = 0       # canadian
    initial_time: float = 0.0        # fischer
    time_increment: float = 0.0      # fischer
    max_time: float = 0.0            # fischer
    per_move: float = 0.0            # simple

    @property
    def discipline(self) -> Optional[TimeSystem]:
        return TimeSystem.from_wire(self.system)


class PlayerTime(_WireModel):
    """
    A player's remaining time as last reported by the server.

    For rengo games the server sends a single timestamp instead of a record;
    it lands in `value` and every other field stays zero.
    """
    value: Optional[Timestamp] = None
    thinking_time: float = 0.0
    periods: int = 0
    period_time: float = 0.0
    period_time_left: float = 0.0
    moves_left: int = 0
    block_time: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def _decode_variant(cls, data: Any) -> Any:
        # The bare timestamp is tried first, the structured record second.
        # The order matters: a structured record never parses as a timestamp.
        try:
            return {"value": parse_timestamp(data)}
        except ValueError:
            pass
        if data is None:
            return {}
        return data

    @property
    def is_deadline(self) -> bool:
        return self.value is not None


class Clock(_WireModel):
    """A point-in-time capture of both players' clocks."""
    game_id: int = 0
    title: str = ""
    black_player_id: PlayerID = 0
    white_player_id: PlayerID = 0
    current_player: PlayerID = 0
    black_time: PlayerTime = Field(default_factory=PlayerTime)
    white_time: PlayerTime = Field(default_factory=PlayerTime)
    last_move: Optional[Timestamp] = None
    expiration: Optional[Timestamp] = None
    now: Optional[Timestamp] = None  # Only sent with realtime clock pushes
    paused_since: Optional[float] = None
    start_mode: bool = False

    @property
    def taken_at(self) -> Optional[datetime]:
        """The instant the snapshot describes: the explicit `now` if sent, else the last move."""
        return self.now or self.last_move

    def player_time(self, player_id: PlayerID) -> Optional[PlayerTime]:
        if player_id == self.black_player_id:
            return self.black_time
        if player_id == self.white_player_id:
            return self.white_time
        return None


# --- Moves and board state ---

class Move(_WireModel):
    """A played move, sent on the wire as `[x, y, time_delta, ...]`."""
    x: int
    y: int
    time_delta: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def _decode_array(cls, data: Any) -> Any:
        if not isinstance(data, (list, tuple)):
            return data
        if len(data) < 3:
            raise ValueError(f"expected at least 3 elements in move array, got {len(data)}")
        x, y, time_delta = data[0], data[1], data[2]
        for name, item in (("x", x), ("y", y)):
            if isinstance(item, bool) or not isinstance(item, int):
                raise ValueError(f"error decoding move.{name}: expected an integer, got {item!r}")
        return {"x": x, "y": y, "time_delta": time_delta or 0.0}

    @property
    def coordinate(self) -> OriginCoordinate:
        return OriginCoordinate(self.x, self.y)


class GameMove(_WireModel):
    """A realtime move notification."""
    game_id: int = 0
    move: Move
    move_number: int = 0


class GameState(_WireModel):
    """The current board of a game, as returned by the termination API."""
    phase: str = ""
    move_number: int = 0
    last_move: OriginCoordinate = PASS
    player_to_move: PlayerID = 0
    outcome: str = ""
    board: List[List[int]] = Field(default_factory=list)  # 0 = empty, 1 = black, 2 = white
    removal: List[List[int]] = Field(default_factory=list)

    @property
    def board_size(self) -> int:
        return len(self.board)

    def is_my_turn(self, user_id: PlayerID) -> bool:
        return self.player_to_move == user_id


# --- Games ---

class Game(_WireModel):
    """General, mostly static information about a game."""
    game_id: int = 0
    game_name: str = ""
    phase: str = ""
    width: int = 0
    height: int = 0
    handicap: int = 0
    komi: float = 0.0
    rules: str = ""
    ranked: bool = False
    private: bool = False
    rengo: bool = False
    initial_player: str = ""
    black_player_id: PlayerID = 0
    white_player_id: PlayerID = 0
    winner_id: Optional[PlayerID] = Field(None, alias="winner")  # Only when phase == "finished"
    players: Players = Field(default_factory=Players)
    player_pool: Dict[str, Player] = Field(default_factory=dict)  # Keys are player IDs
    clock: Clock = Field(default_factory=Clock)
    time_control: TimeControl = Field(default_factory=TimeControl)
    moves: List[Move] = Field(default_factory=list)
    start_time: Optional[Timestamp] = None
    state_version: int = 0
    group_ids: List[Union[int, str]] = Field(default_factory=list)
    latencies: Dict[str, int] = Field(default_factory=dict)
    handicap_rank_difference: float = 0.0
    aga_handicap_scoring: bool = False
    allow_self_capture: bool = False
    allow_superko: bool = False
    automatic_stone_removal: bool = False
    free_handicap_placement: bool = False
    opponent_plays_first_after_resume: bool = False
    score_handicap: bool = False
    score_passes: bool = False
    score_prisoners: bool = False
    score_stones: bool = False
    score_territory: bool = False
    score_territory_in_seki: bool = False
    strict_seki_mode: bool = False
    superko_algorithm: str = ""
    white_must_pass_last: bool = False

    @property
    def board_size(self) -> int:
        return self.height

    @property
    def black_id(self) -> PlayerID:
        return self.black_player_id or self.players.black.id

    @property
    def white_id(self) -> PlayerID:
        return self.white_player_id or self.players.white.id

    def url(self, base_url: str) -> str:
        return f"{base_url.rstrip('/')}/game/{self.game_id}"

    def player_by_id(self, user_id: PlayerID) -> Optional[Player]:
        if (player := self.player_pool.get(str(user_id))) is not None:
            return player
        for player in (self.players.black, self.players.white):
            if player.id == user_id:
                return player
        return None

    def is_my_game(self, user_id: PlayerID) -> bool:
        player = self.player_by_id(user_id)
        return player is not None and player.id == user_id

    def is_my_turn(self, user_id: PlayerID) -> bool:
        return self.clock.current_player == user_id

    def color_of(self, user_id: PlayerID) -> Optional[Color]:
        if user_id == self.black_id:
            return Color.BLACK
        if user_id == self.white_id:
            return Color.WHITE
        return None

    def opponent(self, user_id: PlayerID) -> Player:
        if self.players.black.id == user_id:
            return self.players.white
        return self.players.black


class GameOverview(_WireModel):
    """An active-game entry of the overview, which nests the game under `"json"`."""
    game: Game = Field(alias="json")


class Overview(_WireModel):
    """The landing-page overview: the user's active games."""
    active_games: List[GameOverview] = Field(default_factory=list)


# --- Decoding helper ---

ModelT = TypeVar("ModelT", bound=BaseModel)


def decode_payload(model: Type[ModelT], payload: Any) -> ModelT:
    """
    Decodes a raw payload into `model`.

    Accepts JSON text (bytes or str) or already-parsed JSON values.

    Raises:
        DecodeError: If the payload does not match the model.
    """
    try:
        if isinstance(payload, (bytes, bytearray, str)):
            return model.model_validate_json(payload)
        return model.model_validate(payload)
    except ValidationError as e:
        raise DecodeError(
            f"Payload does not match {model.__name__}: {e.error_count()} error(s)",
            model=model.__name__,
            errors=tuple(e.errors()),
        ) from e
