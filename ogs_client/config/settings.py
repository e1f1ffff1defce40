# ogs_client/config/settings.py
"""
Configuration settings for the OGS client library, powered by Pydantic.

This module centralizes all tunable parameters and their defaults. Settings
can be overridden through environment variables, which keeps deployment
details such as the service URL out of the code.
"""

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Nested Models for Configuration Schemas ---

class ClockSettings(BaseModel):
    """Thresholds used by the clock engine when classifying remaining time."""
    sudden_death_seconds: float = Field(10.0, description="Remaining time below this is reported as sudden death.")
    timeout_epsilon: float = Field(1e-7, description="A time pool at or below this value counts as exhausted.")
    block_sudden_death_moves: int = Field(2, description="Canadian overtime with fewer moves left than this is sudden death.")

class RetrySettings(BaseModel):
    """Backoff policy for transient transport failures."""
    attempts: int = Field(3, ge=1, description="Maximum number of tries, including the first.")
    initial_backoff_s: float = Field(0.5, ge=0, description="Delay before the first retry.")
    max_backoff_s: float = Field(5.0, ge=0, description="Upper bound for a single delay.")
    jitter_factor: float = Field(0.2, ge=0, le=1, description="Random spread applied to every delay.")

    @model_validator(mode='after')
    def validate_backoff_bounds(self) -> 'RetrySettings':
        """Ensures the initial delay does not exceed the cap."""
        if self.initial_backoff_s > self.max_backoff_s:
            raise ValueError("Configuration error: initial_backoff_s must not exceed max_backoff_s.")
        return self

# --- Main Library Settings Class ---

class Settings(BaseSettings):
    """
    Main configuration class for the library.

    It loads settings from environment variables with the prefix 'OGS_CLIENT_'.
    Nested models can be configured using a double underscore delimiter, e.g.,
    `OGS_CLIENT_CLOCK__SUDDEN_DEATH_SECONDS=30`.
    """
    model_config = SettingsConfigDict(env_prefix='OGS_CLIENT_', env_nested_delimiter='__')

    base_url: str = "https://online-go.com"
    realtime_url: str = "wss://online-go.com/socket.io/?transport=websocket&EIO=3"
    max_board_size: int = Field(25, description="Largest board edge the coordinate notation can address.")
    default_log_level: str = "INFO"
    clock: ClockSettings = Field(default_factory=ClockSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)

# A singleton instance of the settings, accessible throughout the library.
settings = Settings()
