"""Runtime configuration read from the environment (or a `.env` file).

Settings are loaded once at import. The weather timeout is the only
suspension point in the engine, so its bound is enforced here rather than
at call time. Any invalid value surfaces as `ConfigurationError`.
"""

from typing import Optional

from pydantic import Field, ValidationError as PydanticValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.exceptions import ConfigurationError

MAX_WEATHER_TIMEOUT_SECONDS = 3.0


def _check_timeout(value: float) -> float:
    if not 0 < value <= MAX_WEATHER_TIMEOUT_SECONDS:
        raise ValueError(f"must be in (0, {MAX_WEATHER_TIMEOUT_SECONDS}], got {value}")
    return value


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Weather lookup
    WEATHER_API_URL: str = "https://api.open-meteo.com/v1/forecast"
    WEATHER_TIMEOUT_SECONDS: float = 3.0
    WEATHER_LOOKUP_ENABLED: bool = True

    # Region tables
    REGION_CACHE_SIZE: int = Field(default=512, ge=0)

    # Snapshot store; reads fall back to the write database
    WRITE_DATABASE_URL: str = "sqlite:///health_engine.db"
    READ_DATABASE_URL: Optional[str] = None

    # Logging; defaults to <repo>/logs
    HEALTH_ENGINE_LOG_DIR: Optional[str] = None

    @field_validator("WEATHER_TIMEOUT_SECONDS")
    @classmethod
    def _timeout_bounds(cls, value: float) -> float:
        return _check_timeout(value)

    @property
    def read_database_url(self) -> str:
        return self.READ_DATABASE_URL or self.WRITE_DATABASE_URL


def load_settings() -> Settings:
    """Build `Settings` from the environment.

    Raises:
        ConfigurationError: Naming the first setting that failed to parse.
    """
    try:
        return Settings()
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        key = str(error["loc"][0]) if error.get("loc") else None
        raise ConfigurationError(f"Invalid setting {key}: {error['msg']}", config_key=key) from exc


def weather_timeout(value: float) -> float:
    """Validate a weather lookup timeout in seconds."""
    try:
        return _check_timeout(value)
    except ValueError as exc:
        raise ConfigurationError(
            f"WEATHER_TIMEOUT_SECONDS {exc}", config_key="WEATHER_TIMEOUT_SECONDS"
        ) from exc


settings = load_settings()
