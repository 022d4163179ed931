"""Runtime settings loaded from environment variables."""

import re
from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

NonEmptyStr = Annotated[str, Field(min_length=1)]
NonNegativeFloat = Annotated[float, Field(ge=0.0)]
PositiveInt = Annotated[int, Field(gt=0)]
BcryptRounds = Annotated[int, Field(ge=4, le=31)]

_DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": "seconds", "s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


def parse_duration(value: str) -> timedelta:
    """Parse compact durations such as `7d`, `12h`, `30m`, `45s` or plain seconds."""

    match = _DURATION_PATTERN.match(value.lower())
    if match is None:
        raise ValueError(f"invalid duration: {value!r}")
    amount, unit = match.groups()
    duration = timedelta(**{_DURATION_UNITS[unit]: int(amount)})
    if duration <= timedelta(0):
        raise ValueError("duration must be positive")
    return duration


class Settings(BaseSettings):
    """Environment-driven application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: NonEmptyStr = Field(validation_alias="DATABASE_URL")
    jwt_secret: NonEmptyStr = Field(validation_alias="JWT_SECRET")
    jwt_expires_in: timedelta = Field(
        default=timedelta(days=7),
        validation_alias="JWT_EXPIRES_IN",
    )
    bcrypt_rounds: BcryptRounds = Field(default=10, validation_alias="BCRYPT_ROUNDS")
    supabase_url: HttpUrl = Field(validation_alias="SUPABASE_URL")
    supabase_key: NonEmptyStr = Field(validation_alias="SUPABASE_KEY")
    storage_timeout_seconds: NonNegativeFloat = Field(
        default=30.0,
        validation_alias="STORAGE_TIMEOUT_SECONDS",
    )
    max_upload_bytes: PositiveInt = Field(
        default=5 * 1024 * 1024,
        validation_alias="MAX_UPLOAD_BYTES",
    )
    cors_allow_origins: str = Field(default="*", validation_alias="CORS_ALLOW_ORIGINS")
    port: PositiveInt = Field(default=3000, validation_alias="PORT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @field_validator("jwt_expires_in", mode="before")
    @classmethod
    def _parse_jwt_expires_in(cls, value: object) -> object:
        if isinstance(value, str):
            return parse_duration(value)
        return value

    def cors_origins(self) -> list[str]:
        """Return configured CORS origins as a list."""

        origins = [origin.strip() for origin in self.cors_allow_origins.split(",")]
        return [origin for origin in origins if origin] or ["*"]


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache application settings."""

    return Settings()  # type: ignore[call-arg]
