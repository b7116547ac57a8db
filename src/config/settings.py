"""Process-wide settings, read once from the environment at startup.

Uses pydantic-settings for env parsing and validation; any validation
failure surfaces as ConfigurationError so the app refuses to start.
"""

import logging
from functools import lru_cache

from pydantic import Field, SecretStr, ValidationError as PydanticValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from domain.model.errors import ConfigurationError

JWT_ALGORITHM = "HS256"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        mongodb_uri: MongoDB connection string (MONGODB_URI, required)
        jwt_secret: Token-signing secret (JWT_SECRET, required)
        port: Listening port (default: 3001)
        mongodb_database: Database holding the users collection (default: users)
        log_level: Root log level (default: INFO)
    """

    model_config = SettingsConfigDict(frozen=True, extra="ignore")

    # Required (no defaults)
    mongodb_uri: str = Field(min_length=1)
    jwt_secret: SecretStr

    port: int = 3001
    mongodb_database: str = "users"
    log_level: str = "INFO"

    @field_validator("jwt_secret")
    @classmethod
    def jwt_secret_must_not_be_empty(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value():
            raise ValueError("must not be empty")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level {v!r}")
        return level


def load_settings() -> Settings:
    """Build Settings from the environment.

    Raises:
        ConfigurationError: MONGODB_URI or JWT_SECRET is missing, or a
            variable fails validation
    """
    try:
        return Settings()
    except PydanticValidationError as e:
        # Report names and reasons only; never echo the offending values
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']).upper()}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigurationError(f"Invalid configuration: {problems}") from e


@lru_cache
def get_settings() -> Settings:
    """Cached Settings for the running process (FastAPI dependency)."""
    return load_settings()
