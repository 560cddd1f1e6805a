"""IdentityGate configuration management."""

from enum import Enum
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from identitygate.models.enums import KeyKind


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """IdentityGate configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="IDENTITYGATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # General
    env: Environment = Environment.DEVELOPMENT
    log_level: str = "INFO"
    debug: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///./identitygate.db"
    roles_table: str = Field(default="identity_roles", description="Role documents table")
    users_table: str = Field(default="identity_users", description="User documents table")

    # Identifier generation
    default_key_kind: KeyKind = Field(
        default=KeyKind.GUID,
        description="Key kind used for new principals when the caller does not pass one",
    )
    key_random_seed: Optional[int] = Field(
        default=None,
        description="Seed for the shared random source (deterministic keys, tests only)",
    )

    # Validators
    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate the database URL uses an async driver."""
        if not v.startswith(("sqlite+aiosqlite://", "postgresql+asyncpg://")):
            raise ValueError(
                "database_url must be an async URL (sqlite+aiosqlite:// or postgresql+asyncpg://)"
            )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("key_random_seed")
    @classmethod
    def validate_key_random_seed(cls, v: Optional[int], info) -> Optional[int]:
        """Refuse deterministic identifiers outside development."""
        env = info.data.get("env")
        if v is not None and env in [Environment.PRODUCTION, Environment.STAGING]:
            raise ValueError(f"key_random_seed is not allowed in {env.value} environment")
        return v


settings = Settings()
