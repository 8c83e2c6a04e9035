# File: app/core/config.py
"""
Configuration settings for DocNotes.

This module defines application settings using Pydantic's BaseSettings,
which supports environment variable loading and validation.
"""

import json
from typing import Annotated, Any, List, Optional, Union

from pydantic import AnyHttpUrl, BaseModel, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from app.core.permissions import Role


class DemoUser(BaseModel):
    """Entry of the demo user directory offered to the client's user switcher."""

    id: str
    name: str
    role: Role


DEFAULT_DEMO_USERS = [
    DemoUser(id="A1", name="Admin (A1)", role=Role.ADMIN),
    DemoUser(id="D1", name="Default User (D1)", role=Role.DEFAULT),
    DemoUser(id="D2", name="Default User (D2)", role=Role.DEFAULT),
    DemoUser(id="R1", name="Read-Only (R1)", role=Role.READONLY),
]


def _parse_list(v: Union[str, List[Any], None]) -> List[Any]:
    """Accept either a JSON list or a comma-separated string."""
    if isinstance(v, str):
        try:
            parsed = json.loads(v)
            if isinstance(parsed, list):
                return parsed
        except json.JSONDecodeError:
            pass
        return [i.strip() for i in v.split(",") if i.strip()]
    return v or []


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Values come from the process environment and an optional ``.env`` file,
    with validation and type conversion.
    """

    # API settings
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "DocNotes"

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    BACKEND_CORS_ORIGINS: Annotated[List[Union[AnyHttpUrl, str]], NoDecode] = []

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse CORS origins from environment variables."""
        return _parse_list(v)

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        return v.upper() if v.upper() in valid_levels else "INFO"

    # Database
    DATABASE_URL: Optional[str] = None
    DATABASE_HOST: Optional[str] = None
    DATABASE_PORT: Optional[str] = None
    DATABASE_USER: Optional[str] = None
    DATABASE_PASSWORD: Optional[str] = None
    DATABASE_NAME: Optional[str] = None
    DATABASE_PATH: str = "docnotes.db"
    DB_ECHO: bool = False

    @model_validator(mode="after")
    def assemble_db_connection(self) -> "Settings":
        """Assemble the database connection string when not given directly."""
        if self.DATABASE_URL:
            return self
        if (
                self.DATABASE_HOST
                and self.DATABASE_PORT
                and self.DATABASE_USER
                and self.DATABASE_NAME
        ):
            password = self.DATABASE_PASSWORD or ""
            self.DATABASE_URL = (
                f"postgresql://{self.DATABASE_USER}:{password}@{self.DATABASE_HOST}"
                f":{self.DATABASE_PORT}/{self.DATABASE_NAME}"
            )
        else:
            self.DATABASE_URL = f"sqlite:///{self.DATABASE_PATH}"
        return self

    # Blob storage
    BLOB_STORAGE_PATH: str = "storage/blobs"
    BLOB_CHUNK_SIZE: int = 64 * 1024
    MAX_UPLOAD_SIZE_MB: int = 100

    @field_validator("BLOB_CHUNK_SIZE")
    @classmethod
    def validate_chunk_size(cls, v: int) -> int:
        """Keep stream chunks between 1 KiB and 8 MiB."""
        return max(1024, min(v, 8 * 1024 * 1024))

    # Annotations and callers
    DEFAULT_VISIBLE_TO: Annotated[List[str], NoDecode] = ["A1", "D1", "D2"]
    DEMO_USERS: List[DemoUser] = DEFAULT_DEMO_USERS
    ENFORCE_KNOWN_USERS: bool = False

    @field_validator("DEFAULT_VISIBLE_TO", mode="before")
    @classmethod
    def parse_default_visible_to(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse the default visibility list from environment variables."""
        return _parse_list(v)

    @field_validator("DEFAULT_VISIBLE_TO")
    @classmethod
    def validate_default_visible_to(cls, v: List[str]) -> List[str]:
        """An annotation must always be visible to someone."""
        tokens = [str(t).strip() for t in v if str(t).strip()]
        if not tokens:
            raise ValueError("DEFAULT_VISIBLE_TO must contain at least one user id")
        return tokens

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        extra="ignore",
    )


# Create settings instance
settings = Settings()
