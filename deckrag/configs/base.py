"""
Shared settings base.

Every deckrag settings group reads the same .env file and ignores keys
that belong to other groups.

Dependencies: pydantic_settings
System role: Foundation for deckrag configuration classes
"""

from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    """Common .env handling plus the process-wide log level."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level applied by configure_logging",
    )
