"""
Database configuration settings.

Manages PostgreSQL connection parameters for the document metadata store
and the pgvector chunk index.

Dependencies: pydantic, pydantic_settings
System role: Database connection configuration for ORM and vector index
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from deckrag.configs.base import BaseSettings


class DatabaseSettings(BaseSettings):
    """PostgreSQL database configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="POSTGRES_",
        case_sensitive=False,
        extra="ignore",
    )

    url: str | None = Field(
        default=None,
        description="Full connection URL; overrides the individual fields when set",
    )
    host: str = Field(default="localhost", description="PostgreSQL host")
    port: int = Field(default=5432, description="PostgreSQL port")
    user: str = Field(default="postgres", description="PostgreSQL user")
    password: str = Field(default="postgres", description="PostgreSQL password")
    db: str = Field(default="deckrag", description="PostgreSQL database name")

    pool_size: int = Field(default=10, description="Connection pool size")
    max_overflow: int = Field(default=20, description="Maximum overflow connections")
    pool_timeout: int = Field(default=30, description="Connection pool timeout in seconds")
    echo_sql: bool = Field(default=False, description="Echo SQL statements to logs")

    @property
    def database_url(self) -> str:
        """
        Construct PostgreSQL connection URL.

        Returns:
            str: Plain PostgreSQL URL
        """
        if self.url:
            return self.url
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.db}"

    @property
    def async_database_url(self) -> str:
        """
        Construct async PostgreSQL connection URL.

        Hosted providers hand out ``postgres://`` URLs; those are rewritten
        to the asyncpg driver scheme. URLs that already name a driver
        (e.g. ``sqlite+aiosqlite://``) pass through untouched.

        Returns:
            str: SQLAlchemy async-compatible database URL
        """
        url = self.database_url
        for prefix in ("postgres://", "postgresql://"):
            if url.startswith(prefix):
                return "postgresql+asyncpg://" + url[len(prefix):]
        return url
