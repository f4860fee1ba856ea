"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Integrity validator settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    debug: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///data/db/integrity.db"

    # Hashing
    checksum_chunk_size: int = Field(default=1024 * 1024, ge=4096)

    # Sync
    sync_instance_id: str = Field(default="local", min_length=1, max_length=64)

    # Indexing
    index_hidden_files: bool = False
