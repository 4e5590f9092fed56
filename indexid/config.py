"""
indexid/config.py

Settings for locating the enum store, read from INDEXID_* environment
variables or a .env file.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RegistrySettings(BaseSettings):
    """Registry settings."""

    model_config = SettingsConfigDict(
        env_prefix="INDEXID_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Platform index root holding the enum file
    index_root: Path = Field(default_factory=lambda: Path.home() / ".indexid")
    enum_file_name: str = "indices.enum"

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @property
    def enum_path(self) -> Path:
        return self.index_root / self.enum_file_name


@lru_cache
def get_settings() -> RegistrySettings:
    """Get cached settings instance."""
    return RegistrySettings()
