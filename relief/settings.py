"""Pydantic settings for the relief store."""

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from relief.storage.manager import MEMORY_PATH


class StoreSettings(BaseSettings):
    """Settings for the record store, the cache and logging."""

    model_config = SettingsConfigDict(env_prefix="RELIEF_")

    backend: Literal["memory", "database"] = Field(
        "memory",
        description="Storage backend: memory (volatile) or database (SQLite file).",
    )

    base_path: Path = Field(
        Path("."),
        description="Base directory that relative paths are resolved under.",
    )

    database_path: Path = Field(
        Path("data/relief.db"),
        description="SQLite database used by the database backend, or :memory:.",
    )

    cache_sweep_interval_seconds: float = Field(
        300,
        gt=0,
        description="Seconds between sweeps of expired cache entries.",
    )

    seed_sample_data: bool = Field(
        False,
        description="Load the demo users, disasters, resources and reports on startup.",
    )

    log_dir: Path = Field(
        Path("logs"),
        description="Directory for the rotating log file.",
    )

    log_file_prefix: str = Field(
        "relief",
        description="Prefix for the log file name.",
    )

    @model_validator(mode="after")
    def _apply_base_path(self) -> "StoreSettings":
        if str(self.database_path) != MEMORY_PATH:
            self.database_path = self._resolve_under_base(self.database_path)
        self.log_dir = self._resolve_under_base(self.log_dir)
        return self

    def _resolve_under_base(self, path: Path) -> Path:
        if path.is_absolute():
            return path
        return self.base_path / path
