"""Application configuration via pydantic-settings.

All config is sourced from environment variables. Never use os.getenv() directly.
"""

import json

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Redis configuration — durable key-value storage for dashboards and data sources."""

    model_config = SettingsConfigDict(env_prefix="")

    redis_url: str = "redis://localhost:6379/0"
    # All persisted keys live under this prefix: dashboards, data_sources, hints_dismissed
    storage_key_prefix: str = "gridboard:"


class GridSettings(BaseSettings):
    """Grid defaults handed to the layout collaborator."""

    model_config = SettingsConfigDict(env_prefix="")

    # Size of a freshly added widget (placed at the origin, no collision avoidance)
    default_widget_w: int = 6
    default_widget_h: int = 4

    # Minimum span the grid allows when resizing
    grid_min_w: int = 2
    grid_min_h: int = 2

    @model_validator(mode="after")
    def _validate_sizes(self) -> "GridSettings":
        if min(self.default_widget_w, self.default_widget_h) < 1:
            raise ValueError("Default widget width and height must be at least 1.")
        if min(self.grid_min_w, self.grid_min_h) < 1:
            raise ValueError("Minimum grid width and height must be at least 1.")
        return self


class IngestionSettings(BaseSettings):
    """File upload limits."""

    model_config = SettingsConfigDict(env_prefix="")

    max_upload_bytes: int = 10_000_000  # 10 MB


class FetchSettings(BaseSettings):
    """Endpoint fetcher (extension point) settings."""

    model_config = SettingsConfigDict(env_prefix="")

    fetch_timeout: float = 10.0  # seconds


class Settings(BaseSettings):
    """GridBoard application settings.

    Environment variables are the single source of truth.
    Defaults are development-safe values only.
    """

    model_config = SettingsConfigDict(env_file=".env")

    app_env: str = "development"

    # Nested settings groups
    storage: StorageSettings = StorageSettings()
    grid: GridSettings = GridSettings()
    ingestion: IngestionSettings = IngestionSettings()
    fetch: FetchSettings = FetchSettings()

    # CORS
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    metrics_enabled: bool = True

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        if isinstance(v, str):
            return json.loads(v)
        return v


settings = Settings()
