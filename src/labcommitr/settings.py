"""Runtime settings for the labcommitr CLI via Pydantic Settings."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables and a ``.env`` file.

    All variables are prefixed with ``LABCOMMITR_`` (e.g.
    ``LABCOMMITR_LOG_LEVEL``). Project commit conventions live in the YAML
    config file, not here.
    """

    model_config = SettingsConfigDict(
        env_prefix="LABCOMMITR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = "WARNING"
    log_format: str = "text"  # "json" or "text"

    # Re-raise unexpected errors instead of printing a one-line summary
    debug: bool = False
