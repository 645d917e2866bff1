"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with CREDSTORE_ prefix.
No config files: just env vars (12-factor app style).

Learn: pydantic-settings auto-loads from environment, validates types,
provides defaults. The storage backend is a Literal, so a typo like
CREDSTORE_STORAGE_BACKEND=redsi fails loudly at startup.
"""

from pathlib import Path
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All app configuration. Set via CREDSTORE_* env vars."""

    # Logging
    debug: bool = False  # forces DEBUG regardless of log_level
    log_level: str = "WARNING"
    log_json: bool = False  # JSON lines instead of the console renderer

    # Storage
    storage_backend: Literal["memory", "file", "redis"] = "file"
    storage_path: str = str(Path.home() / ".credstore" / "store.json")
    redis_url: str = "redis://localhost:6379/0"
    redis_key_prefix: str = "credstore:"

    # Logical keys for the two persisted records
    session_key: str = "session"
    registry_key: str = "registry"

    model_config = {"env_prefix": "CREDSTORE_"}

    @model_validator(mode="after")
    def validate_storage_settings(self):
        """Ensure the selected backend has what it needs."""
        if self.storage_backend == "file" and not self.storage_path.strip():
            raise ValueError(
                "CREDSTORE_STORAGE_PATH must be set when "
                "CREDSTORE_STORAGE_BACKEND=file"
            )
        if self.session_key == self.registry_key:
            raise ValueError(
                "CREDSTORE_SESSION_KEY and CREDSTORE_REGISTRY_KEY must differ"
            )
        return self


# Singleton: import this everywhere
settings = Settings()
