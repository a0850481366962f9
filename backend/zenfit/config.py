"""
ZenFit Configuration
====================
All environment variables in one place. Pydantic Settings validates
types at startup so a bad storage backend or timeout fails on boot.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Loaded from environment variables or a .env file."""

    # --- Storage ---
    # "file" keeps one JSON file per key under data_dir, "memory" is
    # ephemeral and only useful for tests or throwaway runs.
    storage_backend: Literal["file", "memory"] = "file"
    data_dir: str = ".zenfit"

    # --- Gemini API (advisory) ---
    gemini_api_key: str = ""
    gemini_model: str = "gemini-3-flash-preview"
    advisory_timeout_seconds: float = 15.0

    # --- App settings ---
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    # --- Feature flags ---
    # Kill switch: if False, never call Gemini and always answer with the
    # fixed fallback advisory.
    enable_ai_advisory: bool = True

    model_config = {"env_prefix": "ZENFIT_", "env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
