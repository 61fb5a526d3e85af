from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

load_dotenv(override=False)


DEFAULT_CORS_ORIGINS = ["http://localhost:5173", "http://localhost:3000"]


def _env_flag(*names: str, default: str = "false") -> bool:
    for name in names:
        value = os.getenv(name)
        if value is not None:
            return value.strip().lower() in {"1", "true", "yes", "on"}
    return default.lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Runtime configuration for the documentation API."""

    docs_root: Path = Field(default_factory=lambda: Path(os.getenv("DOCS_ROOT", "docs")))
    order_file: Path | None = Field(
        default_factory=lambda: Path(os.environ["DOCS_ORDER_FILE"]) if os.getenv("DOCS_ORDER_FILE") else None
    )
    default_search_limit: int = Field(default_factory=lambda: os.getenv("SEARCH_LIMIT", "10"))
    max_search_limit: int = Field(default_factory=lambda: os.getenv("SEARCH_MAX_LIMIT", "50"))
    watch_enabled: bool = Field(default_factory=lambda: _env_flag("DOCS_WATCH", "DEV_MODE"))
    poll_interval_seconds: float = Field(default_factory=lambda: os.getenv("DOCS_POLL_SECONDS", "2.0"))
    debounce_seconds: float = Field(default_factory=lambda: os.getenv("DOCS_DEBOUNCE_SECONDS", "0.5"))
    cors_origins: List[str] = Field(default_factory=lambda: os.getenv("CORS_ORIGINS") or list(DEFAULT_CORS_ORIGINS))
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    model_config = {
        "frozen": True,
        "validate_default": True,
    }

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> List[str]:
        if value is None:
            return list(DEFAULT_CORS_ORIGINS)
        if isinstance(value, str):
            if not value.strip():
                return list(DEFAULT_CORS_ORIGINS)
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return list(value)

    @field_validator("poll_interval_seconds", mode="before")
    @classmethod
    def _normalize_poll_interval(cls, value: object) -> float:
        try:
            interval = float(value)
        except (TypeError, ValueError):
            return 2.0
        return interval if interval > 0 else 2.0

    @field_validator("debounce_seconds", mode="before")
    @classmethod
    def _normalize_debounce(cls, value: object) -> float:
        try:
            seconds = float(value)
        except (TypeError, ValueError):
            return 0.5
        return seconds if seconds >= 0 else 0.5

    @field_validator("default_search_limit", "max_search_limit", mode="before")
    @classmethod
    def _normalize_limit(cls, value: object) -> int:
        try:
            limit = int(value)
        except (TypeError, ValueError):
            return 10
        return limit if limit > 0 else 10

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance for FastAPI dependency injection."""

    return Settings()


__all__ = ["Settings", "get_settings", "DEFAULT_CORS_ORIGINS"]
