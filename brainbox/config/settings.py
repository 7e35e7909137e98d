"""Configuration settings for the catalog client with caching utilities."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from threading import RLock
from typing import Any, Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PAGE_SIZE_OPTIONS: tuple[int, ...] = (8, 12, 16, 24)


class Settings(BaseSettings):
    """Catalog client settings"""

    model_config = SettingsConfigDict(
        env_file=[".env.test", ".env"],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Remote collaborator
    api_base_url: str = "http://localhost:5555"
    api_prefix: str = "/api"
    api_token: SecretStr | None = None
    request_timeout_seconds: float = 30.0

    # Browsing
    default_page_size: int = 12

    # Search ranking
    keyword_fallback_threshold: float = 0.2
    search_ranking_mode: Literal["auto", "remote", "boosted"] = "auto"

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"

    @field_validator("default_page_size")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        if v not in PAGE_SIZE_OPTIONS:
            raise ValueError(f"default_page_size must be one of {PAGE_SIZE_OPTIONS}")
        return v

    @field_validator("keyword_fallback_threshold")
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("keyword_fallback_threshold must be within [0, 1]")
        return v

    @property
    def api_root(self) -> str:
        """Origin plus prefix, without a trailing slash"""
        prefix = self.api_prefix.strip("/")
        base = self.api_base_url.rstrip("/")
        return f"{base}/{prefix}" if prefix else base

    def get_token(self) -> str | None:
        if self.api_token is None:
            return None
        return self.api_token.get_secret_value() or None


_SETTINGS_LOCK = RLock()
_SETTINGS_CACHE: Settings | None = None


def get_settings(*, refresh: bool = False) -> Settings:
    """Return a cached ``Settings`` instance.

    Parameters
    ----------
    refresh:
        When ``True`` the cached instance is discarded and a new one is created.
    """

    global _SETTINGS_CACHE

    with _SETTINGS_LOCK:
        if refresh or _SETTINGS_CACHE is None:
            _SETTINGS_CACHE = Settings()
        return _SETTINGS_CACHE


def clear_settings_cache() -> None:
    """Clear the cached settings instance."""

    global _SETTINGS_CACHE

    with _SETTINGS_LOCK:
        _SETTINGS_CACHE = None


@contextmanager
def override_settings(**overrides: Any) -> Iterator[Settings]:
    """Temporarily override the cached settings within a context."""

    global _SETTINGS_CACHE

    with _SETTINGS_LOCK:
        previous_settings = _SETTINGS_CACHE

    base_settings = previous_settings or Settings()
    patched_settings = base_settings.model_copy(update=overrides)

    with _SETTINGS_LOCK:
        _SETTINGS_CACHE = patched_settings

    try:
        yield patched_settings
    finally:
        with _SETTINGS_LOCK:
            _SETTINGS_CACHE = previous_settings
