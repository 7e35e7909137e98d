"""Configuration module for the catalog client"""

from brainbox.config.settings import (
    PAGE_SIZE_OPTIONS,
    Settings,
    clear_settings_cache,
    get_settings,
    override_settings,
)

__all__ = [
    "PAGE_SIZE_OPTIONS",
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "override_settings",
]
