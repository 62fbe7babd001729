"""
Configuration module - Centralized settings management.

This module provides type-safe configuration management using Pydantic,
supporting environment variables, YAML files, and explicit overrides.

Usage:
    from stable_locator.config import get_settings, load_config
    
    # Get global settings (loaded once)
    settings = get_settings()
    
    # Or load fresh settings with overrides
    settings = load_config(locator={"max_selectors": 3})

Environment Variables:
    STABLE_LOCATOR__LOCATOR__PER_FRAME_TIMEOUT_MS=1500
    STABLE_LOCATOR__BROWSER__HEADLESS=false
    STABLE_LOCATOR__LOGGING__LEVEL=DEBUG
"""

from stable_locator.config.settings import (
    Settings,
    BrowserSettings,
    LocatorSettings,
    LoggingSettings,
)
from stable_locator.config.loader import ConfigLoader, load_config

# Global settings singleton
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).
    
    Settings are loaded once from environment variables and config files.
    Call reset_settings() to reload.
    
    Returns:
        Global Settings instance
    """
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def reset_settings() -> None:
    """Reset the global settings (forces reload on next get_settings())."""
    global _settings
    _settings = None


__all__ = [
    "Settings",
    "BrowserSettings",
    "LocatorSettings",
    "LoggingSettings",
    "ConfigLoader",
    "load_config",
    "get_settings",
    "reset_settings",
]
