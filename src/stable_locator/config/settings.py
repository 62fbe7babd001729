"""
Settings - Pydantic models for type-safe configuration.

This module defines all configuration settings as Pydantic models,
providing validation, type hints, and automatic environment variable loading.

Example:
    >>> from stable_locator.config import Settings, load_config
    >>> settings = load_config()  # Loads from env, yaml, and defaults
    >>> print(settings.locator.per_frame_timeout_ms)
    2000
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BrowserSettings(BaseModel):
    """
    Browser settings used by the command line front end.
    
    Attributes:
        browser_type: Playwright browser to launch
        headless: Run browser in headless mode
        timeout_ms: Navigation timeout
        viewport_width: Browser viewport width in pixels
        viewport_height: Browser viewport height in pixels
    """
    browser_type: Literal["chromium", "firefox", "webkit"] = "chromium"
    headless: bool = True
    timeout_ms: int = Field(default=30000, ge=1000, le=300000)
    viewport_width: int = Field(default=1280, ge=320, le=3840)
    viewport_height: int = Field(default=720, ge=240, le=2160)
    channel: Optional[str] = None


class LocatorSettings(BaseModel):
    """
    Element resolution and selector synthesis settings.
    
    Attributes:
        per_frame_timeout_ms: Bound for each per-frame check, independent of
            any timeout the calling tool applies
        max_selectors: Maximum number of verified selectors returned
        max_stable_classes: Maximum classes kept for class-based selectors
        max_text_length: Visible text captured from an element
        max_text_selector_length: Longest text used in a text selector
        test_id_attributes: Test-id-like attributes, in preference order
        shadow_combinator: Combinator used to pierce shadow hosts
    """
    per_frame_timeout_ms: int = Field(default=2000, ge=100, le=60000)
    max_selectors: int = Field(default=5, ge=1, le=20)
    max_stable_classes: int = Field(default=3, ge=1, le=10)
    max_text_length: int = Field(default=120, ge=10, le=1000)
    max_text_selector_length: int = Field(default=50, ge=1, le=500)
    test_id_attributes: List[str] = Field(
        default_factory=lambda: ["data-testid", "data-test-id", "data-test", "data-qa", "data-cy"]
    )
    shadow_combinator: str = " >> "


class LoggingSettings(BaseModel):
    """
    Logging configuration.
    
    Attributes:
        level: Log level
        format: Log format string
        file: Log file path (None for console only)
        json_format: Use JSON format for logs
    """
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None
    json_format: bool = False


class Settings(BaseSettings):
    """
    Root settings container - single source of truth for all configuration.
    
    Settings are loaded in this priority order (highest to lowest):
    1. Explicit values passed to constructor
    2. Environment variables (prefixed with STABLE_LOCATOR__)
    3. Config file (YAML)
    4. Default values
    
    Example:
        >>> settings = Settings()  # Load from env vars
        >>> settings = Settings(locator=LocatorSettings(max_selectors=3))  # Override
    """
    
    model_config = SettingsConfigDict(
        env_prefix="STABLE_LOCATOR__",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )
    
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    locator: LocatorSettings = Field(default_factory=LocatorSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    
    def merge_with(self, overrides: dict) -> "Settings":
        """
        Create a new Settings instance with overrides applied.
        
        Args:
            overrides: Dictionary of values to override
            
        Returns:
            New Settings instance with overrides applied
        """
        current = self.model_dump()
        
        def deep_merge(base: dict, updates: dict) -> dict:
            for key, value in updates.items():
                if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                    deep_merge(base[key], value)
                else:
                    base[key] = value
            return base
        
        merged = deep_merge(current, overrides)
        return Settings(**merged)
