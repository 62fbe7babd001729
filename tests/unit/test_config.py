"""
Tests for configuration system.
"""

import pytest

from stable_locator.config import (
    BrowserSettings,
    LocatorSettings,
    Settings,
    get_settings,
    load_config,
    reset_settings,
)
from stable_locator.exceptions import ConfigurationError


class TestSettings:
    """Test the Settings classes."""

    def test_default_settings(self):
        """Test default settings are created correctly."""
        settings = Settings()

        assert settings.browser.browser_type == "chromium"
        assert settings.browser.headless is True
        assert settings.locator.per_frame_timeout_ms == 2000
        assert settings.locator.max_selectors == 5
        assert settings.locator.test_id_attributes[0] == "data-testid"
        assert settings.logging.level == "INFO"

    def test_only_used_sections(self):
        """Test the top level holds the three sections and nothing else."""
        assert set(Settings.model_fields) == {"browser", "locator", "logging"}

    def test_override_settings(self):
        """Test overriding settings."""
        settings = Settings(
            browser=BrowserSettings(headless=False),
            locator=LocatorSettings(max_selectors=3),
        )

        assert settings.browser.headless is False
        assert settings.locator.max_selectors == 3

    def test_merge_with_overrides(self):
        """Test merging settings with overrides."""
        settings = Settings()
        new_settings = settings.merge_with({
            "browser": {"headless": False},
            "locator": {"per_frame_timeout_ms": 500},
        })

        assert new_settings.browser.headless is False
        assert new_settings.locator.per_frame_timeout_ms == 500
        # Other settings should remain default
        assert new_settings.locator.max_selectors == 5
        assert new_settings.browser.browser_type == "chromium"

    def test_locator_settings_validation(self):
        """Test validation of locator settings."""
        with pytest.raises(ValueError):
            LocatorSettings(per_frame_timeout_ms=10)

        with pytest.raises(ValueError):
            LocatorSettings(max_selectors=0)

    def test_env_override(self, monkeypatch):
        """Test nested environment variables."""
        monkeypatch.setenv("STABLE_LOCATOR__LOCATOR__PER_FRAME_TIMEOUT_MS", "1500")
        monkeypatch.setenv("STABLE_LOCATOR__BROWSER__HEADLESS", "false")

        settings = Settings()

        assert settings.locator.per_frame_timeout_ms == 1500
        assert settings.browser.headless is False


class TestConfigLoader:
    """Test loading from files."""

    def test_load_yaml(self, tmp_path):
        config = tmp_path / "stable-locator.yaml"
        config.write_text("locator:\n  max_selectors: 2\nbrowser:\n  browser_type: firefox\n")

        settings = load_config(config_path=config)

        assert settings.locator.max_selectors == 2
        assert settings.browser.browser_type == "firefox"

    def test_overrides_beat_file(self, tmp_path):
        config = tmp_path / "stable-locator.yaml"
        config.write_text("locator:\n  max_selectors: 2\n")

        settings = load_config(config_path=config, locator={"max_selectors": 4})

        assert settings.locator.max_selectors == 4

    def test_invalid_yaml(self, tmp_path):
        config = tmp_path / "broken.yaml"
        config.write_text("locator: [unclosed\n")

        with pytest.raises(ConfigurationError):
            load_config(config_path=config)

    def test_non_mapping_yaml(self, tmp_path):
        config = tmp_path / "list.yaml"
        config.write_text("- one\n- two\n")

        with pytest.raises(ConfigurationError):
            load_config(config_path=config)

    def test_empty_file(self, tmp_path):
        config = tmp_path / "empty.yaml"
        config.write_text("")

        assert load_config(config_path=config).locator.max_selectors == 5


class TestGlobalSettings:
    """Test the settings singleton."""

    def test_singleton(self):
        assert get_settings() is get_settings()

    def test_reset(self):
        first = get_settings()
        reset_settings()

        assert get_settings() is not first
