"""Tests for src/config — settings loading and logging setup."""

import logging
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from src.config import log_setup
from src.config.settings import Settings, get_settings


@pytest.fixture
def supabase_env(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SUPABASE_ANON_KEY", "anon-key")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    def test_defaults(self, supabase_env):
        settings = Settings(_env_file=None)
        assert settings.supabase_url == "https://example.supabase.co"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert settings.max_team_size == 6
        assert settings.max_dice_per_term == 100

    def test_env_overrides(self, supabase_env, monkeypatch):
        monkeypatch.setenv("MAX_TEAM_SIZE", "4")
        monkeypatch.setenv("DEBUG", "true")
        settings = Settings(_env_file=None)
        assert settings.max_team_size == 4
        assert settings.debug is True

    def test_missing_credentials(self, monkeypatch):
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_get_settings_cached(self, supabase_env):
        with patch("src.config.settings._load_streamlit_secrets") as load_secrets:
            first = get_settings()
            second = get_settings()
        assert first is second
        load_secrets.assert_called_once()


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def reset(self, monkeypatch):
        monkeypatch.setattr(log_setup, "_configured", False)

    def test_explicit_level(self):
        with patch("src.config.log_setup.logging.basicConfig") as basic_config:
            log_setup.configure_logging("debug")
        basic_config.assert_called_once_with(level="DEBUG", format=log_setup.LOG_FORMAT)
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_level_from_settings(self):
        with patch("src.config.log_setup.get_settings") as mock_settings, \
                patch("src.config.log_setup.logging.basicConfig") as basic_config:
            mock_settings.return_value.debug = False
            mock_settings.return_value.log_level = "warning"
            log_setup.configure_logging()
        basic_config.assert_called_once_with(level="WARNING", format=log_setup.LOG_FORMAT)

    def test_debug_flag_wins(self):
        with patch("src.config.log_setup.get_settings") as mock_settings, \
                patch("src.config.log_setup.logging.basicConfig") as basic_config:
            mock_settings.return_value.debug = True
            log_setup.configure_logging()
        assert basic_config.call_args.kwargs["level"] == "DEBUG"

    def test_configures_once(self):
        with patch("src.config.log_setup.logging.basicConfig") as basic_config:
            log_setup.configure_logging("INFO")
            log_setup.configure_logging("DEBUG")
        basic_config.assert_called_once()
