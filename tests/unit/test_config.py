"""Unit tests for configuration module."""

from pathlib import Path

import pytest

from gmail_tools.config import Settings, get_settings


class TestSettings:
    """Test suite for Settings class."""

    def test_default_settings(self) -> None:
        """Test that default settings are properly initialized."""
        settings = Settings()

        assert settings.gmail_credentials_path == Path("credentials.json")
        assert settings.gmail_token_path == Path("token.json")
        assert settings.gmail_scope == "https://www.googleapis.com/auth/gmail.modify"
        assert settings.gmail_user_id == "me"
        assert settings.gmail_max_results == 100
        assert settings.default_body_type == "plain"
        assert settings.log_level == "INFO"
        assert settings.debug is False

    def test_settings_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test loading settings from environment variables."""
        monkeypatch.setenv("GMAIL_TOOLS_GMAIL_TOKEN_PATH", "/tmp/custom-token.json")
        monkeypatch.setenv("GMAIL_TOOLS_DEFAULT_BODY_TYPE", "html")
        monkeypatch.setenv("GMAIL_TOOLS_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("GMAIL_TOOLS_DEBUG", "true")

        # Clear the cache to ensure fresh settings
        get_settings.cache_clear()

        settings = get_settings()

        assert settings.gmail_token_path == Path("/tmp/custom-token.json")
        assert settings.default_body_type == "html"
        assert settings.log_level == "DEBUG"
        assert settings.debug is True

        # Clean up
        get_settings.cache_clear()

    def test_invalid_body_type_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GMAIL_TOOLS_DEFAULT_BODY_TYPE", "markdown")

        with pytest.raises(Exception):  # Pydantic ValidationError
            Settings()

    def test_get_settings_returns_cached_instance(self) -> None:
        """Test that get_settings returns the same cached instance."""
        get_settings.cache_clear()

        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

        # Clean up
        get_settings.cache_clear()
