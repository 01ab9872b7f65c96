"""Unit tests for configuration module."""

import pytest
from pydantic import ValidationError

from event_scout.config import Settings, get_settings


class TestSettings:
    """Test suite for Settings class."""

    def test_default_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that default settings are properly initialized."""
        monkeypatch.delenv("EVENT_SCOUT_PIPELINE_MODE", raising=False)
        settings = Settings(_env_file=None)

        assert settings.gemini_model == "gemini-2.0-flash"
        assert settings.scout_links_per_search == 20
        assert settings.scout_delay_seconds == 0.5
        assert settings.explorer_batch_size == 5
        assert settings.explorer_delay_seconds == 1.0
        assert settings.pipeline_mode == "scout_explorer"
        assert settings.raw_tool_timeout_seconds == 600.0
        assert settings.api_port == 5500
        assert settings.default_days == 3
        assert settings.log_level == "INFO"
        assert settings.debug is False

    def test_settings_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test loading settings from environment variables."""
        monkeypatch.setenv("EVENT_SCOUT_GEMINI_MODEL", "gemini-test")
        monkeypatch.setenv("EVENT_SCOUT_EXPLORER_BATCH_SIZE", "3")
        monkeypatch.setenv("EVENT_SCOUT_LOG_LEVEL", "debug")
        monkeypatch.setenv("EVENT_SCOUT_DEBUG", "true")

        # Clear the cache to ensure fresh settings
        get_settings.cache_clear()

        settings = get_settings()

        assert settings.gemini_model == "gemini-test"
        assert settings.explorer_batch_size == 3
        assert settings.log_level == "DEBUG"
        assert settings.debug is True

        # Clean up
        get_settings.cache_clear()

    def test_plain_google_api_key_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that the unprefixed GOOGLE_API_KEY is accepted."""
        monkeypatch.delenv("EVENT_SCOUT_GOOGLE_API_KEY", raising=False)
        monkeypatch.setenv("GOOGLE_API_KEY", "plain-key")

        settings = Settings(_env_file=None)

        assert settings.google_api_key == "plain-key"

    def test_get_settings_returns_cached_instance(self) -> None:
        """Test that get_settings returns the same cached instance."""
        get_settings.cache_clear()

        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

        # Clean up
        get_settings.cache_clear()

    def test_invalid_pipeline_mode_rejected(self) -> None:
        """Test that an unknown pipeline mode fails validation."""
        with pytest.raises(ValidationError):
            Settings(pipeline_mode="parallel", _env_file=None)

    def test_batch_size_must_be_positive(self) -> None:
        """Test that a zero batch size fails validation."""
        with pytest.raises(ValidationError):
            Settings(explorer_batch_size=0, _env_file=None)

    def test_mcp_sse_url(self) -> None:
        """Test the tool server URL derivation."""
        assert Settings(mcp_url=None, brightdata_api_key=None, _env_file=None).mcp_sse_url is None

        explicit = Settings(mcp_url="http://localhost:9000/sse", brightdata_api_key="tok", _env_file=None)
        assert explicit.mcp_sse_url == "http://localhost:9000/sse"

        derived = Settings(mcp_url=None, brightdata_api_key="tok", _env_file=None)
        assert derived.mcp_sse_url == "https://mcp.brightdata.com/sse?token=tok&pro=1"
