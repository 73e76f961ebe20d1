"""
Settings Tests.

Tests cover:
- Environment variable mapping
- URL and path normalization
- Public URL and component origin precedence
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from timesheet_mcp.settings import DEFAULT_API_URL, DEFAULT_PUBLIC_URL, Settings

pytestmark = [pytest.mark.config, pytest.mark.unit]


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every variable Settings reads."""
    for name in Settings.model_fields:
        monkeypatch.delenv(name.upper(), raising=False)
    return monkeypatch


class TestEnvironment:
    """Tests for reading settings from the environment."""

    def test_defaults(self, clean_env):
        settings = Settings(_env_file=None)

        assert settings.timesheet_api_token is None
        assert settings.timesheet_api_url == DEFAULT_API_URL
        assert settings.port == 3000
        assert settings.mcp_endpoint_path == "/"
        assert settings.statistics_page_size == 100
        assert settings.statistics_max_pages == 5
        assert settings.public_url == DEFAULT_PUBLIC_URL

    def test_reads_environment(self, clean_env):
        clean_env.setenv("TIMESHEET_API_TOKEN", "ts_env.key")
        clean_env.setenv("TIMESHEET_API_URL", "https://staging.timesheet.io/")
        clean_env.setenv("PORT", "8080")
        clean_env.setenv("LOG_LEVEL", "debug")
        clean_env.setenv("STATISTICS_MAX_PAGES", "10")

        settings = Settings(_env_file=None)

        assert settings.timesheet_api_token == "ts_env.key"
        assert settings.timesheet_api_url == "https://staging.timesheet.io"
        assert settings.port == 8080
        assert settings.log_level == "DEBUG"
        assert settings.statistics_max_pages == 10

    def test_invalid_port(self, clean_env):
        clean_env.setenv("PORT", "70000")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_page_size_bounds(self, clean_env):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, statistics_page_size=0)


class TestNormalization:
    """Tests for URL and path cleanup."""

    def test_endpoint_path_gets_leading_slash(self, clean_env):
        assert Settings(_env_file=None, mcp_endpoint_path="mcp").mcp_endpoint_path == "/mcp"

    def test_blank_endpoint_path_is_root(self, clean_env):
        assert Settings(_env_file=None, mcp_endpoint_path="  ").mcp_endpoint_path == "/"

    def test_blank_url_is_none(self, clean_env):
        assert Settings(_env_file=None, mcp_server_url=" / ").mcp_server_url is None


class TestPublicUrl:
    """Tests for the advertised server identity."""

    def test_server_url_wins(self, clean_env):
        settings = Settings(
            _env_file=None,
            mcp_server_url="https://mcp.example.com/",
            component_base_url="https://cdn.example.com",
            ngrok_url="https://abc.ngrok.app",
        )

        assert settings.public_url == "https://mcp.example.com"
        assert settings.component_origin == "https://cdn.example.com"

    def test_ngrok_fallback(self, clean_env):
        settings = Settings(_env_file=None, ngrok_url="https://abc.ngrok.app")

        assert settings.public_url == "https://abc.ngrok.app"
        assert settings.component_origin == "https://abc.ngrok.app"

    def test_component_origin_defaults_to_public_url(self, clean_env):
        settings = Settings(_env_file=None, mcp_server_url="https://mcp.example.com")

        assert settings.component_origin == "https://mcp.example.com"
