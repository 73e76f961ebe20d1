"""
Runtime configuration for the Timesheet MCP server.

Values are read from the process environment (and a local ``.env`` file)
by pydantic-settings. Field names map case-insensitively to environment
variables, e.g. ``timesheet_api_token`` <- ``TIMESHEET_API_TOKEN``.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://api.timesheet.io"
DEFAULT_PUBLIC_URL = "http://localhost:3000"


class Settings(BaseSettings):
    """Server settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Upstream API
    timesheet_api_token: Optional[str] = Field(
        default=None,
        description="Static Timesheet API key used when no bearer token is forwarded",
    )
    timesheet_api_url: str = Field(
        default=DEFAULT_API_URL,
        description="Timesheet API base URL",
    )
    request_timeout: float = Field(default=30.0, gt=0)

    # HTTP transport
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    mcp_endpoint_path: str = "/"
    mcp_server_url: Optional[str] = None
    component_base_url: Optional[str] = None
    ngrok_url: Optional[str] = None
    widgets_dir: Optional[Path] = None

    # Statistics pagination
    statistics_page_size: int = Field(default=100, ge=1, le=500)
    statistics_max_pages: int = Field(default=5, ge=1)

    log_level: str = "INFO"

    @field_validator("timesheet_api_url", "mcp_server_url", "component_base_url", "ngrok_url")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v.rstrip("/") or None

    @field_validator("mcp_endpoint_path")
    @classmethod
    def normalize_endpoint_path(cls, v: str) -> str:
        v = v.strip() or "/"
        return v if v.startswith("/") else f"/{v}"

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def public_url(self) -> str:
        """Public identity of this server, used in OAuth metadata."""
        return self.mcp_server_url or self.component_base_url or self.ngrok_url or DEFAULT_PUBLIC_URL

    @property
    def component_origin(self) -> str:
        """Origin widget assets are served from."""
        return self.component_base_url or self.ngrok_url or self.public_url


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
