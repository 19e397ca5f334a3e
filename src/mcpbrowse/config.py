"""Centralized configuration — Pydantic BaseSettings with TOML + dotenv sources.

Non-secret settings live in mcpbrowse.toml. Environment variables override it
using the ``MCPBROWSE_`` prefix and ``__`` as the nested delimiter (e.g.
``MCPBROWSE_SERVER__TRANSPORT=sse``). The bare ``MCP_SERVER_URL`` variable is
honored as a fallback for the server URL.

Priority (highest wins): init args > env vars > .env > mcpbrowse.toml

Usage::

    from mcpbrowse.config import get_settings

    s = get_settings()
    print(s.server_url)
    print(s.browser.type)
"""

from __future__ import annotations

import os
from functools import cached_property
from typing import Literal

from pydantic import BaseModel, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

TransportKind = Literal["streamable_http", "sse", "rest"]
BrowserType = Literal["chromium", "firefox", "webkit"]

DEFAULT_SERVER_BASE = "http://localhost:13000"

# Endpoint path appended to the default base URL for each transport.
_TRANSPORT_PATHS: dict[str, str] = {
    "streamable_http": "/mcp",
    "sse": "/sse",
    "rest": "",
}

# Operation kind → remote tool name.  Servers that spell a tool differently
# (``CLICK``, ``get-screenshot``) are handled via Settings.tool_names.
DEFAULT_TOOL_NAMES: dict[str, str] = {
    "start_browser": "start-browser",
    "navigate": "navigate",
    "click": "click",
    "type": "type",
    "select": "select",
    "screenshot": "screenshot",
    "get_page_content": "get-page-content",
    "wait_for_selector": "wait-for-selector",
    "evaluate": "evaluate",
}

# ---------------------------------------------------------------------------
# Sub-models (each maps to a [section] in mcpbrowse.toml)
# ---------------------------------------------------------------------------


class _StrictModel(BaseModel):
    """Base for all config sub-models; unknown keys are rejected."""

    model_config = {"extra": "forbid"}


class ServerConfig(_StrictModel):
    url: str | None = None  # None = $MCP_SERVER_URL or the transport default
    transport: TransportKind = "streamable_http"
    request_timeout: float = 30.0  # seconds, per tool call
    sse_read_timeout: float = 300.0  # seconds between stream events

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        return v.rstrip("/") if v else v

    @field_validator("request_timeout", "sse_read_timeout")
    @classmethod
    def positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v


class ViewportConfig(_StrictModel):
    width: int = 1280
    height: int = 720


class BrowserConfig(_StrictModel):
    type: BrowserType = "chromium"
    headless: bool = True
    viewport: ViewportConfig = ViewportConfig()
    launch_on_connect: bool = False  # call start-browser right after the MCP handshake

    def launch_options(self) -> dict:
        """Browser options in the camelCase shape automation servers expect."""
        return {
            "browserType": self.type,
            "headless": self.headless,
            "viewport": {"width": self.viewport.width, "height": self.viewport.height},
        }


class LoggingConfig(_StrictModel):
    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return v.upper()


class PluginConfig(_StrictModel):
    enabled: bool = True


# ---------------------------------------------------------------------------
# Root Settings
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        toml_file="mcpbrowse.toml",
        env_file=".env",
        env_prefix="MCPBROWSE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    server: ServerConfig = ServerConfig()
    browser: BrowserConfig = BrowserConfig()
    logging: LoggingConfig = LoggingConfig()
    tool_names: dict[str, str] = {}  # [tool_names] operation = "remote-name"
    plugins: dict[str, PluginConfig] = {}  # [plugins.<name>]

    @field_validator("tool_names")
    @classmethod
    def known_operations(cls, v: dict[str, str]) -> dict[str, str]:
        unknown = sorted(set(v) - set(DEFAULT_TOOL_NAMES))
        if unknown:
            raise ValueError(
                f"Unknown operations in tool_names: {unknown}. "
                f"Must be among: {sorted(DEFAULT_TOOL_NAMES)}"
            )
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Priority: init > env vars > .env > mcpbrowse.toml > file secrets."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    # --- Computed properties ---

    @cached_property
    def server_url(self) -> str:
        if self.server.url:
            return self.server.url
        legacy = os.environ.get("MCP_SERVER_URL", "").rstrip("/")
        if legacy:
            return legacy
        return DEFAULT_SERVER_BASE + _TRANSPORT_PATHS[self.server.transport]

    @cached_property
    def resolved_tool_names(self) -> dict[str, str]:
        return {**DEFAULT_TOOL_NAMES, **self.tool_names}


_settings: Settings | None = None


def get_settings() -> Settings:
    """Lazy cached singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Clear the cached singleton (for tests)."""
    global _settings
    _settings = None
