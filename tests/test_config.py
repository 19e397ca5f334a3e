"""Tests for settings defaults, sources, and derived values."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from mcpbrowse.config import BrowserConfig, ServerConfig, Settings, get_settings, reset_settings
from mcpbrowse.transports import McpTransport, RestTransport, create_transport


class TestDefaults:
    def test_browser_defaults(self):
        s = Settings()
        assert s.browser.type == "chromium"
        assert s.browser.headless is True
        assert (s.browser.viewport.width, s.browser.viewport.height) == (1280, 720)

    @pytest.mark.parametrize(
        ("transport", "url"),
        [
            ("streamable_http", "http://localhost:13000/mcp"),
            ("sse", "http://localhost:13000/sse"),
            ("rest", "http://localhost:13000"),
        ],
    )
    def test_url_follows_transport(self, transport, url):
        s = Settings(server=ServerConfig(transport=transport))
        assert s.server_url == url

    def test_explicit_url_wins(self):
        s = Settings(server=ServerConfig(url="http://automation:9000/mcp/"))
        assert s.server_url == "http://automation:9000/mcp"

    def test_legacy_env_var(self, monkeypatch):
        monkeypatch.setenv("MCP_SERVER_URL", "http://legacy:13000/mcp")
        assert Settings().server_url == "http://legacy:13000/mcp"

    def test_default_tool_names(self):
        names = Settings().resolved_tool_names
        assert names["get_page_content"] == "get-page-content"
        assert names["start_browser"] == "start-browser"


class TestSources:
    def test_prefixed_nested_env(self, monkeypatch):
        monkeypatch.setenv("MCPBROWSE_SERVER__TRANSPORT", "sse")
        monkeypatch.setenv("MCPBROWSE_BROWSER__HEADLESS", "false")
        s = Settings()
        assert s.server.transport == "sse"
        assert s.browser.headless is False

    def test_toml_file(self, tmp_path):
        (tmp_path / "mcpbrowse.toml").write_text(
            '[browser]\ntype = "webkit"\n\n[tool_names]\nclick = "CLICK"\n'
        )
        s = Settings()
        assert s.browser.type == "webkit"
        assert s.resolved_tool_names["click"] == "CLICK"

    def test_env_overrides_toml(self, tmp_path, monkeypatch):
        (tmp_path / "mcpbrowse.toml").write_text('[browser]\ntype = "webkit"\n')
        monkeypatch.setenv("MCPBROWSE_BROWSER__TYPE", "firefox")
        assert Settings().browser.type == "firefox"

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
        first = get_settings()
        reset_settings()
        assert get_settings() is not first


class TestValidation:
    def test_unknown_browser_rejected(self):
        with pytest.raises(ValidationError):
            BrowserConfig(type="lynx")

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError):
            ServerConfig(ur="http://typo")

    def test_non_positive_timeout_rejected(self):
        with pytest.raises(ValidationError):
            ServerConfig(request_timeout=0)

    def test_unknown_tool_operation_rejected(self):
        with pytest.raises(ValidationError, match="Unknown operations"):
            Settings(tool_names={"hover": "hover"})


class TestTransportSelection:
    def test_rest_transport_gets_launch_options(self):
        s = Settings(server=ServerConfig(transport="rest"))
        transport = create_transport(s)
        assert isinstance(transport, RestTransport)
        assert transport.base_url == "http://localhost:13000"
        assert transport._launch_options["viewport"] == {"width": 1280, "height": 720}

    @pytest.mark.parametrize("kind", ["streamable_http", "sse"])
    def test_mcp_transports(self, kind):
        transport = create_transport(Settings(server=ServerConfig(transport=kind)))
        assert isinstance(transport, McpTransport)
        assert transport.name == kind
