"""Tests for pluggy wiring of the Playwright plugin."""

from __future__ import annotations

import pluggy

from mcpbrowse.config import PluginConfig, Settings, get_settings
from mcpbrowse.plugin import collect_actions, get_plugin_manager
from mcpbrowse.plugin.hookspecs import BrowseSpec
from mcpbrowse.plugin.playwright import PlaywrightPlugin
from mcpbrowse.service import PlaywrightService, get_service


class TestPluginManager:
    def test_builtin_plugin_registered(self):
        pm = get_plugin_manager()
        assert pm.has_plugin("builtin-playwright")

    def test_collect_actions_uses_singleton_service(self):
        services, actions = collect_actions(get_plugin_manager())
        assert services == [get_service()]
        assert sorted(a.name for a in actions) == [
            "CLICK",
            "NAVIGATE",
            "SCREENSHOT",
            "SELECT",
            "TYPE",
        ]

    def test_disabled_via_config(self, monkeypatch):
        import mcpbrowse.config as config

        monkeypatch.setattr(
            config, "_settings", Settings(plugins={"playwright": PluginConfig(enabled=False)})
        )
        assert get_settings().plugins["playwright"].enabled is False
        pm = get_plugin_manager()
        assert not pm.has_plugin("builtin-playwright")
        assert collect_actions(pm) == ([], [])


class TestPlaywrightPlugin:
    def _pm(self) -> pluggy.PluginManager:
        pm = pluggy.PluginManager("mcpbrowse")
        pm.add_hookspecs(BrowseSpec)
        pm.register(PlaywrightPlugin())
        return pm

    def test_plugin_info(self):
        (info,) = self._pm().hook.mcpbrowse_plugin_info()
        assert info["name"] == "PLAYWRIGHT"

    def test_actions_ignore_foreign_services(self):
        assert self._pm().hook.mcpbrowse_actions(service=object()) == [[]]

    def test_actions_bound_to_given_service(self, service):
        (batch,) = self._pm().hook.mcpbrowse_actions(service=service)
        assert len(batch) == 5
        assert isinstance(service, PlaywrightService)
