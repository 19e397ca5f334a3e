"""Plugin system for mcpbrowse.

Built on pluggy (pytest's plugin framework).  The built-in Playwright plugin
is always registered unless disabled in config; third-party plugins register
through the "mcpbrowse" entry-point group in their pyproject.toml.

Usage:
    from mcpbrowse.plugin import collect_actions, get_plugin_manager

    pm = get_plugin_manager()
    services, actions = collect_actions(pm)
"""

from __future__ import annotations

import importlib

import pluggy

from mcpbrowse.config import get_settings
from mcpbrowse.logger import logger
from mcpbrowse.plugin.hookspecs import BrowseSpec

__all__ = [
    "collect_actions",
    "get_plugin_manager",
]

# Static registry of built-in plugins.
# Each entry: (module_path, class_name, config_key)
# config_key is checked against [plugins.<key>].enabled in mcpbrowse.toml.
_BUILTIN_PLUGIN_SPECS: list[tuple[str, str, str]] = [
    ("mcpbrowse.plugin.playwright", "PlaywrightPlugin", "playwright"),
]


def get_plugin_manager() -> pluggy.PluginManager:
    """Create and configure the plugin manager.

    Returns:
        Configured PluginManager ready to call hooks
    """
    pm = pluggy.PluginManager("mcpbrowse")
    pm.add_hookspecs(BrowseSpec)

    s = get_settings()

    for module_path, class_name, config_key in _BUILTIN_PLUGIN_SPECS:
        plugin_cfg = s.plugins.get(config_key)
        if plugin_cfg is not None and not plugin_cfg.enabled:
            logger.info("Plugin disabled via config", plugin=config_key)
            continue

        mod = importlib.import_module(module_path)
        pm.register(getattr(mod, class_name)(), name=f"builtin-{config_key}")
        logger.debug("Registered built-in plugin", name=config_key)

    discovered = pm.load_setuptools_entrypoints("mcpbrowse")
    if discovered:
        logger.info("Discovered third-party plugins", count=discovered)

    plugin_names = [pm.get_name(p) for p in pm.get_plugins()]
    logger.info("Plugin manager ready", plugins=plugin_names)
    return pm


def collect_actions(pm: pluggy.PluginManager) -> tuple[list, list]:
    """Return (services, actions) contributed by every registered plugin."""
    services = [svc for svc in pm.hook.mcpbrowse_service() if svc is not None]
    actions = []
    for svc in services:
        for batch in pm.hook.mcpbrowse_actions(service=svc):
            actions.extend(batch)
    return services, actions
