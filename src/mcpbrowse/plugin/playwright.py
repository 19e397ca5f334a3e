"""Playwright plugin — browser actions backed by a remote MCP server."""

from __future__ import annotations

from typing import Any

import pluggy

from mcpbrowse.actions import BrowserActions
from mcpbrowse.service import PLAYWRIGHT_SERVICE_NAME, PlaywrightService, get_service

hookimpl = pluggy.HookimplMarker("mcpbrowse")


class PlaywrightPlugin:
    """Wires the singleton PlaywrightService and its actions into a host."""

    @hookimpl
    def mcpbrowse_plugin_info(self) -> dict[str, Any]:
        return {
            "name": PLAYWRIGHT_SERVICE_NAME,
            "description": "Browser automation through a Playwright MCP server",
        }

    @hookimpl
    def mcpbrowse_service(self) -> PlaywrightService:
        return get_service()

    @hookimpl
    def mcpbrowse_actions(self, service: Any) -> list[Any]:
        if not isinstance(service, PlaywrightService):
            return []
        return list(BrowserActions(service))
