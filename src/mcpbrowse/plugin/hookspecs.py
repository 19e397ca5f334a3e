"""Pluggy hook specifications for mcpbrowse plugins.

Host frameworks call these hooks to collect services and actions.  All hooks
use the "mcpbrowse" namespace and are validated by pluggy at registration
time.
"""

from __future__ import annotations

from typing import Any

import pluggy

hookspec = pluggy.HookspecMarker("mcpbrowse")


class BrowseSpec:
    """Hook specifications for mcpbrowse plugins."""

    @hookspec
    def mcpbrowse_plugin_info(self) -> dict[str, Any]:
        """Describe the plugin.

        Returns:
            Dict with keys:
                - name: Plugin identifier (e.g., "PLAYWRIGHT")
                - description: One-line summary shown by the host
        """

    @hookspec
    def mcpbrowse_service(self) -> Any | None:
        """Provide a long-lived service for the host to start and stop.

        Returns:
            Service object with:
                - service_name (str)
                - start() -> coroutine
                - stop() -> coroutine
                - get_client() -> SessionClient
            Or None if this plugin doesn't provide one.
        """

    @hookspec
    def mcpbrowse_actions(self, service: Any) -> list[Any]:
        """Provide actions bound to ``service``.

        Args:
            service: The service returned by this plugin's mcpbrowse_service
                hook.  Actions hold this reference; they never look it up.

        Returns:
            List of Action records (name, description, similes, handler).
        """
