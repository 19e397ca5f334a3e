"""Wire mechanisms for reaching the automation server.

Usage:
    from mcpbrowse.transports import create_transport

    transport = create_transport(get_settings())
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcpbrowse.transports.base import Transport
from mcpbrowse.transports.rest import RestTransport
from mcpbrowse.transports.streaming import McpTransport

if TYPE_CHECKING:
    from mcpbrowse.config import Settings

__all__ = [
    "McpTransport",
    "RestTransport",
    "Transport",
    "create_transport",
]


def create_transport(settings: Settings) -> Transport:
    """Build the transport selected by ``server.transport``."""
    server = settings.server
    if server.transport == "rest":
        return RestTransport(
            settings.server_url,
            launch_options=settings.browser.launch_options(),
            request_timeout=server.request_timeout,
        )
    return McpTransport(
        settings.server_url,
        kind=server.transport,
        request_timeout=server.request_timeout,
        sse_read_timeout=server.sse_read_timeout,
    )
