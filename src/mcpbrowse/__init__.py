"""mcpbrowse — browser actions for agent frameworks, served by a remote MCP server."""

from __future__ import annotations

from mcpbrowse.actions import Action, BrowserActions
from mcpbrowse.client import SessionClient
from mcpbrowse.errors import (
    BrowseError,
    NotInitializedError,
    SessionConnectionError,
    ToolInvocationError,
    ValidationError,
)
from mcpbrowse.service import PLAYWRIGHT_SERVICE_NAME, PlaywrightService, get_service
from mcpbrowse.types import SessionState, ToolResult

__version__ = "0.1.0"

__all__ = [
    "PLAYWRIGHT_SERVICE_NAME",
    "Action",
    "BrowseError",
    "BrowserActions",
    "NotInitializedError",
    "PlaywrightService",
    "SessionClient",
    "SessionConnectionError",
    "SessionState",
    "ToolInvocationError",
    "ToolResult",
    "ValidationError",
    "get_service",
]
