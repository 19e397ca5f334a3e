"""Exception taxonomy.

The session client raises these and never recovers locally. Action handlers
are the only layer that catches them, turning each into a callback report.
"""

from __future__ import annotations


class BrowseError(Exception):
    """Base for every error raised by mcpbrowse."""


class SessionConnectionError(BrowseError, ConnectionError):
    """Connect or handshake with the automation server failed."""


class NotInitializedError(BrowseError):
    """A tool call was attempted while the session is not ready."""

    def __init__(self, state: str) -> None:
        super().__init__(f"MCP session not initialized (state: {state})")
        self.state = state


class ToolInvocationError(BrowseError):
    """The server reported a tool failure, or the transport broke mid-call."""

    def __init__(self, tool_name: str, message: str, code: int | str | None = None) -> None:
        super().__init__(message)
        self.tool_name = tool_name
        self.message = message
        self.code = code

    def __str__(self) -> str:
        return f"{self.tool_name}: {self.message}"


class ValidationError(BrowseError):
    """An action payload is missing a required field or has the wrong type."""

    def __init__(self, action: str, field: str) -> None:
        super().__init__(f"Invalid {action} content: need a valid {field}")
        self.action = action
        self.field = field


def root_cause(exc: BaseException) -> BaseException:
    """First leaf of a (possibly nested) exception group, else ``exc`` itself.

    The MCP SDK runs its streams in anyio task groups, so a refused connection
    arrives as "unhandled errors in a TaskGroup" unless it is unwrapped.
    """
    while isinstance(exc, BaseExceptionGroup) and exc.exceptions:
        exc = exc.exceptions[0]
    return exc


def describe(exc: BaseException) -> str:
    """Short human-readable message for ``exc``."""
    cause = root_cause(exc)
    return str(cause) or type(cause).__name__
