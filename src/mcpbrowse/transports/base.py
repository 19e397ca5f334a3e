"""Transport contract shared by every wire mechanism."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from mcpbrowse.types import Session, ToolCall, ToolResult


@runtime_checkable
class Transport(Protocol):
    """How a SessionClient talks to the automation server.

    Implementations:
        - ``connect(session)``: open the connection and complete the
          handshake, storing the server-assigned id on ``session``. Raise on
          any failure after releasing whatever was opened.
        - ``call(session, call)``: send exactly one tool call. Return a
          ToolResult or raise ToolInvocationError; never re-send the call.
        - ``close(session)``: terminate the remote session (may raise) and
          release local resources (must always happen).
    """

    name: str

    async def connect(self, session: Session) -> None: ...

    async def call(self, session: Session, call: ToolCall) -> ToolResult: ...

    async def close(self, session: Session) -> None: ...
