"""Data models for mcpbrowse."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any


class SessionState(enum.StrEnum):
    UNINITIALIZED = "uninitialized"
    CONNECTING = "connecting"
    READY = "ready"
    CLOSED = "closed"


@dataclass
class Session:
    """One live connection to the automation server.

    Mutated only by SessionClient lifecycle methods (and the transport, for
    the resumption token it observes while streaming).
    """

    state: SessionState = SessionState.UNINITIALIZED
    session_id: str | None = None  # assigned by the server
    resumption_token: str | None = None  # last event id seen on a stream


@dataclass(frozen=True)
class ToolCall:
    """A single remote tool invocation request."""

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ImageData:
    mime_type: str
    data: bytes


@dataclass
class ToolResult:
    """Successful tool result. Failures are raised as ToolInvocationError."""

    tool_name: str
    text: str = ""
    data: Any = None  # structured payload, when the server sends one
    images: list[ImageData] = field(default_factory=list)
