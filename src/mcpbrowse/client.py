"""Session client — one remote automation session and its tool calls.

Lifecycle::

    uninitialized --initialize()--> connecting --ok--> ready --close()--> closed
                                        |                                  |
                                        +--fail--> uninitialized           +--initialize()--> ...

initialize() and close() are serialized by a lock.  close() flips the state
to ``closed`` before it touches the network, so an invoke() that starts after
close() has begun is rejected rather than racing the teardown.

Tool calls are sent at most once.  A failed navigate or click is reported to
the caller, never silently repeated.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from mcpbrowse.config import DEFAULT_TOOL_NAMES, BrowserConfig
from mcpbrowse.errors import (
    NotInitializedError,
    SessionConnectionError,
    ToolInvocationError,
    describe,
)
from mcpbrowse.logger import logger
from mcpbrowse.transports.base import Transport
from mcpbrowse.types import Session, SessionState, ToolCall, ToolResult


class SessionClient:
    """Uniform "call a named tool" interface over a pluggable transport."""

    def __init__(
        self,
        transport: Transport,
        *,
        tool_names: Mapping[str, str] | None = None,
        browser: BrowserConfig | None = None,
    ) -> None:
        self._transport = transport
        # operation -> remote tool name; a full map (Settings.resolved_tool_names)
        self._tool_names = dict(tool_names or DEFAULT_TOOL_NAMES)
        self._browser = browser or BrowserConfig()
        self._session = Session()
        self._lifecycle = asyncio.Lock()

    @property
    def state(self) -> SessionState:
        return self._session.state

    @property
    def session_id(self) -> str | None:
        return self._session.session_id

    @property
    def resumption_token(self) -> str | None:
        return self._session.resumption_token

    @property
    def transport(self) -> Transport:
        return self._transport

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Connect and handshake.  No-op when already ready."""
        async with self._lifecycle:
            if self._session.state is SessionState.READY:
                return

            was_closed = self._session.state is SessionState.CLOSED
            fallback = SessionState.CLOSED if was_closed else SessionState.UNINITIALIZED
            self._session = Session(state=SessionState.CONNECTING)
            try:
                await self._transport.connect(self._session)
            except asyncio.CancelledError:
                self._session.state = fallback
                raise
            except Exception as exc:
                self._session.state = fallback
                logger.error(
                    "Failed to initialize MCP session",
                    transport=self._transport.name,
                    error=describe(exc),
                )
                raise SessionConnectionError(f"MCP handshake failed: {describe(exc)}") from exc

            self._session.state = SessionState.READY
            logger.info(
                "MCP session initialized",
                transport=self._transport.name,
                session_id=self._session.session_id,
            )

            if self._browser.launch_on_connect and self._transport.name != "rest":
                try:
                    await self.start_browser()
                except ToolInvocationError as exc:
                    await self._teardown()
                    self._session.state = SessionState.UNINITIALIZED
                    raise SessionConnectionError(f"Browser launch failed: {exc.message}") from exc

    async def close(self) -> None:
        """Terminate the session (best effort) and release local resources.

        Never raises; termination failures are logged.
        """
        async with self._lifecycle:
            if self._session.state in (SessionState.CLOSED, SessionState.UNINITIALIZED):
                self._session.state = SessionState.CLOSED
                return
            self._session.state = SessionState.CLOSED
            await self._teardown()
            logger.info("MCP session closed", session_id=self._session.session_id)

    async def _teardown(self) -> None:
        try:
            await self._transport.close(self._session)
        except Exception as exc:
            logger.warning(
                "MCP session termination failed; local resources released",
                session_id=self._session.session_id,
                error=str(exc),
            )

    # ------------------------------------------------------------------
    # Invocation
    # ------------------------------------------------------------------

    async def invoke(self, tool_name: str, args: Mapping[str, Any] | None = None) -> ToolResult:
        """Send one tool call and return its result.

        Raises:
            NotInitializedError: session is not ready (nothing is sent).
            ToolInvocationError: the server reported failure or the call broke.
        """
        state = self._session.state
        if state is not SessionState.READY:
            raise NotInitializedError(state.value)

        call = ToolCall(name=tool_name, arguments=dict(args or {}))
        logger.debug("Invoking MCP tool", tool=tool_name, session_id=self._session.session_id)
        try:
            return await self._transport.call(self._session, call)
        except ToolInvocationError as exc:
            logger.error("MCP request failed", tool=tool_name, error=exc.message, code=exc.code)
            raise
        except Exception as exc:
            message = describe(exc)
            logger.error("MCP request failed", tool=tool_name, error=message)
            raise ToolInvocationError(tool_name, message, code="transport") from exc

    def tool_name(self, operation: str) -> str:
        return self._tool_names[operation]

    # ------------------------------------------------------------------
    # Browser operations
    # ------------------------------------------------------------------

    async def start_browser(self) -> ToolResult:
        return await self.invoke(self.tool_name("start_browser"), self._browser.launch_options())

    async def navigate(self, url: str) -> ToolResult:
        return await self.invoke(self.tool_name("navigate"), {"url": url})

    async def click(self, selector: str) -> ToolResult:
        return await self.invoke(self.tool_name("click"), {"selector": selector})

    async def type(self, selector: str, text: str) -> ToolResult:
        return await self.invoke(self.tool_name("type"), {"selector": selector, "text": text})

    async def select(self, selector: str, value: str) -> ToolResult:
        return await self.invoke(self.tool_name("select"), {"selector": selector, "value": value})

    async def get_page_content(self) -> str:
        result = await self.invoke(self.tool_name("get_page_content"), {})
        return result.text

    async def wait_for_selector(self, selector: str, timeout_ms: int | None = None) -> ToolResult:
        args: dict[str, Any] = {"selector": selector}
        if timeout_ms is not None:
            args["options"] = {"timeout": timeout_ms}
        return await self.invoke(self.tool_name("wait_for_selector"), args)

    async def evaluate(self, script: str) -> Any:
        result = await self.invoke(self.tool_name("evaluate"), {"script": script})
        return result.data if result.data is not None else result.text

    async def screenshot(self, path: str) -> ToolResult:
        """Capture the page.  Image bytes in the result are written to ``path``.

        Servers that save the file themselves return no image data; then
        nothing is written locally.
        """
        result = await self.invoke(self.tool_name("screenshot"), {"path": path})
        if result.images:
            target = Path(path)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(result.images[0].data)
            logger.info("Screenshot saved", path=str(target), bytes=len(result.images[0].data))
        return result
