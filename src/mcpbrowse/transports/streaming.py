"""MCP SDK transports — streamable HTTP and SSE.

The SDK's client transports are anyio context managers: they must be entered
and exited by the same task.  Host frameworks usually start and stop services
from different tasks, so each McpTransport owns its contexts from a dedicated
runner task.  connect() waits for the runner to finish the handshake; close()
signals it to unwind and waits for it.

Streamable HTTP delivers tool results as server-sent events with ids.  The
SDK re-attaches to a broken result stream by itself (a GET with
``Last-Event-ID``, no new POST); this transport only records the last id seen
as the session's resumption token.  A call that still fails surfaces as an
McpError and is reported, never re-sent.
"""

from __future__ import annotations

import asyncio
import base64
from contextlib import AsyncExitStack
from datetime import timedelta
from typing import Any, Literal

import httpx
from mcp import ClientSession, McpError, types
from mcp.client.sse import sse_client
from mcp.client.streamable_http import streamable_http_client
from mcp.shared.message import ClientMessageMetadata

from mcpbrowse.errors import ToolInvocationError, describe, root_cause
from mcpbrowse.logger import logger
from mcpbrowse.types import ImageData, Session, ToolCall, ToolResult


class McpTransport:
    """Tool calls over an MCP client session (streamable HTTP or SSE)."""

    def __init__(
        self,
        url: str,
        *,
        kind: Literal["streamable_http", "sse"] = "streamable_http",
        request_timeout: float = 30.0,
        sse_read_timeout: float = 300.0,
    ) -> None:
        self.name = kind
        self.url = url
        self._request_timeout = timedelta(seconds=request_timeout)
        self._sse_read_timeout = sse_read_timeout

        self._mcp: ClientSession | None = None
        self._runner: asyncio.Task[None] | None = None
        self._stop: asyncio.Event | None = None
        self._exit_error: BaseException | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def _open_streams(self, stack: AsyncExitStack) -> Any:
        if self.name == "sse":
            return await stack.enter_async_context(
                sse_client(
                    self.url,
                    timeout=self._request_timeout.total_seconds(),
                    sse_read_timeout=self._sse_read_timeout,
                )
            )
        # The SDK leaves a caller-supplied client open; the stack closes it.
        http = await stack.enter_async_context(
            httpx.AsyncClient(
                timeout=httpx.Timeout(
                    self._request_timeout.total_seconds(), read=self._sse_read_timeout
                ),
                follow_redirects=True,
            )
        )
        return await stack.enter_async_context(streamable_http_client(self.url, http_client=http))

    async def connect(self, session: Session) -> None:
        loop = asyncio.get_running_loop()
        ready: asyncio.Future[None] = loop.create_future()
        self._stop = asyncio.Event()
        self._exit_error = None
        self._runner = asyncio.create_task(self._run(session, ready), name=f"mcp-{self.name}")
        try:
            await ready
        except BaseException:
            self._stop.set()
            if not self._runner.done():
                self._runner.cancel()
            await asyncio.gather(self._runner, return_exceptions=True)
            self._runner = None
            raise

    async def _run(self, session: Session, ready: asyncio.Future[None]) -> None:
        """Own the SDK contexts for the lifetime of the connection."""
        assert self._stop is not None
        try:
            async with AsyncExitStack() as stack:
                streams = await self._open_streams(stack)
                read_stream, write_stream = streams[0], streams[1]
                get_session_id = streams[2] if len(streams) > 2 else None

                mcp = await stack.enter_async_context(
                    ClientSession(
                        read_stream,
                        write_stream,
                        read_timeout_seconds=self._request_timeout,
                    )
                )
                await mcp.initialize()
                session.session_id = get_session_id() if get_session_id else None
                self._mcp = mcp
                ready.set_result(None)
                await self._stop.wait()
        except Exception as exc:
            # anyio task groups inside the SDK wrap the real failure
            cause = root_cause(exc)
            if not ready.done():
                ready.set_exception(cause)
                return
            # Connection dropped after the handshake, or teardown failed.
            # close() reports it; calls in the meantime fail on their own.
            self._exit_error = cause
            logger.warning(
                "MCP connection ended with error", transport=self.name, error=describe(cause)
            )
        finally:
            self._mcp = None

    async def close(self, session: Session) -> None:
        runner = self._runner
        self._runner = None
        if runner is None:
            return
        assert self._stop is not None
        self._stop.set()
        await asyncio.gather(runner, return_exceptions=True)
        if self._exit_error is not None:
            error, self._exit_error = self._exit_error, None
            raise error

    # ------------------------------------------------------------------
    # Tool calls
    # ------------------------------------------------------------------

    async def call(self, session: Session, call: ToolCall) -> ToolResult:
        mcp = self._mcp
        if mcp is None:
            raise ToolInvocationError(call.name, "MCP connection is not open", code="transport")

        async def _track(token: str) -> None:
            session.resumption_token = token

        request = types.ClientRequest(
            types.CallToolRequest(
                method="tools/call",
                params=types.CallToolRequestParams(name=call.name, arguments=call.arguments),
            )
        )
        try:
            result = await mcp.send_request(
                request,
                types.CallToolResult,
                request_read_timeout_seconds=self._request_timeout,
                metadata=ClientMessageMetadata(on_resumption_token_update=_track),
            )
        except McpError as exc:
            raise ToolInvocationError(call.name, exc.error.message, code=exc.error.code) from exc
        except Exception as exc:
            raise ToolInvocationError(call.name, describe(exc), code="transport") from exc
        return _normalize(call.name, result)


def _normalize(tool_name: str, result: types.CallToolResult) -> ToolResult:
    """Flatten MCP content blocks; raise if the server flagged an error."""
    texts: list[str] = []
    images: list[ImageData] = []
    for block in result.content:
        if isinstance(block, types.TextContent):
            texts.append(block.text)
        elif isinstance(block, types.ImageContent):
            images.append(ImageData(mime_type=block.mimeType, data=base64.b64decode(block.data)))
    text = "\n".join(texts)
    if result.isError:
        raise ToolInvocationError(tool_name, text or "tool reported an error")
    return ToolResult(
        tool_name=tool_name,
        text=text,
        data=result.structuredContent,
        images=images,
    )
