"""Plain HTTP transport — session id in the URL path.

Dialect spoken by simple automation servers::

    POST   {base}/session                 {browserType, headless, viewport} -> {sessionId}
    POST   {base}/session/{id}/{tool}     tool arguments                    -> result body
    DELETE {base}/session/{id}

A non-2xx status, or a body of ``{"success": false, "error": ...}``, is a
tool failure.  Screenshot bodies carry base64 image data in ``data``.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any

import aiohttp

from mcpbrowse.errors import ToolInvocationError
from mcpbrowse.logger import logger
from mcpbrowse.types import ImageData, Session, ToolCall, ToolResult


class RestTransport:
    """Tool calls as JSON POSTs against a per-session URL."""

    name = "rest"

    def __init__(
        self,
        base_url: str,
        *,
        launch_options: dict[str, Any] | None = None,
        request_timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._launch_options = launch_options or {}
        self._timeout = aiohttp.ClientTimeout(total=request_timeout)
        self._http: aiohttp.ClientSession | None = None

    async def connect(self, session: Session) -> None:
        self._http = aiohttp.ClientSession(timeout=self._timeout)
        try:
            async with self._http.post(
                f"{self.base_url}/session", json=self._launch_options
            ) as resp:
                body = await _read_body(resp)
                if resp.status >= 400:
                    raise RuntimeError(
                        f"server rejected session (HTTP {resp.status}): {_error_text(body)}"
                    )
            session_id = body.get("sessionId") if isinstance(body, dict) else None
            if not session_id:
                raise RuntimeError("malformed session response: missing sessionId")
            session.session_id = str(session_id)
        except BaseException:
            await self._release()
            raise

    async def call(self, session: Session, call: ToolCall) -> ToolResult:
        if self._http is None or session.session_id is None:
            raise ToolInvocationError(call.name, "HTTP session is not open", code="transport")

        url = f"{self.base_url}/session/{session.session_id}/{call.name}"
        try:
            async with self._http.post(url, json=call.arguments) as resp:
                body = await _read_body(resp)
                status = resp.status
        except (aiohttp.ClientError, TimeoutError) as exc:
            message = str(exc) or type(exc).__name__
            raise ToolInvocationError(call.name, message, code="transport") from exc

        if status >= 400:
            raise ToolInvocationError(call.name, _error_text(body), code=status)
        if isinstance(body, dict) and body.get("success") is False:
            raise ToolInvocationError(call.name, _error_text(body), code=body.get("code"))
        return _normalize(call.name, body)

    async def close(self, session: Session) -> None:
        try:
            if self._http is not None and session.session_id is not None:
                async with self._http.delete(
                    f"{self.base_url}/session/{session.session_id}"
                ) as resp:
                    if resp.status >= 400 and resp.status != 404:
                        raise RuntimeError(f"session delete failed (HTTP {resp.status})")
        finally:
            await self._release()

    async def _release(self) -> None:
        if self._http is not None:
            await self._http.close()
            self._http = None


async def _read_body(resp: aiohttp.ClientResponse) -> Any:
    """JSON body if the server sent JSON, else the raw text."""
    if resp.content_type == "application/json":
        return await resp.json()
    return await resp.text()


def _error_text(body: Any) -> str:
    if isinstance(body, dict):
        error = body.get("error") or body.get("message")
        if isinstance(error, dict):
            error = error.get("message")
        if error:
            return str(error)
        return "request failed"
    return str(body) or "request failed"


def _normalize(tool_name: str, body: Any) -> ToolResult:
    if not isinstance(body, dict):
        return ToolResult(tool_name=tool_name, text=str(body or ""))

    images: list[ImageData] = []
    raw = body.get("data")
    if isinstance(raw, str) and "screenshot" in tool_name.lower():
        try:
            images.append(
                ImageData(
                    mime_type=body.get("mimeType", "image/png"),
                    data=base64.b64decode(raw, validate=True),
                )
            )
        except (binascii.Error, ValueError):
            logger.warning("Screenshot data is not base64; ignoring", tool=tool_name)

    text = body.get("content") or body.get("text") or ""
    return ToolResult(
        tool_name=tool_name,
        text=text if isinstance(text, str) else "",
        data=body,
        images=images,
    )
