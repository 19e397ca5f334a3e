"""Playwright service — the process-wide owner of the session client.

The host framework starts the service once at boot and stops it at shutdown.
Actions receive the service by injection and borrow its client per call.
Only one instance should exist per process: two services would open two
uncoordinated sessions against the same automation server.  Use
:func:`get_service` rather than constructing one directly.
"""

from __future__ import annotations

from mcpbrowse.client import SessionClient
from mcpbrowse.config import Settings, get_settings
from mcpbrowse.logger import logger
from mcpbrowse.transports import create_transport

PLAYWRIGHT_SERVICE_NAME = "PLAYWRIGHT"


class PlaywrightService:
    """Owns one SessionClient for the host's service lifecycle."""

    service_name = PLAYWRIGHT_SERVICE_NAME

    def __init__(
        self,
        settings: Settings | None = None,
        client: SessionClient | None = None,
    ) -> None:
        self._settings = settings
        self._client = client

    def _build_client(self) -> SessionClient:
        s = self._settings or get_settings()
        return SessionClient(
            create_transport(s),
            tool_names=s.resolved_tool_names,
            browser=s.browser,
        )

    async def start(self) -> None:
        """Create (if needed) and initialize the client."""
        if self._client is None:
            self._client = self._build_client()
        try:
            await self._client.initialize()
        except Exception:
            logger.exception("Failed to start PlaywrightService")
            raise
        logger.info("PlaywrightService started", transport=self._client.transport.name)

    async def stop(self) -> None:
        """Close the client.  Local resources are released even on failure."""
        if self._client is None:
            return
        await self._client.close()
        logger.info("PlaywrightService stopped")

    def get_client(self) -> SessionClient:
        """Borrow the client.  Callers must not close it themselves."""
        if self._client is None:
            self._client = self._build_client()
        return self._client


_service: PlaywrightService | None = None


def get_service() -> PlaywrightService:
    """Lazy process-wide singleton."""
    global _service
    if _service is None:
        _service = PlaywrightService()
    return _service


def reset_service() -> None:
    """Forget the singleton (for tests).  Does not stop it."""
    global _service
    _service = None
