"""Shared test fixtures for mcpbrowse."""

from __future__ import annotations

import asyncio
import os

import pytest

from mcpbrowse.client import SessionClient
from mcpbrowse.config import reset_settings
from mcpbrowse.service import PlaywrightService, reset_service
from mcpbrowse.types import Session, ToolCall, ToolResult

# ---------------------------------------------------------------------------
# Shared helpers (plain classes, importable by test files)
# ---------------------------------------------------------------------------


class FakeTransport:
    """In-process transport that records traffic instead of sending it.

    ``results`` maps tool name → ToolResult to return or exception to raise.
    """

    name = "fake"

    def __init__(self) -> None:
        self.connects = 0
        self.closes = 0
        self.calls: list[ToolCall] = []
        self.results: dict[str, ToolResult | BaseException] = {}
        self.connect_error: BaseException | None = None
        self.close_error: BaseException | None = None
        self.is_open = False

    async def connect(self, session: Session) -> None:
        self.connects += 1
        await asyncio.sleep(0)
        if self.connect_error is not None:
            raise self.connect_error
        self.is_open = True
        session.session_id = f"session-{self.connects}"

    async def call(self, session: Session, call: ToolCall) -> ToolResult:
        self.calls.append(call)
        outcome = self.results.get(call.name)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome or ToolResult(tool_name=call.name)

    async def close(self, session: Session) -> None:
        self.closes += 1
        self.is_open = False
        if self.close_error is not None:
            raise self.close_error


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolated_settings(tmp_path, monkeypatch):
    """Keep stray mcpbrowse.toml / .env / env vars out of every test."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("MCP_SERVER_URL", raising=False)
    for key in [k for k in os.environ if k.startswith("MCPBROWSE_")]:
        monkeypatch.delenv(key)
    reset_settings()
    reset_service()
    yield
    reset_settings()
    reset_service()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def client(transport: FakeTransport) -> SessionClient:
    return SessionClient(transport)


@pytest.fixture
async def ready_client(client: SessionClient) -> SessionClient:
    await client.initialize()
    return client


@pytest.fixture
def service(client: SessionClient) -> PlaywrightService:
    return PlaywrightService(client=client)
