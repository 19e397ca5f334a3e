"""Tests for the Playwright service wrapper."""

from __future__ import annotations

import pytest

from mcpbrowse.client import SessionClient
from mcpbrowse.config import ServerConfig, Settings
from mcpbrowse.errors import SessionConnectionError
from mcpbrowse.service import PlaywrightService, get_service, reset_service
from mcpbrowse.transports import RestTransport
from mcpbrowse.types import SessionState


class TestLifecycle:
    async def test_start_initializes_client(self, service, transport):
        await service.start()
        assert service.get_client().state is SessionState.READY
        assert transport.connects == 1

    async def test_start_twice_keeps_one_session(self, service, transport):
        await service.start()
        await service.start()
        assert transport.connects == 1

    async def test_start_failure_propagates(self, service, transport):
        transport.connect_error = OSError("refused")
        with pytest.raises(SessionConnectionError):
            await service.start()

    async def test_stop_closes_client(self, service, transport):
        await service.start()
        await service.stop()
        assert service.get_client().state is SessionState.CLOSED
        assert transport.closes == 1

    async def test_stop_swallows_termination_failure(self, service, transport):
        await service.start()
        transport.close_error = RuntimeError("server gone")
        await service.stop()
        assert service.get_client().state is SessionState.CLOSED

    async def test_stop_before_start(self):
        await PlaywrightService(settings=Settings()).stop()


class TestClientConstruction:
    def test_client_built_from_settings(self):
        svc = PlaywrightService(settings=Settings(server=ServerConfig(transport="rest")))
        client = svc.get_client()
        assert isinstance(client, SessionClient)
        assert isinstance(client.transport, RestTransport)
        assert svc.get_client() is client

    def test_tool_name_overrides_reach_client(self):
        svc = PlaywrightService(settings=Settings(tool_names={"click": "CLICK"}))
        client = svc.get_client()
        assert client.tool_name("click") == "CLICK"
        assert client.tool_name("navigate") == "navigate"

    def test_injected_client_is_returned(self, service, client):
        assert service.get_client() is client


def test_get_service_is_process_wide():
    first = get_service()
    assert get_service() is first
    reset_service()
    assert get_service() is not first
