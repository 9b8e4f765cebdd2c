"""Test configuration and fixtures for the GyroLaser relay tests."""
import os
import sys
import copy
import socket
import asyncio
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio
import socketio
from aiohttp import web

# Add application root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gyrolaser_core.registry import ConnectionRegistry
from gyrolaser_server.server import create_app
from gyrolaser_utils.config_loader import DEFAULT_CONFIG
from gyrolaser_utils.event_utils import EventType
from gyrolaser_utils.message_utils import MessageType

# Add timeout constant for socket operations
SOCKET_TIMEOUT = 2.0

SERVER_EVENTS = [e.value for e in EventType] + [MessageType.LASER_MOVE.value, MessageType.ERROR.value]


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def test_config(tmp_path):
    """Provide test configuration."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    config["server"].update({
        "host": "127.0.0.1",
        "port": _free_port(),
        "static_root": str(tmp_path),
    })
    config["health_check"]["enabled"] = False
    return config


@pytest.fixture
def registry():
    return ConnectionRegistry()


@pytest.fixture
def mock_sio():
    """Stand-in for socketio.AsyncServer; only ``emit`` is used by the core."""
    sio = Mock()
    sio.emit = AsyncMock()
    return sio


@pytest_asyncio.fixture
async def server_app(test_config):
    """Provide a running test server: (app, server_url)."""
    app, _ = create_app(test_config)
    runner = web.AppRunner(app)
    await runner.setup()
    try:
        site = web.TCPSite(runner, test_config['server']['host'], test_config['server']['port'])
        await site.start()
        server_url = f"http://{test_config['server']['host']}:{test_config['server']['port']}"
        yield app, server_url
    finally:
        await runner.cleanup()


class RecordingClient:
    """socketio.AsyncClient that records every relay event it receives."""

    def __init__(self):
        self.sio = socketio.AsyncClient(logger=False, engineio_logger=False)
        self.received = {name: [] for name in SERVER_EVENTS}
        self._queues = {name: asyncio.Queue() for name in SERVER_EVENTS}
        for name in SERVER_EVENTS:
            self.sio.on(name, self._make_handler(name))

    def _make_handler(self, name):
        async def handler(*args):
            data = args[0] if args else None
            self.received[name].append(data)
            self._queues[name].put_nowait(data)
        return handler

    async def connect(self, url):
        await asyncio.wait_for(self.sio.connect(url), timeout=SOCKET_TIMEOUT)

    async def emit(self, event, data=None):
        await self.sio.emit(event, data)

    async def wait_for(self, event, timeout=SOCKET_TIMEOUT):
        return await asyncio.wait_for(self._queues[event].get(), timeout=timeout)

    async def join_viewer(self):
        await self.emit(MessageType.JOIN_ROOM.value, {"role": "viewer"})
        data = await self.wait_for(EventType.ROOM_CREATED.value)
        return data["roomId"]

    def count(self, event):
        return len(self.received[event])

    async def disconnect(self):
        if self.sio.connected:
            await self.sio.disconnect()


@pytest_asyncio.fixture
async def make_client(server_app):
    """Factory of connected RecordingClients, all disconnected at teardown."""
    _, server_url = server_app
    clients = []

    async def factory():
        client = RecordingClient()
        await client.connect(server_url)
        clients.append(client)
        return client

    yield factory
    for client in clients:
        await client.disconnect()
