"""
Pytest configuration for Chat Gateway tests.
"""
import os

# Set test environment variables before the app is imported
os.environ["PUBSUB_URL"] = "http://pubsub.test"
os.environ["DEBUG"] = "true"
os.environ["DISCONNECT_POLL_INTERVAL"] = "0.01"

import pytest
import respx
from httpx import ASGITransport, AsyncClient
from sse_starlette.sse import AppStatus

from chat_gateway.main import app
from chat_gateway.services.relay import chat_relay

PUBSUB_URL = "http://pubsub.test"


@pytest.fixture(autouse=True)
def reset_sse_app_status(monkeypatch):
    """The SSE exit event binds to the loop it was created on; each test has its own loop."""
    monkeypatch.setattr(AppStatus, "should_exit_event", None, raising=False)


@pytest.fixture
async def relay():
    """Initialized relay; the ASGI test transport does not run the lifespan."""
    await chat_relay.initialize()
    yield chat_relay
    await chat_relay.shutdown()


@pytest.fixture
async def async_client(relay):
    """Create an async test client against the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def pubsub():
    """Mocked pub/sub service."""
    with respx.mock(base_url=PUBSUB_URL, assert_all_called=False) as mock:
        yield mock
