import asyncio
import logging
from unittest.mock import AsyncMock

import pytest
from fastapi import WebSocket
from fastapi.websockets import WebSocketState

from outbound_agent.config.constants import LOGGER_NAME
from outbound_agent.config.settings import Settings
from outbound_agent.errors import Result
from outbound_agent.models.session import AIConnectionState


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before each test"""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    logging.basicConfig(level=logging.NOTSET)
    app_logger = logging.getLogger(LOGGER_NAME)
    for handler in app_logger.handlers[:]:
        app_logger.removeHandler(handler)
    app_logger.setLevel(logging.NOTSET)
    app_logger.propagate = True
    yield


@pytest.fixture
def settings():
    return Settings(
        twilio_account_sid="AC00000000000000000000000000000000",
        twilio_auth_token="test-auth-token",
        phone_number_from="+15005550006",
        domain="agent.example.com",
        openai_api_key="test-api-key",
        allowed_numbers=("+15551230000",),
    )


@pytest.fixture
def session_config(settings):
    return settings.session_config()


@pytest.fixture
def telephony_ws():
    """A Twilio-side WebSocket mock that is connected in both directions."""
    websocket = AsyncMock(spec=WebSocket)
    websocket.client_state = WebSocketState.CONNECTED
    websocket.application_state = WebSocketState.CONNECTED
    return websocket


class StubRealtimeClient:
    """Records commands and replays scripted server events."""

    def __init__(self, state=AIConnectionState.OPEN, events=(), connect_result=None):
        self.state = state
        self.sent = []
        self.events = list(events)
        self.connect_result = connect_result or Result.success()
        self.close = AsyncMock(side_effect=self._close)
        self.hold_open = False

    @property
    def is_open(self):
        return self.state is AIConnectionState.OPEN

    async def connect(self):
        if self.connect_result.ok:
            self.state = AIConnectionState.OPEN
        else:
            self.state = AIConnectionState.CLOSED
        return self.connect_result

    async def send_json(self, message):
        self.sent.append(message)
        return Result.success()

    async def messages(self):
        for event in self.events:
            yield event
        if self.hold_open:
            await asyncio.Event().wait()
        self.state = AIConnectionState.CLOSED

    async def _close(self):
        self.state = AIConnectionState.CLOSED


@pytest.fixture
def realtime_stub():
    return StubRealtimeClient()


@pytest.fixture
def make_realtime_stub():
    return StubRealtimeClient
