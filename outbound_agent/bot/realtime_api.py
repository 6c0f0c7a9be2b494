import asyncio
import json
import logging
from typing import Any, AsyncIterator, Dict, Union

import websockets
from websockets.exceptions import ConnectionClosed, ConnectionClosedOK, WebSocketException

from outbound_agent.config.constants import (
    LOGGER_NAME,
    REALTIME_API_URL,
    REALTIME_BETA_HEADER,
)
from outbound_agent.errors import BridgeConnectionError, Result
from outbound_agent.models.session import AIConnectionState

logger = logging.getLogger(LOGGER_NAME)

# WebSocket configuration for low latency
WS_MAX_SIZE = 16 * 1024 * 1024  # 16MB - large enough for audio chunks
WS_PING_INTERVAL = 5  # 5 seconds between pings


class RealtimeClient:
    """
    Client for one OpenAI Realtime API WebSocket session.

    The client never reconnects: a failed connect or a dropped socket is reported
    to the caller, which tears the call down.
    """
    def __init__(self, api_key: str, model: str):
        self.api_key = api_key
        self.model = model
        self.ws = None
        self.state = AIConnectionState.NOT_CONNECTED
        logger.info(f"RealtimeClient initialized with model: {model}")

    @property
    def url(self) -> str:
        return f"{REALTIME_API_URL}?model={self.model}"

    @property
    def is_open(self) -> bool:
        return self.state is AIConnectionState.OPEN

    async def connect(self) -> Result[None]:
        """
        Connect to the OpenAI Realtime WebSocket endpoint.

        Returns:
            Result: success once the socket is open, or a BridgeConnectionError
        """
        if self.state is not AIConnectionState.NOT_CONNECTED:
            return Result.failure(
                BridgeConnectionError(f"Cannot connect from state {self.state.value}")
            )

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "OpenAI-Beta": REALTIME_BETA_HEADER,
        }
        self.state = AIConnectionState.CONNECTING
        logger.info(f"Connecting to OpenAI Realtime API with model: {self.model}")
        logger.debug(f"Using headers: Authorization: Bearer [API_KEY_HIDDEN], OpenAI-Beta: {REALTIME_BETA_HEADER}")

        try:
            ws = await websockets.connect(
                self.url,
                max_size=WS_MAX_SIZE,
                ping_interval=WS_PING_INTERVAL,
                compression=None,  # Disable compression for lower latency
                additional_headers=headers,
            )
        except (OSError, asyncio.TimeoutError, WebSocketException) as e:
            self.state = AIConnectionState.CLOSED
            logger.error(f"Failed to connect to OpenAI Realtime API: {e}")
            return Result.failure(BridgeConnectionError(f"Realtime API connection failed: {e}"))

        # close() ran while the handshake was in flight
        if self.state is not AIConnectionState.CONNECTING:
            logger.info("Client closed during connect, dropping the new connection")
            await ws.close()
            return Result.failure(BridgeConnectionError("Closed during connect"))

        self.ws = ws
        self.state = AIConnectionState.OPEN
        logger.info("Connected to the OpenAI Realtime API")
        return Result.success()

    async def send_json(self, message: Dict[str, Any]) -> Result[None]:
        """
        Serialize and send one command.

        Args:
            message: The command as a JSON-compatible dict

        Returns:
            Result: failure if the socket is not open or the send fails
        """
        if not self.is_open or self.ws is None:
            return Result.failure(
                BridgeConnectionError(f"Cannot send - connection is {self.state.value}")
            )

        try:
            await self.ws.send(json.dumps(message))
        except ConnectionClosed as e:
            self.state = AIConnectionState.CLOSED
            logger.warning(f"Connection closed while sending {message.get('type')}: {e}")
            return Result.failure(BridgeConnectionError(f"Send failed: {e}"))
        return Result.success()

    async def messages(self) -> AsyncIterator[Union[str, bytes]]:
        """
        Yield raw messages until the connection closes.

        The state is CLOSED once iteration ends, whatever the reason.
        """
        if self.ws is None:
            return
        try:
            async for message in self.ws:
                yield message
        except ConnectionClosedOK:
            logger.info("WebSocket connection closed normally")
        except ConnectionClosed as e:
            logger.warning(f"WebSocket connection closed unexpectedly: {e}")
        finally:
            self.state = AIConnectionState.CLOSED

    async def close(self) -> None:
        """Close the WebSocket connection. Safe to call more than once."""
        if self.state is AIConnectionState.CLOSED and self.ws is None:
            return
        self.state = AIConnectionState.CLOSED
        ws, self.ws = self.ws, None
        if ws is not None:
            logger.debug("Closing WebSocket connection")
            await ws.close()
            logger.info("Disconnected from the OpenAI Realtime API")
