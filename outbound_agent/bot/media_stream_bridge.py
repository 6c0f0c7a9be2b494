"""
Bridge module for connecting a Twilio Media Stream with the OpenAI Realtime API.

One ``MediaStreamBridge`` is created for every accepted media stream WebSocket. It
opens its own Realtime API connection right away, primes the session once the
socket has settled, and then relays audio in both directions until either side
goes away, at which point both connections are closed together.
"""

import asyncio
import json
import logging
from typing import Union

from fastapi import WebSocket
from fastapi.websockets import WebSocketDisconnect, WebSocketState

from outbound_agent.bot.event_translator import (
    translate_realtime_event,
    translate_telephony_event,
)
from outbound_agent.bot.realtime_api import RealtimeClient
from outbound_agent.bot.session_coordinator import prime_session
from outbound_agent.config.constants import LOGGER_NAME, SETTLE_DELAY_SECONDS
from outbound_agent.config.settings import Settings
from outbound_agent.models.realtime_events import parse_realtime_event
from outbound_agent.models.session import AIConnectionState, BridgeState, CallSession, SessionConfig
from outbound_agent.models.telephony_events import parse_telephony_event

logger = logging.getLogger(LOGGER_NAME)


class MediaStreamBridge:
    """
    Bridge between one Twilio media stream and one OpenAI Realtime session.

    This class handles:
    - Opening the Realtime API connection and priming the session
    - Relaying caller audio to OpenAI and synthesized audio back to Twilio
    - Closing both connections when either one ends
    """

    def __init__(self, websocket: WebSocket, ai_client: RealtimeClient,
                 session_config: SessionConfig, opening_line: str,
                 settle_delay: float = SETTLE_DELAY_SECONDS):
        self.websocket = websocket
        self.ai_client = ai_client
        self.session_config = session_config
        self.opening_line = opening_line
        self.settle_delay = settle_delay
        self.session = CallSession()
        self._closed = False

    @classmethod
    def from_settings(cls, websocket: WebSocket, settings: Settings) -> "MediaStreamBridge":
        client = RealtimeClient(settings.openai_api_key, settings.realtime_model)
        return cls(websocket, client, settings.session_config(), settings.opening_line)

    async def run(self) -> None:
        """
        Drive both halves of the bridge until one of them finishes.

        The telephony WebSocket must already be accepted.
        """
        logger.info("Client connected")
        telephony_task = asyncio.create_task(self._relay_telephony())
        realtime_task = asyncio.create_task(self._relay_realtime())
        try:
            await asyncio.wait(
                {telephony_task, realtime_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            await self.close()
            for task in (telephony_task, realtime_task):
                if not task.done():
                    task.cancel()
            results = await asyncio.gather(telephony_task, realtime_task, return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    logger.error("Bridge task failed", exc_info=result)

    async def handle_telephony_message(self, raw: Union[str, bytes]) -> None:
        """Translate one Twilio message and forward the resulting command, if any."""
        result = parse_telephony_event(raw)
        if not result.ok:
            logger.error(f"Error parsing message: {result.error.reason} Message: {raw!r}")
            return

        self._sync_ai_state()
        command = translate_telephony_event(result.value, self.session)
        if command is None:
            return

        sent = await self.ai_client.send_json(command)
        if not sent.ok:
            logger.warning(f"Dropped caller audio: {sent.error}")

    async def handle_realtime_message(self, raw: Union[str, bytes]) -> None:
        """Translate one Realtime API event and forward the resulting frame, if any."""
        result = parse_realtime_event(raw)
        if not result.ok:
            logger.error(f"Error processing OpenAI message: {result.error.reason} Raw message: {raw!r}")
            return

        frame = translate_realtime_event(result.value, self.session)
        if frame is None:
            return

        try:
            await self.websocket.send_text(json.dumps(frame))
        except (WebSocketDisconnect, RuntimeError, OSError) as e:
            logger.warning(f"Could not forward audio to Twilio: {e}")

    async def close(self) -> None:
        """Close both connections and release the session. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self.session.bridge_state = BridgeState.CLOSED

        await self.ai_client.close()
        self.session.ai_state = AIConnectionState.CLOSED

        if (self.websocket.client_state is WebSocketState.CONNECTED
                and self.websocket.application_state is WebSocketState.CONNECTED):
            try:
                await self.websocket.close()
            except (RuntimeError, OSError) as e:
                logger.debug(f"Twilio WebSocket already gone: {e}")

        logger.info(f"Call session closed for stream: {self.session.stream_sid}")

    async def _relay_telephony(self) -> None:
        try:
            while True:
                message = await self.websocket.receive()
                if message["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(message.get("code", 1000))
                await self.handle_telephony_message(message.get("text") or message.get("bytes") or b"")
        except WebSocketDisconnect:
            logger.info("Client disconnected.")

    async def _relay_realtime(self) -> None:
        self.session.ai_state = AIConnectionState.CONNECTING
        connected = await self.ai_client.connect()
        self._sync_ai_state()
        if not connected.ok:
            logger.error(f"Error in the OpenAI WebSocket: {connected.error}")
            return

        if self.session.bridge_state is BridgeState.AWAITING_START:
            self.session.bridge_state = BridgeState.HANDSHAKING

        await asyncio.sleep(self.settle_delay)
        primed = await prime_session(self.ai_client, self.session_config, self.opening_line)
        if not primed.ok:
            return

        async for message in self.ai_client.messages():
            await self.handle_realtime_message(message)
        self._sync_ai_state()
        logger.info("Disconnected from the OpenAI Realtime API")

    def _sync_ai_state(self) -> None:
        if not self._closed:
            self.session.ai_state = self.ai_client.state
