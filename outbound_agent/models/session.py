"""
Per-call state and conversation configuration.

This module provides the ``CallSession`` tracked by each media stream bridge and the
immutable ``SessionConfig`` sent to the OpenAI Realtime API when a session starts.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict


class AIConnectionState(str, Enum):
    """Lifecycle of the outbound Realtime API connection."""
    NOT_CONNECTED = "not_connected"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class BridgeState(str, Enum):
    """Lifecycle of one media stream bridge."""
    AWAITING_START = "awaiting_start"
    HANDSHAKING = "handshaking"
    ACTIVE = "active"
    CLOSED = "closed"


class SessionConfig(BaseModel):
    """Conversation settings sent once per Realtime API connection."""

    model_config = ConfigDict(frozen=True)

    voice: str
    instructions: str
    input_audio_format: str
    output_audio_format: str
    turn_detection: str
    modalities: Tuple[str, ...]
    temperature: float

    def to_session_payload(self) -> dict:
        """Render the ``session`` object of a ``session.update`` command."""
        return {
            "turn_detection": {"type": self.turn_detection},
            "input_audio_format": self.input_audio_format,
            "output_audio_format": self.output_audio_format,
            "voice": self.voice,
            "instructions": self.instructions,
            "modalities": list(self.modalities),
            "temperature": self.temperature,
        }


class CallSession:
    """
    State of a single call leg, owned by exactly one bridge.

    ``stream_sid`` is the correlation token Twilio assigns in its ``start`` event.
    It stays ``None`` until that event arrives, and audio produced before then is
    still forwarded with a null ``streamSid``.
    """

    def __init__(self):
        self.stream_sid: Optional[str] = None
        self.ai_state = AIConnectionState.NOT_CONNECTED
        self.bridge_state = BridgeState.AWAITING_START
        self.created_at = datetime.now(timezone.utc)

    @property
    def ai_open(self) -> bool:
        return self.ai_state is AIConnectionState.OPEN

    @property
    def closed(self) -> bool:
        return self.bridge_state is BridgeState.CLOSED

    def mark_active(self) -> None:
        if self.bridge_state in (BridgeState.AWAITING_START, BridgeState.HANDSHAKING):
            self.bridge_state = BridgeState.ACTIVE

    def __repr__(self) -> str:
        return (
            f"CallSession(stream_sid={self.stream_sid!r}, ai_state={self.ai_state.value}, "
            f"bridge_state={self.bridge_state.value})"
        )
