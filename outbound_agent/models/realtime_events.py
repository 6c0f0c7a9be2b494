"""
Pydantic models for OpenAI Realtime API message structures.

This module provides type-safe models for the messages exchanged with the OpenAI Realtime API,
including the commands the bridge sends and the server events it reacts to.
"""

import json
from typing import Any, Dict, List, Literal, Union

from pydantic import BaseModel, Field, ValidationError

from outbound_agent.config.constants import (
    LOG_EVENT_TYPES,
    MESSAGE_TYPE_RESPONSE_AUDIO_DELTA,
    MESSAGE_TYPE_SESSION_UPDATED,
)
from outbound_agent.errors import ParseError, Result


# Commands sent to the Realtime API

class RealtimeCommand(BaseModel):
    """Base model for client commands."""
    type: str

    def to_message(self) -> dict:
        return self.model_dump(mode="json")


class SessionUpdateCommand(RealtimeCommand):
    type: Literal["session.update"] = "session.update"
    session: Dict[str, Any]


class InputTextContent(BaseModel):
    type: Literal["input_text"] = "input_text"
    text: str


class ConversationMessage(BaseModel):
    type: Literal["message"] = "message"
    role: Literal["user"] = "user"
    content: List[InputTextContent]


class ConversationItemCreateCommand(RealtimeCommand):
    type: Literal["conversation.item.create"] = "conversation.item.create"
    item: ConversationMessage


class ResponseCreateCommand(RealtimeCommand):
    type: Literal["response.create"] = "response.create"


class InputAudioBufferAppendCommand(RealtimeCommand):
    type: Literal["input_audio_buffer.append"] = "input_audio_buffer.append"
    audio: str = Field(..., description="Base64-encoded audio, passed through untouched")


# Server events received from the Realtime API

class AudioDeltaEvent(BaseModel):
    """A chunk of synthesized audio."""
    type: Literal["response.audio.delta"]
    delta: str = Field(..., min_length=1)


class SessionUpdatedEvent(BaseModel):
    """The server accepted the session configuration."""
    type: Literal["session.updated"]
    session: Dict[str, Any] = Field(default_factory=dict)


class LoggedEvent(BaseModel):
    """An event kept for observability only, with its full payload."""
    type: str
    payload: Dict[str, Any]


class OtherRealtimeEvent(BaseModel):
    """Any other event; ignored."""
    type: str


RealtimeEvent = Union[AudioDeltaEvent, SessionUpdatedEvent, LoggedEvent, OtherRealtimeEvent]


def parse_realtime_event(raw: Union[str, bytes]) -> Result[RealtimeEvent]:
    """
    Parse a raw Realtime API server event.

    Audio deltas without a payload are treated as ``OtherRealtimeEvent``; events in
    ``LOG_EVENT_TYPES`` are wrapped in ``LoggedEvent`` together with their payload.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        return Result.failure(ParseError(f"Invalid JSON ({e})", raw))

    if not isinstance(data, dict):
        return Result.failure(ParseError("Message is not a JSON object", raw))

    event_type = data.get("type")
    if not isinstance(event_type, str):
        return Result.failure(ParseError("Message has no type", raw))

    try:
        if event_type == MESSAGE_TYPE_RESPONSE_AUDIO_DELTA and data.get("delta"):
            return Result.success(AudioDeltaEvent.model_validate(data))
        if event_type == MESSAGE_TYPE_SESSION_UPDATED:
            return Result.success(SessionUpdatedEvent.model_validate(data))
    except ValidationError as e:
        return Result.failure(
            ParseError(f"Invalid {event_type} event ({e.error_count()} errors)", raw)
        )

    if event_type in LOG_EVENT_TYPES:
        return Result.success(LoggedEvent(type=event_type, payload=data))
    return Result.success(OtherRealtimeEvent(type=event_type))
