"""
Pydantic models for Twilio Media Streams WebSocket messages.

Inbound messages are parsed into a closed set of variants: ``StartEvent``,
``MediaEvent`` and ``OtherTelephonyEvent`` (connected, mark, stop, dtmf, ...).
Outbound audio is sent back as a ``TwilioMediaFrame``.
"""

import json
from typing import Dict, Literal, Optional, Type, Union

from pydantic import AliasChoices, BaseModel, Field, ValidationError

from outbound_agent.config.constants import TWILIO_EVENT_MEDIA, TWILIO_EVENT_START
from outbound_agent.errors import ParseError, Result


class StreamStart(BaseModel):
    """Metadata carried by a ``start`` event."""

    stream_sid: Optional[str] = Field(
        None, validation_alias=AliasChoices("streamSid", "streamId")
    )
    call_sid: Optional[str] = Field(None, validation_alias="callSid")
    account_sid: Optional[str] = Field(None, validation_alias="accountSid")


class StartEvent(BaseModel):
    """The stream has started and been assigned its ``streamSid``."""

    event: Literal["start"]
    start: StreamStart


class MediaPayload(BaseModel):
    payload: str = Field(..., description="Base64-encoded audio")
    track: Optional[str] = None


class MediaEvent(BaseModel):
    """A chunk of caller audio."""

    event: Literal["media"]
    media: MediaPayload


class OtherTelephonyEvent(BaseModel):
    """Any event the bridge only logs."""

    event: str


TelephonyEvent = Union[StartEvent, MediaEvent, OtherTelephonyEvent]

_EVENT_MODELS: Dict[str, Type[BaseModel]] = {
    TWILIO_EVENT_START: StartEvent,
    TWILIO_EVENT_MEDIA: MediaEvent,
}


class OutboundMedia(BaseModel):
    payload: str


class TwilioMediaFrame(BaseModel):
    """Audio sent to Twilio for playback on the call."""

    event: Literal["media"] = "media"
    stream_sid: Optional[str] = Field(None, serialization_alias="streamSid")
    media: OutboundMedia

    def to_message(self) -> dict:
        # streamSid is kept even when unset
        return self.model_dump(by_alias=True)


def parse_telephony_event(raw: Union[str, bytes]) -> Result[TelephonyEvent]:
    """
    Parse a raw Twilio Media Streams message.

    Args:
        raw: The text (or bytes) received on the media stream WebSocket

    Returns:
        Result holding the parsed variant, or a ``ParseError`` when the message is
        not JSON, not an object, has no event name, or does not match its schema.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        return Result.failure(ParseError(f"Invalid JSON ({e})", raw))

    if not isinstance(data, dict):
        return Result.failure(ParseError("Message is not a JSON object", raw))

    event_name = data.get("event")
    if not isinstance(event_name, str):
        return Result.failure(ParseError("Message has no event name", raw))

    model = _EVENT_MODELS.get(event_name, OtherTelephonyEvent)
    try:
        return Result.success(model.model_validate(data))
    except ValidationError as e:
        return Result.failure(
            ParseError(f"Invalid {event_name} event ({e.error_count()} errors)", raw)
        )
