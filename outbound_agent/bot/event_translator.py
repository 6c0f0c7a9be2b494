"""
Translation between Twilio Media Streams events and OpenAI Realtime API messages.

Both directions dispatch over closed sets of parsed event variants. Each function
returns the message to send to the other side, or ``None`` when the event has no
counterpart there. Audio payloads are passed through untouched.
"""

import json
import logging
from typing import Optional

from outbound_agent.config.constants import LOGGER_NAME
from outbound_agent.models.realtime_events import (
    AudioDeltaEvent,
    InputAudioBufferAppendCommand,
    LoggedEvent,
    OtherRealtimeEvent,
    RealtimeEvent,
    SessionUpdatedEvent,
)
from outbound_agent.models.session import CallSession
from outbound_agent.models.telephony_events import (
    MediaEvent,
    OtherTelephonyEvent,
    OutboundMedia,
    StartEvent,
    TelephonyEvent,
    TwilioMediaFrame,
)

logger = logging.getLogger(LOGGER_NAME)


def translate_telephony_event(event: TelephonyEvent, session: CallSession) -> Optional[dict]:
    """
    Map a Twilio event to a Realtime API command.

    A ``start`` event records the stream SID on the session; a later ``start``
    replaces it. Caller audio becomes an ``input_audio_buffer.append`` command,
    but only while the Realtime connection is open; otherwise it is dropped.

    Args:
        event: The parsed Twilio event
        session: The call session the event belongs to

    Returns:
        The command to send to the Realtime API, or None
    """
    if isinstance(event, StartEvent):
        session.stream_sid = event.start.stream_sid
        logger.info(f"Incoming stream has started {session.stream_sid}")
        return None

    if isinstance(event, MediaEvent):
        if not session.ai_open:
            return None
        session.mark_active()
        return InputAudioBufferAppendCommand(audio=event.media.payload).to_message()

    if isinstance(event, OtherTelephonyEvent):
        logger.info(f"Received non-media event: {event.event}")
        return None

    raise TypeError(f"Unhandled telephony event: {event!r}")


def translate_realtime_event(event: RealtimeEvent, session: CallSession) -> Optional[dict]:
    """
    Map a Realtime API event to a Twilio media frame.

    Audio deltas are tagged with the session's current stream SID, which is
    ``None`` if Twilio has not sent ``start`` yet. Twilio must tolerate the null.
    """
    if isinstance(event, AudioDeltaEvent):
        session.mark_active()
        frame = TwilioMediaFrame(
            stream_sid=session.stream_sid,
            media=OutboundMedia(payload=event.delta),
        )
        return frame.to_message()

    if isinstance(event, SessionUpdatedEvent):
        logger.info(f"Session updated successfully: {json.dumps(event.session)}")
        return None

    if isinstance(event, LoggedEvent):
        logger.info(f"Received event: {event.type} {json.dumps(event.payload)}")
        return None

    if isinstance(event, OtherRealtimeEvent):
        return None

    raise TypeError(f"Unhandled realtime event: {event!r}")
