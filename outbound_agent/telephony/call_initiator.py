"""
Outbound call placement through the Twilio REST API.

The call's TwiML connects its audio to this server's media stream endpoint, where a
``MediaStreamBridge`` takes over.
"""

import logging
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict
from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from outbound_agent.config.constants import LOGGER_NAME
from outbound_agent.errors import CallPlacementError, EligibilityError, VoiceAgentError
from outbound_agent.telephony.eligibility import EligibilityGate
from outbound_agent.telephony.twiml import build_connect_twiml

logger = logging.getLogger(LOGGER_NAME)


class CallStatus(str, Enum):
    PLACED = "placed"
    REJECTED = "rejected"
    FAILED = "failed"


class CallOutcome(BaseModel):
    """Result of one call attempt."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    to: str
    status: CallStatus
    call_sid: Optional[str] = None
    error: Optional[VoiceAgentError] = None


class CallInitiator:
    """
    Places an outbound call once the eligibility gate has approved the number.

    Args:
        client: Twilio REST client
        from_number: Origin number on the Twilio account
        stream_url: Public ``wss://`` URL of the media stream endpoint
        gate: Eligibility gate consulted before every call
    """

    def __init__(self, client: Client, from_number: str, stream_url: str, gate: EligibilityGate):
        self.client = client
        self.from_number = from_number
        self.stream_url = stream_url
        self.gate = gate

    def place_call(self, to: str) -> CallOutcome:
        record = self.gate.check(to)
        if not record.allowed:
            error = EligibilityError(to)
            logger.warning(str(error))
            return CallOutcome(to=to, status=CallStatus.REJECTED, error=error)

        try:
            call = self.client.calls.create(
                from_=self.from_number,
                to=to,
                twiml=build_connect_twiml(self.stream_url),
            )
        except (TwilioException, OSError) as e:
            logger.error(f"Error making call: {e}")
            return CallOutcome(
                to=to,
                status=CallStatus.FAILED,
                error=CallPlacementError(f"Call to {to} failed: {e}"),
            )

        logger.info(f"Call started with SID: {call.sid}")
        return CallOutcome(to=to, status=CallStatus.PLACED, call_sid=call.sid)
