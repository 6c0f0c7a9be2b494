"""
Eligibility gate for outbound calls.

A destination may be called when it is on the static consent list, is one of the
account's own Twilio numbers, or is a verified outgoing caller ID on the account.
Check your own compliance obligations before extending this list; the gate does not
authenticate anyone.
"""

import logging
from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict
from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from outbound_agent.config.constants import LOGGER_NAME
from outbound_agent.errors import ProviderQueryError

logger = logging.getLogger(LOGGER_NAME)


class EligibilitySource(str, Enum):
    """Which check allowed the number."""
    CONSENT_LIST = "consent_list"
    INCOMING_NUMBER = "incoming_number"
    VERIFIED_CALLER_ID = "verified_caller_id"


class EligibilityRecord(BaseModel):
    """Verdict for one destination, computed fresh for every call attempt."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    number: str
    allowed: bool
    source: Optional[EligibilitySource] = None
    error: Optional[ProviderQueryError] = None


class EligibilityGate:
    """
    Decides whether a destination number may receive an outbound call.

    Provider lookups fail closed: any Twilio or transport error makes the number
    ineligible and is logged, never retried.
    """

    def __init__(self, client: Client, consent_numbers: Iterable[str] = ()):
        self.client = client
        self.consent_numbers = frozenset(consent_numbers)

    def check(self, number: str) -> EligibilityRecord:
        if number in self.consent_numbers:
            return EligibilityRecord(number=number, allowed=True, source=EligibilitySource.CONSENT_LIST)

        try:
            # e.g. calling the Twilio Dev Phone
            if self.client.incoming_phone_numbers.list(phone_number=number):
                return EligibilityRecord(number=number, allowed=True, source=EligibilitySource.INCOMING_NUMBER)

            if self.client.outgoing_caller_ids.list(phone_number=number):
                return EligibilityRecord(number=number, allowed=True, source=EligibilitySource.VERIFIED_CALLER_ID)
        except (TwilioException, OSError) as e:
            logger.error(f"Error checking phone number {number}: {e}")
            return EligibilityRecord(
                number=number,
                allowed=False,
                error=ProviderQueryError(f"Eligibility lookup failed for {number}: {e}"),
            )

        return EligibilityRecord(number=number, allowed=False)

    def is_allowed(self, number: str) -> bool:
        return self.check(number).allowed
