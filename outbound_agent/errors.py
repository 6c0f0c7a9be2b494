"""
Error taxonomy and typed results for the outbound voice agent.

Operations that cross a process boundary (parsing a socket message, talking to the
Realtime API, querying or calling Twilio) return a ``Result`` instead of raising,
so each caller decides whether a failure is logged and dropped, ends a single call
session, or stops the process.
"""

from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class VoiceAgentError(Exception):
    """Base class for all errors raised or reported by the voice agent."""


class ConfigurationError(VoiceAgentError):
    """A required setting is missing at startup."""

    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(
            "Missing required environment variables: " + ", ".join(self.missing)
        )


class EligibilityError(VoiceAgentError):
    """The destination number did not pass the eligibility gate."""

    def __init__(self, number: str):
        self.number = number
        super().__init__(
            f"The number {number} is not recognized as a valid outgoing number or caller ID."
        )


class BridgeConnectionError(VoiceAgentError):
    """A realtime or telephony socket failed to open, send or stay connected."""


class ParseError(VoiceAgentError):
    """A received message was not well-formed."""

    def __init__(self, reason: str, raw: Any = None):
        self.reason = reason
        self.raw = raw
        super().__init__(f"{reason}: {raw!r}")


class ProviderError(VoiceAgentError):
    """Base class for failures reported by the telephony provider."""


class ProviderQueryError(ProviderError):
    """Looking up the account's registered numbers or caller IDs failed."""


class CallPlacementError(ProviderError):
    """The provider refused or failed the call placement request."""


class Result(Generic[T]):
    """
    Outcome of a boundary-crossing operation: either a value or an error.

    Use ``Result.success(value)`` and ``Result.failure(error)`` to build one and
    check ``ok`` before reading ``value``.
    """

    __slots__ = ("value", "error")

    def __init__(self, value: Optional[T] = None, error: Optional[VoiceAgentError] = None):
        self.value = value
        self.error = error

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: VoiceAgentError) -> "Result[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def __repr__(self) -> str:
        if self.ok:
            return f"Result.success({self.value!r})"
        return f"Result.failure({self.error!r})"
