"""
Models module for data structures and state management in the outbound voice agent.

Key components:
- session: ``CallSession`` state for one call leg and the immutable ``SessionConfig``.
- telephony_events: Pydantic models for Twilio Media Streams messages, parsed into
  ``StartEvent``, ``MediaEvent`` or ``OtherTelephonyEvent``.
- realtime_events: Pydantic models for OpenAI Realtime API commands and server
  events, parsed into ``AudioDeltaEvent``, ``SessionUpdatedEvent``, ``LoggedEvent``
  or ``OtherRealtimeEvent``.

Usage examples:
```python
from outbound_agent.models.telephony_events import MediaEvent, parse_telephony_event

result = parse_telephony_event('{"event": "media", "media": {"payload": "QUJD"}}')
if result.ok and isinstance(result.value, MediaEvent):
    print(result.value.media.payload)
```
"""

from outbound_agent.models.session import (
    AIConnectionState,
    BridgeState,
    CallSession,
    SessionConfig,
)
