"""
Telephony module for placing outbound calls through Twilio.

Key components:
- eligibility: ``EligibilityGate`` deciding whether a destination may be called,
  based on a static consent list and the account's registered numbers.
- call_initiator: ``CallInitiator`` placing the call with a TwiML document that
  streams its audio back to this server.
- twiml: builder for the ``<Connect><Stream>`` document.

Both classes take the Twilio REST client as a constructor argument; it is created
once per process run by the entry point.
"""
