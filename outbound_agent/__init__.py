"""
Outbound Realtime Voice Agent - Twilio Media Streams to OpenAI Realtime API Bridge

This application places an outbound phone call through Twilio and lets an OpenAI
Realtime model talk with whoever answers. Twilio streams the call audio to this
server over a WebSocket; the server opens its own WebSocket to the Realtime API and
relays audio in both directions.

Architecture Overview:
- FastAPI server exposing the Twilio Media Stream WebSocket endpoint
- OpenAI Realtime API client, one connection per call
- Bidirectional event translation with no audio transcoding (G.711 u-law end to end)
- Eligibility gate and call placement through the Twilio REST API

Key Components:
- bot: Realtime client, session priming, event translation and the stream bridge
- config: Constants, logging setup and environment settings
- models: Call session state and Twilio / Realtime message schemas
- telephony: Eligibility gate, call initiator and TwiML
- errors: Error taxonomy and typed results

Getting Started:
1. Set up environment variables (or a .env file):
   - TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN: Twilio account credentials
   - PHONE_NUMBER_FROM: Twilio number the call is placed from
   - DOMAIN: Public domain this server is reachable on (e.g. an ngrok host)
   - OPENAI_API_KEY: Your OpenAI API key
   - ALLOWED_NUMBERS: Optional comma-separated list of numbers with consent

2. Start the server and place the call:
   ```bash
   python run.py --call=+18885551212
   ```
"""
