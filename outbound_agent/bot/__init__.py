"""
Bot module bridging Twilio Media Streams with the OpenAI Realtime API.

Key components:
- RealtimeClient: Client for one OpenAI Realtime API WebSocket session, reporting
  connection and send failures as typed results instead of reconnecting.
- MediaStreamBridge: Owns both connections of one call, primes the Realtime session
  and relays audio in both directions until either side closes.
- event_translator: Maps Twilio events to Realtime commands and Realtime events back
  to Twilio media frames.
- session_coordinator: Sends the session configuration and the scripted opening turn.

Usage examples:
```python
from outbound_agent.bot import MediaStreamBridge

@app.websocket("/media-stream")
async def media_stream(websocket: WebSocket):
    await websocket.accept()
    await MediaStreamBridge.from_settings(websocket, settings).run()
```
"""

from outbound_agent.bot.media_stream_bridge import MediaStreamBridge
from outbound_agent.bot.realtime_api import RealtimeClient

__all__ = ["MediaStreamBridge", "RealtimeClient"]
