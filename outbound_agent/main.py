"""
FastAPI server for the outbound realtime voice agent.

This module builds the FastAPI application Twilio connects to once an outbound call
is answered. The ``/media-stream`` WebSocket carries the call audio; each connection
gets its own ``MediaStreamBridge`` to the OpenAI Realtime API.
"""

from fastapi import FastAPI, WebSocket

from outbound_agent.bot.media_stream_bridge import MediaStreamBridge
from outbound_agent.config.constants import STREAM_PATH
from outbound_agent.config.settings import Settings

STATUS_MESSAGE = "Twilio Media Stream Server is running!"


def create_app(settings: Settings) -> FastAPI:
    """
    Create the application for one process run.

    Args:
        settings: Validated process settings, shared by every call bridge
    """
    app = FastAPI(
        title="Outbound Realtime Voice Agent",
        description="Bridge between Twilio Media Streams and the OpenAI Realtime API",
        version="1.0.0",
    )
    app.state.settings = settings

    @app.get("/")
    async def root():
        """Health check."""
        return {"message": STATUS_MESSAGE}

    @app.websocket(STREAM_PATH)
    async def media_stream(websocket: WebSocket):
        """Relay one call's audio between Twilio and the OpenAI Realtime API."""
        await websocket.accept()
        bridge = MediaStreamBridge.from_settings(websocket, settings)
        await bridge.run()

    return app
