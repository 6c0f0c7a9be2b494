"""
Constants and configuration values used throughout the application.

This module defines constants that are used across different parts of the application,
providing a centralized location for protocol names, endpoint paths and default
conversation settings shared by the telephony and realtime sides of the bridge.
"""

# Logger name used throughout the application
LOGGER_NAME = "outbound_agent"

# Default OpenAI model for Realtime API
DEFAULT_REALTIME_MODEL = "gpt-4o-realtime-preview-2024-10-01"
REALTIME_API_URL = "wss://api.openai.com/v1/realtime"
REALTIME_BETA_HEADER = "realtime=v1"

# Path of the Twilio Media Stream WebSocket endpoint
STREAM_PATH = "/media-stream"

# Pause after the realtime socket opens before the first command is sent
SETTLE_DELAY_SECONDS = 0.1

# Default conversation settings
DEFAULT_PORT = 6060
DEFAULT_HOST = "0.0.0.0"
DEFAULT_VOICE = "shimmer"
DEFAULT_TEMPERATURE = 0.8
DEFAULT_TURN_DETECTION = "server_vad"
DEFAULT_MODALITIES = ("text", "audio")
DEFAULT_SYSTEM_MESSAGE = (
    "You are an assistant specifically for delivering bad news. Make sure you are "
    "extra dramatic to empathize with the call recipient. Use as many obscure "
    "adjectives as possible, but don't make the messages too long."
)
DEFAULT_OPENING_LINE = (
    'Greet the user with "Hi, my name is Alice. I\'m sorry to be the bearer of bad '
    'news, but is now a bad time to talk?"'
)

# Audio format constants
AUDIO_FORMAT_G711_ULAW = "g711_ulaw"

# Twilio Media Stream event names
TWILIO_EVENT_START = "start"
TWILIO_EVENT_MEDIA = "media"

# Realtime API message type constants
MESSAGE_TYPE_SESSION_UPDATED = "session.updated"
MESSAGE_TYPE_RESPONSE_AUDIO_DELTA = "response.audio.delta"

# Realtime API events logged verbatim for observability
LOG_EVENT_TYPES = frozenset(
    {
        "error",
        "response.content.done",
        "rate_limits.updated",
        "response.done",
        "input_audio_buffer.committed",
        "input_audio_buffer.speech_stopped",
        "input_audio_buffer.speech_started",
        "session.created",
    }
)
