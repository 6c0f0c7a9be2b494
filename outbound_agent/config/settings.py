"""
Environment-based settings for the outbound voice agent.

Settings are read once at startup. Twilio credentials, the origin number, the public
domain and the OpenAI API key are required; anything missing is reported together
in a single ``ConfigurationError``.
"""

import os
import re
from pathlib import Path
from typing import Mapping, Optional, Tuple

import dotenv
from pydantic import BaseModel, ConfigDict, Field

from outbound_agent.config.constants import (
    AUDIO_FORMAT_G711_ULAW,
    DEFAULT_HOST,
    DEFAULT_MODALITIES,
    DEFAULT_OPENING_LINE,
    DEFAULT_PORT,
    DEFAULT_REALTIME_MODEL,
    DEFAULT_SYSTEM_MESSAGE,
    DEFAULT_TEMPERATURE,
    DEFAULT_TURN_DETECTION,
    DEFAULT_VOICE,
    STREAM_PATH,
)
from outbound_agent.errors import ConfigurationError
from outbound_agent.models.session import SessionConfig

REQUIRED_VARIABLES = (
    "TWILIO_ACCOUNT_SID",
    "TWILIO_AUTH_TOKEN",
    "PHONE_NUMBER_FROM",
    "DOMAIN",
    "OPENAI_API_KEY",
)

_PROTOCOL_PREFIX = re.compile(r"(^\w+:|^)//")
_TRAILING_SLASHES = re.compile(r"/+$")


def normalize_domain(raw_domain: str) -> str:
    """Strip any protocol prefix and trailing slashes from a public domain."""
    domain = _PROTOCOL_PREFIX.sub("", raw_domain.strip(), count=1)
    return _TRAILING_SLASHES.sub("", domain)


def parse_number_list(raw: Optional[str]) -> Tuple[str, ...]:
    if not raw:
        return ()
    return tuple(number.strip() for number in raw.split(",") if number.strip())


def load_env_file(path: Path = Path(".") / ".env") -> None:
    """Load environment variables from a .env file if it exists."""
    if path.exists():
        dotenv.load_dotenv(path)


class Settings(BaseModel):
    """Process configuration for one run of the voice agent."""

    model_config = ConfigDict(frozen=True)

    twilio_account_sid: str
    twilio_auth_token: str
    phone_number_from: str
    domain: str
    openai_api_key: str
    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    realtime_model: str = DEFAULT_REALTIME_MODEL
    voice: str = DEFAULT_VOICE
    system_message: str = DEFAULT_SYSTEM_MESSAGE
    opening_line: str = DEFAULT_OPENING_LINE
    allowed_numbers: Tuple[str, ...] = Field(default_factory=tuple)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from, defaults to ``os.environ``

        Raises:
            ConfigurationError: If any required variable is missing or empty
        """
        env = os.environ if environ is None else environ
        missing = [name for name in REQUIRED_VARIABLES if not env.get(name)]
        if missing:
            raise ConfigurationError(missing)

        return cls(
            twilio_account_sid=env["TWILIO_ACCOUNT_SID"],
            twilio_auth_token=env["TWILIO_AUTH_TOKEN"],
            phone_number_from=env["PHONE_NUMBER_FROM"],
            domain=normalize_domain(env["DOMAIN"]),
            openai_api_key=env["OPENAI_API_KEY"],
            port=int(env.get("PORT") or DEFAULT_PORT),
            host=env.get("HOST") or DEFAULT_HOST,
            realtime_model=env.get("OPENAI_REALTIME_MODEL") or DEFAULT_REALTIME_MODEL,
            voice=env.get("OPENAI_VOICE") or DEFAULT_VOICE,
            system_message=env.get("SYSTEM_MESSAGE") or DEFAULT_SYSTEM_MESSAGE,
            opening_line=env.get("OPENING_LINE") or DEFAULT_OPENING_LINE,
            allowed_numbers=parse_number_list(env.get("ALLOWED_NUMBERS")),
        )

    @property
    def stream_url(self) -> str:
        """Public WebSocket URL Twilio connects the call audio to."""
        return f"wss://{self.domain}{STREAM_PATH}"

    def session_config(self) -> SessionConfig:
        return SessionConfig(
            voice=self.voice,
            instructions=self.system_message,
            input_audio_format=AUDIO_FORMAT_G711_ULAW,
            output_audio_format=AUDIO_FORMAT_G711_ULAW,
            turn_detection=DEFAULT_TURN_DETECTION,
            modalities=DEFAULT_MODALITIES,
            temperature=DEFAULT_TEMPERATURE,
        )
