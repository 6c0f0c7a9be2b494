"""
Run script for the outbound realtime voice agent.

This script validates the configuration, starts the FastAPI server with WebSocket
settings tuned for low latency, and places one outbound call whose audio is streamed
back to the server and bridged to the OpenAI Realtime API.

Usage:
    python run.py --call=+18885551212 [--port PORT] [--host HOST] [--log-level LEVEL]
"""

import argparse
import asyncio
import os
import re
import sys

import uvicorn
from twilio.rest import Client

from outbound_agent.config.logging_config import configure_logging
from outbound_agent.config.settings import Settings, load_env_file
from outbound_agent.errors import ConfigurationError
from outbound_agent.main import create_app
from outbound_agent.telephony.call_initiator import CallInitiator, CallStatus
from outbound_agent.telephony.eligibility import EligibilityGate

E164_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")

DISCLOSURE_REMINDER = (
    "Our recommendation is to always disclose the use of AI for outbound or inbound calls. "
    "Reminder: all of the rules of TCPA apply even if a call is made by AI. "
    "Check with your counsel for legal and compliance advice."
)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Place an outbound call and bridge it to the OpenAI Realtime API"
    )
    parser.add_argument(
        "--call",
        help="E.164 phone number to call, e.g. --call=+18885551212",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to run the server on (default: PORT env var or 6060)",
    )
    parser.add_argument(
        "--host",
        default=None,
        help="Host to bind the server to (default: HOST env var or 0.0.0.0)",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO or LOG_LEVEL env var)",
    )
    return parser.parse_args(argv)


async def serve(settings: Settings, to: str, log_level: str = "INFO") -> int:
    """
    Start the server, place the call once it is listening, and serve until shutdown.

    Returns:
        int: 1 if the destination was rejected by the eligibility gate, else 0
    """
    logger = configure_logging(log_level)

    client = Client(settings.twilio_account_sid, settings.twilio_auth_token)
    gate = EligibilityGate(client, settings.allowed_numbers)
    initiator = CallInitiator(client, settings.phone_number_from, settings.stream_url, gate)

    config = uvicorn.Config(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=log_level.lower(),
        # Use HTTP/1.1 for lower overhead than HTTP/2
        http="h11",
        # Disable access logs for lower overhead, we have our own logging
        access_log=False,
        ws_ping_interval=5,
        ws_ping_timeout=20,
        ws_max_size=16 * 1024 * 1024,
    )
    server = uvicorn.Server(config)
    server_task = asyncio.create_task(server.serve())

    while not server.started:
        if server_task.done():
            logger.error("Server failed to start")
            return 1
        await asyncio.sleep(0.1)

    logger.info(f"Server is listening on port {settings.port}")
    logger.warning(DISCLOSURE_REMINDER)
    logger.info(f"Calling {to}")

    # The Twilio client is blocking; keep it off the event loop
    outcome = await asyncio.to_thread(initiator.place_call, to)
    if outcome.status is CallStatus.REJECTED:
        server.should_exit = True
        await server_task
        return 1

    await server_task
    return 0


def main(argv=None) -> int:
    """Main entry point. Returns the process exit code."""
    args = parse_args(argv)
    logger = configure_logging(args.log_level)

    load_env_file()
    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        logger.error(f"{e}. Please ensure they are set.")
        return 1

    if not args.call:
        logger.error("Please provide a phone number to call, e.g., --call=+18885551212")
        return 1

    to = args.call.strip()
    if not E164_PATTERN.match(to):
        logger.error(f"Not an E.164 phone number: {to}")
        return 1

    overrides = {}
    if args.port is not None:
        overrides["port"] = args.port
    if args.host is not None:
        overrides["host"] = args.host
    if overrides:
        settings = settings.model_copy(update=overrides)

    return asyncio.run(serve(settings, to, args.log_level))


if __name__ == "__main__":
    sys.exit(main())
