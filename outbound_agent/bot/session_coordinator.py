"""
Priming of a freshly opened Realtime API session.

The session configuration has to reach the server before a response is requested,
and the scripted opening line stands in for the callee's first utterance so the
assistant starts talking as soon as the call connects.
"""

import json
import logging

from outbound_agent.bot.realtime_api import RealtimeClient
from outbound_agent.config.constants import LOGGER_NAME
from outbound_agent.errors import Result
from outbound_agent.models.realtime_events import (
    ConversationItemCreateCommand,
    ConversationMessage,
    InputTextContent,
    ResponseCreateCommand,
    SessionUpdateCommand,
)
from outbound_agent.models.session import SessionConfig

logger = logging.getLogger(LOGGER_NAME)


def build_session_update(config: SessionConfig) -> dict:
    return SessionUpdateCommand(session=config.to_session_payload()).to_message()


def build_opening_turn(opening_line: str) -> dict:
    item = ConversationMessage(content=[InputTextContent(text=opening_line)])
    return ConversationItemCreateCommand(item=item).to_message()


async def prime_session(client: RealtimeClient, config: SessionConfig, opening_line: str) -> Result[None]:
    """
    Send the session configuration, then the opening turn and its response trigger.

    Args:
        client: An open Realtime API client
        config: Conversation settings for this call
        opening_line: Scripted user-role text the assistant answers first

    Returns:
        Result: the first send failure, if any; later commands are not sent
    """
    session_update = build_session_update(config)
    logger.info(f"Sending session update: {json.dumps(session_update)}")

    for message in (session_update, build_opening_turn(opening_line), ResponseCreateCommand().to_message()):
        result = await client.send_json(message)
        if not result.ok:
            logger.error(f"Session priming stopped at {message['type']}: {result.error}")
            return result
    return Result.success()
