"""
Unit tests for the Twilio / OpenAI Realtime media stream bridge.

These tests drive MediaStreamBridge with a mocked Twilio WebSocket and a stub
Realtime client, covering relaying, the handshake and teardown of both sides.
"""

import asyncio
import json

import pytest
from fastapi import WebSocketDisconnect
from fastapi.websockets import WebSocketState

from outbound_agent.bot.media_stream_bridge import MediaStreamBridge
from outbound_agent.errors import BridgeConnectionError, Result
from outbound_agent.models.session import AIConnectionState, BridgeState

OPENING_LINE = "Say hello."


def start_event(stream_id):
    return json.dumps({"event": "start", "start": {"streamId": stream_id}})


def media_event(payload):
    return json.dumps({"event": "media", "media": {"payload": payload}})


@pytest.fixture
def bridge(telephony_ws, realtime_stub, session_config):
    return MediaStreamBridge(telephony_ws, realtime_stub, session_config, OPENING_LINE, settle_delay=0)


async def wait_forever():
    await asyncio.Event().wait()


@pytest.mark.asyncio
async def test_start_then_media_sends_one_append(bridge, realtime_stub):
    """A start event followed by caller audio yields exactly one append command."""
    await bridge.handle_telephony_message(start_event("abc123"))
    await bridge.handle_telephony_message(media_event("QUJD"))

    assert realtime_stub.sent == [{"type": "input_audio_buffer.append", "audio": "QUJD"}]
    assert bridge.session.stream_sid == "abc123"
    assert bridge.session.bridge_state is BridgeState.ACTIVE


@pytest.mark.asyncio
async def test_media_dropped_while_ai_not_open(telephony_ws, make_realtime_stub, session_config):
    stub = make_realtime_stub(state=AIConnectionState.CONNECTING)
    bridge = MediaStreamBridge(telephony_ws, stub, session_config, OPENING_LINE, settle_delay=0)

    await bridge.handle_telephony_message(media_event("QUJD"))

    assert stub.sent == []
    assert bridge.session.bridge_state is BridgeState.AWAITING_START


@pytest.mark.asyncio
async def test_latest_start_event_wins(bridge):
    await bridge.handle_telephony_message(start_event("S1"))
    await bridge.handle_telephony_message(start_event("S2"))

    assert bridge.session.stream_sid == "S2"


@pytest.mark.asyncio
async def test_audio_delta_before_start_is_forwarded_uncorrelated(bridge, telephony_ws):
    await bridge.handle_realtime_message(json.dumps({"type": "response.audio.delta", "delta": "UklGRg=="}))

    telephony_ws.send_text.assert_awaited_once()
    frame = json.loads(telephony_ws.send_text.call_args.args[0])
    assert frame == {"event": "media", "streamSid": None, "media": {"payload": "UklGRg=="}}


@pytest.mark.asyncio
async def test_audio_delta_uses_stream_sid(bridge, telephony_ws):
    await bridge.handle_telephony_message(start_event("MZ123"))
    await bridge.handle_realtime_message(json.dumps({"type": "response.audio.delta", "delta": "AAAA"}))

    frame = json.loads(telephony_ws.send_text.call_args.args[0])
    assert frame["streamSid"] == "MZ123"
    assert frame["media"]["payload"] == "AAAA"


@pytest.mark.asyncio
async def test_malformed_messages_are_dropped(bridge, realtime_stub, telephony_ws):
    await bridge.handle_telephony_message("not json")
    await bridge.handle_telephony_message(json.dumps({"event": "media", "media": {}}))
    await bridge.handle_realtime_message(b"\x00\x01")

    assert realtime_stub.sent == []
    telephony_ws.send_text.assert_not_awaited()
    assert bridge.session.bridge_state is BridgeState.AWAITING_START


@pytest.mark.asyncio
async def test_non_audio_realtime_events_are_not_forwarded(bridge, telephony_ws):
    await bridge.handle_realtime_message(json.dumps({"type": "session.updated", "session": {}}))
    await bridge.handle_realtime_message(json.dumps({"type": "response.done"}))
    await bridge.handle_realtime_message(json.dumps({"type": "response.text.delta", "delta": "hi"}))

    telephony_ws.send_text.assert_not_awaited()


@pytest.mark.asyncio
async def test_run_primes_session_then_closes_twilio_when_ai_closes(telephony_ws, make_realtime_stub, session_config):
    stub = make_realtime_stub(
        state=AIConnectionState.NOT_CONNECTED,
        events=[json.dumps({"type": "response.audio.delta", "delta": "QUJD"})],
    )
    telephony_ws.receive.side_effect = wait_forever
    bridge = MediaStreamBridge(telephony_ws, stub, session_config, OPENING_LINE, settle_delay=0)

    await bridge.run()

    assert [message["type"] for message in stub.sent] == [
        "session.update",
        "conversation.item.create",
        "response.create",
    ]
    telephony_ws.send_text.assert_awaited_once()
    telephony_ws.close.assert_awaited_once()
    assert bridge.session.bridge_state is BridgeState.CLOSED
    assert bridge.session.ai_state is AIConnectionState.CLOSED


@pytest.mark.asyncio
async def test_twilio_disconnect_closes_ai_connection(telephony_ws, make_realtime_stub, session_config):
    stub = make_realtime_stub(state=AIConnectionState.NOT_CONNECTED)
    stub.hold_open = True
    telephony_ws.receive.return_value = {"type": "websocket.disconnect", "code": 1000}
    telephony_ws.client_state = WebSocketState.DISCONNECTED
    bridge = MediaStreamBridge(telephony_ws, stub, session_config, OPENING_LINE, settle_delay=0)

    await bridge.run()

    stub.close.assert_awaited_once()
    telephony_ws.close.assert_not_awaited()
    assert bridge.session.closed


@pytest.mark.asyncio
async def test_binary_frame_is_dropped_and_stream_continues(telephony_ws, make_realtime_stub, session_config):
    stub = make_realtime_stub(state=AIConnectionState.NOT_CONNECTED)
    stub.hold_open = True
    telephony_ws.receive.side_effect = [
        {"type": "websocket.receive", "bytes": b"\x00garbage"},
        {"type": "websocket.receive", "text": start_event("S1")},
        {"type": "websocket.disconnect", "code": 1000},
    ]
    telephony_ws.client_state = WebSocketState.DISCONNECTED
    bridge = MediaStreamBridge(telephony_ws, stub, session_config, OPENING_LINE, settle_delay=0)

    await bridge.run()

    assert bridge.session.stream_sid == "S1"
    assert telephony_ws.receive.await_count == 3


@pytest.mark.asyncio
async def test_ai_connect_failure_tears_down_call(telephony_ws, make_realtime_stub, session_config):
    stub = make_realtime_stub(
        state=AIConnectionState.NOT_CONNECTED,
        connect_result=Result.failure(BridgeConnectionError("refused")),
    )
    telephony_ws.receive.side_effect = wait_forever
    bridge = MediaStreamBridge(telephony_ws, stub, session_config, OPENING_LINE, settle_delay=0)

    await bridge.run()

    assert stub.sent == []
    telephony_ws.close.assert_awaited_once()
    assert bridge.session.closed


@pytest.mark.asyncio
async def test_close_is_idempotent(bridge, realtime_stub, telephony_ws):
    await bridge.close()
    await bridge.close()

    realtime_stub.close.assert_awaited_once()
    telephony_ws.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_from_settings_builds_realtime_client(telephony_ws, settings):
    bridge = MediaStreamBridge.from_settings(telephony_ws, settings)

    assert bridge.ai_client.model == settings.realtime_model
    assert bridge.ai_client.state is AIConnectionState.NOT_CONNECTED
    assert bridge.session_config.voice == settings.voice
    assert bridge.opening_line == settings.opening_line
