import asyncio
import os
from unittest.mock import AsyncMock, patch

import pytest

import run
from outbound_agent.errors import EligibilityError
from outbound_agent.telephony.call_initiator import CallOutcome, CallStatus

ENV = {
    "TWILIO_ACCOUNT_SID": "AC123",
    "TWILIO_AUTH_TOKEN": "token",
    "PHONE_NUMBER_FROM": "+15005550006",
    "DOMAIN": "agent.example.com",
    "OPENAI_API_KEY": "sk-test",
}


@pytest.fixture
def no_env_file():
    with patch("run.load_env_file"):
        yield


class FakeServer:
    """Stands in for uvicorn.Server; serves until asked to exit."""

    instances = []

    def __init__(self, config):
        self.config = config
        self.started = False
        self.should_exit = False
        FakeServer.instances.append(self)

    async def serve(self):
        self.started = True
        while not self.should_exit:
            await asyncio.sleep(0.01)


class TestMain:

    def test_missing_configuration_exits_1(self, no_env_file):
        with patch.dict(os.environ, {}, clear=True):
            assert run.main(["--call=+15551230000"]) == 1

    def test_missing_call_flag_exits_1(self, no_env_file):
        with patch.dict(os.environ, ENV, clear=True):
            assert run.main([]) == 1

    def test_invalid_number_exits_1(self, no_env_file):
        with patch.dict(os.environ, ENV, clear=True):
            assert run.main(["--call=5551230000"]) == 1

    def test_valid_arguments_start_serving(self, no_env_file):
        with patch.dict(os.environ, ENV, clear=True), \
                patch("run.serve", AsyncMock(return_value=0)) as serve:
            assert run.main(["--call=+15551230000", "--port", "7070"]) == 0

        settings, to, log_level = serve.call_args.args
        assert to == "+15551230000"
        assert settings.port == 7070
        assert settings.domain == "agent.example.com"
        assert log_level == "INFO"


@pytest.mark.asyncio
class TestServe:

    async def test_rejected_call_stops_server_and_returns_1(self, settings):
        outcome = CallOutcome(to="+15559990000", status=CallStatus.REJECTED, error=EligibilityError("+15559990000"))
        with patch("run.uvicorn.Server", FakeServer), patch("run.Client"), \
                patch("run.CallInitiator.place_call", return_value=outcome) as place_call:
            code = await run.serve(settings, "+15559990000")

        assert code == 1
        place_call.assert_called_once_with("+15559990000")
        assert FakeServer.instances[-1].should_exit

    async def test_placed_call_keeps_serving(self, settings):
        def place_call(to):
            FakeServer.instances[-1].should_exit = True
            return CallOutcome(to=to, status=CallStatus.PLACED, call_sid="CA123")

        with patch("run.uvicorn.Server", FakeServer), patch("run.Client") as client_cls, \
                patch("run.CallInitiator.place_call", side_effect=place_call):
            code = await run.serve(settings, "+15551230000")

        assert code == 0
        client_cls.assert_called_once_with(settings.twilio_account_sid, settings.twilio_auth_token)
        assert FakeServer.instances[-1].config.port == settings.port
