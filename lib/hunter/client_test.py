"""Tests for the Hunter email-verifier adapter."""

import pytest
from unittest.mock import AsyncMock, MagicMock

import httpx

from lib.contact_discovery.email_validator import EmailValidator
from lib.contact_discovery.errors import ValidationUnavailableError
from lib.hunter.client import HUNTER_VERIFY_URL, HunterClient, parse_hunter_verification


DELIVERABLE = {
    "data": {
        "status": "valid",
        "result": "deliverable",
        "score": 91,
        "email": "steven.lowy@lfg.com.au",
        "disposable": False,
        "webmail": False,
    },
}


def _client(payload=None, status_code=200, error=None):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload if payload is not None else {}
    client = AsyncMock()
    if error:
        client.get.side_effect = error
    else:
        client.get.return_value = response
    return client


class TestParseHunterVerification:

    def test_deliverable(self):
        result = parse_hunter_verification(DELIVERABLE)
        assert result.valid is True
        assert result.reason == "deliverable"
        assert result.confidence == 0.91
        assert result.status == "valid"
        assert result.disposable is False
        assert result.method == "provider"

    def test_risky_is_not_valid(self):
        result = parse_hunter_verification({"data": {"result": "risky", "score": 50, "status": "accept_all"}})
        assert result.valid is False
        assert result.reason == "risky"
        assert result.confidence == 0.5

    def test_missing_score(self):
        result = parse_hunter_verification({"data": {"result": "undeliverable", "score": None}})
        assert result.confidence == 0.0

    def test_errors_payload(self):
        with pytest.raises(ValidationUnavailableError, match="Invalid API key"):
            parse_hunter_verification({
                "errors": [{"id": "authentication_failed", "code": 401, "details": "Invalid API key"}],
            })

    def test_no_data(self):
        with pytest.raises(ValidationUnavailableError):
            parse_hunter_verification({"meta": {}})


class TestHunterClient:

    @pytest.mark.asyncio
    async def test_request(self):
        client = _client(DELIVERABLE)

        result = await HunterClient("key", client).verify("steven.lowy@lfg.com.au")

        assert result.valid is True
        assert client.get.call_args.args[0] == HUNTER_VERIFY_URL
        assert client.get.call_args.kwargs["params"] == {
            "email": "steven.lowy@lfg.com.au",
            "api_key": "key",
        }
        assert client.get.call_args.kwargs["timeout"] == 10.0

    @pytest.mark.asyncio
    async def test_still_verifying_raises_unavailable(self):
        client = _client({"data": None}, status_code=202)
        with pytest.raises(ValidationUnavailableError, match="HTTP 202"):
            await HunterClient("key", client).verify("x@acme.com")

    @pytest.mark.asyncio
    async def test_transport_error_raises_unavailable(self):
        client = _client(error=httpx.ConnectError("unreachable"))
        with pytest.raises(ValidationUnavailableError):
            await HunterClient("key", client).verify("x@acme.com")

    @pytest.mark.asyncio
    async def test_validator_falls_back_when_unreachable(self):
        client = _client(error=httpx.ReadTimeout("slow"))
        validator = EmailValidator(HunterClient("key", client))

        result = await validator.validate("x@acme.com")

        assert result.valid is True
        assert result.reason == "format_valid"
        assert result.method == "heuristic"
