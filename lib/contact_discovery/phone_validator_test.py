"""Unit tests for phone validation."""

import pytest
from unittest.mock import AsyncMock

import httpx

from lib.contact_discovery.errors import ValidationUnavailableError
from lib.contact_discovery.models import PhoneValidation
from lib.contact_discovery.phone_validator import PhoneValidator, heuristic_validation


class TestHeuristicValidation:

    def test_au_mobile_local_format(self):
        result = heuristic_validation("0412345678")
        assert result.valid is True
        assert result.line_type == "mobile"
        assert result.location == "Australia"
        assert result.method == "heuristic"

    def test_au_mobile_international_format(self):
        result = heuristic_validation("+61 412 345 678")
        assert result.line_type == "mobile"
        assert result.location == "Australia"

    def test_au_landline(self):
        result = heuristic_validation("(02) 9876 5432")
        assert result.valid is True
        assert result.line_type == "landline"
        assert result.location == "Australia"

    def test_nanp(self):
        result = heuristic_validation("+1 (415) 555-0100")
        assert result.valid is True
        assert result.line_type == "unknown"
        assert result.location == "US/Canada"

    def test_other_international_by_length(self):
        result = heuristic_validation("+44 20 7946 0000")
        assert result.valid is True
        assert result.line_type is None

    @pytest.mark.parametrize("number", ["123", "", "+1234567890123456"])
    def test_invalid_lengths(self, number):
        assert heuristic_validation(number).valid is False


class TestPhoneValidator:

    @pytest.mark.asyncio
    async def test_no_provider_uses_heuristic(self):
        result = await PhoneValidator().validate("0412345678")
        assert result == PhoneValidation(valid=True, line_type="mobile", location="Australia")

    @pytest.mark.asyncio
    async def test_provider_answer_wins(self):
        provider = AsyncMock()
        provider.validate.return_value = PhoneValidation(
            valid=True, line_type="mobile", location="Sydney", carrier="Telstra", method="provider",
        )
        result = await PhoneValidator(provider).validate("0412345678")
        assert result.method == "provider"
        assert result.carrier == "Telstra"
        provider.validate.assert_awaited_once_with("0412345678")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        ValidationUnavailableError("numverify", "usage limit reached"),
        httpx.ConnectError("unreachable"),
        TimeoutError(),
    ])
    async def test_provider_failure_falls_back(self, error):
        provider = AsyncMock()
        provider.validate.side_effect = error
        result = await PhoneValidator(provider).validate("0412345678")
        assert result.valid is True
        assert result.line_type == "mobile"
        assert result.location == "Australia"
        assert result.method == "heuristic"
