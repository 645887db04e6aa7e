"""NumVerify phone validation adapter."""

import httpx

from lib.contact_discovery.errors import ValidationUnavailableError
from lib.contact_discovery.models import PhoneValidation, digits_only

NUMVERIFY_URL = "http://apilayer.net/api/validate"
API_TIMEOUT = 5.0
SOURCE = "numverify"


def parse_numverify_response(data: dict) -> PhoneValidation:
    if data.get("error"):
        error = data["error"]
        info = error.get("info") if isinstance(error, dict) else str(error)
        raise ValidationUnavailableError(SOURCE, info or "unknown error")
    return PhoneValidation(
        valid=bool(data.get("valid")),
        line_type=data.get("line_type") or None,
        location=data.get("location") or data.get("country_name") or None,
        international_format=data.get("international_format") or None,
        carrier=data.get("carrier") or None,
        method="provider",
    )


class NumverifyClient:
    """IPhoneValidationProvider backed by NumVerify.

    Raises ValidationUnavailableError when the service can't answer;
    PhoneValidator turns that into a heuristic result.
    """

    def __init__(self, api_key: str, client: httpx.AsyncClient, timeout: float = API_TIMEOUT):
        self.api_key = api_key
        self.client = client
        self.timeout = timeout

    async def validate(self, number: str) -> PhoneValidation:
        params = {"access_key": self.api_key, "number": digits_only(number), "format": 1}
        try:
            resp = await self.client.get(NUMVERIFY_URL, params=params, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ValidationUnavailableError(SOURCE, str(e) or type(e).__name__) from e
        return parse_numverify_response(data)
