"""Hunter email-verifier adapter."""

import httpx

from lib.contact_discovery.errors import ValidationUnavailableError
from lib.contact_discovery.models import EmailValidation

HUNTER_VERIFY_URL = "https://api.hunter.io/v2/email-verifier"
API_TIMEOUT = 10.0
SOURCE = "hunter"


def parse_hunter_verification(payload: dict) -> EmailValidation:
    errors = payload.get("errors")
    if errors:
        first = errors[0] if isinstance(errors, list) and errors else errors
        detail = first.get("details") or first.get("id") if isinstance(first, dict) else str(first)
        raise ValidationUnavailableError(SOURCE, detail or "unknown error")

    data = payload.get("data")
    if not isinstance(data, dict) or not data.get("result"):
        raise ValidationUnavailableError(SOURCE, "no verification data returned")

    score = data.get("score") or 0
    return EmailValidation(
        valid=data["result"] == "deliverable",
        reason=data["result"],
        confidence=min(max(score / 100, 0.0), 1.0),
        status=data.get("status"),
        disposable=data.get("disposable"),
        webmail=data.get("webmail"),
        method="provider",
    )


class HunterClient:
    """IEmailValidationProvider backed by Hunter.

    Raises ValidationUnavailableError when Hunter can't answer;
    EmailValidator turns that into a format-only result.
    """

    def __init__(self, api_key: str, client: httpx.AsyncClient, timeout: float = API_TIMEOUT):
        self.api_key = api_key
        self.client = client
        self.timeout = timeout

    async def verify(self, email: str) -> EmailValidation:
        params = {"email": email, "api_key": self.api_key}
        try:
            resp = await self.client.get(HUNTER_VERIFY_URL, params=params, timeout=self.timeout)
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ValidationUnavailableError(SOURCE, str(e) or type(e).__name__) from e
        if not isinstance(data, dict):
            raise ValidationUnavailableError(SOURCE, f"HTTP {resp.status_code}")
        # 202 means Hunter is still verifying; there is no verdict yet
        if resp.status_code != 200 and not data.get("errors"):
            raise ValidationUnavailableError(SOURCE, f"HTTP {resp.status_code}")
        return parse_hunter_verification(data)
