"""Lusha person enrichment adapter."""

import time

import httpx
from loguru import logger

from lib.contact_discovery.errors import describe_error, response_error
from lib.contact_discovery.models import (
    ContactFact,
    IdentityQuery,
    SourceResult,
    normalize_email_kind,
    normalize_phone_kind,
)

LUSHA_PERSON_URL = "https://api.lusha.com/v2/person"
API_TIMEOUT = 10.0
SOURCE = "lusha"

EMAIL_CONFIDENCE = 0.85
PHONE_CONFIDENCE = 0.8


def _email_value(item) -> tuple[str, str]:
    if isinstance(item, str):
        return item, ""
    return item.get("email") or "", item.get("type") or item.get("emailType") or ""


def _phone_value(item) -> tuple[str, str]:
    if isinstance(item, str):
        return item, ""
    number = item.get("internationalNumber") or item.get("number") or item.get("localNumber") or ""
    return number, item.get("type") or item.get("phoneType") or ""


def parse_lusha_person(data: dict) -> tuple[list[ContactFact], list[ContactFact]]:
    """Map Lusha's `data` object to (emails, phones)."""
    emails = []
    for item in data.get("emailAddresses") or []:
        value, label = _email_value(item)
        if value:
            emails.append(ContactFact(
                value=value, channel="email", kind=normalize_email_kind(label),
                source=SOURCE, confidence=EMAIL_CONFIDENCE,
            ))

    phones = []
    for item in data.get("phoneNumbers") or []:
        value, label = _phone_value(item)
        if value:
            phones.append(ContactFact(
                value=value, channel="phone", kind=normalize_phone_kind(label),
                source=SOURCE, confidence=PHONE_CONFIDENCE,
            ))

    return emails, phones


class LushaClient:
    """IPeopleEnrichmentProvider backed by Lusha."""

    name = SOURCE

    def __init__(self, api_key: str, client: httpx.AsyncClient, timeout: float = API_TIMEOUT):
        self.api_key = api_key
        self.client = client
        self.timeout = timeout

    def _build_params(self, query: IdentityQuery) -> dict:
        params = {"firstName": query.first_name, "lastName": query.last_name}
        # Lusha wants one company identifier, domain is the stronger one
        if query.domain:
            params["companyDomain"] = query.domain
        elif query.company:
            params["companyName"] = query.company
        if query.profile_url:
            params["linkedinUrl"] = query.profile_url
        return params

    async def enrich(self, query: IdentityQuery) -> SourceResult:
        t0 = time.monotonic()
        try:
            resp = await self.client.get(
                LUSHA_PERSON_URL,
                headers={"api_key": self.api_key},
                params=self._build_params(query),
                timeout=self.timeout,
            )
            if resp.status_code != 200:
                raise response_error(SOURCE, resp)
            emails, phones = parse_lusha_person(resp.json().get("data") or {})
        except Exception as e:
            elapsed = int((time.monotonic() - t0) * 1000)
            logger.warning(f"Lusha lookup failed for {query.full_name}: {describe_error(e)}")
            return SourceResult.failed(SOURCE, describe_error(e), elapsed)

        elapsed = int((time.monotonic() - t0) * 1000)
        logger.debug(
            f"Lusha: {query.full_name} -> {len(emails)} emails, {len(phones)} phones [{elapsed}ms]"
        )
        return SourceResult(source=SOURCE, emails=emails, phones=phones, duration_ms=elapsed)
