"""Apollo people-match enrichment adapter.

POST /api/v1/people/match with whatever we know about the person. Apollo
returns a single best-match person with work email, revealed personal
emails, phone numbers and a profile URL.
"""

import time
from typing import Optional

import httpx
from loguru import logger

from lib.contact_discovery.errors import describe_error, response_error
from lib.contact_discovery.models import (
    ContactFact,
    IdentityQuery,
    SourceResult,
    normalize_phone_kind,
)

APOLLO_MATCH_URL = "https://api.apollo.io/api/v1/people/match"
API_TIMEOUT = 10.0
SOURCE = "apollo"

WORK_EMAIL_CONFIDENCE = 0.9
PERSONAL_EMAIL_CONFIDENCE = 0.7
PHONE_CONFIDENCE = 0.85


def parse_apollo_person(person: dict) -> tuple[list[ContactFact], list[ContactFact], Optional[str]]:
    """Map an Apollo `person` object to (emails, phones, profile_url)."""
    emails: list[ContactFact] = []
    phones: list[ContactFact] = []

    if person.get("email"):
        emails.append(ContactFact(
            value=person["email"], channel="email", kind="work",
            source=SOURCE, confidence=WORK_EMAIL_CONFIDENCE,
        ))

    for email in person.get("personal_emails") or []:
        if email:
            emails.append(ContactFact(
                value=email, channel="email", kind="personal",
                source=SOURCE, confidence=PERSONAL_EMAIL_CONFIDENCE,
            ))

    for phone in person.get("phone_numbers") or []:
        number = phone.get("raw_number") or phone.get("sanitized_number")
        if not number:
            continue
        phones.append(ContactFact(
            value=number, channel="phone", kind=normalize_phone_kind(phone.get("type")),
            source=SOURCE, confidence=PHONE_CONFIDENCE,
        ))

    return emails, phones, person.get("linkedin_url") or None


class ApolloClient:
    """IPeopleEnrichmentProvider backed by Apollo."""

    name = SOURCE

    def __init__(self, api_key: str, client: httpx.AsyncClient, timeout: float = API_TIMEOUT):
        self.api_key = api_key
        self.client = client
        self.timeout = timeout

    def _build_body(self, query: IdentityQuery) -> dict:
        body = {
            "first_name": query.first_name,
            "last_name": query.last_name,
            "reveal_personal_emails": True,
            "reveal_phone_number": True,
        }
        if query.domain:
            body["domain"] = query.domain
        if query.company:
            body["organization_name"] = query.company
        if query.profile_url:
            body["linkedin_url"] = query.profile_url
        return body

    async def enrich(self, query: IdentityQuery) -> SourceResult:
        t0 = time.monotonic()
        try:
            resp = await self.client.post(
                APOLLO_MATCH_URL,
                headers={"x-api-key": self.api_key, "Content-Type": "application/json"},
                json=self._build_body(query),
                timeout=self.timeout,
            )
            if resp.status_code != 200:
                raise response_error(SOURCE, resp)
            person = resp.json().get("person") or {}
            emails, phones, profile_url = parse_apollo_person(person)
        except Exception as e:
            elapsed = int((time.monotonic() - t0) * 1000)
            logger.warning(f"Apollo match failed for {query.full_name}: {describe_error(e)}")
            return SourceResult.failed(SOURCE, describe_error(e), elapsed)

        elapsed = int((time.monotonic() - t0) * 1000)
        logger.debug(
            f"Apollo: {query.full_name} -> {len(emails)} emails, {len(phones)} phones [{elapsed}ms]"
        )
        return SourceResult(
            source=SOURCE,
            emails=emails,
            phones=phones,
            profile_url=profile_url,
            duration_ms=elapsed,
        )
