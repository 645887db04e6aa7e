"""Firmable adapter (AU/NZ B2B data).

Two lookups feed one source:
  - person by profile URL: direct work/personal emails and phones
  - company by website: generic company phones, plus company emails that
    look like they belong to the person

Both run concurrently; duplicates are dropped within the source so that
Firmable never corroborates itself during consolidation. The company
lookup also serves DomainResolver as an ICompanyLookupProvider.
"""

import asyncio
import time
from typing import Optional

import httpx
from loguru import logger

from lib.contact_discovery.errors import ProviderError, describe_error, response_error
from lib.contact_discovery.models import (
    CompanyLookup,
    ContactFact,
    IdentityQuery,
    SourceResult,
)

FIRMABLE_BASE_URL = "https://api.firmable.com"
API_TIMEOUT = 10.0
SOURCE = "firmable"

PERSON_EMAIL_CONFIDENCE = 0.95
PERSONAL_EMAIL_CONFIDENCE = 0.7
REGIONAL_PHONE_CONFIDENCE = 0.95
OTHER_PHONE_CONFIDENCE = 0.7
COMPANY_EMAIL_CONFIDENCE = 0.95
COMPANY_PHONE_CONFIDENCE = 0.8

REGIONAL_MOBILE_PREFIXES = ("+61", "04", "61")


def _value(item) -> str:
    if isinstance(item, str):
        return item
    if isinstance(item, dict):
        return item.get("value") or ""
    return ""


def email_matches_person(email: str, first_name: str, last_name: str) -> bool:
    """True if the mailbox part of a company email plausibly names the person."""
    local = email.split("@", 1)[0].lower()
    first = first_name.strip().lower()
    last = last_name.strip().lower()
    if not local:
        return False
    if first and first in local:
        return True
    if last and last in local:
        return True
    if first and last and (f"{first[0]}{last}" in local or f"{first}.{last}" in local):
        return True
    return False


def parse_firmable_person(data: dict) -> tuple[list[ContactFact], list[ContactFact]]:
    """Map a /people payload to (emails, phones)."""
    emails_block = data.get("emails") or {}
    emails = []
    for item in emails_block.get("work") or []:
        if _value(item):
            emails.append(ContactFact(
                value=_value(item), channel="email", kind="work",
                source=SOURCE, confidence=PERSON_EMAIL_CONFIDENCE,
            ))
    for item in emails_block.get("personal") or []:
        if _value(item):
            emails.append(ContactFact(
                value=_value(item), channel="email", kind="personal",
                source=SOURCE, confidence=PERSONAL_EMAIL_CONFIDENCE,
            ))

    phones = []
    for item in data.get("phones") or []:
        number = _value(item).strip()
        if not number:
            continue
        regional = number.replace(" ", "").startswith(REGIONAL_MOBILE_PREFIXES)
        phones.append(ContactFact(
            value=number, channel="phone", kind="mobile", source=SOURCE,
            confidence=REGIONAL_PHONE_CONFIDENCE if regional else OTHER_PHONE_CONFIDENCE,
        ))

    return emails, phones


def parse_firmable_company(
    data: dict, first_name: str, last_name: str,
) -> tuple[list[ContactFact], list[ContactFact]]:
    """Map a /company payload to (emails, phones) relevant to one person."""
    emails = []
    for item in data.get("emails") or []:
        value = _value(item)
        if value and email_matches_person(value, first_name, last_name):
            emails.append(ContactFact(
                value=value, channel="email", kind="work",
                source=SOURCE, confidence=COMPANY_EMAIL_CONFIDENCE,
            ))

    numbers = [_value(item) for item in data.get("phones") or []]
    if data.get("phone"):
        numbers.append(data["phone"])
    phones = [
        ContactFact(
            value=n, channel="phone", kind="company",
            source=SOURCE, confidence=COMPANY_PHONE_CONFIDENCE,
        )
        for n in numbers if n
    ]
    return emails, phones


def _dedup(facts: list[ContactFact]) -> list[ContactFact]:
    seen = set()
    out = []
    for fact in facts:
        if fact.dedup_key in seen:
            continue
        seen.add(fact.dedup_key)
        out.append(fact)
    return out


class FirmableClient:
    """IPeopleEnrichmentProvider and ICompanyLookupProvider backed by Firmable."""

    name = SOURCE

    def __init__(
        self,
        api_key: str,
        client: httpx.AsyncClient,
        timeout: float = API_TIMEOUT,
        base_url: str = FIRMABLE_BASE_URL,
    ):
        self.api_key = api_key
        self.client = client
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")

    async def _get(self, path: str, params: dict) -> dict:
        resp = await self.client.get(
            f"{self.base_url}{path}",
            headers={"Authorization": f"Bearer {self.api_key}"},
            params=params,
            timeout=self.timeout,
        )
        if resp.status_code != 200:
            raise response_error(SOURCE, resp)
        data = resp.json()
        if not isinstance(data, dict):
            raise ProviderError(SOURCE, "unexpected response shape")
        if data.get("error"):
            raise ProviderError(SOURCE, str(data["error"]))
        return data

    async def fetch_person(self, profile_url: str) -> dict:
        data = await self._get("/people", {"ln_url": profile_url})
        if not data.get("name") and not data.get("emails") and not data.get("phones"):
            raise ProviderError(SOURCE, "no person data returned")
        return data

    async def fetch_company(self, domain: str) -> dict:
        return await self._get("/company", {"website": domain})

    async def enrich(self, query: IdentityQuery) -> SourceResult:
        if not query.profile_url and not query.domain:
            return SourceResult.skipped(SOURCE, "no profile URL or domain to look up")

        t0 = time.monotonic()
        lookups = []
        if query.profile_url:
            lookups.append(("person", self.fetch_person(query.profile_url)))
        if query.domain:
            lookups.append(("company", self.fetch_company(query.domain)))

        outcomes = await asyncio.gather(*(coro for _, coro in lookups), return_exceptions=True)
        elapsed = int((time.monotonic() - t0) * 1000)

        emails: list[ContactFact] = []
        phones: list[ContactFact] = []
        errors = []
        for (kind, _), outcome in zip(lookups, outcomes):
            if isinstance(outcome, BaseException):
                errors.append(f"{kind}: {describe_error(outcome)}")
                continue
            if kind == "person":
                e, p = parse_firmable_person(outcome)
            else:
                e, p = parse_firmable_company(outcome, query.first_name, query.last_name)
            emails.extend(e)
            phones.extend(p)

        if len(errors) == len(lookups):
            message = "; ".join(errors)
            logger.warning(f"Firmable failed for {query.full_name}: {message}")
            return SourceResult.failed(SOURCE, message, elapsed)
        for err in errors:
            logger.debug(f"Firmable partial failure for {query.full_name}: {err}")

        emails, phones = _dedup(emails), _dedup(phones)
        logger.debug(
            f"Firmable: {query.full_name} -> {len(emails)} emails, {len(phones)} phones [{elapsed}ms]"
        )
        return SourceResult(source=SOURCE, emails=emails, phones=phones, duration_ms=elapsed)

    async def lookup(self, domain: str) -> CompanyLookup:
        """Confirm a domain belongs to a real company. Raises on transport errors."""
        data = await self.fetch_company(domain)
        return CompanyLookup(
            found=bool(data.get("id") or data.get("name")),
            name=data.get("name"),
            domain=data.get("fqdn") or data.get("website") or domain,
            phone=data.get("phone") or _first_value(data.get("phones")),
            linkedin=data.get("linkedin"),
        )


def _first_value(items) -> Optional[str]:
    for item in items or []:
        if _value(item):
            return _value(item)
    return None
