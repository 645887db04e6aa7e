"""Provider interfaces consumed by the discovery core.

Concrete adapters live in lib/serpapi, lib/serper, lib/apollo, lib/lusha,
lib/firmable, lib/numverify and lib/hunter.
"""

from typing import Optional, Protocol, runtime_checkable

from lib.contact_discovery.models import (
    Candidate,
    CompanyLookup,
    EmailValidation,
    IdentityQuery,
    PhoneValidation,
    SourceResult,
)


@runtime_checkable
class ISearchProvider(Protocol):
    """Text search. Fails soft: returns [] on any error."""

    async def query(self, text: str, options: Optional[dict] = None) -> list[Candidate]:
        ...


@runtime_checkable
class IPeopleEnrichmentProvider(Protocol):
    """People enrichment. Never raises; failures come back as SourceResult.failed."""

    name: str

    async def enrich(self, query: IdentityQuery) -> SourceResult:
        ...


@runtime_checkable
class ICompanyLookupProvider(Protocol):
    """Company lookup by domain guess."""

    async def lookup(self, domain: str) -> CompanyLookup:
        ...


@runtime_checkable
class IPhoneValidationProvider(Protocol):
    """Phone validation. May raise; PhoneValidator falls back to heuristics."""

    async def validate(self, number: str) -> PhoneValidation:
        ...


@runtime_checkable
class IEmailValidationProvider(Protocol):
    """Email deliverability check. May raise; EmailValidator falls back to local checks."""

    async def verify(self, email: str) -> EmailValidation:
        ...
