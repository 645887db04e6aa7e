"""
Discovery Service - resolve a partially-known person into contact facts.

Pipeline per identity, strictly sequential:
  1. SEARCH           - profile URL (input or scored search), company domain
  2. ENRICH           - general people-data providers, concurrently
  3. REGIONAL_ENRICH  - region-specific providers, only for matching locations
  4. CONSOLIDATE      - merge emails/phones across sources, corroboration boost
  5. VALIDATE         - validate the top email and top phones (provider, then local checks)

A failing stage is logged and noted on the result; the pipeline always
finishes. Only invalid input (blank first/last name) is raised.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Sequence

from loguru import logger

from lib.contact_discovery.consolidation import consolidate, flag_non_regional_phones
from lib.contact_discovery.domain_resolver import DomainResolver
from lib.contact_discovery.email_validator import EmailValidator
from lib.contact_discovery.errors import InvalidIdentityError, describe_error
from lib.contact_discovery.models import (
    BatchResult,
    ConsolidatedFact,
    IdentityQuery,
    ResolutionResult,
    SourceResult,
    Stage,
    StageNote,
)
from lib.contact_discovery.phone_validator import PhoneValidator
from lib.contact_discovery.profile_matcher import ProfileMatcher
from lib.contact_discovery.providers import (
    ICompanyLookupProvider,
    IEmailValidationProvider,
    IPeopleEnrichmentProvider,
    IPhoneValidationProvider,
    ISearchProvider,
)
from services.discovery.config import DiscoveryConfig
from services.discovery.enrichment import EnrichmentCollector, region_matches

STAGE_COUNT = 5


@dataclass
class _Run:
    """Mutable working state for one resolution; frozen into a ResolutionResult at the end."""
    query: IdentityQuery
    started_at: datetime
    t0: float
    tag: str
    profile_url: Optional[str] = None
    profile_confidence: Optional[float] = None
    profile_source: Optional[str] = None
    in_region: bool = False
    sources: dict[str, SourceResult] = field(default_factory=dict)
    emails: list[ConsolidatedFact] = field(default_factory=list)
    phones: list[ConsolidatedFact] = field(default_factory=list)
    notes: list[StageNote] = field(default_factory=list)
    stages: list[Stage] = field(default_factory=list)

    def learn(self, **updates) -> None:
        """Progressively fill in domain/profile_url on the working query."""
        updates = {k: v for k, v in updates.items() if v and not getattr(self.query, k)}
        if updates:
            self.query = self.query.model_copy(update=updates)


def validate_identity(query: IdentityQuery) -> None:
    missing = [f for f in ("first_name", "last_name") if not (getattr(query, f) or "").strip()]
    if missing:
        raise InvalidIdentityError(f"Missing required field(s): {', '.join(missing)}")


class IService(ABC):
    """Contact discovery service interface."""

    @abstractmethod
    async def resolve(self, query: IdentityQuery) -> ResolutionResult:
        """Resolve one identity. Raises InvalidIdentityError for blank names."""
        pass

    @abstractmethod
    async def resolve_batch(self, queries: Sequence[IdentityQuery]) -> BatchResult:
        """Resolve identities one after another."""
        pass


class Service(IService):
    def __init__(
        self,
        config: Optional[DiscoveryConfig] = None,
        search: Optional[ISearchProvider] = None,
        enrichers: Sequence[IPeopleEnrichmentProvider] = (),
        regional_enrichers: Sequence[IPeopleEnrichmentProvider] = (),
        company_lookup: Optional[ICompanyLookupProvider] = None,
        phone_validation: Optional[IPhoneValidationProvider] = None,
        email_validation: Optional[IEmailValidationProvider] = None,
    ) -> None:
        self.config = config or DiscoveryConfig()
        self.matcher = None
        if search is not None:
            self.matcher = ProfileMatcher(
                search,
                threshold=self.config.match_threshold,
                pause=self.config.search_pause,
            )
        self.domains = DomainResolver(
            search=search,
            company_lookup=company_lookup,
            denylist=self.config.domain_denylist,
            suffixes=self.config.domain_suffixes,
        )
        self.enrichment = EnrichmentCollector(enrichers, timeout=self.config.enrichment_timeout)
        self.regional = EnrichmentCollector(regional_enrichers, timeout=self.config.enrichment_timeout)
        self.validator = PhoneValidator(phone_validation)
        self.email_validator = EmailValidator(
            email_validation, disposable_domains=self.config.disposable_email_domains,
        )

        self._stages = [
            ("SEARCH", self._search),
            ("ENRICH", self._enrich),
            ("REGIONAL_ENRICH", self._regional_enrich),
            ("CONSOLIDATE", self._consolidate),
            ("VALIDATE", self._validate),
        ]

    async def resolve(self, query: IdentityQuery) -> ResolutionResult:
        validate_identity(query)
        if not (query.location or "").strip():
            query = query.model_copy(update={"location": self.config.default_location})

        run = _Run(
            query=query,
            started_at=datetime.now(timezone.utc),
            t0=time.monotonic(),
            tag=f"[{query.full_name}]",
        )
        logger.info(
            f"{run.tag} Resolving: company={query.company or '-'} "
            f"title={query.title or '-'} location={query.location}"
        )

        for i, (stage, handler) in enumerate(self._stages, start=1):
            run.stages.append(stage)
            t = time.monotonic()
            try:
                await handler(run)
            except Exception as e:
                logger.warning(
                    f"{run.tag} [{i}/{STAGE_COUNT} {stage}] FAILED: {describe_error(e)} "
                    f"[{time.monotonic() - t:.1f}s]"
                )
                run.notes.append(StageNote(stage=stage, message=describe_error(e)))
        run.stages.append("DONE")

        result = ResolutionResult(
            query=run.query,
            profile_url=run.profile_url,
            profile_confidence=run.profile_confidence,
            profile_source=run.profile_source,
            domain=run.query.domain,
            emails=run.emails,
            phones=run.phones,
            sources=run.sources,
            notes=run.notes,
            stages=run.stages,
            started_at=run.started_at,
            duration_ms=int((time.monotonic() - run.t0) * 1000),
        )
        logger.info(
            f"{run.tag} Done: profile={'yes' if result.profile_url else 'no'} "
            f"emails={len(result.emails)} phones={len(result.phones)} "
            f"notes={len(result.notes)} [{result.duration_ms / 1000:.1f}s]"
        )
        return result

    async def resolve_batch(self, queries: Sequence[IdentityQuery]) -> BatchResult:
        t0 = time.monotonic()
        batch = BatchResult(total=len(queries))

        for i, query in enumerate(queries):
            if i and self.config.batch_delay:
                await asyncio.sleep(self.config.batch_delay)
            logger.info(f"Batch {i + 1}/{len(queries)}: {query.full_name or '(blank)'}")
            try:
                batch.results.append(await self.resolve(query))
                batch.succeeded += 1
            except Exception as e:
                logger.error(f"Batch item {i + 1} rejected: {e}")
                batch.errors.append({"input": query.full_name, "error": str(e)})
                batch.failed += 1

        batch.duration_ms = int((time.monotonic() - t0) * 1000)
        logger.info(
            f"Batch complete: {batch.succeeded}/{batch.total} resolved, "
            f"{batch.failed} rejected [{batch.duration_ms / 1000:.1f}s]"
        )
        return batch

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    async def _search(self, run: _Run) -> None:
        t = time.monotonic()
        query = run.query

        if query.profile_url:
            run.profile_url = query.profile_url
            run.profile_source = "input"
        elif self.matcher is not None:
            # Domain resolution below doesn't depend on the profile search
            try:
                match = await self.matcher.find_profile(query, tag=run.tag)
            except Exception as e:
                logger.warning(f"{run.tag} [1/{STAGE_COUNT} SEARCH] profile search failed: {describe_error(e)}")
                run.notes.append(StageNote(stage="SEARCH", message=describe_error(e)))
                match = None
            if match:
                run.profile_url = match.url
                run.profile_confidence = match.confidence
                run.profile_source = "search"
                run.learn(profile_url=match.url)
        else:
            logger.debug(f"{run.tag} No search provider configured, skipping profile search")

        if query.company and not query.domain:
            run.learn(domain=await self.domains.resolve(query.company, tag=run.tag))

        logger.info(
            f"{run.tag} [1/{STAGE_COUNT} SEARCH] profile={run.profile_url or '-'} "
            f"domain={run.query.domain or '-'} [{time.monotonic() - t:.1f}s]"
        )

    async def _enrich(self, run: _Run) -> None:
        t = time.monotonic()
        results = await self.enrichment.collect(run.query)
        run.sources.update(results)

        if not run.profile_url:
            for result in results.values():
                if result.status == "success" and result.profile_url:
                    run.profile_url = result.profile_url
                    run.profile_source = "provider"
                    run.learn(profile_url=result.profile_url)
                    logger.debug(f"{run.tag} Profile URL adopted from {result.source}")
                    break

        for name, result in results.items():
            detail = result.error if result.status != "success" else (
                f"{len(result.emails)} emails, {len(result.phones)} phones"
            )
            logger.info(
                f"{run.tag} [2/{STAGE_COUNT} ENRICH] {name}: {result.status} {detail} "
                f"[{result.duration_ms / 1000:.1f}s]"
            )
        if not results:
            logger.debug(f"{run.tag} [2/{STAGE_COUNT} ENRICH] no providers configured [{time.monotonic() - t:.1f}s]")

    async def _regional_enrich(self, run: _Run) -> None:
        run.in_region = region_matches(run.query.location, self.config.region_keywords)
        if not self.regional.providers:
            return
        if not run.in_region:
            run.sources.update(self.regional.skip_all(f"location {run.query.location!r} outside region"))
            logger.info(f"{run.tag} [3/{STAGE_COUNT} REGIONAL_ENRICH] skipped: location outside region")
            return

        results = await self.regional.collect(run.query)
        run.sources.update(results)
        for name, result in results.items():
            logger.info(
                f"{run.tag} [3/{STAGE_COUNT} REGIONAL_ENRICH] {name}: {result.status} "
                f"{len(result.emails)} emails, {len(result.phones)} phones "
                f"[{result.duration_ms / 1000:.1f}s]"
            )

    async def _consolidate(self, run: _Run) -> None:
        results = list(run.sources.values())
        increment = self.config.confidence_increment
        run.emails = consolidate(results, "email", increment)
        phones = consolidate(results, "phone", increment)
        if run.in_region:
            phones = flag_non_regional_phones(
                phones, self.config.region_phone_prefixes, self.config.non_regional_penalty,
            )
        run.phones = phones
        logger.info(
            f"{run.tag} [4/{STAGE_COUNT} CONSOLIDATE] {len(run.emails)} emails, "
            f"{len(run.phones)} phones"
        )

    async def _validate(self, run: _Run) -> None:
        top_email = run.emails[:1]
        top = run.phones[:self.config.validate_top_n]
        if not (top_email or top):
            return
        t = time.monotonic()
        validations = await asyncio.gather(
            *(self.email_validator.validate(e.value) for e in top_email),
            *(self.validator.validate(p.value) for p in top),
        )
        email_checks, phone_checks = validations[:len(top_email)], validations[len(top_email):]

        run.emails = [
            e.model_copy(update={"validation": v}) for e, v in zip(top_email, email_checks)
        ] + run.emails[len(top_email):]
        run.phones = [
            p.model_copy(update={"validation": v}) for p, v in zip(top, phone_checks)
        ] + run.phones[len(top):]

        email_status = email_checks[0].reason if email_checks else "-"
        valid = sum(1 for v in phone_checks if v.valid)
        logger.info(
            f"{run.tag} [5/{STAGE_COUNT} VALIDATE] email={email_status} "
            f"phones {valid}/{len(top)} valid [{time.monotonic() - t:.1f}s]"
        )
