"""Concurrent fan-out over people-enrichment providers."""

import asyncio
import time
from typing import Iterable, Optional, Sequence

from loguru import logger

from lib.contact_discovery.errors import describe_error
from lib.contact_discovery.models import IdentityQuery, SourceResult
from lib.contact_discovery.providers import IPeopleEnrichmentProvider


def region_matches(location: Optional[str], keywords: Iterable[str]) -> bool:
    """Case-insensitive substring match of any region keyword in the location."""
    if not location:
        return False
    text = location.lower()
    return any(k.lower() in text for k in keywords if k)


class EnrichmentCollector:
    """Query every provider at once; one slow or broken provider never blocks the rest."""

    def __init__(self, providers: Sequence[IPeopleEnrichmentProvider], timeout: float = 10.0):
        self.providers = list(providers)
        self.timeout = timeout

    @property
    def names(self) -> list[str]:
        return [p.name for p in self.providers]

    async def _call(self, provider: IPeopleEnrichmentProvider, query: IdentityQuery) -> SourceResult:
        t0 = time.monotonic()
        try:
            return await asyncio.wait_for(provider.enrich(query), timeout=self.timeout)
        except Exception as e:
            elapsed = int((time.monotonic() - t0) * 1000)
            logger.warning(f"{provider.name} enrichment failed: {describe_error(e)}")
            return SourceResult.failed(provider.name, describe_error(e), elapsed)

    async def collect(self, query: IdentityQuery) -> dict[str, SourceResult]:
        """Map provider name -> SourceResult, in provider order."""
        if not self.providers:
            return {}
        results = await asyncio.gather(*(self._call(p, query) for p in self.providers))
        return {p.name: r for p, r in zip(self.providers, results)}

    def skip_all(self, reason: str) -> dict[str, SourceResult]:
        return {name: SourceResult.skipped(name, reason) for name in self.names}
