"""Unit tests for the enrichment fan-out."""

import asyncio

import pytest

from lib.contact_discovery.models import ContactFact, IdentityQuery, SourceResult
from services.discovery.enrichment import EnrichmentCollector, region_matches


QUERY = IdentityQuery(first_name="Jane", last_name="Doe", company="Acme")


class FakeProvider:

    def __init__(self, name, result=None, error=None, delay=0.0):
        self.name = name
        self.result = result
        self.error = error
        self.delay = delay
        self.calls = []

    async def enrich(self, query):
        self.calls.append(query)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.result or SourceResult(source=self.name)


def _email(value, source):
    return ContactFact(value=value, channel="email", kind="work", source=source, confidence=0.9)


class TestRegionMatches:

    @pytest.mark.parametrize("location,expected", [
        ("Sydney Australia", True),
        ("GOLD COAST, QLD", True),
        ("Auckland", True),
        ("San Francisco", False),
        ("", False),
        (None, False),
    ])
    def test_keywords(self, location, expected):
        keywords = ("australia", "sydney", "gold coast", "auckland")
        assert region_matches(location, keywords) is expected


class TestEnrichmentCollector:

    @pytest.mark.asyncio
    async def test_collects_in_provider_order(self):
        a = FakeProvider("apollo", SourceResult(source="apollo", emails=[_email("j@acme.com", "apollo")]))
        b = FakeProvider("lusha")
        results = await EnrichmentCollector([a, b]).collect(QUERY)

        assert list(results) == ["apollo", "lusha"]
        assert results["apollo"].found_any
        assert results["lusha"].status == "success"
        assert a.calls == [QUERY] and b.calls == [QUERY]

    @pytest.mark.asyncio
    async def test_exception_becomes_failed_result(self):
        broken = FakeProvider("apollo", error=RuntimeError("boom"))
        ok = FakeProvider("lusha", SourceResult(source="lusha", emails=[_email("j@acme.com", "lusha")]))

        results = await EnrichmentCollector([broken, ok]).collect(QUERY)

        assert results["apollo"].status == "error"
        assert results["apollo"].error == "boom"
        assert results["lusha"].found_any

    @pytest.mark.asyncio
    async def test_timeout_becomes_failed_result(self):
        slow = FakeProvider("apollo", delay=1.0)
        fast = FakeProvider("lusha")

        results = await EnrichmentCollector([slow, fast], timeout=0.05).collect(QUERY)

        assert results["apollo"].status == "error"
        assert results["apollo"].error == "request timed out"
        assert results["lusha"].status == "success"

    @pytest.mark.asyncio
    async def test_runs_concurrently(self):
        providers = [FakeProvider(f"p{i}", delay=0.1) for i in range(5)]
        loop = asyncio.get_running_loop()
        t0 = loop.time()
        await EnrichmentCollector(providers).collect(QUERY)
        assert loop.time() - t0 < 0.4

    @pytest.mark.asyncio
    async def test_no_providers(self):
        assert await EnrichmentCollector([]).collect(QUERY) == {}

    def test_skip_all(self):
        collector = EnrichmentCollector([FakeProvider("firmable")])
        results = collector.skip_all("outside region")
        assert results["firmable"].status == "skipped"
        assert results["firmable"].error == "outside region"
