"""Unit tests for profile search and scoring."""

from typing import Optional

import pytest

from lib.contact_discovery.models import Candidate, IdentityQuery
from lib.contact_discovery.profile_matcher import (
    SITE_FILTER,
    ProfileMatcher,
    build_search_queries,
    score_candidate,
)
from lib.contact_discovery.providers import ISearchProvider


class FakeSearch:
    """Returns canned candidates per call, recording every query."""

    def __init__(self, responses: list[list[Candidate]]):
        self.responses = list(responses)
        self.queries: list[str] = []

    async def query(self, text: str, options: Optional[dict] = None) -> list[Candidate]:
        self.queries.append(text)
        if self.responses:
            return self.responses.pop(0)
        return []


LOWY = IdentityQuery(first_name="Steven", last_name="Lowy", company="LFG", location="Sydney")


class TestBuildSearchQueries:

    def test_most_specific_first(self):
        q = IdentityQuery(
            first_name="Steven", last_name="Lowy", company="LFG",
            title="Principal", location="Sydney",
        )
        names = [name for name, _ in build_search_queries(q)]
        assert names == [
            "exact_name_company",
            "name_title_company",
            "name_company_unquoted",
            "nickname_company",
            "name_location",
            "name_only",
        ]

    def test_nickname_strategy_uses_alternate_form(self):
        texts = dict(build_search_queries(LOWY))
        assert texts["nickname_company"] == f'{SITE_FILTER} "Steve Lowy" "LFG"'

    def test_name_only_when_nothing_else_known(self):
        q = IdentityQuery(first_name="Xanthe", last_name="Quill")
        assert build_search_queries(q) == [("name_only", f'{SITE_FILTER} "Xanthe Quill"')]


class TestScoreCandidate:

    def test_knowledge_panel_hit(self):
        candidate = Candidate(
            url="https://www.linkedin.com/in/steven-lowy",
            title="Steven Lowy - LFG",
            from_authoritative_source=True,
        )
        match = score_candidate(LOWY, candidate)
        # Raw weights total 110; the score is capped
        assert match.score == 100
        assert match.confidence == 0.99
        assert match.matched_rules == [
            "authoritative_source", "first_name", "last_name", "last_name_in_url", "company",
        ]

    def test_weights_ordering(self):
        base = Candidate(url="https://linkedin.com/in/x", title="")
        q = IdentityQuery(
            first_name="Jane", last_name="Doe", company="Acme",
            title="CFO", location="Perth",
        )
        panel = score_candidate(q, base.model_copy(update={"from_authoritative_source": True})).score
        first = score_candidate(q, base.model_copy(update={"title": "Jane"})).score
        company = score_candidate(q, base.model_copy(update={"title": "Acme"})).score
        title = score_candidate(q, base.model_copy(update={"title": "CFO"})).score
        location = score_candidate(q, base.model_copy(update={"title": "Perth"})).score
        assert panel > first >= company > title > location > 0

    def test_adding_matching_field_never_lowers_score(self):
        candidate = Candidate(
            url="https://linkedin.com/in/jane-doe",
            title="Jane Doe - CFO - Acme | LinkedIn",
        )
        bare = IdentityQuery(first_name="Jane", last_name="Doe")
        with_company = bare.model_copy(update={"company": "Acme"})
        with_title = with_company.model_copy(update={"title": "CFO"})
        scores = [score_candidate(q, candidate).score for q in (bare, with_company, with_title)]
        assert scores == sorted(scores)
        assert scores[0] < scores[-1]

    def test_empty_optional_fields_never_match(self):
        q = IdentityQuery(first_name="Jane", last_name="Doe", company="  ")
        match = score_candidate(q, Candidate(url="https://linkedin.com/in/x", title="anything"))
        assert "company" not in match.matched_rules

    def test_score_capped(self):
        q = IdentityQuery(
            first_name="Jane", last_name="Doe", company="Acme",
            title="CFO", location="Perth",
        )
        candidate = Candidate(
            url="https://linkedin.com/in/jane-doe",
            title="Jane Doe - CFO - Acme - Perth",
            from_authoritative_source=True,
        )
        match = score_candidate(q, candidate)
        assert match.score == 100
        assert match.confidence == 0.99


class TestProfileMatcher:

    def test_fake_satisfies_protocol(self):
        assert isinstance(FakeSearch([]), ISearchProvider)

    @pytest.mark.asyncio
    async def test_early_exit_after_first_strategy(self):
        search = FakeSearch([[
            Candidate(
                url="https://www.linkedin.com/in/steven-lowy",
                title="Steven Lowy - LFG",
                from_authoritative_source=True,
            ),
        ]])
        matcher = ProfileMatcher(search, threshold=60)
        match = await matcher.find_profile(LOWY)
        assert match.url == "https://www.linkedin.com/in/steven-lowy"
        assert match.strategy == "exact_name_company"
        assert len(search.queries) == 1

    @pytest.mark.asyncio
    async def test_stops_at_first_strategy_reaching_threshold(self):
        weak = Candidate(url="https://linkedin.com/in/someone", title="Steven")
        strong = Candidate(url="https://linkedin.com/in/steven-lowy", title="Steven Lowy - LFG")
        search = FakeSearch([[weak], [strong], [strong], [strong], [strong]])
        matcher = ProfileMatcher(search, threshold=60)

        match = await matcher.find_profile(LOWY)

        # No title on the query, so the second strategy run is the unquoted one
        assert match.url == strong.url
        assert match.strategy == "name_company_unquoted"
        assert len(search.queries) == 2

    @pytest.mark.asyncio
    async def test_keeps_best_across_strategies(self):
        good = Candidate(url="https://linkedin.com/in/steven-lowy", title="Steven Lowy")
        worse = Candidate(url="https://linkedin.com/in/other", title="Steven")
        search = FakeSearch([[good], [worse], [worse], [worse], [worse]])
        matcher = ProfileMatcher(search, threshold=100)

        match = await matcher.find_profile(LOWY)

        assert match.url == good.url
        assert match.strategy == "exact_name_company"
        assert len(search.queries) == len(build_search_queries(LOWY))

    @pytest.mark.asyncio
    async def test_ignores_non_profile_urls(self):
        search = FakeSearch([[
            Candidate(url="https://www.lfg.com.au/team", title="Steven Lowy - LFG"),
            Candidate(url="https://www.linkedin.com/company/lfg", title="LFG"),
        ]])
        matcher = ProfileMatcher(search, threshold=60)
        assert await matcher.find_profile(LOWY) is None

    @pytest.mark.asyncio
    async def test_low_scoring_profile_still_returned(self):
        search = FakeSearch([[Candidate(url="https://linkedin.com/in/abc", title="Someone Else")]])
        matcher = ProfileMatcher(search, threshold=60)
        match = await matcher.find_profile(LOWY)
        assert match is not None
        assert match.score < 60
