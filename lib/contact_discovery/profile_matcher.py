"""Social profile discovery via scored, multi-strategy web search.

Strategies run most-specific first. Every profile-path hit is scored with a
fixed table of (rule, weight) checks against its title and URL; the best hit
across all strategies so far is kept, and the search stops after the first
strategy that leaves the best score at or above the caller's threshold.
"""

import asyncio
from typing import Callable, Optional

from loguru import logger

from lib.contact_discovery.models import Candidate, IdentityQuery, ScoredMatch
from lib.contact_discovery.name_variants import alternate_forms
from lib.contact_discovery.providers import ISearchProvider

DEFAULT_PROFILE_PATH = "linkedin.com/in/"
SITE_FILTER = "site:linkedin.com/in/"

MAX_SCORE = 100
MAX_CONFIDENCE = 0.99


# ── Search strategies ───────────────────────────────────────────────


def _exact_name_company(q: IdentityQuery) -> Optional[str]:
    if not q.company:
        return None
    return f'{SITE_FILTER} "{q.full_name}" "{q.company}"'


def _name_title_company(q: IdentityQuery) -> Optional[str]:
    if not (q.title and q.company):
        return None
    return f'{SITE_FILTER} "{q.full_name}" {q.title} {q.company}'


def _name_company_unquoted(q: IdentityQuery) -> Optional[str]:
    if not q.company:
        return None
    return f"{SITE_FILTER} {q.full_name} {q.company}"


def _nickname_company(q: IdentityQuery) -> Optional[str]:
    forms = alternate_forms(q.first_name)
    if not (forms and q.company):
        return None
    return f'{SITE_FILTER} "{forms[0]} {q.last_name}" "{q.company}"'


def _name_location(q: IdentityQuery) -> Optional[str]:
    if not q.location:
        return None
    return f'{SITE_FILTER} "{q.full_name}" {q.location}'


def _name_only(q: IdentityQuery) -> Optional[str]:
    return f'{SITE_FILTER} "{q.full_name}"'


SEARCH_STRATEGIES: list[tuple[str, Callable[[IdentityQuery], Optional[str]]]] = [
    ("exact_name_company", _exact_name_company),
    ("name_title_company", _name_title_company),
    ("name_company_unquoted", _name_company_unquoted),
    ("nickname_company", _nickname_company),
    ("name_location", _name_location),
    ("name_only", _name_only),
]


def build_search_queries(query: IdentityQuery) -> list[tuple[str, str]]:
    """(strategy name, query text) pairs applicable to this identity, in order."""
    queries = []
    seen = set()
    for name, builder in SEARCH_STRATEGIES:
        text = builder(query)
        if text and text not in seen:
            seen.add(text)
            queries.append((name, text))
    return queries


# ── Scoring rules ───────────────────────────────────────────────────


def _contains(haystack: str, needle: Optional[str]) -> bool:
    return bool(needle and needle.strip()) and needle.strip().lower() in haystack


ScoringRule = tuple[str, Callable[[IdentityQuery, str, str, Candidate], bool], int]

# (name, predicate(query, title_lower, url_lower, candidate), weight)
SCORING_RULES: list[ScoringRule] = [
    ("authoritative_source", lambda q, t, u, c: c.from_authoritative_source, 35),
    ("first_name", lambda q, t, u, c: _contains(t, q.first_name), 20),
    ("last_name", lambda q, t, u, c: _contains(t, q.last_name), 20),
    ("last_name_in_url", lambda q, t, u, c: _contains(u, q.last_name), 15),
    ("company", lambda q, t, u, c: _contains(t, q.company), 20),
    ("title", lambda q, t, u, c: _contains(t, q.title), 10),
    ("location", lambda q, t, u, c: _contains(t, q.location), 5),
]


def score_candidate(
    query: IdentityQuery,
    candidate: Candidate,
    strategy: Optional[str] = None,
) -> ScoredMatch:
    """Score one candidate. Pure; rules are evaluated in table order."""
    title = (candidate.title or "").lower()
    url = (candidate.url or "").lower()

    score = 0
    matched = []
    for name, predicate, weight in SCORING_RULES:
        if predicate(query, title, url, candidate):
            score += weight
            matched.append(name)

    score = min(score, MAX_SCORE)
    return ScoredMatch(
        url=candidate.url,
        title=candidate.title,
        score=score,
        confidence=min(score / 100, MAX_CONFIDENCE),
        matched_rules=matched,
        strategy=strategy,
    )


# ── Matcher ─────────────────────────────────────────────────────────


class ProfileMatcher:
    """Find the best-matching social profile for an identity."""

    def __init__(
        self,
        search: ISearchProvider,
        threshold: int,
        profile_path: str = DEFAULT_PROFILE_PATH,
        pause: float = 0.0,
        search_options: Optional[dict] = None,
    ):
        self.search = search
        self.threshold = threshold
        self.profile_path = profile_path.lower()
        self.pause = pause
        self.search_options = search_options or {}

    def is_profile_url(self, url: str) -> bool:
        return bool(url) and self.profile_path in url.lower()

    async def find_profile(self, query: IdentityQuery, tag: str = "") -> Optional[ScoredMatch]:
        """Run strategies in order with early exit.

        Returns None only if no profile-path candidate was ever seen.
        """
        strategies = build_search_queries(query)
        logger.debug(f"{tag} Profile search: {len(strategies)} strategies, threshold={self.threshold}")

        best: Optional[ScoredMatch] = None
        for i, (name, text) in enumerate(strategies):
            if i and self.pause:
                await asyncio.sleep(self.pause)

            candidates = await self.search.query(text, self.search_options)
            profiles = [c for c in candidates if self.is_profile_url(c.url)]
            logger.debug(
                f"{tag} Strategy {name}: {len(candidates)} results, "
                f"{len(profiles)} profiles | {text}"
            )

            for candidate in profiles:
                match = score_candidate(query, candidate, strategy=name)
                if best is None or match.score > best.score:
                    best = match

            if best is not None and best.score >= self.threshold:
                logger.debug(
                    f"{tag} Early exit after {name}: {best.url} scored {best.score}"
                )
                break

        if best:
            logger.info(
                f"{tag} Profile match: {best.url} score={best.score} "
                f"conf={best.confidence:.2f} rules={','.join(best.matched_rules)}"
            )
        else:
            logger.info(f"{tag} No profile candidates found")
        return best
