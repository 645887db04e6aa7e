"""SerpAPI Google search adapter.

Returns knowledge-panel profile links (flagged authoritative) followed by
organic results. Fails soft: any error gives an empty list.
"""

from typing import Optional

import httpx
from loguru import logger

from lib.contact_discovery.models import Candidate

SERPAPI_URL = "https://serpapi.com/search.json"
PROFILE_HOST = "linkedin.com"


def parse_serpapi_response(data: dict) -> list[Candidate]:
    """Map a SerpAPI search.json payload to candidates."""
    candidates = []

    profiles = (data.get("knowledge_graph") or {}).get("profiles") or []
    for profile in profiles:
        link = profile.get("link") or ""
        if PROFILE_HOST in link:
            candidates.append(Candidate(
                url=link,
                title=profile.get("name") or "LinkedIn Profile",
                snippet="From Knowledge Graph",
                rank=0,
                from_authoritative_source=True,
            ))
            break

    for i, item in enumerate(data.get("organic_results") or [], start=1):
        link = item.get("link")
        if not link:
            continue
        candidates.append(Candidate(
            url=link,
            title=item.get("title") or "",
            snippet=item.get("snippet") or "",
            rank=item.get("position") or i,
        ))

    return candidates


class SerpApiClient:
    """ISearchProvider backed by SerpAPI."""

    def __init__(
        self,
        api_key: str,
        client: httpx.AsyncClient,
        timeout: float = 15.0,
        country: str = "au",
        num_results: int = 10,
    ):
        self.api_key = api_key
        self.client = client
        self.timeout = timeout
        self.country = country
        self.num_results = num_results

    async def query(self, text: str, options: Optional[dict] = None) -> list[Candidate]:
        options = options or {}
        country = options.get("country", self.country)
        params = {
            "api_key": self.api_key,
            "engine": "google",
            "q": text,
            "num": options.get("num", self.num_results),
            "gl": country,
            "hl": "en",
            "google_domain": "google.com.au" if country == "au" else "google.com",
        }
        try:
            resp = await self.client.get(SERPAPI_URL, params=params, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except Exception as e:
            logger.warning(f"SerpAPI search failed for {text!r}: {e}")
            return []

        if data.get("error"):
            logger.warning(f"SerpAPI error for {text!r}: {data['error']}")
            return []

        return parse_serpapi_response(data)
