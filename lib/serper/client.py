"""Serper.dev Google search adapter (alternative to SerpAPI)."""

from typing import Optional

import httpx
from loguru import logger

from lib.contact_discovery.models import Candidate

SERPER_SEARCH_URL = "https://google.serper.dev/search"
PROFILE_HOST = "linkedin.com"


def parse_serper_response(data: dict) -> list[Candidate]:
    """Map a Serper /search payload to candidates."""
    candidates = []

    kg = data.get("knowledgeGraph") or {}
    kg_links = [p.get("link") or "" for p in kg.get("profiles") or []]
    kg_links += [kg.get("descriptionLink") or "", kg.get("website") or ""]
    for link in kg_links:
        if PROFILE_HOST in link:
            candidates.append(Candidate(
                url=link,
                title=kg.get("title") or "LinkedIn Profile",
                snippet="From Knowledge Graph",
                rank=0,
                from_authoritative_source=True,
            ))
            break

    for i, item in enumerate(data.get("organic") or [], start=1):
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


class SerperClient:
    """ISearchProvider backed by Serper."""

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
        try:
            resp = await self.client.post(
                SERPER_SEARCH_URL,
                headers={"X-API-KEY": self.api_key, "Content-Type": "application/json"},
                json={
                    "q": text,
                    "num": options.get("num", self.num_results),
                    "gl": options.get("country", self.country),
                },
                timeout=self.timeout,
            )
            if resp.status_code != 200:
                logger.warning(f"Serper returned HTTP {resp.status_code} for {text!r}")
                return []
            data = resp.json()
        except Exception as e:
            logger.warning(f"Serper search failed for {text!r}: {e}")
            return []

        return parse_serper_response(data)
