"""Company domain discovery.

Two strategies in order:
  1. Web search for "<company> official website", first organic hit whose
     host is not a known non-company site.
  2. Domain guesses (<alnum company>.<suffix>) confirmed by a company lookup.
"""

import re
from typing import Optional
from urllib.parse import urlparse

from loguru import logger

from lib.contact_discovery.providers import ICompanyLookupProvider, ISearchProvider

# Hosts that show up for company searches but are never the company's site
DEFAULT_DOMAIN_DENYLIST: tuple[str, ...] = (
    "linkedin.com", "facebook.com", "twitter.com", "x.com", "instagram.com",
    "youtube.com", "wikipedia.org", "crunchbase.com", "bloomberg.com",
    "reuters.com", "forbes.com", "glassdoor.com", "glassdoor.com.au",
    "indeed.com", "seek.com.au", "zoominfo.com", "dnb.com", "google.com",
    "bing.com", "abr.business.gov.au", "yellowpages.com.au",
)

# Tried in order: country commercial, generic commercial, country code, tech
DEFAULT_DOMAIN_SUFFIXES: tuple[str, ...] = ("com.au", "com", "au", "io")

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def extract_host(url: str) -> Optional[str]:
    """Bare lowercase hostname with any leading www. removed."""
    if not url:
        return None
    if not url.startswith(("http://", "https://")):
        url = "https://" + url
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        return None
    host = host.lower()
    if host.startswith("www."):
        host = host[4:]
    return host or None


def is_denylisted(host: str, denylist: tuple[str, ...] | list[str]) -> bool:
    """Exact host or subdomain match; plain substrings do not count."""
    host = host.lower()
    return any(host == d or host.endswith("." + d) for d in denylist)


def domain_guesses(company: str, suffixes: tuple[str, ...] | list[str]) -> list[str]:
    stem = _NON_ALNUM.sub("", (company or "").lower())
    if not stem:
        return []
    return [f"{stem}.{suffix}" for suffix in suffixes]


class DomainResolver:
    """Best-guess primary domain for an organisation. Never raises."""

    def __init__(
        self,
        search: Optional[ISearchProvider] = None,
        company_lookup: Optional[ICompanyLookupProvider] = None,
        denylist: tuple[str, ...] | list[str] = DEFAULT_DOMAIN_DENYLIST,
        suffixes: tuple[str, ...] | list[str] = DEFAULT_DOMAIN_SUFFIXES,
        search_options: Optional[dict] = None,
    ):
        self.search = search
        self.company_lookup = company_lookup
        self.denylist = tuple(denylist)
        self.suffixes = tuple(suffixes)
        self.search_options = search_options or {}

    async def resolve(self, company: Optional[str], tag: str = "") -> Optional[str]:
        if not company or not company.strip():
            return None
        company = company.strip()

        if self.search is not None:
            domain = await self._from_search(company, tag)
            if domain:
                return domain

        if self.company_lookup is not None:
            domain = await self._from_guesses(company, tag)
            if domain:
                return domain

        logger.info(f"{tag} Domain: nothing found for {company!r}")
        return None

    async def _from_search(self, company: str, tag: str) -> Optional[str]:
        try:
            candidates = await self.search.query(f"{company} official website", self.search_options)
        except Exception as e:
            logger.warning(f"{tag} Domain search failed for {company!r}: {e}")
            return None

        for candidate in candidates:
            if candidate.from_authoritative_source:
                continue
            host = extract_host(candidate.url)
            if not host:
                continue
            if is_denylisted(host, self.denylist):
                logger.debug(f"{tag} Domain: skipping denylisted {host}")
                continue
            logger.info(f"{tag} Domain via search: {company!r} -> {host}")
            return host
        return None

    async def _from_guesses(self, company: str, tag: str) -> Optional[str]:
        for guess in domain_guesses(company, self.suffixes):
            try:
                found = await self.company_lookup.lookup(guess)
            except Exception as e:
                logger.debug(f"{tag} Domain guess {guess} lookup failed: {e}")
                continue
            if found.found:
                logger.info(f"{tag} Domain via lookup: {company!r} -> {guess}")
                return guess
            logger.debug(f"{tag} Domain guess {guess}: no company")
        return None
