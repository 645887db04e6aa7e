"""
Discovery configuration.

Every tunable of the pipeline lives on DiscoveryConfig. API keys come from
the environment (.env is loaded first); a provider without a key is simply
not wired.
"""

import os
from typing import Optional

import httpx
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from lib.apollo.client import ApolloClient
from lib.contact_discovery.domain_resolver import (
    DEFAULT_DOMAIN_DENYLIST,
    DEFAULT_DOMAIN_SUFFIXES,
)
from lib.contact_discovery.email_validator import DEFAULT_DISPOSABLE_DOMAINS
from lib.firmable.client import FirmableClient
from lib.hunter.client import HunterClient
from lib.lusha.client import LushaClient
from lib.numverify.client import NumverifyClient
from lib.serpapi.client import SerpApiClient
from lib.serper.client import SerperClient

DEFAULT_REGION_KEYWORDS = (
    "australia", "new zealand", "sydney", "melbourne", "brisbane", "perth",
    "adelaide", "auckland", "wellington", "hobart", "canberra", "gold coast",
    "newcastle",
)
DEFAULT_REGION_PHONE_PREFIXES = ("+61", "04", "61", "+64", "64")


class DiscoveryConfig(BaseModel):
    """Configuration for the contact discovery pipeline."""
    model_config = ConfigDict(frozen=True)

    # Provider credentials
    serpapi_key: Optional[str] = None
    serper_key: Optional[str] = None
    apollo_key: Optional[str] = None
    lusha_key: Optional[str] = None
    firmable_key: Optional[str] = None
    numverify_key: Optional[str] = None
    hunter_key: Optional[str] = None
    firmable_base_url: str = Field(default="https://api.firmable.com")

    # Profile search
    match_threshold: int = Field(default=60, ge=0, le=100, description="Early-exit score")
    search_pause: float = Field(default=0.3, ge=0, description="Seconds between search strategies")
    search_country: str = Field(default="au", description="Search engine country code")

    # Consolidation
    confidence_increment: float = Field(default=0.15, ge=0, le=1, description="Boost per corroborating source")
    non_regional_penalty: float = Field(default=0.3, ge=0, le=1)

    # Region gating
    default_location: str = Field(default="Australia")
    region_keywords: tuple[str, ...] = DEFAULT_REGION_KEYWORDS
    region_phone_prefixes: tuple[str, ...] = DEFAULT_REGION_PHONE_PREFIXES

    # Domain discovery
    domain_denylist: tuple[str, ...] = DEFAULT_DOMAIN_DENYLIST
    domain_suffixes: tuple[str, ...] = DEFAULT_DOMAIN_SUFFIXES

    # Timeouts (seconds)
    search_timeout: float = Field(default=15.0, gt=0)
    enrichment_timeout: float = Field(default=10.0, gt=0)
    validation_timeout: float = Field(default=5.0, gt=0)
    email_validation_timeout: float = Field(default=10.0, gt=0)

    validate_top_n: int = Field(default=2, ge=0, description="Phones to validate per identity")
    disposable_email_domains: tuple[str, ...] = DEFAULT_DISPOSABLE_DOMAINS
    batch_delay: float = Field(default=1.0, ge=0, description="Seconds between batch items")

    @classmethod
    def from_env(cls, **overrides) -> "DiscoveryConfig":
        """Build config from environment variables (after loading .env)."""
        load_dotenv()
        values = {
            "serpapi_key": os.getenv("SERP_API_KEY") or os.getenv("SERPAPI_KEY"),
            "serper_key": os.getenv("SERPER_API_KEY"),
            "apollo_key": os.getenv("APOLLO_API_KEY"),
            "lusha_key": os.getenv("LUSHA_API_KEY"),
            "firmable_key": os.getenv("FIRMABLE_API_KEY"),
            "numverify_key": os.getenv("NUMVERIFY_API_KEY"),
            "hunter_key": os.getenv("HUNTER_API_KEY"),
        }
        tunables = {
            "match_threshold": os.getenv("DISCOVERY_MATCH_THRESHOLD"),
            "confidence_increment": os.getenv("DISCOVERY_CONFIDENCE_INCREMENT"),
            "batch_delay": os.getenv("DISCOVERY_BATCH_DELAY"),
            "default_location": os.getenv("DISCOVERY_DEFAULT_LOCATION"),
        }
        values.update({k: v for k, v in tunables.items() if v})
        values.update(overrides)
        return cls(**values)

    @property
    def has_search(self) -> bool:
        return bool(self.serpapi_key or self.serper_key)


def build_service(config: DiscoveryConfig, client: httpx.AsyncClient):
    """Wire a discovery Service with an adapter for every configured provider."""
    from services.discovery.service import Service  # service.py imports this module

    search = None
    if config.serpapi_key:
        search = SerpApiClient(
            config.serpapi_key, client,
            timeout=config.search_timeout, country=config.search_country,
        )
    elif config.serper_key:
        search = SerperClient(
            config.serper_key, client,
            timeout=config.search_timeout, country=config.search_country,
        )

    enrichers = []
    if config.apollo_key:
        enrichers.append(ApolloClient(config.apollo_key, client, timeout=config.enrichment_timeout))
    if config.lusha_key:
        enrichers.append(LushaClient(config.lusha_key, client, timeout=config.enrichment_timeout))

    firmable = None
    if config.firmable_key:
        firmable = FirmableClient(
            config.firmable_key, client,
            timeout=config.enrichment_timeout, base_url=config.firmable_base_url,
        )

    validator = None
    if config.numverify_key:
        validator = NumverifyClient(config.numverify_key, client, timeout=config.validation_timeout)

    email_validator = None
    if config.hunter_key:
        email_validator = HunterClient(config.hunter_key, client, timeout=config.email_validation_timeout)

    return Service(
        config=config,
        search=search,
        enrichers=enrichers,
        regional_enrichers=[firmable] if firmable else [],
        company_lookup=firmable,
        phone_validation=validator,
        email_validation=email_validator,
    )
