"""Discovery service.

Contact discovery for partially-known people.

Components:
- Config: tunables and provider wiring (config.py)
- Enrichment: concurrent provider fan-out with region gating (enrichment.py)
- Service: SEARCH -> ENRICH -> REGIONAL_ENRICH -> CONSOLIDATE -> VALIDATE (service.py)
- Input parser: free text -> IdentityQuery (input_parser.py)
"""

from services.discovery.config import DiscoveryConfig, build_service
from services.discovery.enrichment import EnrichmentCollector, region_matches
from services.discovery.input_parser import parse_identity
from services.discovery.service import IService, Service

__all__ = [
    "DiscoveryConfig",
    "build_service",
    "EnrichmentCollector",
    "region_matches",
    "parse_identity",
    "IService",
    "Service",
]
