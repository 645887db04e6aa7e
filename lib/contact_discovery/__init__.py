"""Contact discovery core.

Resolves a partially-known person into ranked contact facts:
  1. Name variants (nickname <-> formal) to widen search recall
  2. Scored multi-strategy search for a social profile
  3. Company domain discovery (search, then lookup-confirmed guesses)
  4. Consolidation of multi-source emails/phones with corroboration boost
  5. Phone and email validation with local fallbacks

Provider adapters live in sibling packages; orchestration lives in
services/discovery.
"""

from lib.contact_discovery.consolidation import consolidate, flag_non_regional_phones
from lib.contact_discovery.domain_resolver import DomainResolver
from lib.contact_discovery.email_validator import EmailValidator, local_validation
from lib.contact_discovery.errors import (
    DiscoveryError,
    InvalidIdentityError,
    ProviderError,
    ValidationUnavailableError,
)
from lib.contact_discovery.models import (
    BatchResult,
    Candidate,
    CompanyLookup,
    ConsolidatedFact,
    ContactFact,
    EmailValidation,
    IdentityQuery,
    PhoneValidation,
    ResolutionResult,
    ScoredMatch,
    SourceResult,
    StageNote,
)
from lib.contact_discovery.name_variants import alternate_forms, name_variants
from lib.contact_discovery.phone_validator import PhoneValidator, heuristic_validation
from lib.contact_discovery.profile_matcher import ProfileMatcher, score_candidate

__all__ = [
    # Models
    "BatchResult",
    "Candidate",
    "CompanyLookup",
    "ConsolidatedFact",
    "ContactFact",
    "EmailValidation",
    "IdentityQuery",
    "PhoneValidation",
    "ResolutionResult",
    "ScoredMatch",
    "SourceResult",
    "StageNote",
    # Errors
    "DiscoveryError",
    "InvalidIdentityError",
    "ProviderError",
    "ValidationUnavailableError",
    # Logic
    "alternate_forms",
    "name_variants",
    "ProfileMatcher",
    "score_candidate",
    "DomainResolver",
    "consolidate",
    "flag_non_regional_phones",
    "PhoneValidator",
    "heuristic_validation",
    "EmailValidator",
    "local_validation",
]
