"""Phone validation with a deterministic local fallback.

The external provider is tried first; if it can't answer for any reason the
number is checked against an ordered table of numbering patterns.
"""

import re
from typing import Optional

from loguru import logger

from lib.contact_discovery.models import PhoneValidation, digits_only
from lib.contact_discovery.providers import IPhoneValidationProvider

# (pattern on digits-only number, line type, location), first match wins
PHONE_PATTERNS: list[tuple[re.Pattern, str, str]] = [
    (re.compile(r"^(?:61|0)?4\d{8}$"), "mobile", "Australia"),
    (re.compile(r"^(?:61|0)?[2378]\d{8}$"), "landline", "Australia"),
    (re.compile(r"^1?[2-9]\d{9}$"), "unknown", "US/Canada"),
]

MIN_INTERNATIONAL_DIGITS = 8
MAX_INTERNATIONAL_DIGITS = 15


def heuristic_validation(number: str) -> PhoneValidation:
    """Validate a number without network access."""
    digits = digits_only(number)
    for pattern, line_type, location in PHONE_PATTERNS:
        if pattern.match(digits):
            return PhoneValidation(valid=True, line_type=line_type, location=location)
    return PhoneValidation(
        valid=MIN_INTERNATIONAL_DIGITS <= len(digits) <= MAX_INTERNATIONAL_DIGITS,
    )


class PhoneValidator:
    """Validate via provider, falling back to heuristic_validation."""

    def __init__(self, provider: Optional[IPhoneValidationProvider] = None):
        self.provider = provider

    async def validate(self, number: str) -> PhoneValidation:
        if self.provider is not None:
            try:
                return await self.provider.validate(number)
            except Exception as e:
                logger.debug(f"Phone validation provider unavailable for {number}: {e}")
        return heuristic_validation(number)
