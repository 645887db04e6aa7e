"""Email validation: local format and disposable-domain checks, then an
optional deliverability provider.

Malformed and disposable addresses are decided locally and never reach the
provider. When the provider can't answer, a well-formed address is reported
as "format_valid".
"""

import re
from typing import Iterable, Optional

from loguru import logger

from lib.contact_discovery.models import EmailValidation
from lib.contact_discovery.providers import IEmailValidationProvider

EMAIL_FORMAT = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

DEFAULT_DISPOSABLE_DOMAINS = (
    "tempmail.com",
    "throwaway.com",
    "mailinator.com",
    "guerrillamail.com",
    "temp-mail.org",
    "10minutemail.com",
    "fakeinbox.com",
)

DISPOSABLE_CONFIDENCE = 0.3
FORMAT_ONLY_CONFIDENCE = 0.6


def email_domain(email: str) -> str:
    return email.rpartition("@")[2].strip().lower()


def local_validation(
    email: str,
    disposable_domains: Iterable[str] = DEFAULT_DISPOSABLE_DOMAINS,
) -> Optional[EmailValidation]:
    """Decide an address locally, or None if it needs a deliverability check."""
    if not EMAIL_FORMAT.match(email or ""):
        return EmailValidation(valid=False, reason="invalid_format", confidence=0.0)
    if email_domain(email) in set(disposable_domains):
        return EmailValidation(
            valid=True, reason="disposable", confidence=DISPOSABLE_CONFIDENCE, disposable=True,
        )
    return None


class EmailValidator:
    """Validate locally, then via provider, falling back to format_valid."""

    def __init__(
        self,
        provider: Optional[IEmailValidationProvider] = None,
        disposable_domains: Iterable[str] = DEFAULT_DISPOSABLE_DOMAINS,
    ):
        self.provider = provider
        self.disposable_domains = tuple(d.lower() for d in disposable_domains)

    async def validate(self, email: str) -> EmailValidation:
        result = local_validation(email, self.disposable_domains)
        if result is not None:
            return result
        if self.provider is not None:
            try:
                return await self.provider.verify(email)
            except Exception as e:
                logger.debug(f"Email validation provider unavailable for {email}: {e}")
        return EmailValidation(valid=True, reason="format_valid", confidence=FORMAT_ONLY_CONFIDENCE)
