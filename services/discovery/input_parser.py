"""Parse free-text requests into an IdentityQuery.

Supported forms (a profile URL or bare company domain may appear anywhere):
    "Steven Lowy, Principal, LFG, Sydney Australia"
    "John Smith @ Acme Corp"
    "Jane Doe (CFO) at TechCorp"
    "Sarah Williams"
"""

import re
from typing import Optional

from lib.contact_discovery.errors import InvalidIdentityError
from lib.contact_discovery.models import IdentityQuery

PROFILE_URL_RE = re.compile(r"(https?://(?:www\.)?linkedin\.com/in/[^\s,]+)", re.IGNORECASE)
DOMAIN_RE = re.compile(
    r"(?<![@\w./])((?:[a-z0-9-]+\.)+(?:com\.au|com|io|co|net|org))(?![\w.])",
    re.IGNORECASE,
)
AT_RE = re.compile(r"\s+at\s+", re.IGNORECASE)
NAME_TITLE_RE = re.compile(r"(.+?)\s*\((.+?)\)")


def _split_name(text: str) -> tuple[str, str]:
    parts = text.split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def _clean(text: str) -> str:
    return re.sub(r"\s{2,}", " ", text).strip(" ,")


def parse_identity(text: str, location: Optional[str] = None) -> IdentityQuery:
    """Parse one free-text request. Raises InvalidIdentityError without a full name."""
    remaining = (text or "").strip()
    fields: dict = {}

    url_match = PROFILE_URL_RE.search(remaining)
    if url_match:
        fields["profile_url"] = url_match.group(1)
        remaining = _clean(remaining.replace(url_match.group(0), " "))

    domain_match = DOMAIN_RE.search(remaining)
    if domain_match:
        fields["domain"] = domain_match.group(1).lower()
        remaining = _clean(remaining.replace(domain_match.group(0), " "))

    if "," in remaining:
        parts = [p.strip() for p in remaining.split(",")]
        first, last = _split_name(parts[0])
        for key, value in zip(("title", "company", "location"), parts[1:4]):
            if value:
                fields[key] = value
    elif "@" in remaining or AT_RE.search(remaining):
        if "@" in remaining:
            name_part, _, company_part = remaining.partition("@")
        else:
            name_part, company_part = AT_RE.split(remaining, maxsplit=1)
        name_part, company_part = name_part.strip(), company_part.strip()
        title_match = NAME_TITLE_RE.match(name_part)
        if title_match:
            first, last = _split_name(title_match.group(1))
            fields["title"] = title_match.group(2).strip()
        else:
            first, last = _split_name(name_part)
        if company_part:
            fields["company"] = company_part
    else:
        first, last = _split_name(remaining)

    if not first or not last:
        raise InvalidIdentityError(f"Could not find a first and last name in {text!r}")
    if location and "location" not in fields:
        fields["location"] = location

    return IdentityQuery(first_name=first, last_name=last, **fields)
