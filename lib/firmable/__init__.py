"""Firmable AU/NZ people and company adapter."""

from lib.firmable.client import (
    FirmableClient,
    email_matches_person,
    parse_firmable_company,
    parse_firmable_person,
)

__all__ = [
    "FirmableClient",
    "email_matches_person",
    "parse_firmable_company",
    "parse_firmable_person",
]
