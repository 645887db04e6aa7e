"""Lusha people enrichment adapter."""

from lib.lusha.client import LushaClient, parse_lusha_person

__all__ = ["LushaClient", "parse_lusha_person"]
