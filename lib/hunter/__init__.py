"""Hunter email deliverability adapter."""

from lib.hunter.client import HunterClient, parse_hunter_verification

__all__ = ["HunterClient", "parse_hunter_verification"]
