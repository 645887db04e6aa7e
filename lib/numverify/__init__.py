"""NumVerify phone validation adapter."""

from lib.numverify.client import NumverifyClient, parse_numverify_response

__all__ = ["NumverifyClient", "parse_numverify_response"]
