"""Apollo people enrichment adapter."""

from lib.apollo.client import ApolloClient, parse_apollo_person

__all__ = ["ApolloClient", "parse_apollo_person"]
