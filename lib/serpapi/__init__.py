"""SerpAPI search adapter."""

from lib.serpapi.client import SerpApiClient, parse_serpapi_response

__all__ = ["SerpApiClient", "parse_serpapi_response"]
