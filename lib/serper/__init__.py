"""Serper.dev search adapter."""

from lib.serper.client import SerperClient, parse_serper_response

__all__ = ["SerperClient", "parse_serper_response"]
