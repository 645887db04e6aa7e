"""Contact discovery exceptions.

Only InvalidIdentityError ever reaches a caller. Provider errors are raised
inside adapters and absorbed at the adapter boundary into a failed
SourceResult; ValidationUnavailableError is absorbed by PhoneValidator.
"""

import asyncio

import httpx

MAX_ERROR_LENGTH = 200


class DiscoveryError(Exception):
    """Base class for contact discovery errors."""


class InvalidIdentityError(DiscoveryError, ValueError):
    """Identity is missing a mandatory field (first or last name)."""


class ProviderError(DiscoveryError):
    """A provider returned an error payload or an unusable response."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        self.message = message
        super().__init__(f"{provider}: {message}")


class ValidationUnavailableError(ProviderError):
    """Phone validation provider could not answer."""


def describe_error(exc: BaseException) -> str:
    """Short human-readable message for a provider failure."""
    if isinstance(exc, ProviderError):
        message = exc.message
    elif isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError)):
        message = "request timed out"
    elif isinstance(exc, httpx.HTTPStatusError):
        message = f"HTTP {exc.response.status_code}"
    elif isinstance(exc, httpx.HTTPError):
        message = f"transport error: {exc}" if str(exc) else f"transport error: {type(exc).__name__}"
    else:
        message = str(exc) or type(exc).__name__
    return message[:MAX_ERROR_LENGTH]


def response_error(provider: str, resp: httpx.Response) -> ProviderError:
    """Build a ProviderError from a non-2xx response, preferring the API's own message."""
    detail = None
    try:
        body = resp.json()
        if isinstance(body, dict):
            detail = body.get("message") or body.get("error")
    except ValueError:
        pass
    if isinstance(detail, dict):
        detail = detail.get("message") or detail.get("info")
    return ProviderError(provider, str(detail) if detail else f"HTTP {resp.status_code}")
