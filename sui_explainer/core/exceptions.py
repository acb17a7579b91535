"""
Application-level exceptions.

Only transport failures (after retries and fallback) reach the caller of the
explainer; each carries a user_message suitable for display. Raw errors from
httpx / asyncio are mapped onto this hierarchy by classify_transport_error().
"""

from __future__ import annotations

import asyncio

import httpx

TIMEOUT_MESSAGE = "The Sui network is responding slowly. Please try again in a moment."
NOT_FOUND_MESSAGE = "Transaction not found. Check that the digest is correct and from Sui mainnet."
RATE_LIMITED_MESSAGE = "Too many requests to the Sui network. Please wait a moment and try again."
CONNECTIVITY_MESSAGE = "Could not connect to the Sui network. Check your connection and try again."

_TIMEOUT_MARKERS = ("timeout", "timed out", "abort")
_NOT_FOUND_MARKERS = ("not found", "could not find", "does not exist", "-32602", "404")
_RATE_LIMIT_MARKERS = ("429", "rate limit", "too many requests")
_CONNECTIVITY_MARKERS = (
    "connect",
    "network",
    "fetch failed",
    "unreachable",
    "econn",
    "dns",
    "name resolution",
)


class ExplainerError(Exception):
    """Base exception for the explainer."""
    pass


class InvalidDigestError(ExplainerError, ValueError):
    """Raised when a transaction digest is empty or obviously malformed."""
    pass


class TransportError(ExplainerError):
    """Raised when the RPC collaborator could not supply a transaction."""

    default_message = "Failed to fetch transaction"

    def __init__(self, message: str, user_message: str | None = None):
        self.user_message = user_message or f"{self.default_message}: {message}"
        super().__init__(message)


class TransportTimeoutError(TransportError):
    """Raised when the RPC endpoint did not answer within the time budget."""

    def __init__(self, message: str):
        super().__init__(message, TIMEOUT_MESSAGE)


class TransactionNotFoundError(TransportError):
    """Raised when the endpoint has no transaction for the digest."""

    def __init__(self, message: str):
        super().__init__(message, NOT_FOUND_MESSAGE)


class RateLimitedError(TransportError):
    """Raised when the endpoint rejects requests as rate limited."""

    def __init__(self, message: str):
        super().__init__(message, RATE_LIMITED_MESSAGE)


class ConnectivityError(TransportError):
    """Raised when the endpoint cannot be reached at all."""

    def __init__(self, message: str):
        super().__init__(message, CONNECTIVITY_MESSAGE)


class RpcResponseError(TransportError):
    """Raised when the endpoint returns a JSON-RPC error object."""

    def __init__(self, message: str, code: int | None = None):
        self.code = code
        super().__init__(message)


def classify_transport_error(exc: BaseException) -> TransportError:
    """
    Map any fetch failure onto the TransportError hierarchy.

    Already-classified errors (other than bare RpcResponseError) pass
    through unchanged. Otherwise the error text is inspected for
    recognizable substrings; timeout types are matched by class first.
    The returned error has the original chained as __cause__.
    """
    if isinstance(exc, TransportError) and type(exc) is not RpcResponseError:
        return exc

    text = str(exc) or type(exc).__name__
    if isinstance(exc, RpcResponseError) and exc.code is not None:
        text = f"{text} (code={exc.code})"
    lowered = text.lower()

    classified: TransportError
    if isinstance(exc, (asyncio.TimeoutError, httpx.TimeoutException)) or any(
        m in lowered for m in _TIMEOUT_MARKERS
    ):
        classified = TransportTimeoutError(text)
    elif any(m in lowered for m in _NOT_FOUND_MARKERS):
        classified = TransactionNotFoundError(text)
    elif any(m in lowered for m in _RATE_LIMIT_MARKERS):
        classified = RateLimitedError(text)
    elif isinstance(exc, httpx.TransportError) or any(
        m in lowered for m in _CONNECTIVITY_MARKERS
    ):
        classified = ConnectivityError(text)
    elif isinstance(exc, RpcResponseError):
        return exc
    else:
        classified = TransportError(text)
    classified.__cause__ = exc
    return classified
