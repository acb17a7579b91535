"""
Tests for transport error classification and user-facing messages.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from sui_explainer.core.exceptions import (
    CONNECTIVITY_MESSAGE,
    NOT_FOUND_MESSAGE,
    RATE_LIMITED_MESSAGE,
    TIMEOUT_MESSAGE,
    ConnectivityError,
    RateLimitedError,
    RpcResponseError,
    TransactionNotFoundError,
    TransportError,
    TransportTimeoutError,
    classify_transport_error,
)


@pytest.mark.parametrize(
    "error, expected, message",
    [
        (asyncio.TimeoutError(), TransportTimeoutError, TIMEOUT_MESSAGE),
        (httpx.ReadTimeout("read"), TransportTimeoutError, TIMEOUT_MESSAGE),
        (RuntimeError("The operation was aborted"), TransportTimeoutError, TIMEOUT_MESSAGE),
        (RuntimeError("Transaction does not exist"), TransactionNotFoundError, NOT_FOUND_MESSAGE),
        (RuntimeError("HTTP 404"), TransactionNotFoundError, NOT_FOUND_MESSAGE),
        (RuntimeError("429 Too Many Requests"), RateLimitedError, RATE_LIMITED_MESSAGE),
        (httpx.ConnectError("boom"), ConnectivityError, CONNECTIVITY_MESSAGE),
        (OSError("getaddrinfo: DNS failure"), ConnectivityError, CONNECTIVITY_MESSAGE),
    ],
)
def test_classification(error, expected, message):
    """Each recognizable failure maps to its class and message, chained to the original."""
    classified = classify_transport_error(error)
    assert type(classified) is expected
    assert classified.user_message == message
    assert classified.__cause__ is error


def test_rpc_code_is_considered():
    """The JSON-RPC code participates in classification."""
    err = RpcResponseError("Sui RPC error: invalid params", code=-32602)
    assert isinstance(classify_transport_error(err), TransactionNotFoundError)


def test_unrecognized_rpc_error_passes_through():
    """An RPC error with nothing recognizable stays an RpcResponseError."""
    err = RpcResponseError("Sui RPC error: something odd", code=-32000)
    assert classify_transport_error(err) is err
    assert err.user_message == "Failed to fetch transaction: Sui RPC error: something odd"


def test_generic_error_message():
    """Anything else keeps the original text in the user message."""
    classified = classify_transport_error(KeyError("weird"))
    assert type(classified) is TransportError
    assert classified.user_message.startswith("Failed to fetch transaction: ")


def test_classified_errors_pass_through():
    """Already-classified errors are returned unchanged."""
    err = RateLimitedError("slow down")
    assert classify_transport_error(err) is err
