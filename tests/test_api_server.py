"""
Tests for the FastAPI server: health, transaction route and error mapping.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from conftest import DIGEST, RECIPIENT, SENDER, balance, rpc_transaction

from sui_explainer.api_server.server import ActiveClient
from sui_explainer.core.exceptions import (
    ConnectivityError,
    InvalidDigestError,
    RateLimitedError,
    TransactionNotFoundError,
    TransportTimeoutError,
)
from sui_explainer.interpreter.pipeline import ExplainResult, interpret
from sui_explainer.sui_rpc.models import RawTransaction

EXPLAIN = "sui_explainer.api_server.server.explain_transaction"


def _result(client_handle) -> ExplainResult:
    raw = RawTransaction.from_rpc(
        rpc_transaction(balance_changes=[balance(SENDER, -2_000_000_000), balance(RECIPIENT, 2_000_000_000)])
    )
    return ExplainResult(transaction=interpret(raw), client=client_handle)


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_get_transaction(client):
    """200 with the interpreted model; the returned client handle is kept on app.state."""
    replacement = AsyncMock()
    with patch(EXPLAIN, new=AsyncMock(return_value=_result(replacement))) as explain:
        resp = client.get(f"/transactions/{DIGEST}")

    assert resp.status_code == 200
    body = resp.json()
    assert body["digest"] == DIGEST
    assert body["sender"] == SENDER
    assert body["headline"] == "{{User A}} sent 2.0000 SUI to {{User B}}"
    assert body["summary"][0] == "{{User A}} initiated the transaction"
    assert body["address_labels"] == {"User A": SENDER, "User B": RECIPIENT}
    assert explain.await_args.args[0] == DIGEST
    assert client.app.state.rpc_clients.current is replacement


@pytest.mark.parametrize(
    "error, status",
    [
        (TransactionNotFoundError("Could not find the referenced transaction"), 404),
        (RateLimitedError("429"), 429),
        (TransportTimeoutError("timed out"), 504),
        (ConnectivityError("connection refused"), 502),
    ],
)
def test_transport_errors_map_to_status(client, error, status):
    """Transport failures become HTTP errors carrying the user message."""
    with patch(EXPLAIN, new=AsyncMock(side_effect=error)):
        resp = client.get(f"/transactions/{DIGEST}")
    assert resp.status_code == status
    assert resp.json() == {"detail": error.user_message}


def test_invalid_digest_is_400(client):
    """A short digest is rejected before any RPC call."""
    resp = client.get("/transactions/abc")
    assert resp.status_code == 400
    assert "malformed" in resp.json()["detail"]


def test_invalid_digest_error_detail(client):
    with patch(EXPLAIN, new=AsyncMock(side_effect=InvalidDigestError("Transaction digest is empty"))):
        resp = client.get(f"/transactions/{DIGEST}")
    assert resp.status_code == 400
    assert resp.json() == {"detail": "Transaction digest is empty"}


class _Handle:
    def __init__(self, rpc_url):
        self.rpc_url = rpc_url
        self.closed = False

    async def close(self):
        self.closed = True


def test_replaced_clients_close_once_idle():
    """Concurrent switches retire old handles; each closes when its last request ends."""
    async def run():
        primary, first, second = _Handle("https://a"), _Handle("https://b"), _Handle("https://c")
        clients = ActiveClient(primary)
        held_a = clients.acquire()
        held_b = clients.acquire()

        await clients.release(held_a, first)
        assert clients.current is first
        assert not primary.closed

        await clients.release(held_b, second)
        assert clients.current is second
        assert primary.closed and first.closed
        assert not second.closed

        await clients.close()
        assert second.closed

    asyncio.run(run())


def test_failed_request_keeps_current_client():
    async def run():
        primary = _Handle("https://a")
        clients = ActiveClient(primary)
        await clients.release(clients.acquire())
        assert clients.current is primary
        assert not primary.closed

    asyncio.run(run())
