"""
Tests for the Sui JSON-RPC client using httpx.MockTransport.
"""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from conftest import DIGEST, RECIPIENT, SENDER, balance, rpc_transaction

from sui_explainer.core.exceptions import RpcResponseError
from sui_explainer.sui_rpc.client import SuiRpcClient

RPC_URL = "https://fullnode.test.example:443"


def _transport(results: dict, seen: list | None = None, status_code: int = 200):
    """Answer each JSON-RPC method with a canned result (or {"error": ...} payload)."""

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if seen is not None:
            seen.append(body)
        payload = results.get(body["method"], {"result": None})
        return httpx.Response(status_code, json={"jsonrpc": "2.0", "id": body["id"], **payload})

    return httpx.MockTransport(handler)


def _call(coro_factory, transport):
    async def run():
        async with SuiRpcClient(RPC_URL, transport=transport) as client:
            return await coro_factory(client)

    return asyncio.run(run())


def test_rejects_empty_url():
    """The client needs an endpoint."""
    with pytest.raises(ValueError):
        SuiRpcClient("  ")


def test_get_transaction_block():
    """Request carries the digest and display options; the result is parsed."""
    seen: list = []
    result = rpc_transaction(
        gas=(100, 50, 30),
        balance_changes=[balance(RECIPIENT, 5)],
        move_calls=[{"package": "0x2", "module": "kiosk", "function": "place"}],
    )
    transport = _transport({"sui_getTransactionBlock": {"result": result}}, seen)
    raw = _call(lambda c: c.get_transaction_block(DIGEST), transport)

    assert seen[0]["method"] == "sui_getTransactionBlock"
    assert seen[0]["params"][0] == DIGEST
    assert seen[0]["params"][1]["showObjectChanges"] is True
    assert raw.digest == DIGEST
    assert raw.sender == SENDER
    assert raw.success
    assert (raw.computation_cost, raw.storage_cost, raw.storage_rebate) == (100, 50, 30)
    assert raw.timestamp_ms == 1700000000000
    assert raw.move_calls[0]["function"] == "place"
    assert len(raw.balance_changes) == 1


def test_rpc_error_raises_with_code():
    """A JSON-RPC error object becomes RpcResponseError carrying the code."""
    transport = _transport({"sui_getTransactionBlock": {"error": {"code": -32602, "message": "Could not find"}}})
    with pytest.raises(RpcResponseError) as exc_info:
        _call(lambda c: c.get_transaction_block(DIGEST), transport)
    assert exc_info.value.code == -32602
    assert "Could not find" in str(exc_info.value)


def test_http_error_status_raises():
    """HTTP error statuses raise before the body is read."""
    transport = _transport({}, status_code=429)
    with pytest.raises(httpx.HTTPStatusError):
        _call(lambda c: c.get_transaction_block(DIGEST), transport)


def test_missing_result_raises():
    """A response with neither result nor error is an RPC error."""
    with pytest.raises(RpcResponseError):
        _call(lambda c: c.get_transaction_block(DIGEST), _transport({}))


def test_get_object():
    """Object display and content fields are exposed."""
    result = {
        "data": {
            "objectId": "0x1",
            "type": "0xabc::capy::Capy",
            "display": {"data": {"name": "Capy #1"}, "error": None},
            "content": {"dataType": "moveObject", "fields": {"level": 3}},
        }
    }
    obj = _call(lambda c: c.get_object("0x1"), _transport({"sui_getObject": {"result": result}}))
    assert obj.object_id == "0x1"
    assert obj.object_type == "0xabc::capy::Capy"
    assert obj.has_display
    assert obj.fields == {"level": 3}


def test_get_object_deleted_raises():
    """Results describing a missing object raise."""
    result = {"error": {"code": "deleted", "object_id": "0x1"}}
    with pytest.raises(RpcResponseError):
        _call(lambda c: c.get_object("0x1"), _transport({"sui_getObject": {"result": result}}))


def test_probe():
    """probe() reports health and never raises."""
    healthy = _transport({"sui_getChainIdentifier": {"result": "35834a8a"}})
    assert _call(lambda c: c.probe(), healthy) is True

    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    assert _call(lambda c: c.probe(), httpx.MockTransport(refuse)) is False
