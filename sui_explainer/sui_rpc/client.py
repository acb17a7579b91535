"""
Sui JSON-RPC client — the transport collaborator of the explainer.

Responsibilities:
- POST JSON-RPC 2.0 requests to one fullnode endpoint over httpx.
- Fetch transaction blocks and per-object metadata.
- Probe endpoint health for fallback selection.
- Raise on transport or RPC errors; retries and timeouts policy live in the pipeline.
"""

from __future__ import annotations

import itertools
from typing import Any

import httpx

from sui_explainer.core.exceptions import RpcResponseError
from sui_explainer.explainer_logging import get_logger
from sui_explainer.sui_rpc.models import EnrichedObject, RawTransaction

logger = get_logger(__name__)

# JSON-RPC request id counter
_request_ids = itertools.count(1)

TRANSACTION_BLOCK_OPTIONS: dict[str, bool] = {
    "showInput": True,
    "showEffects": True,
    "showEvents": True,
    "showObjectChanges": True,
    "showBalanceChanges": True,
}
OBJECT_OPTIONS: dict[str, bool] = {
    "showContent": True,
    "showType": True,
    "showDisplay": True,
}


def _build_rpc_body(method: str, params: list[Any]) -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": next(_request_ids),
        "method": method,
        "params": params,
    }


class SuiRpcClient:
    """
    Async client bound to a single Sui fullnode endpoint.

    The instance is the explicit "active data source" handle: the pipeline
    receives one and returns the one to use next, so switching endpoints
    never mutates shared state.
    """

    def __init__(
        self,
        rpc_url: str,
        *,
        timeout_sec: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            rpc_url: Sui RPC HTTP endpoint (e.g. https://fullnode.mainnet.sui.io:443).
            timeout_sec: HTTP timeout for each RPC request.
            transport: Optional httpx transport (tests pass httpx.MockTransport).
        """
        if not rpc_url.strip():
            raise ValueError("rpc_url must be non-empty")
        self._rpc_url = rpc_url.strip().rstrip("/")
        self._timeout_sec = timeout_sec
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    @property
    def rpc_url(self) -> str:
        return self._rpc_url

    def __repr__(self) -> str:
        return f"SuiRpcClient({self._rpc_url!r})"

    def _client(self) -> httpx.AsyncClient:
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout_sec),
                transport=self._transport,
            )
        return self._http

    async def close(self) -> None:
        if self._http is not None and not self._http.is_closed:
            await self._http.aclose()
        self._http = None

    async def __aenter__(self) -> "SuiRpcClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def call(self, method: str, params: list[Any]) -> Any:
        """Perform one JSON-RPC call; raise on transport or RPC error."""
        body = _build_rpc_body(method, params)
        resp = await self._client().post(self._rpc_url, json=body)
        resp.raise_for_status()
        data = resp.json()
        if not isinstance(data, dict):
            raise RpcResponseError(f"Sui RPC returned a non-object response for {method}")
        if "error" in data:
            err = data["error"] if isinstance(data["error"], dict) else {"message": data["error"]}
            raise RpcResponseError(
                f"Sui RPC error: {err.get('message', err)}",
                code=err.get("code"),
            )
        if data.get("result") is None:
            raise RpcResponseError(f"Sui RPC returned no result for {method}")
        return data["result"]

    async def get_transaction_block(self, digest: str) -> RawTransaction:
        """sui_getTransactionBlock with input, effects, events, object and balance changes."""
        result = await self.call(
            "sui_getTransactionBlock", [digest, TRANSACTION_BLOCK_OPTIONS]
        )
        return RawTransaction.from_rpc(result)

    async def get_object(self, object_id: str) -> EnrichedObject:
        """sui_getObject with content, type and display; raises when the object is gone."""
        result = await self.call("sui_getObject", [object_id, OBJECT_OPTIONS])
        if isinstance(result, dict) and result.get("error"):
            raise RpcResponseError(f"Object {object_id} unavailable: {result['error']}")
        return EnrichedObject.from_rpc(result, object_id=object_id)

    async def probe(self) -> bool:
        """Lightweight health check (sui_getChainIdentifier); never raises."""
        try:
            await self.call("sui_getChainIdentifier", [])
        except Exception as e:
            logger.debug("rpc_probe_failed", rpc_url=self._rpc_url, error=str(e))
            return False
        return True
