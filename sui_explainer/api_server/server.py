"""
FastAPI server — read-only HTTP surface over the explainer.

Exposes GET /transactions/{digest} returning the interpreted transaction.
The active Sui RPC client lives on app.state in an ActiveClient holder;
when an explain call switches endpoints the returned handle becomes
current and the old one is closed once no request is using it.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from sui_explainer import __version__
from sui_explainer.config import get_settings
from sui_explainer.core.exceptions import (
    ExplainerError,
    InvalidDigestError,
    RateLimitedError,
    TransactionNotFoundError,
    TransportError,
    TransportTimeoutError,
)
from sui_explainer.explainer_logging import get_logger
from sui_explainer.interpreter.pipeline import explain_transaction
from sui_explainer.sui_rpc import SuiRpcClient

logger = get_logger(__name__)


# -----------------------------------------------------------------------------
# Response models
# -----------------------------------------------------------------------------

class TransactionResponse(BaseModel):
    """GET /transactions/{digest} response: canonical model plus the three text artifacts."""

    digest: str = Field(..., description="Transaction digest")
    sender: str = Field(..., description="Sender address")
    success: bool = Field(..., description="Execution status was success")
    gas_used: str = Field(..., description="computation + storage - rebate, in MIST")
    gas_cost: str = Field(..., description="gas_used in SUI, 9 decimal places")
    timestamp_ms: int | None = Field(None, description="Checkpoint timestamp (ms)")
    objects_created: list[dict[str, Any]] = Field(default_factory=list)
    objects_deleted: list[dict[str, Any]] = Field(default_factory=list)
    objects_mutated: list[dict[str, Any]] = Field(default_factory=list)
    objects_transferred: list[dict[str, Any]] = Field(default_factory=list)
    contract_calls: list[dict[str, Any]] = Field(default_factory=list)
    balance_changes: list[dict[str, Any]] = Field(default_factory=list)
    summary: list[str] = Field(default_factory=list, description="Bullet summary with {{...}} markers")
    headline: str = Field(..., description="One-sentence summary with {{...}} markers")
    breakdown: list[str] = Field(default_factory=list, description="Step-by-step narration")
    address_labels: dict[str, str] = Field(default_factory=dict, description="Pseudonym -> address")


class HealthResponse(BaseModel):
    status: str = "ok"


def status_for_error(exc: ExplainerError) -> int:
    """HTTP status for an explainer error."""
    if isinstance(exc, InvalidDigestError):
        return 400
    if isinstance(exc, TransactionNotFoundError):
        return 404
    if isinstance(exc, RateLimitedError):
        return 429
    if isinstance(exc, TransportTimeoutError):
        return 504
    return 502


def detail_for_error(exc: ExplainerError) -> str:
    if isinstance(exc, TransportError):
        return exc.user_message
    return str(exc)


# -----------------------------------------------------------------------------
# Active client handle shared across requests
# -----------------------------------------------------------------------------

class ActiveClient:
    """
    The RPC client requests should use, plus handles retired by an endpoint switch.

    acquire() hands out the current client and counts the request as a user;
    release() records any replacement the request produced and closes retired
    clients that no request is using anymore. All calls run on the event loop,
    so no locking is needed between the count update and the read.
    """

    def __init__(self, client: SuiRpcClient) -> None:
        self.current = client
        self._users: dict[int, int] = {}
        self._retired: list[SuiRpcClient] = []

    def acquire(self) -> SuiRpcClient:
        client = self.current
        self._users[id(client)] = self._users.get(id(client), 0) + 1
        return client

    async def release(self, client: SuiRpcClient, replacement: SuiRpcClient | None = None) -> None:
        remaining = self._users.get(id(client), 1) - 1
        if remaining > 0:
            self._users[id(client)] = remaining
        else:
            self._users.pop(id(client), None)
        if replacement is not None and replacement is not self.current:
            self._retired.append(self.current)
            self.current = replacement
        await self._close_idle()

    async def _close_idle(self) -> None:
        idle = [c for c in self._retired if id(c) not in self._users]
        self._retired = [c for c in self._retired if id(c) in self._users]
        for client in idle:
            logger.info("rpc_client_retired", rpc_url=client.rpc_url)
            await client.close()

    async def close(self) -> None:
        for client in (*self._retired, self.current):
            await client.close()
        self._retired = []


# -----------------------------------------------------------------------------
# Lifespan: one active RPC client per process, closed on shutdown
# -----------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    app.state.rpc_clients = ActiveClient(
        SuiRpcClient(settings.rpc_url, timeout_sec=settings.fetch_attempt_timeout_sec)
    )
    logger.info(
        "api_started",
        network=settings.network,
        rpc_url=settings.rpc_url,
        fallbacks=len(settings.fallback_rpc_urls),
    )
    yield
    await app.state.rpc_clients.close()
    logger.info("api_stopped")


# -----------------------------------------------------------------------------
# App and routes
# -----------------------------------------------------------------------------

app = FastAPI(
    title="Sui Transaction Explainer API",
    description="Read-only API that turns Sui transactions into plain-language summaries.",
    version=__version__,
    lifespan=lifespan,
)


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """Liveness probe: API is up."""
    return HealthResponse(status="ok")


@app.get("/transactions/{digest}", response_model=TransactionResponse)
async def get_transaction(digest: str, request: Request) -> TransactionResponse:
    """
    Fetch, enrich and interpret one transaction.

    400 for a malformed digest, 404 when the transaction does not exist,
    429 when rate limited, 504 on slow network, 502 for other RPC failures.
    """
    clients: ActiveClient = request.app.state.rpc_clients
    client = clients.acquire()
    try:
        result = await explain_transaction(digest, client, settings=get_settings())
    except ExplainerError as e:
        await clients.release(client)
        status = status_for_error(e)
        logger.warning(
            "api_transaction_failed",
            digest=(digest or "")[:10] + "...",
            status=status,
            error=str(e),
        )
        raise HTTPException(status_code=status, detail=detail_for_error(e))
    except BaseException:
        await clients.release(client)
        raise

    await clients.release(client, result.client)
    return TransactionResponse(**result.transaction.to_dict())
