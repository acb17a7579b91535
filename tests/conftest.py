"""
Pytest fixtures for explainer tests: RPC-shaped transaction builders and the API client.
"""

from __future__ import annotations

from typing import Any

import pytest

SENDER = "0x" + "a" * 64
RECIPIENT = "0x" + "b" * 64
OTHER = "0x" + "c" * 64
DIGEST = "8xJ3kLmN4pQrStUvWxYz1234567890ABCDEFGHJKLMN"


def rpc_transaction(
    *,
    digest: str = DIGEST,
    sender: str = SENDER,
    status: str = "success",
    gas: tuple[int, int, int] = (1000, 2000, 500),
    object_changes: list[dict[str, Any]] | None = None,
    balance_changes: list[dict[str, Any]] | None = None,
    move_calls: list[dict[str, Any]] | None = None,
    timestamp_ms: str | None = "1700000000000",
) -> dict[str, Any]:
    """A sui_getTransactionBlock result shaped like the fullnode's."""
    computation, storage, rebate = gas
    return {
        "digest": digest,
        "timestampMs": timestamp_ms,
        "transaction": {
            "data": {
                "sender": sender,
                "transaction": {
                    "kind": "ProgrammableTransaction",
                    "transactions": [{"MoveCall": c} for c in (move_calls or [])],
                },
            },
        },
        "effects": {
            "status": {"status": status},
            "gasUsed": {
                "computationCost": str(computation),
                "storageCost": str(storage),
                "storageRebate": str(rebate),
            },
        },
        "objectChanges": object_changes or [],
        "balanceChanges": balance_changes or [],
    }


def created(object_id: str, object_type: str, owner: Any) -> dict[str, Any]:
    return {
        "type": "created",
        "objectId": object_id,
        "objectType": object_type,
        "owner": owner,
        "version": "7",
        "digest": "objdigest",
    }


def transferred(object_id: str, object_type: str, sender: str, recipient: Any) -> dict[str, Any]:
    return {
        "type": "transferred",
        "objectId": object_id,
        "objectType": object_type,
        "sender": sender,
        "recipient": recipient,
        "version": "7",
    }


def balance(owner: str, amount: int, coin_type: str = "0x2::sui::SUI") -> dict[str, Any]:
    return {"owner": {"AddressOwner": owner}, "coinType": coin_type, "amount": str(amount)}


@pytest.fixture
def make_raw():
    """Build a RawTransaction from rpc_transaction() keyword arguments."""
    from sui_explainer.sui_rpc.models import RawTransaction

    def _make(**kwargs: Any) -> RawTransaction:
        return RawTransaction.from_rpc(rpc_transaction(**kwargs))

    return _make


@pytest.fixture
def settings():
    """Settings with tiny delays so retry tests run fast."""
    from sui_explainer.config.settings import Settings

    return Settings(
        network="mainnet",
        rpc_url="https://primary.example",
        fallback_rpc_urls=(),
        fetch_max_retries=3,
        fetch_base_delay_sec=0.001,
        fetch_attempt_timeout_sec=1.0,
        probe_timeout_sec=0.5,
        enrich_object_timeout_sec=0.5,
        enrich_total_timeout_sec=1.0,
    )


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """get_settings() is cached per process; reset around each test."""
    from sui_explainer.config.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def client(monkeypatch):
    """FastAPI TestClient. Points the app at a placeholder RPC URL so nothing real is contacted."""
    from fastapi.testclient import TestClient

    from sui_explainer.api_server.server import app

    monkeypatch.setenv("SUI_RPC_URL", "https://primary.example")
    monkeypatch.delenv("SUI_FALLBACK_RPC_URLS", raising=False)
    with TestClient(app) as test_client:
        yield test_client
