"""
Environment variable loading and validation for the explainer.

- SUI_NETWORK: mainnet | testnet | devnet (default: mainnet)
- SUI_RPC_URL: primary RPC endpoint (overrides the network default)
- SUI_FALLBACK_RPC_URLS: comma-separated alternate endpoints, tried in order
- FETCH_* / PROBE_* / ENRICH_*: retry and timeout budgets
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is sui_explainer/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

FULLNODE_URL_TEMPLATE = "https://fullnode.{network}.sui.io:443"
KNOWN_NETWORKS = ("mainnet", "testnet", "devnet")

DEFAULT_FETCH_MAX_RETRIES = 3
DEFAULT_FETCH_BASE_DELAY_SEC = 1.0
DEFAULT_FETCH_ATTEMPT_TIMEOUT_SEC = 30.0
DEFAULT_PROBE_TIMEOUT_SEC = 5.0
DEFAULT_ENRICH_OBJECT_TIMEOUT_SEC = 2.0
DEFAULT_ENRICH_TOTAL_TIMEOUT_SEC = 4.0


def load_explainer_env() -> None:
    """Load .env from project root. Safe to call multiple times."""
    load_dotenv(_ENV_PATH)


def get_sui_network() -> str:
    """
    Return SUI_NETWORK from env: mainnet | testnet | devnet.
    Default: mainnet.
    """
    load_explainer_env()
    raw = (os.getenv("SUI_NETWORK") or "mainnet").strip().lower()
    if raw in KNOWN_NETWORKS:
        return raw
    return "mainnet"


def get_sui_rpc_url() -> str:
    """
    Resolve Sui RPC URL from env.
    Order: SUI_RPC_URL > fullnode URL for SUI_NETWORK.
    """
    load_explainer_env()
    url = (os.getenv("SUI_RPC_URL") or "").strip()
    if url:
        return url
    return FULLNODE_URL_TEMPLATE.format(network=get_sui_network())


def get_fallback_rpc_urls() -> list[str]:
    """Return SUI_FALLBACK_RPC_URLS as a list; primary URL and duplicates removed."""
    load_explainer_env()
    primary = get_sui_rpc_url().rstrip("/")
    raw = os.getenv("SUI_FALLBACK_RPC_URLS") or ""
    out: list[str] = []
    for part in raw.split(","):
        url = part.strip()
        if not url or url.rstrip("/") == primary or url in out:
            continue
        out.append(url)
    return out


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def get_fetch_max_retries() -> int:
    load_explainer_env()
    return _env_int("FETCH_MAX_RETRIES", DEFAULT_FETCH_MAX_RETRIES)


def get_fetch_base_delay_sec() -> float:
    load_explainer_env()
    return _env_float("FETCH_BASE_DELAY_SEC", DEFAULT_FETCH_BASE_DELAY_SEC)


def get_fetch_attempt_timeout_sec() -> float:
    load_explainer_env()
    return _env_float("FETCH_ATTEMPT_TIMEOUT_SEC", DEFAULT_FETCH_ATTEMPT_TIMEOUT_SEC)


def get_probe_timeout_sec() -> float:
    load_explainer_env()
    return _env_float("PROBE_TIMEOUT_SEC", DEFAULT_PROBE_TIMEOUT_SEC)


def get_enrich_object_timeout_sec() -> float:
    load_explainer_env()
    return _env_float("ENRICH_OBJECT_TIMEOUT_SEC", DEFAULT_ENRICH_OBJECT_TIMEOUT_SEC)


def get_enrich_total_timeout_sec() -> float:
    load_explainer_env()
    return _env_float("ENRICH_TOTAL_TIMEOUT_SEC", DEFAULT_ENRICH_TOTAL_TIMEOUT_SEC)
