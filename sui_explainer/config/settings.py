"""
Application settings and environment configuration.

Collects the env-derived values from config.env into one frozen object so
the pipeline, enrichment and API server read a single source of truth.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass

from sui_explainer.config import env


@dataclass(frozen=True)
class Settings:
    """Typed runtime settings; see config.env for the variables behind each field."""

    network: str
    rpc_url: str
    fallback_rpc_urls: tuple[str, ...]
    fetch_max_retries: int = env.DEFAULT_FETCH_MAX_RETRIES
    fetch_base_delay_sec: float = env.DEFAULT_FETCH_BASE_DELAY_SEC
    fetch_attempt_timeout_sec: float = env.DEFAULT_FETCH_ATTEMPT_TIMEOUT_SEC
    probe_timeout_sec: float = env.DEFAULT_PROBE_TIMEOUT_SEC
    enrich_object_timeout_sec: float = env.DEFAULT_ENRICH_OBJECT_TIMEOUT_SEC
    enrich_total_timeout_sec: float = env.DEFAULT_ENRICH_TOTAL_TIMEOUT_SEC


def load_settings() -> Settings:
    """Build Settings from the current environment (no caching)."""
    return Settings(
        network=env.get_sui_network(),
        rpc_url=env.get_sui_rpc_url(),
        fallback_rpc_urls=tuple(env.get_fallback_rpc_urls()),
        fetch_max_retries=env.get_fetch_max_retries(),
        fetch_base_delay_sec=env.get_fetch_base_delay_sec(),
        fetch_attempt_timeout_sec=env.get_fetch_attempt_timeout_sec(),
        probe_timeout_sec=env.get_probe_timeout_sec(),
        enrich_object_timeout_sec=env.get_enrich_object_timeout_sec(),
        enrich_total_timeout_sec=env.get_enrich_total_timeout_sec(),
    )


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return the current application settings.

    Cached after the first call; tests call get_settings.cache_clear()
    after changing the environment.
    """
    return load_settings()
