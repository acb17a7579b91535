"""
Enrichment orchestrator — best-effort per-object metadata for a transaction.

Selects a bounded set of changed objects, fetches each concurrently under
its own timeout and the whole batch under a shorter aggregate timeout.
Whatever has not finished when the aggregate timeout fires is cancelled
and omitted. Nothing here ever raises; the worst case is an empty mapping.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Protocol

from sui_explainer.explainer_logging import get_logger
from sui_explainer.interpreter.classifier import is_coin_type
from sui_explainer.sui_rpc.models import EnrichedObject, RawTransaction

logger = get_logger(__name__)

MAX_COIN_TRANSFERS = 3
MAX_CREATED = 5
MAX_OTHER_TRANSFERS = 5

DEFAULT_OBJECT_TIMEOUT_SEC = 2.0
DEFAULT_TOTAL_TIMEOUT_SEC = 4.0


class ObjectFetcher(Protocol):
    def get_object(self, object_id: str) -> Awaitable[EnrichedObject]: ...


def _object_ids(changes: list[dict[str, Any]], limit: int) -> list[str]:
    ids = [c.get("objectId") for c in changes if isinstance(c.get("objectId"), str)]
    return ids[:limit]


def select_objects(raw: RawTransaction) -> list[str]:
    """
    Object ids worth enriching, in fetch order.

    Up to 3 coin transfers, 5 created objects and 5 non-coin transfers;
    duplicates dropped keeping the first occurrence.
    """
    changes = list(raw.object_changes)
    transferred = [c for c in changes if c.get("type") == "transferred"]
    coins = [c for c in transferred if is_coin_type(c.get("objectType"))]
    others = [c for c in transferred if not is_coin_type(c.get("objectType"))]
    created = [c for c in changes if c.get("type") == "created"]

    selected = (
        _object_ids(coins, MAX_COIN_TRANSFERS)
        + _object_ids(created, MAX_CREATED)
        + _object_ids(others, MAX_OTHER_TRANSFERS)
    )
    return list(dict.fromkeys(selected))


async def _fetch_one(
    fetcher: ObjectFetcher, object_id: str, timeout_sec: float
) -> EnrichedObject | None:
    try:
        obj = await asyncio.wait_for(fetcher.get_object(object_id), timeout=timeout_sec)
    except asyncio.TimeoutError:
        logger.warning("enrichment_object_timeout", object_id=object_id, timeout_sec=timeout_sec)
        return None
    except Exception as e:
        logger.warning("enrichment_object_failed", object_id=object_id, error=str(e))
        return None
    return obj


async def enrich(
    raw: RawTransaction,
    fetcher: ObjectFetcher,
    *,
    object_timeout_sec: float = DEFAULT_OBJECT_TIMEOUT_SEC,
    total_timeout_sec: float = DEFAULT_TOTAL_TIMEOUT_SEC,
) -> dict[str, EnrichedObject]:
    """
    Return object_id -> EnrichedObject for the objects that answered in time.

    Empty selection returns {} without touching the fetcher.
    """
    try:
        object_ids = select_objects(raw)
        if not object_ids:
            return {}
        logger.info("enrichment_start", digest=raw.digest, requested=len(object_ids))

        tasks = {
            oid: asyncio.create_task(_fetch_one(fetcher, oid, object_timeout_sec))
            for oid in object_ids
        }
        done, pending = await asyncio.wait(tasks.values(), timeout=total_timeout_sec)
        for task in pending:
            task.cancel()
        if pending:
            logger.warning(
                "enrichment_total_timeout",
                digest=raw.digest,
                pending=len(pending),
                timeout_sec=total_timeout_sec,
            )

        enriched: dict[str, EnrichedObject] = {}
        for oid, task in tasks.items():
            if task not in done or task.cancelled():
                continue
            obj = task.result()
            if obj is not None:
                enriched[oid] = obj
        logger.info("enrichment_done", digest=raw.digest, requested=len(object_ids), enriched=len(enriched))
        return enriched
    except Exception as e:
        logger.warning("enrichment_failed", digest=raw.digest, error=str(e))
        return {}
