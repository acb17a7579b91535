"""
Fetch orchestrator and interpretation pipeline.

Responsibilities:
- Validate the digest and fetch the transaction with retry and exponential backoff.
- On transport failure, probe alternate endpoints and restart once on the first healthy one.
- Enrich, normalize and render the three summaries.

The active endpoint is an explicit SuiRpcClient handle: it is passed in and
the handle to use next is returned in ExplainResult. Nothing module-level
tracks the current endpoint.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, Iterable, Mapping

from sui_explainer.config import Settings, get_settings
from sui_explainer.core.exceptions import (
    InvalidDigestError,
    TransactionNotFoundError,
    TransportError,
    classify_transport_error,
)
from sui_explainer.explainer_logging import bind_digest, get_logger
from sui_explainer.interpreter.enrichment import enrich
from sui_explainer.interpreter.models import InterpretedTransaction
from sui_explainer.interpreter.normalizer import normalize
from sui_explainer.summary import build_breakdown, build_bullets, build_headline
from sui_explainer.sui_rpc import EnrichedObject, RawTransaction, SuiRpcClient

logger = get_logger(__name__)

MIN_DIGEST_LEN = 32

ClientFactory = Callable[[str], SuiRpcClient]


@dataclass
class ExplainResult:
    """An interpreted transaction plus the client handle to use for the next call."""

    transaction: InterpretedTransaction
    client: SuiRpcClient


def validate_digest(digest: str | None) -> str:
    """Return the stripped digest; raise InvalidDigestError when empty or too short."""
    cleaned = (digest or "").strip()
    if not cleaned:
        raise InvalidDigestError("Transaction digest is empty")
    if len(cleaned) < MIN_DIGEST_LEN:
        raise InvalidDigestError(
            f"Transaction digest looks malformed ({len(cleaned)} characters, expected at least {MIN_DIGEST_LEN})"
        )
    return cleaned


async def fetch_with_retry(
    client: SuiRpcClient,
    digest: str,
    *,
    max_retries: int,
    base_delay_sec: float,
    attempt_timeout_sec: float,
) -> RawTransaction:
    """
    Fetch a transaction block, retrying with exponential backoff.

    Each attempt runs under attempt_timeout_sec. Not-found errors are not
    retried. Raises the classified TransportError after the last attempt.
    """
    attempts = max(1, max_retries)
    delay = base_delay_sec
    last_error: TransportError | None = None

    for attempt in range(attempts):
        try:
            return await asyncio.wait_for(
                client.get_transaction_block(digest), timeout=attempt_timeout_sec
            )
        except Exception as e:
            last_error = classify_transport_error(e)
            if isinstance(last_error, TransactionNotFoundError):
                logger.info("fetch_not_found", digest=digest, rpc_url=client.rpc_url)
                raise last_error
            logger.warning(
                "fetch_retry",
                digest=digest,
                rpc_url=client.rpc_url,
                attempt=attempt + 1,
                max_retries=attempts,
                error=str(last_error),
            )
            if attempt + 1 < attempts:
                await asyncio.sleep(delay)
                delay *= 2

    logger.error("fetch_give_up", digest=digest, rpc_url=client.rpc_url, max_retries=attempts)
    raise last_error or TransportError("no fetch attempt was made")


async def select_fallback(
    urls: Iterable[str],
    *,
    probe_timeout_sec: float,
    client_factory: ClientFactory,
) -> SuiRpcClient | None:
    """Probe each URL in order; return a client for the first that answers, else None."""
    for url in urls:
        candidate = client_factory(url)
        try:
            healthy = await asyncio.wait_for(candidate.probe(), timeout=probe_timeout_sec)
        except asyncio.TimeoutError:
            healthy = False
        logger.info("rpc_probe", rpc_url=url, healthy=healthy)
        if healthy:
            return candidate
        await candidate.close()
    return None


def interpret(
    raw: RawTransaction,
    enriched: Mapping[str, EnrichedObject] | None = None,
) -> InterpretedTransaction:
    """Normalize and render summaries. Pure: same inputs give identical output."""
    normalized = normalize(raw, enriched)
    return InterpretedTransaction(
        digest=normalized.digest,
        sender=normalized.sender,
        success=normalized.success,
        gas_used=normalized.gas_used,
        gas_cost=normalized.gas_cost,
        timestamp_ms=normalized.timestamp_ms,
        created=normalized.created,
        deleted=normalized.deleted,
        mutated=normalized.mutated,
        transferred=normalized.transferred,
        calls=normalized.calls,
        balance_changes=normalized.balance_changes,
        bullets=build_bullets(normalized),
        headline=build_headline(normalized),
        breakdown=build_breakdown(normalized),
        labels=normalized.labels,
    )


def _default_factory(settings: Settings) -> ClientFactory:
    def factory(url: str) -> SuiRpcClient:
        return SuiRpcClient(url, timeout_sec=settings.fetch_attempt_timeout_sec)

    return factory


async def _run(
    digest: str,
    client: SuiRpcClient,
    settings: Settings,
    fallback_urls: tuple[str, ...],
    client_factory: ClientFactory,
    allow_switch: bool,
) -> ExplainResult:
    log = bind_digest(digest)
    try:
        raw = await fetch_with_retry(
            client,
            digest,
            max_retries=settings.fetch_max_retries,
            base_delay_sec=settings.fetch_base_delay_sec,
            attempt_timeout_sec=settings.fetch_attempt_timeout_sec,
        )
    except TransactionNotFoundError:
        raise
    except TransportError:
        if not allow_switch:
            raise
        # the primary is a candidate whenever the active client is not it
        candidates = tuple(dict.fromkeys(
            u.strip().rstrip("/")
            for u in (settings.rpc_url, *fallback_urls)
            if u.strip().rstrip("/") != client.rpc_url.rstrip("/")
        ))
        alternate = await select_fallback(
            candidates,
            probe_timeout_sec=settings.probe_timeout_sec,
            client_factory=client_factory,
        )
        if alternate is None:
            log.error("rpc_fallback_exhausted", rpc_url=client.rpc_url, candidates=len(candidates))
            raise
        log.warning("rpc_endpoint_switched", from_url=client.rpc_url, to_url=alternate.rpc_url)
        # one switch per call; the restarted run may not switch again
        try:
            return await _run(digest, alternate, settings, (), client_factory, allow_switch=False)
        except Exception:
            await alternate.close()
            raise

    enriched = await enrich(
        raw,
        client,
        object_timeout_sec=settings.enrich_object_timeout_sec,
        total_timeout_sec=settings.enrich_total_timeout_sec,
    )
    transaction = interpret(raw, enriched)
    log.info(
        "transaction_explained",
        rpc_url=client.rpc_url,
        success=transaction.success,
        enriched=len(enriched),
        labels=len(transaction.labels),
    )
    return ExplainResult(transaction=transaction, client=client)


async def explain_transaction(
    digest: str,
    client: SuiRpcClient | None = None,
    *,
    settings: Settings | None = None,
    fallback_urls: Iterable[str] | None = None,
    client_factory: ClientFactory | None = None,
) -> ExplainResult:
    """
    Fetch, enrich and interpret one transaction.

    Args:
        digest: Transaction digest (base58, at least 32 characters).
        client: Active endpoint handle; a new one for settings.rpc_url when None.
        settings: Runtime settings; get_settings() when None.
        fallback_urls: Alternate endpoints; settings.fallback_rpc_urls when None.
        client_factory: Builds clients for fallback URLs (tests inject transports here).

    Returns:
        ExplainResult whose client is the handle to pass to the next call.

    Raises:
        InvalidDigestError: digest empty or malformed; nothing is fetched.
        TransportError: classified fetch failure after retries and fallback.
    """
    settings = settings or get_settings()
    digest = validate_digest(digest)
    factory = client_factory or _default_factory(settings)
    owned = client is None
    active = client if client is not None else factory(settings.rpc_url)
    urls = tuple(fallback_urls) if fallback_urls is not None else settings.fallback_rpc_urls

    try:
        result = await _run(digest, active, settings, urls, factory, allow_switch=True)
    except Exception:
        if owned:
            await active.close()
        raise
    if owned and result.client is not active:
        await active.close()
    return result
