"""
Change normalizer — raw Sui object changes to the canonical model.

Branches on each object change's kind (created / deleted / mutated /
transferred), classifies assets with the classifier, resolves coin amounts
with the token registry and fills the address label map.

Label discovery order is fixed: sender, owners of created NFTs, transfer
endpoints, balance-change owners. Reordering it is a compatibility break
for every text artifact.
"""

from __future__ import annotations

from typing import Any, Mapping

from sui_explainer.explainer_logging import get_logger
from sui_explainer.interpreter import classifier, tokens
from sui_explainer.interpreter.labels import AddressLabelMap
from sui_explainer.interpreter.models import (
    UNKNOWN_TYPE,
    AddressOwner,
    BalanceChange,
    ContractCall,
    NormalizedTransaction,
    ObjectChange,
    TransferChange,
    parse_owner,
)
from sui_explainer.sui_rpc.models import EnrichedObject, RawTransaction

logger = get_logger(__name__)


def compute_gas(raw: RawTransaction) -> tuple[int, str]:
    """(computation + storage - rebate in MIST, same amount as SUI text at 9 places)."""
    total = raw.computation_cost + raw.storage_cost - raw.storage_rebate
    return total, tokens.format_fixed(total, tokens.NATIVE_DECIMALS)


def _str_or_none(value: Any) -> str | None:
    return str(value) if value is not None else None


def _object_type(change: dict[str, Any]) -> str:
    return change.get("objectType") or UNKNOWN_TYPE


def _build_created(change: dict[str, Any], enriched: EnrichedObject | None) -> ObjectChange:
    object_type = _object_type(change)
    nft = classifier.is_nft(object_type, enriched)
    return ObjectChange(
        object_id=str(change.get("objectId") or ""),
        object_type=object_type,
        version=_str_or_none(change.get("version")),
        digest=change.get("digest"),
        owner=parse_owner(change.get("owner")),
        is_nft=nft,
        nft_metadata=classifier.extract_display_metadata(enriched) if nft else None,
    )


def _build_deleted(change: dict[str, Any]) -> ObjectChange:
    return ObjectChange(
        object_id=str(change.get("objectId") or ""),
        object_type=_object_type(change),
        version=_str_or_none(change.get("version")),
        digest=change.get("digest"),
    )


def _build_mutated(change: dict[str, Any]) -> ObjectChange:
    return ObjectChange(
        object_id=str(change.get("objectId") or ""),
        object_type=_object_type(change),
        version=_str_or_none(change.get("version")),
        digest=change.get("digest"),
        owner=parse_owner(change.get("owner")),
    )


def _build_transfer(change: dict[str, Any], enriched: EnrichedObject | None) -> TransferChange:
    object_type = _object_type(change)
    amount: str | None = None
    symbol: str | None = None
    decimals: int | None = None

    if classifier.is_coin_type(object_type):
        inner = tokens.coin_inner_type(object_type)
        if inner is None:
            symbol, decimals = "Unknown", tokens.NATIVE_DECIMALS
        else:
            info = tokens.resolve(inner)
            symbol, decimals = info.symbol, info.decimals
        balance = (enriched.fields or {}).get("balance") if enriched is not None else None
        amount = _str_or_none(balance)

    nft = classifier.is_nft(object_type, enriched)
    return TransferChange(
        object_id=str(change.get("objectId") or ""),
        object_type=object_type,
        source=parse_owner(change.get("sender")),
        destination=parse_owner(change.get("recipient")),
        version=_str_or_none(change.get("version")),
        amount=amount,
        token_symbol=symbol,
        token_decimals=decimals,
        is_nft=nft,
        nft_metadata=classifier.extract_display_metadata(enriched) if nft else None,
    )


def _build_balance_change(change: dict[str, Any]) -> BalanceChange:
    try:
        amount = int(change.get("amount") or 0)
    except (TypeError, ValueError):
        amount = 0
    return BalanceChange(
        owner=parse_owner(change.get("owner")),
        coin_type=change.get("coinType") or tokens.NATIVE_COIN_TYPE,
        amount=amount,
    )


def _build_call(call: dict[str, Any]) -> ContractCall:
    return ContractCall(
        package=str(call.get("package") or ""),
        module=str(call.get("module") or ""),
        function=str(call.get("function") or ""),
    )


def discover_labels(normalized: NormalizedTransaction) -> AddressLabelMap:
    """Populate normalized.labels in the fixed visitation order; returns the map."""
    labels = normalized.labels
    sender = normalized.sender
    labels.label(sender)

    for obj in normalized.created:
        if obj.is_nft and isinstance(obj.owner, AddressOwner) and obj.owner.address != sender:
            labels.label(obj.owner.address)

    for transfer in normalized.transferred:
        for owner in (transfer.source, transfer.destination):
            if isinstance(owner, AddressOwner):
                labels.label(owner.address)

    for change in normalized.balance_changes:
        if isinstance(change.owner, AddressOwner):
            labels.label(change.owner.address)
    return labels


def normalize(
    raw: RawTransaction,
    enriched: Mapping[str, EnrichedObject] | None = None,
) -> NormalizedTransaction:
    """
    Build the canonical collections for one transaction and fill the label map.

    Missing enrichment is never an error: classification falls back to
    type patterns and coin amounts stay unset.
    """
    enriched = enriched or {}
    gas_used, gas_cost = compute_gas(raw)
    normalized = NormalizedTransaction(
        digest=raw.digest,
        sender=raw.sender,
        success=raw.success,
        gas_used=gas_used,
        gas_cost=gas_cost,
        timestamp_ms=raw.timestamp_ms,
    )

    for change in raw.object_changes:
        kind = change.get("type")
        object_id = change.get("objectId")
        data = enriched.get(object_id) if isinstance(object_id, str) else None
        if kind == "created":
            normalized.created.append(_build_created(change, data))
        elif kind == "deleted":
            normalized.deleted.append(_build_deleted(change))
        elif kind == "mutated":
            normalized.mutated.append(_build_mutated(change))
        elif kind == "transferred":
            normalized.transferred.append(_build_transfer(change, data))

    normalized.calls = [_build_call(c) for c in raw.move_calls]
    normalized.balance_changes = [_build_balance_change(c) for c in raw.balance_changes]

    discover_labels(normalized).freeze()
    logger.debug(
        "transaction_normalized",
        digest=raw.digest,
        created=len(normalized.created),
        deleted=len(normalized.deleted),
        mutated=len(normalized.mutated),
        transferred=len(normalized.transferred),
        calls=len(normalized.calls),
        labels=len(normalized.labels),
    )
    return normalized
