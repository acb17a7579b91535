"""
Data models for Sui RPC responses.

RawTransaction mirrors the sui_getTransactionBlock result fields the
interpreter reads; EnrichedObject mirrors sui_getObject. Both are frozen
and built from loosely-structured JSON that may omit any field.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

UNKNOWN_SENDER = "Unknown"


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_int(value: Any) -> int:
    """Parse u64-as-string RPC numbers; anything unparsable is 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True)
class RawTransaction:
    """
    Transaction block as returned by sui_getTransactionBlock.

    Object changes, balance changes and Move calls keep their RPC dict
    shape; the normalizer is the only consumer that interprets them.
    """

    digest: str
    sender: str
    status: str | None
    computation_cost: int = 0
    storage_cost: int = 0
    storage_rebate: int = 0
    timestamp_ms: int | None = None
    object_changes: tuple[dict[str, Any], ...] = ()
    balance_changes: tuple[dict[str, Any], ...] = ()
    move_calls: tuple[dict[str, Any], ...] = ()
    effects: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def success(self) -> bool:
        return self.status == "success"

    @classmethod
    def from_rpc(cls, result: dict[str, Any]) -> "RawTransaction":
        """Build from a sui_getTransactionBlock result (showInput/Effects/ObjectChanges/BalanceChanges)."""
        result = _as_dict(result)
        tx_data = _as_dict(_as_dict(result.get("transaction")).get("data"))
        effects = _as_dict(result.get("effects"))
        gas_used = _as_dict(effects.get("gasUsed"))

        commands = _as_dict(tx_data.get("transaction")).get("transactions") or []
        move_calls = tuple(
            cmd["MoveCall"]
            for cmd in commands
            if isinstance(cmd, dict) and isinstance(cmd.get("MoveCall"), dict)
        )

        timestamp = result.get("timestampMs")
        return cls(
            digest=str(result.get("digest") or ""),
            sender=tx_data.get("sender") or UNKNOWN_SENDER,
            status=_as_dict(effects.get("status")).get("status"),
            computation_cost=_as_int(gas_used.get("computationCost")),
            storage_cost=_as_int(gas_used.get("storageCost")),
            storage_rebate=_as_int(gas_used.get("storageRebate")),
            timestamp_ms=_as_int(timestamp) if timestamp is not None else None,
            object_changes=tuple(
                c for c in (result.get("objectChanges") or []) if isinstance(c, dict)
            ),
            balance_changes=tuple(
                c for c in (result.get("balanceChanges") or []) if isinstance(c, dict)
            ),
            move_calls=move_calls,
            effects=effects,
        )


@dataclass(frozen=True)
class EnrichedObject:
    """
    Supplemental object data from sui_getObject (showContent/showType/showDisplay).

    display is the Display standard's rendered fields; fields is the Move
    struct content. Either may be None when the object has none.
    """

    object_id: str
    object_type: str | None = None
    display: dict[str, Any] | None = None
    fields: dict[str, Any] | None = None

    @property
    def has_display(self) -> bool:
        return bool(self.display)

    @classmethod
    def from_rpc(cls, result: dict[str, Any], object_id: str | None = None) -> "EnrichedObject":
        """Build from a sui_getObject result ({"data": {...}})."""
        data = _as_dict(_as_dict(result).get("data"))
        display = _as_dict(data.get("display")).get("data")
        fields = _as_dict(data.get("content")).get("fields")
        return cls(
            object_id=str(data.get("objectId") or object_id or ""),
            object_type=data.get("type"),
            display=display if isinstance(display, dict) else None,
            fields=fields if isinstance(fields, dict) else None,
        )
