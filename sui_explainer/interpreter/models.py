"""
Canonical transaction model produced by the interpreter.

Responsibilities:
- Owner descriptors as a tagged variant (address, object, shared, immutable, unknown).
- Created / deleted / mutated object changes, transfers, contract calls, balance changes.
- InterpretedTransaction: the complete output handed to the presentation layer.

Schema is stable; to_dict() output is what the API server serializes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from sui_explainer.interpreter.labels import (
    IMMUTABLE,
    SHARED,
    UNKNOWN,
    AddressLabelMap,
    truncate_address,
)

UNKNOWN_TYPE = "Unknown"


@dataclass(frozen=True)
class AddressOwner:
    address: str
    kind: str = field(default="address", init=False)

    @property
    def display(self) -> str:
        return truncate_address(self.address)


@dataclass(frozen=True)
class ObjectOwner:
    object_id: str
    kind: str = field(default="object", init=False)

    @property
    def address(self) -> None:
        return None

    @property
    def display(self) -> str:
        return f"Object({truncate_address(self.object_id)})"


@dataclass(frozen=True)
class SharedOwner:
    initial_shared_version: str | None = None
    kind: str = field(default="shared", init=False)

    @property
    def address(self) -> None:
        return None

    @property
    def display(self) -> str:
        return SHARED


@dataclass(frozen=True)
class ImmutableOwner:
    kind: str = field(default="immutable", init=False)

    @property
    def address(self) -> None:
        return None

    @property
    def display(self) -> str:
        return IMMUTABLE


@dataclass(frozen=True)
class UnknownOwner:
    kind: str = field(default="unknown", init=False)

    @property
    def address(self) -> None:
        return None

    @property
    def display(self) -> str:
        return UNKNOWN


Owner = Union[AddressOwner, ObjectOwner, SharedOwner, ImmutableOwner, UnknownOwner]


def parse_owner(raw: Any) -> Owner:
    """
    Parse an RPC owner value.

    Accepts a bare address string, the string "Immutable", or one of
    {"AddressOwner": a}, {"ObjectOwner": o}, {"Shared": {...}}, {"Immutable": ...}.
    Anything else (including newer owner kinds) is UnknownOwner.
    """
    if isinstance(raw, str):
        if not raw or raw == UNKNOWN:
            return UnknownOwner()
        if raw == IMMUTABLE:
            return ImmutableOwner()
        return AddressOwner(raw)
    if not isinstance(raw, dict):
        return UnknownOwner()
    if isinstance(raw.get("AddressOwner"), str):
        return AddressOwner(raw["AddressOwner"])
    if isinstance(raw.get("ObjectOwner"), str):
        return ObjectOwner(raw["ObjectOwner"])
    if "Shared" in raw:
        shared = raw["Shared"] if isinstance(raw["Shared"], dict) else {}
        version = shared.get("initial_shared_version")
        return SharedOwner(str(version) if version is not None else None)
    if "Immutable" in raw:
        return ImmutableOwner()
    return UnknownOwner()


def owner_to_dict(owner: Owner | None) -> dict[str, Any] | None:
    if owner is None:
        return None
    out: dict[str, Any] = {"kind": owner.kind, "display": owner.display}
    if isinstance(owner, AddressOwner):
        out["address"] = owner.address
    elif isinstance(owner, ObjectOwner):
        out["object_id"] = owner.object_id
    elif isinstance(owner, SharedOwner):
        out["initial_shared_version"] = owner.initial_shared_version
    return out


@dataclass(frozen=True)
class NftMetadata:
    """Display metadata for a non-fungible asset; attribute values are bounded strings."""

    name: str
    description: str | None = None
    image_url: str | None = None
    attributes: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "image_url": self.image_url,
            "attributes": dict(self.attributes),
        }


@dataclass(frozen=True)
class ObjectChange:
    """A created, deleted or mutated object. Deleted changes carry no owner or metadata."""

    object_id: str
    object_type: str = UNKNOWN_TYPE
    version: str | None = None
    digest: str | None = None
    owner: Owner | None = None
    is_nft: bool = False
    nft_metadata: NftMetadata | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "object_id": self.object_id,
            "object_type": self.object_type,
            "version": self.version,
            "digest": self.digest,
            "owner": owner_to_dict(self.owner),
            "is_nft": self.is_nft,
            "nft_metadata": self.nft_metadata.to_dict() if self.nft_metadata else None,
        }


@dataclass(frozen=True)
class TransferChange:
    """
    An object moved between owners.

    amount / token_symbol / token_decimals are set only for coin transfers
    whose balance was known from enrichment (symbol/decimals may be set alone).
    """

    object_id: str
    object_type: str
    source: Owner
    destination: Owner
    version: str | None = None
    amount: str | None = None
    token_symbol: str | None = None
    token_decimals: int | None = None
    is_nft: bool = False
    nft_metadata: NftMetadata | None = None

    @property
    def has_amount(self) -> bool:
        return bool(self.token_symbol and self.amount and self.token_decimals)

    def to_dict(self) -> dict[str, Any]:
        return {
            "object_id": self.object_id,
            "object_type": self.object_type,
            "from": owner_to_dict(self.source),
            "to": owner_to_dict(self.destination),
            "version": self.version,
            "amount": self.amount,
            "token_symbol": self.token_symbol,
            "token_decimals": self.token_decimals,
            "is_nft": self.is_nft,
            "nft_metadata": self.nft_metadata.to_dict() if self.nft_metadata else None,
        }


@dataclass(frozen=True)
class ContractCall:
    package: str
    module: str
    function: str

    @property
    def display_name(self) -> str:
        return f"{self.module}::{self.function}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "package": self.package,
            "module": self.module,
            "function": self.function,
            "display_name": self.display_name,
        }


@dataclass(frozen=True)
class BalanceChange:
    """Signed raw-unit balance delta for one owner and coin type."""

    owner: Owner
    coin_type: str
    amount: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "owner": owner_to_dict(self.owner),
            "coin_type": self.coin_type,
            "amount": str(self.amount),
        }


@dataclass
class NormalizedTransaction:
    """Intermediate result of normalization: canonical collections plus the filled label map."""

    digest: str
    sender: str
    success: bool
    gas_used: int
    gas_cost: str
    timestamp_ms: int | None = None
    created: list[ObjectChange] = field(default_factory=list)
    deleted: list[ObjectChange] = field(default_factory=list)
    mutated: list[ObjectChange] = field(default_factory=list)
    transferred: list[TransferChange] = field(default_factory=list)
    calls: list[ContractCall] = field(default_factory=list)
    balance_changes: list[BalanceChange] = field(default_factory=list)
    labels: AddressLabelMap = field(default_factory=AddressLabelMap)


@dataclass
class InterpretedTransaction:
    """
    Output of one interpretation run.

    Text artifacts embed {{content}} markers; labels resolves pseudonym
    markers back to raw addresses.
    """

    digest: str
    sender: str
    success: bool
    gas_used: int
    gas_cost: str
    timestamp_ms: int | None
    created: list[ObjectChange]
    deleted: list[ObjectChange]
    mutated: list[ObjectChange]
    transferred: list[TransferChange]
    calls: list[ContractCall]
    balance_changes: list[BalanceChange]
    bullets: list[str]
    headline: str
    breakdown: list[str]
    labels: AddressLabelMap

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dict."""
        return {
            "digest": self.digest,
            "sender": self.sender,
            "success": self.success,
            "gas_used": str(self.gas_used),
            "gas_cost": self.gas_cost,
            "timestamp_ms": self.timestamp_ms,
            "objects_created": [c.to_dict() for c in self.created],
            "objects_deleted": [c.to_dict() for c in self.deleted],
            "objects_mutated": [c.to_dict() for c in self.mutated],
            "objects_transferred": [t.to_dict() for t in self.transferred],
            "contract_calls": [c.to_dict() for c in self.calls],
            "balance_changes": [b.to_dict() for b in self.balance_changes],
            "summary": list(self.bullets),
            "headline": self.headline,
            "breakdown": list(self.breakdown),
            "address_labels": self.labels.to_dict(),
        }
