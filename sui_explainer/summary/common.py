"""
Shared helpers for the summary renderers.

Everything here is total: missing names, owners or amounts degrade to the
placeholders "Unknown", "NFT" and "Object" instead of raising.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Iterable

from sui_explainer.interpreter import tokens
from sui_explainer.interpreter.classifier import DEFAULT_NFT_NAME, type_display_name
from sui_explainer.interpreter.labels import UNKNOWN, AddressLabelMap
from sui_explainer.interpreter.models import (
    AddressOwner,
    ContractCall,
    ObjectChange,
    Owner,
    TransferChange,
)

ADDRESS_PREFIX = "0x"
RAW_ADDRESS_MIN_LEN = 21

PLACEHOLDER_TOKENS = frozenset({"temp", "tmp", "temporary", "placeholder", "dummy", "receipt"})

EXCLUDED_CALL_PREFIXES = ("transfer", "split", "pay", "join", "merge")
EXCLUDED_CALL_MODULES = frozenset({"pay", "transfer"})

BULLET_NATIVE_NOISE = Decimal("0.01")
HEADLINE_NATIVE_MIN = Decimal("0.1")
PAIR_TOLERANCE = Decimal("0.01")

_TRAILING_DIGITS_RE = re.compile(r"\d+$")
_TOKEN_SPLIT_RE = re.compile(r"[^0-9a-zA-Z]+")
_MARKER_BRACES = str.maketrans("{}", "()")


def marker(content: object) -> str:
    """Wrap content in the {{...}} entity marker; braces inside become parentheses."""
    return "{{" + str(content).translate(_MARKER_BRACES) + "}}"


def count_noun(count: int, noun: str) -> str:
    """'1 object', '3 objects'."""
    return f"{count} {noun}{'s' if count > 1 else ''}"


def pluralize(count: int, name: str) -> str:
    """'3 Capys' for a collection name; names already ending in s are left alone."""
    return f"{count} {name}" if name.endswith("s") else f"{count} {name}s"


def collection_name(name: str | None) -> str:
    """Derive a collection name: text before the first '#', else without trailing digits."""
    if not name:
        return DEFAULT_NFT_NAME
    if "#" in name:
        base = name.split("#", 1)[0]
    else:
        base = _TRAILING_DIGITS_RE.sub("", name)
    return base.strip() or DEFAULT_NFT_NAME


def is_raw_address(text: str | None) -> bool:
    return bool(text) and text.startswith(ADDRESS_PREFIX) and len(text) >= RAW_ADDRESS_MIN_LEN


def nft_name(change: ObjectChange | TransferChange) -> str:
    metadata = change.nft_metadata
    if metadata is None or not metadata.name:
        return DEFAULT_NFT_NAME
    return metadata.name


def _tokens(text: str) -> set[str]:
    return {t for t in _TOKEN_SPLIT_RE.split(text.lower()) if t}


def is_placeholder(change: ObjectChange | TransferChange) -> bool:
    """Name or struct name hints at a temporary asset (temp, dummy, receipt ...)."""
    struct = tokens.struct_name(change.object_type)
    words = _tokens(nft_name(change)) | _tokens(struct)
    return not words.isdisjoint(PLACEHOLDER_TOKENS)


def is_relevant_nft(change: ObjectChange | TransferChange) -> bool:
    """False for NFTs without a resolved name and for placeholder-looking assets."""
    metadata = change.nft_metadata
    if metadata is None or not metadata.name or metadata.name == DEFAULT_NFT_NAME:
        return False
    return not is_placeholder(change)


def is_narrated_call(call: ContractCall) -> bool:
    """Plumbing calls (transfer/split/pay/join/merge) are left out of the breakdown."""
    function = call.function.lower()
    if call.module.lower() in EXCLUDED_CALL_MODULES:
        return False
    return not function.startswith(EXCLUDED_CALL_PREFIXES)


def owner_label(labels: AddressLabelMap, owner: Owner | None) -> str:
    """Pseudonym for address owners; display text for every other owner kind."""
    if owner is None:
        return UNKNOWN
    if isinstance(owner, AddressOwner):
        return labels.lookup(owner.address)
    return owner.display


def owner_key(owner: Owner | None) -> str:
    """Grouping key for an owner: the address when there is one, else its display."""
    if owner is None:
        return UNKNOWN
    return owner.address or owner.display


def is_native_transfer(transfer: TransferChange) -> bool:
    return tokens.is_native(tokens.coin_inner_type(transfer.object_type))


def transfer_amount_text(transfer: TransferChange) -> str:
    """'12.50 USDC' for a transfer with a known amount."""
    amount = tokens.format_amount(transfer.amount or 0, transfer.token_decimals or 0)
    return f"{amount} {transfer.token_symbol}"


def type_name(type_id: str | None) -> str:
    return type_display_name(type_id)


def group_by(items: Iterable, key) -> dict:
    """Insertion-ordered grouping."""
    groups: dict = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


def largest_group(groups: dict) -> tuple:
    """(key, items) of the biggest group; first seen wins ties."""
    best_key, best_items = None, []
    for key, items in groups.items():
        if len(items) > len(best_items):
            best_key, best_items = key, items
    return best_key, best_items
