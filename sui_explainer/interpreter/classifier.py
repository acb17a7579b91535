"""
Asset classifier — coin vs NFT vs generic object.

Classification is an ordered list of rules; the first rule that returns a
kind wins. Rules only see the type string and optional enrichment, so each
is testable in isolation and the precedence is explicit in RULES.
"""

from __future__ import annotations

import json
import re
from enum import Enum
from typing import Any, Callable

from sui_explainer.interpreter import tokens
from sui_explainer.interpreter.models import NftMetadata
from sui_explainer.sui_rpc.models import EnrichedObject

COIN_TYPE_RE = re.compile(r"(^|::)coin::Coin<")

INTERNAL_TYPE_PATTERNS = (
    "::dynamic_field::Field<",
    "::dynamic_object_field::",
)

# Lower-cased substrings of collectible-style type names
NFT_TYPE_SUBSTRINGS = (
    "nft",
    "::collectible::",
    "::asset::",
    "::token::token",
    "::item::",
    "::agent::",
    "::character::",
    "::card::",
    "::badge::",
    "license",
)

DESCRIPTIVE_FIELDS = ("name", "image_url", "url", "description")
DISPLAY_IMAGE_KEYS = ("image_url", "img_url")
CONTENT_IMAGE_KEYS = ("image_url", "url")

ATTRIBUTE_DENYLIST = frozenset({
    "id",
    "name",
    "description",
    "image_url",
    "img_url",
    "image",
    "url",
    "balance",
    "type",
    "owner",
    "version",
    "digest",
})
MAX_ATTRIBUTE_LEN = 100
UNSERIALIZABLE = "[unserializable]"
DEFAULT_NFT_NAME = "NFT"


class AssetKind(str, Enum):
    COIN = "coin"
    NFT = "nft"
    GENERIC = "generic"


Rule = Callable[[str, "EnrichedObject | None"], "AssetKind | None"]


def is_coin_type(type_id: str | None) -> bool:
    return bool(type_id) and COIN_TYPE_RE.search(type_id) is not None


def is_internal_type(type_id: str | None) -> bool:
    return bool(type_id) and any(p in type_id for p in INTERNAL_TYPE_PATTERNS)


def matches_nft_pattern(type_id: str | None) -> bool:
    lowered = (type_id or "").lower()
    return any(s in lowered for s in NFT_TYPE_SUBSTRINGS)


def _rule_coin(type_id: str, enriched: EnrichedObject | None) -> AssetKind | None:
    return AssetKind.COIN if is_coin_type(type_id) else None


def _rule_internal(type_id: str, enriched: EnrichedObject | None) -> AssetKind | None:
    return AssetKind.GENERIC if is_internal_type(type_id) else None


def _rule_display(type_id: str, enriched: EnrichedObject | None) -> AssetKind | None:
    return AssetKind.NFT if enriched is not None and enriched.has_display else None


def _rule_type_pattern(type_id: str, enriched: EnrichedObject | None) -> AssetKind | None:
    return AssetKind.NFT if matches_nft_pattern(type_id) else None


def _rule_content_fields(type_id: str, enriched: EnrichedObject | None) -> AssetKind | None:
    fields = enriched.fields if enriched is not None else None
    if fields and any(fields.get(name) for name in DESCRIPTIVE_FIELDS):
        return AssetKind.NFT
    return None


def _rule_generic(type_id: str, enriched: EnrichedObject | None) -> AssetKind | None:
    return AssetKind.GENERIC


RULES: tuple[tuple[str, Rule], ...] = (
    ("coin_type", _rule_coin),
    ("internal_type", _rule_internal),
    ("display_metadata", _rule_display),
    ("type_pattern", _rule_type_pattern),
    ("content_fields", _rule_content_fields),
    ("fallback", _rule_generic),
)


def explain(type_id: str | None, enriched: EnrichedObject | None = None) -> tuple[AssetKind, str]:
    """Return (kind, name of the deciding rule)."""
    if not type_id:
        return AssetKind.GENERIC, "no_type"
    for name, rule in RULES:
        kind = rule(type_id, enriched)
        if kind is not None:
            return kind, name
    return AssetKind.GENERIC, "fallback"


def classify(type_id: str | None, enriched: EnrichedObject | None = None) -> AssetKind:
    return explain(type_id, enriched)[0]


def is_nft(type_id: str | None, enriched: EnrichedObject | None = None) -> bool:
    return classify(type_id, enriched) is AssetKind.NFT


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    try:
        return json.dumps(value, separators=(",", ":"))
    except (TypeError, ValueError):
        return UNSERIALIZABLE


def _first(source: dict[str, Any] | None, keys: tuple[str, ...]) -> Any:
    if not source:
        return None
    for key in keys:
        value = source.get(key)
        if value:
            return value
    return None


def extract_attributes(fields: dict[str, Any] | None) -> dict[str, str]:
    """Content fields minus technical ones, nulls, empties and overlong values."""
    attributes: dict[str, str] = {}
    for key, value in (fields or {}).items():
        if key.lower() in ATTRIBUTE_DENYLIST or value is None:
            continue
        text = _stringify(value)
        if not text or len(text) >= MAX_ATTRIBUTE_LEN:
            continue
        attributes[key] = text
    return attributes


def extract_display_metadata(enriched: EnrichedObject | None) -> NftMetadata | None:
    """
    Display metadata for an NFT, preferring Display fields over raw content.

    Returns None when there is neither display nor content to read.
    """
    if enriched is None:
        return None
    display = enriched.display or None
    content = enriched.fields or None
    if display is None and content is None:
        return None

    name = _first(display, ("name",)) or _first(content, ("name",)) or DEFAULT_NFT_NAME
    description = _first(display, ("description",)) or _first(content, ("description",))
    image = _first(display, DISPLAY_IMAGE_KEYS) or _first(content, CONTENT_IMAGE_KEYS)
    return NftMetadata(
        name=_stringify(name),
        description=_stringify(description) if description is not None else None,
        image_url=_stringify(image) if image is not None else None,
        attributes=extract_attributes(content),
    )


def type_display_name(type_id: str | None) -> str:
    """Short human name for a type: "NFT", "<SYMBOL> Coin" or the struct name."""
    if not type_id:
        return "Object"
    if matches_nft_pattern(type_id) and not is_coin_type(type_id):
        return "NFT"
    if is_coin_type(type_id):
        inner = tokens.coin_inner_type(type_id)
        symbol = tokens.resolve(inner).symbol if inner else "Unknown"
        return f"{symbol} Coin"
    last = tokens.struct_name(type_id)
    return last or "Object"
