"""
Entity-marker helpers for consumers of the text artifacts.

Summary texts embed {{content}} markers. content is a pseudonym that
resolves to an address through the label map, a count phrase that
matches one of the transaction's object collections, or a literal.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from sui_explainer.interpreter.models import InterpretedTransaction

MARKER_RE = re.compile(r"\{\{([^}]+)\}\}")
_OBJECT_COUNT_RE = re.compile(r"^(\d+) objects?$")
_NFT_COUNT_RE = re.compile(r"^(\d+) NFTs?$")

TEXT = "text"
MARKER = "marker"
ADDRESS = "address"
OBJECT_LIST = "object_list"
NFT_COUNT = "nft_count"
LITERAL = "literal"


@dataclass(frozen=True)
class Segment:
    kind: str
    text: str
    address: str | None = None
    count: int | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"kind": self.kind, "text": self.text}
        if self.address is not None:
            out["address"] = self.address
        if self.count is not None:
            out["count"] = self.count
        return out


def split_markers(text: str) -> list[Segment]:
    """Split text into plain "text" and "marker" segments, in order; empty text is dropped."""
    segments: list[Segment] = []
    position = 0
    for match in MARKER_RE.finditer(text or ""):
        if match.start() > position:
            segments.append(Segment(TEXT, text[position:match.start()]))
        segments.append(Segment(MARKER, match.group(1)))
        position = match.end()
    if position < len(text or ""):
        segments.append(Segment(TEXT, text[position:]))
    return segments


def _resolve_one(content: str, line: str, tx: InterpretedTransaction) -> Segment:
    address = tx.labels.address_for(content)
    if address is not None:
        return Segment(ADDRESS, content, address=address)

    match = _OBJECT_COUNT_RE.match(content)
    if match:
        count = int(match.group(1))
        plain_created = sum(1 for c in tx.created if not c.is_nft)
        if "created" in line and plain_created == count:
            return Segment(OBJECT_LIST, content, count=count)
        if "modified" in line and len(tx.mutated) == count:
            return Segment(OBJECT_LIST, content, count=count)
        return Segment(LITERAL, content)

    match = _NFT_COUNT_RE.match(content)
    if match:
        count = int(match.group(1))
        if sum(1 for c in tx.created if c.is_nft) == count:
            return Segment(NFT_COUNT, content, count=count)
    return Segment(LITERAL, content)


def resolve_markers(text: str, tx: InterpretedTransaction) -> list[Segment]:
    """Split text and tag each marker as address, object_list, nft_count or literal."""
    return [
        _resolve_one(s.text, text, tx) if s.kind == MARKER else s
        for s in split_markers(text)
    ]
