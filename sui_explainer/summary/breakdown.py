"""
Step-by-step breakdown — ordered atomic steps narrated one per line.

Order: narrated contract calls, NFTs minted per collection, NFT transfers
per (sender, recipient) pair, then a count-only line when many plain
objects were created.
"""

from __future__ import annotations

from sui_explainer.interpreter.models import NormalizedTransaction
from sui_explainer.summary.common import (
    collection_name,
    count_noun,
    group_by,
    is_narrated_call,
    is_raw_address,
    is_relevant_nft,
    marker,
    nft_name,
    owner_key,
    owner_label,
    pluralize,
)

MIN_CREATED_FOR_COUNT = 4


def _items_phrase(items: list, collection: str) -> str:
    if len(items) == 1:
        return marker(nft_name(items[0]))
    return marker(pluralize(len(items), collection))


def _call_steps(tx: NormalizedTransaction, sender: str) -> list[str]:
    return [f"{sender} called {c.display_name}" for c in tx.calls if is_narrated_call(c)]


def _mint_steps(tx: NormalizedTransaction, sender: str) -> list[str]:
    minted = [
        c for c in tx.created
        if c.is_nft and is_relevant_nft(c) and not is_raw_address(nft_name(c))
    ]
    steps: list[str] = []
    groups = group_by(minted, lambda c: collection_name(nft_name(c)))
    for collection, items in groups.items():
        if is_raw_address(collection):
            continue
        steps.append(f"{sender} minted {_items_phrase(items, collection)}")
    return steps


def _transfer_steps(tx: NormalizedTransaction) -> list[str]:
    transfers = [
        t for t in tx.transferred
        if t.is_nft and is_relevant_nft(t) and owner_key(t.destination) != tx.sender
    ]
    steps: list[str] = []
    pairs = group_by(transfers, lambda t: (owner_key(t.source), owner_key(t.destination)))
    for items in pairs.values():
        first = items[0]
        source = marker(owner_label(tx.labels, first.source))
        to = marker(owner_label(tx.labels, first.destination))
        what = _items_phrase(items, collection_name(nft_name(first)))
        steps.append(f"{source} sent {what} to {to}")
    return steps


def build_breakdown(tx: NormalizedTransaction) -> list[str]:
    """Render the breakdown steps; empty when nothing worth narrating happened."""
    sender = marker(tx.labels.lookup(tx.sender))
    steps = _call_steps(tx, sender)
    steps.extend(_mint_steps(tx, sender))
    steps.extend(_transfer_steps(tx))

    plain_created = sum(1 for c in tx.created if not c.is_nft)
    if plain_created >= MIN_CREATED_FOR_COUNT:
        steps.append(f"{sender} created {marker(count_noun(plain_created, 'object'))}")
    return steps
