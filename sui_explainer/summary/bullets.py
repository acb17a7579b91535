"""
Bullet summary — terse, fixed-order list of what the transaction touched.
"""

from __future__ import annotations

from sui_explainer.interpreter import tokens
from sui_explainer.interpreter.models import NormalizedTransaction
from sui_explainer.summary.common import (
    BULLET_NATIVE_NOISE,
    count_noun,
    marker,
    nft_name,
    owner_label,
    transfer_amount_text,
    type_name,
)

MAX_NFT_TRANSFERS = 3
MAX_OTHER_TRANSFERS = 3
MAX_BALANCE_CHANGES = 5


def _transfer_lines(tx: NormalizedTransaction) -> list[str]:
    labels = tx.labels
    nft_transfers = [t for t in tx.transferred if t.is_nft]
    other_transfers = [t for t in tx.transferred if not t.is_nft]
    lines: list[str] = []

    for t in nft_transfers[:MAX_NFT_TRANSFERS]:
        lines.append(
            f"{marker(owner_label(labels, t.destination))} received {nft_name(t)} "
            f"from {marker(owner_label(labels, t.source))}"
        )
    if len(nft_transfers) > MAX_NFT_TRANSFERS:
        lines.append(f"  ... and {len(nft_transfers) - MAX_NFT_TRANSFERS} more NFT transfers")

    for t in other_transfers[:MAX_OTHER_TRANSFERS]:
        what = transfer_amount_text(t) if t.has_amount else type_name(t.object_type)
        lines.append(
            f"{marker(owner_label(labels, t.source))} transferred {what} "
            f"to {marker(owner_label(labels, t.destination))}"
        )
    return lines


def _balance_lines(tx: NormalizedTransaction) -> list[str]:
    lines: list[str] = []
    for change in tx.balance_changes:
        if len(lines) >= MAX_BALANCE_CHANGES:
            break
        if change.amount == 0:
            continue
        info = tokens.resolve(change.coin_type)
        units = tokens.to_units(change.amount, info.decimals)
        # gas-only native movements
        if tokens.is_native(change.coin_type) and abs(units) < BULLET_NATIVE_NOISE:
            continue
        action = "received" if change.amount > 0 else "sent"
        amount = tokens.format_units(abs(units), tokens.display_places(info.decimals))
        lines.append(f"{marker(owner_label(tx.labels, change.owner))} {action} {amount} {info.symbol}")
    return lines


def build_bullets(tx: NormalizedTransaction) -> list[str]:
    """Render the bullet list for a normalized transaction."""
    bullets = [f"{marker(tx.labels.lookup(tx.sender))} initiated the transaction"]

    if tx.calls:
        bullets.append("Called functions: " + ", ".join(c.display_name for c in tx.calls))

    nft_count = sum(1 for c in tx.created if c.is_nft)
    if nft_count:
        bullets.append(f"{marker(count_noun(nft_count, 'NFT'))} created")
    object_count = len(tx.created) - nft_count
    if object_count:
        bullets.append(f"{marker(count_noun(object_count, 'object'))} created")

    bullets.extend(_transfer_lines(tx))

    if tx.mutated:
        bullets.append(f"{marker(count_noun(len(tx.mutated), 'object'))} modified")
    if tx.deleted:
        bullets.append(f"{count_noun(len(tx.deleted), 'object')} deleted")

    bullets.extend(_balance_lines(tx))
    return bullets
