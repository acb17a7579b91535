"""
Headline summary — one sentence describing the transaction's main intent.

The sentence comes from the first rule in HEADLINE_RULES that applies;
later rules are only consulted when every earlier one returned None.
explain_headline() also reports which rule decided.
"""

from __future__ import annotations

from typing import Callable

from sui_explainer.interpreter import tokens
from sui_explainer.interpreter.classifier import is_coin_type
from sui_explainer.interpreter.models import AddressOwner, NormalizedTransaction
from sui_explainer.summary.common import (
    HEADLINE_NATIVE_MIN,
    PAIR_TOLERANCE,
    collection_name,
    count_noun,
    group_by,
    is_native_transfer,
    largest_group,
    marker,
    nft_name,
    owner_key,
    owner_label,
    pluralize,
    transfer_amount_text,
    type_name,
)

HeadlineRule = Callable[[NormalizedTransaction], "str | None"]

# (function-name substring, phrase); first match wins
CALL_PHRASES = (
    ("mint", "minted a new token or NFT"),
    ("swap", "performed a token swap"),
    ("stake", "staked tokens"),
    ("claim", "claimed rewards or tokens"),
    ("deposit", "deposited into a protocol"),
    ("withdraw", "withdrew from a protocol"),
)


def _sender(tx: NormalizedTransaction) -> str:
    return marker(tx.labels.lookup(tx.sender))


def _items_phrase(items: list) -> str:
    """{{name}} for a single NFT, {{N Collection}} for several."""
    if len(items) == 1:
        return marker(nft_name(items[0]))
    return marker(pluralize(len(items), collection_name(nft_name(items[0]))))


def _rule_mint_and_send(tx: NormalizedTransaction) -> str | None:
    created_ids = {c.object_id for c in tx.created}
    minted = [t for t in tx.transferred if t.is_nft and t.object_id in created_ids]
    if not minted:
        return None
    sender = _sender(tx)
    sent = [t for t in minted if owner_key(t.destination) != tx.sender]
    if not sent:
        return f"{sender} minted {_items_phrase(minted)}"
    _, items = largest_group(group_by(sent, lambda t: owner_key(t.destination)))
    to = marker(owner_label(tx.labels, items[0].destination))
    pronoun = "it" if len(items) == 1 else "them"
    return f"{sender} minted {_items_phrase(items)} and sent {pronoun} to {to}"


def _rule_nft_transfers(tx: NormalizedTransaction) -> str | None:
    nft_transfers = [t for t in tx.transferred if t.is_nft]
    if not nft_transfers:
        return None
    _, items = largest_group(group_by(nft_transfers, lambda t: owner_key(t.destination)))
    to = marker(owner_label(tx.labels, items[0].destination))
    if len(items) == 1:
        source = marker(owner_label(tx.labels, items[0].source))
        return f"{to} received {_items_phrase(items)} from {source}"
    return f"{to} received {_items_phrase(items)}"


def _rule_token_transfer(tx: NormalizedTransaction) -> str | None:
    for t in tx.transferred:
        if t.has_amount and not is_native_transfer(t):
            source = marker(owner_label(tx.labels, t.source))
            to = marker(owner_label(tx.labels, t.destination))
            return f"{source} sent {transfer_amount_text(t)} to {to}"
    return None


def _rule_balance_pair(tx: NormalizedTransaction) -> str | None:
    sends: dict = {}
    receives: dict = {}
    for change in tx.balance_changes:
        if change.amount < 0:
            best = sends.get(change.coin_type)
            if best is None or -change.amount > -best.amount:
                sends[change.coin_type] = change
        elif change.amount > 0:
            best = receives.get(change.coin_type)
            if best is None or change.amount > best.amount:
                receives[change.coin_type] = change

    # non-native tokens are more telling than native ones
    coin_types = sorted(sends, key=tokens.is_native)
    for coin_type in coin_types:
        send, receive = sends[coin_type], receives.get(coin_type)
        if receive is None:
            continue
        info = tokens.resolve(coin_type)
        sent = tokens.to_units(-send.amount, info.decimals)
        received = tokens.to_units(receive.amount, info.decimals)
        if tokens.is_native(coin_type) and sent < HEADLINE_NATIVE_MIN:
            continue
        if abs(sent - received) >= PAIR_TOLERANCE * sent:
            continue
        if not (isinstance(send.owner, AddressOwner) and isinstance(receive.owner, AddressOwner)):
            continue
        if send.owner.address == receive.owner.address:
            continue
        amount = tokens.format_units(min(sent, received), tokens.display_places(info.decimals))
        source = marker(tx.labels.lookup(send.owner.address))
        to = marker(tx.labels.lookup(receive.owner.address))
        return f"{source} sent {amount} {info.symbol} to {to}"
    return None


def _rule_object_transfer(tx: NormalizedTransaction) -> str | None:
    others = [t for t in tx.transferred if not t.is_nft and not is_coin_type(t.object_type)]
    if not others:
        return None
    first = others[0]
    source = marker(owner_label(tx.labels, first.source))
    to = marker(owner_label(tx.labels, first.destination))
    if len(others) == 1:
        return f"{source} transferred a {type_name(first.object_type)} to {to}"
    return f"{source} transferred {marker(count_noun(len(others), 'object'))} to {to}"


def _rule_created(tx: NormalizedTransaction) -> str | None:
    if not tx.created:
        return None
    sender = _sender(tx)
    nfts = [c for c in tx.created if c.is_nft]
    if nfts:
        given = [
            c for c in nfts
            if isinstance(c.owner, AddressOwner) and c.owner.address != tx.sender
        ]
        if given:
            _, items = largest_group(group_by(given, lambda c: owner_key(c.owner)))
            to = marker(owner_label(tx.labels, items[0].owner))
            return f"{to} received {_items_phrase(items)} from {sender}"
        return f"{sender} created {_items_phrase(nfts)}"
    if len(tx.created) == 1:
        return f"{sender} created a {type_name(tx.created[0].object_type)}"
    return f"{sender} created {marker(count_noun(len(tx.created), 'object'))}"


def _rule_contract_call(tx: NormalizedTransaction) -> str | None:
    if not tx.calls:
        return None
    call = tx.calls[0]
    function = call.function.lower()
    for needle, phrase in CALL_PHRASES:
        if needle in function:
            return f"{_sender(tx)} {phrase}"
    return f"{_sender(tx)} called {call.display_name}"


def _rule_fallback(tx: NormalizedTransaction) -> str | None:
    return f"{_sender(tx)} executed a transaction on Sui"


HEADLINE_RULES: tuple[tuple[str, HeadlineRule], ...] = (
    ("mint_and_send", _rule_mint_and_send),
    ("nft_transfer", _rule_nft_transfers),
    ("token_transfer", _rule_token_transfer),
    ("balance_pair", _rule_balance_pair),
    ("object_transfer", _rule_object_transfer),
    ("created", _rule_created),
    ("contract_call", _rule_contract_call),
    ("fallback", _rule_fallback),
)


def explain_headline(tx: NormalizedTransaction) -> tuple[str, str]:
    """Return (sentence, name of the deciding rule)."""
    for name, rule in HEADLINE_RULES:
        sentence = rule(tx)
        if sentence is not None:
            return sentence, name
    return _rule_fallback(tx) or "", "fallback"


def build_headline(tx: NormalizedTransaction) -> str:
    return explain_headline(tx)[0]
