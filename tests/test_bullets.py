"""
Tests for the bullet summary renderer.
"""

from __future__ import annotations

from conftest import OTHER, RECIPIENT, SENDER, balance, created, transferred

from sui_explainer.interpreter.normalizer import normalize
from sui_explainer.summary.bullets import build_bullets
from sui_explainer.sui_rpc.models import EnrichedObject

USDC = "0xdba34672e30cb065b1f93e3ab55318768fd6fef66c15942c9f7cb846e2f900e7::usdc::USDC"
USDC_COIN = f"0x2::coin::Coin<{USDC}>"
HERO = "0xabc::hero::Hero"


def test_full_bullet_list(make_raw):
    """Every section appears once, in order, with markers around entities."""
    raw = make_raw(
        move_calls=[
            {"package": "0x2", "module": "kiosk", "function": "place"},
            {"package": "0x2", "module": "pay", "function": "split"},
        ],
        object_changes=[
            created("0xn", "0xabc::nft::Nft", {"AddressOwner": SENDER}),
            created("0xp1", "0xabc::pool::Pool", {"Shared": {"initial_shared_version": 1}}),
            created("0xp2", "0xabc::pool::Pool", {"Shared": {"initial_shared_version": 1}}),
            transferred("0xt", HERO, SENDER, {"AddressOwner": RECIPIENT}),
            transferred("0xu", USDC_COIN, SENDER, {"AddressOwner": OTHER}),
            {"type": "mutated", "objectId": "0xm", "objectType": "0xabc::m::T", "owner": {"AddressOwner": SENDER}},
            {"type": "deleted", "objectId": "0xd1", "objectType": "0xabc::m::T"},
            {"type": "deleted", "objectId": "0xd2", "objectType": "0xabc::m::T"},
        ],
        balance_changes=[
            balance(SENDER, -1_500_000_000),
            balance(RECIPIENT, 5_000_000),
            balance(OTHER, 12_500_000, USDC),
        ],
    )
    enriched = {
        "0xt": EnrichedObject("0xt", HERO, display={"name": "Sword"}),
        "0xu": EnrichedObject("0xu", USDC_COIN, fields={"balance": "12500000"}),
    }
    assert build_bullets(normalize(raw, enriched)) == [
        "{{User A}} initiated the transaction",
        "Called functions: kiosk::place, pay::split",
        "{{1 NFT}} created",
        "{{2 objects}} created",
        "{{User B}} received Sword from {{User A}}",
        "{{User A}} transferred 12.50 USDC to {{User C}}",
        "{{1 object}} modified",
        "2 objects deleted",
        "{{User A}} sent 1.5000 SUI",
        "{{User C}} received 12.50 USDC",
    ]


def test_native_gas_noise_is_omitted(make_raw):
    """A 0.002 SUI change is below the noise threshold and produces no line."""
    raw = make_raw(balance_changes=[balance(SENDER, -2_000_000)])
    assert build_bullets(normalize(raw)) == ["{{User A}} initiated the transaction"]


def test_transfer_without_amount_uses_type_name(make_raw):
    """Non-NFT transfers with no known amount name the type instead."""
    raw = make_raw(object_changes=[
        transferred("0xk", "0x2::kiosk::KioskOwnerCap", SENDER, {"AddressOwner": RECIPIENT}),
    ])
    bullets = build_bullets(normalize(raw))
    assert bullets[-1] == "{{User A}} transferred KioskOwnerCap to {{User B}}"


def test_nft_transfer_overflow_note(make_raw):
    """Only three NFT transfers are listed; the rest are counted."""
    raw = make_raw(object_changes=[
        transferred(f"0x{i}", "0xabc::nft::Nft", SENDER, {"AddressOwner": RECIPIENT}) for i in range(5)
    ])
    bullets = build_bullets(normalize(raw))
    assert bullets.count("{{User B}} received NFT from {{User A}}") == 3
    assert bullets[-1] == "  ... and 2 more NFT transfers"


def test_balance_lines_capped_at_five(make_raw):
    """At most five balance lines, counting only significant changes."""
    owners = [f"0x{i:064x}" for i in range(1, 8)]
    raw = make_raw(
        sender=owners[0],
        balance_changes=[balance(SENDER, -1000)] + [balance(o, 1_000_000_000) for o in owners],
    )
    bullets = build_bullets(normalize(raw))
    balance_lines = [b for b in bullets if b.endswith(" SUI")]
    assert len(balance_lines) == 5
    assert balance_lines[0] == "{{User A}} received 1.0000 SUI"
