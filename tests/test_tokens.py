"""
Tests for the token registry and amount formatting.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from sui_explainer.interpreter import tokens

USDC = "0xdba34672e30cb065b1f93e3ab55318768fd6fef66c15942c9f7cb846e2f900e7::usdc::USDC"


def test_known_tokens():
    """Well-known coin types resolve from the static table."""
    assert tokens.resolve("0x2::sui::SUI") == tokens.TokenInfo("SUI", 9)
    assert tokens.resolve(USDC) == tokens.TokenInfo("USDC", 6)


@pytest.mark.parametrize(
    "type_id, symbol",
    [
        ("0xabc::fish::FISH", "FISH"),
        ("0xabc::game::GAME_TOKEN", "GAME"),
        ("0xabc::pool::LP<0x2::sui::SUI>", "LP"),
        ("", "TOKEN"),
        ("TOKEN", "TOKEN"),
        ("0xabc::tokenomics::TOKENOMICS", "TOKENOMICS"),
        ("0xabc::reward::REWARDTOKEN", "REWARD"),
    ],
)
def test_resolve_fallback_is_total(type_id, symbol):
    """Unknown types derive a symbol from the last segment with 6 decimals."""
    info = tokens.resolve(type_id)
    assert info.symbol == symbol
    assert info.decimals == 6


def test_is_native_and_coin_inner_type():
    """Both address forms of SUI are native; Coin<T> exposes T."""
    assert tokens.is_native("0x2::sui::SUI")
    assert tokens.is_native("0x" + "0" * 63 + "2::sui::SUI")
    assert not tokens.is_native(USDC)
    assert tokens.coin_inner_type("0x2::coin::Coin<0x2::sui::SUI>") == "0x2::sui::SUI"
    assert tokens.coin_inner_type("0x2::kiosk::Kiosk") is None


def test_format_amount_rounds_toward_zero():
    """Amounts never overstate: 0.995 USDC shows as 0.99."""
    assert tokens.format_amount(995000, 6) == "0.99"
    assert tokens.format_amount(-995000, 6) == "-0.99"
    assert tokens.format_amount(1_234_567_890, 9) == "1.2345"
    assert tokens.format_amount(1, 9) == "0.0000"


def test_format_fixed_gas():
    """Gas renders exactly at 9 places without exponent notation."""
    assert tokens.format_fixed(120, 9) == "0.000000120"
    assert tokens.format_fixed(-5, 9) == "-0.000000005"
    assert tokens.to_units("abc", 9) == Decimal(0)
