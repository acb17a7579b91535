"""
Token registry — display symbol and decimals for fungible coin types.

A small static table covers well-known coins; any other type gets a
symbol derived from its last path segment and 6 decimals. Derived
symbols are display hints only.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal

NATIVE_COIN_TYPE = "0x2::sui::SUI"
NATIVE_SYMBOL = "SUI"
NATIVE_COIN_TYPES = frozenset({
    NATIVE_COIN_TYPE,
    "0x0000000000000000000000000000000000000000000000000000000000000002::sui::SUI",
})
NATIVE_DECIMALS = 9
DEFAULT_DECIMALS = 6

_COIN_INNER_RE = re.compile(r"Coin<(.+)>")


@dataclass(frozen=True)
class TokenInfo:
    symbol: str
    decimals: int


KNOWN_TOKENS: dict[str, TokenInfo] = {
    # Native SUI (short and long address form)
    NATIVE_COIN_TYPE: TokenInfo(NATIVE_SYMBOL, NATIVE_DECIMALS),
    "0x0000000000000000000000000000000000000000000000000000000000000002::sui::SUI": TokenInfo(
        NATIVE_SYMBOL, NATIVE_DECIMALS
    ),
    # USDC (Wormhole and native)
    "0x5d4b302506645c37ff133b98c4b50a5ae14841659738d6d733d59d0d217a93bf::coin::COIN": TokenInfo("USDC", 6),
    "0xdba34672e30cb065b1f93e3ab55318768fd6fef66c15942c9f7cb846e2f900e7::usdc::USDC": TokenInfo("USDC", 6),
    # USDT
    "0xc060006111016b8a020ad5b33834984a437aaa7d3c74c18e09a95d48aceab08c::coin::COIN": TokenInfo("USDT", 6),
    # WETH (Wormhole)
    "0xaf8cd5edc19c4512f4259f0bee101a40d41ebed738ade5874359610ef8eeced5::coin::COIN": TokenInfo("WETH", 8),
}


def struct_name(type_id: str | None) -> str:
    """Last path segment with generic parameters removed: Pool<A, B> -> Pool."""
    return (type_id or "").split("<")[0].split("::")[-1].strip()


def resolve(type_id: str | None) -> TokenInfo:
    """Return symbol/decimals for any coin type string; never fails."""
    type_id = (type_id or "").strip()
    known = KNOWN_TOKENS.get(type_id)
    if known is not None:
        return known

    last = struct_name(type_id).upper()
    symbol = last.removesuffix("_TOKEN").removesuffix("TOKEN") or "TOKEN"
    return TokenInfo(symbol, DEFAULT_DECIMALS)


def is_native(type_id: str | None) -> bool:
    return (type_id or "").strip() in NATIVE_COIN_TYPES


def coin_inner_type(type_id: str | None) -> str | None:
    """T from 0x2::coin::Coin<T>; None when type_id is not a Coin."""
    match = _COIN_INNER_RE.search(type_id or "")
    return match.group(1) if match else None


def to_units(raw: int | str, decimals: int) -> Decimal:
    """Exact raw integer amount scaled down by 10**decimals."""
    try:
        value = Decimal(int(raw))
    except (TypeError, ValueError):
        value = Decimal(0)
    return value.scaleb(-decimals)


def display_places(decimals: int) -> int:
    """Stablecoin-style 6-decimal tokens show cents; everything else 4 places."""
    return 2 if decimals == 6 else 4


def format_units(value: Decimal, places: int) -> str:
    """Fixed-point text, rounded toward zero."""
    quantized = value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_DOWN)
    if quantized.is_zero():
        quantized = abs(quantized)
    return format(quantized, "f")


def format_amount(raw: int | str, decimals: int) -> str:
    """Display text for a raw coin amount (sign preserved)."""
    return format_units(to_units(raw, decimals), display_places(decimals))


def format_fixed(raw: int, scale: int) -> str:
    """Exact fixed-point rendering at the chain's decimal scale (gas costs)."""
    return format_units(to_units(raw, scale), scale)
