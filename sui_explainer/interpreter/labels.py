"""
Address labeler — short, stable pseudonyms for addresses within one run.

Addresses are labeled "User A", "User B", ... in first-encounter order.
The visitation order is owned by the normalizer; changing it changes which
address gets which letter. Past the alphabet, addresses fall back to a
truncated display that is guaranteed not to collide with any pseudonym.
"""

from __future__ import annotations

from typing import Iterator

from sui_explainer.explainer_logging import get_logger

logger = get_logger(__name__)

LABEL_ALPHABET = ("A", "B", "C", "D", "E", "F", "G", "H", "I", "J")
LABEL_PREFIX = "User "

UNKNOWN = "Unknown"
SHARED = "Shared"
IMMUTABLE = "Immutable"
OBJECT_PREFIX = "Object("

_TRUNCATE_MIN_LEN = 12


def truncate_address(address: str) -> str:
    """0x1234...abcd for long addresses; short strings are returned unchanged."""
    if len(address) <= _TRUNCATE_MIN_LEN:
        return address
    return f"{address[:6]}...{address[-4:]}"


def is_labelable(address: str | None) -> bool:
    """False for empty input and non-address owner displays (Unknown, Shared, Immutable, Object(...))."""
    if not address:
        return False
    if address in (UNKNOWN, SHARED, IMMUTABLE):
        return False
    return not address.startswith(OBJECT_PREFIX)


class AddressLabelMap:
    """
    Bidirectional address <-> label mapping scoped to one interpretation run.

    label() assigns while the map is open; after freeze() only lookup()
    is meaningful and unknown addresses get the truncated fallback
    without being recorded.
    """

    def __init__(self, alphabet: tuple[str, ...] = LABEL_ALPHABET) -> None:
        self._alphabet = alphabet
        self._by_address: dict[str, str] = {}
        self._by_label: dict[str, str] = {}
        self._pseudonyms: set[str] = set()
        self._next_index = 0
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def __len__(self) -> int:
        return len(self._by_address)

    def __contains__(self, address: object) -> bool:
        return address in self._by_address

    def _fallback(self, address: str) -> str:
        display = truncate_address(address)
        if display in self._pseudonyms or display.startswith(LABEL_PREFIX):
            display = f"[{display}]"
        return display

    def label(self, address: str) -> str:
        """Return the label for address, assigning the next pseudonym on first sight."""
        if not is_labelable(address):
            return address or UNKNOWN
        existing = self._by_address.get(address)
        if existing is not None:
            return existing
        if self._frozen:
            return self.lookup(address)

        if self._next_index < len(self._alphabet):
            assigned = LABEL_PREFIX + self._alphabet[self._next_index]
            self._next_index += 1
            self._pseudonyms.add(assigned)
        else:
            assigned = self._fallback(address)
        self._by_address[address] = assigned
        self._by_label.setdefault(assigned, address)
        return assigned

    def lookup(self, address: str | None) -> str:
        """Return the label for address without assigning; misses fall back to truncation."""
        if not is_labelable(address):
            return address or UNKNOWN
        existing = self._by_address.get(address)
        if existing is not None:
            return existing
        logger.debug("label_lookup_miss", address=address[:10] + "...", frozen=self._frozen)
        return self._fallback(address)

    def address_for(self, label: str) -> str | None:
        """Reverse lookup used to resolve {{label}} markers back to an address."""
        return self._by_label.get(label)

    def items(self) -> Iterator[tuple[str, str]]:
        """(label, address) pairs in assignment order."""
        return iter(self._by_label.items())

    def to_dict(self) -> dict[str, str]:
        return dict(self._by_label)
