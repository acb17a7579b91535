"""
Tests for the address labeler: deterministic, injective pseudonyms and safe fallbacks.
"""

from __future__ import annotations

from sui_explainer.interpreter.labels import AddressLabelMap, truncate_address

ADDR_1 = "0x" + "1" * 64
ADDR_2 = "0x" + "2" * 64


def test_truncate_address():
    """Long addresses are shortened to first6...last4; short text is unchanged."""
    assert truncate_address("0x1234567890abcdef") == "0x1234...cdef"
    assert truncate_address("0x12") == "0x12"


def test_labels_assigned_in_first_seen_order():
    """First address gets User A, second User B; repeats keep their label."""
    labels = AddressLabelMap()
    assert labels.label(ADDR_1) == "User A"
    assert labels.label(ADDR_2) == "User B"
    assert labels.label(ADDR_1) == "User A"
    assert labels.to_dict() == {"User A": ADDR_1, "User B": ADDR_2}
    assert labels.address_for("User B") == ADDR_2


def test_labeling_is_deterministic():
    """Same visitation order gives the same mapping."""
    addresses = [f"0x{i:064x}" for i in range(6)]
    first, second = AddressLabelMap(), AddressLabelMap()
    assert [first.label(a) for a in addresses] == [second.label(a) for a in addresses]


def test_non_addresses_are_never_labeled():
    """Owner displays like Shared / Immutable / Object(...) pass through verbatim."""
    labels = AddressLabelMap()
    for display in ("Unknown", "Shared", "Immutable", "Object(0x1234...abcd)"):
        assert labels.label(display) == display
    assert labels.label("") == "Unknown"
    assert len(labels) == 0


def test_capacity_overflow_uses_truncated_fallback():
    """Past ten addresses the truncated form is used and is distinct from every pseudonym."""
    labels = AddressLabelMap()
    addresses = [f"0x{i:064x}" for i in range(12)]
    assigned = [labels.label(a) for a in addresses]
    assert assigned[:10] == [f"User {c}" for c in "ABCDEFGHIJ"]
    assert assigned[10] == truncate_address(addresses[10])
    assert len(set(assigned)) == 12
    assert labels.address_for(assigned[11]) == addresses[11]


def test_fallback_never_collides_with_pseudonym():
    """A truncated display equal to an assigned pseudonym is bracketed."""
    labels = AddressLabelMap(alphabet=("A",))
    assert labels.label(ADDR_1) == "User A"
    # short enough that its display is the text itself
    assert labels.label("User A") == "[User A]"


def test_lookup_after_freeze_does_not_assign():
    """Frozen maps answer misses with the truncated display and record nothing."""
    labels = AddressLabelMap()
    labels.label(ADDR_1)
    labels.freeze()
    assert labels.frozen
    assert labels.lookup(ADDR_1) == "User A"
    assert labels.label(ADDR_2) == truncate_address(ADDR_2)
    assert ADDR_2 not in labels
    assert len(labels) == 1
