"""
Ready-made three-way comparators and adapters.

A comparator is any callable `order(a, b) -> int` returning a negative
number when a sorts before b, zero when they are equivalent and a positive
number otherwise. It must encode a total preorder for as long as a machine
uses it.

Public API (stable):
    natural_order(a, b) -> int
    case_insensitive(a, b) -> int
    by_key(key) -> comparator
    reverse(order) -> comparator
    from_less_equal(le) -> comparator
    COMPARATORS, get_comparator(name) -> comparator
"""

from __future__ import annotations

from typing import Any, Callable, Dict

Comparator = Callable[[Any, Any], int]

__all__ = [
    "natural_order",
    "case_insensitive",
    "by_key",
    "reverse",
    "from_less_equal",
    "COMPARATORS",
    "get_comparator",
]


def natural_order(a: Any, b: Any) -> int:
    """Compare with the elements' own `<`."""
    if a < b:
        return -1
    if b < a:
        return 1
    return 0


def _fold_char(c: str) -> str:
    # Single-character mappings only: "\u00df".upper() is "SS", which would
    # let one character match two.
    upper = c.upper()
    if len(upper) != 1:
        upper = c
    lower = upper.lower()
    return lower if len(lower) == 1 else upper


def case_insensitive(a: str, b: str) -> int:
    """
    Lexicographic order ignoring case; "Blue" and "blue" are equivalent.

    Characters are folded one at a time (upper, then lower), so "\u00df" and
    "ss" stay distinct, unlike with str.casefold().
    """
    return natural_order("".join(map(_fold_char, a)), "".join(map(_fold_char, b)))


def by_key(key: Callable[[Any], Any]) -> Comparator:
    """Order elements by `key(element)` using natural order on the keys."""

    def compare(a: Any, b: Any) -> int:
        return natural_order(key(a), key(b))

    return compare


def reverse(order: Comparator) -> Comparator:
    """Flip `order` so the largest element comes first."""

    def compare(a: Any, b: Any) -> int:
        return order(b, a)

    return compare


def from_less_equal(le: Callable[[Any, Any], bool]) -> Comparator:
    """
    Turn a "not greater than" predicate into a three-way comparator.

    `le(a, b)` must be total: for any a, b at least one of le(a, b) and
    le(b, a) holds.
    """

    def compare(a: Any, b: Any) -> int:
        a_le_b = le(a, b)
        b_le_a = le(b, a)
        if a_le_b and b_le_a:
            return 0
        return -1 if a_le_b else 1

    return compare


COMPARATORS: Dict[str, Comparator] = {
    "natural": natural_order,
    "case_insensitive": case_insensitive,
    "reverse": reverse(natural_order),
}


def get_comparator(name: str) -> Comparator:
    """Look up a named comparator (used by experiment configs)."""
    if name not in COMPARATORS:
        raise ValueError(
            f"Unknown order: {name!r}. Supported: {sorted(COMPARATORS)}"
        )
    return COMPARATORS[name]
