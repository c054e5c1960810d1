"""
Property helpers for validating machine output and internal heaps.

Public API (stable):
    is_nondecreasing(xs, order) -> bool
    first_nondecreasing_violation_index(xs, order) -> int | None
    is_heap(xs, order) -> bool
    first_heap_violation_index(xs, order) -> int | None
    is_permutation(a, b) -> bool
    permutation_counter_diff(a, b) -> dict
    assert_no_mutation(before, after) -> None

Notes
-----
- Order-aware checks take the same three-way comparator a machine uses.
- The permutation helpers count with `collections.Counter`, so elements must
  be hashable.
- Tie-break order among equivalent elements is *not* checked here; the
  machine tests pin it down explicitly.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Callable, Dict, Hashable, Optional, Sequence

Comparator = Callable[[Any, Any], int]

__all__ = [
    "is_nondecreasing",
    "first_nondecreasing_violation_index",
    "is_heap",
    "first_heap_violation_index",
    "is_permutation",
    "permutation_counter_diff",
    "assert_no_mutation",
]


def first_nondecreasing_violation_index(xs: Sequence[Any], order: Comparator) -> Optional[int]:
    """
    Return the first index i where xs[i] sorts after xs[i+1], or None.

    Handy for error messages:
        i = first_nondecreasing_violation_index(out, order)
        assert i is None, f"out of order at i={i}: {out[i]!r} > {out[i+1]!r}"
    """
    for i in range(len(xs) - 1):
        if order(xs[i], xs[i + 1]) > 0:
            return i
    return None


def is_nondecreasing(xs: Sequence[Any], order: Comparator) -> bool:
    """Return True iff order(xs[i], xs[i+1]) <= 0 for all i."""
    return first_nondecreasing_violation_index(xs, order) is None


def first_heap_violation_index(xs: Sequence[Any], order: Comparator) -> Optional[int]:
    """
    Return the first child index whose element sorts before its parent, or
    None if `xs` is a min-heap under `order`.
    """
    for child in range(1, len(xs)):
        parent = (child - 1) // 2
        if order(xs[child], xs[parent]) < 0:
            return child
    return None


def is_heap(xs: Sequence[Any], order: Comparator) -> bool:
    """Return True iff every element is not less than its parent."""
    return first_heap_violation_index(xs, order) is None


def is_permutation(a: Sequence[Hashable], b: Sequence[Hashable]) -> bool:
    """Return True iff `a` and `b` hold exactly the same multiset of values."""
    if len(a) != len(b):
        return False
    return Counter(a) == Counter(b)


def permutation_counter_diff(a: Sequence[Hashable], b: Sequence[Hashable]) -> Dict[Hashable, int]:
    """
    Return value -> (count in a) - (count in b), omitting zero entries.

    An empty dict means identical multiplicities.
    """
    diff = Counter(a)
    diff.subtract(Counter(b))
    return {k: d for k, d in diff.items() if d != 0}


def assert_no_mutation(before: Sequence[Any], after: Sequence[Any]) -> None:
    """
    Raise AssertionError naming the first difference if `after` is not an
    element-wise copy of `before`.
    """
    if len(before) != len(after):
        raise AssertionError(
            f"Input mutated: length changed from {len(before)} to {len(after)}"
        )
    for i, (x, y) in enumerate(zip(before, after)):
        if x != y:
            raise AssertionError(f"Input mutated at index {i}: before={x!r}, after={y!r}")
