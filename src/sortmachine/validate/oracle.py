"""
Oracle for sorting-machine output.

Ground truth is Python's built-in `sorted()` driven by the same comparator
through `functools.cmp_to_key`:
- honours any three-way comparator, not just `<`
- deterministic and stable

Public API (stable):
    oracle_sort(a, order) -> list
    equals_oracle(a, out, order) -> bool

Conventions:
- The oracle never mutates its input and always returns a **new** list.
- `equals_oracle` is an exact check. It is only meaningful when equivalent
  elements are also equal values (e.g. integers under natural order); for
  looser preorders use the property checks instead.
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Any, Callable, List, Sequence

ORACLE_NAME: str = "python_sorted_cmp_to_key"

__all__ = ["ORACLE_NAME", "oracle_sort", "equals_oracle"]


def oracle_sort(a: Sequence[Any], order: Callable[[Any, Any], int]) -> List[Any]:
    """
    Return `a` sorted under `order` as a new list.

    Parameters
    ----------
    a : sequence
        Input elements. Not mutated.
    order : callable
        Three-way comparator.

    Returns
    -------
    list
        A new list with the elements of `a` in nondecreasing order.
    """
    return sorted(a, key=cmp_to_key(order))


def equals_oracle(
    a: Sequence[Any], out: Sequence[Any], order: Callable[[Any, Any], int]
) -> bool:
    """True iff `out` equals `oracle_sort(a, order)` element by element."""
    return list(out) == oracle_sort(a, order)
