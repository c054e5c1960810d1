"""
In-place binary min-heap primitives over a three-way comparator.

The heap lives in a plain list: the children of index i are 2*i + 1 and
2*i + 2. "Min" is taken with respect to `order`, where order(a, b) < 0 means
a sorts before b.

Tie-break (deterministic):
- an element moves below a child only if the child is *strictly* less;
- between two equivalent children the left one is chosen.

Elements only ever move by swaps, so the list holds the same multiset at
every step. If `order` raises, the swaps made so far are undone and the
list is left exactly as it was before the call.

Public API (stable):
    heapify(xs, order) -> None
    sift_down(xs, pos, end, order, trail=None) -> None
    pop_min(xs, order) -> T
"""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple, TypeVar

T = TypeVar("T")

Comparator = Callable[[T, T], int]
Trail = List[Tuple[int, int]]

__all__ = ["heapify", "sift_down", "pop_min"]


def _undo(xs: List[T], trail: Trail) -> None:
    for i, j in reversed(trail):
        xs[i], xs[j] = xs[j], xs[i]


def sift_down(
    xs: List[T], pos: int, end: int, order: Comparator, trail: Optional[Trail] = None
) -> None:
    """
    Move xs[pos] down inside xs[:end] until neither child is strictly less.

    Each swap is recorded as an index pair and appended to `trail` once the
    sift completes.
    """
    swaps: Trail = []
    try:
        child = 2 * pos + 1
        while child < end:
            right = child + 1
            if right < end and order(xs[right], xs[child]) < 0:
                child = right
            if order(xs[child], xs[pos]) >= 0:
                break
            xs[pos], xs[child] = xs[child], xs[pos]
            swaps.append((pos, child))
            pos = child
            child = 2 * pos + 1
    except Exception:
        _undo(xs, swaps)
        raise
    if trail is not None:
        trail.extend(swaps)


def heapify(xs: List[T], order: Comparator) -> None:
    """Rearrange `xs` into a min-heap in O(n), bottom-up."""
    n = len(xs)
    trail: Trail = []
    try:
        for pos in range(n // 2 - 1, -1, -1):
            sift_down(xs, pos, n, order, trail)
    except Exception:
        _undo(xs, trail)
        raise


def pop_min(xs: List[T], order: Comparator) -> T:
    """
    Remove and return the root of the heap `xs`.

    The root trades places with the last element, which is sifted down over
    the shortened heap; the old root is popped only after that succeeds.
    Raises IndexError on an empty list.
    """
    if not xs:
        raise IndexError("pop from an empty heap")
    last = len(xs) - 1
    xs[0], xs[last] = xs[last], xs[0]
    try:
        sift_down(xs, 0, last, order)
    except Exception:
        xs[0], xs[last] = xs[last], xs[0]
        raise
    return xs.pop()
