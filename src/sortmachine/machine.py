"""
Sorting machines: fill in any order, then extract smallest-first.

A machine is always in exactly one of two modes:

- insertion mode: `add(x)` is legal, the backing list is unordered;
- extraction mode: `remove_first()` is legal and returns a minimal element
  under the machine's order.

The switch between them (`change_to_extraction_mode()`) happens once per
machine and is where the reordering work is done.

Implementations:
    SortingMachine     -- binary heap; O(n) heapify at the switch and
                          O(log n) per remove_first().
    SortedListMachine  -- reference "sort then serve"; stable O(n log n)
                          sort at the switch and O(1) per remove_first().

Both compare equal when they hold the same mode, comparator and multiset of
contents, regardless of implementation.

Public API (stable):
    SortingMachine, SortedListMachine, SortingMachineBase
    MACHINES, make_machine(name, order)
    machine_sort(items, order, *, machine="heap") -> list
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cmp_to_key
from typing import Any, Callable, Dict, Generic, Iterable, Iterator, List, Type, TypeVar

from .errors import EmptyContainerError, InvalidStateError
from .heap import heapify, pop_min

T = TypeVar("T")

Comparator = Callable[[T, T], int]

__all__ = [
    "SortingMachineBase",
    "SortingMachine",
    "SortedListMachine",
    "MACHINES",
    "make_machine",
    "machine_sort",
]


class SortingMachineBase(ABC, Generic[T]):
    """
    Mode bookkeeping, queries and equality shared by every machine.

    Subclasses only decide how the backing list is reorganized at the mode
    switch and how the first element is taken from it.
    """

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, order: Comparator) -> None:
        if not callable(order):
            raise TypeError(f"order must be a callable comparator; got {order!r}")
        self._order = order
        self._insertion_mode = True
        self._entries: List[T] = []

    # ---- subclass hooks ----

    @abstractmethod
    def _reorganize(self) -> None:
        """Prepare `_entries` for extraction."""

    @abstractmethod
    def _take_first(self) -> T:
        """Remove and return a minimal entry; `_entries` is non-empty."""

    # ---- mutators ----

    def add(self, x: T) -> None:
        """Insert `x` (duplicates allowed). Insertion mode only."""
        if not self._insertion_mode:
            raise InvalidStateError("add", self._insertion_mode)
        self._entries.append(x)

    def change_to_extraction_mode(self) -> None:
        """Reorganize the contents for extraction and leave insertion mode."""
        if not self._insertion_mode:
            raise InvalidStateError("change_to_extraction_mode", self._insertion_mode)
        self._reorganize()
        self._insertion_mode = False

    def remove_first(self) -> T:
        """Remove and return a minimal element. Extraction mode only."""
        if self._insertion_mode:
            raise InvalidStateError("remove_first", self._insertion_mode)
        if not self._entries:
            raise EmptyContainerError("remove_first")
        return self._take_first()

    def drain(self) -> Iterator[T]:
        """Return an iterator calling remove_first() until the machine is empty."""
        if self._insertion_mode:
            raise InvalidStateError("drain", self._insertion_mode)
        return self._drain()

    def _drain(self) -> Iterator[T]:
        while self._entries:
            yield self._take_first()

    # ---- queries ----

    def is_in_insertion_mode(self) -> bool:
        return self._insertion_mode

    def order(self) -> Comparator:
        return self._order

    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SortingMachineBase):
            return NotImplemented
        return (
            self._insertion_mode == other._insertion_mode
            and self._order == other._order
            and _same_multiset(self._entries, other._entries)
        )

    def __repr__(self) -> str:
        mode = "insertion" if self._insertion_mode else "extraction"
        return f"{type(self).__name__}(mode={mode}, size={len(self._entries)})"


class SortingMachine(SortingMachineBase[T]):
    """
    Heap-backed sorting machine.

    While extracting, `_entries` is a min-heap under `order` (see
    `sortmachine.heap` for the tie-break among equivalent elements).
    """

    def _reorganize(self) -> None:
        heapify(self._entries, self._order)

    def _take_first(self) -> T:
        return pop_min(self._entries, self._order)


class SortedListMachine(SortingMachineBase[T]):
    """
    Reference machine: stable sort at the switch, then serve from the end.

    The sorted list is kept reversed so every extraction is a list.pop().
    Equivalent elements come out in insertion order.
    """

    def _reorganize(self) -> None:
        # Sort a copy: list.sort leaves the list scrambled if order raises.
        entries = sorted(self._entries, key=cmp_to_key(self._order))
        entries.reverse()
        self._entries = entries

    def _take_first(self) -> T:
        return self._entries.pop()


MACHINES: Dict[str, Type[SortingMachineBase[Any]]] = {
    "heap": SortingMachine,
    "sorted_list": SortedListMachine,
}


def make_machine(name: str, order: Comparator) -> SortingMachineBase[Any]:
    """Build an empty machine of the registered kind `name`."""
    try:
        cls = MACHINES[name]
    except KeyError:
        raise ValueError(
            f"Unknown machine: {name!r}. Supported: {sorted(MACHINES)}"
        ) from None
    return cls(order)


def machine_sort(items: Iterable[T], order: Comparator, *, machine: str = "heap") -> List[T]:
    """
    Sort `items` by pushing them through a fresh machine.

    Does not mutate `items`; returns a new list.
    """
    m = make_machine(machine, order)
    for x in items:
        m.add(x)
    m.change_to_extraction_mode()
    return list(m.drain())


def _same_multiset(a: List[Any], b: List[Any]) -> bool:
    # Elements may be unhashable, so match by == instead of Counter.
    if len(a) != len(b):
        return False
    remaining = list(b)
    for x in a:
        for i, y in enumerate(remaining):
            if x == y:
                del remaining[i]
                break
        else:
            return False
    return True
