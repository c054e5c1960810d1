"""
sortmachine: containers that take elements in any order and hand them back
smallest-first under a caller-supplied total preorder.

    from sortmachine import SortingMachine, case_insensitive

    m = SortingMachine(case_insensitive)
    for word in ["zeta", "Blue", "green"]:
        m.add(word)
    m.change_to_extraction_mode()
    m.remove_first()   # "Blue"
"""

from .comparators import by_key, case_insensitive, from_less_equal, natural_order, reverse
from .errors import EmptyContainerError, InvalidStateError, SortingMachineError
from .machine import (
    MACHINES,
    SortedListMachine,
    SortingMachine,
    SortingMachineBase,
    machine_sort,
    make_machine,
)

__version__ = "0.1.0"

__all__ = [
    "SortingMachine",
    "SortedListMachine",
    "SortingMachineBase",
    "MACHINES",
    "make_machine",
    "machine_sort",
    "SortingMachineError",
    "InvalidStateError",
    "EmptyContainerError",
    "natural_order",
    "case_insensitive",
    "by_key",
    "reverse",
    "from_less_equal",
]
