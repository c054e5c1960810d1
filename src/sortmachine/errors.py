"""
Error types raised by sorting machines.

Both errors signal a broken caller contract rather than a recoverable
runtime condition: a machine that raises one of them is left unchanged.
"""

from __future__ import annotations

__all__ = ["SortingMachineError", "InvalidStateError", "EmptyContainerError"]


class SortingMachineError(Exception):
    """Base class for every error raised by a sorting machine."""


class InvalidStateError(SortingMachineError):
    """An operation was invoked in the wrong mode."""

    def __init__(self, operation: str, insertion_mode: bool) -> None:
        mode = "insertion" if insertion_mode else "extraction"
        super().__init__(f"{operation}() is not allowed in {mode} mode")
        self.operation = operation
        self.insertion_mode = insertion_mode


class EmptyContainerError(SortingMachineError, IndexError):
    """remove_first() was called on a machine with no elements."""

    def __init__(self, operation: str = "remove_first") -> None:
        super().__init__(f"{operation}() called on an empty sorting machine")
        self.operation = operation
