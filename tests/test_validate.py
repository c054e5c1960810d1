"""Oracle and property helpers."""

from __future__ import annotations

import pathlib
import sys

import pytest

_REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
_SRC = _REPO_ROOT / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from sortmachine.comparators import case_insensitive, natural_order, reverse
from sortmachine.validate import (
    assert_no_mutation,
    equals_oracle,
    first_nondecreasing_violation_index,
    is_heap,
    is_nondecreasing,
    is_permutation,
    oracle_sort,
    permutation_counter_diff,
)


def test_oracle_sort_does_not_mutate() -> None:
    a = [3, 1, 2]
    assert oracle_sort(a, natural_order) == [1, 2, 3]
    assert a == [3, 1, 2]


def test_oracle_sort_is_stable_under_preorder() -> None:
    assert oracle_sort(["b", "A", "a", "B"], case_insensitive) == ["A", "a", "b", "B"]


def test_equals_oracle() -> None:
    assert equals_oracle([2, 1], [1, 2], natural_order)
    assert not equals_oracle([2, 1], [2, 1], natural_order)


def test_nondecreasing_checks() -> None:
    assert is_nondecreasing([], natural_order)
    assert is_nondecreasing([1, 1, 2], natural_order)
    assert is_nondecreasing([3, 2, 2], reverse(natural_order))
    assert first_nondecreasing_violation_index([1, 3, 2, 4], natural_order) == 1
    assert is_nondecreasing(["a", "A", "b"], case_insensitive)


def test_is_heap() -> None:
    assert is_heap([1, 2, 3, 4, 5], natural_order)
    assert not is_heap([2, 1], natural_order)


def test_permutation_helpers() -> None:
    assert is_permutation([1, 2, 2], [2, 1, 2])
    assert not is_permutation([1, 2], [1, 2, 2])
    assert permutation_counter_diff([1, 1, 3], [1, 2]) == {1: 1, 3: 1, 2: -1}
    assert permutation_counter_diff(["x"], ["x"]) == {}


def test_assert_no_mutation() -> None:
    assert_no_mutation([1, 2], [1, 2])
    with pytest.raises(AssertionError, match="index 1"):
        assert_no_mutation([1, 2], [1, 3])
    with pytest.raises(AssertionError, match="length"):
        assert_no_mutation([1, 2], [1])
