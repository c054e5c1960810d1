"""Comparator helpers: three-way results, adapters and the name registry."""

from __future__ import annotations

import pathlib
import sys

import pytest

_REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
_SRC = _REPO_ROOT / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from sortmachine import SortingMachine, machine_sort
from sortmachine.comparators import (
    COMPARATORS,
    by_key,
    case_insensitive,
    from_less_equal,
    get_comparator,
    natural_order,
    reverse,
)


def _sign(x: int) -> int:
    return (x > 0) - (x < 0)


@pytest.mark.parametrize("a, b, expected", [(1, 2, -1), (2, 1, 1), (3, 3, 0), ("a", "b", -1)])
def test_natural_order(a, b, expected) -> None:
    assert natural_order(a, b) == expected


def test_case_insensitive() -> None:
    assert case_insensitive("Blue", "blue") == 0
    assert case_insensitive("BLUE", "green") < 0
    assert case_insensitive("zeta", "Yellow") > 0


def test_by_key() -> None:
    by_len = by_key(len)
    assert by_len("aaa", "b") > 0
    assert by_len("ab", "cd") == 0


def test_reverse() -> None:
    desc = reverse(natural_order)
    assert desc(1, 2) > 0
    assert machine_sort([3, 1, 2], desc) == [3, 2, 1]


@pytest.mark.parametrize("a, b", [(1, 2), (2, 1), (5, 5), (-3, 7)])
def test_from_less_equal_matches_natural(a: int, b: int) -> None:
    compare = from_less_equal(lambda x, y: x <= y)
    assert _sign(compare(a, b)) == natural_order(a, b)


def test_from_less_equal_drives_a_machine() -> None:
    m = SortingMachine(from_less_equal(lambda x, y: x.lower() <= y.lower()))
    for w in ["green", "Blue", "yellow", "brown"]:
        m.add(w)
    m.change_to_extraction_mode()
    assert list(m.drain()) == ["Blue", "brown", "green", "yellow"]


def test_get_comparator() -> None:
    for name, fn in COMPARATORS.items():
        assert get_comparator(name) is fn
    with pytest.raises(ValueError):
        get_comparator("random")


def test_case_insensitive_folds_one_character_at_a_time() -> None:
    assert case_insensitive("ß", "ss") != 0
    assert case_insensitive("straße", "STRASSE") != 0
    assert case_insensitive("Äpfel", "äPFEL") == 0
    assert case_insensitive("ß", "ß") == 0
