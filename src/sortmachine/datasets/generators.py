"""
Seeded input generators for filling sorting machines.

Distributions:
- "random":        integers drawn uniformly from an inclusive range.
- "nearly_sorted": [0, 1, ..., n-1] degraded by ceil(swap_frac * n) random
                   index swaps.
- "few_uniques":   at most k distinct integers, repeated to length n
                   (stresses ties in the heap).
- "reversed":      [n-1, ..., 0]; worst case for a naive sift.
- "words":         mixed-case ASCII-letter strings, meant for the
                   case-insensitive order where "Blue" and "blue" tie.

Public API (stable):
    make_dataset(n: int, spec: dict, rng: numpy.random.Generator) -> list

Conventions:
- Every range given in params is **inclusive** on both ends.
- The caller owns and seeds the RNG; "reversed" ignores it.
- Returns plain Python lists of int or str, never NumPy arrays.
"""

from __future__ import annotations

import string
from typing import Any, Dict, List, Tuple

import numpy as np

SUPPORTED_DISTS = {
    "random",
    "nearly_sorted",
    "few_uniques",
    "reversed",
    "words",
}
__all__ = ["SUPPORTED_DISTS", "make_dataset"]

_LETTERS = np.array(list(string.ascii_letters))


def make_dataset(n: int, spec: Dict[str, Any], rng: np.random.Generator) -> List[Any]:
    """
    Generate `n` elements according to `spec`.

    Parameters
    ----------
    n : int
        Number of elements, >= 0.
    spec : dict
        {"dist": <name>, "params": {...}} where params are:

            random:        {"range": [lo, hi]}               (required)
            nearly_sorted: {"swap_frac": 0.05}               (in [0, 1])
            few_uniques:   {"k": 10, "range": [lo, hi]}      (range optional)
            reversed:      {}
            words:         {"length": [3, 10]}               (optional)
    rng : numpy.random.Generator
        Seeded upstream.

    Returns
    -------
    list
        `n` ints, or `n` strs for "words".

    Raises
    ------
    ValueError
        On a bad `n`, an unknown dist, or invalid params.
    """
    if not isinstance(n, int) or isinstance(n, bool) or n < 0:
        raise ValueError(f"n must be a nonnegative int; got {n!r}")
    if not isinstance(spec, dict):
        raise ValueError("spec must be a dict")

    dist = spec.get("dist")
    if dist not in SUPPORTED_DISTS:
        raise ValueError(
            f"Unsupported dataset dist: {dist!r}. Supported: {sorted(SUPPORTED_DISTS)}"
        )
    params = spec.get("params") or {}

    if dist == "random":
        lo, hi = _inclusive_range(params, "range", required=True)
        return rng.integers(lo, hi, size=n, endpoint=True, dtype=np.int64).tolist()

    if dist == "nearly_sorted":
        swap_frac = _swap_frac(params)
        out = list(range(n))
        swaps = int(np.ceil(swap_frac * n)) if n else 0
        if swaps:
            pairs = rng.integers(0, n, size=(swaps, 2))
            for i, j in pairs.tolist():
                out[i], out[j] = out[j], out[i]
        return out

    if dist == "few_uniques":
        k = params.get("k")
        if not isinstance(k, int) or isinstance(k, bool) or k < 1:
            raise ValueError(f"few_uniques.params.k must be an int >= 1; got {k!r}")
        lo, hi = _inclusive_range(params, "range", default=(0, 2**31 - 1))
        if n == 0:
            return []
        k = min(k, n, hi - lo + 1)
        # choice() without replacement is exact even when k is close to the span
        values = rng.choice(hi - lo + 1, size=k, replace=False) + lo
        picks = rng.integers(0, k, size=n)
        return values[picks].astype(np.int64).tolist()

    if dist == "reversed":
        return list(range(n - 1, -1, -1))

    # "words"
    min_len, max_len = _inclusive_range(params, "length", default=(3, 10))
    if min_len < 1:
        raise ValueError(f"words.params.length must start at >= 1; got {min_len}")
    lengths = rng.integers(min_len, max_len, size=n, endpoint=True)
    return ["".join(rng.choice(_LETTERS, size=int(m))) for m in lengths]


# ------------------------- helpers ------------------------- #


def _inclusive_range(
    params: Dict[str, Any],
    name: str,
    *,
    required: bool = False,
    default: Tuple[int, int] = (0, 0),
) -> Tuple[int, int]:
    if name not in params:
        if required:
            raise ValueError(f"params.{name} must be provided as [min, max] (inclusive)")
        return default
    spec = params[name]
    if not isinstance(spec, (list, tuple)) or len(spec) != 2:
        raise ValueError(f"params.{name} must be a 2-element list [min, max]")
    if not all(isinstance(v, (int, np.integer)) and not isinstance(v, bool) for v in spec):
        raise ValueError(f"params.{name} values must be integers")
    lo, hi = int(spec[0]), int(spec[1])
    if lo > hi:
        raise ValueError(f"params.{name} invalid: min > max ({lo} > {hi})")
    return lo, hi


def _swap_frac(params: Dict[str, Any]) -> float:
    raw = params.get("swap_frac", 0.05)
    try:
        frac = float(raw)
    except (TypeError, ValueError) as e:
        raise ValueError(f"nearly_sorted.params.swap_frac must be a float; got {raw!r}") from e
    if not 0.0 <= frac <= 1.0:
        raise ValueError(f"nearly_sorted.params.swap_frac must be in [0.0, 1.0]; got {frac}")
    return frac
