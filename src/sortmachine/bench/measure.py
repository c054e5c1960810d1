"""
Timing harness for sorting machines.

One sample is one full machine lifetime on a fresh machine:

    fill   -- add() every input element
    switch -- change_to_extraction_mode()
    drain  -- remove_first() until empty

Each phase is timed separately with a monotonic high-resolution clock.
Machine construction, input copying, GC control and output validation all
happen outside the timed blocks.

Public API (stable):
    time_machine_lifecycle(...) -> dict

Returned dict schema:
    {
        "machine": str,
        "repeats": int,
        "samples": list[dict],              # one per successful sample:
                                            #   {"fill_ns", "switch_ns",
                                            #    "drain_ns", "total_ns"}
        "status": "ok" | "timeout" | "error",
        "error": str | None,                # populated if status == "error"
        "timed_out_on_repeat": int | None,  # 0-based repeat index if timeout occurred
    }
"""

from __future__ import annotations

import gc
import time
from typing import Any, Callable, Dict, List, Sequence, Tuple

from sortmachine.machine import SortingMachineBase
from sortmachine.validate import is_nondecreasing

__all__ = ["time_machine_lifecycle"]

MachineFactory = Callable[[Callable[[Any, Any], int]], SortingMachineBase[Any]]


def _run_once(
    factory: MachineFactory, a: Sequence[Any], order: Callable[[Any, Any], int]
) -> Tuple[Dict[str, int], List[Any]]:
    m = factory(order)
    out: List[Any] = []
    take = m.remove_first
    append = out.append

    t0 = time.perf_counter_ns()
    for x in a:
        m.add(x)
    t1 = time.perf_counter_ns()
    m.change_to_extraction_mode()
    t2 = time.perf_counter_ns()
    for _ in range(len(a)):
        append(take())
    t3 = time.perf_counter_ns()

    phases = {
        "fill_ns": t1 - t0,
        "switch_ns": t2 - t1,
        "drain_ns": t3 - t2,
        "total_ns": t3 - t0,
    }
    return phases, out


def time_machine_lifecycle(
    *,
    machine_name: str,
    machine_factory: MachineFactory,
    a: Sequence[Any],
    order: Callable[[Any, Any], int],
    repeats: int,
    warmup: bool,
    disable_gc: bool,
    timeout_seconds: float,
    validate: bool = False,
) -> Dict[str, Any]:
    """
    Time `repeats` full lifetimes of machines built by `machine_factory`.

    Parameters
    ----------
    machine_name : str
        Logical name of the machine (for logs/records).
    machine_factory : callable
        `machine_factory(order)` returns a new, empty machine.
    a : sequence
        Elements to push through the machine. Never mutated.
    order : callable
        Three-way comparator handed to every machine.
    repeats : int
        Number of timed samples to collect.
    warmup : bool
        If True, run one untimed lifetime first.
    disable_gc : bool
        If True, collect and disable Python GC during the timed loop; restore afterward.
    timeout_seconds : float
        If one sample's total exceeds this, mark status="timeout" and stop.
    validate : bool
        If True, check every sample's output is nondecreasing under `order`
        and has the input's length; a failure is reported as status="error".

    Returns
    -------
    dict
        See module docstring for exact schema.
    """
    if repeats < 0:
        raise ValueError("repeats must be nonnegative")
    if timeout_seconds <= 0:
        raise ValueError("timeout_seconds must be positive")

    result: Dict[str, Any] = {
        "machine": machine_name,
        "repeats": repeats,
        "samples": [],
        "status": "ok",
        "error": None,
        "timed_out_on_repeat": None,
    }

    if warmup and repeats > 0:
        try:
            _run_once(machine_factory, a, order)
        except Exception as e:
            result["status"] = "error"
            result["error"] = f"warmup failed: {e!r}"
            return result

    prev_gc_enabled = gc.isenabled()
    try:
        if disable_gc:
            gc.collect()
            gc.disable()

        threshold_ns = int(timeout_seconds * 1e9)
        for r in range(repeats):
            try:
                phases, out = _run_once(machine_factory, a, order)
            except Exception as e:
                result["status"] = "error"
                result["error"] = f"run failed at repeat {r}: {e!r}"
                break

            if validate and (len(out) != len(a) or not is_nondecreasing(out, order)):
                result["status"] = "error"
                result["error"] = f"output not sorted at repeat {r}"
                break

            result["samples"].append(phases)

            if phases["total_ns"] > threshold_ns:
                result["status"] = "timeout"
                result["timed_out_on_repeat"] = r
                break
    finally:
        # Leave GC disabled if the caller had it disabled.
        if disable_gc and prev_gc_enabled:
            gc.enable()

    return result
