"""Timing harness and experiment runner."""

from __future__ import annotations

import json
import pathlib
import sys

import pandas as pd
import pytest
import yaml

_REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
_SRC = _REPO_ROOT / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from sortmachine import SortingMachine, natural_order
from sortmachine.bench.measure import time_machine_lifecycle
from sortmachine.bench.runner import main, run_experiment


class BrokenMachine(SortingMachine):
    def _take_first(self):
        raise RuntimeError("boom")


class UnsortedMachine(SortingMachine):
    def _reorganize(self) -> None:
        self._entries.reverse()

    def _take_first(self):
        return self._entries.pop(0)


def _time(factory, a, **kw):
    params = dict(
        machine_name="m",
        machine_factory=factory,
        a=a,
        order=natural_order,
        repeats=3,
        warmup=False,
        disable_gc=False,
        timeout_seconds=10.0,
    )
    params.update(kw)
    return time_machine_lifecycle(**params)


# ------------------------- measure ------------------------- #

def test_measure_ok() -> None:
    a = [3, 1, 2]
    res = _time(SortingMachine, a, warmup=True, disable_gc=True, validate=True)
    assert res["status"] == "ok"
    assert len(res["samples"]) == 3
    for s in res["samples"]:
        assert set(s) == {"fill_ns", "switch_ns", "drain_ns", "total_ns"}
        assert s["total_ns"] == s["fill_ns"] + s["switch_ns"] + s["drain_ns"]
    assert a == [3, 1, 2]


def test_measure_timeout() -> None:
    res = _time(SortingMachine, list(range(2000)), timeout_seconds=1e-9)
    assert res["status"] == "timeout"
    assert res["timed_out_on_repeat"] == 0
    assert len(res["samples"]) == 1


def test_measure_error() -> None:
    res = _time(BrokenMachine, [1, 2])
    assert res["status"] == "error"
    assert "boom" in res["error"]


def test_measure_validation_failure() -> None:
    res = _time(UnsortedMachine, [1, 2, 3], validate=True)
    assert res["status"] == "error"
    assert "not sorted" in res["error"]
    assert res["samples"] == []


@pytest.mark.parametrize("kw", [{"repeats": -1}, {"timeout_seconds": 0}])
def test_measure_rejects_bad_arguments(kw) -> None:
    with pytest.raises(ValueError):
        _time(SortingMachine, [1], **kw)


# ------------------------- runner ------------------------- #

def _write_config(tmp_path: pathlib.Path, **overrides) -> pathlib.Path:
    cfg = {
        "experiment_name": "unit",
        "output_dir": str(tmp_path / "runs"),
        "seed": 1,
        "repeats": 2,
        "warmup": False,
        "disable_gc": False,
        "timeout_seconds": 10.0,
        "validate": True,
        "order": "case_insensitive",
        "dataset": {"dist": "words", "params": {"length": [2, 6]}},
        "sizes": [10, 50],
        "machines": [{"name": "heap"}, {"name": "sorted_list"}],
    }
    cfg.update(overrides)
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(cfg), encoding="utf-8")
    return path


def test_run_experiment_writes_outputs(tmp_path: pathlib.Path) -> None:
    run_dir = run_experiment(_write_config(tmp_path))

    for name in ("config_resolved.yaml", "meta.json", "results.jsonl", "summary.csv"):
        assert (run_dir / name).exists()

    meta = json.loads((run_dir / "meta.json").read_text(encoding="utf-8"))
    assert "numpy" in meta and "machine" in meta

    lines = (run_dir / "results.jsonl").read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2 * 2 * 2  # machines * sizes * repeats

    summary = pd.read_csv(run_dir / "summary.csv")
    assert set(summary["machine"]) == {"heap", "sorted_list"}
    assert sorted(summary["n"].unique()) == [10, 50]
    assert (summary["samples_ok"] == 2).all()


def test_run_experiment_skips_after_timeout(tmp_path: pathlib.Path) -> None:
    run_dir = run_experiment(
        _write_config(tmp_path, timeout_seconds=1e-9, machines=[{"name": "heap"}])
    )
    records = [
        json.loads(line)
        for line in (run_dir / "results.jsonl").read_text(encoding="utf-8").splitlines()
    ]
    statuses = [r for r in records if "status" in r]
    assert len(statuses) == 1
    assert statuses[0]["status"] == "timeout"
    assert statuses[0]["n"] == 10
    assert all(r["n"] == 10 for r in records)


def test_run_experiment_missing_keys(tmp_path: pathlib.Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"experiment_name": "x"}), encoding="utf-8")
    with pytest.raises(ValueError, match="Missing required config keys"):
        run_experiment(path)


@pytest.mark.parametrize(
    "overrides",
    [
        {"machines": [{"name": "bogo"}]},
        {"machines": [{"name": "heap"}, {"name": "heap"}]},
        {"machines": []},
        {"order": "sideways"},
        {"sizes": []},
    ],
)
def test_run_experiment_rejects_bad_config(tmp_path: pathlib.Path, overrides) -> None:
    with pytest.raises(ValueError):
        run_experiment(_write_config(tmp_path, **overrides))


def test_main_missing_config(tmp_path: pathlib.Path) -> None:
    with pytest.raises(SystemExit):
        main([str(tmp_path / "nope.yaml")])
