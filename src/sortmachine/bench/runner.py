"""
Experiment runner: compares sorting-machine implementations from a YAML config.

Usage (from repo root):
    python -m sortmachine.bench.runner experiments/configs/01_heap_vs_sorted_list.yaml

Outputs in a new run directory:
    - config_resolved.yaml    # the config we actually used
    - meta.json               # environment info (python, numpy, cpu/ram, git commit)
    - results.jsonl           # one JSON line per successful sample (per-phase ns)
    - summary.csv             # median + IQR of total time per (machine, n),
                              # plus median per phase
    - (console) rich table + tqdm progress over sizes

Design notes:
- For each size n, ONE dataset is generated and every machine gets the same input.
- Every sample starts from a fresh, empty machine.
- On timeout/error for a machine at size n, that machine skips larger sizes.
"""

from __future__ import annotations

import argparse
import datetime as _dt
import json
import os
import platform
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import numpy as np
import pandas as pd
import psutil
import yaml
from rich.console import Console
from rich.table import Table
from tqdm import tqdm

from sortmachine.bench.measure import time_machine_lifecycle
from sortmachine.comparators import get_comparator
from sortmachine.datasets import make_dataset
from sortmachine.machine import MACHINES

_console = Console()

REQUIRED_KEYS = [
    "experiment_name",
    "output_dir",
    "seed",
    "repeats",
    "warmup",
    "disable_gc",
    "timeout_seconds",
    "order",
    "dataset",
    "sizes",
    "machines",
]

SUMMARY_COLUMNS = [
    "machine",
    "n",
    "samples_ok",
    "median_ns",
    "iqr_ns",
    "min_ns",
    "max_ns",
    "fill_median_ns",
    "switch_median_ns",
    "drain_median_ns",
]


# ------------------------- data structures ------------------------- #

@dataclass(frozen=True)
class MachineSpec:
    name: str
    factory: Callable[..., Any]


# ------------------------- helpers: IO & meta ------------------------- #

def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)
    if not isinstance(cfg, dict):
        raise ValueError(f"Config must be a YAML mapping: {path}")
    return cfg


def _write_yaml(obj: Dict[str, Any], path: Path) -> None:
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(obj, f, sort_keys=False)


def _append_jsonl(obj: Dict[str, Any], path: Path) -> None:
    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(obj, separators=(",", ":"), ensure_ascii=False))
        f.write("\n")


def _timestamp() -> str:
    return _dt.datetime.now().strftime("%Y%m%d_%H%M%S")


def _ensure_run_dir(base_dir: Path, experiment_name: str) -> Path:
    base_dir.mkdir(parents=True, exist_ok=True)
    run_dir = base_dir / f"{_timestamp()}_{experiment_name}"
    suffix = 1
    while run_dir.exists():
        suffix += 1
        run_dir = base_dir / f"{_timestamp()}_{experiment_name}_{suffix}"
    run_dir.mkdir(parents=False, exist_ok=False)
    return run_dir


def _git_commit_short() -> Optional[str]:
    try:
        out = subprocess.check_output(["git", "rev-parse", "--short", "HEAD"], stderr=subprocess.DEVNULL)
    except (OSError, subprocess.CalledProcessError):
        return None
    return out.decode("utf-8").strip()


def _gather_meta() -> Dict[str, Any]:
    return {
        "python": platform.python_version(),
        "numpy": np.__version__,
        "pandas": pd.__version__,
        "psutil": psutil.__version__,
        "git_commit": _git_commit_short(),
        "machine": {
            "cpu": platform.processor() or platform.machine(),
            "cores_logical": psutil.cpu_count(logical=True),
            "cores_physical": psutil.cpu_count(logical=False),
            "ram_gb": round(psutil.virtual_memory().total / (1024**3), 2),
            "platform": platform.platform(),
        },
        "start_time": _dt.datetime.now().isoformat(timespec="seconds"),
        "pid": os.getpid(),
        "cwd": str(Path.cwd()),
    }


def _resolve_machines(cfg_machines: List[Any]) -> List[MachineSpec]:
    specs: List[MachineSpec] = []
    seen = set()
    for entry in cfg_machines:
        name = entry.get("name") if isinstance(entry, dict) else entry
        if not name or not isinstance(name, str):
            raise ValueError("Each machine must have a string 'name' field")
        if name in seen:
            raise ValueError(f"Duplicate machine name in config: {name}")
        if name not in MACHINES:
            raise ValueError(f"Unknown machine: {name!r}. Supported: {sorted(MACHINES)}")
        seen.add(name)
        specs.append(MachineSpec(name=name, factory=MACHINES[name]))
    if not specs:
        raise ValueError("Config 'machines' must list at least one machine")
    return specs


def _iqr(s: pd.Series) -> float:
    return s.quantile(0.75) - s.quantile(0.25)


def _aggregate_summary(jsonl_path: Path) -> pd.DataFrame:
    if not jsonl_path.exists():
        return pd.DataFrame(columns=SUMMARY_COLUMNS)
    df = pd.read_json(jsonl_path, lines=True)
    # Status lines (timeout/error) carry no timings.
    if "total_ns" not in df.columns:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)
    df = df[df["total_ns"].notna()]
    if df.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    out = (
        df.groupby(["machine", "n"], as_index=False)
        .agg(
            samples_ok=("total_ns", "count"),
            median_ns=("total_ns", "median"),
            iqr_ns=("total_ns", _iqr),
            min_ns=("total_ns", "min"),
            max_ns=("total_ns", "max"),
            fill_median_ns=("fill_ns", "median"),
            switch_median_ns=("switch_ns", "median"),
            drain_median_ns=("drain_ns", "median"),
        )
    )
    int_cols = [c for c in SUMMARY_COLUMNS if c.endswith("_ns")]
    out[int_cols] = out[int_cols].astype("int64")
    return out[SUMMARY_COLUMNS].sort_values(["machine", "n"], ignore_index=True)


def _print_rich_summary(summary: pd.DataFrame, sizes: List[int]) -> None:
    if summary.empty:
        _console.print("[yellow]No successful samples.[/yellow]")
        return

    table = Table(title="Sorting Machine Summary (median ± IQR in ms)")
    table.add_column("Machine", style="bold")
    picks = sorted({sizes[0], sizes[len(sizes) // 2], sizes[-1]})
    for n in picks:
        table.add_column(f"n={n}", justify="right")

    for name in summary["machine"].unique():
        row = [str(name)]
        for n in picks:
            s = summary[(summary["machine"] == name) & (summary["n"] == n)]
            if s.empty:
                row.append("—")
                continue
            median_ms = int(s["median_ns"].iloc[0]) / 1e6
            iqr_ms = int(s["iqr_ns"].iloc[0]) / 1e6
            row.append(f"{median_ms:.2f} ± {iqr_ms:.2f}")
        table.add_row(*row)
    _console.print()
    _console.print(table)
    _console.print()


# ------------------------- core runner ------------------------- #

def run_experiment(config_path: Path) -> Path:
    cfg = _load_yaml(config_path)

    missing = [k for k in REQUIRED_KEYS if k not in cfg]
    if missing:
        raise ValueError(f"Missing required config keys: {missing}")

    experiment_name = str(cfg["experiment_name"])
    output_dir = Path(cfg["output_dir"])
    sizes: List[int] = [int(n) for n in cfg["sizes"]]
    repeats = int(cfg["repeats"])
    warmup = bool(cfg["warmup"])
    disable_gc = bool(cfg["disable_gc"])
    timeout_seconds = float(cfg["timeout_seconds"])
    validate = bool(cfg.get("validate", False))
    order_name = str(cfg["order"])
    dataset_spec: Dict[str, Any] = dict(cfg["dataset"])

    if not sizes or any(n < 0 for n in sizes):
        raise ValueError("Config 'sizes' must be a non-empty list of nonnegative integers")

    order = get_comparator(order_name)
    machines = _resolve_machines(list(cfg["machines"]))

    run_dir = _ensure_run_dir(output_dir, experiment_name)
    results_path = run_dir / "results.jsonl"
    summary_path = run_dir / "summary.csv"
    meta_path = run_dir / "meta.json"
    cfg_resolved_path = run_dir / "config_resolved.yaml"

    _write_yaml(cfg, cfg_resolved_path)
    with meta_path.open("w", encoding="utf-8") as f:
        json.dump(_gather_meta(), f, indent=2)

    rng = np.random.default_rng(int(cfg["seed"]))
    skipped = {m.name: False for m in machines}

    _console.print(f"[bold green]Run directory:[/bold green] {run_dir}")
    _console.print(f"[bold]Experiment:[/bold] {experiment_name}")
    _console.print(f"[bold]Machines:[/bold] {', '.join(m.name for m in machines)} (order={order_name})")
    _console.print()

    for n in tqdm(sizes, desc="Sizes", unit="n"):
        base_a = make_dataset(n, dataset_spec, rng)

        for spec in machines:
            if skipped[spec.name]:
                continue

            res = time_machine_lifecycle(
                machine_name=spec.name,
                machine_factory=spec.factory,
                a=base_a,
                order=order,
                repeats=repeats,
                warmup=warmup,
                disable_gc=disable_gc,
                timeout_seconds=timeout_seconds,
                validate=validate,
            )

            for trial_idx, phases in enumerate(res["samples"]):
                _append_jsonl(
                    {
                        "machine": spec.name,
                        "n": n,
                        "order": order_name,
                        "dataset": dataset_spec,
                        "trial": trial_idx,
                        **phases,
                    },
                    results_path,
                )

            status = res["status"]
            if status != "ok":
                skipped[spec.name] = True
                _append_jsonl(
                    {
                        "machine": spec.name,
                        "n": n,
                        "status": status,
                        "timed_out_on_repeat": res["timed_out_on_repeat"],
                        "error": res["error"],
                    },
                    results_path,
                )
                _console.print(f"[yellow]{spec.name}: {status} at n={n}; skipping larger sizes[/yellow]")

    summary_df = _aggregate_summary(results_path)
    summary_df.to_csv(summary_path, index=False)
    _print_rich_summary(summary_df, sizes)

    _console.print("[bold green]Done.[/bold green] Wrote:")
    for path in (results_path, summary_path, meta_path, cfg_resolved_path):
        _console.print(f" - {path}")

    return run_dir


# ------------------------- CLI ------------------------- #

def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Benchmark sorting machines from a YAML config.")
    p.add_argument("config", type=str, help="Path to YAML experiment config")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    config_path = Path(args.config).resolve()
    if not config_path.exists():
        raise SystemExit(f"Config file not found: {config_path}")
    try:
        run_experiment(config_path)
    except Exception as e:
        _console.print(f"[bold red]Runner failed:[/bold red] {e!r}")
        raise


if __name__ == "__main__":
    main()
