from __future__ import annotations

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence


# Project root: the directory holding optimizer/, benchmarks/, utils/
PROJECT_ROOT = Path(__file__).resolve().parents[1]

DATA_ROOT = PROJECT_ROOT / "data"
RESULTS_ROOT = DATA_ROOT / "results"
FIGURES_ROOT = DATA_ROOT / "figures"

SUMMARY_FIELDS = [
    "problem", "problem_type", "objective",
    "inertia", "cognitive", "social", "inertial_discount", "swarm_size", "max_iterations",
    "trial", "run", "elapsed_sec", "best_fitness", "best_position",
]


def _ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def create_run_dir(problem: str, mode: str = "single", root: Optional[Path] = None) -> Path:
    """
    Create and return a unique directory for a single run.

    Structure:
        {root}/{mode}/{problem}/run_YYYYmmdd_HHMMSS_XXXXXX/

    mode : "single" or "sweep"
    """
    if mode not in {"single", "sweep"}:
        raise ValueError(f"Unknown mode: {mode}")

    base = Path(root or RESULTS_ROOT) / mode / problem
    _ensure_dir(base)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    # microseconds as suffix; bump it if two runs land in the same tick
    suffix = int(datetime.now().strftime("%f"))
    run_dir = base / f"run_{timestamp}_{suffix:06d}"
    while run_dir.exists():
        suffix = (suffix + 1) % 1_000_000
        run_dir = base / f"run_{timestamp}_{suffix:06d}"
    _ensure_dir(run_dir)
    return run_dir


def save_convergence_csv(run_dir: Path, best_history: Sequence[float], start: int = 0) -> Path:
    """
    Save the universal-best curve to CSV:
        iter, f_best
    With start=0, row 0 is the best of the initial swarm.
    """
    path = Path(run_dir) / "convergence.csv"
    with path.open("w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["iter", "f_best"])
        for i, b in enumerate(best_history, start=start):
            writer.writerow([i, b])
    return path


def save_run_metadata(run_dir: Path, parameters: Dict[str, Any], results: Dict[str, Any],
                      extra: Optional[Dict[str, Any]] = None) -> Path:
    """
    Save run parameters, the final results and optional extra info to metadata.json.
    """
    meta: Dict[str, Any] = {"parameters": dict(parameters), "results": dict(results)}
    if extra:
        meta.update(extra)

    path = Path(run_dir) / "metadata.json"
    with path.open("w") as f:
        json.dump(meta, f, indent=2)
    return path


def results_row(parameters: Dict[str, Any], results, metadata: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Flatten one finished run into a summary row (see SUMMARY_FIELDS)."""
    metadata = metadata or {}
    return {
        "problem": results.name,
        "problem_type": results.problem_type,
        "objective": results.objective,
        "inertia": parameters["inertia"],
        "cognitive": parameters["cognitive"],
        "social": parameters["social"],
        "inertial_discount": parameters["inertial_discount"],
        "swarm_size": parameters["swarm_size"],
        "max_iterations": parameters["max_iterations"],
        "trial": metadata.get("trial", ""),
        "run": metadata.get("run", ""),
        "elapsed_sec": f"{results.elapsed:.6f}",
        "best_fitness": results.fitness,
        # assignments are left out: they follow from the position
        "best_position": json.dumps(list(results.position)),
    }


def append_summary(path: Path, rows: Iterable[Dict[str, Any]],
                   fieldnames: Optional[List[str]] = None) -> Path:
    """
    Append summary rows to a CSV file, writing the header the first time.
    """
    path = Path(path)
    _ensure_dir(path.parent)

    rows = list(rows)
    if not rows:
        return path

    fieldnames = list(fieldnames or SUMMARY_FIELDS)
    write_header = not path.exists() or path.stat().st_size == 0
    with path.open("a", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames, extrasaction="ignore")
        if write_header:
            writer.writeheader()
        for row in rows:
            writer.writerow(row)

    return path
