from __future__ import annotations

import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from optimizer.base import Candidate, RunListener
from utils.recorder import (append_summary, create_run_dir, results_row,
                            save_convergence_csv, save_run_metadata)


def format_time(seconds: float) -> str:
    m, s = divmod(int(seconds), 60)
    h, m = divmod(m, 60)
    if h > 0:
        return f"{h}h {m:02d}m {s:02d}s"
    return f"{m}m {s:02d}s"


class ConsoleReporter(RunListener):
    """Prints run configuration, progress every `log_every` iterations, and the result."""

    def __init__(self, log_every: int = 10, show_config: bool = True):
        self.log_every = int(log_every)
        self.show_config = show_config
        self._start = time.time()
        self._max_iterations = 0

    def on_configured(self, parameters, data, metadata=None):
        self._start = time.time()
        self._max_iterations = parameters.get("max_iterations", 0)
        if self.show_config:
            print(f"--- {data.name} ({data.problem_type.value}, {data.objective.value}) | "
                  f"p={data.num_facilities} n={data.num_customers} | params={parameters} ---")

    def on_progress(self, best: Candidate, iteration: int):
        if self.log_every > 0 and iteration % self.log_every == 0:
            elapsed = format_time(time.time() - self._start)
            print(f"[Iter {iteration}/{self._max_iterations}] Best: {best.fitness:.6g} | Elapsed: {elapsed}")

    def on_completed(self, results):
        print(f"Done: best={results.fitness:.6g} | sites={list(results.position)} | time={results.elapsed:.3f}s")


class CsvReporter(RunListener):
    """
    Writes every completed run as a row of `summary_path`. With
    `save_runs=True` each run also gets its own directory holding
    convergence.csv and metadata.json.
    """

    def __init__(self, summary_path: Path, save_runs: bool = False,
                 mode: str = "sweep", root: Optional[Path] = None):
        self.summary_path = Path(summary_path)
        self.save_runs = save_runs
        self.mode = mode
        self.root = root
        self.run_dirs: List[Path] = []

        self._parameters: Dict[str, Any] = {}
        self._metadata: Dict[str, Any] = {}
        self._history: List[float] = []

    def on_configured(self, parameters, data, metadata=None):
        self._parameters = dict(parameters)
        self._metadata = dict(metadata or {})
        self._history = []

    def on_progress(self, best: Candidate, iteration: int):
        self._history.append(best.fitness)

    def on_completed(self, results):
        append_summary(self.summary_path, [results_row(self._parameters, results, self._metadata)])
        if self.save_runs:
            run_dir = create_run_dir(results.name, mode=self.mode, root=self.root)
            save_convergence_csv(run_dir, self._history, start=1)
            save_run_metadata(run_dir, self._parameters, results.as_dict(), extra=self._metadata)
            self.run_dirs.append(run_dir)


class CompositeListener(RunListener):
    """Forwards every event to each listener in order."""

    def __init__(self, *listeners: RunListener):
        self.listeners = list(listeners)

    def on_configured(self, parameters, data, metadata=None):
        for listener in self.listeners:
            listener.on_configured(parameters, data, metadata)

    def on_progress(self, best, iteration):
        for listener in self.listeners:
            listener.on_progress(best, iteration)

    def on_completed(self, results):
        for listener in self.listeners:
            listener.on_completed(results)
