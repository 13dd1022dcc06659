from __future__ import annotations
from typing import Iterator, List, NamedTuple, Optional, Sequence, Tuple

from benchmarks.problem import ProblemData
from .pso import NDPSO, PSOConfig, ProblemResults

# 0.1 .. 0.9 in steps of 0.2, shared by inertia, cognitive and social
SWEEP_GRID: Tuple[float, ...] = tuple(round(0.1 + 0.2 * i, 1) for i in range(5))
TRIALS_PER_POINT = 10


class SweepRun(NamedTuple):
    inertia: float
    cognitive: float
    social: float
    trial: int
    results: ProblemResults


def weight_grid(values: Sequence[float] = SWEEP_GRID) -> Iterator[Tuple[float, float, float]]:
    """(inertia, cognitive, social) triples, inertia outermost."""
    for inertia in values:
        for cognitive in values:
            for social in values:
                yield inertia, cognitive, social


def search_parameters(pso: NDPSO, data: ProblemData, base_config: Optional[PSOConfig] = None,
                      grid: Sequence[float] = SWEEP_GRID, trials: int = TRIALS_PER_POINT,
                      verbose: bool = False) -> List[SweepRun]:
    """
    Run `trials` independent optimisations for every weight triple of the grid.

    Each run gets its own PSOConfig; results reach the coordinator's listener
    as they complete. Nothing is aggregated here. When this returns the
    coordinator is left configured with the last triple of the grid.
    """
    if base_config is None:
        base_config = pso.config if pso.config is not None else PSOConfig()

    runs: List[SweepRun] = []
    done = 0
    total = len(grid) ** 3 * trials
    for inertia, cognitive, social in weight_grid(grid):
        for trial in range(trials):
            pso.configure(base_config.with_weights(inertia, cognitive, social))
            results = pso.optimize(data, metadata={"trial": trial, "run": done})
            runs.append(SweepRun(inertia, cognitive, social, trial, results))
            done += 1
        if verbose:
            print(f"[{done}/{total}] done | w={inertia:.1f} c1={cognitive:.1f} c2={social:.1f}")
    return runs
