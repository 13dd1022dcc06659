from __future__ import annotations
import json
import math
import numbers
import time
from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, NamedTuple, Optional, Tuple

import numpy as np

from benchmarks.problem import ProblemData
from .base import (Candidate, Comparator, ConfigurationError, RunListener,
                   global_best, update_universal_best)
from .fitness import FitnessEvaluator


class Weights(NamedTuple):
    inertia: float
    cognitive: float
    social: float


@dataclass(frozen=True)
class PSOConfig:
    """
    Settings for one optimisation run. A new value is built for every run
    (see dataclasses.replace / with_weights) instead of mutating a shared one.
    """
    social: float = 0.5
    cognitive: float = 0.5
    inertia: float = 0.9            # starting inertia, decayed inside a run
    inertial_discount: float = 0.99
    swarm_size: int = 30
    max_iterations: int = 100

    def validate(self) -> "PSOConfig":
        for name in ("social", "cognitive", "inertia"):
            value = float(getattr(self, name))
            if not math.isfinite(value) or value < 0.0:
                raise ConfigurationError(f"{name} must be a finite value >= 0, got {value}")
        if not math.isfinite(self.inertial_discount) or self.inertial_discount <= 0.0:
            raise ConfigurationError(f"inertial_discount must be > 0, got {self.inertial_discount}")
        for name in ("swarm_size", "max_iterations"):
            value = getattr(self, name)
            if not isinstance(value, numbers.Integral) or isinstance(value, bool):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
            if value < 1:
                raise ConfigurationError(f"{name} must be >= 1, got {value}")
        return self

    def with_weights(self, inertia: float, cognitive: float, social: float) -> "PSOConfig":
        return replace(self, inertia=float(inertia), cognitive=float(cognitive), social=float(social))

    def parameters(self) -> Dict[str, Any]:
        return {
            "inertia": self.inertia,
            "cognitive": self.cognitive,
            "social": self.social,
            "inertial_discount": self.inertial_discount,
            "swarm_size": int(self.swarm_size),
            "max_iterations": int(self.max_iterations),
        }


def inertia_schedule(initial: float, discount: float, iterations: int) -> Iterator[float]:
    """
    Inertia used at iterations 1..iterations.

    The discount is applied before the first update, so iteration k runs with
    initial * discount**k.
    """
    inertia = initial
    for _ in range(iterations):
        inertia *= discount
        yield inertia


def _move_probabilities(weights: Weights) -> Tuple[float, float, float]:
    total = weights.inertia + weights.cognitive + weights.social
    if total > 1.0:
        return weights.inertia / total, weights.cognitive / total, weights.social / total
    return weights.inertia, weights.cognitive, weights.social


def _place(position: np.ndarray, d: int, site: int) -> None:
    # keep sites distinct: if the site is already selected, swap it into slot d
    where = np.flatnonzero(position == site)
    if where.size:
        k = where[0]
        position[k] = position[d]
    position[d] = site


class Particle:
    """
    Discrete particle without velocity. The position is a vector of
    `n_dims` distinct site indices in [0, n_sites).
    """
    def __init__(self, n_dims: int, n_sites: int, evaluator: Callable[[np.ndarray], float],
                 comparator: Comparator, rng: np.random.Generator):
        self.D = int(n_dims)
        self.n_sites = int(n_sites)
        self.evaluator = evaluator
        self.comparator = comparator
        self.rng = rng

        self.position: np.ndarray = rng.choice(self.n_sites, size=self.D, replace=False)
        self.fitness: float = evaluator(self.position)
        self.best_position: np.ndarray = self.position.copy()
        self.best_fitness: float = self.fitness

    def update(self, guide: Candidate, weights: Weights) -> None:
        """
        Move towards the personal best and the guide, one dimension at a time:
          - with probability `inertia`, jump to a random unselected site
          - with probability `cognitive`, take the personal best's site
          - with probability `social`, take the guide's site
          - otherwise keep the current site
        """
        p_w, p_c, p_s = _move_probabilities(weights)
        new = self.position.copy()
        # swaps keep the selected set; only random jumps change it
        selected = np.zeros(self.n_sites, dtype=bool)
        selected[new] = True
        r = self.rng.random(self.D)
        for d in range(self.D):
            if r[d] < p_w:
                free = np.flatnonzero(~selected)
                if free.size:
                    site = self.rng.choice(free)
                    selected[new[d]] = False
                    selected[site] = True
                    new[d] = site
            elif r[d] < p_w + p_c:
                _place(new, d, self.best_position[d])
            elif r[d] < p_w + p_c + p_s:
                _place(new, d, guide.position[d])

        self.position = new
        self.fitness = self.evaluator(new)
        if self.comparator.better(self.fitness, self.best_fitness):
            self.best_fitness = self.fitness
            self.best_position = new.copy()

    def snapshot(self) -> Candidate:
        return Candidate(position=tuple(int(s) for s in self.position), fitness=float(self.fitness))


@dataclass(frozen=True)
class ProblemResults:
    elapsed: float                       # seconds spent in the iteration loop
    fitness: float
    position: Tuple[int, ...]
    assignments: Tuple[int, ...]
    problem_type: str
    objective: str
    name: str = ""

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


class RunState(Enum):
    UNCONFIGURED = "unconfigured"
    READY = "ready"
    RUNNING = "running"
    DONE = "done"


class NDPSO:
    """
    Discrete particle swarm optimisation for facility location.

    The coordinator owns the configuration, the swarm and the current inertia.
    Each call to optimize() starts from a fresh swarm and the initial inertia,
    runs exactly max_iterations iterations and returns a ProblemResults.
    """
    def __init__(self, config: Optional[PSOConfig] = None, listener: Optional[RunListener] = None,
                 seed: int = 0, evaluator_factory: Callable[[ProblemData], FitnessEvaluator] = FitnessEvaluator):
        self.rng = np.random.default_rng(int(seed))
        self.listener: RunListener = listener or RunListener()
        self.evaluator_factory = evaluator_factory

        self.config: Optional[PSOConfig] = None
        self.state = RunState.UNCONFIGURED
        self.inertia: Optional[float] = None
        self.swarm: List[Particle] = []
        self.history: List[float] = []

        self.data: Optional[ProblemData] = None
        self.comparator: Optional[Comparator] = None
        self.evaluator: Optional[FitnessEvaluator] = None

        if config is not None:
            self.configure(config)

    def configure(self, config: PSOConfig) -> None:
        if self.state is RunState.RUNNING:
            raise ConfigurationError("Cannot reconfigure while a run is in progress")
        self.config = config.validate()
        self.inertia = config.inertia
        self.state = RunState.READY

    def parameters(self) -> Dict[str, Any]:
        if self.config is None:
            raise ConfigurationError("NDPSO has no configuration yet")
        return self.config.parameters()

    def parameters_json(self) -> str:
        return json.dumps(self.parameters(), sort_keys=False)

    def weights(self) -> Weights:
        return Weights(inertia=self.inertia, cognitive=self.config.cognitive, social=self.config.social)

    def init_swarm(self) -> None:
        self.swarm.clear()
        n_dims = self.data.num_facilities
        n_sites = self.data.num_customers
        self.swarm = [
            Particle(n_dims, n_sites, self.evaluator, self.comparator, self.rng)
            for _ in range(self.config.swarm_size)
        ]

    def global_best(self) -> Candidate:
        return global_best(self.swarm, self.comparator).snapshot()

    def optimize(self, data: ProblemData, metadata: Optional[Dict[str, Any]] = None) -> ProblemResults:
        if self.state not in (RunState.READY, RunState.DONE):
            raise ConfigurationError(f"optimize() called in state {self.state.value}; call configure() first")

        cfg = self.config
        self.comparator = Comparator(data.objective)
        self.data = data
        self.evaluator = self.evaluator_factory(data)
        self.listener.on_configured(self.parameters(), data, metadata)

        self.state = RunState.RUNNING
        try:
            self.init_swarm()
            g_best = self.global_best()      # best of the current iteration
            u_best = g_best                  # best across all iterations
            self.history = [u_best.fitness]

            # inertia may have decayed in an earlier run
            self.inertia = cfg.inertia

            start_time = time.time()
            schedule = inertia_schedule(cfg.inertia, cfg.inertial_discount, cfg.max_iterations)
            for count, inertia in enumerate(schedule, start=1):
                self.inertia = inertia
                weights = self.weights()
                for particle in self.swarm:
                    particle.update(g_best, weights)
                g_best = self.global_best()
                u_best = update_universal_best(u_best, g_best, self.comparator)
                self.history.append(u_best.fitness)

                self.listener.on_progress(u_best, count)
            elapsed = time.time() - start_time

            # assignments are not cached on particles; rebuild them from the position
            assignments = self.evaluator.assignments(u_best.position)
        except Exception:
            self.state = RunState.READY
            raise

        results = ProblemResults(
            elapsed=elapsed,
            fitness=u_best.fitness,
            position=u_best.position,
            assignments=tuple(int(a) for a in assignments),
            problem_type=data.problem_type.value,
            objective=data.objective.value,
            name=data.name,
        )
        self.state = RunState.DONE
        self.listener.on_completed(results)
        return results
