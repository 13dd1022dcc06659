from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple, Union


class ConfigurationError(Exception):
    """Raised when the optimiser is used outside its contract (fatal)."""


class ObjectiveType(Enum):
    MINIMIZE = "minimize"
    MAXIMIZE = "maximize"


Direction = Union[ObjectiveType, str]


def as_objective(direction: Direction) -> ObjectiveType:
    if isinstance(direction, ObjectiveType):
        return direction
    try:
        return ObjectiveType(str(direction).lower())
    except ValueError:
        raise ConfigurationError(f"Unrecognized objective direction: {direction!r}") from None


class Comparator:
    """
    Direction-aware ranking of two scores.

    better(a, b) is True when a is strictly preferred to b. The same predicate
    picks the iteration's best particle and decides whether it replaces the
    universal best.
    """
    def __init__(self, direction: Direction):
        self.direction: ObjectiveType = as_objective(direction)

    def better(self, a: float, b: float) -> bool:
        if self.direction is ObjectiveType.MINIMIZE:
            return a < b
        return a > b

    def __call__(self, a: float, b: float) -> bool:
        return self.better(a, b)

    def __repr__(self) -> str:
        return f"Comparator({self.direction.value})"


@dataclass(frozen=True)
class Candidate:
    """Frozen snapshot of a particle: selected sites and their fitness."""
    position: Tuple[int, ...]
    fitness: float


def global_best(swarm: Sequence[Any], comparator: Union[Comparator, Direction]):
    """
    Best member of the swarm in a single pass. Ties keep the first one seen.
    """
    if not isinstance(comparator, Comparator):
        comparator = Comparator(comparator)
    if len(swarm) == 0:
        raise ValueError("global_best() needs a non-empty swarm")

    best = swarm[0]
    for particle in swarm[1:]:
        if comparator.better(particle.fitness, best.fitness):
            best = particle
    return best


def update_universal_best(current: Optional[Candidate], candidate: Candidate,
                          comparator: Comparator) -> Candidate:
    if current is None or comparator.better(candidate.fitness, current.fitness):
        return candidate
    return current


class RunListener:
    """
    Receiver for coordinator events. All hooks are notifications: return
    values are ignored and nothing here can change the run.
    """
    def on_configured(self, parameters: Dict[str, Any], data, metadata: Optional[Dict[str, Any]] = None) -> None:
        pass

    def on_progress(self, best: Candidate, iteration: int) -> None:
        pass

    def on_completed(self, results) -> None:
        pass
