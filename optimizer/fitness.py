from __future__ import annotations
from typing import Callable, Sequence

import numpy as np

from benchmarks.assignment import assign
from benchmarks.objective import calc_objective
from benchmarks.problem import ProblemData

AssignFn = Callable[..., np.ndarray]
ObjectiveFn = Callable[..., float]


class FitnessEvaluator:
    """
    Scores a facility selection: assignment first, then the objective.

    Both collaborators must be pure functions of their inputs, so scoring the
    same selection twice gives the same value and assignments can be rebuilt
    after a run instead of being stored per particle. Their exceptions are
    not caught here.
    """
    def __init__(self, data: ProblemData, assign_fn: AssignFn = assign,
                 objective_fn: ObjectiveFn = calc_objective):
        self.data = data
        self.assign_fn = assign_fn
        self.objective_fn = objective_fn

    def assignments(self, selection: Sequence[int]) -> np.ndarray:
        return self.assign_fn(self.data.costs, selection, self.data.problem_type)

    def score(self, selection: Sequence[int]) -> float:
        customer_assignments = self.assignments(selection)
        return float(self.objective_fn(self.data.costs, customer_assignments, self.data.problem_type))

    def __call__(self, selection: Sequence[int]) -> float:
        return self.score(selection)
