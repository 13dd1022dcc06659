from __future__ import annotations
from typing import Sequence, Union

import numpy as np

from benchmarks.problem import ProblemType, as_problem_type


def service_costs(costs: np.ndarray, assignments: Sequence[int]) -> np.ndarray:
    costs = np.asarray(costs, dtype=float)
    assignments = np.asarray(assignments, dtype=int).ravel()
    if assignments.size != costs.shape[1]:
        raise ValueError(f"Expected {costs.shape[1]} customer assignments, got {assignments.size}")
    return costs[assignments, np.arange(costs.shape[1])]


def calc_objective(costs: np.ndarray, assignments: Sequence[int],
                   problem_type: Union[ProblemType, str]) -> float:
    """
    Objective value of a customer assignment.

    pmedian / pmaxian : total service cost
    pcenter           : largest single service cost
    """
    ptype = as_problem_type(problem_type)
    served = service_costs(costs, assignments)
    if ptype is ProblemType.PCENTER:
        return float(np.max(served))
    return float(np.sum(served))
