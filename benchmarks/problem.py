from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

import numpy as np

from optimizer.base import ObjectiveType, as_objective


class ProblemType(Enum):
    PMEDIAN = "pmedian"   # total service cost
    PCENTER = "pcenter"   # worst service cost
    PMAXIAN = "pmaxian"   # obnoxious facilities, keep customers far away

    def default_objective(self) -> ObjectiveType:
        if self is ProblemType.PMAXIAN:
            return ObjectiveType.MAXIMIZE
        return ObjectiveType.MINIMIZE


def as_problem_type(value: Union[ProblemType, str]) -> ProblemType:
    if isinstance(value, ProblemType):
        return value
    try:
        return ProblemType(str(value).lower())
    except ValueError:
        raise ValueError(f"Unknown problem type: {value!r}") from None


@dataclass(frozen=True, eq=False)
class ProblemData:
    """
    One facility-location instance.

    costs[i, j] is the cost of serving customer j from site i. Every customer
    node is also a candidate site, so the matrix is square and a solution
    picks `num_facilities` distinct rows.
    """
    name: str
    costs: np.ndarray = field(repr=False)
    num_facilities: int
    problem_type: ProblemType = ProblemType.PMEDIAN
    objective: Optional[ObjectiveType] = None

    def __post_init__(self):
        costs = np.array(self.costs, dtype=float)
        if costs.ndim != 2 or costs.shape[0] != costs.shape[1]:
            raise ValueError(f"Cost matrix must be square, got shape {costs.shape}")
        if np.isnan(costs).any():
            raise ValueError("Cost matrix contains NaN entries")
        costs.setflags(write=False)
        object.__setattr__(self, "costs", costs)

        p = int(self.num_facilities)
        if not 1 <= p <= costs.shape[0]:
            raise ValueError(f"num_facilities must be in [1, {costs.shape[0]}], got {self.num_facilities}")
        object.__setattr__(self, "num_facilities", p)

        ptype = as_problem_type(self.problem_type)
        object.__setattr__(self, "problem_type", ptype)

        if self.objective is None:
            objective = ptype.default_objective()
        else:
            objective = as_objective(self.objective)
        object.__setattr__(self, "objective", objective)

    @property
    def num_customers(self) -> int:
        return int(self.costs.shape[1])

    def describe(self) -> dict:
        return {
            "name": self.name,
            "problem_type": self.problem_type.value,
            "objective": self.objective.value,
            "num_facilities": self.num_facilities,
            "num_customers": self.num_customers,
        }
