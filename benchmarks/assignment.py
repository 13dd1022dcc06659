from __future__ import annotations
from typing import Sequence, Union

import numpy as np

from benchmarks.problem import ProblemType, as_problem_type


def _check_selection(costs: np.ndarray, facilities: Sequence[int]) -> np.ndarray:
    sites = np.asarray(facilities, dtype=int).ravel()
    if sites.size == 0:
        raise ValueError("Cannot assign customers to an empty facility selection")
    if np.unique(sites).size != sites.size:
        raise ValueError(f"Facility selection contains duplicates: {sites.tolist()}")
    n_sites = costs.shape[0]
    if sites.min() < 0 or sites.max() >= n_sites:
        raise ValueError(f"Facility index out of range [0, {n_sites}): {sites.tolist()}")
    return sites


def nearest_facility(costs: np.ndarray, facilities: Sequence[int]) -> np.ndarray:
    """
    Serve every customer from its cheapest selected site. Ties go to the site
    that comes first in the selection.
    """
    costs = np.asarray(costs, dtype=float)
    sites = _check_selection(costs, facilities)
    # argmin returns the first minimum, which gives the tie rule above
    slot = np.argmin(costs[sites, :], axis=0)
    return sites[slot]


ASSIGNMENT_RULES = {
    ProblemType.PMEDIAN: nearest_facility,
    ProblemType.PCENTER: nearest_facility,
    ProblemType.PMAXIAN: nearest_facility,
}


def assign(costs: np.ndarray, facilities: Sequence[int],
           problem_type: Union[ProblemType, str]) -> np.ndarray:
    """Map each customer to one of the selected sites (deterministic)."""
    rule = ASSIGNMENT_RULES[as_problem_type(problem_type)]
    return rule(costs, facilities)
