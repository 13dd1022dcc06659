from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import numpy as np
from scipy.sparse.csgraph import csgraph_from_dense, shortest_path
from scipy.spatial.distance import cdist

from benchmarks.problem import ProblemData, ProblemType
from optimizer.base import ObjectiveType

PathLike = Union[str, Path]


def load_orlib_pmed(path: PathLike, problem_type: Union[ProblemType, str] = ProblemType.PMEDIAN,
                    objective: Optional[Union[ObjectiveType, str]] = None) -> ProblemData:
    """
    Read a Beasley OR-Library p-median file (pmed1.txt ... pmed40.txt).

    Format:
      - first line : n_vertices n_edges p
      - then n_edges lines : i j cost   (1-based, undirected)
    If an edge is listed more than once the last entry wins. The cost matrix
    is the all-pairs shortest-path distance over that graph.
    """
    path = Path(path)
    tokens = path.read_text().split()
    if len(tokens) < 3:
        raise ValueError(f"{path}: missing 'n m p' header")

    n, m, p = (int(float(t)) for t in tokens[:3])
    body = tokens[3:]
    if len(body) < 3 * m:
        raise ValueError(f"{path}: expected {m} edges, found {len(body) // 3}")

    graph = np.full((n, n), np.inf)
    np.fill_diagonal(graph, 0.0)
    for k in range(m):
        i, j, c = body[3 * k: 3 * k + 3]
        i, j = int(i) - 1, int(j) - 1
        if not (0 <= i < n and 0 <= j < n):
            raise ValueError(f"{path}: edge {k + 1} references a vertex outside 1..{n}")
        graph[i, j] = graph[j, i] = float(c)

    dist = shortest_path(csgraph_from_dense(graph, null_value=np.inf), directed=False)
    if np.isinf(dist).any():
        raise ValueError(f"{path}: graph is not connected")

    return ProblemData(name=path.stem, costs=dist, num_facilities=p,
                       problem_type=problem_type, objective=objective)


def load_cost_matrix(path: PathLike, num_facilities: int,
                     problem_type: Union[ProblemType, str] = ProblemType.PMEDIAN,
                     objective: Optional[Union[ObjectiveType, str]] = None) -> ProblemData:
    """Read a square cost matrix stored as whitespace- or comma-separated text."""
    path = Path(path)
    delimiter = "," if path.suffix.lower() == ".csv" else None
    costs = np.loadtxt(path, delimiter=delimiter, ndmin=2)
    return ProblemData(name=path.stem, costs=costs, num_facilities=num_facilities,
                       problem_type=problem_type, objective=objective)


def random_euclidean_problem(n_customers: int, num_facilities: int, seed: int = 0,
                             problem_type: Union[ProblemType, str] = ProblemType.PMEDIAN,
                             objective: Optional[Union[ObjectiveType, str]] = None,
                             scale: float = 100.0) -> ProblemData:
    """Customers scattered uniformly in a square; costs are Euclidean distances."""
    rng = np.random.default_rng(int(seed))
    points = rng.uniform(0.0, scale, size=(int(n_customers), 2))
    costs = cdist(points, points)
    name = f"euclid_n{n_customers}_p{num_facilities}_seed{seed}"
    return ProblemData(name=name, costs=costs, num_facilities=num_facilities,
                       problem_type=problem_type, objective=objective)
