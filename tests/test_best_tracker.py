from types import SimpleNamespace

import pytest

from optimizer.base import (Candidate, Comparator, ConfigurationError, ObjectiveType,
                            global_best, update_universal_best)


def _swarm(*fitness):
    return [SimpleNamespace(fitness=f, tag=i) for i, f in enumerate(fitness)]


def test_global_best_minimize_and_maximize():
    swarm = _swarm(7.0, 3.0, 9.0, 5.0)
    assert global_best(swarm, Comparator(ObjectiveType.MINIMIZE)).tag == 1
    assert global_best(swarm, Comparator(ObjectiveType.MAXIMIZE)).tag == 2


def test_global_best_tie_keeps_first_encountered():
    swarm = _swarm(4.0, 2.0, 2.0, 2.0)
    assert global_best(swarm, Comparator("minimize")).tag == 1
    swarm = _swarm(8.0, 8.0, 1.0)
    assert global_best(swarm, Comparator("maximize")).tag == 0


def test_global_best_accepts_direction_and_rejects_unknown():
    swarm = _swarm(1.0, 2.0)
    assert global_best(swarm, "maximize").tag == 1
    with pytest.raises(ConfigurationError):
        global_best(swarm, "upwards")


def test_global_best_empty_swarm():
    with pytest.raises(ValueError):
        global_best([], Comparator("minimize"))


def test_universal_best_only_replaced_when_strictly_better():
    c = Comparator("minimize")
    current = Candidate(position=(0, 1), fitness=5.0)
    same = Candidate(position=(2, 3), fitness=5.0)
    better = Candidate(position=(4, 5), fitness=4.0)
    worse = Candidate(position=(1, 2), fitness=6.0)

    assert update_universal_best(current, same, c) is current
    assert update_universal_best(current, worse, c) is current
    assert update_universal_best(current, better, c) is better
    assert update_universal_best(None, worse, c) is worse


def test_universal_best_never_regresses():
    for direction, seq in [("minimize", [9, 7, 8, 7, 3, 4, 10]), ("maximize", [1, 4, 2, 6, 6, 0])]:
        c = Comparator(direction)
        best = None
        trace = []
        for i, f in enumerate(seq):
            best = update_universal_best(best, Candidate(position=(i,), fitness=float(f)), c)
            trace.append(best.fitness)
        for prev, nxt in zip(trace, trace[1:]):
            assert not c.better(prev, nxt)


def test_candidate_is_frozen():
    cand = Candidate(position=(1, 2), fitness=3.0)
    with pytest.raises(AttributeError):
        cand.fitness = 0.0
