import numpy as np
import pytest

from benchmarks.problem import ProblemData
from optimizer.base import RunListener

# two clusters on a line: {0, 1, 2} and {10, 11, 12}
LINE_POINTS = np.array([0.0, 1.0, 2.0, 10.0, 11.0, 12.0])


class RecordingListener(RunListener):
    def __init__(self):
        self.configured = []
        self.progress = []
        self.completed = []

    def on_configured(self, parameters, data, metadata=None):
        self.configured.append((dict(parameters), data, dict(metadata or {})))

    def on_progress(self, best, iteration):
        self.progress.append((best, iteration))

    def on_completed(self, results):
        self.completed.append(results)


def line_costs() -> np.ndarray:
    return np.abs(LINE_POINTS[:, None] - LINE_POINTS[None, :])


@pytest.fixture
def line_problem():
    # p-median optimum: sites 1 and 4, total cost 4
    return ProblemData(name="line6", costs=line_costs(), num_facilities=2, problem_type="pmedian")


@pytest.fixture
def line_maxian():
    return ProblemData(name="line6_max", costs=line_costs(), num_facilities=2, problem_type="pmaxian")


@pytest.fixture
def listener():
    return RecordingListener()


@pytest.fixture
def second_listener():
    return RecordingListener()
