"""Shared fixtures for the regencol tests."""

import matplotlib
import numpy as np
import pytest

matplotlib.use("Agg")

from regencol.CollocMethods import BACKWARD_EULER, MIDPOINT
from regencol.ProblemConfig import ProblemConfig
from regencol.ProblemDefinition import CollocationProblem
from regencol.RobotModel import RobotModel

X_START = np.array([0.1, -0.4, 0.8, 0.0, 0.0, 0.0])
X_GOAL = np.array([1.2, 0.3, -0.2, 0.0, 0.0, 0.0])


@pytest.fixture
def model():
    return RobotModel()


@pytest.fixture(params=[BACKWARD_EULER, MIDPOINT], ids=["euler-backward", "midpoint"])
def colloc_method(request):
    return request.param


@pytest.fixture
def make_problem(model):
    """Factory for small problems, silent and seeded."""

    def _make(N=4, colloc_method=BACKWARD_EULER, X_start=X_START, X_goal=X_GOAL, seed=0, **kwargs):
        config = ProblemConfig(N, 0.0, 1.0, X_start, X_goal, colloc_method)
        return CollocationProblem(config, kwargs.pop("model", model), seed=seed, verbose=False, **kwargs)

    return _make
