"""Tests for the solver adapter."""

import types

import numpy as np
import pytest
from sympy.core.function import BadArgumentsError

from regencol import ProblemDefinition
from regencol.CollocMethods import MIDPOINT
from regencol.ProblemConfig import ProblemConfig
from regencol.ProblemDefinition import CollocationProblem, solve_round_trip

from conftest import X_GOAL, X_START


def test_bounds(make_problem, model):
    problem = make_problem(N=3)
    bounds = problem.bounds()
    assert len(bounds) == 9
    assert all(b == [None, None] for b in bounds[:6])
    for j in range(3):
        assert bounds[6 + j] == [-model.u_max[j], model.u_max[j]]

    x_L, x_U = problem.variable_bounds()
    assert x_L.size == x_U.size == problem.layout.n_vars
    np.testing.assert_allclose(x_U[problem.layout.u_idx[1]], model.u_max[1])
    assert np.all(x_L[problem.layout.q_idx.ravel()] <= -1e9)

    g_L, g_U = problem.constraint_bounds()
    assert g_L.size == problem.layout.n_con
    np.testing.assert_array_equal(g_L, g_U)
    np.testing.assert_array_equal(g_L, 0.0)


def test_initial_guess_reproducible_and_bounded(make_problem, model):
    a = make_problem(N=10, seed=4).initial_guess()
    b = make_problem(N=10, seed=4).initial_guess()
    np.testing.assert_array_equal(a, b)

    problem = make_problem(N=10, seed=5)
    x = problem.initial_guess()
    u = x[problem.layout.u_idx]
    assert np.all(np.abs(u) <= model.u_max.reshape(-1, 1))
    q = x[problem.layout.q_idx]
    assert np.all(np.abs(q) <= problem.state_range)


def test_unknown_deriv_method(make_problem):
    with pytest.raises(ValueError):
        make_problem(deriv_method="numeric")


def test_unknown_solver(make_problem):
    with pytest.raises(BadArgumentsError):
        make_problem().solve(solver="snopt")


def test_ipopt_missing(make_problem, monkeypatch):
    monkeypatch.setattr(ProblemDefinition, "_ipyopt_imported", False)
    with pytest.raises(ImportError):
        make_problem().solve(solver="ipopt")


def test_scipy_failure_is_reported_not_raised(make_problem):
    problem = make_problem(N=4)
    sol = problem.solve(solver="scipy", max_iter=1)
    assert not sol.success
    assert not problem.is_solved
    assert sol.x.shape == (4, 6)
    assert sol.u.shape == (4, 3)


def test_strict_raises_on_failure(make_problem):
    with pytest.raises(RuntimeError):
        make_problem(N=4).solve(solver="scipy", max_iter=1, strict=True)


def test_round_trip_swaps_boundaries():
    config = ProblemConfig(4, 0.0, 1.0, X_START, X_GOAL, MIDPOINT)
    forward, reverse = solve_round_trip(config, solver="scipy", seed=0, verbose=False, max_iter=1)
    np.testing.assert_array_equal(forward.config.X_start, X_START)
    np.testing.assert_array_equal(reverse.config.X_start, X_GOAL)
    np.testing.assert_array_equal(reverse.config.X_goal, X_START)
    # independent random starting points
    assert not np.array_equal(forward.opt_x, reverse.opt_x)


def test_ipopt_solves_short_move(model):
    pytest.importorskip("ipyopt")
    X_goal = np.array([0.3, 0.1, -0.1, 0.0, 0.0, 0.0])
    config = ProblemConfig(15, 0.0, 1.0, np.zeros(6), X_goal, MIDPOINT)
    problem = CollocationProblem(config, model, seed=0, verbose=False)
    sol = problem.solve(solver="ipopt")
    assert isinstance(int(sol.status), int)
    if sol.success:
        g = problem.equality_constr.eval(sol.opt_x)
        assert np.max(np.abs(g)) < 1e-5
        np.testing.assert_allclose(sol.x[0], np.zeros(6), atol=1e-6)
        np.testing.assert_allclose(sol.x[-1], X_goal, atol=1e-6)


class FakeIpoptProblem:
    """Stands in for ipyopt.Problem: runs each callback once on x0."""

    def __init__(self, n, x_L, x_U, m, g_L, g_U, jac_g_idx, h_idx, eval_f, eval_grad_f, eval_g, eval_jac_g):
        self.n, self.m = n, m
        self.jac_g_idx, self.h_idx = jac_g_idx, h_idx
        self.callbacks = (eval_f, eval_grad_f, eval_g, eval_jac_g)
        self.options = {}
        self.buffers = {}

    def set(self, **options):
        self.options.update(options)

    def solve(self, x0):
        eval_f, eval_grad_f, eval_g, eval_jac_g = self.callbacks
        obj = eval_f(x0)
        self.buffers["grad_f"] = eval_grad_f(x0, np.empty(self.n))
        self.buffers["g"] = eval_g(x0, np.empty(self.m))
        self.buffers["jac_g"] = eval_jac_g(x0, np.empty(len(self.jac_g_idx[0])))
        return x0.copy(), obj, 0


@pytest.fixture
def fake_ipyopt(monkeypatch):
    created = []

    def _problem(*args):
        nlp = FakeIpoptProblem(*args)
        created.append(nlp)
        return nlp

    monkeypatch.setattr(ProblemDefinition, "ipyopt", types.SimpleNamespace(Problem=_problem), raising=False)
    monkeypatch.setattr(ProblemDefinition, "_ipyopt_imported", True)
    return created


def test_ipopt_callbacks_fill_buffers(make_problem, fake_ipyopt, colloc_method):
    problem = make_problem(N=5, colloc_method=colloc_method)
    x0 = problem.initial_guess()
    sol = problem.solve(x0, solver="ipopt", max_iter=7)

    nlp, = fake_ipyopt
    constr = problem.equality_constr
    assert nlp.n == problem.layout.n_vars
    assert nlp.m == problem.layout.n_con
    rows, cols = constr.jac_structure()
    np.testing.assert_array_equal(nlp.jac_g_idx[0], rows)
    np.testing.assert_array_equal(nlp.jac_g_idx[1], cols)
    assert nlp.h_idx[0].size == 0
    assert nlp.options["hessian_approximation"] == "limited-memory"
    assert nlp.options["max_iter"] == 7

    assert nlp.buffers["grad_f"].size == problem.layout.n_vars
    assert nlp.buffers["g"].size == constr.ncon
    assert nlp.buffers["jac_g"].size == constr.jac_size
    np.testing.assert_array_equal(nlp.buffers["grad_f"], problem.objective.jac(x0))
    np.testing.assert_array_equal(nlp.buffers["g"], constr.eval(x0))
    np.testing.assert_array_equal(nlp.buffers["jac_g"], constr.jac_values(x0))

    assert sol.success and problem.is_solved
    assert sol.solver == "ipopt"
    np.testing.assert_array_equal(sol.opt_x, x0)


def test_evaluate_integrates_from_start(make_problem, fake_ipyopt, monkeypatch):
    problem = make_problem(N=4)
    with pytest.raises(RuntimeError):
        problem.evaluate(plot=False)

    problem.solve(np.zeros(problem.layout.n_vars), solver="ipopt")
    monkeypatch.setattr(ProblemDefinition.plt, "show", lambda: None)
    sol_ivp = problem.evaluate(plot=True)
    np.testing.assert_allclose(sol_ivp.y[:, 0], X_START)
    assert sol_ivp.y.shape[0] == 6

    fig = ProblemDefinition.plt.gcf()
    assert len(fig.axes) == 4
    ProblemDefinition.plt.close(fig)
