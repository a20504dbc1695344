"""Tests for the energy objective."""

import numpy as np

from regencol.DerivCheck import check_derivatives, fd_jacobian


def test_zero_vector_has_zero_energy(make_problem, colloc_method):
    problem = make_problem(N=6, colloc_method=colloc_method)
    x = np.zeros(problem.layout.n_vars)
    assert problem.objective.eval(x) == 0.0
    np.testing.assert_array_equal(problem.objective.jac(x), np.zeros(x.size))


def test_objective_by_hand(make_problem, model):
    problem = make_problem(N=3)
    x = problem.initial_guess()
    V = problem.layout.nodes(x)
    h = problem.config.h
    expected = 0.0
    for i in range(3):
        for j in range(3):
            v, u = V[i, 3 + j], V[i, 6 + j]
            expected += h * (-v * u + model.R[j] / model.a[j]**2 * u**2)
    np.testing.assert_allclose(problem.objective.eval(x), expected, rtol=1e-12)


def test_regeneration_lowers_energy(make_problem):
    """Braking (control opposing velocity) returns energy to the storage."""
    problem = make_problem(N=2)
    x = np.zeros(problem.layout.n_vars)
    x[problem.layout.qd_idx[0]] = 5.0
    x[problem.layout.u_idx[0]] = 1.0
    assert problem.objective.eval(x) < 0.0


def test_gradient_sparsity(make_problem):
    problem = make_problem(N=4)
    grad = problem.objective.jac(problem.initial_guess())
    np.testing.assert_array_equal(grad[problem.layout.q_idx.ravel()], 0.0)
    assert np.all(grad[problem.layout.u_idx.ravel()] != 0.0)


def test_gradient_and_hessian_match_finite_differences(make_problem):
    problem = make_problem(N=4)
    x = problem.initial_guess()
    grad_fd = fd_jacobian(problem.objective.eval, x).ravel()
    np.testing.assert_allclose(problem.objective.jac(x), grad_fd, rtol=1e-6, atol=1e-5)

    hess_fd = fd_jacobian(problem.objective.jac, x)
    np.testing.assert_allclose(problem.objective.hess(x).toarray(), hess_fd, rtol=1e-6, atol=1e-6)


def test_check_derivatives_reports_ok(make_problem, colloc_method):
    problem = make_problem(N=5, colloc_method=colloc_method)
    report = check_derivatives(problem, problem.initial_guess())
    assert report["ok"], report
