"""

Finite difference checks of the analytic derivatives. Diagnostic only, the
solver never calls anything in here.
"""

# third party imports
import numpy as np

def fd_jacobian(fun, x: np.array, eps: float = 1e-6)->np.array:
	"""
	Dense central difference jacobian of a vector function.

	Parameters
	----------
	fun -- callable mapping a 1-D array to a 1-D array
	x -- point of evaluation
	eps -- perturbation size

	Returns
	-------
	jacobian of shape (fun(x).size, x.size)
	"""
	x = np.asarray(x, dtype=float)
	f0 = np.atleast_1d(fun(x))
	J = np.zeros((f0.size, x.size))
	for k in range(x.size):
		dx = np.zeros(x.size)
		dx[k] = eps
		J[:, k] = (np.atleast_1d(fun(x + dx)) - np.atleast_1d(fun(x - dx))) / (2 * eps)
	return J

def fd_dynamics_jacobian(dynamics, z: np.array, zdot: np.array, eps: float = 1e-6)->tuple:
	"""
	Central difference approximation of the blocks returned by dynamics.jac.

	Returns
	-------
	(dfdz, dfdzdot), both (6, 9), dfdzdot zero in the control columns
	"""
	z = np.asarray(z, dtype=float)
	zdot = np.asarray(zdot, dtype=float)
	dfdz = fd_jacobian(lambda v: dynamics.eval(v, zdot), z, eps)
	dfdzdot = np.zeros_like(dfdz)
	dfdzdot[:, :zdot.size] = fd_jacobian(lambda v: dynamics.eval(z, v), zdot, eps)
	return dfdz, dfdzdot

def check_derivatives(problem, x: np.array, eps: float = 1e-6, rtol: float = 1e-4, atol: float = 1e-6)->dict:
	"""
	Compare objective gradient and constraint jacobian of a CollocationProblem
	against central differences at x.

	Returns
	-------
	dict with the largest absolute error of each, and whether both are within
	atol + rtol * |fd|
	"""
	x = np.asarray(x, dtype=float)

	grad = problem.objective.jac(x)
	grad_fd = fd_jacobian(problem.objective.eval, x, eps).ravel()

	jac = problem.equality_constr.jac(x).toarray()
	jac_fd = fd_jacobian(problem.equality_constr.eval, x, eps)

	grad_ok = np.all(np.abs(grad - grad_fd) <= atol + rtol * np.abs(grad_fd))
	jac_ok = np.all(np.abs(jac - jac_fd) <= atol + rtol * np.abs(jac_fd))
	return {"grad_error": float(np.max(np.abs(grad - grad_fd))),
			"jac_error": float(np.max(np.abs(jac - jac_fd))),
			"ok": bool(grad_ok and jac_ok)}
