"""

Definition of the regenerative arm direct collocation problem, and the
adapter that hands its callbacks to an NLP solver.
"""

# third party imports
try:
	import ipyopt
	_ipyopt_imported = True
except ImportError:
	_ipyopt_imported = False

import matplotlib.pyplot as plt
import numpy as np
from scipy.optimize import minimize, NonlinearConstraint, BFGS
from scipy.integrate import solve_ivp
from sympy.core.function import BadArgumentsError

# regencol imports
from .Objective import Objective
from .EqualityConstraints import EqualityConstraints
from .CollocMethods import METHOD_NAMES
from .Dynamics import forward_dynamics
from .DynamicsJacobian import AnalyticDynamics
from .SymDynamics import SymbolicDynamics
from .RobotModel import RobotModel
from .Solution import Solution
from .VariableLayout import VariableLayout

DERIV_METHODS = {
	"analytic": AnalyticDynamics,
	"symbolic": SymbolicDynamics,
}

# stand-in for an infinite bound
INF_BOUND = 1e9

class CollocationProblem:

	def __init__(self,
				config,
				model=None,
				deriv_method="analytic",
				seed=None,
				rng=None,
				state_range=np.pi,
				verbose=True):

		if deriv_method not in DERIV_METHODS:
			raise ValueError("Unsupported derivative method: {}".format(deriv_method))

		self.config = config
		self.model = model if model is not None else RobotModel()
		self.deriv_method = deriv_method
		self.state_range = state_range
		self.verbose = verbose
		self.rng = rng if rng is not None else np.random.default_rng(seed)

		self.N = config.N
		self.layout = VariableLayout(self.N)
		self.X_dim = 6
		self.U_dim = 3

		self._print("Setup ({}, N={})".format(METHOD_NAMES[config.colloc_method], self.N))
		self.dynamics = DERIV_METHODS[deriv_method](self.model)

		# Compile objective and equality constraints
		self.objective = Objective(self)
		self.equality_constr = EqualityConstraints(self, self.rng)
		self._print("Jacobian structure: {} nonzeros".format(self.equality_constr.jac_size))

		self.sol_c = None
		self.is_solved = False

	def _print(self, msg):
		if self.verbose:
			print(msg)

	def bounds(self)->list:
		"""
		Per-node variable bounds as [lower, upper] pairs, None for unbounded.
		Joint angles and velocities are free, each control is limited by what
		the drive can deliver at the storage voltage.
		"""
		u_max = self.model.u_max
		return [[None, None]] * self.X_dim + [[-u_max[j], u_max[j]] for j in range(self.U_dim)]

	def variable_bounds(self)->tuple:
		"""
		Bounds over the whole optimization vector as (x_L, x_U) arrays.
		"""
		x_L = np.zeros(self.layout.n_vars)
		x_U = np.zeros(self.layout.n_vars)
		v_idx = 0
		for i in range(self.N):
			for b_pair in self.bounds():
				x_L[v_idx] = -INF_BOUND if b_pair[0] is None else b_pair[0]
				x_U[v_idx] = INF_BOUND if b_pair[1] is None else b_pair[1]
				v_idx += 1
		return x_L, x_U

	def constraint_bounds(self)->tuple:
		"""
		All constraints are equalities, lower = upper = 0.
		"""
		ncon = self.layout.n_con
		return np.zeros(ncon), np.zeros(ncon)

	def initial_guess(self, rng: np.random.Generator = None)->np.array:
		"""
		Random starting point: states drawn uniformly from
		[-state_range, state_range], controls uniformly within their bounds.
		"""
		rng = rng if rng is not None else self.rng
		u_max = self.model.u_max
		states = rng.uniform(-self.state_range, self.state_range, (self.N, self.X_dim))
		controls = rng.uniform(-u_max, u_max, (self.N, self.U_dim))
		return np.hstack((states, controls)).ravel()

	def solve(self, x0: np.array = None, solver: str = 'ipopt', max_iter: int = 3000, tol: float = 1e-8, strict: bool = False)->Solution:
		"""
		Solve the direct collocation problem as a nonlinear program.

		Parameters
		----------
		x0 -- initial guess for solution, random (see initial_guess) if None
		solver -- which optimizer to use (options: ipopt, scipy)
		max_iter -- iteration limit handed to the solver
		tol -- convergence tolerance handed to the solver
		strict -- if True raise RuntimeError when the solver does not converge

		Returns
		-------
		regencol.Solution containing solution and problem metadata
		"""

		self.is_solved = False

		if x0 is None:
			x0 = self.initial_guess()
		x0 = np.asarray(x0, dtype=float)

		self._print("Solve ({})".format(solver))
		if solver == 'ipopt':
			if not _ipyopt_imported:
				raise(ImportError("Ipyopt could not be imported! Please use scipy solver."))

			x_L, x_U = self.variable_bounds()
			g_L, g_U = self.constraint_bounds()
			jac_g_idx = self.equality_constr.jac_structure()

			# the hessian is approximated by the solver (limited-memory quasi-Newton)
			h_idx = (np.array([], dtype=int), np.array([], dtype=int))

			def eval_grad_f(x, out):
				out[()] = self.objective.jac(x)
				return out

			def eval_g(x, out):
				out[()] = self.equality_constr.eval(x)
				return out

			def eval_jac_g(x, out):
				out[()] = self.equality_constr.jac_values(x)
				return out

			nlp = ipyopt.Problem(self.layout.n_vars, x_L, x_U,
								 self.layout.n_con, g_L, g_U,
								 jac_g_idx, h_idx,
								 self.objective.eval, eval_grad_f,
								 eval_g, eval_jac_g)
			nlp.set(print_level=0,
					hessian_approximation="limited-memory",
					max_iter=max_iter,
					tol=tol)
			sol_x, obj, status = nlp.solve(x0)
			success = (status == 0) or (status == 1) # solver either succeeded or converged to acceptable accuracy
		elif solver == 'scipy':
			_bounds = self.bounds() * self.N

			# Problem constraints
			constr_eq = NonlinearConstraint(self.equality_constr.eval,
											lb=0,
											ub=0,
											jac=self.equality_constr.jac,
											hess=BFGS())

			# Solve Problem
			sol_opt = minimize(self.objective.eval,
							x0,
							method="trust-constr",
							jac=self.objective.jac,
							hess=self.objective.hess,
							constraints=(constr_eq),
							bounds=_bounds,
							options={'sparse_jacobian': True,
									 'maxiter': max_iter,
									 'gtol': tol})
			sol_x = sol_opt.x
			status = sol_opt.status
			success = sol_opt.success
		else:
			raise(BadArgumentsError("Error unsupported solver!"))

		# convert solver output to our format
		self.sol_c = Solution(sol_x, self, status, success, solver)
		self.is_solved = self.sol_c.success

		self._print("Done")
		if self.is_solved:
			self._print("Success :-)")
		else:
			self._print("Failure :-( status {}".format(status))
			if strict:
				raise RuntimeError("{} did not converge, status {}".format(solver, status))

		return self.sol_c

	def evaluate(self, ivp_method: str = 'RK45', plot: bool = True):
		"""
		Compare the direct collocation solution to an IVP solution generated
		by applying the collocated U from the initial condition from t0 to tf.

		Parameters
		----------
		ivp_method -- string representing ivp solution method to use
		plot -- draw collocation points against the integrated trajectory

		Returns
		-------
		scipy OdeResult of the integration
		"""

		if self.sol_c is None:
			raise RuntimeError("Problem has not been solved yet")

		tspan = self.sol_c.t

		def system_eqs(t, x_t):
			return forward_dynamics(x_t, self.sol_c.u_t(t), self.model)

		eval_tspan = np.linspace(tspan[0], tspan[-1], 100)
		sol_ivp = solve_ivp(system_eqs, [tspan[0], tspan[-1]], self.config.X_start, method=ivp_method, t_eval=eval_tspan)

		if plot:
			# collocated nodes on the solution's own figure, integrated states on top
			fig = self.sol_c.plot(title="Collocation nodes vs. integrated trajectory", show=False)
			axs = fig.axes
			colors = ['k', 'g', 'b']
			U_t = self.sol_c.u_t(sol_ivp.t)
			for j in range(self.U_dim):
				axs[0].plot(sol_ivp.t, sol_ivp.y[j, :], '--', color=colors[j])
				axs[1].plot(sol_ivp.t, sol_ivp.y[3 + j, :], '--', color=colors[j])
				axs[2].plot(sol_ivp.t, U_t[:, j], '--', color=colors[j])
			axs[1].plot([], [], '-o', color='k', label='nodes')
			axs[1].plot([], [], '--', color='k', label='IVP ({})'.format(ivp_method))
			axs[1].legend()

			plt.show()

		return sol_ivp

def solve_round_trip(config, model=None, solver: str = 'ipopt', seed=None, deriv_method: str = "analytic", verbose: bool = True, **solve_kwargs)->tuple:
	"""
	Solve the forward (A -> B) and reverse (B -> A) problems. Each run starts
	from its own random initial guess, drawn from one seeded generator.
	Solver failures are reported in the returned solutions, not retried.

	Returns
	-------
	(forward, reverse) regencol.Solution pair
	"""
	rng = np.random.default_rng(seed)
	sols = []
	for cfg in (config, config.swapped()):
		problem = CollocationProblem(cfg, model, deriv_method=deriv_method, rng=rng, verbose=verbose)
		sols.append(problem.solve(problem.initial_guess(), solver=solver, **solve_kwargs))
	return sols[0], sols[1]
