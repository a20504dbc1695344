"""

Check the hand derived jacobian of the arm against finite differences and
against the symbolic backend, for both collocation methods.

"""

import sys
sys.path.insert(0, '..')

import numpy as np

from regencol.CollocMethods import *
from regencol.DerivCheck import check_derivatives, fd_dynamics_jacobian
from regencol.DynamicsJacobian import AnalyticDynamics
from regencol.ProblemConfig import ProblemConfig
from regencol.ProblemDefinition import CollocationProblem
from regencol.RobotModel import RobotModel
from regencol.SymDynamics import SymbolicDynamics

if __name__ == "__main__":

	rng = np.random.default_rng(1)
	model = RobotModel()

	z = rng.uniform(-1, 1, 9)
	zdot = rng.uniform(-1, 1, 6)

	analytic = AnalyticDynamics(model)
	symbolic = SymbolicDynamics(model)

	dfdz, dfdzdot = analytic.jac(z, zdot)
	fd_dfdz, fd_dfdzdot = fd_dynamics_jacobian(analytic, z, zdot)
	sym_dfdz, sym_dfdzdot = symbolic.jac(z, zdot)

	print("analytic vs finite difference:", np.abs(dfdz - fd_dfdz).max(), np.abs(dfdzdot - fd_dfdzdot).max())
	print("analytic vs symbolic:", np.abs(dfdz - sym_dfdz).max(), np.abs(dfdzdot - sym_dfdzdot).max())

	X_start = np.zeros(6)
	X_goal = np.array([1, 0.5, -0.5, 0, 0, 0])
	for colloc_method in [BACKWARD_EULER, MIDPOINT]:
		config = ProblemConfig(10, 0, 1, X_start, X_goal, colloc_method)
		problem = CollocationProblem(config, model, seed=2)
		x = problem.initial_guess()
		print(METHOD_NAMES[colloc_method], check_derivatives(problem, x))
