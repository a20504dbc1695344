"""

Objective function definition: electrical energy drawn from the shared
storage element over the horizon,

	J = h * sum_nodes sum_joints ( -q_dot*u + R/a^2 * u^2 )

Negative contributions are energy regenerated into the storage.
"""

# third party imports
import numpy as np
from scipy.sparse import csr_matrix

class Objective:
	def __init__(self, parent):
		self.N = parent.N
		self.h = parent.config.h
		self.layout = parent.layout

		# R/a^2 broadcast against (N, 3) node arrays
		self.loss_coef = parent.model.loss_coef.reshape(1, -1)

		self.hess_shape = (self.layout.n_vars, self.layout.n_vars)

	# create callback for scipy
	def eval(self, arg: np.array)->float:
		"""
		Evaluate objective function for given value of optimization variable.

		Parameters
		----------
		arg -- optimization variables as 1-D numpy array.

		Returns
		-------
		scalar objective value.
		"""
		_, qd, u = self.layout.unpack(arg)
		return self.h * np.sum(-qd * u + self.loss_coef * u**2)

	def jac(self, arg: np.array)->np.array:
		"""
		Evaluate gradient vector of objective function for given value of optimization variable.

		Parameters
		----------
		arg -- optimization variables as 1-D numpy array.

		Returns
		-------
		gradient vector of object function as 1-D numpy array.
		"""
		_, qd, u = self.layout.unpack(arg)
		jac = np.zeros(self.layout.n_vars)
		V = self.layout.nodes(jac)
		V[:, 3:6] = -self.h * u
		V[:, 6:9] = self.h * (-qd + 2.0 * self.loss_coef * u)
		return jac

	def hess(self, arg: np.array)->csr_matrix:
		"""
		Constant hessian of the objective: h*2R/a^2 on the controls and -h on
		the q_dot, u cross terms.
		"""
		qd_idx = self.layout.qd_idx.T.ravel()
		u_idx = self.layout.u_idx.T.ravel()
		diag = np.tile(2.0 * self.h * self.loss_coef.ravel(), self.N)
		cross = -self.h * np.ones(u_idx.size)
		rows = np.hstack((u_idx, qd_idx, u_idx))
		cols = np.hstack((u_idx, u_idx, qd_idx))
		return csr_matrix((np.hstack((diag, cross, cross)), (rows, cols)), shape=self.hess_shape)
