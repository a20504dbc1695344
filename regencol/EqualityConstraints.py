"""

Equality constraint definition: dynamics defects of every segment followed
by the initial and terminal state residuals.
"""

# third party imports
import numpy as np
from scipy.sparse import csr_matrix
from typing import Union

# regencol imports
from .CollocMethods import get_discretization, X_DIM

class EqualityConstraints:
	def __init__(self, parent, rng: np.random.Generator):
		self.N = parent.N
		self.h = parent.config.h
		self.colloc_method = parent.config.colloc_method

		self.layout = parent.layout
		self.Opt_dim = self.layout.block_size
		self.X_start = parent.config.X_start
		self.X_goal = parent.config.X_goal

		self.dynamics = parent.dynamics

		# the discretization is chosen once and applied to every segment
		self._point, self._jac_blocks = get_discretization(self.colloc_method)

		self.ncon = self.layout.n_con
		self.jac_shape = (self.ncon, self.layout.n_vars)

		# finding out which entries of the constraint jacobian are structurally
		# nonzero. The structure does not depend on the numbers, one random
		# probe is enough.
		x_probe = rng.uniform(-1.0, 1.0, self.layout.n_vars)
		self._block_mask, rows, cols = self._structure(x_probe)
		self.jac_sparse_indices = (rows, cols)
		self.jac_size = rows.size

	def _segments(self, arg):
		V = self.layout.nodes(arg)
		# (9, N-1) stacks of earlier and later nodes
		return V[:-1, :].T, V[1:, :].T

	def eval(self, arg: np.array)->np.array:
		"""
		Evaluate equality constraints for given value of optimization variable.

		Parameters
		----------
		arg -- optimization variables as 1-D numpy array.

		Returns
		-------
		vector of equality constraint residuals as 1-D numpy array.
		"""

		V_prev, V_next = self._segments(arg)
		z, zdot = self._point(V_prev, V_next, self.h)
		_out = self.dynamics.eval(z, zdot).T.ravel()

		V = self.layout.nodes(arg)
		initial_constr = V[0, :X_DIM] - self.X_start
		terminal_constr = V[-1, :X_DIM] - self.X_goal
		return np.hstack((_out, initial_constr, terminal_constr))

	def _blocks(self, arg):
		# (N-1, 6, 18) dense derivative of each defect w.r.t. its two nodes
		V_prev, V_next = self._segments(arg)
		z, zdot = self._point(V_prev, V_next, self.h)
		dfdz, dfdzdot = self.dynamics.jac(z, zdot)
		J_prev, J_next = self._jac_blocks(dfdz, dfdzdot, self.h)
		return np.concatenate((J_prev, J_next), axis=1).transpose(2, 0, 1)

	def _structure(self, arg):
		block_mask = self._blocks(arg) != 0
		seg, r, c = np.nonzero(block_mask)
		rows = seg * X_DIM + r
		cols = seg * self.Opt_dim + c

		# initial and terminal constraint gradients are easy
		start = X_DIM * (self.N - 1)
		rows = np.hstack((rows, np.arange(start, start + 2 * X_DIM)))
		cols = np.hstack((cols, np.arange(X_DIM), (self.N - 1) * self.Opt_dim + np.arange(X_DIM)))
		return block_mask, rows, cols

	def jac(self, arg: np.array, return_sparse_indices: bool = False)->Union[tuple, csr_matrix]:
		"""
		Evaluate jacobian of equality constraints for given value of optimization variable.

		Parameters
		----------
		arg -- optimization variables as 1-D numpy array.
		return_sparse_indices -- if True return a tuple of the row, column indices of the non-zero entries of the jacobian matrix at arg. if False, return the actual jacobian on the stored sparsity pattern.

		Returns
		-------
		jacobian matrix of equality constraint residuals as a scipy sparse matrix (specifically a csr_matrix).
		OR
		tuple of (row,col) indices of non-zero elements of jacobian matrix
		"""

		if return_sparse_indices:
			_, rows, cols = self._structure(arg)
			return rows, cols
		else:
			return csr_matrix((self.jac_values(arg), self.jac_sparse_indices), shape=self.jac_shape)

	def jac_values(self, arg: np.array)->np.array:
		"""
		Nonzero values of the jacobian, in the order of jac_sparse_indices.
		"""
		blocks = self._blocks(arg)
		return np.hstack((blocks[self._block_mask], np.ones(2 * X_DIM)))

	def jac_structure(self)->tuple:
		"""
		(rows, cols) of the fixed sparsity pattern, computed at construction.
		"""
		return self.jac_sparse_indices

	def sparsity_pattern(self)->csr_matrix:
		"""
		Boolean mask of the structurally nonzero jacobian entries.
		"""
		return csr_matrix((np.ones(self.jac_size, dtype=bool), self.jac_sparse_indices), shape=self.jac_shape)
