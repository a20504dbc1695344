"""

Layout of the flat optimization vector.

Each node owns a contiguous block of 9 values in time order:
[q1, q2, q3, q1_dot, q2_dot, q3_dot, u1, u2, u3]
"""

# third party imports
import numpy as np

# regencol imports
from .CollocMethods import X_DIM, U_DIM

N_JOINTS = 3
BLOCK_SIZE = X_DIM + U_DIM

class VariableLayout:

	def __init__(self, N: int):
		if int(N) != N or N < 2:
			raise ValueError("Need at least 2 nodes, got N={}".format(N))
		self.N = int(N)
		self.block_size = BLOCK_SIZE
		self.n_vars = self.N * BLOCK_SIZE
		self.n_con = X_DIM * (self.N - 1) + 2 * X_DIM

		node_start = np.arange(self.N) * BLOCK_SIZE
		offsets = np.arange(N_JOINTS).reshape(-1, 1)

		# (3, N) index arrays, row j picks joint j at every node
		self.q_idx = node_start + offsets
		self.qd_idx = node_start + N_JOINTS + offsets
		self.u_idx = node_start + X_DIM + offsets
		for idx in (self.q_idx, self.qd_idx, self.u_idx):
			idx.setflags(write=False)

	def state_idx(self, node: int)->np.array:
		"""
		Indices of the 6 state values (positions, velocities) of a node.
		"""
		if node < 0:
			node += self.N
		start = node * BLOCK_SIZE
		return np.arange(start, start + X_DIM)

	def nodes(self, x: np.array)->np.array:
		"""
		View the optimization vector as an (N, 9) array of node blocks.
		"""
		return np.asarray(x).reshape(self.N, BLOCK_SIZE)

	def unpack(self, x: np.array)->tuple:
		"""
		Split the optimization vector into (q, qd, u), each of shape (N, 3).
		"""
		V = self.nodes(x)
		return V[:, :N_JOINTS], V[:, N_JOINTS:X_DIM], V[:, X_DIM:]

	def pack(self, q: np.array, qd: np.array, u: np.array)->np.array:
		"""
		Inverse of unpack.
		"""
		return np.hstack((q, qd, u)).ravel()
