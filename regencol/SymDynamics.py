"""

Symbolic version of the equations of motion. The residual is written with
sympy, differentiated with symengine and compiled with Lambdify, the same
way the collocation constraints of a generic problem would be. It has the
same interface as DynamicsJacobian.AnalyticDynamics and serves as an
independent check of the hand derived jacobian.
"""

# third party imports
import numpy as np
from symengine import Lambdify
from sympy import Matrix, symbols, sin, cos, tanh

# regencol imports
from .SymUtils import fast_jac, christoffel_forces

def symbolic_residual(model):
	"""
	Build the residual f(z, zdot) as a sympy Matrix.

	Returns
	-------
	(f, z_vars, zdot_vars)
	"""
	q = symbols("q1 q2 q3")
	qd = symbols("q1_dot q2_dot q3_dot")
	u = symbols("u1 u2 u3")
	zdot_vars = symbols("q1_d q2_d q3_d q1_dd q2_dd q3_dd")
	z_vars = list(q) + list(qd) + list(u)

	TH = [float(th) for th in model.TH]
	c2, s2 = cos(q[1]), sin(q[1])
	c3 = cos(q[2])
	c23, s23 = cos(q[1] + q[2]), sin(q[1] + q[2])

	D11 = TH[0] + TH[1]*c2**2 + TH[2]*c23**2 + 2*TH[3]*c2*c23
	D12 = TH[8]*s2 + TH[9]*s23
	D13 = TH[9]*s23
	D22 = TH[4] + 2*TH[3]*c3
	D23 = TH[5] + TH[3]*c3
	D33 = TH[5]
	D = Matrix([[D11, D12, D13],
				[D12, D22, D23],
				[D13, D23, D33]])

	g = Matrix([0, TH[6]*c2 + TH[7]*c23, TH[7]*c23])
	h = Matrix(christoffel_forces(D, q, qd))

	rest = []
	for j in range(3):
		l1, l2, l3, l4, l5 = [float(l) for l in model.lam[j]]
		damping = float(model.B[j] + model.viscous[j])
		F2 = l1*(tanh(l2*qd[j]) - tanh(l3*qd[j])) + l4*tanh(l5*qd[j])
		rest.append(damping*qd[j] + F2 - u[j])

	acc = Matrix(zdot_vars[3:])
	dyn = D * acc + h + g + Matrix(rest)
	f = Matrix([zdot_vars[j] - qd[j] for j in range(3)] + list(dyn))
	return f, z_vars, list(zdot_vars)

class SymbolicDynamics:

	def __init__(self, model):
		self.model = model
		f, z_vars, zdot_vars = symbolic_residual(model)
		all_vars = z_vars + zdot_vars
		self.n_z = len(z_vars)
		self.f_lambda = Lambdify(all_vars, f, order='F')
		self.jac_lambda = Lambdify(all_vars, Matrix(fast_jac(f, all_vars)), order='F')

	def _in(self, z, zdot):
		z = np.asarray(z, dtype=float)
		zdot = np.asarray(zdot, dtype=float)
		if z.ndim == 1:
			return np.hstack((z, zdot)).reshape(-1, 1), True
		return np.vstack((z, zdot)), False

	def eval(self, z: np.array, zdot: np.array)->np.array:
		"""
		Evaluate the residual, z of shape (9[, Nseg]) and zdot of shape (6[, Nseg]).
		"""
		_in, single = self._in(z, zdot)
		f = self.f_lambda(_in).reshape(6, -1)
		return f[:, 0] if single else f

	def jac(self, z: np.array, zdot: np.array)->tuple:
		"""
		Evaluate (dfdz, dfdzdot), both padded to (6, 9[, Nseg]).
		"""
		_in, single = self._in(z, zdot)
		J = self.jac_lambda(_in).reshape(6, self.n_z + 6, -1)
		dfdz = J[:, :self.n_z, :]
		dfdzdot = np.zeros_like(dfdz)
		dfdzdot[:, :6, :] = J[:, self.n_z:, :]
		if single:
			return dfdz[:, :, 0], dfdzdot[:, :, 0]
		return dfdz, dfdzdot
