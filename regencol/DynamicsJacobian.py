"""

Closed form partial derivatives of the equations of motion in Dynamics.py.

Both blocks are returned padded to (6, 9, ...) so that they can be combined
directly by the discretization formulas: dfdzdot is zero in the control
columns and only carries the [q_dot, q_ddot] part.
"""

# third party imports
import numpy as np

# regencol imports
from .Dynamics import InertiaTerms, residual, _col

def _friction_slope(qd, lam):
	# d/dv tanh(k v) = k (1 - tanh(k v)^2)
	l1, l2, l3, l4, l5 = [_col(lam[:, k], qd) for k in range(5)]
	sech2 = lambda k: 1.0 - np.tanh(k * qd)**2
	return l1 * (l2 * sech2(l2) - l3 * sech2(l3)) + l4 * l5 * sech2(l5)

def jacobian(z: np.array, zdot: np.array, model)->tuple:
	"""
	Evaluate the jacobian blocks of the implicit equations of motion.

	Parameters
	----------
	z -- evaluation point [q, q_dot, u], shape (9, ...)
	zdot -- derivative of the state [q_dot, q_ddot], shape (6, ...)
	model -- RobotModel

	Returns
	-------
	(dfdz, dfdzdot), both of shape (6, 9, ...)
	"""
	z = np.asarray(z, dtype=float)
	zdot = np.asarray(zdot, dtype=float)
	TH = model.TH
	q = z[0:3]
	qd = z[3:6]
	v1, v2, v3 = qd[0], qd[1], qd[2]
	a1, a2, a3 = zdot[3], zdot[4], zdot[5]

	T = InertiaTerms(q, TH)

	# second derivatives of D11, D12/D13, D22/D23
	A_2 = -2 * TH[1] * T.c_2q2 - 2 * TH[2] * T.c_2q23 - 4 * TH[3] * T.c_2q2q3
	A_3 = -2 * TH[2] * T.c_2q23 - 2 * TH[3] * T.c_2q2q3
	Bq_2 = A_3
	Bq_3 = -2 * TH[2] * T.c_2q23 - TH[3] * (T.c_2q2q3 + T.c3)
	P_2 = -TH[8] * T.s2 - TH[9] * T.s23
	P_3 = -TH[9] * T.s23
	Q_2 = -TH[9] * T.s23
	Q_3 = Q_2
	E_3 = -2 * TH[3] * T.c3
	F_3 = -TH[3] * T.c3

	vv = 2 * v2 * v3 + v3**2

	shape = (6, 9) + z.shape[1:]
	dfdz = np.zeros(shape)
	dfdzdot = np.zeros(shape)

	# kinematic rows
	for j in range(3):
		dfdz[j, 3 + j] = -1.0
		dfdzdot[j, j] = 1.0

	# d/dq2 of D(q) q_ddot + C(q, q_dot) q_dot + g(q)
	dfdz[3, 1] = (T.A * a1 + T.P * a2 + T.Q * a3
				  + A_2 * v1 * v2 + Bq_2 * v1 * v3 + P_2 * v2**2 + Q_2 * vv)
	dfdz[4, 1] = (T.P * a1
				  - 0.5 * A_2 * v1**2
				  - TH[6] * T.s2 - TH[7] * T.s23)
	dfdz[5, 1] = (T.Q * a1
				  - 0.5 * Bq_2 * v1**2
				  - TH[7] * T.s23)

	# d/dq3
	dfdz[3, 2] = (T.Bq * a1 + T.Q * a2 + T.Q * a3
				  + A_3 * v1 * v2 + Bq_3 * v1 * v3 + P_3 * v2**2 + Q_3 * vv)
	dfdz[4, 2] = (T.Q * a1 + T.E * a2 + T.F * a3
				  - 0.5 * A_3 * v1**2 + E_3 * v2 * v3 + F_3 * v3**2
				  - TH[7] * T.s23)
	dfdz[5, 2] = (T.Q * a1 + T.F * a2
				  - 0.5 * Bq_3 * v1**2 - 0.5 * E_3 * v2**2
				  - TH[7] * T.s23)

	# d/dq_dot of the coriolis vector
	dfdz[3, 3] = T.A * v2 + T.Bq * v3
	dfdz[3, 4] = T.A * v1 + 2 * T.P * v2 + 2 * T.Q * v3
	dfdz[3, 5] = T.Bq * v1 + 2 * T.Q * v2 + 2 * T.Q * v3
	dfdz[4, 3] = -T.A * v1
	dfdz[4, 4] = T.E * v3
	dfdz[4, 5] = T.E * v2 + 2 * T.F * v3
	dfdz[5, 3] = -T.Bq * v1
	dfdz[5, 4] = -T.E * v2

	# back-emf, viscous and nonlinear friction are diagonal in q_dot
	slope = _col(model.B + model.viscous, qd) + _friction_slope(qd, model.lam)
	for j in range(3):
		dfdz[3 + j, 3 + j] += slope[j]
		dfdz[3 + j, 6 + j] = -1.0

	# inertia matrix multiplies q_ddot
	dfdzdot[3, 3] = T.D11
	dfdzdot[3, 4] = T.D12
	dfdzdot[3, 5] = T.D13
	dfdzdot[4, 3] = T.D12
	dfdzdot[4, 4] = T.D22
	dfdzdot[4, 5] = T.D23
	dfdzdot[5, 3] = T.D13
	dfdzdot[5, 4] = T.D23
	dfdzdot[5, 5] = T.D33

	return dfdz, dfdzdot

class AnalyticDynamics:
	"""
	Hand derived residual and jacobian of the arm, vectorised over segments.
	"""

	def __init__(self, model):
		self.model = model

	def eval(self, z: np.array, zdot: np.array)->np.array:
		return residual(z, zdot, self.model)

	def jac(self, z: np.array, zdot: np.array)->tuple:
		return jacobian(z, zdot, self.model)
