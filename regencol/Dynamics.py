"""

Implicit equations of motion of the arm, f(z, zdot) = 0.

	z = [q1, q2, q3, q1_dot, q2_dot, q3_dot, u1, u2, u3]
	zdot = time derivative of the state part of z, [q_dot, q_ddot]

	f[0:3] = zdot[0:3] - q_dot
	f[3:6] = D(q) q_ddot + C(q, q_dot) q_dot + (B + F1) q_dot + g(q) + F2(q_dot) - u

Joint 1 is cyclic, nothing below depends on q1. All functions broadcast
over trailing axes, so whole stacks of segments of shape (9, Nseg) can be
evaluated in one call.
"""

# third party imports
import numpy as np

def _col(vec, like):
	# reshape a per-joint parameter vector so it broadcasts against `like`
	return np.asarray(vec).reshape((-1,) + (1,) * (np.ndim(like) - 1))

class InertiaTerms:
	"""
	Trigonometric terms of the inertia matrix and its first derivatives
	w.r.t. q2 and q3, shared by the residual and its jacobian.
	"""

	def __init__(self, q, TH):
		q2 = q[1]
		q3 = q[2]
		self.c2 = np.cos(q2)
		self.s2 = np.sin(q2)
		self.c3 = np.cos(q3)
		self.s3 = np.sin(q3)
		self.c23 = np.cos(q2 + q3)
		self.s23 = np.sin(q2 + q3)
		# double angle terms coming from products of two cos/sin factors
		self.s_2q2 = np.sin(2 * q2)
		self.c_2q2 = np.cos(2 * q2)
		self.s_2q23 = np.sin(2 * (q2 + q3))
		self.c_2q23 = np.cos(2 * (q2 + q3))
		self.s_2q2q3 = np.sin(2 * q2 + q3)
		self.c_2q2q3 = np.cos(2 * q2 + q3)

		# entries of D
		self.D11 = TH[0] + TH[1] * self.c2**2 + TH[2] * self.c23**2 + 2 * TH[3] * self.c2 * self.c23
		self.D12 = TH[8] * self.s2 + TH[9] * self.s23
		self.D13 = TH[9] * self.s23
		self.D22 = TH[4] + 2 * TH[3] * self.c3
		self.D23 = TH[5] + TH[3] * self.c3
		self.D33 = TH[5] + 0.0 * self.c3

		# dD11/dq2, dD11/dq3
		self.A = -TH[1] * self.s_2q2 - TH[2] * self.s_2q23 - 2 * TH[3] * self.s_2q2q3
		self.Bq = -TH[2] * self.s_2q23 - TH[3] * (self.s_2q2q3 + self.s3)
		# dD12/dq2, dD12/dq3 = dD13/dq2 = dD13/dq3
		self.P = TH[8] * self.c2 + TH[9] * self.c23
		self.Q = TH[9] * self.c23
		# dD22/dq3, dD23/dq3
		self.E = -2 * TH[3] * self.s3
		self.F = -TH[3] * self.s3

def mass_matrix(q: np.array, model)->np.array:
	"""
	Symmetric inertia matrix D(q).

	Parameters
	----------
	q -- joint angles, shape (3, ...)
	model -- RobotModel

	Returns
	-------
	D with shape (3, 3, ...)
	"""
	T = InertiaTerms(q, model.TH)
	return np.array([[T.D11, T.D12, T.D13],
					 [T.D12, T.D22, T.D23],
					 [T.D13, T.D23, T.D33]])

def _coriolis(T, qd):
	v1, v2, v3 = qd[0], qd[1], qd[2]
	h1 = T.A * v1 * v2 + T.Bq * v1 * v3 + T.P * v2**2 + T.Q * (2 * v2 * v3 + v3**2)
	h2 = -0.5 * T.A * v1**2 + T.E * v2 * v3 + T.F * v3**2
	h3 = -0.5 * T.Bq * v1**2 - 0.5 * T.E * v2**2
	return np.array([h1, h2, h3])

def coriolis(q: np.array, qd: np.array, model)->np.array:
	"""
	Coriolis and centripetal torques C(q, q_dot) q_dot, from the Christoffel
	symbols of D(q).
	"""
	return _coriolis(InertiaTerms(q, model.TH), qd)

def _gravity(T, TH):
	return np.array([0.0 * T.c2, TH[6] * T.c2 + TH[7] * T.c23, TH[7] * T.c23])

def gravity(q: np.array, model)->np.array:
	"""
	Gravity load g(q), zero for the vertical joint 1.
	"""
	return _gravity(InertiaTerms(q, model.TH), model.TH)

def friction(qd: np.array, model)->np.array:
	"""
	Nonlinear (Stribeck-like) joint friction F2(q_dot), one term per joint.
	"""
	lam = model.lam
	l1, l2, l3, l4, l5 = [_col(lam[:, k], qd) for k in range(5)]
	return l1 * (np.tanh(l2 * qd) - np.tanh(l3 * qd)) + l4 * np.tanh(l5 * qd)

def residual(z: np.array, zdot: np.array, model)->np.array:
	"""
	Evaluate the implicit equations of motion.

	Parameters
	----------
	z -- evaluation point [q, q_dot, u], shape (9, ...)
	zdot -- derivative of the state [q_dot, q_ddot], shape (6, ...)
	model -- RobotModel

	Returns
	-------
	residual vector, shape (6, ...)
	"""
	z = np.asarray(z, dtype=float)
	zdot = np.asarray(zdot, dtype=float)
	q = z[0:3]
	qd = z[3:6]
	u = z[6:9]
	acc = zdot[3:6]

	T = InertiaTerms(q, model.TH)
	damping = _col(model.B + model.viscous, qd)

	f = np.empty((6,) + z.shape[1:])
	f[0:3] = zdot[0:3] - qd
	f[3] = T.D11 * acc[0] + T.D12 * acc[1] + T.D13 * acc[2]
	f[4] = T.D12 * acc[0] + T.D22 * acc[1] + T.D23 * acc[2]
	f[5] = T.D13 * acc[0] + T.D23 * acc[1] + T.D33 * acc[2]
	f[3:6] += _coriolis(T, qd) + damping * qd + _gravity(T, model.TH) + friction(qd, model) - u
	return f

def forward_dynamics(x: np.array, u: np.array, model)->np.array:
	"""
	Explicit form of the dynamics, x_dot = [q_dot, D^-1 (u - ...)], for a
	single state. Used to integrate a collocated control history.

	Parameters
	----------
	x -- state [q, q_dot], shape (6,)
	u -- controls, shape (3,)
	model -- RobotModel

	Returns
	-------
	x_dot, shape (6,)
	"""
	x = np.asarray(x, dtype=float)
	q = x[:3]
	qd = x[3:]
	# residual with zero acceleration is everything except D(q) q_ddot
	z = np.hstack((x, u))
	rest = residual(z, np.hstack((qd, np.zeros(3))), model)[3:]
	acc = np.linalg.solve(mass_matrix(q, model), -rest)
	return np.hstack((qd, acc))
