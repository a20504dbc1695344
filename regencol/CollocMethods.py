"""

Enums representing set of supported collocation methods, and the
discretization formulas that turn the continuous residual f(z, zdot) = 0
into one defect constraint per segment.

All functions operate on stacks of segments: node blocks are passed with
shape (9, Nseg) and derivative blocks with shape (6, 9, Nseg).
"""

# third party imports
import numpy as np

BACKWARD_EULER = 0 # Euler Backward method, 1st order accurate
MIDPOINT = 1 # Implicit midpoint method, 2nd order accurate

# Useful to be able to map the methods to their names as strings
METHOD_NAMES = ["Euler-Backward", "Midpoint"]

X_DIM = 6 # positions and velocities
U_DIM = 3 # controls

def _eb_point(V_prev, V_next, h):
	zdot = (V_next[:X_DIM] - V_prev[:X_DIM]) / h
	return V_next, zdot

def _mid_point(V_prev, V_next, h):
	zdot = (V_next[:X_DIM] - V_prev[:X_DIM]) / h
	return 0.5 * (V_prev + V_next), zdot

def _eb_jac(dfdz, dfdzdot, h):
	return -dfdzdot / h, dfdz + dfdzdot / h

def _mid_jac(dfdz, dfdzdot, h):
	return 0.5 * dfdz - dfdzdot / h, 0.5 * dfdz + dfdzdot / h

_DISCRETIZATIONS = {
	BACKWARD_EULER: (_eb_point, _eb_jac),
	MIDPOINT: (_mid_point, _mid_jac),
}

def get_discretization(colloc_method: int)->tuple:
	"""
	Select the (evaluation point, defect jacobian) pair for a collocation method.

	Parameters
	----------
	colloc_method -- BACKWARD_EULER or MIDPOINT

	Returns
	-------
	tuple of two functions, see evaluation_point and defect_jacobian
	"""
	try:
		return _DISCRETIZATIONS[colloc_method]
	except (KeyError, TypeError):
		raise ValueError("Unsupported collocation method: {}".format(colloc_method))

def evaluation_point(V_prev: np.array, V_next: np.array, h: float, colloc_method: int)->tuple:
	"""
	Point at which the continuous residual is evaluated for a segment.

	Parameters
	----------
	V_prev -- earlier node block(s), shape (9,) or (9, Nseg)
	V_next -- later node block(s), same shape as V_prev
	h -- time step
	colloc_method -- BACKWARD_EULER or MIDPOINT

	Returns
	-------
	(z, zdot) with z shaped like V_prev and zdot of shape (6,) or (6, Nseg)
	"""
	point, _ = get_discretization(colloc_method)
	return point(V_prev, V_next, h)

def defect_jacobian(dfdz: np.array, dfdzdot: np.array, h: float, colloc_method: int)->tuple:
	"""
	Chain rule through the discretization.

	Parameters
	----------
	dfdz -- derivative of the residual w.r.t. the evaluation point, (6, 9[, Nseg])
	dfdzdot -- derivative of the residual w.r.t. zdot padded to (6, 9[, Nseg])
	h -- time step
	colloc_method -- BACKWARD_EULER or MIDPOINT

	Returns
	-------
	(J_prev, J_next), derivatives of the defect w.r.t. the earlier and the later node
	"""
	_, jac = get_discretization(colloc_method)
	return jac(dfdz, dfdzdot, h)
