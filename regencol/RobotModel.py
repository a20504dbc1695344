"""

Physical parameters of the three joint arm and its regenerative drives.

Inertia matrix, with c2 = cos(q2), c23 = cos(q2+q3), s2 = sin(q2), ...
	D11 = TH0 + TH1*c2^2 + TH2*c23^2 + 2*TH3*c2*c23
	D12 = TH8*s2 + TH9*s23
	D13 = TH9*s23
	D22 = TH4 + 2*TH3*c3
	D23 = TH5 + TH3*c3
	D33 = TH5
Gravity
	g = [0, TH6*c2 + TH7*c23, TH7*c23]
Viscous friction
	F1 = diag(TH10, TH11, TH12)
Nonlinear friction, per joint with lam = [l1, l2, l3, l4, l5]
	F2(v) = l1*(tanh(l2*v) - tanh(l3*v)) + l4*tanh(l5*v)
Drives, armature resistance R and torque constant times gear ratio a
	B = diag(a^2 / R)
"""

# python imports
from dataclasses import dataclass, field, asdict
import json

# third party imports
import numpy as np

def _default_R():
	return np.array([1.0, 1.0, 1.5])

def _default_a():
	return np.array([4.0, 4.0, 2.5])

def _default_TH():
	return np.array([0.5, 0.3, 0.1, 0.08, 0.9, 0.15, 12.0, 4.0, 0.02, 0.01, 0.5, 0.5, 0.3])

def _default_lam():
	return np.array([[0.4, 40.0, 2.0, 0.6, 60.0],
					 [0.5, 40.0, 2.0, 0.8, 60.0],
					 [0.2, 40.0, 2.0, 0.3, 60.0]])

@dataclass(frozen=True, eq=False)
class RobotModel:
	"""Immutable parameter set. Arrays are made read-only on construction."""
	R: np.ndarray = field(default_factory=_default_R)      # ohm, armature resistances
	a: np.ndarray = field(default_factory=_default_a)      # N*m/A, torque constant * gear ratio
	TH: np.ndarray = field(default_factory=_default_TH)    # inertial, gravity and viscous coefficients
	lam: np.ndarray = field(default_factory=_default_lam)  # friction coefficients, one row per joint
	V_cap: float = 24.0                                    # V, regenerative storage voltage

	def __post_init__(self):
		shapes = {"R": (3,), "a": (3,), "TH": (13,), "lam": (3, 5)}
		for name, shape in shapes.items():
			value = np.array(getattr(self, name), dtype=float)
			if value.shape != shape:
				raise ValueError("RobotModel.{} must have shape {}, got {}".format(name, shape, value.shape))
			value.setflags(write=False)
			object.__setattr__(self, name, value)
		if np.any(self.R <= 0):
			raise ValueError("Armature resistances must be positive")
		object.__setattr__(self, "V_cap", float(self.V_cap))

	@property
	def B(self)->np.ndarray:
		"""Back-EMF damping, diagonal entries."""
		return self.a**2 / self.R

	@property
	def viscous(self)->np.ndarray:
		return self.TH[10:13]

	@property
	def u_max(self)->np.ndarray:
		"""Control bound of each joint at the storage voltage."""
		return self.a / self.R * self.V_cap

	@property
	def loss_coef(self)->np.ndarray:
		"""Copper loss per squared control, R / a^2."""
		return self.R / self.a**2

	def to_dict(self)->dict:
		return {key: np.asarray(value).tolist() if isinstance(value, np.ndarray) else value
				for key, value in asdict(self).items()}

	@classmethod
	def from_dict(cls, d: dict):
		return cls(**d)

	def save(self, path):
		with open(path, "w") as f:
			json.dump(self.to_dict(), f, indent=2)

	@classmethod
	def load(cls, path):
		with open(path) as f:
			return cls.from_dict(json.load(f))
