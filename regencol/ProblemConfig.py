"""

Per-run settings of the transcription: horizon, node count, boundary states
and collocation method.
"""

# python imports
from dataclasses import dataclass, replace

# third party imports
import numpy as np

# regencol imports
from .CollocMethods import METHOD_NAMES, BACKWARD_EULER, X_DIM

@dataclass(frozen=True, eq=False)
class ProblemConfig:
	N: int
	t0: float
	tf: float
	X_start: np.ndarray
	X_goal: np.ndarray
	colloc_method: int = BACKWARD_EULER

	def __post_init__(self):
		if int(self.N) != self.N or self.N < 2:
			raise ValueError("Need at least 2 nodes, got N={}".format(self.N))
		if (not isinstance(self.colloc_method, (int, np.integer))
				or isinstance(self.colloc_method, bool)
				or self.colloc_method not in range(len(METHOD_NAMES))):
			raise ValueError("Unsupported collocation method: {}".format(self.colloc_method))
		if not self.tf > self.t0:
			raise ValueError("Final time must be after initial time")
		object.__setattr__(self, "N", int(self.N))
		for name in ("X_start", "X_goal"):
			value = np.array(getattr(self, name), dtype=float)
			if value.shape != (X_DIM,):
				raise ValueError("{} must have {} entries, got shape {}".format(name, X_DIM, value.shape))
			value.setflags(write=False)
			object.__setattr__(self, name, value)

	@property
	def h(self)->float:
		return (self.tf - self.t0) / (self.N - 1)

	@property
	def tspan(self)->np.ndarray:
		return np.linspace(self.t0, self.tf, self.N)

	@property
	def method_name(self)->str:
		return METHOD_NAMES[self.colloc_method]

	def swapped(self):
		"""
		Same problem with the boundary states exchanged (B -> A).
		"""
		return replace(self, X_start=self.X_goal, X_goal=self.X_start)

	def to_dict(self)->dict:
		return {"N": self.N,
				"t0": self.t0,
				"tf": self.tf,
				"h": self.h,
				"X_start": self.X_start.tolist(),
				"X_goal": self.X_goal.tolist(),
				"colloc_method": METHOD_NAMES[self.colloc_method]}
