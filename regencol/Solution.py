"""

Class for storing collocation solutions, with the energy bookkeeping of the
drives and persistence of the result bundle.
"""

# python imports
import json

# third party imports
import matplotlib.pyplot as plt
import numpy as np
from scipy.integrate import trapezoid
from scipy.interpolate import interp1d

class Solution:

	def __init__(self, sol_x, problem, status, success, solver):
		config = problem.config
		model = problem.model

		self.solver = solver
		self.status = status
		self.success = bool(success)
		self.opt_x = np.array(sol_x, dtype=float)
		self.colloc_method = config.colloc_method
		self.config = config
		self.model = model

		q, qd, u = problem.layout.unpack(self.opt_x)
		self.t = config.tspan
		self.q = q.copy()
		self.qd = qd.copy()
		self.u = u.copy()
		self.x = np.hstack((self.q, self.qd))

		# accelerations from finite differences of the velocity trajectory
		self.qdd = np.gradient(self.qd, self.t, axis=0)

		# electrical power drawn from the storage by each drive
		self.power = model.loss_coef * self.u**2 - self.qd * self.u
		self.energy_joint = trapezoid(self.power, self.t, axis=0)
		self.energy_total = float(np.sum(self.energy_joint))

		self.obj = problem.objective.eval(self.opt_x)

		# convert discrete control to time-varying spline
		self.u_t = interp1d(self.t, self.u, axis=0, kind='linear')

	def save(self, path):
		"""
		Write the result bundle (trajectories, energies, model and
		configuration records) to a .npz file.
		"""
		np.savez(path,
				 t=self.t,
				 q=self.q,
				 qd=self.qd,
				 qdd=self.qdd,
				 u=self.u,
				 power=self.power,
				 energy_joint=self.energy_joint,
				 energy_total=self.energy_total,
				 obj=self.obj,
				 success=self.success,
				 status=self.status,
				 model=json.dumps(self.model.to_dict()),
				 config=json.dumps(self.config.to_dict()))

	def plot(self, title: str = None, show: bool = True):
		"""
		Plot joint angles, velocities, controls and drive power.
		"""
		colors = ['k', 'g', 'b']

		fig, axs = plt.subplots(4, 1, sharex=True)
		if title is not None:
			axs[0].set_title(title)
		for j in range(3):
			axs[0].plot(self.t, self.q[:, j], '-o', color=colors[j], label='joint {}'.format(j + 1))
			axs[1].plot(self.t, self.qd[:, j], '-o', color=colors[j])
			axs[2].plot(self.t, self.u[:, j], '-o', color=colors[j])
			axs[3].plot(self.t, self.power[:, j], '-', color=colors[j])
		axs[0].set_ylabel("Angle [rad]")
		axs[0].legend()
		axs[1].set_ylabel("Velocity [rad/s]")
		axs[2].set_ylabel("Control [N*m]")
		axs[3].set_ylabel("Power [W]")
		axs[3].set_xlabel("Time [s]")

		if show:
			plt.show()
		return fig
