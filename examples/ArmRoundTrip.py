"""

Regenerative arm example: move A -> B and back B -> A, then compare the
energy drawn from the storage on both legs.

"""

import sys
sys.path.insert(0, '..')

import numpy as np

from regencol.CollocMethods import *
from regencol.ProblemConfig import ProblemConfig
from regencol.ProblemDefinition import solve_round_trip
from regencol.RobotModel import RobotModel

if __name__ == "__main__":

	colloc_method = MIDPOINT

	# physical parameters, RobotModel.load("my_arm.json") for a measured set
	model = RobotModel()

	t0_ = 0
	tf_ = 1.5
	N_ = 60

	X_start = np.array([0, -np.pi/4, np.pi/2, 0, 0, 0]) # arbitrary start state
	X_goal = np.array([np.pi/2, 0, np.pi/4, 0, 0, 0]) # arbitrary goal state

	config = ProblemConfig(N_, t0_, tf_, X_start, X_goal, colloc_method)

	# solve problem both ways
	forward, reverse = solve_round_trip(config, model, solver='ipopt', seed=0)

	for name, sol in (("A -> B", forward), ("B -> A", reverse)):
		print(name, "converged:", sol.success, "status:", sol.status)
		print("  energy per joint [J]:", np.round(sol.energy_joint, 3))
		print("  total energy [J]:", round(sol.energy_total, 3))
	print("round trip [J]:", round(forward.energy_total + reverse.energy_total, 3))

	forward.save("arm_forward.npz")
	reverse.save("arm_reverse.npz")

	forward.plot(title="A -> B", show=False)
	reverse.plot(title="B -> A")
