"""
This example shows how to map an optimization state containing a robot and moving
obstacles to a Pinocchio model, and how to compute collision distance gradients with
respect to the optimization state.
"""

import numpy as np

from pyupright.core.dimensions import OptimizationDimensions
from pyupright.core.utils import compute_frame_distance_and_jacobian, update_kinematics
from pyupright.dynamics.mapping import SystemMapping, stack_system_state
from pyupright.models.obstacles import DynamicObstacle, add_dynamic_obstacles
from pyupright.models.point_mass import ROBOT_DIMENSIONS, load_models

# Create the robot model and append the obstacles after the robot joints.
model, collision_model, visual_model = load_models()
obstacles = [
    DynamicObstacle(
        "obstacle_1", radius=0.1, position=[1.0, 0.0, 0.5], velocity=[-0.5, 0.0, 0.0]
    ),
    DynamicObstacle(
        "obstacle_2",
        radius=0.2,
        position=[0.0, 1.0, 0.5],
        velocity=[0.0, -0.25, 0.0],
        acceleration=[0.0, 0.0, -9.81],
    ),
]
add_dynamic_obstacles(model, collision_model, visual_model, obstacles)
data = model.createData()

# Set up the mapping and the optimization state and input.
dims = OptimizationDimensions(ROBOT_DIMENSIONS, len(obstacles))
mapping = SystemMapping(dims)
robot_state = np.array([0.0, 0.0, 0.5, 0.2, 0.0, 0.0, 0.0, 0.0, 0.0])
state = stack_system_state(robot_state, [obs.initial_state() for obs in obstacles])
u = np.zeros(dims.u())

q, v, a = update_kinematics(model, data, mapping, state, u)
print(f"Pinocchio joint positions:     {q}")
print(f"Pinocchio joint velocities:    {v}")
print(f"Pinocchio joint accelerations: {a}")

# Each parallel worker would use its own copy of the mapping.
worker_mapping = mapping.duplicate()

for obs in obstacles:
    distance, gradient = compute_frame_distance_and_jacobian(
        model, data, worker_mapping, state, "body", obs.name
    )
    print(f"\nDistance from body to {obs.name}: {distance:.3f}")
    print(f"Gradient w.r.t. optimization state:\n{gradient}")
