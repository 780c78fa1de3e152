import numpy as np
import pinocchio
import pytest

from pyupright.core.dimensions import OptimizationDimensions
from pyupright.models.obstacles import DynamicObstacle, add_dynamic_obstacles
from pyupright.models.point_mass import ROBOT_DIMENSIONS, load_models


def test_dynamic_obstacle_state():
    obstacle = DynamicObstacle(
        "ball",
        radius=0.2,
        position=[1.0, 2.0, 3.0],
        velocity=[4.0, 5.0, 6.0],
        acceleration=[7.0, 8.0, 9.0],
    )
    state = obstacle.initial_state()
    assert state.shape == (9,)
    assert np.all(state == np.arange(1.0, 10.0))


def test_dynamic_obstacle_defaults():
    obstacle = DynamicObstacle("ball")
    assert obstacle.radius == pytest.approx(0.1)
    assert np.all(obstacle.initial_state() == 0.0)


def test_bad_dynamic_obstacle_options():
    with pytest.raises(ValueError):
        DynamicObstacle("ball", radius=-0.1)
    with pytest.raises(ValueError):
        DynamicObstacle("ball", mass=0.0)
    with pytest.raises(ValueError):
        DynamicObstacle("ball", position=[1.0, 2.0])
    with pytest.raises(ValueError):
        DynamicObstacle("ball", velocity=np.zeros((3, 1)))


def test_point_mass_models():
    model, collision_model, visual_model = load_models()
    assert model.nq == ROBOT_DIMENSIONS.q
    assert model.nv == ROBOT_DIMENSIONS.v
    assert model.existFrame("body")
    assert collision_model.ngeoms == 1
    assert visual_model.ngeoms == 1


def test_add_dynamic_obstacles():
    model, collision_model, visual_model = load_models()
    obstacles = [
        DynamicObstacle("obstacle_1", radius=0.1),
        DynamicObstacle("obstacle_2", radius=0.2),
    ]
    joint_ids = add_dynamic_obstacles(model, collision_model, visual_model, obstacles)

    # Obstacle joints come after the robot joints, in the order they were added.
    dims = OptimizationDimensions(ROBOT_DIMENSIONS, len(obstacles))
    assert model.nq == dims.q()
    assert model.nv == dims.v()
    assert len(joint_ids) == 2
    assert model.idx_qs[joint_ids[0]] == ROBOT_DIMENSIONS.q
    assert model.idx_qs[joint_ids[1]] == ROBOT_DIMENSIONS.q + 3
    assert model.names[joint_ids[0]] == "obstacle_1_joint"

    assert model.existFrame("obstacle_1")
    assert model.existFrame("obstacle_2")
    assert collision_model.ngeoms == 3
    assert visual_model.ngeoms == 3
    geom_id = collision_model.getGeometryId("obstacle_2")
    assert collision_model.geometryObjects[geom_id].parentJoint == joint_ids[1]
    assert collision_model.geometryObjects[
        geom_id
    ].parentFrame == model.getFrameId("obstacle_2")


def test_add_dynamic_obstacles_without_visual_model():
    model, collision_model, visual_model = load_models()
    add_dynamic_obstacles(model, collision_model, None, [DynamicObstacle("ball")])
    assert collision_model.ngeoms == 2
    assert visual_model.ngeoms == 1


def test_obstacle_joint_is_translation():
    model, collision_model, visual_model = load_models()
    obstacle = DynamicObstacle("ball", position=[0.5, -1.0, 2.0])
    add_dynamic_obstacles(model, collision_model, visual_model, [obstacle])
    data = model.createData()

    q = np.concatenate((np.zeros(3), obstacle.position))
    pinocchio.framesForwardKinematics(model, data, q)
    frame_id = model.getFrameId("ball")
    assert data.oMf[frame_id].translation == pytest.approx(obstacle.position)
    assert data.oMf[frame_id].rotation == pytest.approx(np.eye(3))
