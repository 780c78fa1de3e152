import numpy as np
import pinocchio
import pytest

from pyupright.core.dimensions import OptimizationDimensions
from pyupright.core.utils import (
    compute_frame_distance_and_jacobian,
    compute_frame_position_jacobian,
    get_frame_id,
    update_kinematics,
)
from pyupright.dynamics.mapping import SystemMapping, stack_system_state
from pyupright.models.obstacles import DynamicObstacle, add_dynamic_obstacles
from pyupright.models.point_mass import ROBOT_DIMENSIONS, load_models


# Use a fixed seed for random number generation in tests.
np.random.seed(1234)


def load_system(obstacles):
    model, collision_model, visual_model = load_models()
    add_dynamic_obstacles(model, collision_model, visual_model, obstacles)
    data = model.createData()
    mapping = SystemMapping(OptimizationDimensions(ROBOT_DIMENSIONS, len(obstacles)))
    return model, data, mapping


def make_obstacles():
    return [
        DynamicObstacle(
            "obstacle_1",
            position=[3.0, 4.0, 0.0],
            velocity=[0.1, 0.2, 0.3],
            acceleration=[-1.0, 0.0, 1.0],
        ),
        DynamicObstacle("obstacle_2", position=[-1.0, 0.0, 2.0]),
    ]


def test_get_frame_id():
    model, _, _ = load_models()
    assert get_frame_id(model, "body") == model.getFrameId("body")
    with pytest.raises(ValueError):
        get_frame_id(model, "not_a_frame")


def test_update_kinematics_positions():
    obstacles = make_obstacles()
    model, data, mapping = load_system(obstacles)
    robot_state = np.concatenate(([1.0, 2.0, 3.0], np.zeros(6)))
    state = stack_system_state(robot_state, [obs.initial_state() for obs in obstacles])

    q, v, a = update_kinematics(model, data, mapping, state)
    assert q.shape == (model.nq,)
    assert v is None
    assert a is None

    body_id = model.getFrameId("body")
    assert data.oMf[body_id].translation == pytest.approx([1.0, 2.0, 3.0])
    for obs in obstacles:
        frame_id = model.getFrameId(obs.name)
        assert data.oMf[frame_id].translation == pytest.approx(obs.position)


def test_update_kinematics_velocities():
    obstacles = make_obstacles()
    model, data, mapping = load_system(obstacles)
    robot_state = np.array([0.0, 0.0, 0.0, 0.5, -0.5, 1.0, 0.0, 0.0, 0.0])
    state = stack_system_state(robot_state, [obs.initial_state() for obs in obstacles])
    u = np.ones(ROBOT_DIMENSIONS.u)

    q, v, a = update_kinematics(model, data, mapping, state, u)
    assert v == pytest.approx(np.concatenate(([0.5, -0.5, 1.0], [0.1, 0.2, 0.3], np.zeros(3))))
    assert a == pytest.approx(np.concatenate((np.zeros(3), [-1.0, 0.0, 1.0], np.zeros(3))))

    frame_id = model.getFrameId("obstacle_1")
    velocity = pinocchio.getFrameVelocity(
        model, data, frame_id, pinocchio.ReferenceFrame.LOCAL_WORLD_ALIGNED
    )
    assert velocity.linear == pytest.approx([0.1, 0.2, 0.3])


@pytest.mark.parametrize(
    "frame, column",
    [("body", 0), ("obstacle_1", 9), ("obstacle_2", 18)],
)
def test_compute_frame_position_jacobian(frame, column):
    obstacles = make_obstacles()
    model, data, mapping = load_system(obstacles)
    state = stack_system_state(
        np.random.random(ROBOT_DIMENSIONS.x), [obs.initial_state() for obs in obstacles]
    )

    position, dfdx = compute_frame_position_jacobian(model, data, mapping, state, frame)
    assert position == pytest.approx(state[column : column + 3])

    # Only the position entries of the frame's own block are nonzero.
    assert dfdx.shape == (3, mapping.dims.x())
    expected = np.zeros((3, mapping.dims.x()))
    expected[:, column : column + 3] = np.eye(3)
    assert dfdx == pytest.approx(expected)


def test_compute_frame_distance_and_jacobian():
    obstacles = make_obstacles()
    model, data, mapping = load_system(obstacles)
    state = stack_system_state(
        np.zeros(ROBOT_DIMENSIONS.x), [obs.initial_state() for obs in obstacles]
    )

    distance, gradient = compute_frame_distance_and_jacobian(
        model, data, mapping, state, "body", "obstacle_1"
    )
    assert distance == pytest.approx(5.0)
    assert gradient.shape == (1, mapping.dims.x())

    expected = np.zeros((1, mapping.dims.x()))
    expected[0, 0:3] = [-0.6, -0.8, 0.0]
    expected[0, 9:12] = [0.6, 0.8, 0.0]
    assert gradient == pytest.approx(expected)


def test_compute_frame_distance_coincident_frames():
    obstacles = [DynamicObstacle("ball", position=[1.0, 1.0, 1.0])]
    model, data, mapping = load_system(obstacles)
    robot_state = np.concatenate(([1.0, 1.0, 1.0], np.zeros(6)))
    state = stack_system_state(robot_state, [obs.initial_state() for obs in obstacles])

    with pytest.warns(UserWarning):
        distance, gradient = compute_frame_distance_and_jacobian(
            model, data, mapping, state, "body", "ball"
        )
    assert distance == pytest.approx(0.0)
    assert np.all(gradient == 0.0)
    assert gradient.shape == (1, mapping.dims.x())
