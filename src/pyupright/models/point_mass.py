""" Utilities to load an example 3-DOF point-mass robot. """

import coal
import numpy as np
import pinocchio

from ..core.dimensions import RobotDimensions

# Position, velocity, and acceleration states with jerk inputs.
ROBOT_DIMENSIONS = RobotDimensions(3, 3, 9, 3)


def load_models(radius=0.1, mass=1.0):
    """
    Gets the example point-mass models.

    The robot is a sphere attached to the world by a 3-DOF translation joint named ``"body_joint"``,
    with a body frame and collision geometry named ``"body"``.

    Parameters
    ----------
        radius : float, optional
            The radius of the robot's collision sphere, in meters.
        mass : float, optional
            The mass of the robot.

    Returns
    -------
        tuple[`pinocchio.Model`]
            A 3-tuple containing the model, collision geometry model, and visual geometry model.
    """
    model = pinocchio.Model()
    model.name = "point_mass"
    joint_id = model.addJoint(
        0,
        pinocchio.JointModelTranslation(),
        pinocchio.SE3.Identity(),
        "body_joint",
    )
    model.appendBodyToJoint(
        joint_id, pinocchio.Inertia.FromSphere(mass, radius), pinocchio.SE3.Identity()
    )
    frame_id = model.addBodyFrame("body", joint_id, pinocchio.SE3.Identity(), -1)

    collision_model = pinocchio.GeometryModel()
    visual_model = pinocchio.GeometryModel()
    body = pinocchio.GeometryObject(
        "body", joint_id, pinocchio.SE3.Identity(), coal.Sphere(radius)
    )
    body.parentFrame = frame_id
    body.meshColor = np.array([0.0, 0.0, 1.0, 1.0])
    collision_model.addGeometryObject(body)
    visual_model.addGeometryObject(body)

    return model, collision_model, visual_model
