""" Utilities to add moving point-mass obstacles to Pinocchio models. """

import coal
import numpy as np
import pinocchio


class DynamicObstacle:
    """A spherical point-mass obstacle with triple integrator dynamics."""

    def __init__(
        self,
        name,
        radius=0.1,
        position=np.zeros(3),
        velocity=np.zeros(3),
        acceleration=np.zeros(3),
        mass=1.0,
    ):
        """
        Initializes a dynamic obstacle.

        Parameters
        ----------
            name : str
                The name of the obstacle. Used for the joint, frame, and geometry names.
            radius : float
                The radius of the obstacle's collision sphere, in meters.
            position : array-like
                The initial position of the obstacle.
            velocity : array-like
                The initial velocity of the obstacle.
            acceleration : array-like
                The initial acceleration of the obstacle.
            mass : float
                The mass of the obstacle. Only used to populate the model inertias.
        """
        if radius < 0.0:
            raise ValueError("The obstacle radius must be non-negative.")
        if mass <= 0.0:
            raise ValueError("The obstacle mass must be positive.")

        self.name = name
        self.radius = radius
        self.position = self._process_vector(position, "position")
        self.velocity = self._process_vector(velocity, "velocity")
        self.acceleration = self._process_vector(acceleration, "acceleration")
        self.mass = mass

    def _process_vector(self, vec, name):
        vec = np.array(vec, dtype=float)
        if vec.shape != (3,):
            raise ValueError(f"{name} vector must have shape (3,)")
        return vec

    def initial_state(self):
        """
        Returns the initial optimization state of this obstacle.

        Returns
        -------
            numpy.ndarray
                The 9-dimensional state ``[position, velocity, acceleration]``.
        """
        return np.concatenate((self.position, self.velocity, self.acceleration))


def add_dynamic_obstacles(model, collision_model, visual_model, obstacles):
    """
    Appends dynamic obstacles to a robot model.

    Each obstacle is attached to the world through a 3-DOF translation joint, so the model's
    joint positions and velocities are the robot's followed by 3 entries per obstacle,
    in the order given. Obstacles must therefore be added after all the robot joints.

    Parameters
    ----------
        model : `pinocchio.Model`
            The robot model.
        collision_model : `pinocchio.GeometryModel`
            The collision geometry model.
        visual_model : `pinocchio.GeometryModel`, optional
            The visual geometry model. If None, no visual geometry is added.
        obstacles : list[`DynamicObstacle`]
            The obstacles to add.

    Returns
    -------
        list[int]
            The joint IDs of the added obstacles.
    """
    joint_ids = []
    for obstacle in obstacles:
        joint_id = model.addJoint(
            0,
            pinocchio.JointModelTranslation(),
            pinocchio.SE3.Identity(),
            f"{obstacle.name}_joint",
        )
        model.appendBodyToJoint(
            joint_id,
            pinocchio.Inertia.FromSphere(obstacle.mass, obstacle.radius),
            pinocchio.SE3.Identity(),
        )
        frame_id = model.addBodyFrame(
            obstacle.name, joint_id, pinocchio.SE3.Identity(), -1
        )

        geom_obj = pinocchio.GeometryObject(
            obstacle.name,
            joint_id,
            pinocchio.SE3.Identity(),
            coal.Sphere(obstacle.radius),
        )
        geom_obj.parentFrame = frame_id
        geom_obj.meshColor = np.array([1.0, 0.0, 0.0, 0.5])
        collision_model.addGeometryObject(geom_obj)
        if visual_model is not None:
            visual_model.addGeometryObject(geom_obj)

        joint_ids.append(joint_id)

    return joint_ids
