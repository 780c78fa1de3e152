""" Core utilities to evaluate kinematics of a Pinocchio model through a state/input mapping. """

import numpy as np
import pinocchio
import warnings


def get_frame_id(model, frame):
    """
    Gets the ID of a frame in the model.

    Parameters
    ----------
        model : `pinocchio.Model`
            The model containing the frame.
        frame : str
            The name of the frame.

    Returns
    -------
        int
            The frame ID.

    Raises
    ------
        ValueError
            If the frame does not exist in the model.
    """
    frame_id = model.getFrameId(frame)
    if frame_id >= model.nframes:
        raise ValueError(f"Frame '{frame}' does not exist in the model.")
    return frame_id


def update_kinematics(model, data, mapping, state, input=None):
    """
    Updates the forward kinematics of a model from an optimization state and input.

    Parameters
    ----------
        model : `pinocchio.Model`
            The model to use for forward kinematics.
        data : `pinocchio.Data`
            The model data to update.
        mapping : `pyupright.dynamics.mapping.StateInputMapping`
            The mapping from the optimization variables to the model joint states.
        state : array-like
            The optimization state.
        input : array-like, optional
            The optimization input. If None, only the joint positions are updated.

    Returns
    -------
        tuple(array-like, array-like, array-like)
            The joint positions, velocities, and accelerations passed to Pinocchio.
            The velocities and accelerations are None if no input was specified.
    """
    q = mapping.get_position(state)
    if input is None:
        pinocchio.framesForwardKinematics(model, data, q)
        return q, None, None

    v = mapping.get_velocity(state, input)
    a = mapping.get_acceleration(state, input)
    pinocchio.forwardKinematics(model, data, q, v, a)
    pinocchio.updateFramePlacements(model, data)
    return q, v, a


def compute_frame_position_jacobian(model, data, mapping, state, frame):
    """
    Computes the position of a frame and its Jacobian with respect to the optimization state.

    The Jacobian computed by Pinocchio is taken with respect to the joint positions,
    which assumes the model's configuration and tangent spaces coincide (e.g., prismatic,
    revolute, and translation joints).

    Parameters
    ----------
        model : `pinocchio.Model`
            The model to use for Jacobian computation.
        data : `pinocchio.Data`
            The model data to use for Jacobian computation.
        mapping : `pyupright.dynamics.mapping.StateInputMapping`
            The mapping from the optimization variables to the model joint states.
        state : array-like
            The optimization state.
        frame : str
            The name of the frame.

    Returns
    -------
        tuple(array-like, array-like)
            The position of the frame in the world, and the 3-by-x Jacobian of that position
            with respect to the optimization state.
    """
    frame_id = get_frame_id(model, frame)
    q = mapping.get_position(state)
    pinocchio.framesForwardKinematics(model, data, q)
    J = pinocchio.computeFrameJacobian(
        model, data, q, frame_id, pinocchio.ReferenceFrame.LOCAL_WORLD_ALIGNED
    )

    # The position does not depend on the joint velocities.
    Jq = J[:3, :]
    Jv = np.zeros((3, model.nv))
    dfdx, _ = mapping.get_jacobian_pair(state, Jq, Jv)
    return data.oMf[frame_id].translation.copy(), dfdx


def compute_frame_distance_and_jacobian(model, data, mapping, state, frame1, frame2):
    """
    Computes the distance between two frame origins and its gradient with respect to the optimization state.

    This is the building block of collision avoidance constraints between spheres,
    where either frame may belong to the robot or to a moving obstacle.

    Parameters
    ----------
        model : `pinocchio.Model`
            The model to use for Jacobian computation.
        data : `pinocchio.Data`
            The model data to use for Jacobian computation.
        mapping : `pyupright.dynamics.mapping.StateInputMapping`
            The mapping from the optimization variables to the model joint states.
        state : array-like
            The optimization state.
        frame1 : str
            The name of the first frame.
        frame2 : str
            The name of the second frame.

    Returns
    -------
        tuple(float, array-like)
            The distance between the frames, and its 1-by-x Jacobian with respect to the optimization state.
    """
    p1, J1 = compute_frame_position_jacobian(model, data, mapping, state, frame1)
    p2, J2 = compute_frame_position_jacobian(model, data, mapping, state, frame2)

    distance_vec = p2 - p1
    distance = np.linalg.norm(distance_vec)
    if distance == 0.0:
        warnings.warn(
            f"Frames '{frame1}' and '{frame2}' coincide, so the distance gradient is undefined."
        )
        return distance, np.zeros((1, J1.shape[1]))

    normal = distance_vec / distance
    return distance, (normal @ (J2 - J1))[np.newaxis, :]
