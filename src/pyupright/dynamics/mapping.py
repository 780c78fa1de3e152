""" Mappings between the optimization state/input and Pinocchio joint states. """

from abc import ABC, abstractmethod
import copy
import numpy as np

from ..core.dimensions import (
    OBSTACLE_DIMENSIONS,
    OptimizationDimensions,
    RobotDimensions,
    check_jacobian_shape,
    check_vector_size,
)


class StateInputMapping(ABC):
    """
    Maps an optimization state and input to the joint positions, velocities, and accelerations
    of a Pinocchio model, and maps Jacobians computed by Pinocchio back to the optimization variables.

    Implementations must hold configuration only, so that they can be safely duplicated
    for use by independent workers.
    """

    @abstractmethod
    def get_position(self, state):
        """
        Gets the Pinocchio joint positions.

        Parameters
        ----------
            state : array-like
                The optimization state.

        Returns
        -------
            numpy.ndarray
                The joint positions.
        """

    @abstractmethod
    def get_velocity(self, state, input):
        """
        Gets the Pinocchio joint velocities.

        Parameters
        ----------
            state : array-like
                The optimization state.
            input : array-like
                The optimization input.

        Returns
        -------
            numpy.ndarray
                The joint velocities.
        """

    @abstractmethod
    def get_acceleration(self, state, input):
        """
        Gets the Pinocchio joint accelerations.

        Parameters
        ----------
            state : array-like
                The optimization state.
            input : array-like
                The optimization input.

        Returns
        -------
            numpy.ndarray
                The joint accelerations.
        """

    @abstractmethod
    def get_jacobian_pair(self, state, Jq, Jv):
        """
        Maps the Jacobians of an arbitrary function f with respect to the joint positions and
        velocities, as provided by Pinocchio, to the Jacobians with respect to the optimization
        state and input.

        Parameters
        ----------
            state : array-like
                The optimization state.
            Jq : array-like
                The Jacobian of f with respect to the joint positions.
            Jv : array-like
                The Jacobian of f with respect to the joint velocities.

        Returns
        -------
            tuple(numpy.ndarray, numpy.ndarray)
                The Jacobians dfdx and dfdu of f with respect to the state and input.
        """

    def duplicate(self):
        """
        Returns an independent copy of this mapping.

        Use this to give each parallel worker its own mapping instance.
        """
        return copy.deepcopy(self)


class TripleIntegratorMapping(StateInputMapping):
    """
    Mapping for a system with triple integrator dynamics.

    The state is ordered as positions, velocities, and accelerations, which map directly
    to the Pinocchio joint states. The input (jerk) does not affect any of them.
    """

    def __init__(self, dims):
        """
        Creates a triple integrator mapping.

        Parameters
        ----------
            dims : `pyupright.core.dimensions.RobotDimensions`
                The dimensions of the system. The state size must equal ``q + 2 * v``.
        """
        if not isinstance(dims, RobotDimensions):
            raise ValueError("dims must be a RobotDimensions instance.")
        if dims.x != dims.q + 2 * dims.v:
            raise ValueError(
                f"Triple integrator state size must be q + 2 * v = {dims.q + 2 * dims.v}, got {dims.x}."
            )
        self.dims = dims

    def get_position(self, state):
        state = check_vector_size(state, self.dims.x, "state")
        return np.array(state[: self.dims.q])

    def get_velocity(self, state, input):
        state = check_vector_size(state, self.dims.x, "state")
        return np.array(state[self.dims.q : self.dims.q + self.dims.v])

    def get_acceleration(self, state, input):
        state = check_vector_size(state, self.dims.x, "state")
        return np.array(state[self.dims.q + self.dims.v :])

    def get_jacobian_pair(self, state, Jq, Jv):
        check_vector_size(state, self.dims.x, "state")
        Jq = check_jacobian_shape(Jq, self.dims.q, "Jq")
        Jv = check_jacobian_shape(Jv, self.dims.v, "Jv", rows=Jq.shape[0])

        # The accelerations are not differentiated, since this is only used by
        # geometric functions of the joint positions and velocities.
        output_dim = Jq.shape[0]
        dtype = np.result_type(Jq, Jv)
        dfdx = np.hstack((Jq, Jv, np.zeros((output_dim, self.dims.v), dtype=dtype)))
        dfdu = np.zeros((output_dim, self.dims.u), dtype=dtype)
        return dfdx, dfdu

    def __repr__(self):
        return f"TripleIntegratorMapping({self.dims!r})"


OBSTACLE_MAPPING = TripleIntegratorMapping(OBSTACLE_DIMENSIONS)


class SystemMapping(StateInputMapping):
    """
    Mapping for a robot together with a number of moving obstacles.

    The optimization state contains the robot state followed by one 9-dimensional
    ``[position, velocity, acceleration]`` block per obstacle, and the input contains
    only the robot input. The Pinocchio model contains the robot joints first,
    followed by one 3-DOF translation joint per obstacle in the same order.
    """

    def __init__(self, dims, robot_mapping=None):
        """
        Creates a system mapping.

        Parameters
        ----------
            dims : `pyupright.core.dimensions.OptimizationDimensions`
                The dimensions of the robot and the number of obstacles.
            robot_mapping : `StateInputMapping`, optional
                The mapping for the robot states.
                If not specified, the robot is assumed to be a triple integrator.
        """
        if not isinstance(dims, OptimizationDimensions):
            raise ValueError("dims must be an OptimizationDimensions instance.")
        if robot_mapping is None:
            robot_mapping = TripleIntegratorMapping(dims.robot)
        self.dims = dims
        self.robot_mapping = robot_mapping

    def _robot_state(self, state):
        return state[: self.dims.robot.x]

    def _obstacle_state(self, state, idx):
        start_idx = self.dims.robot.x + idx * OBSTACLE_DIMENSIONS.x
        return state[start_idx : start_idx + OBSTACLE_DIMENSIONS.x]

    def _output_dtype(self, robot_output, *operands):
        """
        Helper function to choose the dtype of an assembled output.

        Without obstacles the output is exactly the robot output, so its dtype is kept.
        Otherwise it is widened to also hold the obstacle blocks taken from the operands.
        """
        if self.dims.o == 0:
            return robot_output.dtype
        return np.result_type(robot_output, *operands)

    def get_position(self, state):
        state = check_vector_size(state, self.dims.x(), "state")
        robot = self.dims.robot

        # Pinocchio model order: robot joints first, then the appended obstacles.
        q_robot = check_vector_size(
            self.robot_mapping.get_position(self._robot_state(state)),
            robot.q,
            "robot position",
        )
        q_pin = np.zeros(self.dims.q(), dtype=self._output_dtype(q_robot, state))
        q_pin[: robot.q] = q_robot

        for idx in range(self.dims.o):
            start_idx = robot.q + idx * OBSTACLE_DIMENSIONS.q
            q_pin[start_idx : start_idx + OBSTACLE_DIMENSIONS.q] = (
                OBSTACLE_MAPPING.get_position(self._obstacle_state(state, idx))
            )

        return q_pin

    def get_velocity(self, state, input):
        return self._map_derivatives(
            state,
            input,
            self.robot_mapping.get_velocity,
            OBSTACLE_MAPPING.get_velocity,
            "velocity",
        )

    def get_acceleration(self, state, input):
        return self._map_derivatives(
            state,
            input,
            self.robot_mapping.get_acceleration,
            OBSTACLE_MAPPING.get_acceleration,
            "acceleration",
        )

    def _map_derivatives(self, state, input, robot_fn, obstacle_fn, name):
        """
        Helper function that assembles either the joint velocities or accelerations,
        which share the same layout.

        Parameters
        ----------
            state : array-like
                The optimization state.
            input : array-like
                The optimization input.
            robot_fn : callable
                The robot mapping method to evaluate, taking a state and input.
            obstacle_fn : callable
                The obstacle mapping method to evaluate, taking a state and input.
            name : str
                The name of the quantity, to generate a descriptive error.
        """
        state = check_vector_size(state, self.dims.x(), "state")
        input = check_vector_size(input, self.dims.u(), "input")
        robot = self.dims.robot

        v_robot = check_vector_size(
            robot_fn(self._robot_state(state), input[: robot.u]),
            robot.v,
            f"robot {name}",
        )
        v_pin = np.zeros(self.dims.v(), dtype=self._output_dtype(v_robot, state))
        v_pin[: robot.v] = v_robot

        u_obs = np.zeros(OBSTACLE_DIMENSIONS.v, dtype=v_pin.dtype)  # Obstacles have no input
        for idx in range(self.dims.o):
            start_idx = robot.v + idx * OBSTACLE_DIMENSIONS.v
            v_pin[start_idx : start_idx + OBSTACLE_DIMENSIONS.v] = obstacle_fn(
                self._obstacle_state(state, idx), u_obs
            )

        return v_pin

    def get_jacobian_pair(self, state, Jq, Jv):
        state = check_vector_size(state, self.dims.x(), "state")
        Jq = check_jacobian_shape(Jq, self.dims.q(), "Jq")
        Jv = check_jacobian_shape(Jv, self.dims.v(), "Jv", rows=Jq.shape[0])
        robot = self.dims.robot
        output_dim = Jq.shape[0]

        # Robot contribution: the robot columns are at the beginning.
        dfdx_robot, dfdu_robot = self.robot_mapping.get_jacobian_pair(
            self._robot_state(state), Jq[:, : robot.q], Jv[:, : robot.v]
        )
        dfdx_robot = check_jacobian_shape(
            dfdx_robot, robot.x, "robot dfdx", rows=output_dim
        )
        dfdu_robot = check_jacobian_shape(
            dfdu_robot, robot.u, "robot dfdu", rows=output_dim
        )

        # The input columns belong to the robot only.
        dfdx = np.zeros(
            (output_dim, self.dims.x()), dtype=self._output_dtype(dfdx_robot, Jq, Jv)
        )
        dfdu = np.zeros((output_dim, self.dims.u()), dtype=dfdu_robot.dtype)
        dfdx[:, : robot.x] = dfdx_robot
        dfdu[:, : robot.u] = dfdu_robot

        # Obstacles follow the robot columns in Pinocchio order.
        # They have no input, so their dfdu is discarded.
        for idx in range(self.dims.o):
            q_idx = robot.q + idx * OBSTACLE_DIMENSIONS.q
            v_idx = robot.v + idx * OBSTACLE_DIMENSIONS.v
            x_idx = robot.x + idx * OBSTACLE_DIMENSIONS.x
            dfdx_obs, _ = OBSTACLE_MAPPING.get_jacobian_pair(
                self._obstacle_state(state, idx),
                Jq[:, q_idx : q_idx + OBSTACLE_DIMENSIONS.q],
                Jv[:, v_idx : v_idx + OBSTACLE_DIMENSIONS.v],
            )
            dfdx[:, x_idx : x_idx + OBSTACLE_DIMENSIONS.x] = dfdx_obs

        return dfdx, dfdu

    def __repr__(self):
        return f"SystemMapping({self.dims!r}, robot_mapping={self.robot_mapping!r})"


def stack_system_state(robot_state, obstacle_states=()):
    """
    Builds an optimization state from a robot state and a list of obstacle states.

    Parameters
    ----------
        robot_state : array-like
            The robot state.
        obstacle_states : list[array-like], optional
            The ``[position, velocity, acceleration]`` states of each obstacle, in model order.

    Returns
    -------
        numpy.ndarray
            The concatenated optimization state.
    """
    robot_state = np.asarray(robot_state)
    if robot_state.ndim != 1:
        raise ValueError(f"robot_state must be a vector, got shape {robot_state.shape}.")
    blocks = [robot_state]
    for idx, obstacle_state in enumerate(obstacle_states):
        blocks.append(
            check_vector_size(
                obstacle_state, OBSTACLE_DIMENSIONS.x, f"obstacle {idx} state"
            )
        )
    return np.concatenate(blocks)
