""" Dimensions of the robot, obstacle, and combined optimization states. """

import numbers

import numpy as np


class DimensionMismatch(ValueError):
    """Raised when a vector or matrix does not have the size implied by a set of dimensions."""


def _check_count(value, name, minimum):
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValueError(f"{name} must be an integer, got {value!r}.")
    if value < minimum:
        raise ValueError(f"{name} must be at least {minimum}, got {value}.")
    return int(value)


class RobotDimensions:
    """
    Dimensions of a single system with its own state and input.

    The state size is conventionally ``q + v``, or ``q + 2 * v`` for triple integrator systems
    whose state also contains the generalized accelerations.
    """

    __slots__ = ("_q", "_v", "_x", "_u")

    def __init__(self, q, v, x, u=0):
        """
        Creates a set of robot dimensions.

        Parameters
        ----------
            q : int
                The number of generalized positions.
            v : int
                The number of generalized velocities.
            x : int
                The size of the state vector.
            u : int, optional
                The size of the control input vector.
        """
        self._q = _check_count(q, "q", 1)
        self._v = _check_count(v, "v", 1)
        self._x = _check_count(x, "x", 1)
        self._u = _check_count(u, "u", 0)

    @property
    def q(self):
        return self._q

    @property
    def v(self):
        return self._v

    @property
    def x(self):
        return self._x

    @property
    def u(self):
        return self._u

    def __eq__(self, other):
        if not isinstance(other, RobotDimensions):
            return NotImplemented
        return (self.q, self.v, self.x, self.u) == (other.q, other.v, other.x, other.u)

    def __hash__(self):
        return hash((self.q, self.v, self.x, self.u))

    def __repr__(self):
        return f"RobotDimensions(q={self.q}, v={self.v}, x={self.x}, u={self.u})"


# Point-mass obstacle with position, velocity, and acceleration states and no input.
OBSTACLE_DIMENSIONS = RobotDimensions(3, 3, 9, 0)


class OptimizationDimensions:
    """
    Dimensions of the full system seen by the optimizer: a robot followed by a number of obstacles.

    Each obstacle adds a 3-DOF translation joint to the kinematic model and a
    9-dimensional triple integrator block to the optimization state, but no inputs.
    """

    __slots__ = ("_robot", "_o")

    def __init__(self, robot, o=0):
        """
        Creates a set of optimization dimensions.

        Parameters
        ----------
            robot : `RobotDimensions`
                The dimensions of the robot.
            o : int, optional
                The number of obstacles.
        """
        if not isinstance(robot, RobotDimensions):
            raise ValueError("robot must be a RobotDimensions instance.")
        self._robot = robot
        self._o = _check_count(o, "o", 0)

    @property
    def robot(self):
        return self._robot

    @property
    def o(self):
        return self._o

    def q(self):
        """Returns the number of generalized positions of the kinematic model."""
        return self.robot.q + OBSTACLE_DIMENSIONS.q * self.o

    def v(self):
        """Returns the number of generalized velocities of the kinematic model."""
        return self.robot.v + OBSTACLE_DIMENSIONS.v * self.o

    def x(self):
        """Returns the size of the optimization state."""
        return self.robot.x + OBSTACLE_DIMENSIONS.x * self.o

    def u(self):
        """Returns the size of the optimization input. Obstacles have no inputs."""
        return self.robot.u

    def __eq__(self, other):
        if not isinstance(other, OptimizationDimensions):
            return NotImplemented
        return self.robot == other.robot and self.o == other.o

    def __hash__(self):
        return hash((self.robot, self.o))

    def __repr__(self):
        return f"OptimizationDimensions(robot={self.robot!r}, o={self.o})"


def check_vector_size(vec, size, name):
    """
    Checks that a vector has the expected number of entries.

    Parameters
    ----------
        vec : array-like
            The vector to check.
        size : int
            The expected number of entries.
        name : str
            The name of the vector, used to generate a descriptive error.

    Returns
    -------
        numpy.ndarray
            The vector as a numpy array.

    Raises
    ------
        DimensionMismatch
            If the vector is not one-dimensional or has the wrong number of entries.
    """
    vec = np.asarray(vec)
    if vec.ndim != 1 or vec.shape[0] != size:
        raise DimensionMismatch(
            f"{name} must have shape ({size},), got {vec.shape}."
        )
    return vec


def check_jacobian_shape(J, cols, name, rows=None):
    """
    Checks that a Jacobian matrix has the expected number of columns, and optionally rows.

    Parameters
    ----------
        J : array-like
            The matrix to check.
        cols : int
            The expected number of columns.
        name : str
            The name of the matrix, used to generate a descriptive error.
        rows : int, optional
            The expected number of rows. If None, any number of rows is accepted.

    Returns
    -------
        numpy.ndarray
            The matrix as a numpy array.

    Raises
    ------
        DimensionMismatch
            If the matrix is not two-dimensional or has the wrong shape.
    """
    J = np.asarray(J)
    if J.ndim != 2:
        raise DimensionMismatch(f"{name} must be a matrix, got shape {J.shape}.")
    if J.shape[1] != cols:
        raise DimensionMismatch(
            f"{name} must have {cols} columns, got {J.shape[1]}."
        )
    if rows is not None and J.shape[0] != rows:
        raise DimensionMismatch(f"{name} must have {rows} rows, got {J.shape[0]}.")
    return J
