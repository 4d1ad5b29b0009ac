"""Exceptions raised by joints, chains and the IK solver.

Two closed families: :class:`JointError` for rejected joint-angle
assignments and :class:`IKError` for failures of a solve.
"""


class JointError(Exception):
    """Base class for joint-angle assignment failures."""


class OutOfLimitError(JointError):
    """Angle rejected by the joint type or its limits."""

    def __init__(self, message: str = "limit over"):
        super().__init__(message)


class SizeMismatchError(JointError):
    """Angle vector length does not match the chain's degrees of freedom."""

    def __init__(self, message: str = "size is invalid"):
        super().__init__(message)


class IKError(Exception):
    """Base class for inverse kinematics failures."""


class NotConvergedError(IKError):
    def __init__(self, message: str = "ik solve not converged"):
        super().__init__(message)


class InverseMatrixError(IKError):
    def __init__(self, message: str = "ik failed to solve inverse matrix"):
        super().__init__(message)


class PreconditionError(IKError):
    def __init__(self, message: str = "ik precondition not match"):
        super().__init__(message)


class JointOutOfLimitError(IKError):
    """A :class:`JointError` raised while the solver was moving the chain."""

    def __init__(self, error: JointError):
        super().__init__(f"ik error : {error}")
        self.error = error
