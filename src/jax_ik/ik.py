"""Jacobian-based inverse kinematics.

The solver works only through the :class:`~jax_ik.chain.KinematicChain`
interface. Each iteration estimates the Jacobian of the 6-vector pose
(translation + roll/pitch/yaw) by finite differences, inverts it and
takes one step toward the target.
"""

from logging import getLogger
from typing import List

import jax
import jax.numpy as jnp
from flax import struct

from .chain import KinematicChain
from .errors import (
    InverseMatrixError,
    JointError,
    JointOutOfLimitError,
    NotConvergedError,
    PreconditionError,
)
from .linalg import try_inverse, try_pseudo_inverse
from .transforms import se3, so3

Array = jax.Array

logger = getLogger(__name__)


def to_vector6(pose: Array) -> Array:
    """Flatten a rigid transform to [x, y, z, roll, pitch, yaw]."""
    rpy = so3.to_rpy(se3.get_quaternion(pose))
    return jnp.concatenate([se3.get_position(pose), rpy])


@struct.dataclass
class JacobianIKSolver:
    """Iterative IK solver over a numerically estimated Jacobian.

    Attributes:
        step_epsilon: Joint perturbation used for finite differences.
        tolerance: Pose-vector distance at which the solve succeeds.
        max_iterations: Upper bound on iterations; must be finite.
    """
    step_epsilon: float = struct.field(pytree_node=False, default=0.001)
    tolerance: float = struct.field(pytree_node=False, default=0.001)
    max_iterations: int = struct.field(pytree_node=False, default=100)

    def solve(self, chain: KinematicChain, target_pose: Array) -> float:
        """Move `chain` so its end transform reaches `target_pose`.

        Args:
            chain: Chain with at least 6 degrees of freedom.
            target_pose: (4, 4) desired end transform.

        Returns:
            Final distance between target and reached pose vectors.

        Raises:
            PreconditionError: if the chain has fewer than 6 DOF.
            InverseMatrixError: if the Jacobian cannot be inverted. The
                chain is left where the failing iteration put it.
            JointOutOfLimitError: if a joint rejects an angle on the way.
            NotConvergedError: if `max_iterations` pass without reaching
                `tolerance`. The original angles are restored first.
        """
        dof = chain.dof
        if dof < 6:
            raise PreconditionError(f"support only 6 or more DoF now, got {dof}")

        orig_angles = chain.get_joint_angles()
        target_pose6 = to_vector6(jnp.asarray(target_pose))
        for iteration in range(self.max_iterations):
            distance = self._solve_one_loop(chain, target_pose6)
            logger.debug("IK iteration %d: distance %.6g", iteration + 1, distance)
            if distance < self.tolerance:
                return distance

        logger.debug("IK did not converge after %d iterations", self.max_iterations)
        not_converged = NotConvergedError(
            f"ik solve not converged after {self.max_iterations} iterations")
        try:
            chain.set_joint_angles(orig_angles)
        except JointError as err:
            raise JointOutOfLimitError(err) from not_converged
        raise not_converged

    def _solve_one_loop(self, chain: KinematicChain, target_pose6: Array) -> float:
        angles = chain.get_joint_angles()
        dof = len(angles)
        orig_pose6 = to_vector6(chain.calc_end_transform())

        # Columns stay scaled by step_epsilon; the update below multiplies
        # by step_epsilon again to cancel it.
        columns = []
        for i in range(dof):
            small_diff_angles = list(angles)
            small_diff_angles[i] += self.step_epsilon
            _apply_angles(chain, small_diff_angles)
            columns.append(to_vector6(chain.calc_end_transform()) - orig_pose6)
        jacobian = jnp.stack(columns, axis=1)

        if dof > 6:
            j_inv = try_pseudo_inverse(jacobian)
        else:
            j_inv = try_inverse(jacobian)
        if j_inv is None:
            raise InverseMatrixError()

        angles_diff = j_inv @ (target_pose6 - orig_pose6) * self.step_epsilon
        new_angles = [angle + float(diff) for angle, diff in zip(angles, angles_diff)]
        _apply_angles(chain, new_angles)

        new_pose6 = to_vector6(chain.calc_end_transform())
        return float(jnp.linalg.norm(target_pose6 - new_pose6))


def _apply_angles(chain: KinematicChain, angles: List[float]) -> None:
    try:
        chain.set_joint_angles(angles)
    except JointError as err:
        raise JointOutOfLimitError(err) from err
