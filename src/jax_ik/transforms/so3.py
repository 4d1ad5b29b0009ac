"""SO(3) rotation helpers in JAX.

This module covers the rotation conversions the kinematic model needs:
axis-angle to matrix (joint motion), roll-pitch-yaw to matrix (URDF
origins), and quaternion round trips used by pose vectorization.
Quaternions are stored in (w, x, y, z) order.
"""

import jax
import jax.numpy as jnp

Array = jax.Array


def exp(log_r: Array) -> Array:
    """
    SO(3) exponential map: convert axis-angle vector to rotation matrix.

    Implements Rodrigues' formula to convert a 3D axis-angle vector (so(3))
    to a rotation matrix (SO(3)).

    Args:
        log_r: (..., 3) array of axis-angle vectors

    Returns:
        (..., 3, 3) array of rotation matrices
    """
    angle = jnp.linalg.norm(log_r, axis=-1, keepdims=True)

    # Taylor expansion near zero keeps the result finite
    small_angle = angle < 1e-8
    cos_angle = jnp.where(small_angle, 1.0 - 0.5 * angle**2, jnp.cos(angle))
    sin_angle = jnp.where(small_angle, angle - angle**3 / 6.0, jnp.sin(angle))

    axis = jnp.where(angle > 1e-8, log_r / jnp.where(small_angle, 1.0, angle), log_r)
    K = skew_symmetric(axis)

    # Rodrigues formula: R = I + sin(θ) * K + (1 - cos(θ)) * K²
    I = jnp.eye(3, dtype=log_r.dtype)
    I = jnp.broadcast_to(I, log_r.shape[:-1] + (3, 3))

    return (I +
            sin_angle[..., None] * K +
            (1.0 - cos_angle)[..., None] * jnp.matmul(K, K))


def from_axis_angle(axis: Array, angle, dtype=jnp.float64) -> Array:
    """Rotation of `angle` radians about the unit vector `axis`."""
    return exp(jnp.asarray(axis, dtype=dtype) * jnp.asarray(angle, dtype=dtype))


def skew_symmetric(v: Array) -> Array:
    """
    Convert 3D vector to skew-symmetric matrix.

    Args:
        v: (..., 3) vector

    Returns:
        (..., 3, 3) skew-symmetric matrix
    """
    zeros = jnp.zeros(v.shape[:-1], dtype=v.dtype)

    return jnp.stack([
        jnp.stack([zeros, -v[..., 2], v[..., 1]], axis=-1),
        jnp.stack([v[..., 2], zeros, -v[..., 0]], axis=-1),
        jnp.stack([-v[..., 1], v[..., 0], zeros], axis=-1)
    ], axis=-2)


def from_rpy(rpy: Array) -> Array:
    """Convert URDF roll-pitch-yaw angles to a rotation matrix.

    The fixed-axis convention is R = Rz(yaw) @ Ry(pitch) @ Rx(roll).

    Args:
        rpy: (3,) array of [roll, pitch, yaw] angles in radians.

    Returns:
        3x3 rotation matrix.
    """
    rpy = jnp.asarray(rpy)
    roll, pitch, yaw = rpy[0], rpy[1], rpy[2]
    one = jnp.ones_like(roll)
    zero = jnp.zeros_like(roll)

    R_x = jnp.array([
        [one, zero, zero],
        [zero, jnp.cos(roll), -jnp.sin(roll)],
        [zero, jnp.sin(roll), jnp.cos(roll)]
    ])
    R_y = jnp.array([
        [jnp.cos(pitch), zero, jnp.sin(pitch)],
        [zero, one, zero],
        [-jnp.sin(pitch), zero, jnp.cos(pitch)]
    ])
    R_z = jnp.array([
        [jnp.cos(yaw), -jnp.sin(yaw), zero],
        [jnp.sin(yaw), jnp.cos(yaw), zero],
        [zero, zero, one]
    ])
    return R_z @ R_y @ R_x


def to_rpy(quaternion: Array) -> Array:
    """Extract [roll, pitch, yaw] from a (w, x, y, z) quaternion.

    The pitch argument is clamped to [-1, 1] before `arcsin`, so values
    that drift slightly outside the range near gimbal lock still produce
    a finite angle. The quaternion is not renormalized.

    Args:
        quaternion: (4,) quaternion in (w, x, y, z) format

    Returns:
        (3,) array [roll, pitch, yaw]
    """
    w, x, y, z = quaternion[0], quaternion[1], quaternion[2], quaternion[3]
    ysqr = y * y

    roll = jnp.arctan2(2.0 * (w * x + y * z), 1.0 - 2.0 * (x * x + ysqr))
    pitch = jnp.arcsin(jnp.clip(2.0 * (w * y - z * x), -1.0, 1.0))
    yaw = jnp.arctan2(2.0 * (w * z + x * y), 1.0 - 2.0 * (ysqr + z * z))

    return jnp.stack([roll, pitch, yaw])


def from_quaternion(quaternions: Array) -> Array:
    """
    Convert quaternions to rotation matrices.

    Args:
        quaternions: (..., 4) array of quaternions in (w, x, y, z) format

    Returns:
        (..., 3, 3) array of rotation matrices
    """
    quaternions = quaternions / jnp.linalg.norm(quaternions, axis=-1, keepdims=True)

    w, x, y, z = jnp.moveaxis(quaternions, -1, 0)

    xx, yy, zz = x*x, y*y, z*z
    wx, wy, wz = w*x, w*y, w*z
    xy, xz, yz = x*y, x*z, y*z

    return jnp.stack([
        jnp.stack([1 - 2*(yy + zz), 2*(xy - wz), 2*(xz + wy)], axis=-1),
        jnp.stack([2*(xy + wz), 1 - 2*(xx + zz), 2*(yz - wx)], axis=-1),
        jnp.stack([2*(xz - wy), 2*(yz + wx), 1 - 2*(xx + yy)], axis=-1)
    ], axis=-2)


def to_quaternion(matrix: Array) -> Array:
    """
    Convert rotation matrices to quaternions (w, x, y, z).

    Args:
        matrix: (..., 3, 3) array of rotation matrices

    Returns:
        (..., 4) array of quaternions in (w, x, y, z) format
    """
    m00 = matrix[..., 0, 0]
    m01 = matrix[..., 0, 1]
    m02 = matrix[..., 0, 2]
    m10 = matrix[..., 1, 0]
    m11 = matrix[..., 1, 1]
    m12 = matrix[..., 1, 2]
    m20 = matrix[..., 2, 0]
    m21 = matrix[..., 2, 1]
    m22 = matrix[..., 2, 2]

    trace = m00 + m11 + m22
    eps = jnp.finfo(matrix.dtype).eps

    # Four candidates, one per dominant component
    q0 = jnp.stack([trace + 1.0, m21 - m12, m02 - m20, m10 - m01], axis=-1) * 0.5
    q1 = jnp.stack([m21 - m12, m00 - m11 - m22 + 1.0, m01 + m10, m02 + m20], axis=-1) * 0.5
    q2 = jnp.stack([m02 - m20, m01 + m10, m11 - m00 - m22 + 1.0, m12 + m21], axis=-1) * 0.5
    q3 = jnp.stack([m10 - m01, m02 + m20, m12 + m21, m22 - m00 - m11 + 1.0], axis=-1) * 0.5

    q0 = q0 * (1.0 / jnp.sqrt(jnp.maximum(1.0 + trace, eps)))[..., None]
    q1 = q1 * (1.0 / jnp.sqrt(jnp.maximum(1.0 + m00 - m11 - m22, eps)))[..., None]
    q2 = q2 * (1.0 / jnp.sqrt(jnp.maximum(1.0 + m11 - m00 - m22, eps)))[..., None]
    q3 = q3 * (1.0 / jnp.sqrt(jnp.maximum(1.0 + m22 - m00 - m11, eps)))[..., None]

    mask0 = (trace > 0)
    mask1 = (~mask0) & (m00 > m11) & (m00 > m22)
    mask2 = (~mask0) & (~mask1) & (m11 > m22)
    mask3 = (~mask0) & (~mask1) & (~mask2)

    quaternion = (
        jnp.where(mask0[..., None], q0, 0) +
        jnp.where(mask1[..., None], q1, 0) +
        jnp.where(mask2[..., None], q2, 0) +
        jnp.where(mask3[..., None], q3, 0)
    )

    # Non-negative scalar part
    quaternion = jnp.where(quaternion[..., 0:1] < 0, -quaternion, quaternion)
    return quaternion / jnp.linalg.norm(quaternion, axis=-1, keepdims=True)
