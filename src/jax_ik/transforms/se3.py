"""SE(3) rigid body transforms as 4x4 homogeneous matrices.

Every rigid transform in the library (link offsets, joint motion, link
world poses, end-effector poses) is a (4, 4) array built and combined
with the functions below. Composition reads left to right: in
``multiply(A, B)`` the motion ``B`` is expressed in the frame of ``A``.
"""


import jax
import jax.numpy as jnp

from . import so3

Array = jax.Array


def identity(dtype=jnp.float64) -> Array:
    """Identity transform."""
    return jnp.eye(4, dtype=dtype)


def from_position_and_rotation(p: Array, R: Array) -> Array:
    """
    Construct SE(3) transform from position and rotation.

    Args:
        p: (..., 3) position vector
        R: (..., 3, 3) rotation matrix

    Returns:
        (..., 4, 4) homogeneous transformation matrix
    """
    batch_shape = jnp.broadcast_shapes(p.shape[:-1], R.shape[:-2])
    p = jnp.broadcast_to(p, batch_shape + (3,))
    R = jnp.broadcast_to(R, batch_shape + (3, 3)).astype(p.dtype)

    T = jnp.zeros(batch_shape + (4, 4), dtype=p.dtype)
    T = T.at[..., :3, :3].set(R)
    T = T.at[..., :3, 3].set(p)
    T = T.at[..., 3, 3].set(1.0)

    return T


def from_translation(p, dtype=jnp.float64) -> Array:
    """Pure translation by `p`."""
    return from_position_and_rotation(jnp.asarray(p, dtype=dtype), jnp.eye(3, dtype=dtype))


def from_rotation(R, dtype=jnp.float64) -> Array:
    """Pure rotation by the 3x3 matrix `R`."""
    return from_position_and_rotation(jnp.zeros(3, dtype=dtype), jnp.asarray(R, dtype=dtype))


def from_xyz_rpy(xyz, rpy, dtype=jnp.float64) -> Array:
    """Transform described by a URDF ``<origin xyz=... rpy=...>`` pair."""
    R = so3.from_rpy(jnp.asarray(rpy, dtype=dtype))
    return from_position_and_rotation(jnp.asarray(xyz, dtype=dtype), R)


def multiply(T1: Array, T2: Array) -> Array:
    """
    Multiply two SE(3) transformation matrices.

    Args:
        T1: (..., 4, 4) first transformation matrix
        T2: (..., 4, 4) second transformation matrix

    Returns:
        (..., 4, 4) result of T1 @ T2
    """
    return jnp.matmul(T1, T2)


def inverse(T: Array) -> Array:
    """
    Compute inverse of SE(3) transformation matrix.

    Uses the block structure: T^-1 = [[R^T, -R^T @ t], [0, 1]]

    Args:
        T: (..., 4, 4) transformation matrix

    Returns:
        (..., 4, 4) inverse transformation matrix
    """
    R = T[..., :3, :3]
    t = T[..., :3, 3]

    R_inv = jnp.swapaxes(R, -1, -2)
    t_inv = -jnp.einsum("...ij,...j->...i", R_inv, t)

    return from_position_and_rotation(t_inv, R_inv)


def apply(T: Array, points: Array) -> Array:
    """
    Apply SE(3) transformation to points.

    Args:
        T: (..., 4, 4) transformation matrix
        points: (..., 3) points to transform

    Returns:
        (..., 3) transformed points
    """
    ones = jnp.ones_like(points[..., 0:1])
    points_h = jnp.concatenate([points, ones], axis=-1)
    transformed_h = jnp.einsum("...ij,...j->...i", T, points_h)
    return transformed_h[..., :3]


def get_position(T: Array) -> Array:
    """(..., 3) translation part of `T`."""
    return T[..., :3, 3]


def get_rotation(T: Array) -> Array:
    """(..., 3, 3) rotation part of `T`."""
    return T[..., :3, :3]


def get_quaternion(T: Array) -> Array:
    """(..., 4) rotation part of `T` as a (w, x, y, z) quaternion."""
    return so3.to_quaternion(get_rotation(T))
