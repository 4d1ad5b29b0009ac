"""Matrix inversion helpers that report singular input instead of raising."""

from typing import Optional

import jax
import jax.numpy as jnp

Array = jax.Array


def try_inverse(matrix: Array) -> Optional[Array]:
    """Inverse of a square matrix, or None if it is singular."""
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ValueError(f"matrix must be square, got shape {matrix.shape}")
    if int(jnp.linalg.matrix_rank(matrix)) < matrix.shape[0]:
        return None
    inverse = jnp.linalg.inv(matrix)
    if not bool(jnp.all(jnp.isfinite(inverse))):
        return None
    return inverse


def try_pseudo_inverse(matrix: Array) -> Optional[Array]:
    """Right pseudo-inverse ``A^T (A A^T)^-1``, or None if ``A A^T`` is singular.

    Meant for wide matrices (more columns than rows) of full row rank.
    """
    inverse = try_inverse(matrix @ matrix.T)
    if inverse is None:
        return None
    return matrix.T @ inverse
