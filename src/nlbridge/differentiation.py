"""Function values, gradients and Jacobians by reverse-mode differentiation.

User functions are differentiated with [`jax`](https://jax.readthedocs.io/),
using [`jax.vjp`](https://jax.readthedocs.io/en/latest/_autosummary/jax.vjp.html).
A single forward pass produces the function value together with a pullback,
which maps a cotangent on the output to the corresponding gradient with
respect to the input:

- For a scalar function, the pullback is seeded once with `1.0`, producing
  the gradient.
- For a function returning a vector of length `m`, the pullback is seeded
  `m` times, once with each unit vector, producing the rows of the Jacobian.
  A Jacobian therefore costs `m` reverse passes.

Functions must be written in terms of `jax.numpy`. Double precision is
enabled when this module is imported.

All results are returned as NumPy arrays of type `float64`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import jax
import jax.numpy as jnp
import numpy as np

if TYPE_CHECKING:
    from collections.abc import Callable

    from numpy.typing import ArrayLike, NDArray

jax.config.update("jax_enable_x64", True)  # noqa: FBT003


def _as_input(x: ArrayLike) -> jax.Array:
    return jnp.asarray(x, dtype=jnp.float64)


def scalar_value(function: Callable[[Any], Any], x: ArrayLike) -> float:
    """Evaluate a scalar function.

    Args:
        function: The function to evaluate.
        x:        The point of evaluation.

    Returns:
        The function value.
    """
    return float(function(_as_input(x)))


def vector_value(
    function: Callable[[Any], Any], x: ArrayLike
) -> NDArray[np.float64]:
    """Evaluate a vector-valued function.

    Args:
        function: The function to evaluate.
        x:        The point of evaluation.

    Returns:
        The function values as a one-dimensional array.
    """
    return np.asarray(function(_as_input(x)), dtype=np.float64).reshape(-1)


def value_and_gradient(
    function: Callable[[Any], Any], x: ArrayLike
) -> tuple[float, NDArray[np.float64]]:
    """Evaluate a scalar function and its gradient in one pass.

    Args:
        function: The function to evaluate.
        x:        The point of evaluation.

    Returns:
        The function value and its gradient.
    """
    value, pullback = jax.vjp(function, _as_input(x))
    (gradient,) = pullback(jnp.ones_like(value))
    return float(value), np.asarray(gradient, dtype=np.float64)


def value_and_jacobian(
    function: Callable[[Any], Any], x: ArrayLike
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Evaluate a vector-valued function and its Jacobian.

    The Jacobian is accumulated row by row, each row requiring a separate
    reverse pass seeded with a unit vector.

    Args:
        function: The function to evaluate.
        x:        The point of evaluation.

    Returns:
        The function values and the Jacobian, with one row per value.
    """
    variables = _as_input(x)
    value, pullback = jax.vjp(lambda y: jnp.ravel(function(y)), variables)
    if value.size == 0:
        return np.zeros(0, dtype=np.float64), np.zeros(
            (0, variables.size), dtype=np.float64
        )
    rows = [pullback(seed)[0] for seed in jnp.eye(value.size, dtype=value.dtype)]
    return np.asarray(value, dtype=np.float64), np.asarray(
        jnp.stack(rows), dtype=np.float64
    )
