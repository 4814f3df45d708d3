"""A minimal container for a nonlinear programming model."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import jax.numpy as jnp
import numpy as np

if TYPE_CHECKING:
    from collections.abc import Callable

    from numpy.typing import ArrayLike, NDArray

    ModelFunction = Callable[[Any], Any]


class Model:
    """Nonlinear programming model.

    A model stores an objective function, the bounds of the variables and any
    number of inequality and equality constraints. The model is minimized
    subject to:

    - `lower_bounds <= x <= upper_bounds`
    - `c(x) <= 0` for every inequality constraint `c`
    - `h(x) == 0` for every equality constraint `h`

    Constraint functions may return a scalar or a vector. A vector-valued
    constraint function represents a block of constraints, one per component.
    All functions must be written with `jax.numpy` so that they can be
    differentiated.

    **Example**:
    ```py
    import jax.numpy as jnp
    from nlbridge.model import Model

    model = Model(lambda x: jnp.sqrt(x[1]))
    model.add_variables([0.0, 0.0], [10.0, 10.0])
    model.add_ineq_constraint(lambda x: (2 * x[0]) ** 3 - x[1])
    ```
    """

    def __init__(self, objective: ModelFunction) -> None:
        """Initialize a model with an objective function.

        Args:
            objective: The function to minimize.
        """
        self._objective = objective
        self._lower_bounds: NDArray[np.float64] = np.zeros(0, dtype=np.float64)
        self._upper_bounds: NDArray[np.float64] = np.zeros(0, dtype=np.float64)
        self._ineq_constraints: list[ModelFunction] = []
        self._eq_constraints: list[ModelFunction] = []

    def add_variables(self, lower_bounds: ArrayLike, upper_bounds: ArrayLike) -> None:
        """Add variables with the given bounds.

        Bounds may be infinite. Repeated calls append variables.

        Args:
            lower_bounds: The lower bounds of the new variables.
            upper_bounds: The upper bounds of the new variables.

        Raises:
            ValueError: If the bounds have different sizes or are inconsistent.
        """
        lower = np.array(lower_bounds, dtype=np.float64, ndmin=1)
        upper = np.array(upper_bounds, dtype=np.float64, ndmin=1)
        if lower.shape != upper.shape or lower.ndim != 1:
            msg = "lower and upper bounds must be vectors of the same size"
            raise ValueError(msg)
        if np.any(lower > upper):
            msg = "lower bounds must not be larger than upper bounds"
            raise ValueError(msg)
        self._lower_bounds = np.concatenate((self._lower_bounds, lower))
        self._upper_bounds = np.concatenate((self._upper_bounds, upper))

    def add_ineq_constraint(self, function: ModelFunction) -> None:
        """Add an inequality constraint, or a block of them.

        Args:
            function: A function that is non-positive on the feasible set.
        """
        self._ineq_constraints.append(function)

    def add_eq_constraint(self, function: ModelFunction) -> None:
        """Add an equality constraint, or a block of them.

        Args:
            function: A function that is zero on the feasible set.
        """
        self._eq_constraints.append(function)

    @property
    def objective(self) -> ModelFunction:
        """The objective function."""
        return self._objective

    @property
    def variable_count(self) -> int:
        """The number of variables."""
        return self._lower_bounds.size

    @property
    def lower_bounds(self) -> NDArray[np.float64]:
        """The lower bounds of the variables."""
        return self._lower_bounds.copy()

    @property
    def upper_bounds(self) -> NDArray[np.float64]:
        """The upper bounds of the variables."""
        return self._upper_bounds.copy()

    @property
    def ineq_constraint(self) -> ModelFunction | None:
        """All inequality constraints as a single vector-valued function."""
        return _stack(self._ineq_constraints)

    @property
    def eq_constraint(self) -> ModelFunction | None:
        """All equality constraints as a single vector-valued function."""
        return _stack(self._eq_constraints)

    def initial_point(self) -> NDArray[np.float64]:
        """Return a default starting point.

        The midpoint of the bounds is used where both are finite. Where only
        one bound is finite, the bound itself is used, otherwise zero.

        Returns:
            The starting point.
        """
        lower, upper = self._lower_bounds, self._upper_bounds
        point = np.where(np.isfinite(lower), lower, 0.0)
        point = np.where(np.isfinite(upper) & ~np.isfinite(lower), upper, point)
        finite = np.isfinite(lower) & np.isfinite(upper)
        point[finite] = 0.5 * (lower[finite] + upper[finite])
        return point


def _stack(functions: list[ModelFunction]) -> ModelFunction | None:
    if not functions:
        return None
    functions = list(functions)

    def _stacked(x: Any) -> Any:  # noqa: ANN401
        return jnp.concatenate([jnp.ravel(function(x)) for function in functions])

    return _stacked
