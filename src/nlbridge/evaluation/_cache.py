from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Final

import numpy as np

from nlbridge.differentiation import (
    scalar_value,
    value_and_gradient,
    value_and_jacobian,
    vector_value,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from numpy.typing import ArrayLike, NDArray

# Tolerance used to decide if an evaluated point may serve as the incumbent.
_FEASIBILITY_TOLERANCE: Final = 1e-8


def _empty(*shape: int) -> NDArray[np.float64]:
    return np.zeros(shape, dtype=np.float64)


@dataclass(slots=True)
class EvaluationState:
    """The values and derivatives cached for the last evaluated point.

    Attributes:
        point:         The last evaluated point, `None` if invalidated.
        objective:     The objective value at `point`.
        gradient:      The objective gradient, `None` if not computed.
        ineq:          The inequality constraint values.
        ineq_jacobian: The inequality constraint Jacobian, if computed.
        eq:            The equality constraint values.
        eq_jacobian:   The equality constraint Jacobian, if computed.
    """

    point: NDArray[np.float64] | None = None
    objective: float = np.nan
    gradient: NDArray[np.float64] | None = None
    ineq: NDArray[np.float64] = field(default_factory=lambda: _empty(0))
    ineq_jacobian: NDArray[np.float64] | None = None
    eq: NDArray[np.float64] = field(default_factory=lambda: _empty(0))
    eq_jacobian: NDArray[np.float64] | None = None

    def reset(self) -> None:
        """Invalidate the point and clear the cached values."""
        self.point = None
        self.objective = np.nan
        self.gradient = None
        self.ineq = _empty(0)
        self.ineq_jacobian = None
        self.eq = _empty(0)
        self.eq_jacobian = None

    def matches(self, x: NDArray[np.float64], *, need_gradient: bool) -> bool:
        """Check if the cached entry can serve a query.

        Points are compared exactly, element by element.

        Args:
            x:             The queried point.
            need_gradient: Whether derivatives are requested.

        Returns:
            `True` if the cached values are valid for the query.
        """
        if self.point is None or (need_gradient and self.gradient is None):
            return False
        return np.array_equal(self.point, x)


class EvaluationCache:
    """Callbacks for the NLopt engine, backed by a cache keyed on the point.

    NLopt expects the objective and every constraint component to be
    presented as a separate callback with the signature `(x, grad) -> value`.
    The `grad` argument is an array that is empty if only the value is
    needed, and that must otherwise be filled in place with the gradient of
    the objective, or with the Jacobian row of the constraint component.

    Within one iteration the engine typically queries the objective and every
    constraint component at the same point. All functions are evaluated
    together when a new point is encountered, and the results are stored in
    an [`EvaluationState`][nlbridge.evaluation.EvaluationState]. Subsequent
    queries at the same point are served from that state, so that each
    distinct point is evaluated at most once, or twice if derivatives are
    requested after a value-only evaluation.

    If the configuration is derivative-free, derivatives are never computed.

    The cache is evaluated once on construction, at the initial point, to
    determine the number of constraint components. Call
    [`reset`][nlbridge.evaluation.EvaluationCache.reset] before each
    optimization run to invalidate it.

    Exceptions raised while evaluating the functions are propagated
    unchanged. The last one is also stored in the `error` attribute, since the
    engine may report the aborted run with an exception of its own.
    """

    def __init__(  # noqa: PLR0913
        self,
        objective: Callable[[Any], Any],
        ineq_constraint: Callable[[Any], Any] | None,
        eq_constraint: Callable[[Any], Any] | None,
        initial_point: ArrayLike,
        *,
        derivative_free: bool,
    ) -> None:
        """Initialize the cache.

        Args:
            objective:       The objective function.
            ineq_constraint: Vector-valued inequality constraints, if any.
            eq_constraint:   Vector-valued equality constraints, if any.
            initial_point:   The point used to warm up the cache.
            derivative_free: If `True`, derivatives are never computed.
        """
        self._objective = objective
        self._ineq_constraint = ineq_constraint
        self._eq_constraint = eq_constraint
        self._derivative_free = derivative_free
        self._state = EvaluationState()
        self._incumbent: tuple[float, NDArray[np.float64]] | None = None
        self.error: Exception | None = None

        self.update(initial_point, need_gradient=not derivative_free)
        self.ineq_count = self._state.ineq.size
        self.eq_count = self._state.eq.size

    @property
    def state(self) -> EvaluationState:
        """The cached state."""
        return self._state

    @property
    def derivative_free(self) -> bool:
        """Whether derivatives are never computed."""
        return self._derivative_free

    def reset(self) -> None:
        """Invalidate the cache and forget the incumbent and the last error."""
        self._state.reset()
        self._incumbent = None
        self.error = None

    def update(self, x: ArrayLike, *, need_gradient: bool) -> None:
        """Evaluate all functions at a point and store the results.

        Args:
            x:             The point of evaluation.
            need_gradient: If `True`, also compute derivatives.
        """
        point = np.array(x, dtype=np.float64)
        state = self._state
        state.point = None
        if need_gradient:
            state.objective, state.gradient = value_and_gradient(
                self._objective, point
            )
            state.ineq, state.ineq_jacobian = self._jacobian(
                self._ineq_constraint, point
            )
            state.eq, state.eq_jacobian = self._jacobian(self._eq_constraint, point)
        else:
            state.objective = scalar_value(self._objective, point)
            state.gradient = None
            state.ineq = self._values(self._ineq_constraint, point)
            state.ineq_jacobian = None
            state.eq = self._values(self._eq_constraint, point)
            state.eq_jacobian = None
        state.point = point
        self._track_incumbent()

    def objective(self, x: NDArray[np.float64], grad: NDArray[np.float64]) -> float:
        """The objective callback.

        Args:
            x:    The point of evaluation.
            grad: Buffer for the gradient, empty if not needed.

        Returns:
            The objective value.
        """
        self._refresh(x, grad)
        if grad.size > 0 and self._state.gradient is not None:
            grad[:] = self._state.gradient
        return self._state.objective

    def ineq_constraint(
        self, x: NDArray[np.float64], grad: NDArray[np.float64], index: int
    ) -> float:
        """The callback for one inequality constraint component.

        Args:
            x:     The point of evaluation.
            grad:  Buffer for the Jacobian row, empty if not needed.
            index: The index of the component.

        Returns:
            The value of the component.
        """
        self._refresh(x, grad)
        if grad.size > 0 and self._state.ineq_jacobian is not None:
            grad[:] = self._state.ineq_jacobian[index, :]
        return float(self._state.ineq[index])

    def eq_constraint(
        self, x: NDArray[np.float64], grad: NDArray[np.float64], index: int
    ) -> float:
        """The callback for one equality constraint component.

        Args:
            x:     The point of evaluation.
            grad:  Buffer for the Jacobian row, empty if not needed.
            index: The index of the component.

        Returns:
            The value of the component.
        """
        self._refresh(x, grad)
        if grad.size > 0 and self._state.eq_jacobian is not None:
            grad[:] = self._state.eq_jacobian[index, :]
        return float(self._state.eq[index])

    def incumbent(self) -> tuple[NDArray[np.float64], float] | None:
        """Return the best feasible point evaluated since the last reset.

        If no feasible point was found, the last evaluated point is returned.

        Returns:
            The point and its objective value, or `None` if nothing was evaluated.
        """
        if self._incumbent is not None:
            value, point = self._incumbent
            return point.copy(), value
        if self._state.point is not None:
            return self._state.point.copy(), self._state.objective
        return None

    def _refresh(self, x: NDArray[np.float64], grad: NDArray[np.float64]) -> None:
        need_gradient = grad.size > 0 and not self._derivative_free
        if self._state.matches(x, need_gradient=need_gradient):
            return
        try:
            self.update(x, need_gradient=need_gradient)
        except Exception as exc:
            self.error = exc
            raise

    def _track_incumbent(self) -> None:
        state = self._state
        assert state.point is not None
        feasible = np.all(state.ineq <= _FEASIBILITY_TOLERANCE) and np.all(
            np.abs(state.eq) <= _FEASIBILITY_TOLERANCE
        )
        if feasible and (
            self._incumbent is None or state.objective < self._incumbent[0]
        ):
            self._incumbent = (state.objective, state.point.copy())

    @staticmethod
    def _values(
        function: Callable[[Any], Any] | None, x: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        if function is None:
            return _empty(0)
        return vector_value(function, x)

    @staticmethod
    def _jacobian(
        function: Callable[[Any], Any] | None, x: NDArray[np.float64]
    ) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        if function is None:
            return _empty(0), _empty(0, x.size)
        return value_and_jacobian(function, x)
