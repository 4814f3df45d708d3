from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import nlopt
import numpy as np

from nlbridge.config import NLoptAlgorithm, NLoptOptions
from nlbridge.engine import build_problem, check_options, validate_supported_constraints
from nlbridge.enums import NLoptStatus
from nlbridge.evaluation import CountingFunction, EvaluationCache

from ._result import OptimizationResult

if TYPE_CHECKING:
    from numpy.typing import ArrayLike, NDArray

    from nlbridge.config import AlgorithmConfig
    from nlbridge.enums import Algorithm
    from nlbridge.model import Model

_logger = logging.getLogger(__name__)


class Workspace:
    """Everything needed to solve a model with NLopt.

    Creating a workspace validates the configuration, warms up an
    [`EvaluationCache`][nlbridge.evaluation.EvaluationCache] at the initial
    point, and assembles the NLopt problem. Any configuration error is raised
    at this stage, before the engine is started:

    - An invalid algorithm name raises
      [`InvalidAlgorithmError`][nlbridge.exceptions.InvalidAlgorithmError],
      a meta algorithm without a local optimizer raises
      [`MissingLocalOptimizerError`][nlbridge.exceptions.MissingLocalOptimizerError].
    - An unsupported option raises
      [`UnknownOptionError`][nlbridge.exceptions.UnknownOptionError]. Options
      are checked before any function is evaluated.
    - Constraints that the algorithm can not handle raise `NotImplementedError`.
      This is checked after the warm-up evaluation, since a constraint
      function that returns no components does not count as a constraint.

    Each workspace owns its cache and evaluation counter, so separate
    workspaces can be used independently. A workspace can be solved repeatedly
    with [`optimize`][nlbridge.optimization.Workspace.optimize]; every run
    starts with an empty cache and a zero evaluation count.
    """

    def __init__(
        self,
        model: Model,
        algorithm: AlgorithmConfig | Algorithm | str,
        x0: ArrayLike | None = None,
        *,
        options: NLoptOptions | None = None,
    ) -> None:
        """Initialize the workspace.

        Args:
            model:     The model to solve.
            algorithm: The algorithm selection, or the name of an algorithm.
            x0:        The initial point, defaults to the model's initial point.
            options:   The engine options, defaults to `NLoptOptions()`.

        Raises:
            ValueError: If the initial point does not match the model.
        """
        if isinstance(algorithm, str):
            algorithm = NLoptAlgorithm(algorithm)
        if options is None:
            options = NLoptOptions()
        check_options(options)
        initial_point = _check_initial_point(
            model, model.initial_point() if x0 is None else x0
        )

        self._model = model
        self._algorithm = algorithm
        self._options = options
        self._initial_point = initial_point
        self._counter = CountingFunction(model.objective)
        # The warm-up evaluation determines the number of constraint components.
        self._cache = EvaluationCache(
            self._counter,
            model.ineq_constraint,
            model.eq_constraint,
            initial_point,
            derivative_free=algorithm.derivative_free,
        )
        lower_bounds, upper_bounds = model.lower_bounds, model.upper_bounds
        validate_supported_constraints(
            algorithm.algorithm,
            lower_bounds,
            upper_bounds,
            have_ineq=self._cache.ineq_count > 0,
            have_eq=self._cache.eq_count > 0,
        )
        self._problem = build_problem(
            algorithm, self._cache, lower_bounds, upper_bounds, options
        )

    @property
    def model(self) -> Model:
        """The model to solve."""
        return self._model

    @property
    def algorithm(self) -> AlgorithmConfig:
        """The algorithm selection."""
        return self._algorithm

    @property
    def options(self) -> NLoptOptions:
        """The engine options."""
        return self._options

    @property
    def initial_point(self) -> NDArray[np.float64]:
        """A copy of the initial point."""
        return self._initial_point.copy()

    @property
    def cache(self) -> EvaluationCache:
        """The evaluation cache providing the engine callbacks."""
        return self._cache

    @property
    def problem(self) -> nlopt.opt:
        """The assembled NLopt problem."""
        return self._problem

    def optimize(self, x0: ArrayLike | None = None) -> OptimizationResult:
        """Run the optimization.

        The engine receives a private copy of the initial point; the caller's
        array is never modified. The call blocks until the engine terminates.

        NLopt signals some terminations (round-off limited, forced stop,
        generic failure) with an exception. These are reported as a status in
        the result, with the best feasible point found before termination. An
        exception raised by the model functions is propagated unchanged.

        Args:
            x0: The initial point, defaults to the workspace's initial point.

        Returns:
            The result of the optimization.

        Raises:
            ValueError: If the initial point does not match the model.
        """
        initial_point = (
            self._initial_point.copy()
            if x0 is None
            else _check_initial_point(self._model, x0)
        )
        self._counter.reset()
        self._cache.reset()

        try:
            minimizer = self._problem.optimize(initial_point)
            minimum = float(self._problem.last_optimum_value())
            status = NLoptStatus(self._problem.last_optimize_result())
        except (nlopt.RoundoffLimited, nlopt.ForcedStop, RuntimeError) as exc:
            error = self._cache.error
            if error is exc:
                raise
            if error is not None:
                raise error from exc
            status = _exception_status(exc)
            incumbent = self._cache.incumbent()
            minimizer, minimum = (
                (initial_point, np.nan) if incumbent is None else incumbent
            )
            _logger.debug("engine terminated with %s", type(exc).__name__)

        _logger.info(
            "%s finished with status %s after %d evaluations",
            self._algorithm.algorithm,
            status.name,
            self._counter.count,
        )
        return OptimizationResult(
            minimizer=minimizer,
            minimum=minimum,
            status=status,
            algorithm=self._algorithm,
            options=self._options,
            fcalls=self._counter.count,
        )


def _check_initial_point(model: Model, x0: ArrayLike) -> NDArray[np.float64]:
    initial_point = np.array(x0, dtype=np.float64, ndmin=1)
    if initial_point.shape != (model.variable_count,):
        msg = (
            f"initial point has shape {initial_point.shape}, "
            f"expected ({model.variable_count},)"
        )
        raise ValueError(msg)
    return initial_point


def _exception_status(exc: Exception) -> NLoptStatus:
    if isinstance(exc, nlopt.RoundoffLimited):
        return NLoptStatus.ROUNDOFF_LIMITED
    if isinstance(exc, nlopt.ForcedStop):
        return NLoptStatus.FORCED_STOP
    return NLoptStatus.FAILURE


def optimize(
    model: Model,
    algorithm: AlgorithmConfig | Algorithm | str,
    x0: ArrayLike | None = None,
    *,
    options: NLoptOptions | None = None,
) -> OptimizationResult:
    """Solve a model with NLopt.

    This is a shortcut for creating a
    [`Workspace`][nlbridge.optimization.Workspace] and calling its
    [`optimize`][nlbridge.optimization.Workspace.optimize] method:

    ```py
    from nlbridge import NLoptAlgorithm, NLoptOptions, optimize

    result = optimize(
        model, NLoptAlgorithm("LD_MMA"), [1.234, 2.345],
        options=NLoptOptions(xtol_rel=1e-4),
    )
    print(result.status, result.minimum, result.minimizer)
    ```

    Args:
        model:     The model to solve.
        algorithm: The algorithm selection, or the name of an algorithm.
        x0:        The initial point, defaults to the model's initial point.
        options:   The engine options, defaults to `NLoptOptions()`.

    Returns:
        The result of the optimization.
    """
    return Workspace(model, algorithm, x0, options=options).optimize()
