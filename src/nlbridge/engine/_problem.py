from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING, Any, Final

import nlopt
import numpy as np

from nlbridge.config import NestedAlgorithm, NLoptOptions, StandaloneAlgorithm
from nlbridge.enums import Algorithm
from nlbridge.exceptions import UnknownOptionError

if TYPE_CHECKING:
    from collections.abc import Callable

    from numpy.typing import NDArray

    from nlbridge.config import AlgorithmConfig
    from nlbridge.evaluation import EvaluationCache

_logger = logging.getLogger(__name__)

# Categorize the algorithms by the types of constraint they support or require.

_CONSTRAINT_SUPPORT_INEQ: Final = {
    Algorithm.AUGLAG,
    Algorithm.AUGLAG_EQ,
    Algorithm.GN_AGS,
    Algorithm.GN_ISRES,
    Algorithm.GN_ORIG_DIRECT,
    Algorithm.GN_ORIG_DIRECT_L,
    Algorithm.LD_CCSAQ,
    Algorithm.LD_MMA,
    Algorithm.LD_SLSQP,
    Algorithm.LN_COBYLA,
}
_CONSTRAINT_SUPPORT_EQ: Final = {
    Algorithm.AUGLAG,
    Algorithm.AUGLAG_EQ,
    Algorithm.GN_ISRES,
    Algorithm.LD_SLSQP,
    Algorithm.LN_COBYLA,
}
_CONSTRAINT_REQUIRES_BOUNDS: Final = {
    Algorithm.G_MLSL,
    Algorithm.G_MLSL_LDS,
    Algorithm.GD_STOGO,
    Algorithm.GD_STOGO_RAND,
    Algorithm.GN_AGS,
    Algorithm.GN_CRS2_LM,
    Algorithm.GN_DIRECT,
    Algorithm.GN_DIRECT_L,
    Algorithm.GN_DIRECT_L_NOSCAL,
    Algorithm.GN_DIRECT_L_RAND,
    Algorithm.GN_DIRECT_L_RAND_NOSCAL,
    Algorithm.GN_DIRECT_NOSCAL,
    Algorithm.GN_ESCH,
    Algorithm.GN_ISRES,
    Algorithm.GN_ORIG_DIRECT,
    Algorithm.GN_ORIG_DIRECT_L,
}

_MESSAGES: Final = {
    "bounds": "finite bound constraints",
    "eq": "non-linear equality constraints",
    "ineq": "non-linear inequality constraints",
}

# Options that map to a dedicated setter of the engine problem. Options marked
# as vectors are broadcast to the number of variables.
_OPTION_SETTERS: Final[dict[str, tuple[Callable[[nlopt.opt, Any], Any], bool]]] = {
    "ftol_rel": (nlopt.opt.set_ftol_rel, False),
    "ftol_abs": (nlopt.opt.set_ftol_abs, False),
    "xtol_rel": (nlopt.opt.set_xtol_rel, False),
    "xtol_abs": (nlopt.opt.set_xtol_abs, True),
    "maxeval": (nlopt.opt.set_maxeval, False),
    "maxtime": (nlopt.opt.set_maxtime, False),
    "stopval": (nlopt.opt.set_stopval, False),
    "population": (nlopt.opt.set_population, False),
    "vector_storage": (nlopt.opt.set_vector_storage, False),
    "initial_step": (nlopt.opt.set_initial_step, True),
    "x_weights": (nlopt.opt.set_x_weights, True),
}

# Algorithm-specific parameters, forwarded to the generic parameter setter.
_ALGORITHM_PARAMETERS: Final = {
    "dual_algorithm",
    "dual_ftol_abs",
    "dual_ftol_rel",
    "dual_maxeval",
    "dual_xtol_abs",
    "dual_xtol_rel",
    "inner_maxeval",
    "rho_init",
    "verbosity",
}


def check_options(options: NLoptOptions) -> None:
    """Check that all options, including nested ones, are supported.

    Args:
        options: The options to check.

    Raises:
        UnknownOptionError: If an option is not supported.
    """
    for name, _ in options.items():
        if name not in _OPTION_SETTERS and name not in _ALGORITHM_PARAMETERS:
            raise UnknownOptionError(name)
    if options.suboptions is not None:
        check_options(options.suboptions)


def validate_supported_constraints(
    algorithm: Algorithm,
    lower_bounds: NDArray[np.float64],
    upper_bounds: NDArray[np.float64],
    *,
    have_ineq: bool,
    have_eq: bool,
) -> None:
    """Validate if the constraints of a problem are supported by an algorithm.

    For a meta algorithm, only the top-level algorithm is checked: it handles
    the non-linear constraints itself, and passes the local optimizer an
    unconstrained or bound-constrained subproblem.

    Args:
        algorithm:    The top-level algorithm.
        lower_bounds: The lower bounds of the variables.
        upper_bounds: The upper bounds of the variables.
        have_ineq:    Whether there are inequality constraints.
        have_eq:      Whether there are equality constraints.

    Raises:
        NotImplementedError: If a constraint is not supported by the
                             algorithm, or a required constraint is missing.
    """
    if have_ineq and algorithm not in _CONSTRAINT_SUPPORT_INEQ:
        msg = f"optimizer {algorithm} does not support {_MESSAGES['ineq']}"
        raise NotImplementedError(msg)
    if have_eq and algorithm not in _CONSTRAINT_SUPPORT_EQ:
        msg = f"optimizer {algorithm} does not support {_MESSAGES['eq']}"
        raise NotImplementedError(msg)
    finite = bool(np.isfinite(lower_bounds).all() and np.isfinite(upper_bounds).all())
    if not finite and algorithm in _CONSTRAINT_REQUIRES_BOUNDS:
        msg = f"optimizer {algorithm} requires {_MESSAGES['bounds']}"
        raise NotImplementedError(msg)


def build_problem(
    algorithm: AlgorithmConfig,
    cache: EvaluationCache,
    lower_bounds: NDArray[np.float64],
    upper_bounds: NDArray[np.float64],
    options: NLoptOptions,
) -> nlopt.opt:
    """Assemble an NLopt problem.

    The callbacks of the evaluation cache are registered as the objective and
    as one constraint per component of the inequality and equality
    constraints. Constraint components are registered in order, each with
    a tolerance of zero, i.e. as `c_i(x) <= 0` or `h_i(x) == 0`.

    If a local optimizer is configured, it is created first and configured
    with `options.suboptions` (or the default options if not set). It is only
    attached to the top-level problem after it is fully configured, since
    NLopt stores a copy of the local optimizer when it is attached.

    Args:
        algorithm:    The algorithm selection.
        cache:        The evaluation cache providing the callbacks.
        lower_bounds: The lower bounds of the variables, may be infinite.
        upper_bounds: The upper bounds of the variables, may be infinite.
        options:      The engine options.

    Returns:
        The NLopt problem, ready to be solved.

    Raises:
        UnknownOptionError: If an option is not supported.
    """
    check_options(options)
    problem = _create_problem(algorithm.algorithm, cache, lower_bounds, upper_bounds)

    match algorithm:
        case NestedAlgorithm(local_optimizer=local_optimizer):
            local_problem = _create_problem(
                local_optimizer, cache, lower_bounds, upper_bounds
            )
            _apply_options(
                local_problem,
                NLoptOptions() if options.suboptions is None else options.suboptions,
                lower_bounds.size,
            )
            problem.set_local_optimizer(local_problem)
            _logger.debug("attached local optimizer %s", local_optimizer)
        case StandaloneAlgorithm():
            pass

    _apply_options(problem, options, lower_bounds.size)

    for index in range(cache.ineq_count):
        problem.add_inequality_constraint(
            partial(cache.ineq_constraint, index=index), 0.0
        )
    for index in range(cache.eq_count):
        problem.add_equality_constraint(partial(cache.eq_constraint, index=index), 0.0)

    _logger.debug(
        "assembled %s problem with %d variables, %d inequality and %d equality "
        "constraints",
        algorithm.algorithm,
        lower_bounds.size,
        cache.ineq_count,
        cache.eq_count,
    )
    return problem


def _create_problem(
    algorithm: Algorithm,
    cache: EvaluationCache,
    lower_bounds: NDArray[np.float64],
    upper_bounds: NDArray[np.float64],
) -> nlopt.opt:
    problem = nlopt.opt(getattr(nlopt, algorithm.value), lower_bounds.size)
    problem.set_lower_bounds(lower_bounds)
    problem.set_upper_bounds(upper_bounds)
    problem.set_min_objective(cache.objective)
    return problem


def _apply_options(problem: nlopt.opt, options: NLoptOptions, dimension: int) -> None:
    for name, value in options.items():
        if name in _OPTION_SETTERS:
            setter, vector = _OPTION_SETTERS[name]
            if vector:
                value = np.broadcast_to(
                    np.asarray(value, dtype=np.float64), (dimension,)
                ).copy()
            setter(problem, value)
        elif name in _ALGORITHM_PARAMETERS:
            problem.set_param(name, value)
        else:
            raise UnknownOptionError(name)
