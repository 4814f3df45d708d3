"""Assembly of NLopt problems.

This module turns an algorithm selection, a set of engine options and the
callbacks of an [`EvaluationCache`][nlbridge.evaluation.EvaluationCache] into
an `nlopt.opt` object. Options are applied through an explicit table of
supported names: standard stopping criteria and limits are applied with the
matching setter, documented algorithm parameters (such as `inner_maxeval`)
are forwarded with `set_param`, and anything else is rejected with an
[`UnknownOptionError`][nlbridge.exceptions.UnknownOptionError].
"""

from ._problem import build_problem, check_options, validate_supported_constraints

__all__ = [
    "build_problem",
    "check_options",
    "validate_supported_constraints",
]
