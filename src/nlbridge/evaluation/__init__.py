"""Caching callbacks that connect a model to the NLopt engine.

The [`EvaluationCache`][nlbridge.evaluation.EvaluationCache] class presents
the objective and each constraint component of a model as separate NLopt
callbacks, evaluating all of them together, once per distinct point. The
[`CountingFunction`][nlbridge.evaluation.CountingFunction] wrapper counts
objective evaluations.
"""

from ._cache import EvaluationCache, EvaluationState
from ._counting import CountingFunction

__all__ = [
    "CountingFunction",
    "EvaluationCache",
    "EvaluationState",
]
