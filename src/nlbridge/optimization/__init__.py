"""Running NLopt on a model.

A [`Workspace`][nlbridge.optimization.Workspace] binds a model, an algorithm
selection and engine options to an assembled NLopt problem. Its `optimize`
method runs the engine and returns an
[`OptimizationResult`][nlbridge.optimization.OptimizationResult]. The
[`optimize`][nlbridge.optimization.optimize] function combines both steps.
"""

from ._result import OptimizationResult
from ._workspace import Workspace, optimize

__all__ = [
    "OptimizationResult",
    "Workspace",
    "optimize",
]
