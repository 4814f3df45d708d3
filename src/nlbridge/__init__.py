"""Solve nonlinear programming models with NLopt.

`nlbridge` connects a [`Model`][nlbridge.model.Model] (an objective, variable
bounds, inequality and equality constraints) to the
[NLopt](https://nlopt.readthedocs.io/) optimization engine. Gradients and
constraint Jacobians are computed by reverse-mode differentiation with
[`jax`](https://jax.readthedocs.io/), and all evaluations are cached per point,
so that the engine can query the objective and every constraint component
separately without repeating any work.

Importing `nlbridge` enables 64-bit floating point in `jax`
(`jax.config.update("jax_enable_x64", True)`). This setting is global, and also
applies to any other `jax` code running in the same process.
"""

from nlbridge.config import NLoptAlgorithm, NLoptOptions
from nlbridge.enums import Algorithm, NLoptStatus
from nlbridge.model import Model
from nlbridge.optimization import OptimizationResult, Workspace, optimize

__all__ = [
    "Algorithm",
    "Model",
    "NLoptAlgorithm",
    "NLoptOptions",
    "NLoptStatus",
    "OptimizationResult",
    "Workspace",
    "optimize",
]
