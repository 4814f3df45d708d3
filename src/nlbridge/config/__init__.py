"""The `nlbridge.config` module provides the configuration of an optimization run.

Two kinds of configuration are needed to solve a model:

- The algorithm selection, created by
  [`NLoptAlgorithm`][nlbridge.config.NLoptAlgorithm]. This is either a
  [`StandaloneAlgorithm`][nlbridge.config.StandaloneAlgorithm], or a
  [`NestedAlgorithm`][nlbridge.config.NestedAlgorithm] that pairs a meta
  algorithm with a local optimizer. Algorithm names are validated when the
  selection is created.
- The engine options, stored in an
  [`NLoptOptions`][nlbridge.config.NLoptOptions] object. This is a
  [`pydantic`](https://docs.pydantic.dev/) model, it can be created from a
  dictionary using the `model_validate` method.
"""

from ._algorithm import (
    AlgorithmConfig,
    NestedAlgorithm,
    NLoptAlgorithm,
    StandaloneAlgorithm,
)
from ._options import NLoptOptions

__all__ = [
    "AlgorithmConfig",
    "NLoptAlgorithm",
    "NLoptOptions",
    "NestedAlgorithm",
    "StandaloneAlgorithm",
]
