from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from nlbridge.utils import immutable_array

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from nlbridge.config import AlgorithmConfig, NLoptOptions
    from nlbridge.enums import NLoptStatus


@dataclass(frozen=True, slots=True)
class OptimizationResult:
    """Stores the outcome of an optimization run.

    A failure status reported by the engine is not an error, the result is
    still returned. In that case `minimizer` and `minimum` hold the best
    feasible point found before termination, if any.

    Attributes:
        minimizer: The point where the minimum was found (immutable).
        minimum:   The objective value at `minimizer`.
        status:    The termination status reported by the engine.
        algorithm: The algorithm selection used.
        options:   The engine options used.
        fcalls:    The number of objective evaluations performed.
    """

    minimizer: NDArray[np.float64]
    minimum: float
    status: NLoptStatus
    algorithm: AlgorithmConfig
    options: NLoptOptions
    fcalls: int

    def __post_init__(self) -> None:
        """Store an immutable copy of the minimizer.

        # noqa
        """
        object.__setattr__(
            self, "minimizer", immutable_array(self.minimizer, dtype=np.float64)
        )
