"""Configuration classes for the algorithm selection."""

from __future__ import annotations

from dataclasses import dataclass

from nlbridge.catalog import (
    LOCAL_ALGORITHMS,
    is_derivative_free,
    is_meta,
    validate,
    validate_pair,
)
from nlbridge.enums import Algorithm
from nlbridge.exceptions import MissingLocalOptimizerError


@dataclass(frozen=True, slots=True)
class StandaloneAlgorithm:
    """A single NLopt algorithm, used without a local optimizer.

    Attributes:
        algorithm: The algorithm.
    """

    algorithm: Algorithm

    def __post_init__(self) -> None:
        """Validate the algorithm.

        # noqa
        """
        algorithm = validate(self.algorithm)
        if is_meta(algorithm):
            raise MissingLocalOptimizerError(
                algorithm.value, [item.value for item in LOCAL_ALGORITHMS]
            )
        object.__setattr__(self, "algorithm", algorithm)

    @property
    def concrete(self) -> Algorithm:
        """The algorithm that evaluates the functions."""
        return self.algorithm

    @property
    def derivative_free(self) -> bool:
        """Whether gradients are never needed."""
        return is_derivative_free(self.algorithm)


@dataclass(frozen=True, slots=True)
class NestedAlgorithm:
    """An NLopt algorithm that drives a subordinate local optimizer.

    This is normally a meta algorithm, such as `AUGLAG` or `G_MLSL`. A
    non-meta algorithm is accepted as well, in which case the engine simply
    ignores the local optimizer.

    Attributes:
        algorithm:       The top-level algorithm.
        local_optimizer: The local optimizer.
    """

    algorithm: Algorithm
    local_optimizer: Algorithm

    def __post_init__(self) -> None:
        """Validate the algorithm and the local optimizer.

        # noqa
        """
        algorithm, local_optimizer = validate_pair(
            self.algorithm, self.local_optimizer
        )
        object.__setattr__(self, "algorithm", algorithm)
        object.__setattr__(self, "local_optimizer", local_optimizer)

    @property
    def concrete(self) -> Algorithm:
        """The algorithm that evaluates the functions.

        This is the local optimizer if the top-level algorithm is a meta
        algorithm. Otherwise NLopt ignores the local optimizer, and the
        top-level algorithm is returned.
        """
        return self.local_optimizer if is_meta(self.algorithm) else self.algorithm

    @property
    def derivative_free(self) -> bool:
        """Whether gradients are never needed.

        This is decided by the concrete algorithm: a meta algorithm may drive
        a local optimizer that needs gradients.
        """
        return is_derivative_free(self.concrete)


AlgorithmConfig = StandaloneAlgorithm | NestedAlgorithm
"""The type of a validated algorithm selection."""


def NLoptAlgorithm(  # noqa: N802
    algorithm: Algorithm | str, local_optimizer: Algorithm | str | None = None
) -> AlgorithmConfig:
    """Create a validated algorithm selection.

    This is the usual way to select an algorithm. Names are checked
    immediately, and a close match is suggested for misspelled names:

    ```py
    from nlbridge.config import NLoptAlgorithm

    NLoptAlgorithm("LD_MMA")
    NLoptAlgorithm("AUGLAG", "LD_LBFGS")
    NLoptAlgorithm("AUGLA")  # InvalidAlgorithmError: ... Did you mean AUGLAG?
    ```

    Args:
        algorithm:       The algorithm, or its name.
        local_optimizer: The local optimizer, or its name, if any.

    Returns:
        A standalone or a nested algorithm selection.

    Raises:
        InvalidAlgorithmError:      If a name is not valid in its role.
        MissingLocalOptimizerError: If a meta algorithm has no local optimizer.
    """
    algorithm, local_optimizer = validate_pair(algorithm, local_optimizer)
    if local_optimizer is None:
        return StandaloneAlgorithm(algorithm)
    return NestedAlgorithm(algorithm, local_optimizer)
