"""Catalog of the NLopt algorithms and validation of algorithm names.

The algorithms known to `nlbridge` are partitioned into three disjoint
groups:

- **Meta algorithms** drive a subordinate local optimizer and can not be used
  on their own.
- **Zero-order algorithms** use function values only.
- **First-order algorithms** also use gradients and constraint Jacobians.

The functions in this module check algorithm names, and the pairing of a
meta algorithm with a local optimizer. If a name is not recognized, the closest
valid name by edit distance is suggested, provided it is close enough.
"""

from __future__ import annotations

from typing import Final

import numpy as np

from .enums import Algorithm
from .exceptions import InvalidAlgorithmError, MissingLocalOptimizerError

META_ALGORITHMS: Final[tuple[Algorithm, ...]] = (
    Algorithm.G_MLSL,
    Algorithm.G_MLSL_LDS,
    Algorithm.AUGLAG,
    Algorithm.AUGLAG_EQ,
)

ZERO_ORDER_ALGORITHMS: Final[tuple[Algorithm, ...]] = (
    Algorithm.GN_DIRECT,
    Algorithm.GN_DIRECT_L,
    Algorithm.GN_DIRECT_L_RAND,
    Algorithm.GN_DIRECT_NOSCAL,
    Algorithm.GN_DIRECT_L_NOSCAL,
    Algorithm.GN_DIRECT_L_RAND_NOSCAL,
    Algorithm.GN_ORIG_DIRECT,
    Algorithm.GN_ORIG_DIRECT_L,
    Algorithm.GN_CRS2_LM,
    Algorithm.GN_AGS,
    Algorithm.GN_ESCH,
    Algorithm.GN_ISRES,
    Algorithm.LN_COBYLA,
    Algorithm.LN_BOBYQA,
    Algorithm.LN_NEWUOA,
    Algorithm.LN_NEWUOA_BOUND,
    Algorithm.LN_PRAXIS,
    Algorithm.LN_NELDERMEAD,
    Algorithm.LN_SBPLX,
)

FIRST_ORDER_ALGORITHMS: Final[tuple[Algorithm, ...]] = (
    Algorithm.GD_STOGO,
    Algorithm.GD_STOGO_RAND,
    Algorithm.LD_CCSAQ,
    Algorithm.LD_MMA,
    Algorithm.LD_SLSQP,
    Algorithm.LD_LBFGS,
    Algorithm.LD_TNEWTON,
    Algorithm.LD_TNEWTON_PRECOND,
    Algorithm.LD_TNEWTON_RESTART,
    Algorithm.LD_TNEWTON_PRECOND_RESTART,
    Algorithm.LD_VAR1,
    Algorithm.LD_VAR2,
)

LOCAL_ALGORITHMS: Final[tuple[Algorithm, ...]] = (
    ZERO_ORDER_ALGORITHMS + FIRST_ORDER_ALGORITHMS
)
ALL_ALGORITHMS: Final[tuple[Algorithm, ...]] = META_ALGORITHMS + LOCAL_ALGORITHMS

# Suggestions are only offered below this edit distance.
_MAX_SUGGESTION_DISTANCE: Final = 4


def is_meta(algorithm: Algorithm) -> bool:
    """Check if an algorithm requires a local optimizer.

    Args:
        algorithm: The algorithm to check.

    Returns:
        `True` if the algorithm is a meta algorithm.
    """
    return algorithm in META_ALGORITHMS


def is_derivative_free(algorithm: Algorithm) -> bool:
    """Check if an algorithm only uses function values.

    Args:
        algorithm: The algorithm to check.

    Returns:
        `True` if the algorithm is a zero-order algorithm.
    """
    return algorithm in ZERO_ORDER_ALGORITHMS


def edit_distance(first: str, second: str) -> int:
    """Compute the Levenshtein distance between two strings.

    The distance is the minimal number of single character insertions,
    deletions and substitutions that turn `first` into `second`.

    Args:
        first:  The first string.
        second: The second string.

    Returns:
        The edit distance.
    """
    previous = np.arange(len(second) + 1)
    for row, char in enumerate(first, start=1):
        current = np.empty_like(previous)
        current[0] = row
        for col, other in enumerate(second, start=1):
            current[col] = min(
                previous[col] + 1,
                current[col - 1] + 1,
                previous[col - 1] + (char != other),
            )
        previous = current
    return int(previous[-1])


def closest_match(
    name: str, candidates: tuple[Algorithm, ...]
) -> tuple[Algorithm, int]:
    """Find the candidate algorithm whose name is closest to the given name.

    If several candidates share the minimal distance, the first one in
    `candidates` is returned.

    Args:
        name:       The name to match.
        candidates: The algorithms to search, in order of preference.

    Returns:
        The closest algorithm and its edit distance to `name`.
    """
    distances = [edit_distance(name, candidate.value) for candidate in candidates]
    index = int(np.argmin(distances))
    return candidates[index], distances[index]


def validate(algorithm: Algorithm | str, *, local: bool = False) -> Algorithm:
    """Check that an algorithm name is valid.

    When `local` is `True`, the algorithm is meant to be used as the local
    optimizer of a meta algorithm, and meta algorithms are not accepted.

    Args:
        algorithm: The algorithm, or its name.
        local:     Whether the algorithm is used as a local optimizer.

    Returns:
        The validated algorithm.

    Raises:
        InvalidAlgorithmError: If the name is not valid in the given role.
    """
    valid = LOCAL_ALGORITHMS if local else ALL_ALGORITHMS
    name = str(algorithm)
    if name in valid:
        return Algorithm(name)
    match, distance = closest_match(name, valid)
    raise InvalidAlgorithmError(
        name,
        [item.value for item in valid],
        match.value if distance < _MAX_SUGGESTION_DISTANCE else None,
    )


def validate_pair(
    algorithm: Algorithm | str, local_optimizer: Algorithm | str | None = None
) -> tuple[Algorithm, Algorithm | None]:
    """Check an algorithm and its optional local optimizer.

    Args:
        algorithm:       The top-level algorithm, or its name.
        local_optimizer: The local optimizer, or its name, if any.

    Returns:
        The validated algorithm and local optimizer.

    Raises:
        MissingLocalOptimizerError: If a meta algorithm has no local optimizer.
        InvalidAlgorithmError:      If either name is not valid in its role.
    """
    if local_optimizer is None and str(algorithm) in META_ALGORITHMS:
        raise MissingLocalOptimizerError(
            str(algorithm), [item.value for item in LOCAL_ALGORITHMS]
        )
    return (
        validate(algorithm),
        None if local_optimizer is None else validate(local_optimizer, local=True),
    )
