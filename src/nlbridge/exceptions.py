"""Exceptions raised within the `nlbridge` library.

All exceptions defined here signal configuration errors. They are raised when
an algorithm selection or an options object is constructed or applied, before
any function evaluation takes place. Errors raised by user functions, or by the
differentiation engine while evaluating them, are never wrapped and reach the
caller unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class InvalidAlgorithmError(ValueError):
    """Raised when an algorithm name is not recognized.

    If a known algorithm name is close enough to the one given, it is stored
    in the `suggestion` attribute and mentioned in the message. Otherwise
    `suggestion` is `None` and the message lists all valid names.
    """

    def __init__(
        self, algorithm: str, valid: Sequence[str], suggestion: str | None = None
    ) -> None:
        """Initialize the InvalidAlgorithmError exception.

        Args:
            algorithm:  The offending algorithm name.
            valid:      The names that would have been accepted.
            suggestion: The closest valid name, if any.
        """
        self.algorithm = algorithm
        self.suggestion = suggestion
        msg = f"Algorithm {algorithm} is not a valid algorithm."
        if suggestion is None:
            msg += f" The valid algorithms are ({', '.join(valid)})."
        else:
            msg += f" Did you mean {suggestion}?"
        super().__init__(msg)


class MissingLocalOptimizerError(ValueError):
    """Raised when a meta algorithm is given without a local optimizer."""

    def __init__(self, algorithm: str, valid: Sequence[str]) -> None:
        """Initialize the MissingLocalOptimizerError exception.

        Args:
            algorithm: The meta algorithm name.
            valid:     The names that may be used as a local optimizer.
        """
        self.algorithm = algorithm
        self.valid = tuple(valid)
        msg = (
            f"A meta-algorithm {algorithm} was input but no local optimizer "
            "was specified. Please specify a local algorithm using "
            f"`NLoptAlgorithm({algorithm!r}, local_optimizer)` where "
            "`local_optimizer` is one of the following algorithms: "
            f"({', '.join(self.valid)})."
        )
        super().__init__(msg)


class UnknownOptionError(ValueError):
    """Raised when an option is not supported by the NLopt engine."""

    def __init__(self, option: str) -> None:
        """Initialize the UnknownOptionError exception.

        Args:
            option: The name of the unsupported option.
        """
        self.option = option
        msg = f"Unknown or unsupported option: `{option}`"
        super().__init__(msg)
