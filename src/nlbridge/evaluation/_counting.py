from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable


class CountingFunction:
    """Wrap a function and count how often it is called.

    Attributes:
        function: The wrapped function.
        count:    The number of calls since creation or the last reset.
    """

    __slots__ = ("count", "function")

    def __init__(self, function: Callable[[Any], Any]) -> None:
        """Initialize the wrapper.

        Args:
            function: The function to wrap.
        """
        self.function = function
        self.count = 0

    def __call__(self, x: Any) -> Any:  # noqa: ANN401
        """Call the wrapped function, incrementing the counter.

        # noqa
        """
        self.count += 1
        return self.function(x)

    def reset(self) -> None:
        """Set the counter to zero."""
        self.count = 0
