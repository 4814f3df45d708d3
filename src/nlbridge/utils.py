"""Array utilities."""

from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray


def immutable_array(
    array_like: ArrayLike,
    **kwargs: Any,  # noqa: ANN401
) -> NDArray[Any]:
    """Convert input to an immutable NumPy array.

    The input is always copied, and the `writeable` flag of the copy is set
    to `False`.

    Args:
        array_like: The input data to convert (e.g., list, tuple, NumPy array).
        kwargs:     Additional keyword arguments passed directly to `numpy.array`.

    Returns:
        A new NumPy array, with its `writeable` flag set to `False`.
    """
    array = np.array(array_like, copy=True, **kwargs)
    array.setflags(write=False)
    return array
