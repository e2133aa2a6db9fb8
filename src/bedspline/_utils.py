"""Input normalization helpers shared by the cache builders."""

import numpy as np
from numpy import typing as npt

from .exceptions import DimensionMismatchError


def _normalize_knots(knots: npt.ArrayLike, name: str) -> npt.NDArray[np.float64]:
    """Convert a knot sequence into a new contiguous 1D float64 array.

    Args:
        knots (npt.ArrayLike): Knot coordinates along one axis.
        name (str): Name of the axis, used in error messages.

    Returns:
        npt.NDArray[np.float64]: A copy of the knots.

    Raises:
        DimensionMismatchError: If the knots are not one-dimensional.
    """
    arr = np.array(knots, dtype=np.float64)
    if arr.ndim != 1:
        raise DimensionMismatchError(f"{name} must be a 1D sequence, got shape {arr.shape}")
    return np.ascontiguousarray(arr)


def _normalize_samples(
    x: npt.ArrayLike, y: npt.ArrayLike, z: npt.ArrayLike
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """Convert knots and sample grid into float64 arrays with consistent shapes.

    The sample grid is expected with shape ``(len(y), len(x))``: rows follow
    ``y`` and columns follow ``x``.

    Returns:
        tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        Copies of ``x``, ``y`` and ``z``.

    Raises:
        DimensionMismatchError: If the arrays do not have matching sizes.
    """
    x_arr = _normalize_knots(x, "x")
    y_arr = _normalize_knots(y, "y")
    z_arr = np.array(z, dtype=np.float64)

    if z_arr.ndim != 2:  # noqa: PLR2004
        raise DimensionMismatchError(f"z must be a 2D grid, got shape {z_arr.shape}")
    if z_arr.shape != (y_arr.size, x_arr.size):
        raise DimensionMismatchError(
            f"z must have shape (len(y), len(x)) = ({y_arr.size}, {x_arr.size}), "
            f"got {z_arr.shape}"
        )
    return x_arr, y_arr, np.ascontiguousarray(z_arr)


def _readonly(arr: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Flag an array as non-writeable and return it."""
    arr.setflags(write=False)
    return arr
