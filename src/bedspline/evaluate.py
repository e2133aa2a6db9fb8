"""Point evaluation of B-spline caches."""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from ._evaluate_impl import _evaluate_tensor_Bspline_core
from ._stencil_impl import COEFFICIENT_SCALE
from .cache_2D import BicubicBsplineCache, BilinearBsplineCache


def evaluate_Bspline_cache(
    cache: BilinearBsplineCache | BicubicBsplineCache,
    x: npt.ArrayLike,
    y: npt.ArrayLike,
) -> float | npt.NDArray[np.float64]:
    """Evaluate the B-spline surface of a cache at the given points.

    ``x`` and ``y`` are broadcast against each other. Each point is evaluated on
    the knot cell containing it; points outside the knot range are extrapolated
    from the nearest boundary cell.

    Args:
        cache (BilinearBsplineCache | BicubicBsplineCache): The cache to evaluate.
        x (npt.ArrayLike): x coordinates of the points.
        y (npt.ArrayLike): y coordinates of the points.

    Returns:
        float | npt.NDArray[np.float64]: The surface values, a float for scalar
        input and an array of the broadcast shape otherwise.

    Raises:
        TypeError: If ``cache`` is not a B-spline cache.
        ValueError: If ``x`` and ``y`` cannot be broadcast together.

    Example:
        >>> cache = create_bilinear_Bspline_cache([0.0, 1.0], [0.0, 1.0], [[0.0, 1.0], [2.0, 3.0]])
        >>> evaluate_Bspline_cache(cache, 0.5, 0.5)
        1.5
    """
    if isinstance(cache, BicubicBsplineCache):
        scale = 1.0 / COEFFICIENT_SCALE
    elif isinstance(cache, BilinearBsplineCache):
        scale = 1.0
    else:
        raise TypeError(f"Expected a B-spline cache, got {type(cache).__name__}")

    px, py = np.broadcast_arrays(np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64))
    shape = px.shape
    px_flat = np.ascontiguousarray(px.ravel())
    py_flat = np.ascontiguousarray(py.ravel())
    out = np.empty(px_flat.size, dtype=np.float64)

    hx, hy = cache.spacing
    _evaluate_tensor_Bspline_core(
        cache.x, cache.y, hx, hy, cache.Q, cache.IP, scale, px_flat, py_flat, out
    )

    if len(shape) == 0:
        return float(out[0])
    return out.reshape(shape)
