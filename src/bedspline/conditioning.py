"""Preprocessing of raw sample grids: sorting, spacing checks and smoothing."""

from __future__ import annotations

import logging

import numpy as np
import numpy.typing as npt
import scipy.linalg

from ._tps_impl import _assemble_tps_system_core, _evaluate_tps_core
from ._utils import _normalize_knots, _normalize_samples
from .exceptions import InsufficientGridSizeError, NonUniformSpacingError, SingularSystemError
from .tolerance import get_spacing_tolerance

logger = logging.getLogger(__name__)


def sort_data(
    x: npt.ArrayLike, y: npt.ArrayLike, z: npt.ArrayLike
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """Sort the knots of both axes in ascending order and permute the sample grid accordingly.

    The correspondence ``z[i, j] <-> (x[j], y[i])`` is preserved. Sorting is
    stable, so any permutation of the same rows and columns yields identical
    output.

    Args:
        x (npt.ArrayLike): Knots along x, of length n.
        y (npt.ArrayLike): Knots along y, of length m.
        z (npt.ArrayLike): Sample grid of shape (m, n).

    Returns:
        tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        New sorted arrays ``x``, ``y`` and ``z``.

    Raises:
        DimensionMismatchError: If the shape of ``z`` is not (len(y), len(x)).

    Example:
        >>> sort_data([1.0, 0.0], [0.0, 1.0], [[1.0, 0.0], [3.0, 2.0]])
        (array([0., 1.]), array([0., 1.]), array([[0., 1.],
               [2., 3.]]))
    """
    x_arr, y_arr, z_arr = _normalize_samples(x, y, z)

    x_order = np.argsort(x_arr, kind="stable")
    y_order = np.argsort(y_arr, kind="stable")

    return x_arr[x_order], y_arr[y_order], np.ascontiguousarray(z_arr[np.ix_(y_order, x_order)])


def check_uniform_spacing(knots: npt.ArrayLike, name: str = "knots") -> float:
    """Check that knots are strictly ascending with a constant step.

    The step is taken from the first two knots. Every other step must agree with it
    up to the relative spacing tolerance (see :func:`get_spacing_tolerance`).

    Args:
        knots (npt.ArrayLike): Sorted knot coordinates along one axis.
        name (str): Name of the axis, used in error messages.

    Returns:
        float: The knot spacing ``knots[1] - knots[0]``.

    Raises:
        InsufficientGridSizeError: If there are fewer than 2 knots.
        NonUniformSpacingError: If the knots are not strictly ascending or not
            uniformly spaced.
    """
    arr = _normalize_knots(knots, name)
    if arr.size < 2:  # noqa: PLR2004
        raise InsufficientGridSizeError(f"{name} must contain at least 2 knots, got {arr.size}")

    steps = np.diff(arr)
    h = steps[0]
    if not h > 0.0:
        raise NonUniformSpacingError(f"{name} must be strictly ascending, got step {h}")

    tol = get_spacing_tolerance(arr.dtype)
    deviation = np.abs(steps - h)
    if np.any(deviation > tol * h):
        worst = int(np.argmax(deviation))
        raise NonUniformSpacingError(
            f"{name} must be uniformly spaced: step {worst} is {steps[worst]}, "
            f"expected {h} (relative tolerance {tol})"
        )
    return float(h)


def calc_tps(
    smoothing_factor: float, x: npt.ArrayLike, y: npt.ArrayLike, z: npt.ArrayLike
) -> npt.NDArray[np.float64]:
    r"""Smooth a sample grid with a thin-plate-spline regression.

    All grid points :math:`p_k = (x_j, y_i)` take part in the fit

    .. math::

        f(p) = a_0 + a_x x + a_y y + \sum_k w_k U(\|p - p_k\|),
        \qquad U(r) = r^2 \log r,

    whose weights solve :math:`(K + \lambda I) w + P a = z`, :math:`P^T w = 0`.
    A larger :math:`\lambda` trades interpolation for lower bending energy; for
    :math:`\lambda \to \infty` the fit tends to the least-squares plane.

    The system is dense with ``n*m + 3`` unknowns.

    Args:
        smoothing_factor (float): Non-negative regularization weight :math:`\lambda`.
        x (npt.ArrayLike): Knots along x, of length n.
        y (npt.ArrayLike): Knots along y, of length m.
        z (npt.ArrayLike): Sample grid of shape (m, n).

    Returns:
        npt.NDArray[np.float64]: The fitted surface evaluated on the grid, shape (m, n).

    Raises:
        ValueError: If ``smoothing_factor`` is negative or not finite.
        DimensionMismatchError: If the shape of ``z`` is not (len(y), len(x)).
        SingularSystemError: If the regression system is singular (e.g. all points
            on a line).
    """
    if not np.isfinite(smoothing_factor) or smoothing_factor < 0.0:
        raise ValueError(
            f"smoothing_factor must be finite and non-negative, got {smoothing_factor}"
        )

    x_arr, y_arr, z_arr = _normalize_samples(x, y, z)
    xx, yy = np.meshgrid(x_arr, y_arr)
    px = np.ascontiguousarray(xx.ravel())
    py = np.ascontiguousarray(yy.ravel())
    num_pts = px.size

    lhs = np.zeros((num_pts + 3, num_pts + 3), dtype=np.float64)
    _assemble_tps_system_core(px, py, float(smoothing_factor), lhs)
    rhs = np.concatenate([z_arr.ravel(), np.zeros(3)])

    logger.debug(
        "Thin-plate smoothing of %d points with smoothing factor %g", num_pts, smoothing_factor
    )
    try:
        coeffs = scipy.linalg.solve(lhs, rhs, assume_a="sym")
    except scipy.linalg.LinAlgError as err:
        raise SingularSystemError(f"Thin-plate-spline system is singular: {err}") from err

    out = np.empty(num_pts, dtype=np.float64)
    _evaluate_tps_core(px, py, coeffs, px, py, out)
    return out.reshape(z_arr.shape)
