"""Numba-backed evaluation of tensor-product B-spline caches."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

import numba as nb
import numpy as np
import numpy.typing as npt

F = TypeVar("F", bound=Callable[..., Any])

if TYPE_CHECKING:
    # During type-checking, make the decorator a no-op that preserves types.
    def nb_jit(*args: object, **kwargs: object) -> Callable[[F], F]:
        def decorator(func: F) -> F:
            return func

        return decorator
else:
    # At runtime, use the real Numba decorator.
    nb_jit = nb.jit  # type: ignore[attr-defined]


@nb_jit(
    nopython=True,
    cache=True,
    parallel=False,
)
def _locate_cell(knots: npt.NDArray[np.float64], t: float) -> int:
    """Index ``i`` of the knot cell ``[knots[i], knots[i + 1]]`` containing ``t``.

    Points left of the first knot map to the first cell and points right of the
    last knot map to the last cell. The last knot itself belongs to the last cell.
    """
    lo = 0
    hi = knots.shape[0] - 2
    while lo < hi:
        mid = (lo + hi + 1) // 2
        if knots[mid] <= t:
            lo = mid
        else:
            hi = mid - 1
    return lo


@nb_jit(
    nopython=True,
    cache=True,
    parallel=False,
)
def _evaluate_tensor_Bspline_core(
    knots_x: npt.NDArray[np.float64],
    knots_y: npt.NDArray[np.float64],
    hx: float,
    hy: float,
    coeffs: npt.NDArray[np.float64],
    basis_matrix: npt.NDArray[np.float64],
    scale: float,
    px: npt.NDArray[np.float64],
    py: npt.NDArray[np.float64],
    out: npt.NDArray[np.float64],
) -> None:
    """Evaluate a uniform tensor-product B-spline at the given points.

    With ``k`` the order of ``basis_matrix`` and ``(i, j)`` the cell containing the
    point, the value is::

        scale * (K @ IP) @ Q[i:i+k, j:j+k] @ (N @ IP).T

    where ``K = [kappa^(k-1), ..., kappa, 1]``, ``kappa = (x - knots_x[i]) / hx``
    and ``N`` is built likewise from ``nu = (y - knots_y[j]) / hy``.

    Args:
        knots_x (npt.NDArray[np.float64]): Knots along x.
        knots_y (npt.NDArray[np.float64]): Knots along y.
        hx (float): Knot spacing along x.
        hy (float): Knot spacing along y.
        coeffs (npt.NDArray[np.float64]): Coefficient grid indexed ``[x, y]``.
        basis_matrix (npt.NDArray[np.float64]): Square basis matrix ``IP``.
        scale (float): Normalization factor of the basis.
        px (npt.NDArray[np.float64]): x coordinates of the query points.
        py (npt.NDArray[np.float64]): y coordinates of the query points.
        out (npt.NDArray[np.float64]): Output array of shape (len(px),). No
            validation is performed inside this numba-compiled function.
    """
    order = basis_matrix.shape[0]
    wx = np.empty(order, dtype=np.float64)
    wy = np.empty(order, dtype=np.float64)

    for p in range(px.shape[0]):
        i = _locate_cell(knots_x, px[p])
        j = _locate_cell(knots_y, py[p])
        kappa = (px[p] - knots_x[i]) / hx
        nu = (py[p] - knots_y[j]) / hy

        for c in range(order):
            wx[c] = 0.0
            wy[c] = 0.0
            for r in range(order):
                power = order - 1 - r
                wx[c] += kappa**power * basis_matrix[r, c]
                wy[c] += nu**power * basis_matrix[r, c]

        val = 0.0
        for a in range(order):
            for b in range(order):
                val += wx[a] * coeffs[i + a, j + b] * wy[b]
        out[p] = scale * val


def _warmup_numba_functions() -> None:
    """Precompile numba functions with float64 signatures for faster first call."""
    knots_dummy = np.array([0.0, 1.0], dtype=np.float64)
    coeffs_dummy = np.zeros((2, 2), dtype=np.float64)
    basis_dummy = np.array([[-1.0, 1.0], [1.0, 0.0]], dtype=np.float64)
    pts_dummy = np.array([0.5], dtype=np.float64)
    out_dummy = np.empty(1, dtype=np.float64)
    _evaluate_tensor_Bspline_core(
        knots_dummy,
        knots_dummy,
        1.0,
        1.0,
        coeffs_dummy,
        basis_dummy,
        1.0,
        pts_dummy,
        pts_dummy,
        out_dummy,
    )


# Precompile numba functions on module import (skip during type checking)
if not TYPE_CHECKING:
    _warmup_numba_functions()
