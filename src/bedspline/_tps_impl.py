"""Numba-backed kernels for thin-plate-spline smoothing of sample grids."""

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
def _tps_radial_basis(r: float) -> float:
    """Thin-plate radial basis ``U(r) = r^2 log(r)``, with ``U(0) = 0``."""
    if r <= 0.0:
        return 0.0
    return r * r * np.log(r)


@nb_jit(
    nopython=True,
    cache=True,
    parallel=False,
)
def _assemble_tps_system_core(
    px: npt.NDArray[np.float64],
    py: npt.NDArray[np.float64],
    smoothing_factor: float,
    out: npt.NDArray[np.float64],
) -> None:
    """Fill the thin-plate-spline regression matrix.

    The matrix has the block structure::

        [[K + lambda * I, P],
         [P^T,            0]]

    where ``K[i, j] = U(|p_i - p_j|)`` and ``P[i] = [1, px[i], py[i]]``.

    Args:
        px (npt.NDArray[np.float64]): x coordinates of the data points.
        py (npt.NDArray[np.float64]): y coordinates of the data points.
        smoothing_factor (float): Regularization weight ``lambda`` put on the
            diagonal of ``K``.
        out (npt.NDArray[np.float64]): Zero-initialized output array of shape
            (num_pts + 3, num_pts + 3). No validation is performed inside this
            numba-compiled function.
    """
    num_pts = px.shape[0]
    for i in range(num_pts):
        out[i, i] = smoothing_factor
        for j in range(i + 1, num_pts):
            dx = px[i] - px[j]
            dy = py[i] - py[j]
            u = _tps_radial_basis(np.sqrt(dx * dx + dy * dy))
            out[i, j] = u
            out[j, i] = u

        out[i, num_pts] = 1.0
        out[i, num_pts + 1] = px[i]
        out[i, num_pts + 2] = py[i]
        out[num_pts, i] = 1.0
        out[num_pts + 1, i] = px[i]
        out[num_pts + 2, i] = py[i]


@nb_jit(
    nopython=True,
    cache=True,
    parallel=False,
)
def _evaluate_tps_core(
    px: npt.NDArray[np.float64],
    py: npt.NDArray[np.float64],
    coeffs: npt.NDArray[np.float64],
    qx: npt.NDArray[np.float64],
    qy: npt.NDArray[np.float64],
    out: npt.NDArray[np.float64],
) -> None:
    """Evaluate a fitted thin-plate spline at the query points.

    Args:
        px (npt.NDArray[np.float64]): x coordinates of the data points.
        py (npt.NDArray[np.float64]): y coordinates of the data points.
        coeffs (npt.NDArray[np.float64]): Solution of the regression system:
            ``num_pts`` radial weights followed by the affine coefficients
            ``(a0, ax, ay)``.
        qx (npt.NDArray[np.float64]): x coordinates of the query points.
        qy (npt.NDArray[np.float64]): y coordinates of the query points.
        out (npt.NDArray[np.float64]): Output array of shape (len(qx),).
    """
    num_pts = px.shape[0]
    for k in range(qx.shape[0]):
        val = coeffs[num_pts] + coeffs[num_pts + 1] * qx[k] + coeffs[num_pts + 2] * qy[k]
        for i in range(num_pts):
            dx = px[i] - qx[k]
            dy = py[i] - qy[k]
            val += coeffs[i] * _tps_radial_basis(np.sqrt(dx * dx + dy * dy))
        out[k] = val


def _warmup_numba_functions() -> None:
    """Precompile numba functions with float64 signatures for faster first call."""
    pts_dummy = np.array([0.0, 1.0, 0.0], dtype=np.float64)
    mat_dummy = np.zeros((6, 6), dtype=np.float64)
    _assemble_tps_system_core(pts_dummy, pts_dummy, 1.0, mat_dummy)

    coeffs_dummy = np.zeros(6, dtype=np.float64)
    out_dummy = np.empty(3, dtype=np.float64)
    _evaluate_tps_core(pts_dummy, pts_dummy, coeffs_dummy, pts_dummy, pts_dummy, out_dummy)


# Precompile numba functions on module import (skip during type checking)
if not TYPE_CHECKING:
    _warmup_numba_functions()
