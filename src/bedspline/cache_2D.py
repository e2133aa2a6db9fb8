"""Bilinear and bicubic B-spline caches for gridded 2D sample data.

A cache holds everything needed to evaluate a B-spline surface through (or,
with smoothing, near) gridded samples: the sorted knots, the samples, the knot
spacing, the coefficient grid ``Q`` and the constant basis matrix ``IP``.
Caches are built once by the ``create_*`` functions and never modified.
"""

from __future__ import annotations

import logging

import numpy as np
import numpy.typing as npt

from ._solver_impl import _compute_padded_coefficients
from ._utils import _readonly
from .boundary import (
    ANISOTROPIC_BOUNDARY_CONDITIONS,
    ISOTROPIC_BOUNDARY_CONDITIONS,
    BoundaryCondition,
    normalize_boundary_condition,
)
from .conditioning import calc_tps, check_uniform_spacing, sort_data
from .exceptions import InsufficientGridSizeError, NonUniformSpacingError
from .tolerance import get_spacing_tolerance

logger = logging.getLogger(__name__)

BILINEAR_BASIS_MATRIX: npt.NDArray[np.float64] = _readonly(
    np.array(
        [
            [-1.0, 1.0],
            [1.0, 0.0],
        ]
    )
)

BICUBIC_BASIS_MATRIX: npt.NDArray[np.float64] = _readonly(
    np.array(
        [
            [-1.0, 3.0, -3.0, 1.0],
            [3.0, -6.0, 3.0, 0.0],
            [-3.0, 0.0, 3.0, 0.0],
            [1.0, 4.0, 1.0, 0.0],
        ]
    )
)

_NOT_A_KNOT_MIN_KNOTS = 4


class BilinearBsplineCache:
    """Coefficients of a bilinear B-spline through gridded samples.

    Use :func:`create_bilinear_Bspline_cache` to build one.
    """

    __slots__ = ("_Q", "_h", "_x", "_y", "_z")

    def __init__(
        self,
        x: npt.NDArray[np.float64],
        y: npt.NDArray[np.float64],
        z: npt.NDArray[np.float64],
        h: float,
        Q: npt.NDArray[np.float64],  # noqa: N803
    ) -> None:
        self._x = _readonly(np.array(x, dtype=np.float64))
        self._y = _readonly(np.array(y, dtype=np.float64))
        self._z = _readonly(np.array(z, dtype=np.float64))
        self._h = float(h)
        self._Q = _readonly(np.array(Q, dtype=np.float64))

    @property
    def x(self) -> npt.NDArray[np.float64]:
        """Sorted knots along x, of length n."""
        return self._x

    @property
    def y(self) -> npt.NDArray[np.float64]:
        """Sorted knots along y, of length m."""
        return self._y

    @property
    def z(self) -> npt.NDArray[np.float64]:
        """Samples used for the construction, shape (m, n)."""
        return self._z

    @property
    def h(self) -> float:
        """Knot spacing, shared by both axes."""
        return self._h

    @property
    def spacing(self) -> tuple[float, float]:
        """Knot spacing along x and y."""
        return self._h, self._h

    @property
    def Q(self) -> npt.NDArray[np.float64]:  # noqa: N802
        """Coefficient grid of shape (n, m), indexed ``Q[x index, y index]``."""
        return self._Q

    @property
    def IP(self) -> npt.NDArray[np.float64]:  # noqa: N802
        """Bilinear basis matrix (2x2)."""
        return BILINEAR_BASIS_MATRIX

    @property
    def degree(self) -> int:
        """Polynomial degree along each axis."""
        return 1

    def __repr__(self) -> str:
        return f"BilinearBsplineCache(n={self._x.size}, m={self._y.size}, h={self._h})"


class BicubicBsplineCache:
    """Coefficients of a bicubic B-spline through gridded samples.

    The coefficient grid is padded with a one-cell ghost ring whose values are
    fixed by the boundary condition.

    Use :func:`create_bicubic_Bspline_cache` or
    :func:`create_anisotropic_bicubic_Bspline_cache` to build one.
    """

    __slots__ = ("_Q", "_boundary", "_hx", "_hy", "_isotropic", "_x", "_y", "_z")

    def __init__(
        self,
        x: npt.NDArray[np.float64],
        y: npt.NDArray[np.float64],
        z: npt.NDArray[np.float64],
        hx: float,
        hy: float,
        Q: npt.NDArray[np.float64],  # noqa: N803
        boundary: BoundaryCondition,
        isotropic: bool = False,
    ) -> None:
        self._x = _readonly(np.array(x, dtype=np.float64))
        self._y = _readonly(np.array(y, dtype=np.float64))
        self._z = _readonly(np.array(z, dtype=np.float64))
        self._hx = float(hx)
        self._hy = float(hy)
        self._Q = _readonly(np.array(Q, dtype=np.float64))
        self._boundary = boundary
        self._isotropic = isotropic

    @property
    def x(self) -> npt.NDArray[np.float64]:
        """Sorted knots along x, of length n."""
        return self._x

    @property
    def y(self) -> npt.NDArray[np.float64]:
        """Sorted knots along y, of length m."""
        return self._y

    @property
    def z(self) -> npt.NDArray[np.float64]:
        """Samples used for the construction, shape (m, n)."""
        return self._z

    @property
    def hx(self) -> float:
        """Knot spacing along x."""
        return self._hx

    @property
    def hy(self) -> float:
        """Knot spacing along y."""
        return self._hy

    @property
    def h(self) -> float:
        """Knot spacing shared by both axes.

        Raises:
            AttributeError: If the cache was built with independent spacings.
        """
        if not self._isotropic:
            raise AttributeError("Anisotropic bicubic caches have no single spacing; use hx, hy")
        return self._hx

    @property
    def spacing(self) -> tuple[float, float]:
        """Knot spacing along x and y."""
        return self._hx, self._hy

    @property
    def isotropic(self) -> bool:
        """Whether the cache was built with a single spacing for both axes."""
        return self._isotropic

    @property
    def boundary(self) -> BoundaryCondition:
        """Boundary condition used for the ghost coefficients."""
        return self._boundary

    @property
    def Q(self) -> npt.NDArray[np.float64]:  # noqa: N802
        """Padded coefficient grid of shape (n + 2, m + 2), indexed ``Q[x index, y index]``."""
        return self._Q

    @property
    def IP(self) -> npt.NDArray[np.float64]:  # noqa: N802
        """Cubic B-spline basis matrix (4x4)."""
        return BICUBIC_BASIS_MATRIX

    @property
    def degree(self) -> int:
        """Polynomial degree along each axis."""
        return 3

    def __repr__(self) -> str:
        return (
            f"BicubicBsplineCache(n={self._x.size}, m={self._y.size}, "
            f"hx={self._hx}, hy={self._hy}, boundary={self._boundary.value!r})"
        )


def _prepare_samples(
    x: npt.ArrayLike, y: npt.ArrayLike, z: npt.ArrayLike, smoothing_factor: float
) -> tuple[
    npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.float64], float, float
]:
    """Sort, validate and optionally smooth the samples.

    Returns:
        tuple: Sorted ``x``, ``y``, conditioned ``z`` and the spacings ``hx``, ``hy``.
    """
    if not np.isfinite(smoothing_factor) or smoothing_factor < 0.0:
        raise ValueError(
            f"smoothing_factor must be finite and non-negative, got {smoothing_factor}"
        )

    x_arr, y_arr, z_arr = sort_data(x, y, z)
    hx = check_uniform_spacing(x_arr, "x")
    hy = check_uniform_spacing(y_arr, "y")

    if smoothing_factor > 0.0:
        z_arr = calc_tps(smoothing_factor, x_arr, y_arr, z_arr)

    return x_arr, y_arr, z_arr, hx, hy


def _check_isotropic_spacing(hx: float, hy: float) -> None:
    tol = get_spacing_tolerance()
    if abs(hx - hy) > tol * max(hx, hy):
        raise NonUniformSpacingError(
            f"Knot spacings along x ({hx}) and y ({hy}) differ; "
            "use create_anisotropic_bicubic_Bspline_cache for independent spacings"
        )


def create_bilinear_Bspline_cache(
    x: npt.ArrayLike,
    y: npt.ArrayLike,
    z: npt.ArrayLike,
    smoothing_factor: float = 0.0,
) -> BilinearBsplineCache:
    """Build a bilinear B-spline cache from gridded samples.

    The coefficients are the samples themselves, so the spline reproduces every
    sample exactly at its knot.

    Args:
        x (npt.ArrayLike): Uniformly spaced knots along x, of length n >= 2.
            Any order is accepted.
        y (npt.ArrayLike): Uniformly spaced knots along y, of length m >= 2,
            with the same spacing as ``x``.
        z (npt.ArrayLike): Samples of shape (m, n); ``z[i, j]`` belongs to
            ``(x[j], y[i])``.
        smoothing_factor (float): Thin-plate smoothing weight applied to the
            samples first. 0 disables smoothing. Defaults to 0.

    Returns:
        BilinearBsplineCache: The cache.

    Raises:
        DimensionMismatchError: If the shape of ``z`` is not (len(y), len(x)).
        InsufficientGridSizeError: If an axis has fewer than 2 knots.
        NonUniformSpacingError: If the knots are not uniformly spaced or the
            spacing differs between the axes.
        ValueError: If ``smoothing_factor`` is negative or not finite.

    Example:
        >>> cache = create_bilinear_Bspline_cache([0.0, 1.0], [0.0, 1.0], [[0.0, 1.0], [2.0, 3.0]])
        >>> cache.Q
        array([[0., 2.],
               [1., 3.]])
    """
    x_arr, y_arr, z_arr, hx, hy = _prepare_samples(x, y, z, smoothing_factor)
    _check_isotropic_spacing(hx, hy)

    logger.debug("Built bilinear cache on a %d x %d grid, h=%g", y_arr.size, x_arr.size, hx)
    return BilinearBsplineCache(x_arr, y_arr, z_arr, hx, z_arr.T)


def _build_bicubic_cache(
    x: npt.ArrayLike,
    y: npt.ArrayLike,
    z: npt.ArrayLike,
    boundary: BoundaryCondition,
    smoothing_factor: float,
    isotropic: bool,
) -> BicubicBsplineCache:
    """Build a bicubic cache for an already validated boundary condition."""
    x_arr, y_arr, z_arr, hx, hy = _prepare_samples(x, y, z, smoothing_factor)
    m, n = z_arr.shape

    if boundary is BoundaryCondition.NOT_A_KNOT and min(m, n) < _NOT_A_KNOT_MIN_KNOTS:
        raise InsufficientGridSizeError(
            "To consider the not-a-knot condition, the dimensions of z must be at least "
            f"{_NOT_A_KNOT_MIN_KNOTS}, got {z_arr.shape}"
        )
    if isotropic:
        _check_isotropic_spacing(hx, hy)

    Q = _compute_padded_coefficients(z_arr, boundary)  # noqa: N806

    logger.debug(
        "Built bicubic %s cache on a %d x %d grid, hx=%g, hy=%g",
        boundary.value,
        m,
        n,
        hx,
        hy,
    )
    if isotropic:
        return BicubicBsplineCache(x_arr, y_arr, z_arr, hx, hx, Q, boundary, isotropic=True)
    return BicubicBsplineCache(x_arr, y_arr, z_arr, hx, hy, Q, boundary)


def create_bicubic_Bspline_cache(
    x: npt.ArrayLike,
    y: npt.ArrayLike,
    z: npt.ArrayLike,
    boundary: BoundaryCondition | str = BoundaryCondition.FREE,
    smoothing_factor: float = 0.0,
) -> BicubicBsplineCache:
    """Build a bicubic B-spline cache with a single knot spacing ``h``.

    The coefficients solve the sparse system made of the interpolation
    equations at every sample and the boundary equations of ``boundary``. The
    resulting spline reproduces the samples at their knots.

    Args:
        x (npt.ArrayLike): Uniformly spaced knots along x, of length n.
            Any order is accepted.
        y (npt.ArrayLike): Uniformly spaced knots along y, of length m, with the
            same spacing as ``x``.
        z (npt.ArrayLike): Samples of shape (m, n); ``z[i, j]`` belongs to
            ``(x[j], y[i])``.
        boundary (BoundaryCondition | str): ``"free"`` or ``"not-a-knot"``.
            Defaults to ``"free"``.
        smoothing_factor (float): Thin-plate smoothing weight applied to the
            samples first. 0 disables smoothing. Defaults to 0.

    Returns:
        BicubicBsplineCache: The cache, with ``Q`` of shape (n + 2, m + 2).

    Raises:
        UnsupportedBoundaryConditionError: If ``boundary`` is not ``"free"`` or
            ``"not-a-knot"``.
        DimensionMismatchError: If the shape of ``z`` is not (len(y), len(x)).
        InsufficientGridSizeError: If an axis has fewer than 2 knots, or fewer
            than 4 for the not-a-knot condition.
        NonUniformSpacingError: If the knots are not uniformly spaced or the
            spacing differs between the axes.
        SingularSystemError: If the coefficient system cannot be solved.
        ValueError: If ``smoothing_factor`` is negative or not finite.
    """
    bc = normalize_boundary_condition(boundary, ISOTROPIC_BOUNDARY_CONDITIONS)
    return _build_bicubic_cache(x, y, z, bc, smoothing_factor, isotropic=True)


def create_anisotropic_bicubic_Bspline_cache(
    x: npt.ArrayLike,
    y: npt.ArrayLike,
    z: npt.ArrayLike,
    boundary: BoundaryCondition | str = BoundaryCondition.FREE,
    smoothing_factor: float = 0.0,
) -> BicubicBsplineCache:
    """Build a bicubic B-spline cache with independent spacings ``hx`` and ``hy``.

    Besides ``"free"`` and ``"not-a-knot"``, this builder supports ``"smooth"``:
    the samples are taken as coefficients without any solve and the ghost ring
    repeats the outermost samples. The resulting spline approximates rather
    than interpolates the samples.

    Args:
        x (npt.ArrayLike): Uniformly spaced knots along x, of length n.
            Any order is accepted.
        y (npt.ArrayLike): Uniformly spaced knots along y, of length m.
        z (npt.ArrayLike): Samples of shape (m, n); ``z[i, j]`` belongs to
            ``(x[j], y[i])``.
        boundary (BoundaryCondition | str): ``"free"``, ``"not-a-knot"`` or
            ``"smooth"``. Defaults to ``"free"``.
        smoothing_factor (float): Thin-plate smoothing weight applied to the
            samples first. 0 disables smoothing. Defaults to 0.

    Returns:
        BicubicBsplineCache: The cache, with ``Q`` of shape (n + 2, m + 2).

    Raises:
        UnsupportedBoundaryConditionError: If ``boundary`` is unknown.
        DimensionMismatchError: If the shape of ``z`` is not (len(y), len(x)).
        InsufficientGridSizeError: If an axis has fewer than 2 knots, or fewer
            than 4 for the not-a-knot condition.
        NonUniformSpacingError: If the knots along an axis are not uniformly spaced.
        SingularSystemError: If the coefficient system cannot be solved.
        ValueError: If ``smoothing_factor`` is negative or not finite.
    """
    bc = normalize_boundary_condition(boundary, ANISOTROPIC_BOUNDARY_CONDITIONS)
    return _build_bicubic_cache(x, y, z, bc, smoothing_factor, isotropic=False)
