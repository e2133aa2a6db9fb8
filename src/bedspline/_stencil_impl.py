"""Assembly of the bicubic B-spline coefficient system.

The unknowns are the coefficients of a padded grid of shape ``(m + 2, n + 2)``,
indexed ``(row, col)`` with rows following ``y`` and columns following ``x``.
Padded cell ``(i + 1, j + 1)`` holds the coefficient of the cubic B-spline
centred on the sample ``z[i, j]``; the outer one-cell ring holds the ghost
coefficients fixed by the boundary condition.

Every equation of the system is a small block of weights applied at an anchor
cell of the padded grid (the cell that receives ``weights[0, 0]``). Equations
sharing the same weights form a :class:`StencilFamily`. Rows of the system are
numbered family after family in this order:

1. interior (``m * n`` rows, row ``i * n + j`` for sample ``z[i, j]``),
2. left, right, upper and lower edges (``m``, ``m``, ``n`` and ``n`` rows),
3. upper-left, upper-right, lower-left and lower-right corners (1 row each).
"""

from __future__ import annotations

from typing import NamedTuple

import numpy as np
import numpy.typing as npt
import scipy.sparse

from .boundary import BoundaryCondition

# Cardinal cubic B-spline at -1, 0, 1 (times 6).
_BSPLINE_VALUE = np.array([1.0, 4.0, 1.0])
# Second derivative of the cardinal cubic B-spline at a knot (times h^2).
_SECOND_DIFFERENCE = np.array([1.0, -2.0, 1.0])
# Jump of the third derivative across a knot (times h^3 / 6).
_THIRD_DERIVATIVE_JUMP = np.array([-1.0, 4.0, -6.0, 4.0, -1.0])
_MIXED_DIFFERENCE = np.array([[1.0, -1.0], [-1.0, 1.0]])

# Interior rows use the unscaled [1, 4, 1] weights; the solution is multiplied
# by this factor afterwards.
COEFFICIENT_SCALE = float(np.sum(_BSPLINE_VALUE) ** 2)

EDGE_NAMES = ("left", "right", "upper", "lower")
CORNER_NAMES = ("upper_left", "upper_right", "lower_left", "lower_right")


class StencilFamily(NamedTuple):
    """A group of equations applying the same weights at different anchor cells.

    Attributes:
        name (str): Family name (``"interior"``, an edge or a corner name).
        anchors (npt.NDArray[np.int_]): Padded-grid ``(row, col)`` of the cell that
            receives ``weights[0, 0]``, one per equation. Shape (num_rows, 2).
        weights (npt.NDArray[np.float64]): 2D block of weights.
    """

    name: str
    anchors: npt.NDArray[np.int_]
    weights: npt.NDArray[np.float64]

    @property
    def num_rows(self) -> int:
        """Number of equations in the family."""
        return int(self.anchors.shape[0])


def _anchors(rows: npt.ArrayLike, cols: npt.ArrayLike) -> npt.NDArray[np.int_]:
    """Stack broadcast row and column indices into an anchor array of shape (k, 2)."""
    r, c = np.broadcast_arrays(np.atleast_1d(rows), np.atleast_1d(cols))
    return np.column_stack([r, c]).astype(np.int_)


def _tabulate_interior_stencils(m: int, n: int) -> StencilFamily:
    """Interpolation equations: the spline reproduces every sample at its knot.

    Args:
        m (int): Number of samples along y.
        n (int): Number of samples along x.

    Returns:
        StencilFamily: ``m * n`` equations anchored at padded cell ``(i, j)``.
    """
    ii, jj = np.meshgrid(np.arange(m), np.arange(n), indexing="ij")
    return StencilFamily(
        "interior", _anchors(ii.ravel(), jj.ravel()), np.outer(_BSPLINE_VALUE, _BSPLINE_VALUE)
    )


def _tabulate_edge_stencils(
    m: int, n: int, boundary: BoundaryCondition
) -> tuple[StencilFamily, StencilFamily, StencilFamily, StencilFamily]:
    """Boundary equations along the four edges of the grid.

    Free ends ask for a vanishing second difference across the edge at each
    boundary knot. Not-a-knot ends ask for a vanishing jump of the third
    derivative across the first (last) interior knot, blended along the edge
    with the B-spline values.

    Args:
        m (int): Number of samples along y.
        n (int): Number of samples along x.
        boundary (BoundaryCondition): ``FREE`` or ``NOT_A_KNOT``.

    Returns:
        tuple[StencilFamily, StencilFamily, StencilFamily, StencilFamily]:
        Left, right, upper and lower edge families.

    Raises:
        ValueError: If the boundary condition does not need a linear solve.
    """
    rows = np.arange(m)
    cols = np.arange(n)

    if boundary is BoundaryCondition.FREE:
        across_x = _SECOND_DIFFERENCE[np.newaxis, :]
        across_y = _SECOND_DIFFERENCE[:, np.newaxis]
        left = _anchors(rows + 1, 0)
        right = _anchors(rows + 1, n - 1)
        upper = _anchors(0, cols + 1)
        lower = _anchors(m - 1, cols + 1)
    elif boundary is BoundaryCondition.NOT_A_KNOT:
        across_x = np.outer(_BSPLINE_VALUE, _THIRD_DERIVATIVE_JUMP)
        across_y = np.outer(_THIRD_DERIVATIVE_JUMP, _BSPLINE_VALUE)
        left = _anchors(rows, 0)
        right = _anchors(rows, n - 3)
        upper = _anchors(0, cols)
        lower = _anchors(m - 3, cols)
    else:
        raise ValueError(f"No edge stencils for boundary condition {boundary.value!r}")

    layout = ((left, across_x), (right, across_x), (upper, across_y), (lower, across_y))
    le, ri, up, lo = (
        StencilFamily(name, anchors, weights)
        for name, (anchors, weights) in zip(EDGE_NAMES, layout)
    )
    return le, ri, up, lo


def _tabulate_corner_stencils(
    m: int, n: int, boundary: BoundaryCondition
) -> tuple[StencilFamily, StencilFamily, StencilFamily, StencilFamily]:
    """Equations fixing the four ghost corner coefficients.

    Free ends use a second difference along the diagonal through the corner.
    Not-a-knot ends use a mixed first difference on the 2x2 corner block.

    Args:
        m (int): Number of samples along y.
        n (int): Number of samples along x.
        boundary (BoundaryCondition): ``FREE`` or ``NOT_A_KNOT``.

    Returns:
        tuple[StencilFamily, StencilFamily, StencilFamily, StencilFamily]:
        Upper-left, upper-right, lower-left and lower-right corner families.

    Raises:
        ValueError: If the boundary condition does not need a linear solve.
    """
    if boundary is BoundaryCondition.FREE:
        diagonal = np.diag(_SECOND_DIFFERENCE)
        anti_diagonal = np.fliplr(diagonal)
        layout = (
            ((0, 0), diagonal),
            ((0, n - 1), anti_diagonal),
            ((m - 1, 0), anti_diagonal),
            ((m - 1, n - 1), diagonal),
        )
    elif boundary is BoundaryCondition.NOT_A_KNOT:
        layout = (
            ((0, 0), _MIXED_DIFFERENCE),
            ((0, n), -_MIXED_DIFFERENCE),
            ((m, 0), -_MIXED_DIFFERENCE),
            ((m, n), _MIXED_DIFFERENCE),
        )
    else:
        raise ValueError(f"No corner stencils for boundary condition {boundary.value!r}")

    ul, ur, ll, lr = (
        StencilFamily(name, _anchors(*anchor), weights)
        for name, (anchor, weights) in zip(CORNER_NAMES, layout)
    )
    return ul, ur, ll, lr


def _tabulate_stencil_families(
    m: int, n: int, boundary: BoundaryCondition
) -> list[StencilFamily]:
    """All stencil families of the coefficient system, in row order."""
    return [
        _tabulate_interior_stencils(m, n),
        *_tabulate_edge_stencils(m, n, boundary),
        *_tabulate_corner_stencils(m, n, boundary),
    ]


def _assemble_system_matrix(
    families: list[StencilFamily], m: int, n: int
) -> scipy.sparse.csr_matrix:
    """Assemble the sparse matrix ``Phi`` from stencil families.

    Column ``r * (n + 2) + c`` of the matrix corresponds to padded cell ``(r, c)``.

    Args:
        families (list[StencilFamily]): Stencil families in row order.
        m (int): Number of samples along y.
        n (int): Number of samples along x.

    Returns:
        scipy.sparse.csr_matrix: Square matrix of size ``(m + 2) * (n + 2)``.

    Raises:
        ValueError: If a stencil reaches outside the padded grid or the families do
            not provide exactly one equation per unknown.
    """
    width = n + 2
    size = (m + 2) * width

    rows: list[npt.NDArray[np.int_]] = []
    cols: list[npt.NDArray[np.int_]] = []
    vals: list[npt.NDArray[np.float64]] = []
    row_start = 0
    for family in families:
        dr, dc = np.nonzero(family.weights)
        w = family.weights[dr, dc]
        r = family.anchors[:, 0:1] + dr
        c = family.anchors[:, 1:2] + dc
        if r.min() < 0 or r.max() > m + 1 or c.min() < 0 or c.max() > n + 1:
            raise ValueError(f"Stencil family {family.name!r} reaches outside the padded grid")

        rows.append(np.repeat(np.arange(row_start, row_start + family.num_rows), dr.size))
        cols.append((r * width + c).ravel())
        vals.append(np.tile(w, family.num_rows))
        row_start += family.num_rows

    if row_start != size:
        raise ValueError(f"Assembled {row_start} equations for {size} unknowns")

    phi = scipy.sparse.coo_matrix(
        (np.concatenate(vals), (np.concatenate(rows), np.concatenate(cols))), shape=(size, size)
    )
    return phi.tocsr()


def _assemble_rhs(z: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Right-hand side ``P``: the samples in row-major order followed by zeros.

    Args:
        z (npt.NDArray[np.float64]): Sample grid of shape (m, n).

    Returns:
        npt.NDArray[np.float64]: Vector of length ``m * n + 2 * m + 2 * n + 4``.
    """
    m, n = z.shape
    return np.concatenate([z.ravel(), np.zeros(2 * m + 2 * n + 4)])
