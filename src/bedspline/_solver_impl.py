"""Solution of the bicubic coefficient system into a padded coefficient grid."""

from __future__ import annotations

import logging
import warnings

import numpy as np
import numpy.typing as npt
import scipy.sparse
from scipy.sparse.linalg import MatrixRankWarning, spsolve

from ._stencil_impl import (
    COEFFICIENT_SCALE,
    _assemble_rhs,
    _assemble_system_matrix,
    _tabulate_stencil_families,
)
from .boundary import BoundaryCondition
from .exceptions import SingularSystemError
from .tolerance import get_solver_tolerance

logger = logging.getLogger(__name__)


def _solve_coefficient_system(
    phi: scipy.sparse.csr_matrix, rhs: npt.NDArray[np.float64]
) -> npt.NDArray[np.float64]:
    """Solve ``Phi q = P`` with a sparse LU factorization.

    Args:
        phi (scipy.sparse.csr_matrix): Square system matrix.
        rhs (npt.NDArray[np.float64]): Right-hand side vector.

    Returns:
        npt.NDArray[np.float64]: The solution ``q``.

    Raises:
        SingularSystemError: If the factorization fails, the solution is not
            finite or its relative residual exceeds the solver tolerance.
    """
    with warnings.catch_warnings():
        warnings.simplefilter("error", MatrixRankWarning)
        try:
            q = np.asarray(spsolve(phi.tocsc(), rhs), dtype=np.float64)
        except (MatrixRankWarning, RuntimeError) as err:
            raise SingularSystemError(f"Coefficient system is singular: {err}") from err

    if not np.all(np.isfinite(q)):
        raise SingularSystemError("Coefficient system solution is not finite")

    residual = float(np.linalg.norm(phi @ q - rhs)) / max(1.0, float(np.linalg.norm(rhs)))
    tol = get_solver_tolerance(q.dtype)
    logger.debug("Solved %d x %d coefficient system, relative residual %.3e", *phi.shape, residual)
    if residual > tol:
        raise SingularSystemError(
            f"Coefficient system is ill-conditioned: relative residual {residual:.3e} "
            f"exceeds {tol:.1e}"
        )
    return q


def _compute_padded_coefficients(
    z: npt.NDArray[np.float64], boundary: BoundaryCondition
) -> npt.NDArray[np.float64]:
    """Compute the bicubic coefficient grid of a sorted sample grid.

    Args:
        z (npt.NDArray[np.float64]): Sample grid of shape (m, n), rows along y.
        boundary (BoundaryCondition): Boundary condition closing the system.

    Returns:
        npt.NDArray[np.float64]: Coefficient grid ``Q`` of shape (n + 2, m + 2),
        indexed ``Q[x index, y index]``.

    Raises:
        SingularSystemError: If the coefficient system cannot be solved.
    """
    m, n = z.shape

    if boundary is BoundaryCondition.SMOOTH:
        # Ghost ring repeats the nearest sample; corners the diagonal neighbour.
        return np.ascontiguousarray(np.pad(z, 1, mode="edge").T)

    families = _tabulate_stencil_families(m, n, boundary)
    phi = _assemble_system_matrix(families, m, n)
    rhs = _assemble_rhs(z)
    logger.debug(
        "Assembled %s coefficient system for a %d x %d grid (%d non-zeros)",
        boundary.value,
        m,
        n,
        phi.nnz,
    )

    q = _solve_coefficient_system(phi, rhs)
    return np.ascontiguousarray((COEFFICIENT_SCALE * q).reshape(m + 2, n + 2).T)
