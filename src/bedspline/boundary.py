"""Boundary conditions for bicubic B-spline caches."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from .exceptions import UnsupportedBoundaryConditionError


class BoundaryCondition(Enum):
    """Enumeration of the boundary conditions closing the bicubic coefficient system.

    Attributes:
        FREE (BoundaryCondition): Vanishing second derivative across every edge
            (natural spline ends).
        NOT_A_KNOT (BoundaryCondition): Continuous third derivative across the
            first and last interior knots. Needs at least 4 knots per axis.
        SMOOTH (BoundaryCondition): No solve; the samples are used as coefficients
            and the ghost ring repeats the outermost samples.
    """

    FREE = "free"
    NOT_A_KNOT = "not-a-knot"
    SMOOTH = "smooth"


ISOTROPIC_BOUNDARY_CONDITIONS: frozenset[BoundaryCondition] = frozenset(
    {BoundaryCondition.FREE, BoundaryCondition.NOT_A_KNOT}
)
ANISOTROPIC_BOUNDARY_CONDITIONS: frozenset[BoundaryCondition] = frozenset(BoundaryCondition)


def normalize_boundary_condition(
    boundary: BoundaryCondition | str,
    supported: Iterable[BoundaryCondition] = ANISOTROPIC_BOUNDARY_CONDITIONS,
) -> BoundaryCondition:
    """Convert a boundary condition name into a member of the enumeration.

    Args:
        boundary (BoundaryCondition | str): Enum member or one of the names
            ``"free"``, ``"not-a-knot"`` and ``"smooth"``.
        supported (Iterable[BoundaryCondition]): Boundary conditions accepted by
            the caller. Defaults to all of them.

    Returns:
        BoundaryCondition: The matching enum member.

    Raises:
        UnsupportedBoundaryConditionError: If the name is unknown or the boundary
            condition is not in ``supported``.

    Example:
        >>> normalize_boundary_condition("not-a-knot")
        <BoundaryCondition.NOT_A_KNOT: 'not-a-knot'>
    """
    supported = frozenset(supported)
    names = ", ".join(sorted(bc.value for bc in supported))

    try:
        bc = BoundaryCondition(boundary)
    except ValueError:
        raise UnsupportedBoundaryConditionError(
            f"Unknown boundary condition {boundary!r}. Supported: {names}."
        ) from None

    if bc not in supported:
        raise UnsupportedBoundaryConditionError(
            f"Boundary condition {bc.value!r} is not available here. Supported: {names}."
        )
    return bc
