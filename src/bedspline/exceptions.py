"""Exceptions raised while building and loading B-spline caches."""

from __future__ import annotations


class BedsplineError(Exception):
    """Base exception for all bedspline errors."""

    pass


class DimensionMismatchError(BedsplineError, ValueError):
    """Knot sequences and sample grid have inconsistent sizes."""

    pass


class UnsupportedBoundaryConditionError(BedsplineError, ValueError):
    """The requested boundary condition is unknown or not allowed for the cache kind."""

    pass


class InsufficientGridSizeError(BedsplineError, ValueError):
    """The sample grid is too small for the requested construction."""

    pass


class NonUniformSpacingError(BedsplineError, ValueError):
    """Knots are not strictly ascending with a constant step."""

    pass


class MalformedCacheFileError(BedsplineError, ValueError):
    """A sample data file does not follow the expected line layout."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        if line_number is not None:
            message = f"{message} (line {line_number})"
        super().__init__(message)
        self.line_number = line_number


class SingularSystemError(BedsplineError, ArithmeticError):
    """The assembled coefficient system could not be solved."""

    pass
