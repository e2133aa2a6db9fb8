"""Reading and writing gridded sample data in the flat text layout.

The layout is line oriented, one value per line (1-based line numbers)::

    1            label (ignored)
    2            n, number of knots along x
    3            label (ignored)
    4            m, number of knots along y
    5            label (ignored)
    6 .. 5+n     x knots
    6+n          label (ignored)
    7+n .. 6+n+m y knots
    7+n+m        label (ignored)
    8+n+m .. end n*m samples, x varying fastest
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import numpy as np
import numpy.typing as npt

from ._utils import _normalize_samples
from .boundary import BoundaryCondition
from .cache_2D import (
    BicubicBsplineCache,
    BilinearBsplineCache,
    create_anisotropic_bicubic_Bspline_cache,
    create_bicubic_Bspline_cache,
    create_bilinear_Bspline_cache,
)
from .exceptions import MalformedCacheFileError

logger = logging.getLogger(__name__)


def _get_line(lines: list[str], line_number: int) -> str:
    if line_number > len(lines):
        raise MalformedCacheFileError("Unexpected end of file", line_number)
    return lines[line_number - 1].strip()


def _parse_count(lines: list[str], line_number: int, name: str) -> int:
    text = _get_line(lines, line_number)
    try:
        count = int(text)
    except ValueError:
        raise MalformedCacheFileError(
            f"Expected an integer count {name}, got {text!r}", line_number
        ) from None
    if count < 1:
        raise MalformedCacheFileError(f"Count {name} must be positive, got {count}", line_number)
    return count


def _parse_values(
    lines: list[str], first: int, last: int, name: str
) -> npt.NDArray[np.float64]:
    """Parse one float per line on the 1-based, inclusive line range [first, last]."""
    if last > len(lines):
        raise MalformedCacheFileError(
            f"Expected {last - first + 1} {name} values, file ends early", len(lines) + 1
        )
    values = np.empty(max(last - first + 1, 0), dtype=np.float64)
    for k, line_number in enumerate(range(first, last + 1)):
        text = lines[line_number - 1].strip()
        try:
            values[k] = float(text)
        except ValueError:
            raise MalformedCacheFileError(
                f"Invalid {name} value {text!r}", line_number
            ) from None
    return values


def read_Bspline_cache_data(
    path: str | os.PathLike[str],
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """Read knots and samples from a data file.

    Trailing blank lines are ignored.

    Args:
        path (str | os.PathLike[str]): Path of the data file.

    Returns:
        tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        ``x`` of length n, ``y`` of length m and ``z`` of shape (m, n), in file order.

    Raises:
        OSError: If the file cannot be read.
        MalformedCacheFileError: If the file does not follow the layout.
    """
    path = Path(path)
    lines = path.read_text().splitlines()
    while lines and not lines[-1].strip():
        lines.pop()

    n = _parse_count(lines, 2, "n")
    m = _parse_count(lines, 4, "m")

    x = _parse_values(lines, 6, 5 + n, "x")
    y = _parse_values(lines, 7 + n, 6 + n + m, "y")

    first_z = 8 + n + m
    num_z = len(lines) - first_z + 1
    if num_z != n * m:
        raise MalformedCacheFileError(
            f"Expected {n * m} z values for a {m} x {n} grid, found {max(num_z, 0)}",
            min(first_z, len(lines) + 1),
        )
    z = _parse_values(lines, first_z, len(lines), "z").reshape(m, n)

    logger.info("Read %d x %d samples from %s", m, n, path)
    return x, y, z


def write_Bspline_cache_data(
    path: str | os.PathLike[str], x: npt.ArrayLike, y: npt.ArrayLike, z: npt.ArrayLike
) -> Path:
    """Write knots and samples to a data file.

    Values are written with full ``repr`` precision, so reading the file back
    reproduces the arrays exactly.

    Args:
        path (str | os.PathLike[str]): Path of the data file. Overwritten if it exists.
        x (npt.ArrayLike): Knots along x, of length n.
        y (npt.ArrayLike): Knots along y, of length m.
        z (npt.ArrayLike): Samples of shape (m, n).

    Returns:
        Path: The path written.

    Raises:
        DimensionMismatchError: If the shape of ``z`` is not (len(y), len(x)).
        OSError: If the file cannot be written.
    """
    x_arr, y_arr, z_arr = _normalize_samples(x, y, z)
    path = Path(path)

    lines = [
        "n:",
        str(x_arr.size),
        "m:",
        str(y_arr.size),
        "x:",
        *(repr(v) for v in x_arr.tolist()),
        "y:",
        *(repr(v) for v in y_arr.tolist()),
        "z:",
        *(repr(v) for v in z_arr.ravel().tolist()),
    ]
    path.write_text("\n".join(lines) + "\n")

    logger.info("Wrote %d x %d samples to %s", y_arr.size, x_arr.size, path)
    return path


def read_bilinear_Bspline_cache(
    path: str | os.PathLike[str], smoothing_factor: float = 0.0
) -> BilinearBsplineCache:
    """Build a bilinear cache from a data file.

    See :func:`read_Bspline_cache_data` and :func:`create_bilinear_Bspline_cache`.
    """
    x, y, z = read_Bspline_cache_data(path)
    return create_bilinear_Bspline_cache(x, y, z, smoothing_factor=smoothing_factor)


def read_bicubic_Bspline_cache(
    path: str | os.PathLike[str],
    boundary: BoundaryCondition | str = BoundaryCondition.FREE,
    smoothing_factor: float = 0.0,
) -> BicubicBsplineCache:
    """Build an isotropic bicubic cache from a data file.

    See :func:`read_Bspline_cache_data` and :func:`create_bicubic_Bspline_cache`.
    """
    x, y, z = read_Bspline_cache_data(path)
    return create_bicubic_Bspline_cache(
        x, y, z, boundary=boundary, smoothing_factor=smoothing_factor
    )


def read_anisotropic_bicubic_Bspline_cache(
    path: str | os.PathLike[str],
    boundary: BoundaryCondition | str = BoundaryCondition.FREE,
    smoothing_factor: float = 0.0,
) -> BicubicBsplineCache:
    """Build an anisotropic bicubic cache from a data file.

    See :func:`read_Bspline_cache_data` and
    :func:`create_anisotropic_bicubic_Bspline_cache`.
    """
    x, y, z = read_Bspline_cache_data(path)
    return create_anisotropic_bicubic_Bspline_cache(
        x, y, z, boundary=boundary, smoothing_factor=smoothing_factor
    )
