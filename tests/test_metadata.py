"""Smoke tests for package metadata.

Validates public attributes exposed via the package API.
"""

from __future__ import annotations

import importlib
import logging
from typing import Final

import bedspline


def test_package_all_exports() -> None:
    """Ensure all expected symbols are exported."""
    expected_metadata: Final[set[str]] = {"__version__", "__license__"}
    assert expected_metadata.issubset(set(bedspline.__all__))

    expected_public_api: Final[set[str]] = {
        # Caches
        "BICUBIC_BASIS_MATRIX",
        "BILINEAR_BASIS_MATRIX",
        "BicubicBsplineCache",
        "BilinearBsplineCache",
        "BoundaryCondition",
        "create_anisotropic_bicubic_Bspline_cache",
        "create_bicubic_Bspline_cache",
        "create_bilinear_Bspline_cache",
        "evaluate_Bspline_cache",
        "normalize_boundary_condition",
        # Conditioning
        "calc_tps",
        "check_uniform_spacing",
        "sort_data",
        # Data files
        "read_Bspline_cache_data",
        "read_anisotropic_bicubic_Bspline_cache",
        "read_bicubic_Bspline_cache",
        "read_bilinear_Bspline_cache",
        "write_Bspline_cache_data",
        # Errors
        "BedsplineError",
        "DimensionMismatchError",
        "InsufficientGridSizeError",
        "MalformedCacheFileError",
        "NonUniformSpacingError",
        "SingularSystemError",
        "UnsupportedBoundaryConditionError",
        # Tolerance
        "ToleranceInfo",
        "get_machine_epsilon",
        "get_solver_tolerance",
        "get_spacing_tolerance",
        "get_tolerance_info",
    }
    assert expected_public_api.issubset(set(bedspline.__all__))

    private_in_all = {name for name in bedspline.__all__ if name.startswith("_")}
    assert private_in_all.issubset(expected_metadata)

    assert set(bedspline.__all__) == expected_metadata | expected_public_api
    for name in bedspline.__all__:
        assert hasattr(bedspline, name)


def test_package_metadata_values() -> None:
    """Validate the package metadata constants."""
    assert bedspline.__version__ == "0.1.0"
    assert bedspline.__license__ == "MIT"


def test_package_logger_has_null_handler() -> None:
    """The library must not emit to stderr unless the application configures logging."""
    handlers = logging.getLogger("bedspline").handlers
    assert any(isinstance(h, logging.NullHandler) for h in handlers)


def test_metadata_import_stability() -> None:
    """Verify metadata survives module reloads."""
    module = importlib.reload(bedspline)
    assert module.__version__ == "0.1.0"
