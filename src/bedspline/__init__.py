"""Public API surface for bedspline.

Defines package metadata and exported interfaces.
"""

import logging
from typing import Final

# Private API imports (accessible but not in __all__)
# Users can access private functions via: bedspline._stencil_impl._function_name, etc.
from . import (
    _solver_impl,  # noqa: F401
    _stencil_impl,  # noqa: F401
)

# Public API imports
from .boundary import BoundaryCondition, normalize_boundary_condition
from .cache_2D import (
    BICUBIC_BASIS_MATRIX,
    BILINEAR_BASIS_MATRIX,
    BicubicBsplineCache,
    BilinearBsplineCache,
    create_anisotropic_bicubic_Bspline_cache,
    create_bicubic_Bspline_cache,
    create_bilinear_Bspline_cache,
)
from .conditioning import calc_tps, check_uniform_spacing, sort_data
from .data_file import (
    read_anisotropic_bicubic_Bspline_cache,
    read_bicubic_Bspline_cache,
    read_bilinear_Bspline_cache,
    read_Bspline_cache_data,
    write_Bspline_cache_data,
)
from .evaluate import evaluate_Bspline_cache
from .exceptions import (
    BedsplineError,
    DimensionMismatchError,
    InsufficientGridSizeError,
    MalformedCacheFileError,
    NonUniformSpacingError,
    SingularSystemError,
    UnsupportedBoundaryConditionError,
)
from .tolerance import (
    ToleranceInfo,
    get_machine_epsilon,
    get_solver_tolerance,
    get_spacing_tolerance,
    get_tolerance_info,
)

# Library logging: handlers are left to the application.
logging.getLogger(__name__).addHandler(logging.NullHandler())

# Package metadata
__version__: Final[str] = "0.1.0"
__license__: Final[str] = "MIT"

# Public interface: only functions/classes that don't start with _
__all__ = [
    "BICUBIC_BASIS_MATRIX",
    "BILINEAR_BASIS_MATRIX",
    "BedsplineError",
    "BicubicBsplineCache",
    "BilinearBsplineCache",
    "BoundaryCondition",
    "DimensionMismatchError",
    "InsufficientGridSizeError",
    "MalformedCacheFileError",
    "NonUniformSpacingError",
    "SingularSystemError",
    "ToleranceInfo",
    "UnsupportedBoundaryConditionError",
    "__license__",
    "__version__",
    "calc_tps",
    "check_uniform_spacing",
    "create_anisotropic_bicubic_Bspline_cache",
    "create_bicubic_Bspline_cache",
    "create_bilinear_Bspline_cache",
    "evaluate_Bspline_cache",
    "get_machine_epsilon",
    "get_solver_tolerance",
    "get_spacing_tolerance",
    "get_tolerance_info",
    "normalize_boundary_condition",
    "read_Bspline_cache_data",
    "read_anisotropic_bicubic_Bspline_cache",
    "read_bicubic_Bspline_cache",
    "read_bilinear_Bspline_cache",
    "sort_data",
    "write_Bspline_cache_data",
]
