"""Tests for tolerance utilities."""

from __future__ import annotations

from typing import Any

import numpy as np
import pytest

from bedspline.tolerance import (
    get_machine_epsilon,
    get_solver_tolerance,
    get_spacing_tolerance,
    get_tolerance_info,
)

SPACING_TOL_F32: float = 1e-4
SPACING_TOL_F64: float = 1e-8

SOLVER_TOL_F32: float = 1e-4
SOLVER_TOL_F64: float = 1e-9


class TestTolerance:
    """Test suite for tolerance utilities."""

    @pytest.mark.parametrize(
        ("dtype", "expected"),
        [
            (np.float32, SPACING_TOL_F32),
            ("float64", SPACING_TOL_F64),
        ],
    )
    def test_get_spacing_tolerance(
        self, dtype: np.dtype[np.floating[Any]] | type[np.floating[Any]], expected: float
    ) -> None:
        """Test get_spacing_tolerance with various dtypes."""
        assert get_spacing_tolerance(dtype) == expected

    @pytest.mark.parametrize(
        ("dtype", "expected"),
        [
            (np.float32, SOLVER_TOL_F32),
            ("float64", SOLVER_TOL_F64),
        ],
    )
    def test_get_solver_tolerance(
        self, dtype: np.dtype[np.floating[Any]] | type[np.floating[Any]], expected: float
    ) -> None:
        """Test get_solver_tolerance with various dtypes."""
        assert get_solver_tolerance(dtype) == expected

    def test_defaults_to_float64(self) -> None:
        """Test that omitting the dtype selects the float64 presets."""
        assert get_spacing_tolerance() == SPACING_TOL_F64
        assert get_solver_tolerance() == SOLVER_TOL_F64
        assert get_machine_epsilon() == np.finfo(np.float64).eps

    @pytest.mark.parametrize("dtype", [np.float32, "float64"])
    def test_get_machine_epsilon(
        self, dtype: np.dtype[np.floating[Any]] | type[np.floating[Any]]
    ) -> None:
        """Test get_machine_epsilon against np.finfo."""
        assert get_machine_epsilon(dtype) == np.finfo(dtype).eps

    def test_spacing_tolerance_exceeds_rounding(self) -> None:
        """Decimal rounding of knots must stay well inside the spacing tolerance."""
        for dtype in (np.float32, np.float64):
            assert get_spacing_tolerance(dtype) > 100 * get_machine_epsilon(dtype)

    def test_invalid_dtype_raises_error(self) -> None:
        """Test that an unsupported dtype raises a ValueError."""
        with pytest.raises(ValueError, match="Unsupported dtype"):
            get_spacing_tolerance(np.int32)
        with pytest.raises(ValueError, match="Unsupported dtype"):
            get_spacing_tolerance("int64")
        with pytest.raises(ValueError, match="Unsupported dtype"):
            get_solver_tolerance(np.complex64)
        with pytest.raises(ValueError, match="Unsupported dtype"):
            get_machine_epsilon(np.float16)

    def test_get_tolerance_info(self) -> None:
        """Test the get_tolerance_info dictionary."""
        dtype = np.float64
        info = get_tolerance_info(dtype)

        assert info["dtype"] == dtype
        assert info["machine_epsilon"] == np.finfo(dtype).eps
        assert info["spacing_tolerance"] == SPACING_TOL_F64
        assert info["solver_tolerance"] == SOLVER_TOL_F64
        assert info["precision_decimals"] == np.finfo(dtype).precision

    def test_get_tolerance_info_string_dtype(self) -> None:
        """Test get_tolerance_info with a string dtype."""
        dtype_str = "float32"
        info = get_tolerance_info(dtype_str)

        assert info["dtype"] == dtype_str
        assert info["machine_epsilon"] == np.finfo(dtype_str).eps
        assert info["spacing_tolerance"] == SPACING_TOL_F32

    def test_tolerance_info_keys(self) -> None:
        """Test that get_tolerance_info returns all expected keys."""
        info = get_tolerance_info(np.float32)
        expected_keys = {
            "dtype",
            "machine_epsilon",
            "spacing_tolerance",
            "solver_tolerance",
            "precision_decimals",
        }
        assert set(info.keys()) == expected_keys
