"""Tolerance presets for knot validation and coefficient solves."""

from functools import cache
from typing import Any, NamedTuple, TypedDict, cast

import numpy as np
from numpy import typing as npt


@cache
def _ensure_float_dtype_by_name(name: str) -> np.dtype[np.floating[Any]]:
    """Cached validator returning a floating dtype from its canonical name.

    Args:
        name (str): Canonical NumPy dtype name (e.g., "float64").

    Returns:
        np.dtype[np.floating[Any]]: Validated floating-point dtype.

    Raises:
        ValueError: If dtype is not float32 or float64.
    """
    dtype_obj = np.dtype(name)
    if dtype_obj.type not in (np.float32, np.float64):
        raise ValueError(f"Unsupported dtype: {name}")
    return cast(np.dtype[np.floating[Any]], dtype_obj)


def _ensure_float_dtype(dtype: npt.DTypeLike) -> np.dtype[np.floating[Any]]:
    """Normalize and validate a dtype-like into a floating dtype."""
    return _ensure_float_dtype_by_name(np.dtype(dtype).name)


class _TolerancePreset(NamedTuple):
    """Tolerance values for the supported floating-point types."""

    float32: float
    float64: float


_TOLERANCE_PRESETS = {
    # Relative deviation allowed between consecutive knot steps. Knots read
    # from text files carry a few ulps of decimal rounding.
    "spacing": _TolerancePreset(1e-4, 1e-8),
    # Relative residual accepted after the sparse coefficient solve.
    "solver": _TolerancePreset(1e-4, 1e-9),
}


def _get_tolerance(dtype: npt.DTypeLike, preset: _TolerancePreset) -> float:
    dtype_obj = _ensure_float_dtype(dtype)
    if dtype_obj.type == np.float32:
        return preset.float32
    return preset.float64


def get_spacing_tolerance(dtype: npt.DTypeLike = np.float64) -> float:
    """Get the relative tolerance used to decide whether knots are uniformly spaced.

    Args:
        dtype (npt.DTypeLike): NumPy floating-point data type. Defaults to float64.

    Returns:
        float: Maximum relative difference between a knot step and the first step.

    Raises:
        ValueError: If dtype is not float32 or float64.
    """
    return _get_tolerance(dtype, _TOLERANCE_PRESETS["spacing"])


def get_solver_tolerance(dtype: npt.DTypeLike = np.float64) -> float:
    """Get the relative residual tolerance of the coefficient solve.

    Args:
        dtype (npt.DTypeLike): NumPy floating-point data type. Defaults to float64.

    Returns:
        float: Maximum accepted ``||Phi q - P|| / max(1, ||P||)``.

    Raises:
        ValueError: If dtype is not float32 or float64.
    """
    return _get_tolerance(dtype, _TOLERANCE_PRESETS["solver"])


def get_machine_epsilon(dtype: npt.DTypeLike = np.float64) -> float:
    """Get machine epsilon for a given floating-point dtype.

    Args:
        dtype (npt.DTypeLike): NumPy floating-point data type. Defaults to float64.

    Returns:
        float: Machine epsilon for the given dtype.

    Raises:
        ValueError: If dtype is not float32 or float64.
    """
    return float(np.finfo(_ensure_float_dtype(dtype)).eps)


class ToleranceInfo(TypedDict):
    """A TypedDict holding the tolerance presets of a dtype."""

    dtype: npt.DTypeLike
    machine_epsilon: float
    spacing_tolerance: float
    solver_tolerance: float
    precision_decimals: int


def get_tolerance_info(dtype: npt.DTypeLike = np.float64) -> ToleranceInfo:
    """Get all tolerance presets for a dtype.

    Args:
        dtype (npt.DTypeLike): NumPy floating-point data type. Defaults to float64.

    Returns:
        ToleranceInfo: Machine epsilon, preset tolerances and decimal precision.

    Raises:
        ValueError: If dtype is not float32 or float64.
    """
    dt = _ensure_float_dtype(dtype)
    return {
        "dtype": dtype,
        "machine_epsilon": get_machine_epsilon(dt),
        "spacing_tolerance": get_spacing_tolerance(dt),
        "solver_tolerance": get_solver_tolerance(dt),
        "precision_decimals": np.finfo(dt).precision,
    }
