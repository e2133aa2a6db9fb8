"""Pytest configuration to make `src` importable without installing the package."""

from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import numpy as np
import numpy.typing as npt
import pytest


def _ensure_src_on_sys_path() -> None:
    """Prepend the repository `src` directory to `sys.path` if missing."""
    repo_root: Path = Path(__file__).resolve().parents[1]
    src_path: Path = repo_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


_ensure_src_on_sys_path()


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded random generator for reproducible sample grids."""
    return np.random.default_rng(1234)


@pytest.fixture
def grid_5x6() -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """Uniform knots: 6 along x with step 0.5 and 5 along y with step 0.5."""
    x = np.linspace(-1.0, 1.5, 6)
    y = np.linspace(2.0, 4.0, 5)
    return x, y


def _apply_stencil_family(
    family: Any, grid: npt.NDArray[np.float64]
) -> npt.NDArray[np.float64]:
    """Left-hand sides of a family's equations evaluated on a padded grid."""
    out = np.zeros(family.num_rows, dtype=np.float64)
    for dr, dc in zip(*np.nonzero(family.weights)):
        rows = family.anchors[:, 0] + dr
        cols = family.anchors[:, 1] + dc
        out += family.weights[dr, dc] * grid[rows, cols]
    return out


@pytest.fixture
def apply_stencil_family() -> Callable[[Any, npt.NDArray[np.float64]], npt.NDArray[np.float64]]:
    """Evaluate a stencil family on a padded coefficient grid, one value per equation."""
    return _apply_stencil_family
