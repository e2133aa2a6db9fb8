"""Sphinx configuration for the bedspline documentation."""

from __future__ import annotations

import importlib.util
import sys
import warnings
from pathlib import Path
from typing import Final

PROJECT_ROOT: Final[Path] = Path(__file__).resolve().parent.parent
SRC_PATH: Final[Path] = PROJECT_ROOT / "src"

sys.path.insert(0, str(SRC_PATH))

import bedspline  # noqa: E402

project = "bedspline"
author = "bedspline developers"

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.mathjax",
    "sphinx.ext.napoleon",
    "sphinx.ext.intersphinx",
    "myst_parser",
]

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "numpy": ("https://numpy.org/doc/stable", None),
    "scipy": ("https://docs.scipy.org/doc/scipy/", None),
}

exclude_patterns: list[str] = ["_build"]

source_suffix = {
    ".rst": "restructuredtext",
    ".md": "markdown",
}

master_doc = "index"

napoleon_google_docstring = True
napoleon_numpy_docstring = False
napoleon_attr_annotations = True

autodoc_typehints = "description"
autodoc_member_order = "bysource"

myst_enable_extensions = ["dollarmath"]

html_theme = "sphinx_rtd_theme"
if importlib.util.find_spec("sphinx_rtd_theme") is None:
    warnings.warn(
        "sphinx_rtd_theme not found. Falling back to 'alabaster'.",
        stacklevel=1,
    )
    html_theme = "alabaster"

version = bedspline.__version__
release = bedspline.__version__
