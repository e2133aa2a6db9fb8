"""Tests for reading and writing sample data files."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.testing as nptest
import pytest

from bedspline.cache_2D import (
    create_anisotropic_bicubic_Bspline_cache,
    create_bicubic_Bspline_cache,
    create_bilinear_Bspline_cache,
)
from bedspline.data_file import (
    read_anisotropic_bicubic_Bspline_cache,
    read_bicubic_Bspline_cache,
    read_bilinear_Bspline_cache,
    read_Bspline_cache_data,
    write_Bspline_cache_data,
)
from bedspline.exceptions import BedsplineError, MalformedCacheFileError

SAMPLE_FILE = """\
number of x knots
3
number of y knots
2
x
0.0
1.0
2.0
y
-1.0
1.0
z
1.0
2.0
3.0
4.0
5.0
6.5
"""


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "samples.txt"
    path.write_text(text)
    return path


class TestReadData:
    def test_hand_written_file(self, tmp_path: Path) -> None:
        x, y, z = read_Bspline_cache_data(_write(tmp_path, SAMPLE_FILE))
        nptest.assert_array_equal(x, [0.0, 1.0, 2.0])
        nptest.assert_array_equal(y, [-1.0, 1.0])
        nptest.assert_array_equal(z, [[1.0, 2.0, 3.0], [4.0, 5.0, 6.5]])

    def test_accepts_str_path(self, tmp_path: Path) -> None:
        x, _, _ = read_Bspline_cache_data(str(_write(tmp_path, SAMPLE_FILE)))
        assert x.shape == (3,)

    def test_trailing_blank_lines_are_ignored(self, tmp_path: Path) -> None:
        _, _, z = read_Bspline_cache_data(_write(tmp_path, SAMPLE_FILE + "\n\n  \n"))
        assert z.shape == (2, 3)

    def test_surrounding_whitespace(self, tmp_path: Path) -> None:
        text = SAMPLE_FILE.replace("\n3\n", "\n  3 \n").replace("6.5", " 6.5\t")
        _, _, z = read_Bspline_cache_data(_write(tmp_path, text))
        assert z[1, 2] == 6.5  # noqa: PLR2004

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            read_Bspline_cache_data(tmp_path / "missing.txt")


class TestMalformedData:
    def _assert_malformed(self, path: Path, line_number: int) -> MalformedCacheFileError:
        with pytest.raises(MalformedCacheFileError) as exc_info:
            read_Bspline_cache_data(path)
        assert exc_info.value.line_number == line_number
        assert f"(line {line_number})" in str(exc_info.value)
        return exc_info.value

    def test_non_integer_count(self, tmp_path: Path) -> None:
        text = SAMPLE_FILE.replace("\n3\n", "\nthree\n", 1)
        err = self._assert_malformed(_write(tmp_path, text), 2)
        assert "integer" in str(err)

    def test_non_positive_count(self, tmp_path: Path) -> None:
        text = SAMPLE_FILE.replace("\n2\n", "\n0\n", 1)
        err = self._assert_malformed(_write(tmp_path, text), 4)
        assert "positive" in str(err)

    def test_empty_file(self, tmp_path: Path) -> None:
        self._assert_malformed(_write(tmp_path, ""), 2)

    def test_invalid_float(self, tmp_path: Path) -> None:
        text = SAMPLE_FILE.replace("\n-1.0\n", "\nminus one\n")
        err = self._assert_malformed(_write(tmp_path, text), 10)
        assert "y value" in str(err)

    def test_missing_z_values(self, tmp_path: Path) -> None:
        text = SAMPLE_FILE.replace("6.5\n", "")
        err = self._assert_malformed(_write(tmp_path, text), 13)
        assert "Expected 6 z values" in str(err)

    def test_too_many_z_values(self, tmp_path: Path) -> None:
        self._assert_malformed(_write(tmp_path, SAMPLE_FILE + "7.0\n"), 13)

    def test_truncated_knots(self, tmp_path: Path) -> None:
        text = "\n".join(SAMPLE_FILE.splitlines()[:7])
        self._assert_malformed(_write(tmp_path, text), 8)

    def test_is_a_value_error(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "n\nx\n")
        with pytest.raises(ValueError):
            read_Bspline_cache_data(path)
        with pytest.raises(BedsplineError):
            read_Bspline_cache_data(path)


class TestWriteData:
    def test_round_trip_is_exact(self, tmp_path: Path, rng: np.random.Generator) -> None:
        x = np.linspace(-3.0, 4.0, 7) / 3.0
        y = np.linspace(0.1, 0.9, 5)
        z = rng.normal(size=(5, 7))
        path = write_Bspline_cache_data(tmp_path / "out.txt", x, y, z)
        assert path == tmp_path / "out.txt"

        x_read, y_read, z_read = read_Bspline_cache_data(path)
        nptest.assert_array_equal(x_read, x)
        nptest.assert_array_equal(y_read, y)
        nptest.assert_array_equal(z_read, z)

    def test_layout(self, tmp_path: Path) -> None:
        path = write_Bspline_cache_data(
            tmp_path / "out.txt", [0.0, 1.0, 2.0], [-1.0, 1.0], [[1, 2, 3], [4, 5, 6.5]]
        )
        lines = path.read_text().splitlines()
        assert lines[1] == "3"
        assert lines[3] == "2"
        assert lines[5:8] == ["0.0", "1.0", "2.0"]
        assert lines[9:11] == ["-1.0", "1.0"]
        assert lines[12:] == ["1.0", "2.0", "3.0", "4.0", "5.0", "6.5"]

    def test_shape_mismatch(self, tmp_path: Path) -> None:
        with pytest.raises(BedsplineError, match="z must have shape"):
            write_Bspline_cache_data(tmp_path / "out.txt", [0.0, 1.0], [0.0], np.zeros((2, 2)))
        assert not (tmp_path / "out.txt").exists()


class TestReadCache:
    @pytest.fixture
    def samples(self, tmp_path: Path, rng: np.random.Generator):  # type: ignore[no-untyped-def]
        x = np.linspace(0.0, 2.5, 6)
        y = np.linspace(1.0, 3.0, 5)
        z = rng.normal(size=(5, 6))
        path = write_Bspline_cache_data(tmp_path / "grid.txt", x, y, z)
        return path, x, y, z

    def test_bilinear(self, samples) -> None:  # type: ignore[no-untyped-def]
        path, x, y, z = samples
        cache = read_bilinear_Bspline_cache(path)
        nptest.assert_array_equal(cache.Q, create_bilinear_Bspline_cache(x, y, z).Q)

    @pytest.mark.parametrize("boundary", ["free", "not-a-knot"])
    def test_bicubic(self, samples, boundary: str) -> None:  # type: ignore[no-untyped-def]
        path, x, y, z = samples
        cache = read_bicubic_Bspline_cache(path, boundary=boundary)
        expected = create_bicubic_Bspline_cache(x, y, z, boundary=boundary)
        nptest.assert_array_equal(cache.Q, expected.Q)
        assert cache.boundary is expected.boundary

    @pytest.mark.parametrize("boundary", ["free", "not-a-knot", "smooth"])
    def test_anisotropic_bicubic(  # type: ignore[no-untyped-def]
        self, samples, boundary: str
    ) -> None:
        path, x, y, z = samples
        cache = read_anisotropic_bicubic_Bspline_cache(path, boundary=boundary)
        expected = create_anisotropic_bicubic_Bspline_cache(x, y, z, boundary=boundary)
        nptest.assert_array_equal(cache.Q, expected.Q)

    def test_smoothing_factor_is_forwarded(self, samples) -> None:  # type: ignore[no-untyped-def]
        path, x, y, z = samples
        cache = read_bilinear_Bspline_cache(path, smoothing_factor=5.0)
        nptest.assert_allclose(
            cache.Q, create_bilinear_Bspline_cache(x, y, z, smoothing_factor=5.0).Q
        )
