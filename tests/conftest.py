"""Root pytest configuration for all tests.

Provides grid factories shared by the raster test modules. Grids are built
directly from numpy arrays so that domain tests need no file I/O.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import numpy as np
import pytest

from domain.raster.value_objects import RasterGrid


def make_grid(
    rows: list[list[Any]],
    dtype: Any = np.float32,
    no_data: Any = -9999,
    **kwargs: Any,
) -> RasterGrid:
    """Build a RasterGrid from nested row lists (row 0 first)."""
    return RasterGrid(data=np.array(rows, dtype=dtype), no_data=no_data, **kwargs)


@pytest.fixture
def grid_factory() -> Callable[..., RasterGrid]:
    """Factory for RasterGrids of arbitrary contents."""
    return make_grid


@pytest.fixture
def grid_2x2() -> RasterGrid:
    """2x2 float32 grid [[1.5, 2.5], [3.5, 4.5]] with no_data -9999."""
    return make_grid([[1.5, 2.5], [3.5, 4.5]])


@pytest.fixture
def byte_grid() -> RasterGrid:
    """2x2 uint8 grid with one no_data (255) cell."""
    return make_grid([[1, 2], [3, 255]], dtype=np.uint8, no_data=255)


@pytest.fixture
def dem_grid() -> RasterGrid:
    """5x4 float32 DEM with known georeferencing and two no_data cells."""
    rng = np.random.default_rng(42)
    data = (rng.random((4, 5)) * 1000).astype(np.float32)
    data[0, 0] = -9999
    data[3, 4] = -9999
    return RasterGrid(
        data=data,
        xllcorner=500000.25,
        yllcorner=7200000.5,
        cellsize=30.0,
        no_data=-9999,
    )
