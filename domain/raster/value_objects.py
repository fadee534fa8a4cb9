"""Raster Bounded Context - Value Objects.

Data structures shared by the grid readers and writers.

RasterGrid is the one mutable object here: readers resize and populate it in
place, writers only read from it. The header, format and report types are
immutable and validated at construction time via Pydantic.
"""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from enum import Enum
from pathlib import Path
from typing import Any

import numpy as np
from affine import Affine
from numpy.typing import DTypeLike, NDArray
from pydantic import BaseModel, ConfigDict, Field, model_validator

from domain.raster.errors import InvalidGridError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
DEFAULT_NO_DATA = -9999
OMNIGLYPH_SUFFIX = ".omg"
LSB_FIRST = "LSBFIRST"


def exact_integer(value: Any) -> int:
    """Return value as a Python int without a detour through float.

    Accepts ints, whole-valued floats and decimal text such as
    "9007199254740993.0000000000".

    Raises:
        ValueError: If value is not a finite whole number
    """
    if isinstance(value, (int, np.integer)):
        return int(value)
    try:
        num = Decimal(value if isinstance(value, str) else float(value))
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ValueError(f"{value!r} is not an integer") from e
    if not num.is_finite() or num != num.to_integral_value():
        raise ValueError(f"{value!r} is not an integer")
    return int(num)


def coerce_no_data(value: Any, dtype: DTypeLike) -> np.generic:
    """Convert a no-data sentinel to a scalar of the cell dtype.

    Raises ValueError when the value cannot be represented exactly, e.g.
    -9999 for a uint8 grid or 2.5 for an int16 grid. Integer sentinels are
    range-checked as Python ints, so the full int64/uint64 range is usable.
    """
    dt = np.dtype(dtype)
    if dt.kind == "b":
        if value not in (0, 1):
            raise ValueError(f"no_data {value!r} is not representable as bool")
        return dt.type(bool(value))
    if dt.kind in "iu":
        try:
            ival = exact_integer(value)
        except ValueError as e:
            raise ValueError(f"no_data {value!r} is not an integer for {dt}") from e
        info = np.iinfo(dt)
        if not (info.min <= ival <= info.max):
            raise ValueError(f"no_data {value!r} out of range for {dt}")
        return dt.type(ival)
    if dt.kind == "f":
        try:
            return dt.type(float(value))
        except OverflowError as e:
            raise ValueError(f"no_data {value!r} out of range for {dt}") from e
    raise ValueError(f"Unsupported cell dtype: {dt}")


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------
class CellKind(str, Enum):
    """How cell values are rendered in text formats.

    INTEGER cells are written without a decimal point, FLOAT cells as
    fixed-point with the requested precision.
    """

    INTEGER = "integer"
    FLOAT = "float"

    @classmethod
    def from_dtype(cls, dtype: DTypeLike) -> "CellKind":
        """Default kind for a dtype: one-byte cells (bytes, bools) are INTEGER."""
        return cls.INTEGER if np.dtype(dtype).itemsize == 1 else cls.FLOAT


class GridFormat(str, Enum):
    """Text grid syntax written by the ASCII writer."""

    ARCGRID = "arcgrid"
    OMNIGLYPH = "omniglyph"

    @classmethod
    def from_path(
        cls, path: Path | str, omniglyph_suffix: str = OMNIGLYPH_SUFFIX
    ) -> "GridFormat":
        """Pick the syntax from the file name: OmniGlyph for `.omg`, else ArcGrid."""
        if str(path).endswith(omniglyph_suffix):
            return cls.OMNIGLYPH
        return cls.ARCGRID


# ---------------------------------------------------------------------------
# RasterGrid
# ---------------------------------------------------------------------------
class RasterGrid(BaseModel):
    """Rectangular grid of cells with ArcGrid-style georeferencing.

    Cells are addressed as ``grid[x, y]`` with x the column and y the row;
    row 0 is the first row on disk. The backing array has shape
    ``(height, width)``.

    Invariants:
        RG-1: data is 2D and non-empty
        RG-2: cellsize is finite and positive
        RG-3: no_data is a scalar of the cell dtype
        RG-4: cell_kind is always set after construction
    """

    data: NDArray[Any]
    xllcorner: float = 0.0  # Lower-left corner, x
    yllcorner: float = 0.0  # Lower-left corner, y
    cellsize: float = 1.0  # Cell edge length
    no_data: Any = DEFAULT_NO_DATA
    data_cells: int | None = None  # Cells != no_data; recomputed by readers
    cell_kind: CellKind | None = None

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @model_validator(mode="after")
    def validate_grid(self) -> "RasterGrid":
        data = np.array(self.data, copy=True, order="C")
        if data.ndim != 2:
            raise ValueError(f"Data must be 2D, got {data.ndim}D")
        if data.shape[0] == 0 or data.shape[1] == 0:
            raise ValueError(f"Data cannot be empty: {data.shape}")
        if not math.isfinite(self.cellsize) or self.cellsize <= 0:
            raise ValueError(f"cellsize must be positive: {self.cellsize}")

        object.__setattr__(self, "data", data)
        object.__setattr__(self, "no_data", coerce_no_data(self.no_data, data.dtype))
        if self.cell_kind is None:
            object.__setattr__(self, "cell_kind", CellKind.from_dtype(data.dtype))
        if self.data_cells is None:
            object.__setattr__(self, "data_cells", self.count_data_cells())
        return self

    @classmethod
    def empty(
        cls,
        dtype: DTypeLike = np.float32,
        no_data: Any = DEFAULT_NO_DATA,
        cell_kind: CellKind | None = None,
    ) -> "RasterGrid":
        """Create a 1x1 placeholder grid for a reader to resize."""
        sentinel = coerce_no_data(no_data, dtype)
        return cls(
            data=np.full((1, 1), sentinel, dtype=dtype),
            no_data=sentinel,
            cell_kind=cell_kind,
        )

    # -- dimensions ---------------------------------------------------------
    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def dtype(self) -> np.dtype:
        return self.data.dtype

    @property
    def cell_size_bytes(self) -> int:
        return int(self.data.dtype.itemsize)

    @property
    def transform(self) -> Affine:
        """North-up geotransform mapping (col, row) to the cell's top-left corner."""
        top = self.yllcorner + self.height * self.cellsize
        return Affine.translation(self.xllcorner, top) * Affine.scale(
            self.cellsize, -self.cellsize
        )

    # -- cell access --------------------------------------------------------
    def __getitem__(self, xy: tuple[int, int]) -> Any:
        x, y = xy
        return self.data[y, x]

    def __setitem__(self, xy: tuple[int, int], value: Any) -> None:
        x, y = xy
        self.data[y, x] = value

    def resize(self, cols: int, rows: int) -> None:
        """Resize to cols x rows, discarding all cells and filling with no_data."""
        if cols <= 0 or rows <= 0:
            raise InvalidGridError(f"Grid dimensions must be positive: {cols}x{rows}")
        self.data = np.full((rows, cols), self.no_data, dtype=self.data.dtype)
        self.data_cells = 0

    def set_no_data(self, value: Any) -> None:
        """Replace the sentinel, converting it to the cell dtype."""
        try:
            self.no_data = coerce_no_data(value, self.data.dtype)
        except ValueError as e:
            raise InvalidGridError(str(e)) from e

    # -- statistics ---------------------------------------------------------
    def data_mask(self) -> NDArray[np.bool_]:
        """Boolean mask of cells holding data (not equal to no_data).

        A NaN sentinel matches NaN cells.
        """
        if self.data.dtype.kind == "f" and np.isnan(self.no_data):
            return ~np.isnan(self.data)
        return self.data != self.no_data

    def count_data_cells(self) -> int:
        return int(np.count_nonzero(self.data_mask()))

    def min(self) -> Any:
        """Smallest data value, or no_data if the grid holds no data."""
        mask = self.data_mask()
        if not mask.any():
            return self.no_data
        return self.data[mask].min()

    def max(self) -> Any:
        """Largest data value, or no_data if the grid holds no data."""
        mask = self.data_mask()
        if not mask.any():
            return self.no_data
        return self.data[mask].max()


# ---------------------------------------------------------------------------
# GridFileHeader
# ---------------------------------------------------------------------------
class GridFileHeader(BaseModel):
    """Grid metadata as stored in a file header (Value Object).

    byteorder is only present for the binary pair format. It is recorded
    on read but never used to convert cell values.

    no_data stays an int for integer and bool grids so that 64-bit
    sentinels survive unchanged; it may be NaN for float grids. The
    georeferencing fields must be finite.
    """

    ncols: int = Field(gt=0)
    nrows: int = Field(gt=0)
    xllcorner: float = Field(allow_inf_nan=False)
    yllcorner: float = Field(allow_inf_nan=False)
    cellsize: float = Field(gt=0, allow_inf_nan=False)
    no_data: int | float
    byteorder: str | None = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_grid(
        cls, grid: RasterGrid, byteorder: str | None = None
    ) -> "GridFileHeader":
        """Header describing grid as it would be written to disk.

        Raises:
            ValueError: If the grid's corner coordinates are not finite
        """
        if grid.dtype.kind in "biu":
            no_data: int | float = int(grid.no_data)
        else:
            no_data = float(grid.no_data)
        return cls(
            ncols=grid.width,
            nrows=grid.height,
            xllcorner=grid.xllcorner,
            yllcorner=grid.yllcorner,
            cellsize=grid.cellsize,
            no_data=no_data,
            byteorder=byteorder,
        )

    @property
    def cells(self) -> int:
        return self.ncols * self.nrows

    def apply_to(self, grid: RasterGrid) -> None:
        """Resize grid to this header's shape and copy its metadata.

        Prior cell contents are discarded.

        Raises:
            InvalidGridError: If no_data cannot be stored in the grid's dtype
        """
        grid.set_no_data(self.no_data)
        grid.xllcorner = self.xllcorner
        grid.yllcorner = self.yllcorner
        grid.cellsize = self.cellsize
        grid.resize(self.ncols, self.nrows)


# ---------------------------------------------------------------------------
# GridIOReport
# ---------------------------------------------------------------------------
class GridIOReport(BaseModel):
    """Outcome of one read or write operation (Value Object).

    data_cells is only reported by readers; writers leave it None.
    """

    paths: tuple[Path, ...]
    fmt: str
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    data_cells: int | None = None
    elapsed_s: float = Field(ge=0)

    model_config = ConfigDict(frozen=True)

    @property
    def cells(self) -> int:
        return self.width * self.height
