"""ArcGrid-ASCII reader.

Reads the six-line header (keys matched case-insensitively, in fixed order)
and then ncols * nrows whitespace-separated values. Rows may be wrapped over
several lines; only the total cell count is checked. OmniGlyph files are not
read.
"""

from __future__ import annotations

import logging
import time
from decimal import Decimal
from pathlib import Path

import numpy as np

from domain.raster.errors import GridParseError, HeaderParseError, SizeMismatchError
from domain.raster.repositories import ProgressReporter
from domain.raster.value_objects import GridIOReport, RasterGrid, coerce_no_data

from ._header import (
    ARCGRID_KEYS,
    decode_header_text,
    header_from_pairs,
    open_grid_file,
)
from .progress import NullProgress
from .settings import GridIOSettings

logger = logging.getLogger(__name__)


class AsciiGridReader:
    """Infrastructure adapter reading ArcGrid-ASCII rasters into a RasterGrid."""

    def __init__(
        self,
        settings: GridIOSettings | None = None,
        progress: ProgressReporter | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self.settings = settings or GridIOSettings()
        self.progress = progress or NullProgress()
        self.log = log or logger

    def read_ascii(self, path: Path | str, grid: RasterGrid) -> GridIOReport:
        """Read an ArcGrid-ASCII file into grid, resizing it in place.

        Cells of integer grids are parsed exactly; other grids are parsed as
        float64 and cast to the grid dtype.

        Raises:
            GridFileOpenError: If the file cannot be opened
            HeaderParseError: If the header is malformed or not UTF-8 text
            SizeMismatchError: If the file holds more or fewer than ncols * nrows values
            GridParseError: If a cell value is not a number, does not fit an
                integer dtype, or is not UTF-8 text
        """
        path = Path(path)
        started = time.perf_counter()

        with open_grid_file(path, "rb", self.log) as fin:
            pairs: list[tuple[str, str]] = []
            for lineno in range(1, len(ARCGRID_KEYS) + 1):
                line = decode_header_text(path, fin.readline(), f"line {lineno}: ")
                tokens = line.split()
                if len(tokens) != 2:
                    raise HeaderParseError(
                        path, f"line {lineno}: expected 'key value', found {tokens}"
                    )
                pairs.append((tokens[0], tokens[1]))
            header = header_from_pairs(path, pairs, ARCGRID_KEYS, case_sensitive=False)
            raw = fin.read()

        try:
            tokens = raw.decode("utf-8").split()
        except UnicodeDecodeError as e:
            raise GridParseError(
                f"{path.name}: undecodable byte 0x{raw[e.start]:02x} in cell data"
            ) from e
        try:
            coerce_no_data(header.no_data, grid.dtype)
        except ValueError as e:
            raise HeaderParseError(path, str(e)) from e
        if len(tokens) != header.cells:
            raise SizeMismatchError(path, header.cells, len(tokens), unit="cells")

        self.progress.start(header.cells)
        values = self._parse_cells(path, tokens, grid.dtype)
        header.apply_to(grid)
        grid.data[:, :] = values.reshape(header.nrows, header.ncols)
        self.progress.update(header.cells)
        self.progress.stop()

        grid.data_cells = grid.count_data_cells()
        elapsed = time.perf_counter() - started
        self.log.info(
            "%s: read %dx%d grid (%d data cells) in %.3fs",
            path.name,
            grid.width,
            grid.height,
            grid.data_cells,
            elapsed,
        )
        return GridIOReport(
            paths=(path,),
            fmt="arcgrid",
            width=grid.width,
            height=grid.height,
            data_cells=grid.data_cells,
            elapsed_s=elapsed,
        )

    @staticmethod
    def _parse_cells(path: Path, tokens: list[str], dtype: np.dtype) -> np.ndarray:
        """Convert cell tokens to an array of the grid dtype.

        Integer grids are parsed digit-exact and truncated toward zero, so
        64-bit values survive; other grids go through float64.
        """
        try:
            if dtype.kind not in "iu":
                return np.array(tokens, dtype=np.float64).astype(dtype)
            cells = [int(Decimal(t)) for t in tokens]
        except (ArithmeticError, ValueError) as e:
            raise GridParseError(f"{path.name}: {e}") from e

        info = np.iinfo(dtype)
        if min(cells) < info.min or max(cells) > info.max:
            raise GridParseError(f"{path.name}: cell value out of range for {dtype}")
        return np.array(cells, dtype=dtype)
