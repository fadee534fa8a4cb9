"""Binary pair reader: `<basename>.hdr` + `<basename>.flt` into a RasterGrid.

Lifecycle:
1) Parse the header: exactly seven key/value pairs in fixed order
2) Check the memory budget and that NODATA_value fits the grid dtype
3) Open the payload and compare its length with ncols * nrows * itemsize
4) Resize the grid (destructive) and copy corner/cellsize/no-data onto it
5) Stream rows in row-major order
6) Recount data_cells

Steps 1-3 fail without touching the grid. BYTEORDER is parsed but not
used: cells are read in the grid dtype's byte order.
"""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path

import numpy as np

from domain.raster.errors import (
    HeaderParseError,
    InsufficientMemoryError,
    SizeMismatchError,
)
from domain.raster.repositories import ProgressReporter
from domain.raster.value_objects import (
    GridFileHeader,
    GridIOReport,
    RasterGrid,
    coerce_no_data,
)

from ._header import (
    BINARY_KEYS,
    decode_header_text,
    header_from_pairs,
    open_grid_file,
    pairs_from_tokens,
)
from .binary_writer import pair_paths
from .progress import NullProgress
from .settings import GridIOSettings

logger = logging.getLogger(__name__)


class BinaryGridReader:
    """Infrastructure adapter reading ESRI-style `.hdr`/`.flt` pairs.

    Parameters
    ----------
    settings: GridIOSettings | None
        Memory budget and payload-size policy.
    progress: ProgressReporter | None
        Advisory progress sink; defaults to NullProgress.
    log: logging.Logger | None
        Diagnostic logger; defaults to this module's logger.
    max_bytes: int | None
        Overrides settings.max_bytes when given.
    """

    def __init__(
        self,
        settings: GridIOSettings | None = None,
        progress: ProgressReporter | None = None,
        log: logging.Logger | None = None,
        max_bytes: int | None = None,
    ) -> None:
        self.settings = settings or GridIOSettings()
        self.progress = progress or NullProgress()
        self.log = log or logger
        self.max_bytes = max_bytes if max_bytes is not None else self.settings.max_bytes

    def read_header(self, basename: Path | str) -> GridFileHeader:
        """Parse `<basename>.hdr` without touching any grid.

        Raises:
            GridFileOpenError: If the header cannot be opened
            HeaderParseError: If the header is malformed or not UTF-8 text
        """
        fn_header, _ = pair_paths(basename)
        with open_grid_file(fn_header, "rb", self.log) as fin:
            text = decode_header_text(fn_header, fin.read())
        tokens = text.split()
        header = header_from_pairs(
            fn_header, pairs_from_tokens(fn_header, tokens), BINARY_KEYS
        )
        self.log.debug(
            "%s: %dx%d grid, byte order %s",
            fn_header.name,
            header.ncols,
            header.nrows,
            header.byteorder,
        )
        return header

    def read_binary(
        self,
        basename: Path | str,
        grid: RasterGrid,
        strict: bool | None = None,
    ) -> GridIOReport:
        """Read `<basename>.hdr`/`.flt` into grid, resizing it in place.

        Args:
            basename: Path without extension
            grid: Destination; its dtype decides the cell size in the payload
            strict: Reject payloads whose length does not match the header
                (defaults to settings.strict_size). When False, missing
                trailing cells stay no_data and extra bytes are ignored.

        Returns:
            GridIOReport including the recounted data_cells

        Raises:
            GridFileOpenError: If either file cannot be opened
            HeaderParseError: If the header is malformed or its NODATA_value
                cannot be stored in the grid dtype
            InsufficientMemoryError: If the grid would exceed max_bytes
            SizeMismatchError: If strict and the payload length is wrong
        """
        if strict is None:
            strict = self.settings.strict_size
        fn_header, fn_data = pair_paths(basename)
        started = time.perf_counter()

        header = self.read_header(basename)
        itemsize = grid.cell_size_bytes
        expected = header.cells * itemsize

        self.log.debug(
            "%s: grid will require approximately %dMB of RAM",
            fn_header.name,
            expected // 1024 // 1024,
        )
        if self.max_bytes is not None and expected > self.max_bytes:
            raise InsufficientMemoryError(
                f"Estimated grid size {expected}B exceeds budget {self.max_bytes}B"
            )
        try:
            coerce_no_data(header.no_data, grid.dtype)
        except ValueError as e:
            raise HeaderParseError(fn_header, str(e)) from e

        with open_grid_file(fn_data, "rb", self.log) as fin:
            actual = os.fstat(fin.fileno()).st_size
            if actual != expected:
                if strict:
                    raise SizeMismatchError(fn_data, expected, actual)
                self.log.warning(
                    "%s: payload is %d bytes, header declares %d; reading best-effort",
                    fn_data.name,
                    actual,
                    expected,
                )

            header.apply_to(grid)
            self._stream_rows(fin, fn_data, header, grid, strict)

        grid.data_cells = grid.count_data_cells()
        elapsed = time.perf_counter() - started
        self.log.info(
            "%s: read %dx%d grid (%d data cells) in %.3fs",
            fn_data.name,
            grid.width,
            grid.height,
            grid.data_cells,
            elapsed,
        )
        return GridIOReport(
            paths=(fn_header, fn_data),
            fmt="binary",
            width=grid.width,
            height=grid.height,
            data_cells=grid.data_cells,
            elapsed_s=elapsed,
        )

    def _stream_rows(
        self,
        fin,
        fn_data: Path,
        header: GridFileHeader,
        grid: RasterGrid,
        strict: bool,
    ) -> None:
        itemsize = grid.cell_size_bytes
        row_bytes = header.ncols * itemsize

        self.progress.start(header.cells)
        for y in range(header.nrows):
            self.progress.update(y * header.ncols)
            buf = fin.read(row_bytes)
            if len(buf) == row_bytes:
                grid.data[y] = np.frombuffer(buf, dtype=grid.dtype)
                continue
            # Short read: payload shrank after the size check, or lenient mode
            if strict:
                raise SizeMismatchError(
                    fn_data, header.cells * itemsize, y * row_bytes + len(buf)
                )
            usable = len(buf) // itemsize
            if usable:
                grid.data[y, :usable] = np.frombuffer(
                    buf[: usable * itemsize], dtype=grid.dtype
                )
            break
        self.progress.update(header.cells)
        self.progress.stop()
