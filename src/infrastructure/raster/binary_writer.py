"""Binary pair writer: `<basename>.hdr` text header plus `<basename>.flt` payload.

The payload is the grid's cells in row-major order, in their native in-memory
representation: no framing, no padding, no byte swapping. The header always
records BYTEORDER as the configured label (LSBFIRST), it is not derived from
the host.

The two files are written independently. If the payload cannot be opened the
header is left on disk.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

from domain.raster.repositories import ProgressReporter
from domain.raster.value_objects import GridFileHeader, GridIOReport, RasterGrid

from ._header import format_fixed, header_line, open_grid_file
from .progress import NullProgress
from .settings import GridIOSettings

logger = logging.getLogger(__name__)

HEADER_SUFFIX = ".hdr"
DATA_SUFFIX = ".flt"


def pair_paths(basename: Path | str) -> tuple[Path, Path]:
    """Return (header, payload) paths for a basename without extension."""
    base = str(basename)
    return Path(base + HEADER_SUFFIX), Path(base + DATA_SUFFIX)


class BinaryGridWriter:
    """Infrastructure adapter writing ESRI-style `.hdr`/`.flt` pairs.

    Parameters
    ----------
    settings: GridIOSettings | None
        Header precision and byte-order label.
    progress: ProgressReporter | None
        Advisory progress sink; defaults to NullProgress.
    log: logging.Logger | None
        Diagnostic logger; defaults to this module's logger.
    """

    def __init__(
        self,
        settings: GridIOSettings | None = None,
        progress: ProgressReporter | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self.settings = settings or GridIOSettings()
        self.progress = progress or NullProgress()
        self.log = log or logger

    def write_binary(self, basename: Path | str, grid: RasterGrid) -> GridIOReport:
        """Write grid to `<basename>.hdr` and `<basename>.flt`.

        Raises:
            ValueError: If the grid corners are not finite
            GridFileOpenError: If either file cannot be opened
        """
        fn_header, fn_data = pair_paths(basename)
        header = GridFileHeader.from_grid(
            grid, byteorder=self.settings.byteorder_label
        )
        started = time.perf_counter()

        with open_grid_file(
            fn_header, "w", self.log, encoding="utf-8", newline="\n"
        ) as fout:
            fout.write(self._header_text(header))
        self.log.debug("%s: header written", fn_header.name)

        with open_grid_file(fn_data, "wb", self.log) as fout:
            self.progress.start(grid.width * grid.height)
            for y in range(grid.height):
                self.progress.update(y * grid.width)
                fout.write(grid.data[y].tobytes())
            self.progress.update(grid.width * grid.height)
            self.progress.stop()

        elapsed = time.perf_counter() - started
        self.log.info(
            "%s: wrote %dx%d %s payload in %.3fs",
            fn_data.name,
            grid.width,
            grid.height,
            grid.dtype,
            elapsed,
        )
        return GridIOReport(
            paths=(fn_header, fn_data),
            fmt="binary",
            width=grid.width,
            height=grid.height,
            elapsed_s=elapsed,
        )

    def _header_text(self, header: GridFileHeader) -> str:
        digits = self.settings.binary_precision
        return "".join(
            (
                header_line("ncols", str(header.ncols)),
                header_line("nrows", str(header.nrows)),
                header_line("xllcorner", format_fixed(header.xllcorner, digits)),
                header_line("yllcorner", format_fixed(header.yllcorner, digits)),
                header_line("cellsize", format_fixed(header.cellsize, digits)),
                header_line("NODATA_value", format_fixed(header.no_data, digits)),
                header_line("BYTEORDER", header.byteorder),
            )
        )
