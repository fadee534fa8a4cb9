"""Raster Bounded Context.

Responsible for moving rectangular numeric grids (DEMs and similar rasters)
to and from disk:
- Value Objects: RasterGrid, GridFileHeader, GridFormat, CellKind, GridIOReport
- Ports: text and binary grid readers/writers, progress reporting
"""
