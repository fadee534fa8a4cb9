"""Grid I/O Domain Layer.

This package contains the core model organized by bounded contexts:
- raster: Grid container, file headers, error hierarchy and I/O ports
"""

from domain import raster

__all__ = ["raster"]
