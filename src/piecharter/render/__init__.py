"""Raster backend and chart renderer."""

from .backend import CanvasFactory, MatplotlibCanvas, RasterBackend  # noqa: F401
from .renderer import ChartRenderer  # noqa: F401
