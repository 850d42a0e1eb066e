"""Raster backend that draws chart descriptions into PNG buffers.

The backend is split in two:

- ``CanvasFactory`` is created once per process (or per test) and holds
  everything that is shared between rows: canvas size, stroke width,
  donut cutout, and the matplotlib rc overrides applied while drawing.
- ``MatplotlibCanvas`` is one drawing context for one chart. It is built
  by ``CanvasFactory.new_canvas()`` and thrown away after
  ``to_raster_buffer()``.

The matplotlib object API (``Figure`` + Agg canvas) is used directly, so
no pyplot figure registry or other global drawing state is involved.

Coordinates are canvas pixels: x grows to the right, y grows downward.
The figure is created at 72 dpi, so one typographic point is one pixel
and a ``LabelPlacement.font_size_px`` can be used as-is.
"""

from __future__ import annotations

import io
import logging
import math
from typing import Any, Protocol

from matplotlib import rc_context
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from matplotlib.patches import Rectangle, Wedge

from ..core.models import ChartDescription, LabelPlacement, RenderedImage, SliceGeometry
from ..generators.label_layout import LABEL_COLOR, LABEL_FONT_FAMILY, LABEL_FONT_WEIGHT

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DPI = 72
START_ANGLE = -math.pi / 2  # 12 o'clock

TITLE_FONT_SIZE_PX = 12
TITLE_PADDING_PX = 10
TITLE_COLOR = "#666666"

_RC_OVERRIDES: dict[str, Any] = {
    "font.family": "sans-serif",
    "path.simplify": False,
}


# ---------------------------------------------------------------------------
# Capability surface
# ---------------------------------------------------------------------------

class RasterBackend(Protocol):
    """What the chart renderer needs from a drawing context."""

    width: int
    height: int

    def compute_slice_geometry(
        self, description: ChartDescription, index: int,
    ) -> SliceGeometry: ...

    def draw_background(self, color: str) -> None: ...

    def draw_slices(self, description: ChartDescription) -> None: ...

    def draw_text(self, placement: LabelPlacement) -> None: ...

    def draw_title(self, text: str) -> None: ...

    def to_raster_buffer(self) -> RenderedImage: ...


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

def slice_sweeps(values: tuple[float, ...] | list[float]) -> list[float]:
    """Angular sweep of each slice, proportional to ``|value|``.

    All sweeps are 0 when the values sum to 0.
    """
    total = sum(abs(v) for v in values)
    if total <= 0:
        return [0.0 for _ in values]
    return [2 * math.pi * abs(v) / total for v in values]


def slice_angles(
    values: tuple[float, ...] | list[float], start: float = START_ANGLE,
) -> list[tuple[float, float]]:
    """``(start_angle, end_angle)`` for every slice, laid out consecutively."""
    angles: list[tuple[float, float]] = []
    current = start
    for sweep in slice_sweeps(values):
        angles.append((current, current + sweep))
        current += sweep
    return angles


# ---------------------------------------------------------------------------
# Matplotlib drawing context
# ---------------------------------------------------------------------------

class MatplotlibCanvas:
    """One matplotlib figure sized to the canvas, drawn in pixel units."""

    def __init__(
        self,
        width: int,
        height: int,
        *,
        border_width: float = 1.0,
        cutout: float = 0.0,
        title_band: bool = False,
        rc: dict[str, Any] | None = None,
    ) -> None:
        self.width = width
        self.height = height
        self.border_width = border_width
        self.cutout = cutout
        self.title_band = title_band
        self._rc = dict(rc or _RC_OVERRIDES)

        self.figure = Figure(figsize=(width / DPI, height / DPI), dpi=DPI)
        self.figure.patch.set_alpha(0.0)
        FigureCanvasAgg(self.figure)

        self.ax = self.figure.add_axes((0.0, 0.0, 1.0, 1.0))
        self.ax.set_xlim(0, width)
        self.ax.set_ylim(height, 0)
        self.ax.set_axis_off()

    # -- Layout ----------------------------------------------------------

    @property
    def chart_area(self) -> tuple[float, float, float, float]:
        """``(left, top, width, height)`` of the region the pie is fitted into."""
        top = TITLE_FONT_SIZE_PX + 2 * TITLE_PADDING_PX if self.title_band else 0
        return (0.0, float(top), float(self.width), float(self.height - top))

    def compute_slice_geometry(
        self, description: ChartDescription, index: int,
    ) -> SliceGeometry:
        if not 0 <= index < description.slice_count:
            raise IndexError(f"slice {index} out of range for {description.slice_count} slices")

        left, top, w, h = self.chart_area
        outer = max((min(w, h) - self.border_width) / 2, 0.0)
        start, end = slice_angles(description.values)[index]
        return SliceGeometry(
            start_angle=start,
            end_angle=end,
            outer_radius=outer,
            inner_radius=outer * self.cutout,
            center_x=left + w / 2,
            center_y=top + h / 2,
        )

    # -- Drawing ---------------------------------------------------------

    def draw_background(self, color: str) -> None:
        self.ax.add_patch(Rectangle(
            (0, 0), self.width, self.height,
            facecolor=color, edgecolor="none", zorder=0,
        ))

    def draw_slices(self, description: ChartDescription) -> None:
        for i in range(description.slice_count):
            geo = self.compute_slice_geometry(description, i)
            if geo.sweep == 0:
                continue
            ring = geo.outer_radius - geo.inner_radius if geo.inner_radius > 0 else None
            self.ax.add_patch(Wedge(
                (geo.center_x, geo.center_y),
                geo.outer_radius,
                math.degrees(geo.start_angle),
                math.degrees(geo.end_angle),
                width=ring,
                facecolor=description.fill_colors[i].to_mpl(),
                edgecolor=description.stroke_colors[i].to_mpl(),
                linewidth=self.border_width,
                zorder=1,
            ))

    def draw_text(self, placement: LabelPlacement) -> None:
        self.ax.text(
            placement.x, placement.y, placement.text,
            ha="center", va="center",
            fontsize=placement.font_size_px,
            fontweight=LABEL_FONT_WEIGHT,
            family=LABEL_FONT_FAMILY,
            color=LABEL_COLOR,
            zorder=2,
        )

    def draw_title(self, text: str) -> None:
        self.ax.text(
            self.width / 2, TITLE_PADDING_PX, text,
            ha="center", va="top",
            fontsize=TITLE_FONT_SIZE_PX,
            fontweight="bold",
            color=TITLE_COLOR,
            zorder=2,
        )

    def to_raster_buffer(self) -> RenderedImage:
        buf = io.BytesIO()
        with rc_context(self._rc):
            self.figure.savefig(buf, format="png", dpi=DPI, transparent=False)
        return RenderedImage(data=buf.getvalue(), width=self.width, height=self.height)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

class CanvasFactory:
    """Creates one ``MatplotlibCanvas`` per chart with shared settings.

    Build it once at startup and pass it to the pipeline; it carries no
    per-row state, so nothing needs resetting between rows.
    """

    def __init__(
        self,
        width: int = 600,
        height: int = 600,
        *,
        border_width: float = 1.0,
        cutout: float = 0.0,
        title_band: bool = False,
        rc: dict[str, Any] | None = None,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"canvas size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.border_width = border_width
        self.cutout = cutout
        self.title_band = title_band
        self.rc = {**_RC_OVERRIDES, **(rc or {})}
        logger.debug("Canvas factory ready: %dx%d px", width, height)

    @classmethod
    def from_settings(cls, settings: Any) -> "CanvasFactory":
        return cls(
            settings.width,
            settings.height,
            border_width=settings.border_width,
            cutout=settings.cutout,
            title_band=settings.show_title,
        )

    def new_canvas(self) -> MatplotlibCanvas:
        return MatplotlibCanvas(
            self.width,
            self.height,
            border_width=self.border_width,
            cutout=self.cutout,
            title_band=self.title_band,
            rc=self.rc,
        )
