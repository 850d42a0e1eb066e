"""Chart renderer: one full draw pass for one chart description.

Order of operations:

1. optional background fill,
2. slice wedges,
3. for every slice: geometry → label layout → text,
4. optional title,
5. encode to PNG.

Any exception raised by the drawing context is re-raised as
``RenderError`` carrying the chart title, so the pipeline can report it
against the row and move on.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from ..core.errors import RenderError
from ..core.models import ChartDescription, LabelPlacement, RenderedImage, SliceGeometry
from ..generators.label_layout import MAX_FONT_SIZE_PX, layout_slice
from .backend import CanvasFactory, RasterBackend

logger = logging.getLogger(__name__)

LayoutFn = Callable[..., Optional[LabelPlacement]]


class ChartRenderer:
    """Render ``ChartDescription`` objects with canvases from a factory."""

    def __init__(
        self,
        factory: CanvasFactory | None = None,
        *,
        background: str | None = "white",
        show_title: bool = False,
        max_font_px: int = MAX_FONT_SIZE_PX,
        layout: LayoutFn = layout_slice,
    ) -> None:
        self.factory = factory or CanvasFactory(title_band=show_title)
        self.background = background
        self.show_title = show_title
        self.max_font_px = max_font_px
        self.layout = layout

    def placements(
        self, canvas: RasterBackend, description: ChartDescription,
    ) -> list[LabelPlacement]:
        """Lay out every drawable label of *description* on *canvas*."""
        out: list[LabelPlacement] = []
        for i, value in enumerate(description.values):
            geometry: SliceGeometry = canvas.compute_slice_geometry(description, i)
            placement = self.layout(geometry, value, max_size=self.max_font_px)
            if placement is not None:
                out.append(placement)
        return out

    def render(self, description: ChartDescription) -> RenderedImage:
        try:
            canvas = self.factory.new_canvas()
            if self.background:
                canvas.draw_background(self.background)
            canvas.draw_slices(description)
            for placement in self.placements(canvas, description):
                canvas.draw_text(placement)
            if self.show_title and description.title:
                canvas.draw_title(description.title)
            image = canvas.to_raster_buffer()
        except Exception as exc:
            raise RenderError(
                f"{type(exc).__name__}: {exc}",
                context={"title": description.title},
            ) from exc

        logger.debug(
            "Rendered %r: %d slice(s), %d bytes",
            description.title, description.slice_count, len(image.data),
        )
        return image
