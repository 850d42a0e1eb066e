"""Per-slice label layout: anchor point and fitted font size.

The layout engine is a pure function of a slice's rendered geometry and
the value it represents. It never touches the drawing context; the
backend calls it once per slice and draws whatever it returns.

Font-size heuristic
-------------------
For a label of ``n`` characters in a wedge of sweep ``angle`` and outer
radius ``R``::

    arc_length       = (R / 2) * angle          # room along the mid-radius arc
    available_height = R * 0.4                  # radial room
    size_by_width    = arc_length / (n * 0.6)   # 0.6 em average glyph width
    font_size_px     = floor(min(size_by_width, available_height, 80))

The label itself is the slice value followed by ``%``, padded with one
space on each side so glyph edges are not clipped against the bounds.
"""

from __future__ import annotations

import logging
import math
from decimal import Decimal

from ..core.models import LabelPlacement, SliceGeometry

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MAX_FONT_SIZE_PX = 80
GLYPH_WIDTH_EM = 0.6
HEIGHT_RATIO = 0.4

# Text style handed to the backend with every placement
LABEL_FONT_WEIGHT = "bold"
LABEL_FONT_FAMILY = "sans-serif"
LABEL_COLOR = "white"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def format_number(value: float) -> str:
    """Shortest round-trip text for *value*, laid out the way browsers print numbers.

    Plain notation for magnitudes in ``[1e-7, 1e21)``, exponent notation
    (``1e-7``, ``1.5e+21``) outside it. Integral values drop ``.0`` and
    large ones are padded with zeros past their significant digits
    (``2**67`` → ``147573952589676410000``).
    """
    value = float(value)
    if value == 0:
        return "0"
    if not math.isfinite(value):
        return "NaN" if math.isnan(value) else ("Infinity" if value > 0 else "-Infinity")

    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(map(str, digit_tuple))
    k = len(digits)
    n = k + exponent  # decimal point position relative to the digit string

    if k <= n <= 21:
        body = digits + "0" * (n - k)
    elif 0 < n <= 21:
        body = f"{digits[:n]}.{digits[n:]}"
    elif -6 < n <= 0:
        body = "0." + "0" * -n + digits
    else:
        mantissa = digits if k == 1 else f"{digits[0]}.{digits[1:]}"
        body = f"{mantissa}e{'+' if n - 1 >= 0 else '-'}{abs(n - 1)}"
    return sign + body


def format_label(value: float) -> str:
    """``42`` → ``" 42% "``."""
    return f" {format_number(value)}% "


def anchor_point(geometry: SliceGeometry) -> tuple[float, float]:
    """Midpoint of the wedge, halfway between inner and outer radius."""
    mid_angle = (geometry.start_angle + geometry.end_angle) / 2
    half_radius = (geometry.inner_radius + geometry.outer_radius) / 2
    return (
        geometry.center_x + math.cos(mid_angle) * half_radius,
        geometry.center_y + math.sin(mid_angle) * half_radius,
    )


def fit_font_size(
    outer_radius: float,
    angle: float,
    text: str,
    *,
    max_size: int = MAX_FONT_SIZE_PX,
) -> int:
    """Largest font size (px) that keeps *text* inside the wedge.

    Never raises: a zero sweep gives 0, and empty text falls back to the
    height budget.
    """
    angle = abs(angle)
    mid_radius = outer_radius / 2
    arc_length = mid_radius * angle
    available_height = outer_radius * HEIGHT_RATIO

    if len(text) == 0:
        size_by_width = available_height
    else:
        size_by_width = arc_length / (len(text) * GLYPH_WIDTH_EM)

    return math.floor(min(size_by_width, available_height, max_size))


# ---------------------------------------------------------------------------
# Layout engine
# ---------------------------------------------------------------------------

def layout_slice(
    geometry: SliceGeometry,
    value: float,
    *,
    max_size: int = MAX_FONT_SIZE_PX,
) -> LabelPlacement | None:
    """Compute the label placement for one slice.

    Returns ``None`` when the fitted size is below one pixel (zero-sweep
    or extremely crowded slices), since such a label cannot be drawn.
    """
    text = format_label(value)
    size = fit_font_size(geometry.outer_radius, geometry.sweep, text, max_size=max_size)
    if size < 1:
        logger.debug("Skipping label %r: fitted size %d px", text, size)
        return None

    x, y = anchor_point(geometry)
    return LabelPlacement(x=x, y=y, text=text, font_size_px=size)
