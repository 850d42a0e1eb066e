"""The fixed slice palette.

Slices are styled by position: slice *i* always takes palette entry *i*,
whatever its value. There is no theme registry; the palette is a
process-wide constant.
"""

from __future__ import annotations

from ..core.models import PaletteEntry, RGBA


def _entry(label: str, r: int, g: int, b: int) -> PaletteEntry:
    return PaletteEntry(
        label=label,
        fill=RGBA(r=r, g=g, b=b, a=0.8),
        stroke=RGBA(r=r, g=g, b=b, a=1.0),
    )


SLICE_PALETTE: tuple[PaletteEntry, ...] = (
    _entry("Field 1", 255, 99, 132),    # Pink-red
    _entry("Field 2", 54, 162, 235),    # Blue
    _entry("Field 3", 255, 206, 86),    # Yellow
    _entry("Field 4", 75, 192, 192),    # Teal
    _entry("Field 5", 153, 102, 255),   # Purple
)


def palette_for(count: int) -> tuple[PaletteEntry, ...]:
    """Return the first *count* palette entries, in palette order."""
    if not 0 <= count <= len(SLICE_PALETTE):
        raise ValueError(
            f"palette holds {len(SLICE_PALETTE)} entries, {count} requested"
        )
    return SLICE_PALETTE[:count]
