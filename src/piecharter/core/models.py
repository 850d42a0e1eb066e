"""Pydantic models for the row → chart → image pipeline.

These models form the intermediate representation between the row
validator, the chart spec builder, the label layout engine and the
raster backend. Every stage consumes one of them and produces the next.
"""

from __future__ import annotations

import math
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Upper bound on slices per chart; the palette has exactly this many entries.
MAX_SLICES = 5


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class RowStatus(str, Enum):
    """Outcome of processing a single input row."""
    WRITTEN = "written"
    MALFORMED = "malformed"
    RENDER_FAILED = "render_failed"
    SINK_FAILED = "sink_failed"


# ---------------------------------------------------------------------------
# Colors & palette
# ---------------------------------------------------------------------------

class RGBA(BaseModel):
    """An sRGB color with 0-255 channels and a 0-1 alpha."""
    model_config = ConfigDict(frozen=True)

    r: int = Field(ge=0, le=255)
    g: int = Field(ge=0, le=255)
    b: int = Field(ge=0, le=255)
    a: float = Field(default=1.0, ge=0.0, le=1.0)

    def to_css(self) -> str:
        """Render as a CSS ``rgba(...)`` string."""
        alpha = int(self.a) if float(self.a).is_integer() else self.a
        return f"rgba({self.r}, {self.g}, {self.b}, {alpha})"

    def to_mpl(self) -> tuple[float, float, float, float]:
        """Render as a matplotlib RGBA tuple (all channels 0-1)."""
        return (self.r / 255, self.g / 255, self.b / 255, self.a)


class PaletteEntry(BaseModel):
    """One slot of the slice palette."""
    model_config = ConfigDict(frozen=True)

    label: str
    fill: RGBA
    stroke: RGBA


# ---------------------------------------------------------------------------
# Row → sample
# ---------------------------------------------------------------------------

class Sample(BaseModel):
    """A validated row: an identifier plus 1..5 finite values in column order."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    values: tuple[float, ...] = Field(min_length=1, max_length=MAX_SLICES)

    @field_validator("values")
    @classmethod
    def _finite(cls, values: tuple[float, ...]) -> tuple[float, ...]:
        if not all(math.isfinite(v) for v in values):
            raise ValueError("sample values must be finite numbers")
        return values


class InvalidRow(BaseModel):
    """A rejected row, kept with its original record for diagnostics."""
    reason: str
    record: dict[str, Any] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Chart description
# ---------------------------------------------------------------------------

class ChartDescription(BaseModel):
    """Declarative description of one pie chart.

    Slice *i* is ``labels[i]`` / ``values[i]`` / ``fill_colors[i]`` /
    ``stroke_colors[i]``; the four sequences always have the same length.
    """
    model_config = ConfigDict(frozen=True)

    labels: tuple[str, ...]
    values: tuple[float, ...]
    fill_colors: tuple[RGBA, ...]
    stroke_colors: tuple[RGBA, ...]
    title: str = ""

    @model_validator(mode="after")
    def _parallel(self) -> "ChartDescription":
        n = len(self.values)
        if not (len(self.labels) == len(self.fill_colors) == len(self.stroke_colors) == n):
            raise ValueError(
                "labels, values, fill_colors and stroke_colors must have equal length"
            )
        return self

    @property
    def slice_count(self) -> int:
        return len(self.values)


# ---------------------------------------------------------------------------
# Geometry & layout
# ---------------------------------------------------------------------------

class SliceGeometry(BaseModel):
    """Rendered geometry of one wedge, in canvas pixel coordinates.

    Angles are radians with y growing downward, so ``-pi/2`` points at
    12 o'clock and increasing angles sweep clockwise on screen.
    """
    model_config = ConfigDict(frozen=True)

    start_angle: float
    end_angle: float
    outer_radius: float = Field(gt=0)
    center_x: float
    center_y: float
    inner_radius: float = Field(default=0.0, ge=0)

    @property
    def sweep(self) -> float:
        return abs(self.end_angle - self.start_angle)


class LabelPlacement(BaseModel):
    """Where and how large to draw one slice label."""
    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    text: str
    font_size_px: int = Field(ge=1)


class RenderedImage(BaseModel):
    """An encoded raster image (PNG bytes) and its pixel size."""
    model_config = ConfigDict(frozen=True)

    data: bytes
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    format: str = "png"


# ---------------------------------------------------------------------------
# Pipeline result
# ---------------------------------------------------------------------------

class RowResult(BaseModel):
    """Result of processing one row."""
    row_id: str = ""
    status: RowStatus
    output_path: Optional[Path] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == RowStatus.WRITTEN


class BatchResult(BaseModel):
    """Aggregate result of one batch run."""
    source: str = ""
    results: list[RowResult] = Field(default_factory=list)

    @property
    def succeeded(self) -> list[RowResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> list[RowResult]:
        return [r for r in self.results if not r.success]

    @property
    def written_paths(self) -> list[Path]:
        return [r.output_path for r in self.succeeded if r.output_path is not None]

    def count(self, status: RowStatus) -> int:
        return sum(1 for r in self.results if r.status == status)
