"""Build a ``ChartDescription`` from a validated ``Sample``."""

from __future__ import annotations

from ..core.models import ChartDescription, Sample
from .palette import palette_for

TITLE_TEMPLATE = "Chart for {id}"


class ChartSpecBuilder:
    """Map a sample onto the slice palette.

    Assignment is positional: value *i* gets palette entry *i*. Values
    are passed through untouched; the backend derives the arc angles
    from the raw magnitudes.
    """

    def __init__(self, title_template: str = TITLE_TEMPLATE) -> None:
        self.title_template = title_template

    def build(self, sample: Sample) -> ChartDescription:
        entries = palette_for(len(sample.values))
        return ChartDescription(
            labels=tuple(e.label for e in entries),
            values=tuple(sample.values),
            fill_colors=tuple(e.fill for e in entries),
            stroke_colors=tuple(e.stroke for e in entries),
            title=self.title_template.format(id=sample.id),
        )


def build(sample: Sample) -> ChartDescription:
    """Build a description with the default title template."""
    return ChartSpecBuilder().build(sample)
