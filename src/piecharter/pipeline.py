"""Orchestration pipeline that ties reader, validator, builder, renderer and sink together."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Mapping, Optional

from rich.console import Console
from rich.markup import escape

from .config import RenderSettings
from .core.errors import RenderError, SinkError
from .core.models import BatchResult, InvalidRow, RowResult, RowStatus
from .core.reader import read_rows
from .core.sink import ImageSink
from .core.validator import RowValidator
from .generators.spec_builder import ChartSpecBuilder
from .render.backend import CanvasFactory
from .render.renderer import ChartRenderer

console = Console()
logger = logging.getLogger(__name__)


class Pipeline:
    """End-to-end CSV → one pie chart PNG per row.

    Usage::

        pipeline = Pipeline()
        result = pipeline.run("data/charts.csv")
        print(result.written_paths)

    Rows are processed strictly one after another: each row is
    validated, built, rendered and written before the next one starts.
    The canvas factory is created once and shared by every row.
    """

    def __init__(
        self,
        settings: RenderSettings | None = None,
        *,
        canvas_factory: CanvasFactory | None = None,
        sink: ImageSink | None = None,
    ) -> None:
        self.settings = settings or RenderSettings()
        self.validator = RowValidator(self.settings.row_schema)
        self.builder = ChartSpecBuilder()
        self.renderer = ChartRenderer(
            canvas_factory or CanvasFactory.from_settings(self.settings),
            background=self.settings.background,
            show_title=self.settings.show_title,
            max_font_px=self.settings.max_font_px,
        )
        self.sink = sink or ImageSink(self.settings.output_dir)

    # -- Single row ----------------------------------------------------------

    def process_row(self, record: Mapping[str, Optional[str]]) -> RowResult:
        """Run one record through the whole pipeline; never raises for row errors."""
        outcome = self.validator.validate(record)
        if isinstance(outcome, InvalidRow):
            logger.warning("Invalid row data (%s): %s", outcome.reason, outcome.record)
            return RowResult(
                row_id=str(record.get(self.settings.id_column) or ""),
                status=RowStatus.MALFORMED,
                error=outcome.reason,
            )

        sample = outcome
        description = self.builder.build(sample)

        try:
            image = self.renderer.render(description)
        except RenderError as exc:
            logger.error("Error processing %s: %s", sample.id, exc)
            return RowResult(row_id=sample.id, status=RowStatus.RENDER_FAILED, error=str(exc))

        try:
            path = self.sink.write(sample.id, image)
        except SinkError as exc:
            logger.error("Error processing %s: %s", sample.id, exc)
            return RowResult(row_id=sample.id, status=RowStatus.SINK_FAILED, error=str(exc))

        return RowResult(row_id=sample.id, status=RowStatus.WRITTEN, output_path=path)

    # -- Batch ---------------------------------------------------------------

    def process_rows(
        self, records: Iterable[Mapping[str, Optional[str]]], *, source: str = "",
    ) -> BatchResult:
        result = BatchResult(source=source)
        for record in records:
            row = self.process_row(record)
            result.results.append(row)
            if row.success:
                console.print(f"[green]✓[/] Saved {row.output_path}")
            elif row.status == RowStatus.MALFORMED:
                console.print(f"[yellow]⚠  Skipped row:[/] {escape(row.error or '')}")
            else:
                console.print(f"[red]✗[/] {escape(row.row_id)}: {escape(row.error or '')}")
        return result

    def run(
        self,
        source: str | Path,
        *,
        output_dir: str | Path | None = None,
    ) -> BatchResult:
        """Read *source* and render every row.

        Parameters
        ----------
        source
            Path to the CSV file (header row required).
        output_dir
            Overrides the sink's output directory for this run.

        Raises ``SourceError`` when *source* cannot be read; every other
        failure is recorded per row.
        """
        if output_dir is not None:
            self.sink = ImageSink(output_dir)

        console.print(f"\n[bold blue]📥 Reading rows from:[/] {source}")
        records = read_rows(source)
        console.print(f"[green]✓[/] {len(records)} row(s)")

        console.print(f"[bold blue]📊 Rendering charts...[/] [dim]→ {self.sink.output_dir}[/]")
        result = self.process_rows(records, source=str(source))

        written = len(result.succeeded)
        console.print(
            f"\n[bold green]🎉 Done![/] {written}/{len(result.results)} charts written "
            f"→ {self.sink.output_dir}\n"
        )
        return result
