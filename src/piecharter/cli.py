"""piecharter CLI: render one labelled pie chart per CSV row."""

from __future__ import annotations

import logging
import math

import click
from rich.console import Console

from . import __version__
from .config import load_settings
from .core.errors import SettingsError, SourceError
from .core.models import SliceGeometry
from .generators.label_layout import MAX_FONT_SIZE_PX, fit_font_size, format_label, layout_slice
from .generators.palette import SLICE_PALETTE
from .pipeline import Pipeline

console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )


@click.group()
@click.version_option(version=__version__, prog_name="piecharter")
def main():
    """piecharter: turn tabular rows into labelled pie-chart images."""
    pass


@main.command()
@click.argument("source", type=click.Path(dir_okay=False))
@click.option(
    "-o", "--output",
    "output_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Output directory (default: ./chart-images).",
)
@click.option(
    "-c", "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Settings file (.json or .toml).",
)
@click.option("--width", type=int, default=None, help="Canvas width in pixels (default: 600).")
@click.option("--height", type=int, default=None, help="Canvas height in pixels (default: 600).")
@click.option("--background", default=None, help="Background fill color (default: white).")
@click.option(
    "--no-background",
    is_flag=True,
    default=False,
    help="Leave the canvas transparent.",
)
@click.option(
    "--cutout",
    type=float,
    default=None,
    help="Donut hole as a fraction of the radius, 0 for a full pie.",
)
@click.option("--show-title", is_flag=True, default=False, help="Draw the chart title.")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Debug logging.")
def render(
    source: str,
    output_dir: str | None,
    config_path: str | None,
    width: int | None,
    height: int | None,
    background: str | None,
    no_background: bool,
    cutout: float | None,
    show_title: bool,
    verbose: bool,
):
    """Render one PNG per row of the CSV file SOURCE.

    Rows with no identifier or without any numeric value are skipped and
    logged; a failing row never stops the batch.
    """
    _setup_logging(verbose)

    try:
        settings = load_settings(
            config_path,
            width=width,
            height=height,
            background="" if no_background else background,
            cutout=cutout,
            show_title=show_title or None,
            output_dir=output_dir,
        )
    except SettingsError as exc:
        console.print(f"[bold red]❌ {exc}[/]")
        raise SystemExit(2)

    pipeline = Pipeline(settings)
    try:
        result = pipeline.run(source)
    except SourceError as exc:
        console.print(f"[bold red]❌ {exc}[/]")
        raise SystemExit(2)

    if not result.succeeded:
        raise SystemExit(1)


@main.command()
def palette():
    """List the slice palette."""
    from rich.table import Table as RichTable

    table = RichTable(title="Slice Palette", show_lines=False)
    table.add_column("#", style="dim")
    table.add_column("Label", style="bold cyan")
    table.add_column("Fill")
    table.add_column("Stroke")

    for i, entry in enumerate(SLICE_PALETTE):
        f, s = entry.fill, entry.stroke
        table.add_row(
            str(i),
            entry.label,
            f"[rgb({f.r},{f.g},{f.b})]██[/] {f.to_css()}",
            f"[rgb({s.r},{s.g},{s.b})]██[/] {s.to_css()}",
        )

    console.print(table)


@main.command()
@click.option("--radius", type=float, required=True, help="Outer radius in pixels.")
@click.option("--start", type=float, default=0.0, help="Start angle in degrees.")
@click.option("--end", type=float, required=True, help="End angle in degrees.")
@click.option("--value", type=float, required=True, help="Slice value shown in the label.")
@click.option("--max-size", type=int, default=MAX_FONT_SIZE_PX, show_default=True)
def layout(radius: float, start: float, end: float, value: float, max_size: int):
    """Show the label placement for a single slice centred at (0, 0)."""
    from rich.tree import Tree

    if radius <= 0:
        raise click.BadParameter("must be positive", param_hint="--radius")

    geometry = SliceGeometry(
        start_angle=math.radians(start),
        end_angle=math.radians(end),
        outer_radius=radius,
        center_x=0.0,
        center_y=0.0,
    )
    text = format_label(value)
    placement = layout_slice(geometry, value, max_size=max_size)

    tree = Tree(f"[bold]{text!r}[/bold]")
    tree.add(f"[dim]Sweep:[/dim] {math.degrees(geometry.sweep):.2f}°")
    tree.add(f"[dim]Arc length:[/dim] {radius / 2 * geometry.sweep:.2f} px")
    tree.add(f"[dim]Height budget:[/dim] {radius * 0.4:.2f} px")
    tree.add(
        f"[dim]Font size:[/dim] "
        f"{fit_font_size(radius, geometry.sweep, text, max_size=max_size)} px"
    )
    if placement is None:
        tree.add("[yellow]Label skipped (below 1 px)[/]")
    else:
        tree.add(f"[dim]Anchor:[/dim] ({placement.x:.2f}, {placement.y:.2f})")

    console.print(tree)


if __name__ == "__main__":
    main()
