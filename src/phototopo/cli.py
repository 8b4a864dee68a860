"""CLI for phototopo."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from phototopo import __version__
from phototopo.errors import TopoError
from phototopo.log import configure_logging
from phototopo.parser import label_from_data, load_document
from phototopo.render import render_svg
from phototopo.themes import THEMES
from phototopo.topo import Topo


def _load(input_file: Path, **overrides: Any) -> Topo:
    options = load_document(input_file)
    options["get_label"] = label_from_data
    options.update(overrides)
    return Topo(options)


@click.group()
@click.version_option(version=__version__)
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
              default="WARNING", help="Log level (default: WARNING)")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines")
def cli(log_level: str, json_logs: bool) -> None:
    """phototopo: Draw climbing route topos over photos."""
    configure_logging(log_level, json=json_logs)


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Output SVG file path. Defaults to <input>.svg")
@click.option("--theme", type=click.Choice(list(THEMES.keys())), default="classic",
              help="Visual theme (default: classic)")
@click.option("--png", is_flag=True, help="Also write a PNG next to the SVG")
@click.option("--editable", is_flag=True, help="Draw edit handles")
@click.option("--separate-routes", is_flag=True,
              help="Fan out routes that share points instead of overlapping them")
def render(
    input_file: Path,
    output: Path | None,
    theme: str,
    png: bool,
    editable: bool,
    separate_routes: bool,
) -> None:
    """Render a topo document to SVG."""
    try:
        topo = _load(input_file, editable=editable, separate_routes=separate_routes)
    except TopoError as e:
        click.echo(f"Load error: {e}", err=True)
        raise SystemExit(1)

    svg = render_svg(topo, THEMES[theme])

    if output is None:
        output = input_file.with_suffix(".svg")
    output.write_text(svg)

    if png:
        import cairosvg

        png_path = output.with_suffix(".png")
        cairosvg.svg2png(bytestring=svg.encode(), write_to=str(png_path))
        click.echo(f"Wrote {png_path}")

    routes = list(topo.iter_routes())
    areas = list(topo.areas())
    click.echo(f"Rendered {len(routes)} routes, "
               f"{len(areas)} areas, "
               f"{len(topo.point_groups)} point groups -> {output}")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
def validate(input_file: Path) -> None:
    """Validate a topo document."""
    try:
        topo = _load(input_file, strict_ids=True)
    except TopoError as e:
        click.echo(f"Validation error: {e}", err=True)
        raise SystemExit(1)

    errors = []
    for route in topo.iter_routes():
        if not route.points:
            errors.append(f"Route '{route.id}' has no points")
    for area in topo.areas():
        if len(area.vertices) < 3:
            errors.append(f"Area '{area.id}' has {len(area.vertices)} vertices, "
                          f"needs at least 3")

    if errors:
        click.echo("Validation errors:", err=True)
        for err in errors:
            click.echo(f"  - {err}", err=True)
        raise SystemExit(1)

    points = sum(len(r.points) for r in topo.iter_routes())
    click.echo(f"Valid: {len(list(topo.iter_routes()))} routes, "
               f"{points} points, "
               f"{len(list(topo.areas()))} areas")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
def info(input_file: Path) -> None:
    """Show information about a topo document."""
    try:
        topo = _load(input_file)
    except TopoError as e:
        click.echo(f"Load error: {e}", err=True)
        raise SystemExit(1)

    click.echo(f"Image: {topo.options.image_url}")
    click.echo(f"Size: {topo.shown_width:g} x {topo.shown_height:g}")
    routes = list(topo.iter_routes())
    click.echo(f"Routes: {len(routes)}")
    for route in routes:
        label = route.label.text or "(no label)"
        click.echo(f"  [{route.order}] {route.id} {label}: {len(route.points)} points")
    areas = list(topo.areas())
    click.echo(f"Areas: {len(areas)}")
    for area in areas:
        text = area.label.text or "(no label)"
        click.echo(f"  {area.id} {text}: {len(area.vertices)} vertices")
    click.echo(f"Point groups: {len(topo.point_groups)}")
    for warning in topo.load_warnings:
        click.echo(f"Warning: {warning}")
