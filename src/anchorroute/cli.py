"""CLI for anchorroute."""

import logging
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .board import Board
from .debug import render_routes_png
from .models import ResolvedEndpoint, RouteResult
from .parser import SceneError, parse_scene
from .runtime import RouteCache, compute_board_routes
from .tracer import RouteTrace


def _load_board(input_file: Path) -> Board:
    try:
        return parse_scene(input_file.read_text()).to_board()
    except SceneError as e:
        click.echo(f"Parse error: {e}", err=True)
        raise SystemExit(1)


def _coordinate(value: float) -> str:
    rounded = round(value, 1)
    return str(int(rounded)) if rounded == int(rounded) else str(rounded)


def _endpoint_label(endpoint: ResolvedEndpoint) -> str:
    if endpoint.connected:
        return f"{endpoint.bound_object_id}:{endpoint.anchor.value}"
    return f"({_coordinate(endpoint.point.x)},{_coordinate(endpoint.point.y)})"


def format_route(connector_id: str, route: RouteResult) -> str:
    """One-line description of a route: endpoints, bends and points."""
    points = " ".join(
        f"{_coordinate(p.x)},{_coordinate(p.y)}" for p in route.geometry.points
    )
    return (
        f"{connector_id}: {_endpoint_label(route.from_endpoint)} -> "
        f"{_endpoint_label(route.to_endpoint)} "
        f"bends={route.geometry.bends} [{points}]"
    )


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Log routing passes to stderr")
def cli(verbose: bool) -> None:
    """anchorroute: Route connectors between shapes on a whiteboard scene."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("--trace", "trace_id", default=None,
              help="Print the candidate evaluation trace for this connector")
def route(input_file: Path, trace_id: Optional[str]) -> None:
    """Route every connector in a scene and print the results."""
    board = _load_board(input_file)

    traces = {}
    if trace_id is not None:
        if trace_id not in board.connectors:
            click.echo(f"Unknown connector '{trace_id}'", err=True)
            raise SystemExit(1)
        traces[trace_id] = RouteTrace(connector_id=trace_id)

    routing = compute_board_routes(
        board, RouteCache(), budget=len(board.connectors), traces=traces
    )

    for connector_id in board.connectors:
        result = routing.routes.get(connector_id)
        if result is None:
            click.echo(f"{connector_id}: no route")
            continue
        click.echo(format_route(connector_id, result))

    for trace in traces.values():
        click.echo("")
        click.echo(trace.dump())


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
def validate(input_file: Path) -> None:
    """Validate a scene file."""
    board = _load_board(input_file)

    free_ends = 0
    for connector in board.connectors.values():
        for spec in (connector.source, connector.target):
            if spec.object_id is None:
                free_ends += 1

    click.echo(f"Valid: {len(board.shapes)} shapes, "
               f"{len(board.connectors)} connectors, "
               f"{free_ends} free endpoints")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", type=click.Path(path_type=Path), default=None,
              help="Output PNG file path. Defaults to <input>.png")
@click.option("--scale", type=int, default=2, help="Pixels per board unit (default: 2)")
@click.option("--no-obstacles", is_flag=True, help="Do not draw obstacle boxes")
def preview(
    input_file: Path, output: Optional[Path], scale: int, no_obstacles: bool
) -> None:
    """Render a scene and its routes to a PNG for inspection."""
    board = _load_board(input_file)
    routing = compute_board_routes(board, RouteCache(), budget=len(board.connectors))

    if output is None:
        output = input_file.with_suffix(".png")

    render_routes_png(
        board,
        routing.routes,
        str(output),
        scale=scale,
        show_obstacles=not no_obstacles,
    )
    click.echo(f"Rendered {len(board.shapes)} shapes, "
               f"{len(routing.routes)} routes -> {output}")


if __name__ == "__main__":
    cli()
