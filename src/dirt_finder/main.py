"""CLI entrypoint for dirt-finder."""

from __future__ import annotations

import sys

import typer
from rich import print
from rich.console import Console

from dirt_finder.config import settings
from dirt_finder.engine import SearchEngine
from dirt_finder.orientation import orientation as block_orientation
from dirt_finder.request import SearchRequest, build_search_request
from dirt_finder.sink import StreamMatchSink
from dirt_finder.telemetry import configure_logging

app = typer.Typer(help="Find block positions whose top-face rotations match an observed pattern")

_stderr = Console(stderr=True)

USAGE = """\
dirt-finder search -f [facing:north,east,south,west] -r [rotation:comma separated list of 0,1,2,3] \
-x [minX] -X [maxX] -y [minY] -Y [maxY] -z [minZ] -Z [maxZ]
dirt-finder search -f [facing] -c '[{dx:0,dy:0,dz:0,r:1},...]' -x [minX] -X [maxX] -y [minY] -Y [maxY] -z [minZ] -Z [maxZ]
ROTATION
    rotation = 0   rotation = 1   rotation = 2   rotation = 3
    _____________  _____________  _____________  _____________
    |         ==|  |           |  |           |  | I         |
    |       ==  |  |           |  |           |  |  I        |
    |           |  |           |  |           |  |           |
    |           |  |        I  |  |  ==       |  |           |
    |___________|  |_________I_|  |==_________|  |___________|"""


def _fail(message: str) -> None:
    _stderr.print(f"Error: {message}", markup=False, highlight=False)
    _stderr.print(USAGE, markup=False, highlight=False)
    raise typer.Exit(code=1)


def _build_engine(request: SearchRequest, backend: str | None) -> SearchEngine:
    return SearchEngine(
        workers=request.workers or settings.workers,
        backend=backend or settings.backend,
        batch_size=settings.batch_size,
        start_method=settings.start_method,
    )


@app.command()
def search(
    facing: str = typer.Option(None, "-f", "--facing", help="north/east/south/west"),
    direction: str = typer.Option("y", "-d", "--direction", help="Axis the rotation list steps along: x/y/z"),
    rotations: str = typer.Option(None, "-r", "--rotations", help="Comma separated rotations, e.g. 0,3,1"),
    constraints: str = typer.Option(None, "-c", "--constraints", help="Constraint objects {dx,dy,dz,r}"),
    min_x: str = typer.Option(None, "-x", "--min-x", help="Minimum X (inclusive)"),
    max_x: str = typer.Option(None, "-X", "--max-x", help="Maximum X (inclusive)"),
    min_y: str = typer.Option(None, "-y", "--min-y", help="Minimum Y (inclusive)"),
    max_y: str = typer.Option(None, "-Y", "--max-y", help="Maximum Y (inclusive)"),
    min_z: str = typer.Option(None, "-z", "--min-z", help="Minimum Z (inclusive)"),
    max_z: str = typer.Option(None, "-Z", "--max-z", help="Maximum Z (inclusive)"),
    workers: str = typer.Option(None, "-w", "--workers", help="Worker count (default: CPU count)"),
    backend: str = typer.Option(None, "--backend", help="process/thread"),
) -> None:
    """Print every [x, y, z] in the box whose block rotations match the pattern."""
    configure_logging(settings.log_level)
    try:
        request = build_search_request(
            facing=facing,
            direction=direction,
            rotations=rotations,
            constraints=constraints,
            min_x=min_x,
            max_x=max_x,
            min_y=min_y,
            max_y=max_y,
            min_z=min_z,
            max_z=max_z,
            workers=workers,
        )
        engine = _build_engine(request, backend)
    except ValueError as exc:
        _fail(str(exc))

    engine.run(request.volume, request.normalized_predicate, StreamMatchSink(sys.stdout))


@app.command()
def orientation(
    x: int = typer.Option(..., "--x", help="Block X"),
    y: int = typer.Option(..., "--y", help="Block Y"),
    z: int = typer.Option(..., "--z", help="Block Z"),
) -> None:
    """Print the rotation (0-3) of a single block."""
    typer.echo(block_orientation(x, y, z))


@app.command("settings")
def show_settings() -> None:
    """Show runtime configuration."""
    print(
        {
            "app_name": settings.app_name,
            "log_level": settings.log_level,
            "workers": settings.workers,
            "backend": settings.backend,
            "batch_size": settings.batch_size,
            "start_method": settings.start_method,
        }
    )


if __name__ == "__main__":
    app()
