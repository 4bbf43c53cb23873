"""
Command line interface for pvcfit.

Commands:
- lookup: Show one pipe spec and its derived diameters
- list: List the specs of a schedule
- build: Build a fitting and export it as a STEP file

Usage:
    pvcfit lookup --schedule 40 --dn DN20
    pvcfit list --schedule 80
    pvcfit build tee --schedule 40 --name 3/4 --end socket --end socket --end female-thread -o tee.step
    pvcfit build bushing --schedule 40 --name 2 --name2 1 -o bushing.step
"""

import inspect
from pathlib import Path

import cadquery as cq
import click

from .config import DEFAULT_CONFIG, GeometryConfig
from .endpoints import EndpointType
from .errors import PvcFitError
from .fittings import FITTING_BUILDERS, TWO_SPEC_KINDS
from .specs import PipeSpec, available_names, lookup_spec


@click.group()
@click.version_option(version="0.1.0")
def cli():
    """pvcfit - parametric PVC pipe fittings."""
    pass


def _format_spec(spec: PipeSpec) -> list[str]:
    return [
        f"Schedule:     {spec.schedule}",
        f"Name:         {spec.name}",
        f"DN:           {spec.dn}",
        f"OD:           {spec.od:.3f} mm",
        f"Wall:         {spec.wall:.3f} mm",
        f"ID:           {spec.id:.3f} mm",
        f"Socket ID:    {spec.socket_id:.3f} mm",
        f"Socket OD:    {spec.socket_od:.3f} mm",
        f"Thread len:   {spec.tl:.3f} mm",
        f"Thread pitch: {spec.pitch:.6f} mm",
    ]


@cli.command()
@click.option("--schedule", "-s", required=True, help="Pipe schedule (e.g. 40, 80, 120).")
@click.option("--name", "-n", default=None, help='Nominal size (e.g. "3/4").')
@click.option("--dn", default=None, help="Metric diameter name (e.g. DN20).")
@click.option("--od", type=float, default=None, help="Outside diameter in mm.")
@click.option("--wall", type=float, default=None, help="Wall thickness in mm.")
def lookup(schedule: str, name: str | None, dn: str | None, od: float | None, wall: float | None):
    """
    Look up exactly one pipe spec.

    Example:
        pvcfit lookup --schedule 40 --dn DN20
    """
    try:
        spec = lookup_spec(schedule, name=name, dn=dn, od=od, wall=wall)
    except PvcFitError as e:
        raise click.ClickException(str(e)) from None

    for line in _format_spec(spec):
        click.echo(line)


@cli.command(name="list")
@click.option("--schedule", "-s", required=True, help="Pipe schedule (e.g. 40, 80, 120).")
def list_specs(schedule: str):
    """List the pipe specs of a schedule."""
    try:
        names = available_names(schedule)
    except PvcFitError as e:
        raise click.ClickException(str(e)) from None

    click.echo(f"{'Name':<8} {'DN':<7} {'OD':>8} {'Wall':>7} {'ID':>8}")
    click.echo("-" * 42)
    for name in names:
        spec = lookup_spec(schedule, name=name)
        click.echo(f"{spec.name:<8} {spec.dn:<7} {spec.od:>8.2f} {spec.wall:>7.2f} {spec.id:>8.2f}")


@cli.command()
@click.argument("kind", type=click.Choice(sorted(FITTING_BUILDERS)))
@click.option("--schedule", "-s", required=True, help="Pipe schedule (e.g. 40, 80, 120).")
@click.option("--name", "-n", default=None, help='Nominal size (e.g. "3/4").')
@click.option("--dn", default=None, help="Metric diameter name (e.g. DN20).")
@click.option("--name2", default=None, help="Nominal size of the second spec (adapter, bushing).")
@click.option("--dn2", default=None, help="Diameter name of the second spec (adapter, bushing).")
@click.option(
    "--end", "-e", "ends",
    multiple=True,
    type=click.Choice([e.value for e in EndpointType]),
    help="Endpoint type, once per anchor in order A, B, C, ... (default: socket).",
)
@click.option("--length", "-l", type=float, default=None, help="Length in mm (pipe, nipple).")
@click.option("--angle", type=float, default=None, help="Angle in degrees (elbow, wye).")
@click.option(
    "--config", "-c", "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="YAML geometry configuration.",
)
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    required=True,
    help="Output STEP file path.",
)
def build(
    kind: str,
    schedule: str,
    name: str | None,
    dn: str | None,
    name2: str | None,
    dn2: str | None,
    ends: tuple[str, ...],
    length: float | None,
    angle: float | None,
    config_path: Path | None,
    output: Path,
):
    """
    Build a fitting and export it as a STEP file.

    Example:
        pvcfit build elbow --schedule 40 --name 1 --angle 45 -o elbow.step
    """
    builder = FITTING_BUILDERS[kind]
    params = inspect.signature(builder).parameters

    options = {}
    for option, value in (("length", length), ("angle", angle)):
        if value is None:
            continue
        if option not in params:
            raise click.UsageError(f"--{option} does not apply to a {kind}")
        options[option] = value

    try:
        config = GeometryConfig.from_yaml(config_path) if config_path else DEFAULT_CONFIG
        specs = [lookup_spec(schedule, name=name, dn=dn)]
        if kind in TWO_SPEC_KINDS:
            specs.append(lookup_spec(schedule, name=name2, dn=dn2))
        if kind == "pipe" and "length" not in options:
            raise click.UsageError("A pipe needs --length")
        fitting = builder(*specs, ends=list(ends) or None, config=config, **options)
    except ValueError as e:
        raise click.ClickException(str(e)) from None

    cq.exporters.export(fitting.shape, str(output))
    click.echo(f"{kind} ({', '.join(str(e) for e in fitting.ends)}) written to: {output}")
    for anchor in fitting.anchors.values():
        position = ", ".join(f"{c:.2f}" for c in anchor.position)
        direction = ", ".join(f"{c:.2f}" for c in anchor.direction)
        click.echo(f"  {anchor.name}: ({position}) -> ({direction})")


if __name__ == "__main__":
    cli()
