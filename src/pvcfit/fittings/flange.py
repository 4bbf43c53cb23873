"""
Flange: a pipe end on a bolted disk.

The flange is oriented with:
- Disk spanning Z in [-thickness, 0], flange face at Z=-thickness facing -Z
- Pipe end A standing on the disk, pointing +Z
- Centerline along Z axis
"""

from __future__ import annotations

from typing import Literal

import cadquery as cq

from ..anchors import NamedAnchor
from ..config import DEFAULT_CONFIG, GeometryConfig
from ..endpoints import BORE_EXTENSION, make_cylinder
from ..specs import PipeSpec
from .base import EndsArg, FittingModel, assemble, make_leg, resolve_ends

BoltHoleOrientation = Literal["single_hole", "two_hole"]


def make_flange_disk(
    diameter: float,
    thickness: float,
    bolt_circle: float,
    bolt_hole_diameter: float,
    num_bolts: int,
    bolt_hole_orientation: BoltHoleOrientation = "single_hole",
) -> cq.Shape:
    """
    Solid disk spanning Z in [-thickness, 0] with a circle of bolt holes.

    Args:
        diameter: Disk diameter
        thickness: Disk thickness
        bolt_circle: Diameter of the circle the hole centres lie on
        bolt_hole_diameter: Hole diameter
        num_bolts: Number of holes (0 for none)
        bolt_hole_orientation: Bolt hole orientation relative to the XZ reference plane.
            - "single_hole": One bolt hole on the reference plane (at angle 0°)
            - "two_hole": Two bolt holes symmetric about the reference plane
    """
    disk = cq.Workplane("XY").workplane(offset=-thickness).circle(diameter / 2).extrude(thickness)

    if num_bolts > 0:
        if bolt_hole_orientation == "single_hole":
            start_angle = 0.0
        else:
            start_angle = 360.0 / num_bolts / 2.0
        disk = (
            disk
            .faces(">Z")
            .workplane()
            .polarArray(bolt_circle / 2, start_angle, 360, num_bolts)
            .circle(bolt_hole_diameter / 2)
            .cutThruAll()
        )

    result = disk.solids().val()
    assert isinstance(result, cq.Shape)
    return result


def make_flange(
    spec: PipeSpec,
    ends: EndsArg = None,
    flange_diameter: float | None = None,
    thickness: float | None = None,
    num_bolts: int = 4,
    bolt_hole_diameter: float | None = None,
    bolt_circle: float | None = None,
    bolt_hole_orientation: BoltHoleOrientation = "single_hole",
    config: GeometryConfig | None = None,
) -> FittingModel:
    """
    Create a flange for a pipe spec.

    Args:
        spec: Pipe spec
        ends: Endpoint type for A (default: socket)
        flange_diameter: Disk diameter (default: twice the socket outside diameter)
        thickness: Disk thickness (default: two walls)
        num_bolts: Number of bolt holes
        bolt_hole_diameter: Hole diameter (default: a quarter of the disk's
            radial width beyond the socket)
        bolt_circle: Bolt circle diameter (default: midway across that width)
        bolt_hole_orientation: "single_hole" or "two_hole"
        config: Geometry allowances

    Returns:
        FittingModel with A on the pipe end (+Z) and B on the flange face (-Z)
    """
    config = config or DEFAULT_CONFIG
    (end,) = resolve_ends("flange", ends, 1)

    flange_diameter = 2 * spec.socket_od if flange_diameter is None else flange_diameter
    thickness = 2 * spec.wall if thickness is None else thickness
    if bolt_circle is None:
        bolt_circle = (flange_diameter + spec.socket_od) / 2
    if bolt_hole_diameter is None:
        bolt_hole_diameter = (flange_diameter - spec.socket_od) / 4

    if thickness <= 0:
        raise ValueError(f"Flange thickness must be positive, got {thickness}")
    if num_bolts < 0:
        raise ValueError(f"Number of bolt holes must be >= 0, got {num_bolts}")
    if bolt_hole_orientation not in ("single_hole", "two_hole"):
        raise ValueError(f"Unknown bolt hole orientation '{bolt_hole_orientation}'")

    leg = make_leg(spec, end, "up", spec.wall, config=config)
    hub_radius = max(spec.od / 2, leg.component.endpoint.outer_radius)
    if flange_diameter / 2 <= hub_radius:
        raise ValueError(
            f"Flange diameter {flange_diameter} must exceed the pipe end diameter {2 * hub_radius:.3f}"
        )
    if num_bolts > 0 and not (
        hub_radius < (bolt_circle - bolt_hole_diameter) / 2
        and (bolt_circle + bolt_hole_diameter) / 2 < flange_diameter / 2
    ):
        raise ValueError(
            f"Bolt holes ({bolt_hole_diameter} on a {bolt_circle} circle) do not fit "
            f"between the pipe end and the flange rim"
        )

    disk = make_flange_disk(
        flange_diameter, thickness, bolt_circle, bolt_hole_diameter, num_bolts, bolt_hole_orientation
    )
    bore_length = thickness + 2 * BORE_EXTENSION
    bore = make_cylinder(spec.id / 2, bore_length, z0=-thickness - BORE_EXTENSION)
    face = NamedAnchor.create("B", (0.0, 0.0, -thickness), "down")

    return assemble("flange", [spec], [leg], [disk], [bore], extra_anchors=[face])
