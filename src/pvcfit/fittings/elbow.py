"""
Swept elbow.

The elbow lies in the XY plane with its bend centre at the origin. The arc
starts at (bend_radius, 0, 0), where the tangent is +Y, and turns
counter-clockwise (seen from +Z) through ``angle`` degrees.

    A leg: base at the arc start, pointing -Y
    B leg: base at the arc end, pointing along the outgoing tangent

For a 90 degree elbow B points -X.
"""

from __future__ import annotations

import math

import cadquery as cq

from ..config import DEFAULT_CONFIG, GeometryConfig
from ..specs import PipeSpec
from .base import EndsArg, FittingModel, assemble, make_leg, resolve_ends


def make_arc_sweep(radius: float, bend_radius: float, angle: float) -> cq.Shape:
    """Sweep a circle of ``radius`` along the elbow arc."""
    theta = math.radians(angle)
    mid = (bend_radius * math.cos(theta / 2), bend_radius * math.sin(theta / 2))
    end = (bend_radius * math.cos(theta), bend_radius * math.sin(theta))

    arc_path = cq.Workplane("XY").moveTo(bend_radius, 0).threePointArc(mid, end)

    # At the arc start the tangent is +Y, so the section lies in the XZ plane
    profile = cq.Workplane("XZ", origin=(bend_radius, 0, 0)).circle(radius)
    sweep = profile.sweep(arc_path, isFrenet=True)

    result = sweep.solids().val()
    assert isinstance(result, cq.Shape)
    return result


def make_elbow(
    spec: PipeSpec,
    ends: EndsArg = None,
    angle: float = 90.0,
    bend_radius: float | None = None,
    leg_length: float | None = None,
    config: GeometryConfig | None = None,
) -> FittingModel:
    """
    Create an elbow.

    Args:
        spec: Pipe spec
        ends: Endpoint types for A and B (default: socket)
        angle: Bend angle in degrees, in (0, 180]
        bend_radius: Centreline bend radius in mm (default: the spec's
            outside diameter)
        leg_length: Straight length between the arc and each endpoint
            (default: one wall thickness)
        config: Geometry allowances

    Returns:
        FittingModel with anchors A and B
    """
    if not 0 < angle <= 180:
        raise ValueError(f"Elbow angle must be in (0, 180], got {angle}")
    bend_radius = spec.od if bend_radius is None else float(bend_radius)
    if bend_radius <= spec.od / 2:
        raise ValueError(
            f"Bend radius {bend_radius} must exceed half the outside diameter ({spec.od / 2})"
        )
    leg_length = spec.wall if leg_length is None else leg_length
    config = config or DEFAULT_CONFIG

    resolved = resolve_ends("elbow", ends, 2)

    theta = math.radians(angle)
    start = (bend_radius, 0.0, 0.0)
    end = (bend_radius * math.cos(theta), bend_radius * math.sin(theta), 0.0)
    out_end = (-math.sin(theta), math.cos(theta), 0.0)

    legs = [
        make_leg(spec, resolved[0], (0.0, -1.0, 0.0), leg_length, at=start, config=config),
        make_leg(spec, resolved[1], out_end, leg_length, at=end, config=config),
    ]

    positive = make_arc_sweep(spec.od / 2, bend_radius, angle)
    negative = make_arc_sweep(spec.id / 2, bend_radius, angle)

    return assemble("elbow", [spec], legs, [positive], [negative])
