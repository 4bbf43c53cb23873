"""
Branch fittings: legs radiating from a single centre at the origin.

Leg directions, in anchor order:

    tee               A left,  B right, C up
    wye               A down,  B up,    C tilted ``angle`` from up toward right
    cross             A left,  B right, C up,   D down
    corner            A right, B back,  C up
    side-outlet tee   A left,  B right, C up,   D back
    six-way           A up,    B down,  C left, D right, E forward, F back
"""

from __future__ import annotations

import math

from ..config import GeometryConfig
from ..specs import PipeSpec
from .base import EndsArg, FittingModel, make_junction

TEE_LEGS = ("left", "right", "up")
CROSS_LEGS = ("left", "right", "up", "down")
CORNER_LEGS = ("right", "back", "up")
SIDE_OUTLET_TEE_LEGS = ("left", "right", "up", "back")
SIX_WAY_LEGS = ("up", "down", "left", "right", "forward", "back")


def make_tee(
    spec: PipeSpec,
    ends: EndsArg = None,
    leg_length: float | None = None,
    config: GeometryConfig | None = None,
) -> FittingModel:
    """Create an equal tee: run A-B along X, branch C along +Z."""
    return make_junction("tee", spec, ends, TEE_LEGS, leg_length, config)


def make_wye(
    spec: PipeSpec,
    ends: EndsArg = None,
    angle: float = 45.0,
    leg_length: float | None = None,
    config: GeometryConfig | None = None,
) -> FittingModel:
    """
    Create a wye: run A-B along Z, branch C at ``angle`` degrees from the run.

    Args:
        spec: Pipe spec
        ends: Endpoint types for A, B and C (default: socket)
        angle: Angle between the branch and the +Z run, in (0, 90]
        leg_length: Segment length of every leg (default: long enough that
            the branch endpoint clears the run)
        config: Geometry allowances
    """
    if not 0 < angle <= 90:
        raise ValueError(f"Wye angle must be in (0, 90], got {angle}")
    theta = math.radians(angle)
    branch = (math.sin(theta), 0.0, math.cos(theta))
    return make_junction("wye", spec, ends, ("down", "up", branch), leg_length, config)


def make_cross(
    spec: PipeSpec,
    ends: EndsArg = None,
    leg_length: float | None = None,
    config: GeometryConfig | None = None,
) -> FittingModel:
    """Create a four-way cross in the XZ plane."""
    return make_junction("cross", spec, ends, CROSS_LEGS, leg_length, config)


def make_corner(
    spec: PipeSpec,
    ends: EndsArg = None,
    leg_length: float | None = None,
    config: GeometryConfig | None = None,
) -> FittingModel:
    """Create a three-way corner with mutually perpendicular legs."""
    return make_junction("corner", spec, ends, CORNER_LEGS, leg_length, config)


def make_side_outlet_tee(
    spec: PipeSpec,
    ends: EndsArg = None,
    leg_length: float | None = None,
    config: GeometryConfig | None = None,
) -> FittingModel:
    """Create a tee with an extra outlet D perpendicular to both run and branch."""
    return make_junction("side-outlet-tee", spec, ends, SIDE_OUTLET_TEE_LEGS, leg_length, config)


def make_six_way(
    spec: PipeSpec,
    ends: EndsArg = None,
    leg_length: float | None = None,
    config: GeometryConfig | None = None,
) -> FittingModel:
    """Create a six-way cross with a leg along every axis direction."""
    return make_junction("six-way", spec, ends, SIX_WAY_LEGS, leg_length, config)
