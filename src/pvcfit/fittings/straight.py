"""
Straight fittings: pipe, nipple, coupling.

All three are two legs on one axis, A pointing down (-Z) and B up (+Z).
A pipe and a nipple run from Z=0 (face A) to Z=length (face B); a coupling
is centred on the origin.
"""

from __future__ import annotations

from ..config import GeometryConfig
from ..endpoints import EndpointType
from ..errors import NegativeLength
from ..specs import PipeSpec
from .base import EndsArg, FittingModel, assemble, make_leg, resolve_ends

NIPPLE_ENDS = (EndpointType.MALE_THREAD, EndpointType.SPIGOT)


def _make_straight(
    kind: str,
    spec: PipeSpec,
    length: float,
    ends: list[EndpointType],
    config: GeometryConfig | None,
) -> FittingModel:
    half = length / 2
    segment = half - spec.tl
    if segment < 0:
        raise NegativeLength(
            f"A {kind} {length} mm long is shorter than its two {spec.tl} mm ends"
        )
    center = (0.0, 0.0, half)
    legs = [
        make_leg(spec, ends[0], "down", segment, at=center, config=config),
        make_leg(spec, ends[1], "up", segment, at=center, config=config),
    ]
    return assemble(kind, [spec], legs)


def make_pipe(
    spec: PipeSpec,
    length: float,
    ends: EndsArg = None,
    config: GeometryConfig | None = None,
) -> FittingModel:
    """
    Create a straight length of pipe.

    Args:
        spec: Pipe spec
        length: Overall length in mm, face A to face B
        ends: Endpoint types for A and B (default: socket)
        config: Geometry allowances

    Returns:
        FittingModel with A at Z=0 pointing -Z and B at Z=length pointing +Z

    Raises:
        NegativeLength: length is below zero or too short for the two ends
    """
    if length < 0:
        raise NegativeLength(f"Pipe length must be >= 0, got {length}")
    resolved = resolve_ends("pipe", ends, 2)
    return _make_straight("pipe", spec, length, resolved, config)


def make_nipple(
    spec: PipeSpec,
    length: float | None = None,
    ends: EndsArg = None,
    config: GeometryConfig | None = None,
) -> FittingModel:
    """
    Create a short threaded (or plain) nipple.

    The default length is the close-nipple length: two thread lengths plus
    two wall thicknesses of plain pipe between them.
    """
    if length is None:
        length = 2 * spec.tl + 2 * spec.wall
    if length < 0:
        raise NegativeLength(f"Nipple length must be >= 0, got {length}")
    resolved = resolve_ends("nipple", ends, 2, default=EndpointType.MALE_THREAD, allowed=NIPPLE_ENDS)
    return _make_straight("nipple", spec, length, resolved, config)


def make_coupling(
    spec: PipeSpec,
    ends: EndsArg = None,
    config: GeometryConfig | None = None,
) -> FittingModel:
    """
    Create a coupling joining two pipes of the same spec.

    A wall-thickness stop separates the two ends; faces A and B sit at
    Z = -(wall + tl) and Z = +(wall + tl).
    """
    resolved = resolve_ends("coupling", ends, 2)
    legs = [
        make_leg(spec, resolved[0], "down", spec.wall, config=config),
        make_leg(spec, resolved[1], "up", spec.wall, config=config),
    ]
    return assemble("coupling", [spec], legs)
