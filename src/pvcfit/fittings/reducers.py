"""
Fittings that join two different specs: adapter and bushing.

Adapter: a conical transition between two legs.

    A leg (spec_a) pointing -Z from Z=0
    cone from spec_a's diameters at Z=0 to spec_b's at Z=transition
    B leg (spec_b) pointing +Z from Z=transition

Bushing: a male end of the larger spec with a female end of the smaller
spec sunk into it, so a smaller pipe can enter a larger fitting.

    A (larger spec) pointing -Z, face at Z=-tl
    collar one wall thick spanning Z in [0, wall]
    B (smaller spec) pointing +Z, face at Z=wall
"""

from __future__ import annotations

import warnings

import cadquery as cq

from ..config import DEFAULT_CONFIG, GeometryConfig
from ..endpoints import BORE_EXTENSION, EndpointType, make_cylinder
from ..errors import IncompatibleSizes
from ..specs import PipeSpec
from .base import EndsArg, FittingModel, assemble, make_leg, resolve_ends

BUSHING_ENDS = (
    (EndpointType.SPIGOT, EndpointType.MALE_THREAD),
    (EndpointType.SOCKET, EndpointType.FEMALE_THREAD),
)
BUSHING_DEFAULTS = (EndpointType.SPIGOT, EndpointType.SOCKET)


def make_frustum(radius_start: float, radius_end: float, height: float, z0: float = 0.0) -> cq.Solid:
    """Cone or cylinder along +Z from ``z0`` to ``z0 + height``."""
    if abs(radius_start - radius_end) < 1e-9:
        return make_cylinder(radius_start, height, z0)
    return cq.Solid.makeCone(
        radius1=radius_start,
        radius2=radius_end,
        height=height,
        pnt=cq.Vector(0, 0, z0),
        dir=cq.Vector(0, 0, 1),
    )


def make_adapter(
    spec_a: PipeSpec,
    spec_b: PipeSpec,
    ends: EndsArg = None,
    transition: float | None = None,
    config: GeometryConfig | None = None,
) -> FittingModel:
    """
    Create an adapter between two specs.

    Args:
        spec_a: Spec of end A
        spec_b: Spec of end B
        ends: Endpoint types for A and B (default: socket)
        transition: Length of the conical section in mm (default: the
            difference in outside diameters plus the larger wall)
        config: Geometry allowances

    Returns:
        FittingModel with A pointing -Z and B pointing +Z
    """
    config = config or DEFAULT_CONFIG
    resolved = resolve_ends("adapter", ends, 2)
    if transition is None:
        transition = abs(spec_a.od - spec_b.od) + max(spec_a.wall, spec_b.wall)
    if transition <= 0:
        raise ValueError(f"Adapter transition must be positive, got {transition}")

    legs = [
        make_leg(spec_a, resolved[0], "down", spec_a.wall, config=config),
        make_leg(spec_b, resolved[1], "up", spec_b.wall, at=(0.0, 0.0, transition), config=config),
    ]
    body = make_frustum(spec_a.od / 2, spec_b.od / 2, transition)
    bore = make_frustum(spec_a.id / 2, spec_b.id / 2, transition)
    return assemble("adapter", [spec_a, spec_b], legs, [body], [bore])


def check_bushing_sizes(spec_1: PipeSpec, spec_2: PipeSpec) -> tuple[PipeSpec, PipeSpec]:
    """
    Order two specs as (larger, smaller) and check they can form a bushing.

    Raises:
        IncompatibleSizes: equal outside or inside diameters, or the smaller
            pipe does not fit inside the larger one's bore
    """
    if spec_1.od == spec_2.od:
        raise IncompatibleSizes(
            f"Bushing needs two different outside diameters, both specs have od={spec_1.od}"
        )
    larger, smaller = (spec_1, spec_2) if spec_1.od > spec_2.od else (spec_2, spec_1)
    if larger.id == smaller.id:
        raise IncompatibleSizes(
            f"Bushing needs two different inside diameters, both specs have id={larger.id}"
        )
    if larger.id <= smaller.od:
        raise IncompatibleSizes(
            f"A {smaller.name} pipe (od={smaller.od}) does not fit inside "
            f"a {larger.name} bore (id={larger.id:.3f})"
        )
    return larger, smaller


def make_bushing(
    spec_1: PipeSpec,
    spec_2: PipeSpec,
    ends: EndsArg = None,
    config: GeometryConfig | None = None,
) -> FittingModel:
    """
    Create a reducing bushing.

    A takes the larger of the two specs and B the smaller, whichever order
    they are given in.

    Args:
        spec_1, spec_2: The two specs
        ends: Endpoint types for A (spigot or male thread, default spigot)
            and B (socket or female thread, default socket)
        config: Geometry allowances

    Raises:
        IncompatibleSizes: see check_bushing_sizes
        InvalidEndpointForPart: an end is not accepted at its anchor
    """
    config = config or DEFAULT_CONFIG
    larger, smaller = check_bushing_sizes(spec_1, spec_2)
    resolved = resolve_ends("bushing", ends, 2, allowed=BUSHING_ENDS, defaults=BUSHING_DEFAULTS)

    collar = larger.wall
    outer = make_leg(larger, resolved[0], "down", 0.0, config=config)
    outer_length = outer.component.face_offset

    inner_length = smaller.tl
    inner_base = collar - inner_length
    inner = make_leg(smaller, resolved[1], "up", 0.0, at=(0.0, 0.0, inner_base), config=config)
    if inner_length > outer_length + collar:
        warnings.warn(
            f"Bushing B end ({inner_length:.2f} mm) is deeper than its body "
            f"({outer_length + collar:.2f} mm)",
            stacklevel=2,
        )

    # The outer end's bore is filled; only the smaller spec's channel runs through.
    # The fill overlaps the outer end's wall rather than meeting its bore.
    fill = make_cylinder(larger.id / 2 + larger.wall / 4, outer_length, z0=-outer_length)
    head = make_cylinder(larger.socket_od / 2, collar)
    through_bottom = -outer_length - BORE_EXTENSION
    through = []
    if inner_base > through_bottom:
        through.append(make_cylinder(smaller.id / 2, inner_base - through_bottom, z0=through_bottom))

    return assemble(
        "bushing",
        [larger, smaller],
        [outer, inner],
        extra_positive=[fill, head],
        extra_negative=through,
        skip_negative=[0],
    )
