"""
Closures: cap and plug.

Both have a single anchor A pointing up (+Z) and a solid end below Z=0.
"""

from __future__ import annotations

from ..config import DEFAULT_CONFIG, GeometryConfig
from ..endpoints import EndpointType, make_cylinder
from ..specs import PipeSpec
from .base import EndsArg, FittingModel, assemble, make_leg, resolve_ends

CAP_ENDS = (EndpointType.SOCKET, EndpointType.FEMALE_THREAD)
PLUG_ENDS = (EndpointType.MALE_THREAD, EndpointType.SPIGOT)


def make_cap(
    spec: PipeSpec,
    ends: EndsArg = None,
    config: GeometryConfig | None = None,
) -> FittingModel:
    """
    Create a cap that closes the end of a pipe.

    The cap is a female end (socket or female thread) on a one-wall segment,
    closed by a solid disk one wall thick spanning Z in [-wall, 0].

    Raises:
        InvalidEndpointForPart: ends is not a single socket or female thread
    """
    config = config or DEFAULT_CONFIG
    (end,) = resolve_ends("cap", ends, 1, allowed=CAP_ENDS)
    leg = make_leg(spec, end, "up", spec.wall, config=config)

    radius = max(spec.od / 2, leg.component.endpoint.outer_radius)
    closure = make_cylinder(radius, spec.wall, z0=-spec.wall)
    return assemble("cap", [spec], [leg], [closure])


def make_plug(
    spec: PipeSpec,
    ends: EndsArg = None,
    config: GeometryConfig | None = None,
) -> FittingModel:
    """
    Create a plug that closes a socket or female thread.

    The male end stands directly on a solid head one socket diameter across
    and two walls thick, spanning Z in [-2 * wall, 0].

    Raises:
        InvalidEndpointForPart: ends is not a single male thread or spigot
    """
    config = config or DEFAULT_CONFIG
    (end,) = resolve_ends("plug", ends, 1, default=EndpointType.MALE_THREAD, allowed=PLUG_ENDS)
    leg = make_leg(spec, end, "up", 0.0, config=config)

    head = make_cylinder(spec.socket_od / 2, 2 * spec.wall, z0=-2 * spec.wall)
    return assemble("plug", [spec], [leg], [head])
