"""
Connection endpoints.

An endpoint is the short solid at the end of a fitting leg that mates with
another part: a plain spigot, a socket sleeve, or a threaded end. Each
endpoint comes as a pair of solids:

- ``positive``: the material of the connector. Plain ends are already
  hollow; a female thread body is solid until its negative is cut
- ``negative``: the bore that must stay clear through the connector, to be
  subtracted (together with the bores of everything it is fused to) so the
  assembled fitting keeps a continuous channel

Endpoint frame:
- Axis along +Z
- Z=0 is the base, where the endpoint joins its pipe segment
- Z=length is the connection face
- Sockets and inner spigots reach ``overlap`` below Z=0 to fuse with the
  segment they sit on
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from enum import Enum

import cadquery as cq

from .config import DEFAULT_CONFIG, GeometryConfig
from .errors import NegativeLength, UnknownEndpointType
from .specs import PipeSpec
from .threads import make_external_thread, make_internal_thread_cutter

# =============================================================================
# CONSTANTS
# =============================================================================

BORE_EXTENSION = 0.01  # mm a negative bore runs past the material it clears


class EndpointType(str, Enum):
    """The kinds of connection face."""

    SPIGOT = "spigot"
    INNER_SPIGOT = "inner-spigot"
    SOCKET = "socket"
    MALE_THREAD = "male-thread"
    FEMALE_THREAD = "female-thread"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: EndpointType | str) -> EndpointType:
        """Accept an EndpointType or its string value (``_`` allowed for ``-``)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower().replace("_", "-")
            for member in cls:
                if member.value == key:
                    return member
        raise UnknownEndpointType(
            f"Unknown endpoint type {value!r}. Valid: {[member.value for member in cls]}"
        )


# =============================================================================
# DATA STRUCTURES
# =============================================================================


@dataclass
class Endpoint:
    """A connection endpoint solid pair in the endpoint frame.

    Attributes:
        type: Endpoint type
        spec: Pipe spec the endpoint is sized for
        length: Base-to-face length (connection engagement)
        positive: Connector material
        negative: Bore to subtract
        overlap: Length of ``positive`` below Z=0
        insert_depth: Length ``positive`` reaches into the adjoining bore
        outer_radius: Largest radius of ``positive``
    """

    type: EndpointType
    spec: PipeSpec
    length: float
    positive: cq.Shape
    negative: cq.Shape
    overlap: float = 0.0
    insert_depth: float = 0.0
    outer_radius: float = 0.0

    @property
    def shape(self) -> cq.Shape:
        """The endpoint on its own, bore removed."""
        return self.positive.cut(self.negative)


THREADED_TYPES = frozenset({EndpointType.MALE_THREAD, EndpointType.FEMALE_THREAD})


# =============================================================================
# SOLID HELPERS
# =============================================================================


def make_cylinder(radius: float, length: float, z0: float = 0.0) -> cq.Solid:
    """Cylinder along +Z from ``z0`` to ``z0 + length``."""
    return cq.Solid.makeCylinder(radius, length, cq.Vector(0, 0, z0), cq.Vector(0, 0, 1))


def make_tube(outer_radius: float, inner_radius: float, length: float, z0: float = 0.0) -> cq.Shape:
    """Hollow cylinder along +Z from ``z0`` to ``z0 + length``."""
    outer = make_cylinder(outer_radius, length, z0)
    inner = make_cylinder(inner_radius, length, z0)
    return outer.cut(inner)


# =============================================================================
# ENDPOINT BUILDERS
# =============================================================================


def _spigot(spec: PipeSpec, length: float, config: GeometryConfig) -> Endpoint:
    r_bore = spec.id / 2
    return Endpoint(
        type=EndpointType.SPIGOT,
        spec=spec,
        length=length,
        positive=make_tube(spec.od / 2, r_bore, length),
        negative=make_cylinder(r_bore, length + BORE_EXTENSION),
        outer_radius=spec.od / 2,
    )


def _inner_spigot(spec: PipeSpec, length: float, config: GeometryConfig) -> Endpoint:
    # Fits inside the bore of a pipe of the same spec
    r_outer = spec.id / 2
    r_bore = r_outer - spec.wall
    if r_bore <= 0:
        raise ValueError(
            f"Spec {spec.name} (schedule {spec.schedule}) is too thick-walled for an inner spigot: "
            f"id={spec.id} <= 2*wall={2 * spec.wall}"
        )
    overlap = config.overlap_for(spec.wall)
    return Endpoint(
        type=EndpointType.INNER_SPIGOT,
        spec=spec,
        length=length,
        positive=make_tube(r_outer, r_bore, length + overlap, z0=-overlap),
        negative=make_cylinder(r_bore, length + overlap + BORE_EXTENSION, z0=-overlap),
        overlap=overlap,
        insert_depth=overlap,
        outer_radius=r_outer,
    )


def _socket(spec: PipeSpec, length: float, config: GeometryConfig) -> Endpoint:
    # Sleeve whose bore receives a spigot of the same spec
    r_bore = spec.socket_id / 2
    r_outer = r_bore + spec.wall * config.socket_wall_ratio
    overlap = config.overlap_for(spec.wall)
    return Endpoint(
        type=EndpointType.SOCKET,
        spec=spec,
        length=length,
        positive=make_tube(r_outer, r_bore, length + overlap, z0=-overlap),
        negative=make_cylinder(r_bore, length + BORE_EXTENSION),
        overlap=overlap,
        outer_radius=r_outer,
    )


def _male_thread(spec: PipeSpec, length: float, config: GeometryConfig) -> Endpoint:
    root_r = (spec.id + spec.wall) / 2
    crest_r = spec.od / 2
    ridge = make_external_thread(
        root_r,
        crest_r,
        spec.pitch,
        length,
        bevel=config.thread_bevel,
        overlap=config.cutter_overlap,
        sections_per_turn=config.sections_per_turn,
    )
    # Solid core: the bores below set the inner surface
    core = make_cylinder(root_r, length)
    bore = make_cylinder(spec.id / 2, length + 2 * BORE_EXTENSION, z0=-BORE_EXTENSION)
    positive = core.fuse(ridge).cut(bore)

    bore_d = spec.od - (spec.od - spec.id) / 2 - config.thread_clearance
    return Endpoint(
        type=EndpointType.MALE_THREAD,
        spec=spec,
        length=length,
        positive=positive,
        negative=make_cylinder(bore_d / 2, length + 2 * BORE_EXTENSION, z0=-BORE_EXTENSION),
        outer_radius=crest_r,
    )


def _female_thread(spec: PipeSpec, length: float, config: GeometryConfig) -> Endpoint:
    # Minor diameter matches the male thread's root, major its crest
    minor_r = (spec.id + spec.wall) / 2
    major_r = spec.od / 2
    cutter = make_internal_thread_cutter(
        minor_r,
        major_r,
        spec.pitch,
        length,
        overlap=config.cutter_overlap,
        sections_per_turn=config.sections_per_turn,
    )
    # Solid body: the negative alone opens the bore to the minor diameter
    body = make_cylinder(spec.socket_od / 2, length)
    return Endpoint(
        type=EndpointType.FEMALE_THREAD,
        spec=spec,
        length=length,
        positive=body.cut(cutter),
        negative=make_cylinder(minor_r, length + 2 * BORE_EXTENSION, z0=-BORE_EXTENSION),
        outer_radius=spec.socket_od / 2,
    )


_BUILDERS = {
    EndpointType.SPIGOT: _spigot,
    EndpointType.INNER_SPIGOT: _inner_spigot,
    EndpointType.SOCKET: _socket,
    EndpointType.MALE_THREAD: _male_thread,
    EndpointType.FEMALE_THREAD: _female_thread,
}


def make_endpoint(
    spec: PipeSpec,
    end_type: EndpointType | str,
    length: float | None = None,
    config: GeometryConfig | None = None,
) -> Endpoint:
    """
    Create a connection endpoint for a pipe spec.

    Args:
        spec: Pipe spec the endpoint is sized for
        end_type: Endpoint type or its string value
        length: Base-to-face length in mm (default: the spec's thread length)
        config: Geometry allowances (default: DEFAULT_CONFIG)

    Returns:
        Endpoint in the endpoint frame (+Z axis, face at Z=length)

    Raises:
        UnknownEndpointType: end_type is not an EndpointType
        NegativeLength: length is below zero
    """
    kind = EndpointType.parse(end_type)
    config = config or DEFAULT_CONFIG
    length = spec.tl if length is None else float(length)
    if length < 0:
        raise NegativeLength(f"Endpoint length must be >= 0, got {length}")
    if length == 0:
        raise ValueError("Endpoint length must be greater than zero")
    if kind in THREADED_TYPES and length < spec.pitch:
        warnings.warn(
            f"Thread length {length:.3f} mm is shorter than one pitch ({spec.pitch:.3f} mm)",
            stacklevel=2,
        )
    return _BUILDERS[kind](spec, length, config)
