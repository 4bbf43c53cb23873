"""
Shared machinery for fitting assemblers.

Every fitting is built the same way: a set of legs (part components) is
oriented around the fitting's centre, any extra body (a junction core, a
closure disk, a flange) is added, and then ALL bores are subtracted in a
single cut. Subtracting per leg would let one leg's wall fill another leg's
bore; a single cut keeps every channel open.

Anchors on a finished fitting are named "A", "B", "C", ... in the order the
caller listed the ends, each sitting on its leg's connection face and
pointing outward.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

import cadquery as cq
import numpy as np

from ..anchors import NamedAnchor, Vec3, apply_transform_to_shape, resolve_direction
from ..components import PartComponent, make_part_component
from ..config import DEFAULT_CONFIG, GeometryConfig
from ..endpoints import EndpointType
from ..errors import InvalidEndpointForPart
from ..specs import PipeSpec

ANCHOR_NAMES = "ABCDEF"

EndsArg = EndpointType | str | Sequence[EndpointType | str | None] | None


@dataclass
class FittingModel:
    """A finished fitting: one solid plus its named anchors.

    Attributes:
        kind: Fitting kind ("tee", "elbow", ...)
        specs: Pipe spec(s) the fitting is sized for
        ends: Endpoint type of each anchor, in anchor order
        shape: The fitting solid in its local frame
        anchors: Connection anchors keyed "A", "B", ...
    """

    kind: str
    specs: tuple[PipeSpec, ...]
    ends: tuple[EndpointType, ...]
    shape: cq.Shape
    anchors: dict[str, NamedAnchor] = field(default_factory=dict)

    @property
    def spec(self) -> PipeSpec:
        return self.specs[0]

    def get_anchor(self, name: str) -> NamedAnchor:
        """Get an anchor by name."""
        if name not in self.anchors:
            raise ValueError(f"Anchor '{name}' not found. Available: {list(self.anchors.keys())}")
        return self.anchors[name]

    def shape_at(self, T: np.ndarray) -> cq.Shape:
        """Get the fitting's shape transformed to a world position."""
        return apply_transform_to_shape(self.shape, T)

    def anchor_at(self, name: str, T: np.ndarray) -> NamedAnchor:
        """Get an anchor after moving the fitting by ``T``."""
        return self.get_anchor(name).transformed(T)


# =============================================================================
# END RESOLUTION
# =============================================================================


def resolve_ends(
    kind: str,
    ends: EndsArg,
    count: int,
    default: EndpointType | str = EndpointType.SOCKET,
    allowed: Iterable[EndpointType] | Sequence[Iterable[EndpointType]] | None = None,
    defaults: Sequence[EndpointType | str] | None = None,
) -> list[EndpointType]:
    """
    Expand a caller's endpoint list to one type per anchor.

    Missing or ``None`` entries take the default. ``allowed`` may be one set
    shared by every anchor or a sequence with one set per anchor;
    ``defaults`` likewise overrides ``default`` per anchor.

    Raises:
        InvalidEndpointForPart: too many ends, or an end the part does not accept
        UnknownEndpointType: an entry is not an endpoint type
    """
    if ends is None:
        given: list = []
    elif isinstance(ends, (str, EndpointType)):
        given = [ends]
    else:
        given = list(ends)

    if len(given) > count:
        raise InvalidEndpointForPart(
            f"A {kind} has {count} end(s), got {len(given)}: {[str(e) for e in given]}"
        )

    per_anchor_defaults = list(defaults) if defaults is not None else [default] * count
    given += [None] * (count - len(given))

    allowed_sets: list[set[EndpointType] | None]
    if allowed is None:
        allowed_sets = [None] * count
    else:
        allowed = list(allowed)
        if allowed and not isinstance(allowed[0], (str, EndpointType)):
            allowed_sets = [{EndpointType.parse(e) for e in group} for group in allowed]
        else:
            allowed_sets = [{EndpointType.parse(e) for e in allowed}] * count

    resolved = []
    for i, value in enumerate(given):
        end = EndpointType.parse(per_anchor_defaults[i] if value is None else value)
        permitted = allowed_sets[i]
        if permitted is not None and end not in permitted:
            raise InvalidEndpointForPart(
                f"A {kind} does not accept a {end} end at {ANCHOR_NAMES[i]}. "
                f"Valid: {sorted(e.value for e in permitted)}"
            )
        resolved.append(end)
    return resolved


# =============================================================================
# GEOMETRY HELPERS
# =============================================================================


def fuse_all(shapes: Sequence[cq.Shape]) -> cq.Shape:
    """Union a non-empty list of solids."""
    first, *rest = shapes
    if not rest:
        return first
    return first.fuse(*rest)


def min_leg_angle(directions: Sequence[Vec3]) -> float:
    """Smallest angle in degrees between any two leg directions."""
    smallest = 180.0
    for i, a in enumerate(directions):
        for b in directions[i + 1 :]:
            dot = max(-1.0, min(1.0, a[0] * b[0] + a[1] * b[1] + a[2] * b[2]))
            smallest = min(smallest, math.degrees(math.acos(dot)))
    return smallest


def junction_leg_length(
    spec: PipeSpec,
    directions: Sequence[Vec3],
    config: GeometryConfig,
) -> float:
    """
    Segment length that keeps neighbouring endpoints from touching.

    Endpoints are at most ``socket_od / 2`` in radius and reach
    ``overlap`` back over their segment; two legs at angle theta clear
    each other once their endpoints start ``r / tan(theta / 2)`` from the
    centre.
    """
    radius = spec.socket_od / 2
    angle = min_leg_angle(directions)
    clearance = 0.0 if angle >= 179.9 else radius / math.tan(math.radians(angle) / 2)
    return max(clearance, spec.od / 2) + config.overlap_for(spec.wall)


@dataclass
class Leg:
    """A component placed on a fitting: base at ``at``, axis along ``direction``."""

    component: PartComponent
    direction: Vec3
    at: Vec3 = (0.0, 0.0, 0.0)

    def solids(self) -> tuple[cq.Shape, cq.Shape]:
        return self.component.oriented(self.direction, self.at)

    def anchor(self, name: str) -> NamedAnchor:
        return self.component.face_anchor(name, self.direction, self.at)


def make_leg(
    spec: PipeSpec,
    end_type: EndpointType,
    direction: str | Vec3,
    length: float,
    at: Vec3 = (0.0, 0.0, 0.0),
    config: GeometryConfig | None = None,
) -> Leg:
    component = make_part_component(spec, end_type, length=length, config=config)
    return Leg(component, resolve_direction(direction), at)


def assemble(
    kind: str,
    specs: Sequence[PipeSpec],
    legs: Sequence[Leg],
    extra_positive: Sequence[cq.Shape] = (),
    extra_negative: Sequence[cq.Shape] = (),
    skip_negative: Sequence[int] = (),
    extra_anchors: Sequence[NamedAnchor] = (),
) -> FittingModel:
    """
    Fuse legs and extra bodies, then subtract every bore in one cut.

    Args:
        kind: Fitting kind
        specs: Spec(s) the fitting is sized for
        legs: Placed legs, in anchor order
        extra_positive: Additional material (junction core, closure, flange)
        extra_negative: Additional bores
        skip_negative: Indices of legs whose bore is filled by design
        extra_anchors: Anchors beyond the per-leg ones
    """
    positives = list(extra_positive)
    negatives = list(extra_negative)
    anchors: dict[str, NamedAnchor] = {}

    for i, leg in enumerate(legs):
        positive, negative = leg.solids()
        positives.append(positive)
        if i not in skip_negative:
            negatives.append(negative)
        name = ANCHOR_NAMES[i]
        anchors[name] = leg.anchor(name)

    for anchor in extra_anchors:
        anchors[anchor.name] = anchor

    shape = fuse_all(positives)
    if negatives:
        shape = shape.cut(fuse_all(negatives))

    return FittingModel(
        kind=kind,
        specs=tuple(specs),
        ends=tuple(leg.component.end_type for leg in legs),
        shape=shape,
        anchors=anchors,
    )


def make_junction(
    kind: str,
    spec: PipeSpec,
    ends: EndsArg,
    directions: Sequence[str | Vec3],
    leg_length: float | None = None,
    config: GeometryConfig | None = None,
) -> FittingModel:
    """
    Build a fitting whose legs all radiate from one centre.

    The centre is filled with a sphere of the outside diameter and hollowed
    with a sphere of the inside diameter when ``config.core_sphere`` is set,
    so the legs' mitres are smooth.
    """
    config = config or DEFAULT_CONFIG
    resolved = resolve_ends(kind, ends, len(directions))
    vectors = [resolve_direction(d) for d in directions]
    length = junction_leg_length(spec, vectors, config) if leg_length is None else leg_length

    legs = [make_leg(spec, end, vector, length, config=config) for end, vector in zip(resolved, vectors)]

    core_positive = []
    core_negative = []
    if config.core_sphere:
        core_positive.append(make_core_sphere(spec.od / 2))
        core_negative.append(make_core_sphere(spec.id / 2))

    return assemble(kind, [spec], legs, core_positive, core_negative)


def make_core_sphere(radius: float, center: Vec3 = (0.0, 0.0, 0.0)) -> cq.Solid:
    """Full sphere filling the mitre where legs meet."""
    return cq.Solid.makeSphere(
        radius,
        cq.Vector(*center),
        cq.Vector(0, 0, 1),
        angleDegrees1=-90,
        angleDegrees2=90,
        angleDegrees3=360,
    )