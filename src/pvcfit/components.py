"""
Part components: an endpoint on a straight pipe segment.

A part component is the building block of every fitting leg. In its own
frame the segment runs along +Z from Z=0 (the base) to Z=length, and the
endpoint sits on top with its connection face at Z=length + endpoint.length.

The base carries six join anchors named after the cardinal directions.
Orienting a component toward a join anchor turns its axis onto that
direction about the base, so a fitting can put legs on any side of its
centre without recomputing offsets:

    leg = make_part_component(spec, "socket", length=20)
    positive, negative = leg.oriented("right")   # leg now points along +X
"""

from __future__ import annotations

from dataclasses import dataclass, field

import cadquery as cq
import numpy as np

from .anchors import (
    DIRECTIONS,
    NamedAnchor,
    Vec3,
    apply_transform_to_shape,
    resolve_direction,
    rotation_between,
    translation_matrix,
)
from .config import GeometryConfig
from .endpoints import Endpoint, EndpointType, make_cylinder, make_endpoint
from .errors import NegativeLength
from .specs import PipeSpec


@dataclass
class PartComponent:
    """A pipe segment with an endpoint on top, kept as positive/negative solids.

    Attributes:
        spec: Pipe spec of the segment
        endpoint: The endpoint at the top of the segment
        length: Segment length (0 for an endpoint-only component)
        positive: Segment wall fused with the endpoint material
        negative: Segment bore fused with the endpoint bore
        anchors: Join anchors at the base, keyed by direction name
    """

    spec: PipeSpec
    endpoint: Endpoint
    length: float
    positive: cq.Shape
    negative: cq.Shape
    anchors: dict[str, NamedAnchor] = field(default_factory=dict)

    @property
    def end_type(self) -> EndpointType:
        return self.endpoint.type

    @property
    def face_offset(self) -> float:
        """Distance from the base to the connection face."""
        return self.length + self.endpoint.length

    @property
    def shape(self) -> cq.Shape:
        """The component as a single hollow solid (bores removed in one cut)."""
        return self.positive.cut(self.negative)

    def get_anchor(self, name: str) -> NamedAnchor:
        """Get a join anchor by name."""
        if name not in self.anchors:
            raise ValueError(f"Anchor '{name}' not found. Available: {list(self.anchors.keys())}")
        return self.anchors[name]

    def placement(self, direction: str | Vec3, at: Vec3 = (0.0, 0.0, 0.0)) -> np.ndarray:
        """4x4 transform that points the component along ``direction`` with its base at ``at``."""
        if isinstance(direction, str):
            direction = self.get_anchor(direction).direction
        return translation_matrix(*at) @ rotation_between((0.0, 0.0, 1.0), resolve_direction(direction))

    def oriented(self, direction: str | Vec3, at: Vec3 = (0.0, 0.0, 0.0)) -> tuple[cq.Shape, cq.Shape]:
        """(positive, negative) moved so the axis points along ``direction``."""
        T = self.placement(direction, at)
        return apply_transform_to_shape(self.positive, T), apply_transform_to_shape(self.negative, T)

    def face_anchor(self, name: str, direction: str | Vec3, at: Vec3 = (0.0, 0.0, 0.0)) -> NamedAnchor:
        """Anchor on the connection face once oriented along ``direction``."""
        d = resolve_direction(self.get_anchor(direction).direction if isinstance(direction, str) else direction)
        offset = self.face_offset
        position = (at[0] + d[0] * offset, at[1] + d[1] * offset, at[2] + d[2] * offset)
        return NamedAnchor.create(name, position, d)


def make_part_component(
    spec: PipeSpec,
    end_type: EndpointType | str,
    length: float | None = None,
    endpoint_length: float | None = None,
    config: GeometryConfig | None = None,
) -> PartComponent:
    """
    Create a pipe segment topped with an endpoint.

    Args:
        spec: Pipe spec
        end_type: Endpoint type at the top of the segment
        length: Segment length in mm (default: the spec's thread length);
            0 gives an endpoint-only component
        endpoint_length: Endpoint length (default: the spec's thread length)
        config: Geometry allowances

    Returns:
        PartComponent with its base at the origin, pointing +Z

    Raises:
        NegativeLength: length is below zero
        UnknownEndpointType: end_type is not an EndpointType
    """
    length = spec.tl if length is None else float(length)
    if length < 0:
        raise NegativeLength(f"Segment length must be >= 0, got {length}")

    endpoint = make_endpoint(spec, end_type, endpoint_length, config)
    endpoint_T = translation_matrix(0, 0, length)
    ep_positive = apply_transform_to_shape(endpoint.positive, endpoint_T)
    ep_negative = apply_transform_to_shape(endpoint.negative, endpoint_T)

    if length > 0:
        positive = make_cylinder(spec.od / 2, length).fuse(ep_positive)
    else:
        positive = ep_positive

    # Segment bore stops where an inserted endpoint begins so its wall survives
    bore_length = max(0.0, length - endpoint.insert_depth)
    if bore_length > 0:
        negative = make_cylinder(spec.id / 2, bore_length).fuse(ep_negative)
    else:
        negative = ep_negative

    anchors = {name: NamedAnchor.create(name, (0.0, 0.0, 0.0), vector) for name, vector in DIRECTIONS.items()}

    return PartComponent(
        spec=spec,
        endpoint=endpoint,
        length=length,
        positive=positive,
        negative=negative,
        anchors=anchors,
    )
