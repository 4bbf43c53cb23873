"""
Named anchors and 4x4 transform utilities.

Every generated solid carries named anchors: labelled, oriented points
used to attach one fitting to another.

================================================================================
ANCHOR COORDINATE CONVENTION
================================================================================

An anchor's frame, relative to its solid's origin:
- Origin: on the axis, at the connection face
- Z-axis: points OUTWARD, toward where the mating part extends
- X-axis: rotational reference, turned by ``spin`` degrees about Z

Mating rule: when anchor B (on fitting FB) mates with anchor A (on FA),
B's Z-axis opposes A's Z-axis and the origins coincide (plus an optional
gap along A's Z-axis).

Directions use the names up (+Z), down (-Z), left (-X), right (+X),
forward (-Y) and back (+Y).
================================================================================

References:
- https://modernrobotics.northwestern.edu/nu-gm-book-resource/3-3-1-homogeneous-transformation-matrices/
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import cadquery as cq
import numpy as np

Vec3 = tuple[float, float, float]

DIRECTIONS: dict[str, Vec3] = {
    "up": (0.0, 0.0, 1.0),
    "down": (0.0, 0.0, -1.0),
    "left": (-1.0, 0.0, 0.0),
    "right": (1.0, 0.0, 0.0),
    "forward": (0.0, -1.0, 0.0),
    "back": (0.0, 1.0, 0.0),
}


def resolve_direction(direction: str | Vec3) -> Vec3:
    """Turn a direction name or vector into a unit vector."""
    if isinstance(direction, str):
        if direction not in DIRECTIONS:
            raise ValueError(f"Unknown direction '{direction}'. Valid: {list(DIRECTIONS)}")
        return DIRECTIONS[direction]
    x, y, z = (float(c) for c in direction)
    norm = math.sqrt(x * x + y * y + z * z)
    if norm < 1e-10:
        raise ValueError("Direction vector must be non-zero")
    return (x / norm, y / norm, z / norm)


# =============================================================================
# TRANSFORMATION MATRIX UTILITIES
# =============================================================================


def identity_matrix() -> np.ndarray:
    """Return 4x4 identity matrix."""
    return np.eye(4)


def translation_matrix(x: float, y: float, z: float) -> np.ndarray:
    """Create 4x4 translation matrix."""
    T = np.eye(4)
    T[0, 3] = x
    T[1, 3] = y
    T[2, 3] = z
    return T


def rotation_matrix_z(angle_deg: float) -> np.ndarray:
    """Create 4x4 rotation matrix around Z axis."""
    angle = math.radians(angle_deg)
    c, s = math.cos(angle), math.sin(angle)
    R = np.eye(4)
    R[0, 0] = c
    R[0, 1] = -s
    R[1, 0] = s
    R[1, 1] = c
    return R


def rotation_from_axis_angle(axis: Vec3, angle_deg: float) -> np.ndarray:
    """Create 4x4 rotation matrix from axis-angle representation."""
    angle = math.radians(angle_deg)
    x, y, z = axis
    norm = math.sqrt(x * x + y * y + z * z)
    if norm < 1e-10:
        return np.eye(4)
    x, y, z = x / norm, y / norm, z / norm

    c, s = math.cos(angle), math.sin(angle)
    t = 1 - c

    R = np.eye(4)
    R[0, 0] = t * x * x + c
    R[0, 1] = t * x * y - z * s
    R[0, 2] = t * x * z + y * s
    R[1, 0] = t * x * y + z * s
    R[1, 1] = t * y * y + c
    R[1, 2] = t * y * z - x * s
    R[2, 0] = t * x * z - y * s
    R[2, 1] = t * y * z + x * s
    R[2, 2] = t * z * z + c
    return R


def rotation_between(source: Vec3, target: Vec3) -> np.ndarray:
    """4x4 rotation that turns direction ``source`` onto direction ``target``.

    Antiparallel vectors are turned 180 degrees about an axis perpendicular
    to ``source`` (X when ``source`` is +/-Z).
    """
    a = np.array(resolve_direction(source))
    b = np.array(resolve_direction(target))
    dot = float(np.clip(np.dot(a, b), -1.0, 1.0))

    if abs(dot - 1.0) < 1e-9:
        return np.eye(4)
    if abs(dot + 1.0) < 1e-9:
        perp = np.cross(a, (1.0, 0.0, 0.0))
        if np.linalg.norm(perp) < 1e-6:
            perp = np.cross(a, (0.0, 1.0, 0.0))
        return rotation_from_axis_angle(tuple(perp), 180.0)

    axis = np.cross(a, b)
    return rotation_from_axis_angle(tuple(axis), math.degrees(math.acos(dot)))


def get_position(T: np.ndarray) -> Vec3:
    """Extract position from transformation matrix."""
    return (float(T[0, 3]), float(T[1, 3]), float(T[2, 3]))


def get_x_axis(T: np.ndarray) -> Vec3:
    """Extract X-axis direction from transformation matrix."""
    return (float(T[0, 0]), float(T[1, 0]), float(T[2, 0]))


def get_z_axis(T: np.ndarray) -> Vec3:
    """Extract Z-axis direction from transformation matrix."""
    return (float(T[0, 2]), float(T[1, 2]), float(T[2, 2]))


def apply_transform_to_shape(shape: cq.Shape, T: np.ndarray) -> cq.Shape:
    """Apply a rigid 4x4 transformation matrix to a CadQuery shape."""
    pos = get_position(T)
    R = T[0:3, 0:3]

    # ZYX Euler angles, applied as X then Y then Z about the world axes
    sy = math.sqrt(R[0, 0] ** 2 + R[1, 0] ** 2)
    singular = sy < 1e-6

    if not singular:
        rx = math.degrees(math.atan2(R[2, 1], R[2, 2]))
        ry = math.degrees(math.atan2(-R[2, 0], sy))
        rz = math.degrees(math.atan2(R[1, 0], R[0, 0]))
    else:
        rx = math.degrees(math.atan2(-R[1, 2], R[1, 1]))
        ry = math.degrees(math.atan2(-R[2, 0], sy))
        rz = 0

    result = shape
    if abs(rx) > 0.001:
        result = result.rotate((0, 0, 0), (1, 0, 0), rx)
    if abs(ry) > 0.001:
        result = result.rotate((0, 0, 0), (0, 1, 0), ry)
    if abs(rz) > 0.001:
        result = result.rotate((0, 0, 0), (0, 0, 1), rz)

    return result.moved(cq.Location(cq.Vector(*pos)))


def transform_point(T: np.ndarray, point: Vec3) -> Vec3:
    """Map a point through a 4x4 transform."""
    p = T @ np.array([point[0], point[1], point[2], 1.0])
    return (float(p[0]), float(p[1]), float(p[2]))


def transform_direction(T: np.ndarray, direction: Vec3) -> Vec3:
    """Rotate a direction through a 4x4 transform (translation ignored)."""
    d = T[0:3, 0:3] @ np.array(direction, dtype=float)
    n = np.linalg.norm(d)
    if n > 0:
        d = d / n
    return (float(d[0]), float(d[1]), float(d[2]))


# =============================================================================
# NAMED ANCHOR
# =============================================================================


@dataclass(frozen=True)
class NamedAnchor:
    """
    A labelled attachment point on a generated solid.

    Attributes:
        name: Anchor identifier ("A", "B", ... on fittings; "up", "down",
            ... on part components)
        position: Anchor origin in the solid's local coordinates
        direction: Unit vector pointing OUTWARD from the connection face
        spin: Rotation in degrees of the reference X-axis about ``direction``
    """

    name: str
    position: Vec3
    direction: Vec3
    spin: float = 0.0

    @classmethod
    def create(cls, name: str, position: Vec3, direction: str | Vec3, spin: float = 0.0) -> NamedAnchor:
        """Build an anchor, normalizing the direction (name or vector)."""
        px, py, pz = position
        return cls(name, (float(px), float(py), float(pz)), resolve_direction(direction), float(spin))

    @property
    def transform(self) -> np.ndarray:
        """4x4 frame: origin at position, Z along direction, X spun by ``spin``."""
        return (
            translation_matrix(*self.position)
            @ rotation_between((0.0, 0.0, 1.0), self.direction)
            @ rotation_matrix_z(self.spin)
        )

    def transformed(self, T: np.ndarray) -> NamedAnchor:
        """The same anchor after moving its solid by ``T``."""
        return NamedAnchor(
            self.name,
            transform_point(T, self.position),
            transform_direction(T, self.direction),
            self.spin,
        )


# =============================================================================
# MATING CALCULATION
# =============================================================================


def compute_mate_transform(
    anchor_a: NamedAnchor,
    anchor_b: NamedAnchor,
    fitting_a_transform: np.ndarray,
    gap: float = 0.0,
) -> np.ndarray:
    """
    Compute the world transform for fitting B such that anchor B mates with anchor A.

    Anchor A is on fitting A (already positioned in world).
    Anchor B is on fitting B (we're computing where to place it).

    The anchors mate when:
    - Their Z-axes point toward each other (opposite directions)
    - Their origins are aligned (with optional gap between them)

    Args:
        anchor_a: Anchor on fitting A
        anchor_b: Anchor on fitting B
        fitting_a_transform: World transform of fitting A
        gap: Gap distance between anchors (along connection axis)

    Returns:
        World transform for fitting B
    """
    anchor_a_world = fitting_a_transform @ anchor_a.transform

    pos_a = get_position(anchor_a_world)
    z_a = get_z_axis(anchor_a_world)

    mate_pos = (pos_a[0] + gap * z_a[0], pos_a[1] + gap * z_a[1], pos_a[2] + gap * z_a[2])
    target_z = (-z_a[0], -z_a[1], -z_a[2])

    # Desired anchor B frame: +Z along target_z, X-axis following anchor A's X-axis
    R_desired = rotation_between((0.0, 0.0, 1.0), target_z)
    x_a = np.array(get_x_axis(anchor_a_world))
    x_b = np.array(get_x_axis(R_desired))
    twist = math.degrees(math.atan2(np.dot(np.cross(x_b, x_a), target_z), np.dot(x_b, x_a)))
    desired_anchor_b = translation_matrix(*mate_pos) @ R_desired @ rotation_matrix_z(twist)

    # fitting_b_world @ anchor_b.transform = desired_anchor_b
    return desired_anchor_b @ np.linalg.inv(anchor_b.transform)
