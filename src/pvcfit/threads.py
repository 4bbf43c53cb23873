"""
Helical thread solids for CadQuery.

Threads are built by lofting a trapezoidal thread section through a helix:
one planar section every ``360 / sections_per_turn`` degrees, each lying in
the plane that contains the thread axis. The ridge (external) or groove
(internal) is then trimmed to the thread length.

Thread form:
- 60 degree included angle (30 degree flanks)
- Flat at crest and root of 0.038 * pitch
- Flanks are steepened when the spec's thread depth would otherwise make
  neighbouring turns overlap

Orientation of every solid in this module:
- Axis along +Z
- Z=0 is the end joined to the adjoining segment
- Z=length is the connection face
"""

from __future__ import annotations

import math
from collections.abc import Callable

import cadquery as cq
from OCP.BRepBuilderAPI import BRepBuilderAPI_MakeEdge, BRepBuilderAPI_MakeWire
from OCP.BRepOffsetAPI import BRepOffsetAPI_ThruSections
from OCP.gp import gp_Pnt

from .errors import NegativeLength

# =============================================================================
# CONSTANTS
# =============================================================================

FLANK_ANGLE_DEG = 30.0  # Half of the 60 degree thread angle
FLAT_RATIO = 0.038  # Crest/root flat width as a fraction of pitch
MAX_BASE_RATIO = 0.9  # Widest section of a ridge, as a fraction of pitch


# =============================================================================
# PROFILE
# =============================================================================


def thread_profile_spans(pitch: float, thread_depth: float) -> tuple[float, float]:
    """Half-widths (narrow, wide) of the thread section along the axis.

    Args:
        pitch: Thread pitch in mm
        thread_depth: Radial depth of the thread in mm

    Returns:
        (half width at the narrow flat, half width at the wide flat)
    """
    half_flat = FLAT_RATIO * pitch / 2
    flank_axial_span = thread_depth * math.tan(math.radians(FLANK_ANGLE_DEG))
    max_span = MAX_BASE_RATIO * pitch / 2 - half_flat
    return half_flat, half_flat + min(flank_axial_span, max_span)


def _check_thread_args(pitch: float, length: float, r1: float, r2: float):
    if length < 0:
        raise NegativeLength(f"Thread length must be >= 0, got {length}")
    if pitch <= 0:
        raise ValueError(f"Thread pitch must be positive, got {pitch}")
    if r1 <= 0 or r2 <= 0:
        raise ValueError(f"Thread radii must be positive, got {r1} and {r2}")


def _helical_loft(
    section: Callable[[float], list[tuple[float, float]]],
    pitch: float,
    length: float,
    sections_per_turn: int,
) -> cq.Shape:
    """Loft a planar section along a right-hand helix.

    ``section(z)`` returns the (radius, axial offset) corners of the section
    centred at height ``z``. The helix runs one pitch past each end so the
    trimmed thread is complete at both faces.
    """
    start = -pitch
    travel = length + 2 * pitch
    num_turns = travel / pitch
    num_sections = max(int(num_turns * sections_per_turn), sections_per_turn)

    loft = BRepOffsetAPI_ThruSections(True, False)

    for i in range(num_sections + 1):
        t = i / num_sections
        z = start + t * travel
        angle = t * num_turns * 2 * math.pi
        cx = math.cos(angle)
        cy = math.sin(angle)

        pts = [gp_Pnt(cx * r, cy * r, z + dz) for r, dz in section(z)]

        wire_builder = BRepBuilderAPI_MakeWire()
        for j in range(len(pts)):
            edge = BRepBuilderAPI_MakeEdge(pts[j], pts[(j + 1) % len(pts)]).Edge()
            wire_builder.Add(edge)

        loft.AddWire(wire_builder.Wire())

    loft.Build()
    if not loft.IsDone():
        raise ValueError("Failed to create helical thread loft")

    return cq.Shape.cast(loft.Shape())


def _tapered_cylinder(radius_start: float, radius_end: float, height: float, z0: float = 0.0) -> cq.Solid:
    """Truncated cone along +Z from ``z0`` to ``z0 + height``."""
    return cq.Solid.makeCone(
        radius1=radius_start,
        radius2=radius_end,
        height=height,
        pnt=cq.Vector(0, 0, z0),
        dir=cq.Vector(0, 0, 1),
    )


def bevel_cutter(root_radius: float, crest_radius: float, length: float, overlap: float) -> cq.Shape | None:
    """Ring that chamfers an external thread's crest at the connection face.

    The chamfer runs at 45 degrees from the crest, one thread depth less
    ``overlap`` below the face, to ``root_radius + overlap`` at the face.
    Every surface of the cutter crosses the thread transversally.

    Returns:
        Solid to SUBTRACT from the ridge, or None when the thread is too
        shallow or too short to bevel
    """
    depth = crest_radius - root_radius
    start = length - (depth - overlap)
    if depth <= overlap or start <= 0:
        return None

    cone_bottom = start - 2 * overlap
    cone = _tapered_cylinder(
        crest_radius + 2 * overlap,
        root_radius - overlap,
        length + 2 * overlap - cone_bottom,
        z0=cone_bottom,
    )
    ring_bottom = start - overlap / 2
    ring = cq.Solid.makeCylinder(
        crest_radius + overlap,
        length + overlap - ring_bottom,
        cq.Vector(0, 0, ring_bottom),
        cq.Vector(0, 0, 1),
    )
    return ring.cut(cone)


# =============================================================================
# EXTERNAL THREAD
# =============================================================================


def make_external_thread(
    root_radius: float,
    crest_radius: float,
    pitch: float,
    length: float,
    *,
    bevel: bool = True,
    overlap: float = 0.3,
    sections_per_turn: int = 36,
) -> cq.Shape:
    """Create the helical ridge of an external (male) thread.

    The ridge extends ``overlap`` below the root radius so it fuses with a
    core cylinder of radius ``root_radius``.

    Args:
        root_radius: Radius at the thread root
        crest_radius: Radius at the thread crest (the pipe's outside radius)
        pitch: Thread pitch in mm
        length: Thread length in mm
        bevel: Chamfer the crest at the connection face
        overlap: Radial overlap into the core
        sections_per_turn: Loft sections per helix turn

    Returns:
        Ridge solid trimmed to Z in [0, length], to FUSE with a core cylinder
    """
    _check_thread_args(pitch, length, crest_radius, root_radius)
    if crest_radius <= root_radius:
        raise ValueError(f"Crest radius {crest_radius} must exceed root radius {root_radius}")

    half_narrow, half_wide = thread_profile_spans(pitch, crest_radius - root_radius)
    inner_r = root_radius - overlap

    def section(_z: float) -> list[tuple[float, float]]:
        # WIDE at the root, NARROW at the crest
        return [
            (inner_r, -half_wide),
            (inner_r, half_wide),
            (crest_radius, half_narrow),
            (crest_radius, -half_narrow),
        ]

    ridge = _helical_loft(section, pitch, length, sections_per_turn)
    ridge = ridge.intersect(cq.Solid.makeCylinder(crest_radius + overlap, length))
    cutter = bevel_cutter(root_radius, crest_radius, length, overlap) if bevel else None
    if cutter is not None:
        ridge = ridge.cut(cutter)
    return ridge


# =============================================================================
# INTERNAL THREAD
# =============================================================================


def make_internal_thread_cutter(
    minor_radius: float,
    major_radius: float,
    pitch: float,
    length: float,
    *,
    overlap: float = 0.3,
    sections_per_turn: int = 36,
) -> cq.Shape:
    """Create the helical groove cutter of an internal (female) thread.

    The cutter sits inside the bore and cuts OUTWARD into the wall: WIDE at
    the bore surface (``minor_radius``), NARROW at the thread root
    (``major_radius``). It extends ``overlap`` inside the bore for a clean cut.

    Returns:
        Cutter solid over Z in [-overlap, length + overlap], to SUBTRACT
        from a body the bore will open to ``minor_radius``
    """
    _check_thread_args(pitch, length, minor_radius, major_radius)
    if major_radius <= minor_radius:
        raise ValueError(f"Major radius {major_radius} must exceed minor radius {minor_radius}")

    half_narrow, half_wide = thread_profile_spans(pitch, major_radius - minor_radius)
    inner_r = minor_radius - overlap

    def section(_z: float) -> list[tuple[float, float]]:
        return [
            (inner_r, -half_wide),
            (inner_r, half_wide),
            (major_radius, half_narrow),
            (major_radius, -half_narrow),
        ]

    groove = _helical_loft(section, pitch, length, sections_per_turn)
    # Runs past both faces so the groove opens through them
    trim = cq.Solid.makeCylinder(
        major_radius + overlap, length + 2 * overlap, cq.Vector(0, 0, -overlap), cq.Vector(0, 0, 1)
    )
    return groove.intersect(trim)
