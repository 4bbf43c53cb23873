"""
Tunable geometry constants.

The clearances here have no physical derivation; they are the allowances
that keep mating threads and sleeves from fusing and boolean cuts from
leaving zero-thickness slivers. They can be overridden in code or loaded
from YAML:

    thread_clearance: 1.0
    socket_wall_ratio: 0.3333
    socket_overlap: 2.0
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml


@dataclass(frozen=True)
class GeometryConfig:
    """
    Geometry allowances used by the endpoint and fitting builders.

    Attributes:
        thread_clearance: Subtracted from the male thread's bore diameter
            (mm), leaving a core of half this thickness under the thread root.
        socket_wall_ratio: Socket sleeve wall as a fraction of the spec wall.
        socket_overlap: Length (mm) a socket sleeve extends back over the
            adjoining segment. ``None`` uses the spec's wall thickness.
        thread_bevel: Chamfer the thread crest at the connection face.
        sections_per_turn: Loft sections per helix turn for thread solids.
        cutter_overlap: Radial overlap (mm) of thread solids into the
            material they are fused with or cut from.
        core_sphere: Fill multi-leg junctions with a sphere.
    """

    thread_clearance: float = 1.0
    socket_wall_ratio: float = 1.0 / 3.0
    socket_overlap: float | None = None
    thread_bevel: bool = True
    sections_per_turn: int = 36
    cutter_overlap: float = 0.3
    core_sphere: bool = True

    def __post_init__(self):
        if self.thread_clearance < 0:
            raise ValueError(f"thread_clearance must be >= 0, got {self.thread_clearance}")
        if not 0 < self.socket_wall_ratio <= 1:
            raise ValueError(f"socket_wall_ratio must be in (0, 1], got {self.socket_wall_ratio}")
        if self.socket_overlap is not None and self.socket_overlap < 0:
            raise ValueError(f"socket_overlap must be >= 0, got {self.socket_overlap}")
        if self.sections_per_turn < 4:
            raise ValueError(f"sections_per_turn must be >= 4, got {self.sections_per_turn}")

    def overlap_for(self, wall: float) -> float:
        """Socket overlap for a spec with the given wall thickness."""
        return wall if self.socket_overlap is None else self.socket_overlap

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GeometryConfig:
        names = {f.name for f in fields(cls)}
        unknown = set(data) - names
        if unknown:
            raise ValueError(f"Unknown geometry setting(s): {sorted(unknown)}. Valid: {sorted(names)}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> GeometryConfig:
        """Load a geometry configuration from a YAML file."""
        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    def to_yaml(self, yaml_path: str | Path) -> None:
        """Save the geometry configuration to a YAML file."""
        with open(yaml_path, "w") as f:
            yaml.dump(asdict(self), f, default_flow_style=False, sort_keys=False)


DEFAULT_CONFIG = GeometryConfig()
