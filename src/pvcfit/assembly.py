"""
Assemblies of fittings placed by mating anchors.

Example:
    asm = Assembly()
    asm.add("tee", make_tee(spec))
    asm.attach("run", make_pipe(spec, 200), "A", to=("tee", "B"))
    asm.attach("cap", make_cap(spec), "A", to=("run", "B"))
    asm.export("manifold.step")
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from pathlib import Path

import cadquery as cq
import numpy as np

from .anchors import NamedAnchor, compute_mate_transform, identity_matrix
from .endpoints import EndpointType
from .fittings.base import ANCHOR_NAMES, FittingModel

# Endpoint type -> the types it mates with
MATING_ENDS: dict[EndpointType, frozenset[EndpointType]] = {
    EndpointType.SPIGOT: frozenset({EndpointType.SOCKET, EndpointType.INNER_SPIGOT}),
    EndpointType.INNER_SPIGOT: frozenset({EndpointType.SPIGOT}),
    EndpointType.SOCKET: frozenset({EndpointType.SPIGOT}),
    EndpointType.MALE_THREAD: frozenset({EndpointType.FEMALE_THREAD}),
    EndpointType.FEMALE_THREAD: frozenset({EndpointType.MALE_THREAD}),
}


def anchor_end_type(fitting: FittingModel, anchor: str) -> EndpointType | None:
    """Endpoint type behind an anchor, or None for non-connection anchors."""
    index = ANCHOR_NAMES.find(anchor)
    if 0 <= index < len(fitting.ends):
        return fitting.ends[index]
    return None


@dataclass
class PlacedFitting:
    """A fitting and its world transform."""

    fitting: FittingModel
    transform: np.ndarray

    @property
    def shape(self) -> cq.Shape:
        return self.fitting.shape_at(self.transform)


@dataclass
class Assembly:
    """Named fittings positioned in one world frame."""

    placed: dict[str, PlacedFitting] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.placed)

    def __contains__(self, name: str) -> bool:
        return name in self.placed

    def _check_new(self, name: str) -> None:
        if name in self.placed:
            raise ValueError(f"A fitting named '{name}' is already in the assembly")

    def get(self, name: str) -> PlacedFitting:
        if name not in self.placed:
            raise ValueError(f"Fitting '{name}' not found. Available: {list(self.placed.keys())}")
        return self.placed[name]

    def add(self, name: str, fitting: FittingModel, transform: np.ndarray | None = None) -> Assembly:
        """Place a fitting at an explicit world transform (identity by default)."""
        self._check_new(name)
        T = identity_matrix() if transform is None else np.asarray(transform, dtype=float)
        self.placed[name] = PlacedFitting(fitting, T)
        return self

    def attach(
        self,
        name: str,
        fitting: FittingModel,
        anchor: str,
        to: tuple[str, str],
        gap: float = 0.0,
    ) -> Assembly:
        """
        Place a fitting so its ``anchor`` mates with an anchor already placed.

        Args:
            name: Name for the new fitting
            fitting: The fitting to place
            anchor: Anchor on the new fitting
            to: (placed fitting name, anchor name) to mate with
            gap: Distance between the two faces along the connection axis

        Returns:
            Self for method chaining
        """
        self._check_new(name)
        target_name, target_anchor = to
        target = self.get(target_name)

        ours = anchor_end_type(fitting, anchor)
        theirs = anchor_end_type(target.fitting, target_anchor)
        if ours is not None and theirs is not None and theirs not in MATING_ENDS[ours]:
            warnings.warn(
                f"Mating a {ours} end ({name}.{anchor}) with a {theirs} end "
                f"({target_name}.{target_anchor})",
                stacklevel=2,
            )

        T = compute_mate_transform(
            target.fitting.get_anchor(target_anchor),
            fitting.get_anchor(anchor),
            target.transform,
            gap,
        )
        self.placed[name] = PlacedFitting(fitting, T)
        return self

    def world_anchor(self, name: str, anchor: str) -> NamedAnchor:
        """An anchor of a placed fitting in world coordinates."""
        placed = self.get(name)
        return placed.fitting.anchor_at(anchor, placed.transform)

    def shapes(self) -> list[cq.Shape]:
        return [placed.shape for placed in self.placed.values()]

    def to_compound(self) -> cq.Compound:
        """All placed fittings as one compound."""
        if not self.placed:
            raise ValueError("Assembly is empty")
        return cq.Compound.makeCompound(self.shapes())

    def export(self, filename: str | Path) -> None:
        """Export the assembly to a STEP (or any CadQuery-supported) file."""
        cq.exporters.export(self.to_compound(), str(filename))
