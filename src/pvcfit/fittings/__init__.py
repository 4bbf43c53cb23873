"""
Fittings Module

Provides parametric PVC fittings with anchor-based mating.
"""

from .base import ANCHOR_NAMES, FittingModel, resolve_ends
from .branch import make_corner, make_cross, make_side_outlet_tee, make_six_way, make_tee, make_wye
from .closures import make_cap, make_plug
from .elbow import make_elbow
from .flange import BoltHoleOrientation, make_flange
from .reducers import check_bushing_sizes, make_adapter, make_bushing
from .straight import make_coupling, make_nipple, make_pipe
from .unsupported import make_saddle, make_side_outlet_elbow, make_union

# Fitting kind -> assembler. Adapter and bushing take two specs.
FITTING_BUILDERS = {
    "pipe": make_pipe,
    "nipple": make_nipple,
    "elbow": make_elbow,
    "tee": make_tee,
    "wye": make_wye,
    "cross": make_cross,
    "corner": make_corner,
    "side-outlet-tee": make_side_outlet_tee,
    "six-way": make_six_way,
    "coupling": make_coupling,
    "cap": make_cap,
    "plug": make_plug,
    "adapter": make_adapter,
    "bushing": make_bushing,
    "flange": make_flange,
    "side-outlet-elbow": make_side_outlet_elbow,
    "saddle": make_saddle,
    "union": make_union,
}

TWO_SPEC_KINDS = frozenset({"adapter", "bushing"})

__all__ = [
    "ANCHOR_NAMES",
    "BoltHoleOrientation",
    "FITTING_BUILDERS",
    "FittingModel",
    "TWO_SPEC_KINDS",
    "check_bushing_sizes",
    "make_adapter",
    "make_bushing",
    "make_cap",
    "make_corner",
    "make_coupling",
    "make_cross",
    "make_elbow",
    "make_flange",
    "make_nipple",
    "make_pipe",
    "make_plug",
    "make_saddle",
    "make_side_outlet_elbow",
    "make_side_outlet_tee",
    "make_six_way",
    "make_tee",
    "make_union",
    "make_wye",
    "resolve_ends",
]
