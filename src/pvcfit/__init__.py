"""
pvcfit

Parametric PVC pipe fittings: look up a pipe spec, build a fitting with the
connection ends you need, and mate fittings into assemblies by their anchors.
"""

from .accessors import (
    pvc_dn,
    pvc_id,
    pvc_name,
    pvc_od,
    pvc_pitch,
    pvc_schedule,
    pvc_socket_id,
    pvc_socket_od,
    pvc_tl,
    pvc_wall,
)
from .anchors import DIRECTIONS, NamedAnchor, compute_mate_transform
from .assembly import Assembly
from .components import PartComponent, make_part_component
from .config import DEFAULT_CONFIG, GeometryConfig
from .endpoints import Endpoint, EndpointType, make_endpoint
from .errors import (
    AmbiguousMatch,
    IncompatibleSizes,
    InvalidEndpointForPart,
    InvalidSchedule,
    MissingSelector,
    NegativeLength,
    NoMatch,
    NotSupported,
    PvcFitError,
    UnknownEndpointType,
)
from .fittings import (
    FITTING_BUILDERS,
    FittingModel,
    make_adapter,
    make_bushing,
    make_cap,
    make_corner,
    make_coupling,
    make_cross,
    make_elbow,
    make_flange,
    make_nipple,
    make_pipe,
    make_plug,
    make_saddle,
    make_side_outlet_elbow,
    make_side_outlet_tee,
    make_six_way,
    make_tee,
    make_union,
    make_wye,
)
from .specs import DEFAULT_TABLE, PIPE_SPECS, SCHEDULES, PipeSpec, SpecTable, available_names, lookup_spec

__version__ = "0.1.0"
