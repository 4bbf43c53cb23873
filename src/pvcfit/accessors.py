"""
Field accessors for PipeSpec records.

Every accessor reads one attribute of a spec. Passing ``default`` returns
that value when the field is unset; passing ``update`` returns a new spec
with the field replaced and leaves the original untouched:

    od = pvc_od(spec)                 # 26.7
    bigger = pvc_od(spec, update=30)  # new PipeSpec, spec unchanged

Derived diameters (inside, socket inside/outside) are recomputed from the
spec's current fields on every call.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from .specs import DEFAULT_THREAD_LENGTH, DEFAULT_THREAD_PITCH, PipeSpec


def _field(spec: PipeSpec, name: str, default: Any, update: Any, fallback: Any = None) -> Any:
    if update is not None:
        return replace(spec, **{name: update})
    value = getattr(spec, name)
    if value is None:
        return fallback if default is None else default
    return value


def pvc_schedule(spec: PipeSpec, default: int | None = None, update: int | None = None):
    """Schedule of the spec."""
    return _field(spec, "schedule", default, update)


def pvc_name(spec: PipeSpec, default: str | None = None, update: str | None = None):
    """Nominal pipe size name, e.g. "3/4"."""
    return _field(spec, "name", default, update)


def pvc_dn(spec: PipeSpec, default: str | None = None, update: str | None = None):
    """Metric diameter name, e.g. "DN20"."""
    return _field(spec, "dn", default, update)


def pvc_od(spec: PipeSpec, default: float | None = None, update: float | None = None):
    """Outside diameter (mm)."""
    return _field(spec, "od", default, update)


def pvc_wall(spec: PipeSpec, default: float | None = None, update: float | None = None):
    """Wall thickness (mm)."""
    return _field(spec, "wall", default, update)


def pvc_tl(spec: PipeSpec, default: float | None = None, update: float | None = None):
    """Thread (engagement) length in mm; 10 when the record has none."""
    return _field(spec, "thread_length", default, update, fallback=DEFAULT_THREAD_LENGTH)


def pvc_pitch(spec: PipeSpec, default: float | None = None, update: float | None = None):
    """Thread pitch in mm; 0.940816 (27 TPI) when the record has none."""
    return _field(spec, "thread_pitch", default, update, fallback=DEFAULT_THREAD_PITCH)


# =============================================================================
# DERIVED
# =============================================================================


def pvc_id(spec: PipeSpec, default: float | None = None) -> float:
    """Inside diameter: od - 2 * wall."""
    od = pvc_od(spec)
    wall = pvc_wall(spec)
    if od is None or wall is None:
        return default
    return od - 2 * wall


def pvc_socket_id(spec: PipeSpec, default: float | None = None) -> float:
    """Inside diameter of a socket receiving this pipe (the pipe's od)."""
    od = pvc_od(spec)
    return default if od is None else od


def pvc_socket_od(spec: PipeSpec, default: float | None = None) -> float:
    """Outside diameter of a socket receiving this pipe."""
    socket_id = pvc_socket_id(spec)
    wall = pvc_wall(spec)
    if socket_id is None or wall is None:
        return default
    return socket_id + 2 * wall
