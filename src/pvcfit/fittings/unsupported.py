"""Fitting kinds that are named but not modelled."""

from __future__ import annotations

from ..errors import NotSupported


def make_side_outlet_elbow(*args, **kwargs):
    raise NotSupported("Side-outlet elbows are not supported")


def make_saddle(*args, **kwargs):
    raise NotSupported("Saddles are not supported")


def make_union(*args, **kwargs):
    raise NotSupported("Unions are not supported")
