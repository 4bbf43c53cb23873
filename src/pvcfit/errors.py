"""
Exceptions raised by pvcfit.

Every error is raised synchronously at call time and names the offending
argument. All of them are ``ValueError`` subclasses so code that guards
generator calls with ``except ValueError`` keeps working.
"""

from __future__ import annotations


class PvcFitError(ValueError):
    """Base class for all pvcfit input errors."""


# =============================================================================
# SPECIFICATION LOOKUP
# =============================================================================


class InvalidSchedule(PvcFitError):
    """The requested schedule is not one of the known schedules."""


class MissingSelector(PvcFitError):
    """A lookup was made with a schedule but no selector field."""


class NoMatch(PvcFitError):
    """No specification row matches the schedule and selectors."""


class AmbiguousMatch(PvcFitError):
    """More than one specification row matches; add selectors."""


# =============================================================================
# GEOMETRY
# =============================================================================


class UnknownEndpointType(PvcFitError):
    """The endpoint type is not one of the EndpointType values."""


class NegativeLength(PvcFitError):
    """A segment or endpoint length below zero was requested."""


class InvalidEndpointForPart(PvcFitError):
    """An endpoint type outside the subset a part accepts."""


class IncompatibleSizes(PvcFitError):
    """Two specifications cannot be combined into the requested part."""


class NotSupported(PvcFitError, NotImplementedError):
    """The part is reserved but not implemented."""
