"""Exception hierarchy for the clamp engine.

Configuration problems surface immediately to the caller. Conditions that occur
while stepping (no more tokens, no more nodes) are state transitions and never
raise.
"""

from __future__ import annotations


class ClampError(Exception):
    """Base class for every error raised by textclamp."""


class InvalidTargetError(ClampError, TypeError):
    """The element handle is missing, not a tag, or not attached to a document."""


class InvalidOptionsError(ClampError, ValueError):
    """A clamp option could not be interpreted (bad target, bad pacing)."""


class ClampInProgressError(ClampError, RuntimeError):
    """A second run was requested for a container that already has one in flight."""


class MeasurementUnavailable(ClampError):
    """The layout cannot produce a height for the element (e.g. not laid out).

    Raised by layout adapters. The engine treats it as "already fits" so that a
    broken measurement never makes a run loop.
    """
