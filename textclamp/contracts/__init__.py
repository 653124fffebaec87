"""Data contracts for textclamp."""

from textclamp.contracts.common import AnimationPacing, LengthUnit, TargetKind
from textclamp.contracts.options import ClampOptions, ClampTarget
from textclamp.contracts.results import ClampReport

__all__ = [
    "AnimationPacing",
    "ClampOptions",
    "ClampReport",
    "ClampTarget",
    "LengthUnit",
    "TargetKind",
]
