"""
Common enums shared by the clamp contracts.
All models use Pydantic V2.
"""

from enum import Enum


class AnimationPacing(str, Enum):
    """How successive truncation steps are paced."""

    OFF = "off"  # every step runs synchronously
    TIMED = "timed"  # one step per fixed delay
    FRAME = "frame"  # one step per display frame, timer fallback


class TargetKind(str, Enum):
    """What a clamp target measures."""

    LINES = "lines"
    HEIGHT = "height"
    AUTO = "auto"


class LengthUnit(str, Enum):
    """CSS length units accepted for height targets."""

    PX = "px"
    EM = "em"
    REM = "rem"
