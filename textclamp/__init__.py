"""textclamp: fit an element's text into a number of lines or a height.

Usage:
    >>> from bs4 import BeautifulSoup
    >>> from textclamp import GridLayout, clamp
    >>> soup = BeautifulSoup('<p style="line-height: 20px">Long text ...</p>', "html.parser")
    >>> run = clamp(soup.p, 2, layout=GridLayout(columns=40))
"""

from textclamp.adapters import AsyncioFrameClock, GridLayout, ManualFrameClock, PillowLayout
from textclamp.contracts import AnimationPacing, ClampOptions, ClampReport, ClampTarget
from textclamp.core.clamp import ClampRun, clamp
from textclamp.core.errors import (
    ClampError,
    ClampInProgressError,
    InvalidOptionsError,
    InvalidTargetError,
    MeasurementUnavailable,
)
from textclamp.core.ports import FrameClockPort, LayoutPort

__version__ = "0.1.0"

__all__ = [
    "AnimationPacing",
    "AsyncioFrameClock",
    "ClampError",
    "ClampInProgressError",
    "ClampOptions",
    "ClampReport",
    "ClampRun",
    "ClampTarget",
    "FrameClockPort",
    "GridLayout",
    "InvalidOptionsError",
    "InvalidTargetError",
    "LayoutPort",
    "ManualFrameClock",
    "MeasurementUnavailable",
    "PillowLayout",
    "clamp",
]
