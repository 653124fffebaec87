"""Adapters implementing the core ports."""

from textclamp.adapters.flow_layout import FlowLayout
from textclamp.adapters.frame_clocks import AsyncioFrameClock, ManualFrameClock
from textclamp.adapters.grid_layout import GridLayout
from textclamp.adapters.pillow_layout import PillowLayout

__all__ = [
    "AsyncioFrameClock",
    "FlowLayout",
    "GridLayout",
    "ManualFrameClock",
    "PillowLayout",
]
