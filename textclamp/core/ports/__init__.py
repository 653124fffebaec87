"""Port interfaces for hexagonal architecture.

These ports define the contracts between the clamp engine and the environment
that renders the container. The engine never measures text itself; every
height, style lookup and timer goes through one of these interfaces so the core
can run against deterministic fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bs4 import Tag

__all__ = [
    "LayoutPort",
    "FrameClockPort",
]


class LayoutPort(ABC):
    """Port for rendered-layout queries."""

    @abstractmethod
    def measured_height(self, element: Tag) -> float:
        """Rendered height of ``element`` in pixels, padding included.

        Raises:
            MeasurementUnavailable: when the element cannot be laid out.
        """
        pass

    @abstractmethod
    def computed_style(self, element: Tag, prop: str) -> str:
        """Resolved value of a CSS property (e.g. ``"16px"``, ``"normal"``)."""
        pass

    def computed_font_size_px(self, element: Tag) -> float:
        """Font size of ``element`` in pixels."""
        return float(self.computed_style(element, "font-size").removesuffix("px"))

    def supports_line_clamp(self) -> bool:
        """Whether the style engine honours ``-webkit-line-clamp``."""
        return False


class FrameClockPort(ABC):
    """Port for deferring work between truncation steps."""

    @abstractmethod
    def call_later(self, delay_s: float, callback: Callable[[], None]) -> None:
        """Run ``callback`` once after ``delay_s`` seconds."""
        pass

    def request_frame(self, callback: Callable[[], None]) -> bool:
        """Run ``callback`` before the next display frame.

        Returns False when the environment has no frame callbacks, in which
        case the callback was not scheduled.
        """
        return False
