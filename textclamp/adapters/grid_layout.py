"""Character-grid layout for monospace and terminal rendering."""

from __future__ import annotations

import unicodedata

from textclamp.adapters.flow_layout import FlowLayout
from textclamp.config.settings import Settings


def display_width(text: str) -> int:
    """Number of terminal cells ``text`` occupies."""
    width = 0
    for ch in text:
        if unicodedata.combining(ch):
            continue
        east = unicodedata.east_asian_width(ch)
        if east in ("F", "W"):
            width += 2
        else:
            width += 1
    return width


class GridLayout(FlowLayout):
    """Every character is one (or, for wide glyphs, two) fixed-size cells.

    ``columns`` sets the default container width in cells; an inline ``width``
    style still wins, measured in pixels of ``cell_width_px`` each.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        columns: int | None = None,
        cell_width_px: float = 8.0,
        supports_line_clamp: bool = False,
    ) -> None:
        super().__init__(
            settings,
            width_px=columns * cell_width_px if columns is not None else None,
            supports_line_clamp=supports_line_clamp,
        )
        self._cell_width_px = cell_width_px

    def text_width(self, text: str, font_size_px: float) -> float:
        return display_width(text) * self._cell_width_px
