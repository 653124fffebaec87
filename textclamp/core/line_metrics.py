"""Line-height and target arithmetic on top of a :class:`LayoutPort`.

These are thin measurement wrappers: they read computed styles and the
rendered height from the layout and turn clamp targets into line counts and
pixel budgets.
"""

from __future__ import annotations

import math
import re

from bs4 import Tag

from textclamp.contracts.common import LengthUnit, TargetKind
from textclamp.contracts.options import ClampTarget
from textclamp.core.dom import owner_document
from textclamp.core.ports import LayoutPort

_NUMBER_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+))")

NORMAL_LINE_HEIGHT_FACTOR = 1.2


def parse_px(value: str | None, default: float = 0.0) -> float:
    """Leading number of a CSS length (``"12.5px"`` -> 12.5)."""
    if not value:
        return default
    match = _NUMBER_RE.match(value)
    return float(match.group(1)) if match else default


def line_height(layout: LayoutPort, element: Tag, normal_factor: float = NORMAL_LINE_HEIGHT_FACTOR) -> int:
    """Line height of ``element`` in whole pixels.

    ``normal`` is approximated as ``normal_factor`` times the font size; unitless
    values are multiples of the font size.
    """
    raw = (layout.computed_style(element, "line-height") or "normal").strip().lower()
    if raw == "normal":
        height = layout.computed_font_size_px(element) * normal_factor
    elif raw.endswith("px"):
        height = parse_px(raw)
    elif raw.endswith("em"):
        height = parse_px(raw) * layout.computed_font_size_px(element)
    elif raw.endswith("%"):
        height = parse_px(raw) / 100 * layout.computed_font_size_px(element)
    else:
        height = parse_px(raw) * layout.computed_font_size_px(element)
    return math.ceil(height)


def vertical_padding(layout: LayoutPort, element: Tag) -> int:
    top = parse_px(layout.computed_style(element, "padding-top"))
    bottom = parse_px(layout.computed_style(element, "padding-bottom"))
    return math.ceil(top + bottom)


def max_lines(layout: LayoutPort, element: Tag, height: float | None = None) -> int:
    """Number of whole lines that fit in ``height`` (default: current height)."""
    available = layout.measured_height(element) if height is None else height
    per_line = line_height(layout, element)
    if per_line <= 0:
        return 0
    return max(math.floor((available - vertical_padding(layout, element)) / per_line), 0)


def max_height(layout: LayoutPort, element: Tag, lines: int) -> int:
    """Pixel height of ``lines`` lines plus the element's vertical padding."""
    return line_height(layout, element) * lines + vertical_padding(layout, element)


def resolve_target(layout: LayoutPort, element: Tag, target: ClampTarget) -> tuple[int, str | None]:
    """Turn a clamp target into ``(lines, css_height)``.

    ``css_height`` is the original CSS text for height targets (it is written
    to the element by the native path) and None otherwise.
    """
    if target.kind is TargetKind.AUTO:
        return max_lines(layout, element), None
    if target.kind is TargetKind.LINES:
        return int(target.value or 0), None

    value = float(target.value or 0)
    if target.unit is LengthUnit.PX:
        pixels = value
    elif target.unit is LengthUnit.EM:
        pixels = round(value * layout.computed_font_size_px(element))
    else:
        pixels = round(value * root_font_size_px(layout, element))
    return max_lines(layout, element, pixels), target.css()


def root_font_size_px(layout: LayoutPort, element: Tag) -> float:
    """Font size of the document's root element (for ``rem``)."""
    document = owner_document(element)
    root = document.find(True) if document is not None else None
    return layout.computed_font_size_px(root if isinstance(root, Tag) else element)
