"""Line-flow layout shared by the concrete layout adapters.

A deliberately small box model: one font per container, inline CSS only,
font properties inherited from ancestors, ``<br>`` and block-level children
break lines, greedy word wrap with long words broken by character. Subclasses
only decide how wide a run of text is.
"""

from __future__ import annotations

import logging
import math
import re
from abc import abstractmethod

from bs4 import PageElement, Tag

from textclamp.config.settings import Settings, get_settings
from textclamp.core.dom import is_text_node, owner_document, parse_style
from textclamp.core.errors import MeasurementUnavailable
from textclamp.core.line_metrics import parse_px
from textclamp.core.ports import LayoutPort

logger = logging.getLogger(__name__)

BLOCK_TAGS = frozenset(
    {
        "address", "article", "aside", "blockquote", "dd", "div", "dl", "dt",
        "figcaption", "figure", "footer", "h1", "h2", "h3", "h4", "h5", "h6",
        "header", "hr", "li", "main", "nav", "ol", "p", "pre", "section",
        "table", "tr", "ul",
    }
)
HIDDEN_TAGS = frozenset({"head", "script", "style", "template", "title"})
INHERITED = frozenset({"font-size", "line-height", "font-family"})

_WHITESPACE_RE = re.compile(r"\s+")
_BREAK = "\n"


class FlowLayout(LayoutPort):
    """Measures containers by flowing their text into lines."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        width_px: float | None = None,
        supports_line_clamp: bool = False,
    ) -> None:
        self._settings = settings or get_settings()
        self._width_px = width_px
        self._line_clamp = supports_line_clamp

    @abstractmethod
    def text_width(self, text: str, font_size_px: float) -> float:
        """Advance width of ``text`` in pixels."""
        pass

    def supports_line_clamp(self) -> bool:
        return self._line_clamp

    def computed_style(self, element: Tag, prop: str) -> str:
        prop = prop.lower()
        if prop == "font-size":
            return f"{self._font_size(element):g}px"
        if prop == "line-height":
            return f"{self._line_height(element):g}px"
        if prop.startswith("padding-"):
            return f"{self._padding(element, prop.removeprefix('padding-')):g}px"
        if prop == "width":
            return f"{self._content_box_width(element) + self._horizontal_padding(element):g}px"
        return self._declared(element, prop) or ""

    def measured_height(self, element: Tag) -> float:
        if owner_document(element) is None:
            raise MeasurementUnavailable("element is not attached to a document")
        style = parse_style(element)
        if style.get("display", "").strip() == "none":
            raise MeasurementUnavailable("element is not rendered (display: none)")

        lines = len(self.render_lines(element))
        clamp = style.get("-webkit-line-clamp")
        if self._line_clamp and clamp and clamp.strip().isdigit():
            lines = min(lines, int(clamp))
        padding = self._padding(element, "top") + self._padding(element, "bottom")
        return lines * self._line_height(element) + padding

    def render_lines(self, element: Tag) -> list[str]:
        """The container's text as it would wrap, one string per line."""
        font_size = self._font_size(element)
        width = self._content_box_width(element)
        lines: list[str] = []
        for paragraph in self._paragraphs(element):
            lines.extend(self._wrap(paragraph, width, font_size))
        return lines

    # -- text flow -----------------------------------------------------------

    def _paragraphs(self, element: Tag) -> list[str]:
        pieces: list[str] = []
        self._collect(element, pieces)
        paragraphs = []
        for chunk in "".join(pieces).split(_BREAK):
            text = _WHITESPACE_RE.sub(" ", chunk).strip()
            if text:
                paragraphs.append(text)
        return paragraphs

    def _collect(self, node: Tag, pieces: list[str]) -> None:
        for child in node.children:
            if is_text_node(child):
                pieces.append(_WHITESPACE_RE.sub(" ", str(child)))
                continue
            if not isinstance(child, Tag) or _is_hidden(child):
                continue
            if child.name == "br":
                pieces.append(_BREAK)
                continue
            block = child.name in BLOCK_TAGS
            if block:
                pieces.append(_BREAK)
            self._collect(child, pieces)
            if block:
                pieces.append(_BREAK)

    def _wrap(self, text: str, width: float, font_size: float) -> list[str]:
        lines: list[str] = []
        line = ""
        for word in text.split(" "):
            candidate = f"{line} {word}" if line else word
            if self.text_width(candidate, font_size) <= width:
                line = candidate
                continue
            if line:
                lines.append(line)
            line = word
            while len(line) > 1 and self.text_width(line, font_size) > width:
                head, line = self._break_word(line, width, font_size)
                lines.append(head)
        if line:
            lines.append(line)
        return lines

    def _break_word(self, word: str, width: float, font_size: float) -> tuple[str, str]:
        cut = 1
        while cut < len(word) and self.text_width(word[: cut + 1], font_size) <= width:
            cut += 1
        return word[:cut], word[cut:]

    # -- styles --------------------------------------------------------------

    def _declared(self, element: Tag, prop: str) -> str | None:
        node: PageElement | None = element
        while isinstance(node, Tag):
            value = parse_style(node).get(prop)
            if value:
                return value
            if prop not in INHERITED:
                return None
            node = node.parent
        return None

    def _font_size(self, element: Tag | None) -> float:
        if not isinstance(element, Tag) or element.name == "[document]":
            return self._settings.fallback_font_size_px
        raw = parse_style(element).get("font-size", "").strip().lower()
        parent_size = self._font_size(element.parent)
        if not raw:
            return parent_size
        if raw.endswith("rem"):
            return parse_px(raw) * self._settings.fallback_font_size_px
        if raw.endswith("em"):
            return parse_px(raw) * parent_size
        if raw.endswith("%"):
            return parse_px(raw) / 100 * parent_size
        return parse_px(raw, parent_size)

    def _line_height(self, element: Tag) -> float:
        raw = (self._declared(element, "line-height") or "normal").strip().lower()
        font_size = self._font_size(element)
        if raw == "normal":
            return math.ceil(font_size * self._settings.normal_line_height_factor)
        if raw.endswith("px"):
            return parse_px(raw)
        if raw.endswith("%"):
            return parse_px(raw) / 100 * font_size
        # em and unitless values scale with the font size
        return parse_px(raw) * font_size

    def _padding(self, element: Tag, side: str) -> float:
        style = parse_style(element)
        if f"padding-{side}" in style:
            return self._length(element, style[f"padding-{side}"])
        shorthand = style.get("padding")
        if not shorthand:
            return 0.0
        values = shorthand.split()
        # top, right, bottom, left with the usual CSS fill-in rules
        expanded = {
            1: lambda v: (v[0], v[0], v[0], v[0]),
            2: lambda v: (v[0], v[1], v[0], v[1]),
            3: lambda v: (v[0], v[1], v[2], v[1]),
            4: lambda v: (v[0], v[1], v[2], v[3]),
        }.get(len(values))
        if expanded is None:
            logger.debug("ignoring malformed padding %r", shorthand)
            return 0.0
        index = {"top": 0, "right": 1, "bottom": 2, "left": 3}[side]
        return self._length(element, expanded(values)[index])

    def _horizontal_padding(self, element: Tag) -> float:
        return self._padding(element, "left") + self._padding(element, "right")

    def _content_box_width(self, element: Tag) -> float:
        declared = parse_style(element).get("width")
        if declared:
            outer = self._length(element, declared)
        elif self._width_px is not None:
            outer = self._width_px
        else:
            outer = self._settings.default_width_px
        return max(outer - self._horizontal_padding(element), 0.0)

    def _length(self, element: Tag, raw: str) -> float:
        raw = raw.strip().lower()
        if raw.endswith("rem"):
            return parse_px(raw) * self._settings.fallback_font_size_px
        if raw.endswith("em"):
            return parse_px(raw) * self._font_size(element)
        return parse_px(raw)


def _is_hidden(element: Tag) -> bool:
    return element.name in HIDDEN_TAGS or parse_style(element).get("display", "").strip() == "none"
