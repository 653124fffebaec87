"""Style-engine line clamping, used instead of truncation when possible."""

from __future__ import annotations

import logging

from bs4 import Tag

from textclamp.contracts.options import ClampOptions
from textclamp.core.dom import update_style
from textclamp.core.ports import LayoutPort

logger = logging.getLogger(__name__)


def native_clamp_applicable(layout: LayoutPort, options: ClampOptions) -> bool:
    """Native clamping can't host markup at the cut point."""
    return options.prefer_native_clamp and not options.uses_markup and layout.supports_line_clamp()


def apply_native_clamp(element: Tag, lines: int, css_height: str | None = None) -> None:
    """Write the line-clamp styling onto ``element``; no text is measured."""
    styles = {
        "overflow": "hidden",
        "text-overflow": "ellipsis",
        "-webkit-box-orient": "vertical",
        "display": "-webkit-box",
        "-webkit-line-clamp": str(lines),
    }
    if css_height:
        styles["height"] = css_height
    update_style(element, styles)
    logger.debug("applied native line clamp of %d lines", lines)
