"""Font-metric layout backed by Pillow."""

from __future__ import annotations

import logging

from PIL import ImageFont

from textclamp.adapters.flow_layout import FlowLayout
from textclamp.config.settings import Settings

logger = logging.getLogger(__name__)


class PillowLayout(FlowLayout):
    """Measures text with a real font through ``ImageFont.getlength``.

    Without a font path Pillow's bundled default font is used, scaled to the
    container's font size.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        font_path: str | None = None,
        width_px: float | None = None,
        supports_line_clamp: bool = False,
    ) -> None:
        super().__init__(settings, width_px=width_px, supports_line_clamp=supports_line_clamp)
        self._font_path = font_path or self._settings.font_path
        self._fonts: dict[float, ImageFont.FreeTypeFont | ImageFont.ImageFont] = {}

    def text_width(self, text: str, font_size_px: float) -> float:
        return float(self._font(font_size_px).getlength(text))

    def _font(self, size: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
        font = self._fonts.get(size)
        if font is None:
            if self._font_path:
                font = ImageFont.truetype(self._font_path, size=size)
            else:
                font = ImageFont.load_default(size=size)
            logger.debug("loaded font %s at %gpx", self._font_path or "<default>", size)
            self._fonts[size] = font
        return font
