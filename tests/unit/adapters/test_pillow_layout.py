"""Pillow-backed layout using the bundled default font."""

from __future__ import annotations

from bs4 import BeautifulSoup

from textclamp.adapters.pillow_layout import PillowLayout
from textclamp.config.settings import Settings
from textclamp.core.clamp import clamp

LOREM = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit. Sed do eiusmod "
    "tempor incididunt ut labore et dolore magna aliqua."
)


def _p(text: str, style: str = "line-height: 20px"):
    return BeautifulSoup(f'<p style="{style}">{text}</p>', "html.parser").p


def test_text_width_grows_with_text_and_size() -> None:
    layout = PillowLayout()

    assert layout.text_width("", 16) == 0
    assert layout.text_width("ab", 16) > layout.text_width("a", 16)
    assert layout.text_width("abc", 32) > layout.text_width("abc", 16)


def test_fonts_are_cached_per_size() -> None:
    layout = PillowLayout()

    assert layout._font(16) is layout._font(16)
    assert layout._font(16) is not layout._font(20)


def test_font_path_defaults_to_settings() -> None:
    layout = PillowLayout(Settings(font_path="/fonts/Inter.ttf"))

    assert layout._font_path == "/fonts/Inter.ttf"


def test_short_text_is_one_line() -> None:
    assert PillowLayout(width_px=300).measured_height(_p("hi")) == 20


def test_narrow_container_wraps() -> None:
    layout = PillowLayout(width_px=120)
    p = _p(LOREM)

    lines = layout.render_lines(p)

    assert len(lines) > 2
    assert all(layout.text_width(line, 16) <= 120 for line in lines)
    assert layout.measured_height(p) == 20 * len(lines)


def test_clamp_with_real_font_metrics() -> None:
    layout = PillowLayout(width_px=120)
    p = _p(LOREM)

    run = clamp(p, 2, layout=layout)

    assert run.report.truncated
    assert run.report.applied_height_px <= 40
    assert len(layout.render_lines(p)) <= 2
    assert p.get_text().endswith("…")
