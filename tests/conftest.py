"""Pytest configuration and fixtures for textclamp tests.

The engine is exercised against deterministic layouts instead of a real
renderer: ``CharCountLayout`` treats the container's text as a stream of
fixed-width characters with no word wrapping.
"""

from __future__ import annotations

import math
from collections.abc import Callable

import pytest
from bs4 import BeautifulSoup, Tag

from textclamp.config.settings import get_settings
from textclamp.core import clamp as clamp_module
from textclamp.core.errors import MeasurementUnavailable
from textclamp.core.ports import LayoutPort


class CharCountLayout(LayoutPort):
    """Height = ceil(chars / chars_per_line) * line_height + padding + extra."""

    def __init__(
        self,
        *,
        chars_per_line: int = 10,
        line_height: int = 20,
        padding: int = 0,
        extra_height: int = 0,
        line_clamp: bool = False,
        fail_after: int | None = None,
    ) -> None:
        self.chars_per_line = chars_per_line
        self.line_height = line_height
        self.padding = padding
        self.extra_height = extra_height
        self.line_clamp = line_clamp
        self.fail_after = fail_after
        self.measurements = 0

    def measured_height(self, element: Tag) -> float:
        self.measurements += 1
        if self.fail_after is not None and self.measurements > self.fail_after:
            raise MeasurementUnavailable("layout went away")
        lines = math.ceil(len(element.get_text()) / self.chars_per_line)
        return lines * self.line_height + self.padding + self.extra_height

    def computed_style(self, element: Tag, prop: str) -> str:
        styles = {
            "font-size": "16px",
            "line-height": f"{self.line_height}px",
            "padding-top": f"{self.padding / 2}px",
            "padding-bottom": f"{self.padding / 2}px",
        }
        return styles.get(prop, "")

    def supports_line_clamp(self) -> bool:
        return self.line_clamp


@pytest.fixture
def make_layout() -> Callable[..., CharCountLayout]:
    return CharCountLayout


@pytest.fixture
def make_container() -> Callable[..., Tag]:
    """Parse ``html`` and return its first element (or the one matching ``selector``)."""

    def _make(html: str, selector: str | None = None) -> Tag:
        soup = BeautifulSoup(html, "html.parser")
        element = soup.select_one(selector) if selector else soup.find(True)
        assert isinstance(element, Tag)
        return element

    return _make


@pytest.fixture(autouse=True)
def _isolate_state(monkeypatch: pytest.MonkeyPatch):
    """Fresh settings and no leftover in-flight runs for every test."""
    for name in (
        "TEXTCLAMP_DEFAULT_LINES",
        "TEXTCLAMP_TRUNCATION_MARKER",
        "TEXTCLAMP_BOUNDARY_PRIORITY",
        "TEXTCLAMP_PREFER_NATIVE_CLAMP",
        "TEXTCLAMP_STEP_DELAY_MS",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    clamp_module._in_flight.clear()
    yield
    get_settings.cache_clear()
    clamp_module._in_flight.clear()
