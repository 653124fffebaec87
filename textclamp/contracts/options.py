"""
Clamp option contracts.

``ClampOptions`` is the fully resolved, immutable record the engine consumes.
Raw caller input (a bare number, a string such as ``"3em"`` or a mapping) is
normalized by :mod:`textclamp.core.resolver`; the validators here accept the
same shapes so a model can also be built directly.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from textclamp.contracts.common import AnimationPacing, LengthUnit, TargetKind

_LENGTH_RE = re.compile(r"^\s*(?P<value>[+-]?(?:\d+\.?\d*|\.\d+))\s*(?P<unit>px|em|rem)?\s*$")


class ClampTarget(BaseModel):
    """A line count, a CSS height, or ``auto``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: TargetKind
    value: float | None = Field(default=None, description="Lines or length magnitude")
    unit: LengthUnit | None = Field(default=None, description="Unit for height targets")

    @model_validator(mode="after")
    def _check_shape(self) -> ClampTarget:
        if self.kind is TargetKind.AUTO:
            if self.value is not None or self.unit is not None:
                raise ValueError("auto target takes no value")
            return self
        if self.value is None or self.value <= 0:
            raise ValueError(f"{self.kind.value} target must be positive, got {self.value!r}")
        if self.kind is TargetKind.LINES:
            if self.unit is not None:
                raise ValueError("line targets take no unit")
            if int(self.value) != self.value:
                raise ValueError(f"line target must be a whole number, got {self.value!r}")
        elif self.unit is None:
            raise ValueError("height targets need a unit")
        return self

    @classmethod
    def parse(cls, raw: Any) -> ClampTarget:
        """Interpret ``3``, ``"auto"``, ``"40px"``, ``"2.5em"``, ``"1rem"`` or ``"40"``.

        A bare numeric string is a pixel height, matching how the value reads
        inside a style attribute.
        """
        if isinstance(raw, ClampTarget):
            return raw
        if isinstance(raw, bool):
            raise ValueError("clamp target cannot be a boolean")
        if isinstance(raw, int):
            return cls(kind=TargetKind.LINES, value=raw)
        if isinstance(raw, float):
            if raw.is_integer():
                return cls(kind=TargetKind.LINES, value=raw)
            raise ValueError(f"line target must be a whole number, got {raw!r}")
        if isinstance(raw, str):
            if raw.strip().lower() == "auto":
                return cls(kind=TargetKind.AUTO)
            match = _LENGTH_RE.match(raw.lower())
            if not match:
                raise ValueError(f"unrecognized clamp target {raw!r}")
            unit = LengthUnit(match.group("unit") or "px")
            return cls(kind=TargetKind.HEIGHT, value=float(match.group("value")), unit=unit)
        raise ValueError(f"unsupported clamp target type {type(raw).__name__}")

    @property
    def lines(self) -> int | None:
        if self.kind is TargetKind.LINES and self.value is not None:
            return int(self.value)
        return None

    def css(self) -> str | None:
        """CSS text for height targets, e.g. ``"40px"``."""
        if self.kind is not TargetKind.HEIGHT or self.value is None or self.unit is None:
            return None
        magnitude = int(self.value) if self.value.is_integer() else self.value
        return f"{magnitude}{self.unit.value}"


class ClampOptions(BaseModel):
    """Fully populated clamp options."""

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    clamp: ClampTarget = Field(
        default_factory=lambda: ClampTarget(kind=TargetKind.LINES, value=2),
        description="Line count, CSS height or auto",
    )
    prefer_native_clamp: bool = Field(
        default=True, description="Use the style engine's line clamp when it is available"
    )
    boundary_priority: tuple[str, ...] = Field(
        default=(".", "-", "–", "—", " "),
        description="Split tokens, highest priority first",
    )
    animation: AnimationPacing = Field(default=AnimationPacing.OFF)
    step_delay_ms: float = Field(default=16.6, gt=0, description="Delay between timed steps")
    truncation_marker: str = Field(default="…", description="Text appended at the cut point")
    truncation_markup: str = Field(
        default="", description="HTML inserted before the marker; disables native clamping"
    )
    on_complete: Callable[[Any, int, float | None], Any] | None = Field(
        default=None, description="Called with (element, applied_lines, applied_height_px)"
    )

    @field_validator("clamp", mode="before")
    @classmethod
    def _parse_clamp(cls, value: Any) -> ClampTarget:
        return ClampTarget.parse(value)

    @field_validator("boundary_priority", mode="before")
    @classmethod
    def _coerce_boundaries(cls, value: Any) -> Any:
        if isinstance(value, str):
            # A plain string is a single token, not a list of characters.
            return (value,)
        return value

    @field_validator("truncation_markup", mode="before")
    @classmethod
    def _none_markup(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def uses_markup(self) -> bool:
        return bool(self.truncation_markup)
