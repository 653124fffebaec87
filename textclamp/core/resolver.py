"""Normalize raw clamp arguments into :class:`ClampOptions`."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from bs4 import Tag
from pydantic import ValidationError

from textclamp.config.settings import Settings, get_settings
from textclamp.contracts.common import AnimationPacing
from textclamp.contracts.options import ClampOptions
from textclamp.core.dom import owner_document
from textclamp.core.errors import InvalidOptionsError, InvalidTargetError

# Keys accepted from callers in addition to the model's field names.
_ALIASES = {
    "useNativeClamp": "prefer_native_clamp",
    "use_native_clamp": "prefer_native_clamp",
    "splitOnChars": "boundary_priority",
    "split_on_chars": "boundary_priority",
    "animate": "animation",
    "truncationChar": "truncation_marker",
    "truncation_char": "truncation_marker",
    "truncationHTML": "truncation_markup",
    "truncation_html": "truncation_markup",
    "onComplete": "on_complete",
}


def ensure_target(element: Any) -> Tag:
    """Reject missing, non-element or detached targets."""
    if element is None:
        raise InvalidTargetError("invalid element: none given")
    if not isinstance(element, Tag):
        raise InvalidTargetError(f"invalid element: expected a Tag, got {type(element).__name__}")
    if owner_document(element) is None:
        raise InvalidTargetError("invalid element: not attached to a document")
    return element


def resolve_options(
    element: Any,
    options: int | float | str | Mapping[str, Any] | ClampOptions | None = None,
    *,
    settings: Settings | None = None,
) -> ClampOptions:
    """Validate ``element`` and return fully populated options.

    A bare number or string is a clamp target. Fields left unspecified get the
    configured defaults; an explicitly empty boundary list is kept as is.

    Raises:
        InvalidTargetError: ``element`` is unusable.
        InvalidOptionsError: an option value cannot be interpreted.
    """
    ensure_target(element)
    if isinstance(options, ClampOptions):
        return options

    settings = settings or get_settings()
    if options is None:
        raw: dict[str, Any] = {}
    elif isinstance(options, (int, float, str)) and not isinstance(options, bool):
        raw = {"clamp": options}
    elif isinstance(options, Mapping):
        raw = {_ALIASES.get(key, key): value for key, value in options.items()}
    else:
        raise InvalidOptionsError(f"unsupported options type {type(options).__name__}")

    values: dict[str, Any] = {
        "clamp": settings.default_clamp_lines,
        "prefer_native_clamp": settings.prefer_native_clamp,
        "boundary_priority": settings.boundary_priority,
        "truncation_marker": settings.truncation_marker,
        "step_delay_ms": settings.step_delay_ms,
    }
    for key, value in raw.items():
        # None means "not specified"; an empty boundary list is a real value.
        if value is None and key != "on_complete":
            continue
        values[key] = value

    if "animation" in raw:
        values["animation"], delay = _pacing(raw["animation"])
        if delay is not None:
            values["step_delay_ms"] = delay

    try:
        return ClampOptions(**values)
    except ValidationError as exc:
        raise InvalidOptionsError(str(exc)) from exc


def _pacing(value: Any) -> tuple[AnimationPacing, float | None]:
    """``False`` -> off, ``True`` -> frames, a number -> timed with that delay (ms)."""
    if value is None or value is False:
        return AnimationPacing.OFF, None
    if value is True:
        return AnimationPacing.FRAME, None
    if isinstance(value, AnimationPacing):
        return value, None
    if isinstance(value, (int, float)):
        if value <= 0:
            raise InvalidOptionsError(f"animation delay must be positive, got {value!r}")
        return AnimationPacing.TIMED, float(value)
    if isinstance(value, str):
        try:
            return AnimationPacing(value.lower()), None
        except ValueError as exc:
            raise InvalidOptionsError(f"unknown animation pacing {value!r}") from exc
    raise InvalidOptionsError(f"unsupported animation value {value!r}")
