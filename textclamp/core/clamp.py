"""Public entry point: clamp a container to a number of lines or a height."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from bs4 import Tag

from textclamp.adapters.frame_clocks import AsyncioFrameClock
from textclamp.config.settings import Settings
from textclamp.contracts.common import AnimationPacing
from textclamp.contracts.options import ClampOptions
from textclamp.contracts.results import ClampReport
from textclamp.core.errors import ClampInProgressError, MeasurementUnavailable
from textclamp.core.line_metrics import max_height, max_lines, resolve_target
from textclamp.core.native_clamp import apply_native_clamp, native_clamp_applicable
from textclamp.core.observability import traced
from textclamp.core.ports import FrameClockPort, LayoutPort
from textclamp.core.resolver import resolve_options
from textclamp.core.scheduler import CancellationToken, StepScheduler
from textclamp.core.truncation import TruncationEngine, TruncationState

logger = logging.getLogger(__name__)

# Containers with a run in flight, keyed by id() (Tag equality is structural).
_in_flight: dict[int, ClampRun] = {}


class ClampRun:
    """Handle on one clamp run.

    Synchronous runs are already done when ``clamp()`` returns. Paced runs
    finish later; ``cancel()`` stops them before their next step and
    ``await run.wait()`` blocks until they end.
    """

    def __init__(self, element: Tag, options: ClampOptions) -> None:
        self.element = element
        self.options = options
        self.token = CancellationToken()
        self._report: ClampReport | None = None
        self._finished: asyncio.Event | None = None

    @property
    def done(self) -> bool:
        return self._report is not None

    @property
    def report(self) -> ClampReport | None:
        return self._report

    def cancel(self) -> None:
        """Stop stepping. The container keeps whatever text it holds now."""
        if not self.done:
            self.token.cancel()

    async def wait(self) -> ClampReport:
        if self._report is None:
            if self._finished is None:
                self._finished = asyncio.Event()
            await self._finished.wait()
        assert self._report is not None
        return self._report

    def _complete(self, report: ClampReport) -> None:
        self._report = report
        if self._finished is not None:
            self._finished.set()
        if report.cancelled:
            return
        if self.options.on_complete is not None:
            self.options.on_complete(self.element, report.applied_lines, report.applied_height_px)


@traced(log_level="DEBUG")
def clamp(
    element: Any,
    options: int | float | str | Mapping[str, Any] | ClampOptions | None = None,
    *,
    layout: LayoutPort,
    clock: FrameClockPort | None = None,
    settings: Settings | None = None,
) -> ClampRun:
    """Clamp ``element``'s text to a line count or height.

    ``options`` is a clamp target (``3``, ``"auto"``, ``"48px"``, ``"3em"``,
    ``"2rem"``) or a full options mapping / :class:`ClampOptions`. When the
    layout supports native line clamping and no truncation markup is wanted,
    the element is styled and left alone; otherwise trailing text is removed
    until the container fits.

    Raises:
        InvalidTargetError: ``element`` is missing or not attached to a document.
        InvalidOptionsError: an option cannot be interpreted.
        ClampInProgressError: ``element`` already has a run in flight.
    """
    opts = resolve_options(element, options, settings=settings)
    if id(element) in _in_flight:
        raise ClampInProgressError("a clamp run is already in flight for this element")

    run = ClampRun(element, opts)
    try:
        lines, css_height = resolve_target(layout, element, opts.clamp)
    except MeasurementUnavailable as exc:
        logger.warning("cannot resolve clamp target, leaving container untouched: %s", exc)
        run._complete(ClampReport(applied_lines=0))
        return run

    if native_clamp_applicable(layout, opts):
        apply_native_clamp(element, lines, css_height)
        run._complete(
            ClampReport(
                applied_lines=lines,
                applied_height_px=float(max_height(layout, element, lines)),
                native=True,
            )
        )
        return run

    budget = max_height(layout, element, lines)
    try:
        current = layout.measured_height(element)
    except MeasurementUnavailable as exc:
        logger.warning("cannot measure container, leaving it untouched: %s", exc)
        run._complete(ClampReport(applied_lines=lines))
        return run

    if not budget or current <= budget:
        run._complete(
            ClampReport(applied_lines=max_lines(layout, element, current), applied_height_px=current)
        )
        return run

    engine = TruncationEngine(layout, marker=opts.truncation_marker, markup=opts.truncation_markup)
    state = engine.start(element, budget, opts.boundary_priority, initial_height=current)
    logger.debug("truncating to %d lines (%dpx) from %.1fpx", lines, budget, current)

    pacing, clock = _pacing_clock(opts.animation, clock)
    scheduler = StepScheduler(pacing, clock=clock, delay_ms=opts.step_delay_ms, token=run.token)

    def on_done(finished: TruncationState) -> None:
        _in_flight.pop(id(element), None)
        height = finished.final_height
        applied = max_lines(layout, element, height) if height is not None and not finished.cancelled else lines
        run._complete(
            ClampReport(
                applied_lines=applied,
                applied_height_px=height,
                truncated=finished.truncated,
                exhausted=finished.exhausted,
                cancelled=finished.cancelled,
                steps=finished.steps,
            )
        )

    _in_flight[id(element)] = run
    try:
        scheduler.run(engine, state, on_done)
    except Exception:
        _in_flight.pop(id(element), None)
        raise
    return run


def _pacing_clock(
    pacing: AnimationPacing, clock: FrameClockPort | None
) -> tuple[AnimationPacing, FrameClockPort | None]:
    if pacing is AnimationPacing.OFF or clock is not None:
        return pacing, clock
    try:
        return pacing, AsyncioFrameClock()
    except RuntimeError:
        logger.warning("%s pacing requested without a frame clock or event loop; running synchronously", pacing.value)
        return AnimationPacing.OFF, None
