"""Pacing of truncation steps: synchronous, timed, or frame-synchronized."""

from __future__ import annotations

import logging
from collections.abc import Callable

from textclamp.contracts.common import AnimationPacing
from textclamp.core.dom import owner_document
from textclamp.core.ports import FrameClockPort
from textclamp.core.truncation import TruncationEngine, TruncationState

logger = logging.getLogger(__name__)

FRAME_FALLBACK_DELAY_MS = 16.6  # 1000 / 60


class CancellationToken:
    """Flag checked at the top of every step."""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class StepScheduler:
    """Runs a truncation state to completion at the configured pace.

    The first step always runs synchronously. With pacing enabled, each later
    step is scheduled only after the previous one has finished mutating and
    measuring the container, so two steps of one run never overlap.
    """

    def __init__(
        self,
        pacing: AnimationPacing,
        *,
        clock: FrameClockPort | None = None,
        delay_ms: float = FRAME_FALLBACK_DELAY_MS,
        token: CancellationToken | None = None,
    ) -> None:
        if pacing is not AnimationPacing.OFF and clock is None:
            raise ValueError(f"{pacing.value} pacing needs a frame clock")
        self._pacing = pacing
        self._clock = clock
        self._delay_ms = delay_ms
        self._token = token or CancellationToken()

    @property
    def token(self) -> CancellationToken:
        return self._token

    def run(
        self,
        engine: TruncationEngine,
        state: TruncationState,
        on_done: Callable[[TruncationState], None],
    ) -> None:
        """Step ``state`` until it is terminal, then call ``on_done`` once."""

        def tick() -> None:
            if self._should_stop(state):
                engine.abort(state)
                logger.info("truncation cancelled after %d steps", state.steps)
                on_done(state)
                return
            if engine.step(state):
                on_done(state)
                return
            self._schedule(tick)

        if self._pacing is AnimationPacing.OFF:
            while not state.finished:
                if self._should_stop(state):
                    engine.abort(state)
                    logger.info("truncation cancelled after %d steps", state.steps)
                    break
                engine.step(state)
            on_done(state)
            return

        tick()

    def _should_stop(self, state: TruncationState) -> bool:
        if self._token.cancelled:
            return True
        if owner_document(state.container) is None:
            logger.warning("container detached from its document mid-run")
            return True
        return False

    def _schedule(self, callback: Callable[[], None]) -> None:
        assert self._clock is not None
        if self._pacing is AnimationPacing.FRAME:
            if self._clock.request_frame(callback):
                return
            self._clock.call_later(FRAME_FALLBACK_DELAY_MS / 1000, callback)
            return
        self._clock.call_later(self._delay_ms / 1000, callback)
