"""Frame clock adapters for paced truncation runs."""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass

from textclamp.core.ports import FrameClockPort


class AsyncioFrameClock(FrameClockPort):
    """Timer backed by an asyncio event loop.

    asyncio has no display frames, so frame pacing falls back to the timer.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop or asyncio.get_running_loop()

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> None:
        self._loop.call_later(delay_s, callback)


@dataclass(frozen=True)
class ScheduledCall:
    """A callback waiting in a :class:`ManualFrameClock`."""

    kind: str  # "timer" or "frame"
    delay_s: float
    callback: Callable[[], None]


class ManualFrameClock(FrameClockPort):
    """Deterministic clock whose callbacks run only when the host advances it.

    Useful for headless hosts that own their frame loop and for tests.
    ``frames=False`` models an environment without frame callbacks.
    """

    def __init__(self, *, frames: bool = True) -> None:
        self._frames = frames
        self._queue: deque[ScheduledCall] = deque()
        self.history: list[ScheduledCall] = []

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> None:
        self._enqueue(ScheduledCall("timer", delay_s, callback))

    def request_frame(self, callback: Callable[[], None]) -> bool:
        if not self._frames:
            return False
        self._enqueue(ScheduledCall("frame", 0.0, callback))
        return True

    @property
    def pending(self) -> int:
        return len(self._queue)

    def tick(self) -> bool:
        """Run the oldest pending callback. Returns False if none was waiting."""
        if not self._queue:
            return False
        self._queue.popleft().callback()
        return True

    def run_until_idle(self, max_ticks: int = 100_000) -> int:
        """Tick until nothing is pending; returns the number of callbacks run."""
        ticks = 0
        while self._queue:
            if ticks >= max_ticks:
                raise RuntimeError(f"clock still busy after {max_ticks} ticks")
            self.tick()
            ticks += 1
        return ticks

    def _enqueue(self, call: ScheduledCall) -> None:
        self._queue.append(call)
        self.history.append(call)
