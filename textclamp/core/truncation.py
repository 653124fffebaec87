"""Progressive truncation state machine.

A run owns one :class:`TruncationState`. Each call to
:meth:`TruncationEngine.step` applies at most one trial mutation to the
container, re-measures it, and either accepts the trial, rolls it back, or
moves on to a finer boundary or to the previous text node. Nothing is closed
over between steps, so the scheduler can suspend a run after any step.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from bs4 import NavigableString, PageElement, Tag

from textclamp.core.dom import parse_fragment, set_text
from textclamp.core.errors import MeasurementUnavailable
from textclamp.core.node_walker import last_valid_text_node
from textclamp.core.ports import LayoutPort
from textclamp.core.splitter import (
    SINGLE_CHARACTER,
    boundary_levels,
    join_tokens,
    split_on_boundary,
)

logger = logging.getLogger(__name__)


@dataclass
class TruncationState:
    """Mutable state of one in-flight truncation run."""

    container: Tag
    target_height: float
    levels: list[str]
    active_node: NavigableString | None = None
    # Unmarked text the next split is computed from.
    source_text: str = ""
    remaining_boundaries: list[str] = field(default_factory=list)
    boundary: str | None = None
    current_tokens: list[str] | None = None
    inserted_nodes: list[PageElement] = field(default_factory=list)
    steps: int = 0
    truncated: bool = False
    finished: bool = False
    exhausted: bool = False
    cancelled: bool = False
    final_height: float | None = None

    def reset_for(self, node: NavigableString | None) -> None:
        """Point the state at ``node`` with the full boundary list."""
        self.active_node = node
        self.source_text = str(node) if node is not None else ""
        self.remaining_boundaries = list(self.levels)
        self.boundary = None
        self.current_tokens = None


class TruncationEngine:
    """Drives :class:`TruncationState` one step at a time."""

    def __init__(self, layout: LayoutPort, *, marker: str = "…", markup: str = "") -> None:
        self._layout = layout
        self._marker = marker
        self._markup = markup

    def start(
        self,
        container: Tag,
        target_height: float,
        boundary_priority: tuple[str, ...] | list[str],
        *,
        initial_height: float | None = None,
    ) -> TruncationState:
        """Create the state for a run; it is already finished if there is no text."""
        state = TruncationState(
            container=container,
            target_height=target_height,
            levels=boundary_levels(boundary_priority),
            final_height=initial_height,
        )
        state.reset_for(last_valid_text_node(container))
        if state.active_node is None:
            logger.debug("container holds no text, nothing to truncate")
            state.finished = True
        return state

    def step(self, state: TruncationState) -> bool:
        """Run one step. Returns True once the state is terminal."""
        if state.finished:
            return True
        state.steps += 1

        while True:
            if state.current_tokens is None:
                if not state.remaining_boundaries:
                    return self._drop_node(state)
                state.boundary = state.remaining_boundaries.pop(0)
                state.current_tokens = split_on_boundary(state.source_text, state.boundary)

            if len(state.current_tokens) > 1:
                return self._try_shorter(state)

            # Nothing left to drop at this granularity.
            exhausted_boundary = state.boundary
            state.current_tokens = None
            if exhausted_boundary == SINGLE_CHARACTER or not state.remaining_boundaries:
                return self._drop_node(state)

    def abort(self, state: TruncationState) -> None:
        """Stop a run where it stands, removing any in-flight trial nodes."""
        self._rollback_inserted(state)
        state.cancelled = True
        state.finished = True

    def _try_shorter(self, state: TruncationState) -> bool:
        assert state.active_node is not None and state.current_tokens is not None
        boundary = state.boundary or SINGLE_CHARACTER
        before = str(state.active_node)

        state.current_tokens.pop()
        shortened = join_tokens(state.current_tokens, boundary)
        self._write_trial(state, shortened)
        state.truncated = True

        fits, height = self._fits(state)
        if fits:
            if boundary != SINGLE_CHARACTER and state.remaining_boundaries:
                # More precision available: go back and split finer.
                self._rollback_inserted(state)
                state.active_node = set_text(state.active_node, before)
                state.current_tokens = None
                return False
            return self._finish(state, height)

        state.source_text = shortened
        self._rollback_inserted(state)
        return False

    def _drop_node(self, state: TruncationState) -> bool:
        """Remove the active node entirely and move to the previous text node.

        The previous node is first tried intact with the marker attached; it
        is only split if that does not fit.
        """
        assert state.active_node is not None
        set_text(state.active_node, "")
        state.truncated = True

        previous = last_valid_text_node(state.container)
        state.reset_for(previous)
        if previous is None:
            _, height = self._fits(state)
            logger.info("content exhausted without reaching %.1fpx", state.target_height)
            return self._finish(state, height, exhausted=True)

        self._write_trial(state, state.source_text)
        fits, height = self._fits(state)
        if fits:
            return self._finish(state, height)

        self._rollback_inserted(state)
        state.active_node = set_text(state.active_node, state.source_text)
        return False

    def _write_trial(self, state: TruncationState, text: str) -> None:
        assert state.active_node is not None
        if not self._markup:
            state.active_node = set_text(state.active_node, text + self._marker)
            return

        state.active_node = set_text(state.active_node, text)
        extra = parse_fragment(self._markup)
        if self._marker:
            extra.append(NavigableString(self._marker))
        for node in extra:
            state.container.append(node)
            state.inserted_nodes.append(node)

    def _rollback_inserted(self, state: TruncationState) -> None:
        while state.inserted_nodes:
            state.inserted_nodes.pop().extract()

    def _fits(self, state: TruncationState) -> tuple[bool, float | None]:
        try:
            height = self._layout.measured_height(state.container)
        except MeasurementUnavailable as exc:
            logger.warning("measurement unavailable, treating container as fitting: %s", exc)
            return True, None
        return height <= state.target_height, height

    def _finish(self, state: TruncationState, height: float | None, *, exhausted: bool = False) -> bool:
        # Accepted trial nodes stay in the container; they are no longer tracked.
        state.inserted_nodes.clear()
        state.finished = True
        state.exhausted = exhausted
        state.final_height = height
        logger.debug(
            "truncation finished after %d steps (height=%s, exhausted=%s)",
            state.steps,
            height,
            exhausted,
        )
        return True
