"""Step-level tests of the truncation state machine."""

from __future__ import annotations

import pytest

from textclamp.adapters.grid_layout import GridLayout
from textclamp.core.dom import parse_fragment
from textclamp.core.truncation import TruncationEngine, TruncationState


def _run(engine: TruncationEngine, state: TruncationState, limit: int = 1000) -> int:
    steps = 0
    while not engine.step(state):
        steps += 1
        assert steps < limit, "state machine did not terminate"
    return steps + 1


def test_prefers_sentence_boundary_when_it_fits(make_layout, make_container) -> None:
    p = make_container("<p>Hello world. Bye</p>")
    layout = make_layout(chars_per_line=13)
    engine = TruncationEngine(layout)
    state = engine.start(p, 20, [".", " "])

    _run(engine, state)

    assert p.get_text() == "Hello world.…"
    assert state.final_height == 20
    assert not state.exhausted


def test_refines_to_the_longest_fitting_prefix(make_layout, make_container) -> None:
    p = make_container("<p>Hello world. Bye</p>")
    engine = TruncationEngine(make_layout(chars_per_line=12))
    state = engine.start(p, 20, [".", " "])

    _run(engine, state)

    assert p.get_text() == "Hello world…"


def test_two_word_budget_scenario(make_container) -> None:
    p = make_container('<p style="line-height: 20px">AAAAAAAAAA BBBBBBBBBB CCCCCCCCCC</p>')
    layout = GridLayout(columns=22)
    engine = TruncationEngine(layout)
    state = engine.start(p, 20, [" "], initial_height=layout.measured_height(p))

    _run(engine, state)

    assert p.get_text() == "AAAAAAAAAA BBBBBBBBBB…"
    assert state.final_height is not None and state.final_height <= 20


def test_step_count_is_bounded(make_layout, make_container) -> None:
    text = "The quick brown fox - jumps over the lazy dog. Again and again."
    p = make_container(f"<p>{text}</p>")
    engine = TruncationEngine(make_layout(chars_per_line=7))
    levels = (".", "-", "–", "—", " ")
    state = engine.start(p, 20, levels)

    steps = _run(engine, state)

    assert steps <= len(text) + len(levels) + 1
    assert len(p.get_text()) <= 7


def test_content_never_grows_between_steps(make_layout, make_container) -> None:
    p = make_container("<p>alpha beta. gamma-delta epsilon</p>")
    engine = TruncationEngine(make_layout(chars_per_line=9))
    state = engine.start(p, 20, [".", "-", " "])

    lengths = [len(state.source_text)]
    while not engine.step(state):
        lengths.append(len(state.source_text))
        assert p.get_text().rstrip("…") in "alpha beta. gamma-delta epsilon"
    assert lengths == sorted(lengths, reverse=True)


def test_accepted_trials_always_fit(make_layout, make_container) -> None:
    p = make_container("<p>one. two. three. four. five.</p>")
    layout = make_layout(chars_per_line=8)
    engine = TruncationEngine(layout)
    state = engine.start(p, 20, [".", " "])

    _run(engine, state)

    assert layout.measured_height(p) <= 20
    assert state.final_height == layout.measured_height(p)


def test_markup_is_inserted_before_marker(make_layout, make_container) -> None:
    p = make_container("<p>one two three four</p>")
    engine = TruncationEngine(make_layout(chars_per_line=10), markup='<a href="#">more</a>')
    state = engine.start(p, 20, [" "])

    _run(engine, state)

    assert str(p) == '<p>one t<a href="#">more</a>…</p>'
    assert state.inserted_nodes == []


def test_rejected_markup_trials_are_rolled_back(make_layout, make_container) -> None:
    p = make_container("<p>one two three four</p>")
    engine = TruncationEngine(make_layout(chars_per_line=10), markup="<a>more</a>")
    state = engine.start(p, 20, [" "])

    assert engine.step(state) is False
    assert p.find("a") is None
    assert state.inserted_nodes == []
    assert str(p) == "<p>one two three</p>"


def test_moves_to_previous_node_when_last_one_is_used_up(make_layout, make_container) -> None:
    p = make_container("<p>abc<b>defghij</b></p>")
    engine = TruncationEngine(make_layout(chars_per_line=4))
    state = engine.start(p, 20, [" "])

    _run(engine, state)

    assert str(p) == "<p>abc…</p>"


def test_empty_boundary_list_removes_whole_nodes(make_layout, make_container) -> None:
    p = make_container("<p><span>Keep me</span><span>drop this</span></p>")
    engine = TruncationEngine(make_layout(chars_per_line=10))
    state = engine.start(p, 20, [])

    steps = _run(engine, state)

    assert steps == 1
    assert str(p) == "<p><span>Keep me…</span></p>"


def test_exhaustion_is_reported_not_raised(make_layout, make_container) -> None:
    p = make_container("<p>ab</p>")
    engine = TruncationEngine(make_layout(chars_per_line=1))
    state = engine.start(p, 20, [" "])

    _run(engine, state)

    assert state.exhausted
    assert state.final_height == 0
    assert p.contents == []


def test_container_without_text_is_finished_immediately(make_layout, make_container) -> None:
    div = make_container("<div> <img/> </div>")
    engine = TruncationEngine(make_layout())
    state = engine.start(div, 20, [" "], initial_height=100)

    assert state.finished
    assert engine.step(state) is True
    assert state.steps == 0
    assert not state.truncated


def test_unavailable_measurement_counts_as_fitting(make_layout, make_container) -> None:
    p = make_container("<p>one two three four five six</p>")
    layout = make_layout(chars_per_line=5, fail_after=0)
    engine = TruncationEngine(layout)
    state = engine.start(p, 20, [" "])

    assert engine.step(state) is False  # fitting at " " refines
    _run(engine, state)

    assert state.final_height is None
    assert p.get_text() == "one two three four five si…"


def test_abort_rolls_back_inserted_nodes(make_layout, make_container) -> None:
    p = make_container("<p>one two</p>")
    engine = TruncationEngine(make_layout(), markup="<a>more</a>")
    state = engine.start(p, 20, [" "])
    inserted = parse_fragment("<a>more</a>")[0]
    p.append(inserted)
    state.inserted_nodes.append(inserted)

    engine.abort(state)

    assert state.cancelled and state.finished
    assert p.find("a") is None


@pytest.mark.parametrize("marker", ["", "...", " (cont.)"])
def test_custom_markers(make_layout, make_container, marker) -> None:
    p = make_container("<p>aaaa bbbb cccc dddd</p>")
    engine = TruncationEngine(make_layout(chars_per_line=12), marker=marker)
    state = engine.start(p, 20, [" "])

    _run(engine, state)

    assert p.get_text().endswith(marker)
    assert len(p.get_text()) <= 12
