from typing import Any

import pytest
from structlog.testing import capture_logs

from textclamp.core.observability import clear_correlation_id, set_correlation_id, traced


@pytest.mark.asyncio
async def test_traced_async_function_logs_entry_and_success() -> None:
    """Correlation ids can be bound and cleared around a traced call.

    capture_logs() bypasses merge_contextvars, so only the events themselves
    are asserted here.
    """
    events: list[dict[str, Any]] = []
    set_correlation_id("test-cid-1234")

    @traced(log_level="INFO")
    async def _foo() -> str:
        return "ok"

    try:
        with capture_logs() as cap:
            assert await _foo() == "ok"
            events.extend(cap)
    finally:
        clear_correlation_id()

    names = [e["event"] for e in events]
    assert names == ["Executing function", "Successfully executed"]
    assert all(e["log_level"] == "info" for e in events)
    assert events[1]["duration_ms"] >= 0
    assert events[0]["function_name"].endswith("_foo")


def test_traced_sync_function_logs_and_reraises_errors() -> None:
    @traced()
    def _explode(value: int) -> None:
        raise ValueError(f"bad value {value}")

    with capture_logs() as cap:
        with pytest.raises(ValueError):
            _explode(3)

    error = [e for e in cap if e["event"] == "Error in function"]
    assert len(error) == 1
    assert error[0]["log_level"] == "error"
    assert error[0]["error_type"] == "ValueError"
    assert error[0]["error_message"] == "bad value 3"


def test_traced_captures_truncated_arguments() -> None:
    @traced(capture_args=True, max_arg_length=10)
    def _echo(text: str, *, flag: bool = False) -> str:
        return text

    with capture_logs() as cap:
        _echo("x" * 50, flag=True)

    entry = cap[0]
    assert entry["args"] == ["'xxxxxxxxx..."]
    assert entry["kwargs"] == {"flag": "True"}


def test_clamp_entry_point_is_traced(make_layout, make_container) -> None:
    from textclamp.core.clamp import clamp

    p = make_container("<p>one two three four five six</p>")

    with capture_logs() as cap:
        clamp(p, 1, layout=make_layout())

    traced_calls = [e for e in cap if e.get("function_name") == "textclamp.core.clamp.clamp"]
    assert [e["event"] for e in traced_calls] == ["Executing function", "Successfully executed"]
