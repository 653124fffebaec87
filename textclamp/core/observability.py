"""Observability for textclamp.

Configures structlog on top of the standard library logger factory and
provides the ``traced`` decorator used on public entry points.
"""

from __future__ import annotations

import asyncio
import functools
import sys
import time
import traceback
from collections.abc import Callable
from typing import Any, TypeVar, cast

import structlog
from structlog.contextvars import bind_contextvars, unbind_contextvars

structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer() if sys.stderr.isatty() else structlog.processors.JSONRenderer(),  # type: ignore[list-item]
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=False,
)

logger = structlog.get_logger("textclamp")

F = TypeVar("F", bound=Callable[..., Any])


def set_correlation_id(correlation_id: str) -> None:
    """Bind a correlation id to every log line emitted in this context."""
    bind_contextvars(correlation_id=correlation_id)


def clear_correlation_id() -> None:
    unbind_contextvars("correlation_id")


def _describe(value: Any, max_length: int) -> str:
    # Tags render as their full markup; keep log lines short.
    text = repr(value)
    if len(text) > max_length:
        return text[:max_length] + "..."
    return text


def traced(
    *,
    capture_args: bool = False,
    max_arg_length: int = 200,
    log_level: str = "DEBUG",
) -> Callable[[F], F]:
    """Log entry, duration and failures of the decorated function.

    Each call gets an ``execution_id`` bound through structlog contextvars so
    the log lines of nested calls can be correlated. Exceptions are logged and
    re-raised unchanged.

    Example:
        >>> @traced(log_level="INFO")
        ... def clamp_card(card):
        ...     ...
    """

    def decorator(func: F) -> F:
        name = f"{func.__module__}.{func.__qualname__}"
        level = log_level.lower()

        def emit(event: str, **fields: Any) -> None:
            getattr(logger, level)(event, **fields)

        def _enter(args: tuple[Any, ...], kwargs: dict[str, Any]) -> float:
            bind_contextvars(execution_id=f"{name}_{int(time.time() * 1000000)}")
            emit(
                "Executing function",
                function_name=name,
                args=[_describe(a, max_arg_length) for a in args] if capture_args else None,
                kwargs={k: _describe(v, max_arg_length) for k, v in kwargs.items()} if capture_args else None,
            )
            return time.perf_counter()

        def _succeeded(started: float) -> None:
            emit(
                "Successfully executed",
                function_name=name,
                duration_ms=(time.perf_counter() - started) * 1000,
            )

        def _failed(exc: Exception, started: float) -> None:
            logger.error(
                "Error in function",
                function_name=name,
                duration_ms=(time.perf_counter() - started) * 1000,
                error_type=type(exc).__name__,
                error_message=str(exc),
                traceback=traceback.format_exc(),
            )

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            started = _enter(args, kwargs)
            try:
                result = await func(*args, **kwargs)
                _succeeded(started)
                return result
            except Exception as exc:
                _failed(exc, started)
                raise
            finally:
                unbind_contextvars("execution_id")

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            started = _enter(args, kwargs)
            try:
                result = func(*args, **kwargs)
                _succeeded(started)
                return result
            except Exception as exc:
                _failed(exc, started)
                raise
            finally:
                unbind_contextvars("execution_id")

        if asyncio.iscoroutinefunction(func):
            return cast(F, async_wrapper)
        return cast(F, sync_wrapper)

    return decorator
