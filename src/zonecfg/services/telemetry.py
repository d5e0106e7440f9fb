"""Span timing for service operations.

Off unless ``--verbose`` turns it on.  While on, each ``@traced`` service
call becomes a root span, ``trace_span`` blocks inside it become children
(read, decode, encode), and the finished tree is attached to the result
as ``meta["telemetry"]``.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from zonecfg.services.result import ServiceResult

log = structlog.get_logger("zonecfg.telemetry")

_telemetry_enabled: ContextVar[bool] = ContextVar("zonecfg_telemetry", default=False)
_current_span: ContextVar[Span | None] = ContextVar("zonecfg_span", default=None)


@dataclass
class Span:
    name: str
    started_ns: int = field(default_factory=time.perf_counter_ns)
    ended_ns: int | None = None
    annotations: dict[str, Any] = field(default_factory=dict)
    children: list[Span] = field(default_factory=list)

    @property
    def duration_ms(self) -> float:
        """Elapsed milliseconds, or 0.0 while the span is still open."""
        if self.ended_ns is None:
            return 0.0
        return (self.ended_ns - self.started_ns) / 1_000_000

    def end(self) -> None:
        self.ended_ns = time.perf_counter_ns()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def child(self, name: str) -> Span:
        span = Span(name=name)
        self.children.append(span)
        return span

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.children:
            out["children"] = [c.to_dict() for c in self.children]
        return out


@contextmanager
def _activate(span: Span) -> Iterator[Span]:
    token = _current_span.set(span)
    try:
        yield span
    finally:
        span.end()
        _current_span.reset(token)


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Time a block as a child of the active span.

    Yields None when there is nothing to attach to.
    """
    parent = get_current_span()
    if parent is None:
        yield None
        return
    with _activate(parent.child(name)) as span:
        yield span


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Run *func* under a root span when telemetry is on."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _telemetry_enabled.get():
            return func(*args, **kwargs)

        with _activate(Span(name=func.__qualname__)) as span:
            result = func(*args, **kwargs)

        log.debug(
            "span.complete",
            span_name=span.name,
            duration_ms=round(span.duration_ms, 2),
            children=[c.name for c in span.children],
        )
        if not isinstance(result, ServiceResult):
            return result
        meta = {**(result.meta or {}), "telemetry": span.to_dict()}
        return result.model_copy(update={"meta": meta})  # type: ignore[return-value]

    return wrapper


def enable_telemetry() -> None:
    _telemetry_enabled.set(True)


def disable_telemetry() -> None:
    _telemetry_enabled.set(False)


def get_current_span() -> Span | None:
    """Return the active span, or None when telemetry is off."""
    if not _telemetry_enabled.get():
        return None
    return _current_span.get()
