"""Utilities for tracing asset generation."""

from collections import defaultdict
import contextvars
from contextlib import contextmanager
from dataclasses import dataclass, field
import logging
from time import perf_counter
from typing import Generator


_LOGGER = logging.getLogger(__name__)

# No public API
__all__: list[str] = []


trace: contextvars.ContextVar[list[str]] = contextvars.ContextVar("trace")


@dataclass
class TraceCollector:
    """Accumulates the elapsed time of traced blocks by name."""

    timings: dict[str, float] = field(default_factory=lambda: defaultdict(float))

    def add(self, name: str, duration: float) -> None:
        """Record one traced block."""
        self.timings[name] += duration


_collector: contextvars.ContextVar[TraceCollector | None] = contextvars.ContextVar(
    "_collector", default=None
)


@contextmanager
def get_trace_collector() -> Generator[TraceCollector, None, None]:
    """Collect the timings of every trace_context entered within the block."""
    collector = TraceCollector()
    token = _collector.set(collector)
    try:
        yield collector
    finally:
        _collector.reset(token)


@contextmanager
def trace_context(name: str) -> Generator[None, None, None]:
    """Log the nested elapsed time of a block at debug level."""
    stack = trace.get([])
    token = trace.set(stack + [name])
    label = " > ".join(stack + [name])
    t1 = perf_counter()
    _LOGGER.debug("[Trace] > %s", label)
    try:
        yield
    finally:
        t2 = perf_counter()
        trace.reset(token)
        if (collector := _collector.get()) is not None:
            collector.add(name, t2 - t1)
        _LOGGER.debug("[Trace] < %s (%0.4fs)", label, (t2 - t1))
