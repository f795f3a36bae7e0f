"""Runtime - Flow execution and observability.

Contains: flow combinators, structured logging.
"""

from __future__ import annotations

__all__ = [
    # Flow
    "serial", "parallel", "map", "serial_async", "parallel_async", "map_async", "wait_callback",
    "Join", "Latch", "Accumulator", "TaskCallback",
    # Observability
    "BoundLogger", "LogEntry", "LogRenderer", "ConsoleRenderer", "JsonRenderer", "MemoryRenderer", "NoOpRenderer",
    "configure_logging", "configure_from_settings", "get_logger", "log_context",
]


def __getattr__(name: str):
    """Lazy imports to avoid circular dependencies."""
    if name in ("serial", "parallel", "map", "serial_async", "parallel_async", "map_async", "wait_callback",
                "Join", "Latch", "Accumulator", "TaskCallback"):
        from . import flow
        return getattr(flow, name)

    if name in ("BoundLogger", "LogEntry", "LogRenderer", "ConsoleRenderer", "JsonRenderer", "MemoryRenderer",
                "NoOpRenderer", "configure_logging", "configure_from_settings", "get_logger", "log_context"):
        from . import observability
        return getattr(observability, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
