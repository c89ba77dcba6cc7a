"""
Tracer Factory and Lightweight Implementations

get_tracer() returns a real OTel tracer when Phoenix is enabled,
otherwise a NoOpTracer. RecordingTracer keeps spans in memory so
tests can assert on what was traced.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator, Protocol


# ---------------------------------------------------------------------------
# PROTOCOLS
# ---------------------------------------------------------------------------


class SpanProtocol(Protocol):
    """Protocol for span operations."""

    def set_attribute(self, key: str, value: Any) -> None:
        ...

    def set_status(self, status: str, description: str | None = None) -> None:
        """Set span status (ok, error)."""
        ...

    def record_exception(self, exception: Exception) -> None:
        ...


class TracerProtocol(Protocol):
    """Protocol for tracer operations."""

    def start_span(self, name: str, attributes: dict[str, Any] | None = None) -> Any:
        """Start a new span as context manager."""
        ...


# ---------------------------------------------------------------------------
# NOOP IMPLEMENTATIONS (for graceful degradation)
# ---------------------------------------------------------------------------


class NoOpSpan:
    """No-op span that does nothing."""

    def set_attribute(self, key: str, value: Any) -> None:
        pass

    def set_status(self, status: str, description: str | None = None) -> None:
        pass

    def record_exception(self, exception: Exception) -> None:
        pass


class NoOpTracer:
    """No-op tracer that creates no-op spans."""

    @contextmanager
    def start_span(self, name: str, attributes: dict[str, Any] | None = None) -> Iterator[NoOpSpan]:
        yield NoOpSpan()


# ---------------------------------------------------------------------------
# RECORDING IMPLEMENTATIONS (for tests)
# ---------------------------------------------------------------------------


@dataclass
class RecordedSpan:
    """A finished or in-flight span captured by RecordingTracer."""
    name: str
    attributes: dict[str, Any] = field(default_factory=dict)
    status: str | None = None
    exceptions: list[Exception] = field(default_factory=list)

    def set_attribute(self, key: str, value: Any) -> None:
        self.attributes[key] = value

    def set_status(self, status: str, description: str | None = None) -> None:
        self.status = status

    def record_exception(self, exception: Exception) -> None:
        self.exceptions.append(exception)


class RecordingTracer:
    """Tracer that keeps every span in memory."""

    def __init__(self) -> None:
        self.spans: list[RecordedSpan] = []

    @contextmanager
    def start_span(self, name: str, attributes: dict[str, Any] | None = None) -> Iterator[RecordedSpan]:
        span = RecordedSpan(name=name, attributes=dict(attributes or {}))
        self.spans.append(span)
        yield span

    def find(self, name: str) -> list[RecordedSpan]:
        return [span for span in self.spans if span.name == name]


# ---------------------------------------------------------------------------
# REAL OTEL TRACER (wrapped for our protocol)
# ---------------------------------------------------------------------------


class OTelSpan:
    """Wrapper around OTel span to match our protocol."""

    def __init__(self, span: Any):
        self._span = span

    def set_attribute(self, key: str, value: Any) -> None:
        self._span.set_attribute(key, value)

    def set_status(self, status: str, description: str | None = None) -> None:
        from opentelemetry.trace import StatusCode
        code = StatusCode.OK if status == "ok" else StatusCode.ERROR
        self._span.set_status(code, description)

    def record_exception(self, exception: Exception) -> None:
        self._span.record_exception(exception)


class OTelTracer:
    """Wrapper around OTel tracer to match our protocol."""

    def __init__(self, tracer: Any):
        self._tracer = tracer

    @contextmanager
    def start_span(self, name: str, attributes: dict[str, Any] | None = None) -> Iterator[OTelSpan]:
        with self._tracer.start_as_current_span(name, attributes=attributes) as span:
            yield OTelSpan(span)


# ---------------------------------------------------------------------------
# FACTORY
# ---------------------------------------------------------------------------


_tracer: TracerProtocol | None = None


def get_tracer(service_name: str = "jarvis-rag") -> TracerProtocol:
    """
    Get the global tracer instance.

    Returns OTelTracer if Phoenix is enabled and OTel is available,
    otherwise returns NoOpTracer for zero overhead.

    Args:
        service_name: Service name for the tracer (used on first call only)
    """
    global _tracer
    if _tracer is not None:
        return _tracer

    from jarvis_rag.observability.config import get_config

    if not get_config().enabled:
        _tracer = NoOpTracer()
        return _tracer

    try:
        from opentelemetry import trace
        from opentelemetry.sdk.trace import TracerProvider
    except ImportError:
        _tracer = NoOpTracer()
        return _tracer

    # init_phoenix() installs the SDK provider; without it spans go nowhere
    if not isinstance(trace.get_tracer_provider(), TracerProvider):
        _tracer = NoOpTracer()
        return _tracer

    _tracer = OTelTracer(trace.get_tracer(service_name))
    return _tracer


def reset_tracer() -> None:
    """Reset tracer (useful for testing)."""
    global _tracer
    _tracer = None
