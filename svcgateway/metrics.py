"""Request and service-call counters in the Prometheus text format."""

from __future__ import annotations

import threading
from collections.abc import Sequence

CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"


def _escape_help(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n")


def _escape_label(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


class CounterVec:
    """A family of counters distinguished by label values."""

    def __init__(self, name: str, help: str, labels: Sequence[str]) -> None:
        self.name = name
        self.help = help
        self.labels = tuple(labels)
        self._values: dict[tuple[str, ...], int] = {}
        self._lock = threading.Lock()

    def _key(self, args: tuple[object, ...]) -> tuple[str, ...]:
        if len(args) != len(self.labels):
            raise ValueError(
                f"{self.name}: expected {len(self.labels)} label values, got {len(args)}"
            )
        return tuple(str(arg) for arg in args)

    def inc(self, *args: object) -> None:
        """Add one to the counter with these label values."""
        key = self._key(args)
        with self._lock:
            self._values[key] = self._values.get(key, 0) + 1

    def value(self, *args: object) -> int:
        """Return the current count for these label values."""
        key = self._key(args)
        with self._lock:
            return self._values.get(key, 0)

    def render(self) -> str:
        """Return the family in exposition format; empty if nothing counted."""
        with self._lock:
            items = sorted(self._values.items())
        if not items:
            return ""
        lines = [
            f"# HELP {self.name} {_escape_help(self.help)}",
            f"# TYPE {self.name} counter",
        ]
        for key, count in items:
            pairs = ",".join(
                f'{label}="{_escape_label(value)}"' for label, value in zip(self.labels, key)
            )
            lines.append(f"{self.name}{{{pairs}}} {count}")
        return "\n".join(lines) + "\n"


class MetricsTracker:
    """Counters kept by the gateway."""

    def __init__(self) -> None:
        self.requests = CounterVec(
            "requests", "Number of requests to the gateway.", ["endpoint", "code"]
        )
        self.service_calls = CounterVec(
            "service_calls", "Number of calls to each service.", ["service"]
        )

    def record_request(self, endpoint: str, code: int) -> None:
        self.requests.inc(endpoint, code)

    def record_service_call(self, service: str) -> None:
        self.service_calls.inc(service)

    def render(self) -> str:
        """Return all counters in exposition format."""
        return self.requests.render() + self.service_calls.render()


_lock = threading.Lock()
_tracker: MetricsTracker | None = None


def init() -> MetricsTracker:
    """Install and return a fresh process-wide tracker."""
    global _tracker
    tracker = MetricsTracker()
    with _lock:
        _tracker = tracker
    return tracker


def get_tracker() -> MetricsTracker:
    """Return the process-wide tracker, creating one if needed."""
    global _tracker
    with _lock:
        if _tracker is None:
            _tracker = MetricsTracker()
        return _tracker