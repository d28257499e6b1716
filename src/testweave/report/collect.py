"""Reporter that keeps events in memory for programmatic inspection."""

from __future__ import annotations

import threading

from testweave.runner.models import ReportEvent


class CollectingReporter:
    """Report sink that records every event it receives, in arrival order."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._events: list[ReportEvent] = []

    def __call__(self, event: ReportEvent) -> None:
        with self._lock:
            self._events.append(event)

    @property
    def events(self) -> list[ReportEvent]:
        with self._lock:
            return list(self._events)

    def of_type[E: ReportEvent](self, cls: type[E]) -> list[E]:
        return [e for e in self.events if isinstance(e, cls)]
