"""
Mutation Recorder - black box for a traced object graph.

Register it as a listener and it keeps the most recent trace events in a
ring buffer for inspection, filtering and statistics.
"""

import logging
import time
from collections import Counter, deque
from typing import Optional

from deeptrace.config.settings import get_settings
from deeptrace.proxies.events import MutationType, TraceEvent

logger = logging.getLogger("deeptrace.tracing.recorder")


class MutationRecorder:
    """
    Listener that records trace events.

    Features:
    - In-memory ring buffer for recent events
    - Filtering by path prefix and mutation type
    - Search by path
    - Statistics
    """

    def __init__(self, max_events: Optional[int] = None):
        self.settings = get_settings()
        self._max_events = max_events or self.settings.tracing.recorder.max_events
        self._events: deque[tuple[float, TraceEvent]] = deque(maxlen=self._max_events)
        self._total = 0

    def on_mutation(self, event: TraceEvent):
        self._events.append((time.time(), event))
        self._total += 1
        logger.debug(f"Recorded {event.mutation_type.value} at {event.path!r}")

    def __call__(self, event: TraceEvent):
        self.on_mutation(event)

    def __len__(self):
        return len(self._events)

    @property
    def events(self) -> list[TraceEvent]:
        return [event for _, event in self._events]

    def list_events(
        self,
        path_prefix: str = None,
        mutation_type: MutationType = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[TraceEvent]:
        """List events, oldest first, with optional filters."""
        events = self.events

        if path_prefix:
            events = [
                e for e in events
                if e.path == path_prefix or e.path.startswith(path_prefix + ".")
            ]
        if mutation_type:
            events = [e for e in events if e.mutation_type == mutation_type]

        return events[offset:offset + limit]

    def search(self, query: str, limit: int = 20) -> list[TraceEvent]:
        """Most recent events whose path contains query."""
        query_lower = query.lower()
        results = []
        for _, event in reversed(self._events):
            if query_lower in event.path.lower():
                results.append(event)
                if len(results) >= limit:
                    break
        return results

    def get_stats(self) -> dict:
        """Get recording statistics."""
        events = self.events
        kinds = Counter(e.mutation_type.value for e in events)
        paths = Counter(e.path for e in events)

        return {
            "total_recorded": self._total,
            "buffered": len(events),
            "sets": kinds.get(MutationType.SET.value, 0),
            "deletes": kinds.get(MutationType.DELETE.value, 0),
            "distinct_paths": len(paths),
            "hottest_paths": paths.most_common(5),
            "oldest_at": self._events[0][0] if self._events else None,
            "newest_at": self._events[-1][0] if self._events else None,
            "max_events_capacity": self._max_events,
        }

    def clear(self):
        self._events.clear()
