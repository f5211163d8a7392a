"""EventBus: thread-safe pub/sub for simulation events.

The engine and its subsystems publish gameplay events here (kills,
structure losses, nightfall, game over).  Renderers, sound layers and
tests subscribe and drain their own queue.  Events are observational
only: nothing in the simulation reads them back.

A subscriber may pass ``event_types`` to receive only those events; the
default is everything.
"""

from __future__ import annotations

import queue
import threading
from typing import Iterable


class EventBus:
    """Fan-out of ``{"type", "data"}`` messages to bounded subscriber queues."""

    def __init__(self, maxsize: int = 100) -> None:
        self._lock = threading.Lock()
        self._subscribers: list[tuple[queue.Queue, frozenset[str] | None]] = []
        self._maxsize = maxsize

    def subscribe(self, event_types: Iterable[str] | None = None) -> queue.Queue:
        """Register a new subscriber queue, optionally limited to *event_types*."""
        q: queue.Queue = queue.Queue(maxsize=self._maxsize)
        wanted = frozenset(event_types) if event_types is not None else None
        with self._lock:
            self._subscribers.append((q, wanted))
        return q

    def unsubscribe(self, q: queue.Queue) -> None:
        with self._lock:
            self._subscribers = [(sq, w) for sq, w in self._subscribers if sq is not q]

    def publish(self, event_type: str, data: dict | None = None) -> None:
        msg: dict = {"type": event_type}
        if data is not None:
            msg["data"] = data
        with self._lock:
            for q, wanted in self._subscribers:
                if wanted is None or event_type in wanted:
                    self._offer(q, msg)

    @staticmethod
    def _offer(q: queue.Queue, msg: dict) -> None:
        # Full queue: evict the oldest so nightfall / game_over still land
        # behind a burst of kill events.
        try:
            q.put_nowait(msg)
            return
        except queue.Full:
            pass
        try:
            q.get_nowait()
        except queue.Empty:
            pass
        try:
            q.put_nowait(msg)
        except queue.Full:
            pass
