"""Unit tests for EventBus: subscribe/unsubscribe, delivery, overflow."""
from __future__ import annotations

import queue
import threading

import pytest

from outpost.comms.event_bus import EventBus


@pytest.mark.unit
class TestEventBusBasics:
    def test_publish_delivers_to_every_subscriber(self):
        bus = EventBus()
        q1 = bus.subscribe()
        q2 = bus.subscribe()
        bus.publish("nightfall", {"wave": 2})
        for q in (q1, q2):
            msg = q.get_nowait()
            assert msg == {"type": "nightfall", "data": {"wave": 2}}

    def test_publish_without_data(self):
        bus = EventBus()
        q = bus.subscribe()
        bus.publish("ping")
        assert "data" not in q.get_nowait()

    def test_unsubscribe_stops_delivery(self):
        bus = EventBus()
        q = bus.subscribe()
        bus.unsubscribe(q)
        bus.publish("after")
        assert q.empty()

    def test_unsubscribe_unknown_queue_is_safe(self):
        EventBus().unsubscribe(queue.Queue())

    def test_filtered_subscriber(self):
        bus = EventBus()
        everything = bus.subscribe()
        waves = bus.subscribe(event_types=["nightfall", "daybreak"])
        bus.publish("creature_killed", {"points": 15})
        bus.publish("nightfall", {"wave": 2})
        bus.publish("daybreak")
        assert everything.qsize() == 3
        assert [waves.get_nowait()["type"] for _ in range(2)] == ["nightfall", "daybreak"]
        assert waves.empty()


@pytest.mark.unit
class TestEventBusOverflow:
    def test_full_queue_drops_oldest(self):
        bus = EventBus(maxsize=3)
        q = bus.subscribe()
        for i in range(5):
            bus.publish("creature_killed", {"n": i})
        seen = [q.get_nowait()["data"]["n"] for _ in range(3)]
        assert seen == [2, 3, 4]

    def test_concurrent_publishers(self):
        bus = EventBus(maxsize=10_000)
        q = bus.subscribe()

        def burst():
            for _ in range(200):
                bus.publish("hit")

        threads = [threading.Thread(target=burst) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert q.qsize() == 800
