"""
Tests for EventBus
===================
"""

from handpose_trainer.core.events import EventBus, Events


class TestEventBus:

    def test_emit_passes_kwargs(self):
        bus = EventBus()
        received = []
        bus.subscribe(Events.SAMPLE_ADDED, lambda label, count: received.append((label, count)))

        bus.emit(Events.SAMPLE_ADDED, label="happy", count=3)

        assert received == [("happy", 3)]

    def test_subscription_order(self):
        bus = EventBus()
        order = []
        bus.subscribe("evt", lambda: order.append("first"))
        bus.subscribe("evt", lambda: order.append("second"))

        bus.emit("evt")

        assert order == ["first", "second"]

    def test_failing_listener_does_not_block_others(self):
        bus = EventBus()
        received = []

        def broken(**kwargs):
            raise RuntimeError("boom")

        bus.subscribe("evt", broken)
        bus.subscribe("evt", lambda **kw: received.append(kw))

        bus.emit("evt", value=1)

        assert received == [{"value": 1}]

    def test_emit_without_listeners(self):
        EventBus().emit(Events.MODEL_SAVED, paths=[])

    def test_buses_are_independent(self):
        first, second = EventBus(), EventBus()
        received = []
        first.subscribe("evt", lambda: received.append("first"))

        second.emit("evt")

        assert received == []
