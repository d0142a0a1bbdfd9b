"""
Tests for EventBus emission and error handling in game/events.py.
"""
import unittest

from game.events import EconomyEvent, EventBus, emit


class TestEventBus(unittest.TestCase):
    def setUp(self):
        self.bus = EventBus()
        self.calls = []

    def _success_handler_1(self, event):
        self.calls.append("success_1")

    def _success_handler_2(self, event):
        self.calls.append("success_2")

    def _fail_handler(self, event):
        self.calls.append("fail")
        raise ValueError("Intentional error for testing")

    def _wildcard_handler(self, event):
        self.calls.append("wildcard")

    def test_emit_continues_after_handler_exception(self):
        """
        A failing handler does not prevent subsequent handlers from executing.
        """
        self.bus.subscribe("test.event", self._success_handler_1)
        self.bus.subscribe("test.event", self._fail_handler)
        self.bus.subscribe("test.event", self._success_handler_2)

        with self.assertLogs("game.events", level="ERROR") as captured:
            self.bus.emit(EconomyEvent(event_key="test.event", wallet="W1"))

        self.assertEqual(self.calls, ["success_1", "fail", "success_2"])
        self.assertIn("Handler error on 'test.event'", captured.output[0])

    def test_wildcard_receives_everything(self):
        self.bus.subscribe("*", self._wildcard_handler)
        self.bus.emit(EconomyEvent(event_key="a", wallet="W1"))
        self.bus.emit(EconomyEvent(event_key="b", wallet="W1"))
        self.assertEqual(self.calls, ["wildcard", "wildcard"])

    def test_unsubscribe(self):
        self.bus.subscribe("test.event", self._success_handler_1)
        self.bus.unsubscribe("test.event", self._success_handler_1)
        self.bus.emit(EconomyEvent(event_key="test.event", wallet="W1"))
        self.assertEqual(self.calls, [])

    def test_emit_helper_without_bus_is_noop(self):
        emit(None, "test.event", "W1", 5.0, note="ignored")

    def test_emit_helper_builds_event(self):
        received = []
        self.bus.subscribe("test.event", received.append)
        emit(self.bus, "test.event", "W1", 5.0, note="kept")
        self.assertEqual(received[0].amount, 5.0)
        self.assertEqual(received[0].data, {"note": "kept"})


if __name__ == "__main__":
    unittest.main()
