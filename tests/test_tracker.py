"""Tests for buffer activity tracking."""

import pytest

from presence_relay.contracts import BufferInfo, HostEvent
from presence_relay.host import CallbackHost
from presence_relay.tracker import BufferActivityTracker

A = BufferInfo("a.py", path="/src/a.py", language="python")
B = BufferInfo("b.py", path="/src/b.py", language="python")


@pytest.fixture
def activity():
    return []


@pytest.fixture
def tracker(host, activity):
    tracker = BufferActivityTracker(host, on_activity=lambda: activity.append(1))
    tracker.subscribe()
    return tracker


class TestSubscription:
    """Test host listener registration."""

    def test_subscribe_registers_three_listeners(self, host, tracker):
        """Subscribing registers one callback per host event."""
        assert host.listener_count() == 3
        for event in HostEvent:
            assert host.listener_count(event) == 1

    def test_subscribe_twice_is_noop(self, host, tracker):
        """A second subscribe does not double-register."""
        tracker.subscribe()

        assert host.listener_count() == 3

    def test_unsubscribe_removes_listeners(self, host, tracker):
        """Unsubscribing deregisters every callback."""
        tracker.unsubscribe()

        assert host.listener_count() == 0
        assert tracker.subscribed is False

    def test_unsubscribe_when_not_subscribed(self, host):
        """Unsubscribe without subscribe is harmless."""
        tracker = BufferActivityTracker(host, on_activity=lambda: None)

        tracker.unsubscribe()

        assert host.listener_count() == 0

    def test_events_ignored_after_unsubscribe(self, host, tracker, activity):
        """Host events no longer reach the tracker."""
        tracker.unsubscribe()

        host.emit(HostEvent.TYPING)

        assert activity == []
        assert tracker.snapshot.should_be_active is False


class TestTyping:
    """Test the typing rule."""

    def test_first_typing_reports_activity(self, host, tracker, activity):
        """Typing latches active and reports once."""
        host.emit(HostEvent.TYPING)

        assert activity == [1]
        assert tracker.snapshot.should_be_active is True
        assert tracker.snapshot.active_buffer_id == "a.py"

    def test_repeated_typing_same_buffer(self, host, tracker, activity):
        """Further typing in the same buffer is debounced."""
        for _ in range(5):
            host.emit(HostEvent.TYPING)

        assert activity == [1]

    def test_typing_in_other_buffer_without_change_event(self, host, tracker, activity):
        """A different buffer identity re-reports even without a change event."""
        host.emit(HostEvent.TYPING)
        host.set_buffer(B)
        host.emit(HostEvent.TYPING)

        assert activity == [1, 1]
        assert tracker.snapshot.active_buffer_id == "b.py"

    def test_typing_after_focus_lost(self, host, tracker, activity):
        """Focus loss clears the latch so the next keystroke reports again."""
        host.emit(HostEvent.TYPING)
        host.emit(HostEvent.FOCUS_LOST)
        host.emit(HostEvent.TYPING)

        assert activity == [1, 1]

    def test_typing_without_buffer(self, host, tracker, activity):
        """Typing with no buffer still latches under a None identity."""
        host.set_buffer(None)

        host.emit(HostEvent.TYPING)
        host.emit(HostEvent.TYPING)

        assert activity == [1]
        assert tracker.snapshot.active_buffer_id is None


class TestBufferChanged:
    """Test the buffer-changed rule."""

    def test_switch_clears_latch(self, host, tracker):
        """Switching to another buffer clears should_be_active."""
        host.emit(HostEvent.TYPING)

        host.switch_buffer(B)

        assert tracker.snapshot.should_be_active is False

    def test_same_buffer_keeps_latch(self, host, tracker):
        """A change event for the same buffer leaves the latch alone."""
        host.emit(HostEvent.TYPING)

        host.switch_buffer(A)

        assert tracker.snapshot.should_be_active is True

    def test_mode_change_keeps_latch(self, host, tracker):
        """Changing language on the same buffer is not a buffer change."""
        host.emit(HostEvent.TYPING)

        host.switch_buffer(BufferInfo("a.py", path="/src/a.py", language="text"))

        assert tracker.snapshot.should_be_active is True

    def test_rapid_switching_does_not_report(self, host, tracker, activity):
        """Flipping between buffers without typing reports nothing."""
        for buffer in (B, A, B, A, B):
            host.switch_buffer(buffer)

        assert activity == []

    def test_switch_back_and_type_reports_again(self, host, tracker, activity):
        """Typing after a round trip counts as a new activation."""
        host.emit(HostEvent.TYPING)
        host.switch_buffer(B)
        host.switch_buffer(A)
        host.emit(HostEvent.TYPING)

        assert activity == [1, 1]


class TestFocusLost:
    """Test the focus-lost rule."""

    def test_focus_lost_clears_latch(self, host, tracker):
        host.emit(HostEvent.TYPING)

        host.emit(HostEvent.FOCUS_LOST)

        assert tracker.snapshot.should_be_active is False

    def test_focus_lost_keeps_reported_path(self, host, tracker):
        """Only the latch is cleared."""
        tracker.mark_reported("/src/a.py")

        host.emit(HostEvent.FOCUS_LOST)

        assert tracker.snapshot.last_reported_path == "/src/a.py"


class TestReportedPath:
    """Test reported-path bookkeeping."""

    def test_mark_and_clear(self, tracker):
        tracker.mark_reported("/src/a.py")
        assert tracker.snapshot.last_reported_path == "/src/a.py"

        tracker.clear_reported()
        assert tracker.snapshot.last_reported_path is None

    def test_reset(self, host, tracker):
        """Reset forgets latch, active buffer and reported path."""
        host.emit(HostEvent.TYPING)
        tracker.mark_reported("/src/a.py")

        tracker.reset()

        assert tracker.snapshot.should_be_active is False
        assert tracker.snapshot.active_buffer_id is None
        assert tracker.snapshot.last_reported_path is None


class TestCallbackHost:
    """Test the in-process host."""

    def test_failing_listener_does_not_stop_others(self):
        """A raising callback is logged and the rest still run."""
        host = CallbackHost()
        called = []

        def broken():
            raise RuntimeError("boom")

        host.add_listener(HostEvent.TYPING, broken)
        host.add_listener(HostEvent.TYPING, lambda: called.append("ok"))

        host.emit(HostEvent.TYPING)

        assert called == ["ok"]

    def test_show_message(self):
        """Messages are recorded and forwarded."""
        seen = []
        host = CallbackHost(on_message=seen.append)

        host.show_message("hello")

        assert host.messages == ["hello"]
        assert seen == ["hello"]
