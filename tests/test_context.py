"""Tests for cancellation contexts and the cancelable sleep."""

import threading
import time

import pytest
from retrier.context import (
    Context,
    background,
    sleep,
    with_cancel,
    with_deadline,
    with_timeout,
)
from retrier.exceptions import Cancelled, DeadlineExceeded


class TestBackground:
    """Test the never-canceled context."""

    def test_never_fires(self):
        """Background context has no error and no deadline."""
        ctx = background()

        assert ctx.err() is None
        assert ctx.done() is False
        assert ctx.deadline() is None

    def test_wait_times_out(self):
        """Waiting only returns on timeout."""
        assert background().wait(0.001) is False

    def test_is_shared(self):
        """The same instance is returned every time."""
        assert background() is background()


class TestWithCancel:
    """Test explicitly canceled contexts."""

    def test_cancel_fires_with_cancelled(self):
        """cancel() fires the context with Cancelled."""
        ctx, cancel = with_cancel()
        assert ctx.done() is False

        cancel()

        assert ctx.done() is True
        assert isinstance(ctx.err(), Cancelled)
        assert ctx.wait(0) is True

    def test_cancel_is_idempotent(self):
        """Calling cancel twice keeps the first error."""
        ctx, cancel = with_cancel()
        cancel()
        first = ctx.err()

        cancel()

        assert ctx.err() is first

    def test_parent_cancel_propagates_to_child(self):
        """Children fire with their parent's error."""
        parent, cancel_parent = with_cancel()
        child, _ = with_cancel(parent)

        cancel_parent()

        assert child.err() is parent.err()

    def test_child_cancel_does_not_touch_parent(self):
        """Canceling a child leaves the parent running."""
        parent, _ = with_cancel()
        child, cancel_child = with_cancel(parent)

        cancel_child()

        assert child.done() is True
        assert parent.done() is False

    def test_child_of_fired_parent_starts_fired(self):
        """Deriving from a canceled parent yields a canceled child."""
        parent, cancel_parent = with_cancel()
        cancel_parent()

        child, _ = with_cancel(parent)

        assert isinstance(child.err(), Cancelled)

    def test_cancel_from_another_thread_wakes_waiter(self):
        """A blocked wait returns as soon as another thread cancels."""
        ctx, cancel = with_cancel()
        timer = threading.Timer(0.01, cancel)
        timer.start()

        start = time.monotonic()
        fired = ctx.wait(5)
        elapsed = time.monotonic() - start

        assert fired is True
        assert elapsed < 1


class TestWithTimeout:
    """Test deadline contexts."""

    def test_fires_with_deadline_exceeded(self):
        """Context fires once the timeout passes."""
        ctx, cancel = with_timeout(0.01)
        try:
            assert ctx.wait(1) is True
            assert isinstance(ctx.err(), DeadlineExceeded)
        finally:
            cancel()

    def test_cancel_before_deadline(self):
        """Canceling before the deadline fires with Cancelled."""
        ctx, cancel = with_timeout(10)

        cancel()

        assert isinstance(ctx.err(), Cancelled)

    def test_past_deadline_fires_immediately(self):
        """A deadline already in the past fires on creation."""
        ctx, _ = with_deadline(time.monotonic() - 1)

        assert isinstance(ctx.err(), DeadlineExceeded)

    def test_child_keeps_earlier_parent_deadline(self):
        """A child deadline never extends its parent's."""
        parent, cancel = with_timeout(5)
        try:
            child, _ = with_timeout(60, parent)
            assert child.deadline() == parent.deadline()
        finally:
            cancel()

    def test_child_of_timeout_parent_times_out(self):
        """Parent deadline propagates as the parent's own error."""
        parent, cancel = with_timeout(0.01)
        try:
            child, _ = with_cancel(parent)
            assert child.wait(1) is True
            assert parent.wait(1) is True
            assert isinstance(child.err(), DeadlineExceeded)
            assert child.err() is parent.err()
        finally:
            cancel()

    def test_child_with_same_deadline_inherits_parent_error(self):
        """A child deadline equal to its parent's fires with the parent's error."""
        parent, cancel = with_timeout(0.01)
        try:
            child, _ = with_deadline(parent.deadline(), parent)
            assert child.wait(1) is True
            assert child.err() is parent.err()
        finally:
            cancel()

    def test_child_with_earlier_deadline_fires_first(self):
        """A child's own earlier deadline fires without touching the parent."""
        parent, cancel = with_timeout(10)
        try:
            child, _ = with_timeout(0.01, parent)
            assert child.wait(1) is True
            assert isinstance(child.err(), DeadlineExceeded)
            assert parent.done() is False
        finally:
            cancel()


class EventContext(Context):
    """A caller-implemented context backed by a plain threading.Event."""

    def __init__(self):
        self._event = threading.Event()
        self._err = None

    def cancel(self):
        self._err = Cancelled("custom canceled")
        self._event.set()

    def err(self):
        return self._err

    def wait(self, timeout=None):
        return self._event.wait(timeout)


class TestForeignParent:
    """Test children of caller-implemented contexts."""

    def test_child_fires_when_parent_fires_later(self):
        """A child follows a custom parent that fires after derivation."""
        parent = EventContext()
        child, _ = with_cancel(parent)
        assert child.done() is False

        parent.cancel()

        assert child.wait(1) is True
        assert child.err() is parent.err()

    def test_child_of_fired_parent_starts_fired(self):
        """A custom parent that already fired yields a fired child."""
        parent = EventContext()
        parent.cancel()

        child, _ = with_cancel(parent)

        assert child.err() is parent.err()

    def test_child_cancelled_first_keeps_own_error(self):
        """Canceling the child first keeps its own error."""
        parent = EventContext()
        child, cancel_child = with_cancel(parent)

        cancel_child()
        parent.cancel()
        time.sleep(0.1)

        assert isinstance(child.err(), Cancelled)
        assert child.err() is not parent.err()

    def test_sleep_on_child_raises_parent_error(self):
        """Sleeping on a child wakes when the custom parent fires."""
        parent = EventContext()
        child, _ = with_cancel(parent)
        timer = threading.Timer(0.01, parent.cancel)
        timer.start()

        with pytest.raises(Cancelled, match="custom canceled"):
            sleep(child, 5)


class TestSleep:
    """Test the cancelable sleep."""

    def test_sleeps_for_duration(self):
        """Returns None after the full duration."""
        start = time.monotonic()
        result = sleep(background(), 0.002)
        elapsed = time.monotonic() - start

        assert result is None
        assert elapsed >= 0.002

    def test_context_times_out_during_sleep(self):
        """Raises DeadlineExceeded when the context expires first."""
        ctx, cancel = with_timeout(0.005)
        try:
            start = time.monotonic()
            with pytest.raises(DeadlineExceeded, match="context deadline exceeded"):
                sleep(ctx, 0.5)
            elapsed = time.monotonic() - start
        finally:
            cancel()

        assert elapsed < 0.5

    def test_fired_context_wins_over_zero_delay(self):
        """Zero duration still raises when the context has already fired."""
        ctx, cancel = with_cancel()
        cancel()

        with pytest.raises(Cancelled):
            sleep(ctx, 0)

    def test_negative_duration_is_zero(self):
        """Negative durations do not block."""
        assert sleep(background(), -1) is None

    def test_raises_context_error_verbatim(self):
        """The raised error is the context's own error object."""
        ctx, cancel = with_cancel()
        cancel()

        with pytest.raises(Cancelled) as exc_info:
            sleep(ctx, 1)

        assert exc_info.value is ctx.err()
