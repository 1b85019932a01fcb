"""
Cancellation contexts.

A context is a caller-owned signal that can fire once, either explicitly or
when a deadline passes. Work callbacks receive the context so they can observe
cancellation themselves; the retrier only checks it while waiting between
attempts.
"""

import threading
import time
from abc import ABC, abstractmethod
from typing import Callable

from ..exceptions import Cancelled, DeadlineExceeded

CancelFunc = Callable[[], None]

# Seconds between checks of whether a child fired before its foreign parent.
_WATCH_INTERVAL = 0.05


class Context(ABC):
    """
    Abstract cancellation token.

    Implementations must be safe to read from several threads at once.
    """

    @abstractmethod
    def err(self) -> BaseException | None:
        """Return the error the context fired with, or None while live."""
        ...

    @abstractmethod
    def wait(self, timeout: float | None = None) -> bool:
        """
        Block until the context fires or `timeout` seconds pass.

        Returns:
            True if the context has fired, False on timeout
        """
        ...

    def deadline(self) -> float | None:
        """Return the monotonic deadline, or None when there is none."""
        return None

    def done(self) -> bool:
        """Check whether the context has fired."""
        return self.err() is not None


class Background(Context):
    """A context that never fires."""

    def err(self) -> BaseException | None:
        return None

    def wait(self, timeout: float | None = None) -> bool:
        if timeout is None:
            raise ValueError("waiting on a background context without a timeout never returns")
        if timeout > 0:
            time.sleep(timeout)
        return False

    def __repr__(self) -> str:
        return "Background()"


_BACKGROUND = Background()


def background() -> Context:
    """Return the shared context that is never canceled."""
    return _BACKGROUND


class CancelContext(Context):
    """
    A context fired by an explicit cancel, a deadline, or its parent.

    Created through `with_cancel`, `with_timeout` or `with_deadline`.
    """

    def __init__(self, parent: Context | None = None, deadline: float | None = None):
        self._parent = parent or _BACKGROUND
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._err: BaseException | None = None
        self._children: list["CancelContext"] = []
        self._timer: threading.Timer | None = None

        # Deadlines the parent enforces are not re-armed; the parent fires the
        # child with its own error.
        parent_deadline = self._parent.deadline()
        own_deadline = deadline
        if parent_deadline is not None and (deadline is None or parent_deadline <= deadline):
            own_deadline = None
            deadline = parent_deadline
        self._deadline = deadline

        if isinstance(self._parent, CancelContext):
            self._parent._add_child(self)
        elif self._parent.done():
            self._fire(self._parent.err())
        elif not isinstance(self._parent, Background):
            watcher = threading.Thread(target=self._watch_parent, daemon=True)
            watcher.start()

        if own_deadline is not None and not self.done():
            remaining = own_deadline - time.monotonic()
            if remaining <= 0:
                self._fire(DeadlineExceeded())
            else:
                self._timer = threading.Timer(remaining, self._fire, args=(DeadlineExceeded(),))
                self._timer.daemon = True
                self._timer.start()

    def err(self) -> BaseException | None:
        with self._lock:
            return self._err

    def wait(self, timeout: float | None = None) -> bool:
        return self._event.wait(timeout)

    def deadline(self) -> float | None:
        return self._deadline

    def cancel(self) -> None:
        """Fire the context with `Cancelled`. Calling it again has no effect."""
        self._fire(Cancelled())

    def _add_child(self, child: "CancelContext") -> None:
        with self._lock:
            err = self._err
            if err is None:
                self._children.append(child)
        if err is not None:
            child._fire(err)

    def _watch_parent(self) -> None:
        """Fire with the parent's error once a foreign parent fires."""
        while not self._event.is_set():
            if self._parent.wait(_WATCH_INTERVAL):
                self._fire(self._parent.err())
                return

    def _remove_child(self, child: "CancelContext") -> None:
        with self._lock:
            if child in self._children:
                self._children.remove(child)

    def _fire(self, err: BaseException | None) -> None:
        with self._lock:
            if self._err is not None:
                return
            self._err = err
            children, self._children = self._children, []
            timer, self._timer = self._timer, None
        self._event.set()
        if timer is not None:
            timer.cancel()
        for child in children:
            child._fire(err)
        if isinstance(self._parent, CancelContext):
            self._parent._remove_child(self)

    def __repr__(self) -> str:
        return f"CancelContext(err={self.err()!r}, deadline={self._deadline!r})"


def with_cancel(parent: Context | None = None) -> tuple[CancelContext, CancelFunc]:
    """Derive a context that fires when `cancel` is called or `parent` fires."""
    ctx = CancelContext(parent)
    return ctx, ctx.cancel


def with_deadline(
    deadline: float,
    parent: Context | None = None,
) -> tuple[CancelContext, CancelFunc]:
    """
    Derive a context that fires with `DeadlineExceeded` at `deadline`.

    Args:
        deadline: Point in time on the `time.monotonic()` clock
        parent: Optional parent context; an earlier parent deadline wins

    Returns:
        The derived context and its cancel function
    """
    ctx = CancelContext(parent, deadline=deadline)
    return ctx, ctx.cancel


def with_timeout(
    timeout: float,
    parent: Context | None = None,
) -> tuple[CancelContext, CancelFunc]:
    """Derive a context that fires with `DeadlineExceeded` after `timeout` seconds."""
    return with_deadline(time.monotonic() + timeout, parent)


def sleep(ctx: Context, seconds: float) -> None:
    """
    Pause for `seconds`, or until `ctx` fires.

    Raises:
        The context's own error if it fires before the duration elapses
    """
    if ctx.wait(max(0.0, seconds)):
        raise ctx.err()
