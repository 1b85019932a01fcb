"""
Base exception classes for retry execution.

Errors returned by a work callback are never wrapped here unless the retry
budget runs out; these types only cover conditions the retrier or its
cancellation contexts produce themselves.
"""


class RetrierError(Exception):
    """Base exception for all errors synthesized by the retrier."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class MaxRetriesExceededError(RetrierError):
    """
    Raised when work keeps asking for a retry after the budget is spent.

    The last work error is kept on `last_error` and chained as `__cause__`.
    """

    def __init__(self, last_error: BaseException | None, *, retries: int):
        super().__init__(f"failed after max retries: {last_error}")
        self.last_error = last_error
        self.retries = retries


class ContextError(RetrierError):
    """Base exception for cancellation context errors."""


class Cancelled(ContextError):
    """Raised when a context is canceled explicitly."""

    def __init__(self, message: str = "context canceled"):
        super().__init__(message)


class DeadlineExceeded(ContextError, TimeoutError):
    """Raised when a context deadline passes. Also a builtin TimeoutError."""

    def __init__(self, message: str = "context deadline exceeded"):
        super().__init__(message)
