"""
Retrier - Cancellation Contexts.

Tokens that let callers abort a retry sequence, and a sleep that honors them.
"""

from .base import (
    Context,
    Background,
    CancelContext,
    CancelFunc,
    background,
    with_cancel,
    with_deadline,
    with_timeout,
    sleep,
)

__all__ = [
    "Context",
    "Background",
    "CancelContext",
    "CancelFunc",
    "background",
    "with_cancel",
    "with_deadline",
    "with_timeout",
    "sleep",
]
