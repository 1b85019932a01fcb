"""
Retrier - Exception Hierarchy.

Errors synthesized by the retrier and by its cancellation contexts.
"""

from .base import (
    RetrierError,
    MaxRetriesExceededError,
    ContextError,
    Cancelled,
    DeadlineExceeded,
)

__all__ = [
    "RetrierError",
    "MaxRetriesExceededError",
    "ContextError",
    "Cancelled",
    "DeadlineExceeded",
]
