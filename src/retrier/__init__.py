"""
Retrier - Retry Execution with Cancellation.

Run unreliable work again and again with a pluggable delay schedule, a retry
budget and a cancellation context.
"""

from .context import (
    Context,
    Background,
    CancelContext,
    background,
    with_cancel,
    with_deadline,
    with_timeout,
    sleep,
)
from .exceptions import (
    RetrierError,
    MaxRetriesExceededError,
    ContextError,
    Cancelled,
    DeadlineExceeded,
)
from .retry import (
    UNLIMITED,
    Retrier,
    RetryConfig,
    RetryPolicy,
    RetryStrategy,
    no_delay,
    constant_delay,
    linear_delay,
    capped_linear_delay,
    exponential_delay,
    capped_exponential_delay,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Retry
    "UNLIMITED",
    "Retrier",
    "RetryConfig",
    "RetryPolicy",
    "RetryStrategy",
    # Delay schedules
    "no_delay",
    "constant_delay",
    "linear_delay",
    "capped_linear_delay",
    "exponential_delay",
    "capped_exponential_delay",
    # Contexts
    "Context",
    "Background",
    "CancelContext",
    "background",
    "with_cancel",
    "with_deadline",
    "with_timeout",
    "sleep",
    # Exceptions
    "RetrierError",
    "MaxRetriesExceededError",
    "ContextError",
    "Cancelled",
    "DeadlineExceeded",
]
