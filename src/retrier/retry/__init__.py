"""
Retrier - Retry Logic.

Retry executor, retry policy and delay schedules.
"""

from .backoff import (
    DelayFunc,
    no_delay,
    constant_delay,
    linear_delay,
    capped_linear_delay,
    exponential_delay,
    capped_exponential_delay,
)
from .config import UNLIMITED, RetryConfig, RetryPolicy, RetryStrategy
from .executor import Retrier

__all__ = [
    "DelayFunc",
    "no_delay",
    "constant_delay",
    "linear_delay",
    "capped_linear_delay",
    "exponential_delay",
    "capped_exponential_delay",
    "UNLIMITED",
    "RetryConfig",
    "RetryPolicy",
    "RetryStrategy",
    "Retrier",
]
