"""
Retry policy and configuration.
"""

from dataclasses import dataclass, field
from enum import Enum

from .backoff import (
    DelayFunc,
    no_delay,
    constant_delay,
    linear_delay,
    capped_linear_delay,
    exponential_delay,
    capped_exponential_delay,
)

UNLIMITED = -1


@dataclass(frozen=True)
class RetryPolicy:
    """
    Immutable retry limits used by a Retrier.

    Attributes:
        max_retries: Retries allowed after the first attempt, or UNLIMITED (-1)
        delay: Delay schedule called with the number of retries already made
    """

    max_retries: int = 5
    delay: DelayFunc = field(default_factory=no_delay)

    @property
    def unlimited(self) -> bool:
        return self.max_retries == UNLIMITED

    def budget_exhausted(self, retries: int) -> bool:
        """Check whether `retries` retries use up the whole budget."""
        return not self.unlimited and retries >= self.max_retries


class RetryStrategy(str, Enum):
    """Available delay strategies."""

    NONE = "none"  # delay = 0
    CONSTANT = "constant"  # delay = base
    LINEAR = "linear"  # delay = base * (retries + 1)
    EXPONENTIAL = "exponential"  # delay = base * (exponent_base ** retries)


@dataclass
class RetryConfig:
    """
    Declarative retry configuration.

    Attributes:
        max_retries: Maximum number of retries, UNLIMITED for no limit (default: 5)
        base_delay: Base delay in seconds (default: 1.0)
        max_delay: Delay cap in seconds, None for uncapped (default: 60.0)
        strategy: Delay strategy to use (default: exponential)
        exponent_base: Growth factor for the exponential strategy (default: 2)
    """

    max_retries: int = 5
    base_delay: float = 1.0
    max_delay: float | None = 60.0
    strategy: RetryStrategy = RetryStrategy.EXPONENTIAL
    exponent_base: int = 2

    def delay_func(self) -> DelayFunc:
        """Build the delay schedule this configuration describes."""
        strategy = RetryStrategy(self.strategy)
        if strategy == RetryStrategy.NONE:
            return no_delay()
        if strategy == RetryStrategy.CONSTANT:
            if self.max_delay is not None:
                return constant_delay(min(self.base_delay, self.max_delay))
            return constant_delay(self.base_delay)
        if strategy == RetryStrategy.LINEAR:
            if self.max_delay is not None:
                return capped_linear_delay(self.base_delay, self.max_delay)
            return linear_delay(self.base_delay)
        if self.max_delay is not None:
            return capped_exponential_delay(self.base_delay, self.exponent_base, self.max_delay)
        return exponential_delay(self.base_delay, self.exponent_base)

    def to_policy(self) -> RetryPolicy:
        """Freeze this configuration into a RetryPolicy."""
        return RetryPolicy(max_retries=self.max_retries, delay=self.delay_func())

    @classmethod
    def aggressive(cls) -> "RetryConfig":
        """Preset for aggressive retry (more attempts, longer delays)."""
        return cls(
            max_retries=10,
            base_delay=2.0,
            max_delay=120.0,
        )

    @classmethod
    def conservative(cls) -> "RetryConfig":
        """Preset for conservative retry (fewer attempts, shorter delays)."""
        return cls(
            max_retries=3,
            base_delay=0.5,
            max_delay=10.0,
        )

    @classmethod
    def no_retry(cls) -> "RetryConfig":
        """Preset for no retry (single attempt only)."""
        return cls(max_retries=0, strategy=RetryStrategy.NONE)

    @classmethod
    def unlimited(cls) -> "RetryConfig":
        """Preset that retries until the work stops asking or a context fires."""
        return cls(max_retries=UNLIMITED)
