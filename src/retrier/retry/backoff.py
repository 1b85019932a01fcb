"""
Delay schedules.

Each constructor returns a function mapping the zero-based number of retries
already made to the delay in seconds before the next one. Any callable with
the same signature can be used instead, for example one that adds jitter.
"""

from typing import Callable

DelayFunc = Callable[[int], float]


def no_delay() -> DelayFunc:
    """Retry immediately."""

    def delay(retries: int) -> float:
        return 0

    return delay


def constant_delay(delay: float) -> DelayFunc:
    """Wait the same `delay` before every retry."""

    def constant(retries: int) -> float:
        return delay

    return constant


def linear_delay(step: float) -> DelayFunc:
    """
    Grow the delay by `step` on every retry.

    delay = step + retries * step, so the first retry waits exactly `step`.
    """

    def linear(retries: int) -> float:
        return step + retries * step

    return linear


def capped_linear_delay(step: float, cap: float) -> DelayFunc:
    """Linear delay that never exceeds `cap`."""

    def capped_linear(retries: int) -> float:
        delay = step + retries * step
        if delay < cap:
            return delay
        return cap

    return capped_linear


def exponential_delay(base: float, exponent_base: int) -> DelayFunc:
    """
    Multiply the delay by `exponent_base` on every retry.

    delay = base * exponent_base ** retries. The power is an exact integer,
    so pair this with a cap when the retry budget is unlimited.
    """

    def exponential(retries: int) -> float:
        return base * exponent_base**retries

    return exponential


def capped_exponential_delay(base: float, exponent_base: int, cap: float) -> DelayFunc:
    """Exponential delay that never exceeds `cap`."""
    uncapped = exponential_delay(base, exponent_base)

    def capped_exponential(retries: int) -> float:
        # Once the power alone passes the cap there is no need to multiply it
        # out further.
        if base > 0 and exponent_base > 1 and exponent_base**retries >= cap / base:
            return cap
        return min(uncapped(retries), cap)

    return capped_exponential
