"""
Retry executor.
"""

import logging
from typing import Callable

from .backoff import DelayFunc
from .config import RetryConfig, RetryPolicy
from ..context import Context, background, sleep
from ..exceptions import MaxRetriesExceededError

logger = logging.getLogger(__name__)

Outcome = tuple[BaseException | None, bool]
Work = Callable[[], Outcome]
ContextWork = Callable[[Context], Outcome]


class Retrier:
    """
    Runs a unit of work until it stops asking for a retry.

    The work returns `(error, should_retry)`. The retrier keeps calling it
    while `should_retry` is true, waiting between calls according to the delay
    schedule, until the retry budget is spent or the context fires. It never
    decides on its own whether an error is worth retrying.

    A Retrier holds no per-run state and can be shared between threads.
    """

    def __init__(self, max_retries: int, delay: DelayFunc):
        """
        Initialize the retrier.

        Args:
            max_retries: Retries allowed after the first attempt; -1 for no limit
            delay: Delay schedule called with the number of retries already made
        """
        self.policy = RetryPolicy(max_retries=max_retries, delay=delay)

    @classmethod
    def from_policy(cls, policy: RetryPolicy) -> "Retrier":
        return cls(policy.max_retries, policy.delay)

    @classmethod
    def from_config(cls, config: RetryConfig) -> "Retrier":
        return cls.from_policy(config.to_policy())

    @property
    def max_retries(self) -> int:
        return self.policy.max_retries

    @property
    def delay(self) -> DelayFunc:
        return self.policy.delay

    def run(self, work: Work) -> None:
        """Run `work` with a context that is never canceled."""
        return self.run_ctx(background(), lambda ctx: work())

    def run_ctx(self, ctx: Context, work: ContextWork) -> None:
        """
        Run `work` until it succeeds, fails for good, runs out of retries,
        or `ctx` fires.

        Args:
            ctx: Cancellation context, passed through to `work`
            work: Callable returning `(error, should_retry)`

        Returns:
            None when the work finishes without an error

        Raises:
            The work's own error when it returns one with should_retry=False
            MaxRetriesExceededError: When the retry budget is spent
            The context's error when it fires while waiting for a retry
        """
        retries = 0

        while True:
            err, retry = work(ctx)
            if not retry:
                if err is not None:
                    raise err
                return None

            if err is None:
                logger.debug("Work asked for a retry without returning an error")

            if self.policy.budget_exhausted(retries):
                logger.warning(f"Giving up after {retries} retries: {err}")
                raise MaxRetriesExceededError(err, retries=retries) from err

            delay = self.policy.delay(retries)
            logger.debug(f"Retry {retries + 1}/{self._budget_label()}: {err}, waiting {delay:.3f}s")
            try:
                sleep(ctx, delay)
            except Exception as e:
                logger.debug(f"Stopped after {retries} retries: {e}")
                raise
            retries += 1

    def _budget_label(self) -> str:
        if self.policy.unlimited:
            return "unlimited"
        return str(self.policy.max_retries)

    def __repr__(self) -> str:
        return f"Retrier(max_retries={self.policy.max_retries})"
