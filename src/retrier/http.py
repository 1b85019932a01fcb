"""
HTTP work adapter.

Turns an httpx request into work a Retrier can run: transport failures and
selected status codes ask for a retry, every other error status fails at once.
"""

import logging
from typing import Iterable

import httpx

from .context import Context, background
from .retry import Retrier

logger = logging.getLogger(__name__)

DEFAULT_RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class HttpWork:
    """
    A single HTTP request, callable as retrier work.

    The response of the last attempt is kept on `response`, including
    error responses.
    """

    def __init__(
        self,
        client: httpx.Client,
        method: str,
        url: str,
        *,
        retryable_status_codes: Iterable[int] = DEFAULT_RETRYABLE_STATUS_CODES,
        **request_kwargs,
    ):
        """
        Initialize the request.

        Args:
            client: httpx client used to send the request
            method: HTTP method
            url: Request URL, absolute or relative to the client's base_url
            retryable_status_codes: HTTP status codes that trigger a retry
            **request_kwargs: Passed through to `client.request`
        """
        self.client = client
        self.method = method
        self.url = url
        self.retryable_status_codes = frozenset(retryable_status_codes)
        self.request_kwargs = request_kwargs
        self.response: httpx.Response | None = None

    def should_retry(self, status_code: int) -> bool:
        """Check if the given status code should trigger a retry."""
        return status_code in self.retryable_status_codes

    def __call__(self, ctx: Context) -> tuple[Exception | None, bool]:
        if ctx.done():
            return ctx.err(), False

        try:
            response = self.client.request(self.method, self.url, **self.request_kwargs)
        except httpx.TransportError as e:
            logger.debug(f"{self.method} {self.url} failed: {e!r}")
            return e, True

        self.response = response
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            return e, self.should_retry(response.status_code)
        return None, False


def request_with_retry(
    retrier: Retrier,
    client: httpx.Client,
    method: str,
    url: str,
    *,
    ctx: Context | None = None,
    retryable_status_codes: Iterable[int] = DEFAULT_RETRYABLE_STATUS_CODES,
    **request_kwargs,
) -> httpx.Response:
    """
    Send a request, retrying it according to `retrier`.

    Returns:
        The successful response

    Raises:
        httpx.HTTPStatusError: On a status code that is not retried
        MaxRetriesExceededError: When retries run out
        The context's error when `ctx` fires between attempts
    """
    work = HttpWork(
        client,
        method,
        url,
        retryable_status_codes=retryable_status_codes,
        **request_kwargs,
    )
    retrier.run_ctx(ctx or background(), work)
    return work.response
