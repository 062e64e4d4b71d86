"""Retry policy for transfers to external applications.

Automation of desktop applications fails transiently now and then (the
application is busy, a dialog is still closing, ...). Transfers are
therefore retried according to a :py:class:`RetryPolicy`; the default is a
single, immediate, unconditional retry:

- retries: 1 (two attempts in total)
- backoff: none
- retry_on: any ``Exception``
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

from snapshare.config import settings

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from snapshare.exporters.base import CancellationToken

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class OperationCancelledError(Exception):
    """Raised by :py:func:`run_with_retry` when the token was cancelled."""


@dataclass(frozen=True)
class RetryPolicy:
    """How often, and after which failures, an operation is attempted again.

    Parameters
    ----------
    retries
        Number of retries after the first attempt (total attempts = retries + 1)
    backoff
        Seconds to wait between attempts
    retry_on
        Exception types that trigger a retry; anything else is raised at once
    """

    retries: int = 1
    backoff: float = 0.0
    retry_on: tuple[type[BaseException], ...] = (Exception,)

    def __post_init__(self):
        if self.retries < 0:
            msg = f"retries must be >= 0, got {self.retries}"
            raise ValueError(msg)
        if self.backoff < 0:
            msg = f"backoff must be >= 0, got {self.backoff}"
            raise ValueError(msg)

    @property
    def attempts(self) -> int:
        """Total number of attempts."""
        return self.retries + 1

    @classmethod
    def from_settings(cls) -> RetryPolicy:
        """Unconditional, immediate retries, as many as ``SNAP_EXPORT_RETRIES``."""
        return cls(retries=settings.SNAP_EXPORT_RETRIES)


DEFAULT_RETRY_POLICY = RetryPolicy()


async def run_with_retry(
    policy: RetryPolicy,
    operation: Callable[[], Awaitable[T]],
    *,
    token: CancellationToken | None = None,
    description: str = "operation",
) -> T:
    """Await ``operation()`` until it succeeds or the policy gives up.

    Parameters
    ----------
    policy
        Retry policy to apply
    operation
        Zero-argument callable returning a new awaitable for every attempt
    token
        Checked before every attempt
    description
        Used in log messages

    Returns
    -------
    T
        Result of the first successful attempt

    Raises
    ------
    OperationCancelledError
        If the token was cancelled before an attempt
    Exception
        The error of the last attempt, once all attempts have failed, or
        the first error not matched by ``policy.retry_on``
    """
    for attempt in range(1, policy.attempts + 1):
        if token is not None and token.cancelled:
            msg = f"{description} cancelled before attempt {attempt}"
            raise OperationCancelledError(msg)
        try:
            return await operation()
        except policy.retry_on as e:
            if attempt == policy.attempts:
                _logger.warning(
                    "%s failed after %d attempt(s): %s",
                    description,
                    policy.attempts,
                    e,
                )
                raise
            _logger.info(
                "%s failed (attempt %d/%d), retrying: %s",
                description,
                attempt,
                policy.attempts,
                e,
            )
            if policy.backoff:
                await asyncio.sleep(policy.backoff)

    msg = "RetryPolicy allows no attempts"  # pragma: no cover
    raise RuntimeError(msg)  # pragma: no cover
