"""Unit tests for the transfer retry policy."""

import asyncio
import logging
import time
from unittest.mock import AsyncMock, patch

import pytest

from snapshare.exporters.base import CancellationToken
from snapshare.exporters.retry import (
    DEFAULT_RETRY_POLICY,
    OperationCancelledError,
    RetryPolicy,
    run_with_retry,
)


class TestRetryPolicy:
    """Test the RetryPolicy value."""

    def test_default_policy(self):
        """Test the default: one immediate retry for any exception."""
        assert DEFAULT_RETRY_POLICY.retries == 1
        assert DEFAULT_RETRY_POLICY.attempts == 2
        assert DEFAULT_RETRY_POLICY.backoff == 0
        assert DEFAULT_RETRY_POLICY.retry_on == (Exception,)

    def test_negative_retries_rejected(self):
        """Test that a negative retry count is invalid."""
        with pytest.raises(ValueError, match="retries must be >= 0"):
            RetryPolicy(retries=-1)

    def test_negative_backoff_rejected(self):
        """Test that a negative backoff is invalid."""
        with pytest.raises(ValueError, match="backoff must be >= 0"):
            RetryPolicy(backoff=-0.5)

    def test_from_settings(self):
        """Test that the retry count comes from SNAP_EXPORT_RETRIES."""
        with patch("snapshare.exporters.retry.settings") as mock_settings:
            mock_settings.SNAP_EXPORT_RETRIES = 3
            policy = RetryPolicy.from_settings()

        assert policy.retries == 3
        assert policy.backoff == 0


class TestRunWithRetry:
    """Test run_with_retry()."""

    def test_first_attempt_succeeds(self):
        """Test that a successful operation is awaited once."""
        operation = AsyncMock(return_value="done")

        result = asyncio.run(run_with_retry(DEFAULT_RETRY_POLICY, operation))

        assert result == "done"
        assert operation.await_count == 1

    def test_retry_after_failure(self):
        """Test that one failure is followed by exactly one retry."""
        operation = AsyncMock(side_effect=[RuntimeError("busy"), "done"])

        result = asyncio.run(run_with_retry(DEFAULT_RETRY_POLICY, operation))

        assert result == "done"
        assert operation.await_count == 2

    def test_second_failure_is_terminal(self):
        """Test that the last error is raised and no third attempt is made."""
        operation = AsyncMock(
            side_effect=[RuntimeError("first"), RuntimeError("second"), "never"]
        )

        with pytest.raises(RuntimeError, match="second"):
            asyncio.run(run_with_retry(DEFAULT_RETRY_POLICY, operation))

        assert operation.await_count == 2

    def test_no_filtering_by_failure_kind(self):
        """Test that the default policy retries any kind of exception."""
        operation = AsyncMock(side_effect=[KeyError("odd"), "done"])

        result = asyncio.run(run_with_retry(DEFAULT_RETRY_POLICY, operation))

        assert result == "done"

    def test_unmatched_errors_not_retried(self):
        """Test that a policy with retry_on set raises other errors at once."""
        policy = RetryPolicy(retries=3, retry_on=(ConnectionError,))
        operation = AsyncMock(side_effect=ValueError("bad input"))

        with pytest.raises(ValueError, match="bad input"):
            asyncio.run(run_with_retry(policy, operation))

        assert operation.await_count == 1

    def test_zero_retries(self):
        """Test that retries=0 means a single attempt."""
        operation = AsyncMock(side_effect=RuntimeError("busy"))

        with pytest.raises(RuntimeError):
            asyncio.run(run_with_retry(RetryPolicy(retries=0), operation))

        assert operation.await_count == 1

    def test_backoff_sleeps_between_attempts(self):
        """Test that a backoff is waited out between attempts."""
        operation = AsyncMock(side_effect=[RuntimeError("busy"), "done"])
        policy = RetryPolicy(retries=1, backoff=0.05)

        start = time.monotonic()
        result = asyncio.run(run_with_retry(policy, operation))

        assert result == "done"
        assert time.monotonic() - start >= 0.05

    def test_cancelled_before_first_attempt(self):
        """Test that a cancelled token prevents any attempt."""
        operation = AsyncMock()
        token = CancellationToken()
        token.cancel()

        with pytest.raises(OperationCancelledError):
            asyncio.run(
                run_with_retry(DEFAULT_RETRY_POLICY, operation, token=token)
            )

        operation.assert_not_awaited()

    def test_cancelled_between_attempts(self):
        """Test that cancellation after a failure prevents the retry."""
        token = CancellationToken()

        async def fail_and_cancel():
            token.cancel()
            msg = "busy"
            raise RuntimeError(msg)

        operation = AsyncMock(side_effect=fail_and_cancel)

        with pytest.raises(OperationCancelledError):
            asyncio.run(
                run_with_retry(DEFAULT_RETRY_POLICY, operation, token=token)
            )

        assert operation.await_count == 1

    def test_logs_retry(self, caplog):
        """Test that retries and final failures are logged."""
        caplog.set_level(logging.INFO)
        operation = AsyncMock(side_effect=RuntimeError("busy"))

        with pytest.raises(RuntimeError):
            asyncio.run(
                run_with_retry(
                    DEFAULT_RETRY_POLICY, operation, description="Export to Word"
                )
            )

        assert "Export to Word failed (attempt 1/2), retrying" in caplog.text
        assert "Export to Word failed after 2 attempt(s)" in caplog.text
