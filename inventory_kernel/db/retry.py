"""
Retry of whole atomic units on storage conflicts.

A unit that failed with StorageConflictError left nothing behind, so the
caller may simply run it again.  Each attempt calls ``operation`` afresh,
which opens a new Session through StorageHandle.atomic(); no state read by
a failed attempt is reused.

Only StorageConflictError is retried.  Caller-fault errors (validation,
not found, quota, insufficient stock) propagate on the first attempt.
"""

import time
from collections.abc import Callable
from typing import TypeVar

from inventory_kernel.exceptions import StorageConflictError
from inventory_kernel.logging_config import get_logger

logger = get_logger("db.retry")

T = TypeVar("T")


def retry_on_conflict(
    operation: Callable[[], T],
    max_attempts: int = 3,
    backoff_seconds: float = 0.05,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Run ``operation`` until it succeeds or attempts are exhausted.

    Args:
        operation: Zero-argument callable performing one atomic unit.
        max_attempts: Total attempts including the first (>= 1).
        backoff_seconds: Linear backoff step between attempts.
        sleep: Injected for tests.

    Raises:
        StorageConflictError: If every attempt conflicted.
        ValueError: If max_attempts < 1.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(1, max_attempts + 1):
        try:
            return operation()
        except StorageConflictError as exc:
            if not exc.retryable or attempt == max_attempts:
                logger.error(
                    "unit_retry_exhausted",
                    extra={"operation": exc.operation, "attempts": attempt},
                )
                raise
            logger.warning(
                "unit_retry",
                extra={
                    "operation": exc.operation,
                    "attempt": attempt,
                    "max_attempts": max_attempts,
                },
            )
            sleep(backoff_seconds * attempt)

    raise AssertionError("unreachable")
