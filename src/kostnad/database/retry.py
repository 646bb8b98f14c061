"""Retry policy for transient database errors.

Backoff schedule: 0.5s, 1s, 2s (at most 3 retries), each delay jittered
by +/-20%.
"""

import functools
import logging
import random
import time
from typing import Any, Callable, Iterator, TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError, SQLAlchemyError

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
BASE_DELAY = 0.5
BACKOFF_FACTOR = 2.0
JITTER = 0.2

F = TypeVar("F", bound=Callable[..., Any])


def is_transient_error(error: BaseException) -> bool:
    """Return True for errors worth retrying (connection drops, locks, timeouts)."""
    if getattr(error, "is_transient", False) is True:
        return True
    if isinstance(error, OperationalError):
        return True
    return isinstance(error, DBAPIError) and bool(error.connection_invalidated)


def backoff_delays(
    retries: int = MAX_RETRIES,
    base_delay: float = BASE_DELAY,
    factor: float = BACKOFF_FACTOR,
    jitter: float = JITTER,
) -> Iterator[float]:
    """Yield the sleep before each retry."""
    for attempt in range(retries):
        delay = base_delay * factor**attempt
        yield delay * random.uniform(1 - jitter, 1 + jitter)


def retry_transient(func: F) -> F:
    """Retry a database method on transient errors.

    The wrapped method's owner may define ``_rollback()``. It is called before
    every retry and before any database error leaves the method, so the
    session stays usable for the next call.
    """

    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        delays = backoff_delays()
        attempt = 0
        while True:
            try:
                return func(self, *args, **kwargs)
            except Exception as e:
                transient = is_transient_error(e)
                delay = next(delays, None) if transient else None
                if delay is None:
                    if transient:
                        logger.error(
                            "%s failed after %d retries: %s", func.__name__, attempt, e
                        )
                    if transient or isinstance(e, SQLAlchemyError):
                        _rollback(self)
                    raise
                attempt += 1
                logger.warning(
                    "Transient database error in %s (retry %d/%d in %.2fs): %s",
                    func.__name__,
                    attempt,
                    MAX_RETRIES,
                    delay,
                    e,
                )
                _rollback(self)
                time.sleep(delay)

    return wrapper  # type: ignore[return-value]


def _rollback(owner: Any) -> None:
    rollback = getattr(owner, "_rollback", None)
    if rollback is not None:
        rollback()
