# Overview: Retry wrapper for write units that may hit lock or optimistic-concurrency errors.

from __future__ import annotations

import time

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.exc import StaleDataError


def run_with_retry(func, *, session, attempts: int = 3, backoff_base: float = 0.1):
    """
    Execute a DB write unit with retry on concurrency-related failures.

    Retries on OperationalError (database locked, deadlocks) and StaleDataError.
    The session is rolled back before each retry so the unit starts clean.
    Any other exception propagates on the first attempt.
    """
    for attempt in range(attempts):
        try:
            return func()
        except (OperationalError, StaleDataError):
            session.rollback()
            if attempt >= attempts - 1:
                raise
            time.sleep(backoff_base * (2 ** attempt))
