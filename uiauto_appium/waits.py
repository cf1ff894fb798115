# uiauto_appium/waits.py
"""
@file waits.py
@brief Bounded polling primitive used by the element locator.
"""

from __future__ import annotations

import time
from typing import Callable, Optional, TypeVar

from .actionlogger import ACTION_LOGGER
from .exceptions import TimeoutError

T = TypeVar("T")


def _now() -> float:
    return time.monotonic()


def _timeout_error(
    description: str,
    timeout: float,
    attempts: int,
    elapsed: float,
    last_exception: Optional[BaseException],
) -> TimeoutError:
    if last_exception is None:
        reason = "condition kept returning falsy"
        message = f"Timed out waiting for {description} after {timeout}s ({reason})"
    else:
        message = (
            f"Timed out waiting for {description} after {timeout}s: "
            f"{type(last_exception).__name__}: {last_exception}"
        )
    error = TimeoutError(message)
    error.original_exception = last_exception
    error.description = description
    error.timeout = timeout
    error.attempt_count = attempts
    error.elapsed_time = elapsed
    return error


def wait_until(
    predicate: Callable[[], T],
    timeout: float,
    interval: float = 0.2,
    description: str = "condition",
) -> T:
    """
    Call `predicate` every `interval` seconds until it returns something
    truthy, and return that value.

    The predicate is always called at least once, even with timeout <= 0.
    An exception from the predicate is a failed attempt; the last one is
    attached to the TimeoutError raised once `timeout` has elapsed.
    """
    started = _now()
    deadline = started + timeout
    attempts = 0
    last_exception: Optional[BaseException] = None

    ACTION_LOGGER.log(
        event="wait_start",
        metadata={"description": description, "timeout_s": timeout, "interval_s": interval},
    )

    while True:
        attempts += 1
        try:
            value = predicate()
        except Exception as e:
            last_exception = e
        else:
            if value:
                ACTION_LOGGER.log(
                    event="wait_success",
                    metadata={
                        "description": description,
                        "attempts": attempts,
                        "elapsed_s": round(_now() - started, 3),
                    },
                )
                return value

        remaining = deadline - _now()
        if remaining <= 0:
            break
        time.sleep(min(interval, remaining))

    elapsed = _now() - started
    ACTION_LOGGER.log(
        event="wait_timeout",
        status="error",
        metadata={
            "description": description,
            "timeout_s": timeout,
            "attempts": attempts,
            "elapsed_s": round(elapsed, 3),
        },
    )
    raise _timeout_error(description, timeout, attempts, elapsed, last_exception)
