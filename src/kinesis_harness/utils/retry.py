"""Retry utilities with exponential backoff.

The engine here polls a check until it reports success or the attempt budget
runs out. Checks never raise for expected, transient conditions; they return
a ``Failure`` carrying a diagnostic string instead. Anything a check raises
escapes the loop unchanged.
"""

import logging
import math
import random
import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

from ..clients.errors import KinesisError
from ..config.settings import RetryConfig

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful check result."""
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Failed check result with a human-readable reason."""
    reason: str

    @property
    def ok(self) -> bool:
        return False


Outcome = Union[Success[T], Failure]


def derive_budget(seconds: float) -> int:
    """
    Derive a retry budget from an upper bound on the seconds to wait.

    The budget is ``floor(log2(seconds))``. With the default backoff of
    1, 2, 4, ... seconds the accumulated sleep stays just below ``seconds``.
    Short waits get no retries at all: ``derive_budget(1) == 0``.

    Raises:
        ValueError: If ``seconds`` is smaller than 1
    """
    if seconds < 1:
        raise ValueError(f"Wait time must be at least 1 second, got {seconds}")
    return int(math.floor(math.log2(seconds)))


def backoff_delay(
    retry_number: int,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    backoff_factor: float = 2.0,
    jitter: bool = False
) -> float:
    """Delay before the given retry (0-based), capped at ``max_delay``."""
    try:
        delay = min(initial_delay * (backoff_factor ** retry_number), max_delay)
    except OverflowError:
        delay = max_delay

    if jitter:
        # Add jitter: ±25% of the delay
        jitter_range = delay * 0.25
        delay = delay + random.uniform(-jitter_range, jitter_range)

    return max(0.0, min(delay, max_delay))


def retry(
    max_attempts: int,
    check: Callable[[], Outcome],
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    backoff_factor: float = 2.0,
    jitter: bool = False,
    sleep: Callable[[float], Any] = time.sleep
) -> Outcome:
    """
    Run a check until it succeeds or the retry budget is exhausted.

    Args:
        max_attempts: Number of retries allowed after the first attempt
        check: Zero-argument callable returning ``Success`` or ``Failure``
        initial_delay: Delay before the first retry (seconds)
        max_delay: Maximum delay between retries (seconds)
        backoff_factor: Multiplier for delay after each failure
        jitter: Whether to add random jitter to delays
        sleep: Function used to wait between attempts

    Returns:
        The first ``Success``, or the last ``Failure`` if all attempts fail

    Raises:
        ValueError: If ``max_attempts`` is negative
    """
    if max_attempts < 0:
        raise ValueError(f"Retry budget must not be negative, got {max_attempts}")

    total = max_attempts + 1
    retries = 0

    while True:
        outcome = check()
        if outcome.ok:
            return outcome

        if retries == max_attempts:
            logger.error(f"Check failed after {total} attempts: {outcome.reason}")
            return outcome

        delay = backoff_delay(
            retries,
            initial_delay=initial_delay,
            max_delay=max_delay,
            backoff_factor=backoff_factor,
            jitter=jitter
        )
        retries += 1

        logger.warning(
            f"Attempt {retries}/{total} failed: {outcome.reason}. "
            f"Retrying in {delay:.2f} seconds..."
        )

        if delay > 0:
            sleep(delay)


def retry_with_config(
    max_attempts: int,
    check: Callable[[], Outcome],
    config: RetryConfig,
    sleep: Callable[[float], Any] = time.sleep
) -> Outcome:
    """Run ``retry`` with delays taken from a ``RetryConfig``."""
    return retry(
        max_attempts,
        check,
        initial_delay=config.initial_backoff_seconds,
        max_delay=config.max_backoff_seconds,
        backoff_factor=config.backoff_multiplier,
        jitter=config.jitter,
        sleep=sleep
    )


def attempt(func: Callable[..., T], *args, **kwargs) -> Outcome:
    """
    Call a client operation and capture service errors as a ``Failure``.

    Only ``KinesisError`` is captured. Any other exception propagates.
    """
    try:
        return Success(func(*args, **kwargs))
    except KinesisError as e:
        return Failure(str(e))
