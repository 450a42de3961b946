"""Retry helper with exponential backoff and jitter."""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from typing import TypeVar

import httpx

from .config import RETRY_ATTEMPTS, RETRY_BASE_DELAY

logger = logging.getLogger(__name__)

T = TypeVar("T")

JITTER_RATIO = 0.3


def retry_with_backoff(
    fn: Callable[[], T],
    max_attempts: int = RETRY_ATTEMPTS,
    base_delay: float = RETRY_BASE_DELAY,
    retry_on: tuple[type[BaseException], ...] = (httpx.TransportError,),
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call ``fn`` until it succeeds or the attempts run out.

    Waits ``base_delay * 2**attempt`` seconds between attempts, plus up to
    30% random jitter. Nothing is slept after the final attempt.

    Args:
        fn: Zero-argument callable to invoke
        max_attempts: Total number of calls, including the first
        base_delay: Delay before the first retry, in seconds
        retry_on: Exception types that trigger another attempt
        sleep: Sleep function, swappable in tests

    Returns:
        Whatever ``fn`` returns

    Raises:
        The last exception raised by ``fn`` once attempts are exhausted
    """
    attempts = max(1, max_attempts)
    for attempt in range(attempts - 1):
        try:
            return fn()
        except retry_on as e:
            delay = base_delay * 2**attempt
            delay += random.random() * JITTER_RATIO * delay
            logger.warning(
                "Attempt %d/%d failed (%s); retrying in %.2fs", attempt + 1, attempts, e, delay
            )
            sleep(delay)
    return fn()
