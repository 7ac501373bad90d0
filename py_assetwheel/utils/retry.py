"""Bounded retry combinator used by the rejection samplers."""

from typing import Callable, Optional, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")


def bounded_retry(
    attempt: Callable[[], Optional[T]],
    max_attempts: int,
    fallback: Callable[[], T],
    name: str = "retry",
) -> T:
    """
    Call ``attempt`` up to ``max_attempts`` times, else return ``fallback()``.

    ``attempt`` signals failure by returning None. The fallback is always
    called at most once and its result is returned as is.

    Args:
        attempt: Zero-argument callable returning a value or None
        max_attempts: Upper bound on calls to ``attempt``
        fallback: Zero-argument callable producing the value on exhaustion
        name: Label used in the exhaustion log event

    Returns:
        First non-None attempt result, or the fallback result
    """
    for _ in range(max(0, int(max_attempts))):
        result = attempt()
        if result is not None:
            return result

    logger.debug("Retry budget exhausted, using fallback", retry=name, attempts=max_attempts)
    return fallback()
