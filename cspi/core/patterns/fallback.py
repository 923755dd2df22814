"""Two-tier fallback: try a primary source, then a backup, and report both failures."""

from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx
from loguru import logger

from cspi.core.exceptions import CSPIError, FallbackExhaustedError

T = TypeVar("T")

# Transport, parse and domain failures of a single source. Anything else propagates.
RECOVERABLE_ERRORS: tuple[type[Exception], ...] = (
    CSPIError,
    httpx.HTTPError,
    TimeoutError,
    ValueError,
    OverflowError,
    KeyError,
    TypeError,
)


async def with_fallback(
    name: str,
    primary: Callable[[], Awaitable[T]],
    fallback: Callable[[], Awaitable[T]],
    *,
    fallback_on: tuple[type[Exception], ...] = RECOVERABLE_ERRORS,
) -> T:
    """Run ``primary``; on failure run ``fallback``.

    Args:
        name: logical indicator name used in logs and the combined error
        primary: preferred source
        fallback: backup source
        fallback_on: exception types that trigger the fallback

    Returns:
        The first successful result.

    Raises:
        FallbackExhaustedError: when both sources fail; embeds both messages
    """
    try:
        return await primary()
    except fallback_on as primary_error:
        logger.bind(indicator=name).warning(f"{name} primary source failed: {primary_error}; trying fallback")
        try:
            result = await fallback()
        except fallback_on as fallback_error:
            logger.bind(indicator=name).error(f"{name} fallback source failed: {fallback_error}")
            raise FallbackExhaustedError(name, primary_error, fallback_error) from fallback_error
        logger.bind(indicator=name).info(f"{name} recovered via fallback")
        return result
