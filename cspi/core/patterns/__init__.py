"""Resilience patterns module."""

from cspi.core.patterns.fallback import RECOVERABLE_ERRORS, with_fallback

__all__ = [
    "RECOVERABLE_ERRORS",
    "with_fallback",
]
