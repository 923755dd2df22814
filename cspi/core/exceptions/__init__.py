"""Exception handling module."""

from cspi.core.exceptions.base import (
    AllRoutesFailedError,
    CollectionInProgressError,
    CSPIError,
    ExtractionError,
    FallbackExhaustedError,
    IndicatorUnavailableError,
    NetworkError,
    ProviderError,
    RelayTimeoutError,
)

__all__ = [
    "CSPIError",
    "ProviderError",
    "NetworkError",
    "RelayTimeoutError",
    "ExtractionError",
    "AllRoutesFailedError",
    "FallbackExhaustedError",
    "IndicatorUnavailableError",
    "CollectionInProgressError",
]
