"""CSPI core exception classes."""

from typing import Any


class CSPIError(Exception):
    """Base exception for the CSPI engine."""

    def __init__(
        self,
        message: str,
        error_code: str = "GENERAL_ERROR",
        details: dict[str, Any] | None = None,
    ):
        """Initialise the exception.

        Args:
            message: human readable message
            error_code: stable machine readable code
            details: additional context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ProviderError(CSPIError):
    """Failure attributed to a single upstream indicator source."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        error_code: str = "PROVIDER_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, error_code, details)
        self.provider_name = provider_name


class NetworkError(ProviderError):
    """Transport level failure (connection error or non-success status)."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if status_code is not None:
            super_details["status_code"] = status_code
        super().__init__(message, provider_name, "NETWORK_ERROR", super_details)
        self.status_code = status_code


class RelayTimeoutError(ProviderError):
    """A relay attempt exceeded its own timer."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        route: str,
        timeout: float,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        super_details.update({"route": route, "timeout": timeout})
        super().__init__(message, provider_name, "RELAY_TIMEOUT", super_details)
        self.route = route
        self.timeout = timeout


class ExtractionError(ProviderError):
    """Payload was fetched but no valid in-domain value could be extracted."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, provider_name, "EXTRACTION_ERROR", details)


class AllRoutesFailedError(ProviderError):
    """Every relay route failed or timed out for a race."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        failed_routes: list[dict[str, Any]] | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if failed_routes:
            super_details["failed_routes"] = failed_routes
        super().__init__(message, provider_name, "ALL_ROUTES_FAILED", super_details)
        self.failed_routes = failed_routes or []


class FallbackExhaustedError(ProviderError):
    """Both the primary and the fallback source of an indicator failed."""

    def __init__(
        self,
        provider_name: str,
        primary_error: Exception,
        fallback_error: Exception,
    ):
        message = (
            f"{provider_name} collection failed - primary: {primary_error}, "
            f"fallback: {fallback_error}"
        )
        super().__init__(
            message,
            provider_name,
            "FALLBACK_EXHAUSTED",
            {"primary_error": str(primary_error), "fallback_error": str(fallback_error)},
        )
        self.primary_error = primary_error
        self.fallback_error = fallback_error


class IndicatorUnavailableError(ProviderError):
    """Indicator has no working source in the current pipeline."""

    def __init__(self, provider_name: str):
        super().__init__(
            f"{provider_name} has no available source",
            provider_name,
            "INDICATOR_UNAVAILABLE",
        )


class CollectionInProgressError(CSPIError):
    """A collection cycle was requested while another one is in flight."""

    def __init__(self, message: str = "collection cycle already in progress"):
        super().__init__(message, "COLLECTION_IN_PROGRESS")
