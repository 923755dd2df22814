"""Web helpers."""

from fastapi import Request

from cspi.core.services.engine import MarketEngine


def get_request_id(request: Request) -> str | None:
    """Return the caller supplied X-Request-ID header, if any."""
    return request.headers.get("X-Request-ID")


def get_engine(request: Request) -> MarketEngine:
    """Return the engine created by the application lifespan."""
    return request.app.state.engine
