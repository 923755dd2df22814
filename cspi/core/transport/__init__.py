"""Transport: HTTP client, relay routes and the fetch racer."""

from cspi.core.transport.http import build_headers, create_http_client
from cspi.core.transport.racer import FetchRacer, RaceRequest
from cspi.core.transport.routes import (
    ALLORIGINS,
    CORSSH,
    DIRECT,
    KNOWN_ROUTES,
    THINGPROXY,
    RelayRoute,
    resolve_routes,
)

__all__ = [
    "FetchRacer",
    "RaceRequest",
    "RelayRoute",
    "ALLORIGINS",
    "THINGPROXY",
    "CORSSH",
    "DIRECT",
    "KNOWN_ROUTES",
    "resolve_routes",
    "build_headers",
    "create_http_client",
]
