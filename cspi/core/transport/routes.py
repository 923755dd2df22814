"""Relay routes used to reach pages that cannot be fetched from the origin directly."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from urllib.parse import quote

import httpx

from cspi.core.exceptions import ExtractionError


def _unwrap_text(response: httpx.Response, route: str) -> str:
    return response.text


def _unwrap_json_contents(response: httpx.Response, route: str) -> str:
    try:
        data = response.json()
    except ValueError as exc:
        raise ExtractionError(f"{route} returned non-JSON body", route) from exc
    if not isinstance(data, dict):
        raise ExtractionError(f"{route} returned unexpected JSON shape", route)
    return data.get("contents") or ""


@dataclass(frozen=True)
class RelayRoute:
    """A transport route: how to address a target through it and unwrap the reply."""

    name: str
    prefix: str | None
    unwrap_fn: Callable[[httpx.Response, str], str] = _unwrap_text

    def build_url(self, target_url: str) -> str:
        if self.prefix is None:
            return target_url
        return self.prefix + quote(target_url, safe="")

    def unwrap(self, response: httpx.Response) -> str:
        return self.unwrap_fn(response, self.name)


ALLORIGINS = RelayRoute("allorigins", "https://api.allorigins.win/get?url=", _unwrap_json_contents)
THINGPROXY = RelayRoute("thingproxy", "https://thingproxy.freeboard.io/fetch/")
CORSSH = RelayRoute("corssh", "https://proxy.cors.sh/")
DIRECT = RelayRoute("direct", None)

KNOWN_ROUTES: dict[str, RelayRoute] = {route.name: route for route in (ALLORIGINS, THINGPROXY, CORSSH, DIRECT)}


def resolve_routes(names: Iterable[str]) -> list[RelayRoute]:
    """Look up routes by name, preserving order.

    Raises:
        ValueError: if a name is not a known route
    """
    routes = []
    for name in names:
        key = name.strip().lower()
        if key not in KNOWN_ROUTES:
            raise ValueError(f"Unknown relay route '{name}', expected one of {sorted(KNOWN_ROUTES)}")
        routes.append(KNOWN_ROUTES[key])
    return routes
