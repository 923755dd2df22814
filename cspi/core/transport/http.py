"""Shared HTTP client construction."""

from __future__ import annotations

import httpx

from cspi.core.config import TransportConfig


def build_headers(config: TransportConfig) -> dict[str, str]:
    """Browser-like headers used for both API calls and relayed page fetches."""
    return {"User-Agent": config.user_agent, "Accept": config.accept}


def create_http_client(
    config: TransportConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the async client owned by an engine.

    Per-call deadlines are enforced with ``asyncio.timeout`` by callers; the
    client level timeout is only a backstop.
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(max(config.default_timeout, 30.0)),
        follow_redirects=True,
        headers=build_headers(config),
        transport=transport,
    )
