"""Fetch racer: first successful relay route wins."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import httpx
from loguru import logger

from cspi.core.data.cache import CacheStrategy, make_cache_key
from cspi.core.exceptions import (
    AllRoutesFailedError,
    ExtractionError,
    NetworkError,
    RelayTimeoutError,
)
from cspi.core.monitoring import MetricsCollector, get_metrics_collector

from .routes import RelayRoute

T = TypeVar("T")


@dataclass(frozen=True)
class RaceRequest(Generic[T]):
    """Per-call racing configuration.

    Attributes:
        name: logical indicator name, used for cache keys and errors
        extractor: turns the raw relayed payload into a typed value; raises on failure
        timeout: per-attempt timeout in seconds, racer default when None
    """

    name: str
    extractor: Callable[[str], T]
    timeout: float | None = None


class FetchRacer:
    """Dispatch a target URL through every relay route concurrently and keep the first success.

    Each attempt fetches, unwraps, length-checks and extracts on its own, so a
    route whose payload cannot be parsed simply loses. Only the winning value is
    written to the cache; losing attempts are cancelled and never awaited.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: CacheStrategy,
        routes: Sequence[RelayRoute],
        *,
        default_timeout: float = 6.0,
        min_payload_chars: int = 100,
        metrics: MetricsCollector | None = None,
    ):
        self.client = client
        self.cache = cache
        self.routes = list(routes)
        self.default_timeout = default_timeout
        self.min_payload_chars = min_payload_chars
        self._metrics = metrics

    @property
    def metrics(self) -> MetricsCollector:
        return self._metrics or get_metrics_collector()

    async def race(self, target_url: str, request: RaceRequest[T]) -> T:
        """Return the extracted value for ``target_url``.

        Raises:
            AllRoutesFailedError: when no route produced a value
        """
        key = make_cache_key(request.name, target_url)
        cached = await self.cache.get(key)
        if cached is not None:
            self.metrics.record_cache_lookup(hit=True)
            logger.bind(indicator=request.name).debug(f"{request.name} cache hit")
            return cached
        self.metrics.record_cache_lookup(hit=False)

        if not self.routes:
            raise AllRoutesFailedError(f"No relay routes configured - {request.name}", request.name)

        timeout = request.timeout or self.default_timeout
        tasks: dict[asyncio.Task[Any], RelayRoute] = {
            asyncio.create_task(
                self._attempt(route, target_url, request, timeout),
                name=f"{request.name}:{route.name}",
            ): route
            for route in self.routes
        }
        failures: list[dict[str, Any]] = []

        try:
            pending: set[asyncio.Task[Any]] = set(tasks)
            while pending:
                done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
                for task in done:
                    route = tasks[task]
                    exc = task.exception()
                    if exc is None:
                        value = task.result()
                        self.metrics.record_relay_attempt(route.name, success=True)
                        await self.cache.set(key, value)
                        return value
                    self.metrics.record_relay_attempt(route.name, success=False)
                    logger.bind(indicator=request.name).warning(f"{request.name} - route {route.name} failed: {exc}")
                    failures.append({"route": route.name, "error": str(exc)})
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
                elif not task.cancelled():
                    # losers that failed in the winner's batch
                    task.exception()

        summary = "; ".join(f"{f['route']}: {f['error']}" for f in failures)
        raise AllRoutesFailedError(
            f"All relay routes failed - {request.name}: {summary}",
            request.name,
            failed_routes=failures,
        )

    async def _attempt(self, route: RelayRoute, target_url: str, request: RaceRequest[T], timeout: float) -> T:
        try:
            async with asyncio.timeout(timeout):
                response = await self.client.get(route.build_url(target_url))
                if not response.is_success:
                    raise NetworkError(f"HTTP {response.status_code}", request.name, response.status_code)
                payload = route.unwrap(response)
        except TimeoutError as exc:
            raise RelayTimeoutError(
                f"{route.name} timed out after {timeout}s",
                request.name,
                route=route.name,
                timeout=timeout,
            ) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(f"{type(exc).__name__}: {exc}", request.name) from exc

        if len(payload) < self.min_payload_chars:
            raise ExtractionError("payload empty or too short", request.name, {"length": len(payload)})

        logger.bind(indicator=request.name).info(f"{request.name} - route {route.name} succeeded ({len(payload)} chars)")
        return request.extractor(payload)
