"""Tests for the relay fetch racer."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from cspi.core.data.cache import FifoTTLCache, make_cache_key
from cspi.core.exceptions import AllRoutesFailedError
from cspi.core.transport import ALLORIGINS, DIRECT, THINGPROXY, FetchRacer, RaceRequest
from cspi.core.collectors import extract_kimchi_premium

TARGET = "https://coinpaprika.com/exchanges/bithumb/"
FILLER = "<div class='layout'>" + "x" * 120 + "</div>"


def _page(premium: str) -> str:
    return f"<html>{FILLER}<span class='premium'>{premium}</span></html>"


KIMCHI = RaceRequest(name="kimchi_premium", extractor=extract_kimchi_premium, timeout=1.0)


def _racer(handler, routes, metrics, cache=None) -> tuple[FetchRacer, FifoTTLCache]:
    cache = cache or FifoTTLCache()
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return FetchRacer(client, cache, routes, default_timeout=1.0, min_payload_chars=100, metrics=metrics), cache


@pytest.mark.asyncio
async def test_cache_hit_skips_network(metrics):
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return httpx.Response(200, text=_page("+1.00%"))

    racer, cache = _racer(handler, [DIRECT], metrics)
    await cache.set(make_cache_key("kimchi_premium", TARGET), 2.5)

    assert await racer.race(TARGET, KIMCHI) == 2.5
    assert calls == []
    assert metrics.registry.get_sample_value("cspi_cache_lookups_total", {"result": "hit"}) == 1.0


@pytest.mark.asyncio
async def test_first_success_wins_and_is_cached(metrics):
    async def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "thingproxy.freeboard.io":
            await asyncio.sleep(0.5)
            return httpx.Response(200, text=_page("+9.00%"))
        return httpx.Response(200, text=_page("+3.25%"))

    racer, cache = _racer(handler, [THINGPROXY, DIRECT], metrics)

    assert await racer.race(TARGET, KIMCHI) == 3.25
    assert await cache.get(make_cache_key("kimchi_premium", TARGET)) == 3.25
    assert metrics.registry.get_sample_value(
        "cspi_relay_attempts_total", {"route": "direct", "outcome": "success"}
    ) == 1.0
    # the slow loser was cancelled, not recorded
    assert metrics.registry.get_sample_value(
        "cspi_relay_attempts_total", {"route": "thingproxy", "outcome": "success"}
    ) is None


@pytest.mark.asyncio
async def test_slow_loser_never_completes_after_winner(metrics):
    slow_route: list[str] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "thingproxy.freeboard.io":
            slow_route.append("started")
            await asyncio.sleep(0.2)
            slow_route.append("completed")
            return httpx.Response(200, text=_page("+9.00%"))
        await asyncio.sleep(0.01)
        return httpx.Response(200, text=_page("+3.25%"))

    racer, cache = _racer(handler, [THINGPROXY, DIRECT], metrics)

    assert await racer.race(TARGET, KIMCHI) == 3.25
    await asyncio.sleep(0.4)

    assert slow_route == ["started"]
    assert len(cache) == 1
    assert await cache.get(make_cache_key("kimchi_premium", TARGET)) == 3.25


@pytest.mark.asyncio
async def test_failed_route_loses_to_slower_success(metrics):
    async def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "thingproxy.freeboard.io":
            return httpx.Response(502, text="bad gateway")
        await asyncio.sleep(0.05)
        return httpx.Response(200, text=_page("-1.50%"))

    racer, _ = _racer(handler, [THINGPROXY, DIRECT], metrics)

    assert await racer.race(TARGET, KIMCHI) == -1.5
    assert metrics.registry.get_sample_value(
        "cspi_relay_attempts_total", {"route": "thingproxy", "outcome": "failure"}
    ) == 1.0


@pytest.mark.asyncio
async def test_allorigins_contents_are_unwrapped(metrics):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.host == "api.allorigins.win"
        assert request.url.params["url"] == TARGET
        return httpx.Response(200, text=json.dumps({"contents": _page("+4.10%"), "status": {"http_code": 200}}))

    racer, _ = _racer(handler, [ALLORIGINS], metrics)

    assert await racer.race(TARGET, KIMCHI) == 4.1


@pytest.mark.asyncio
async def test_short_payload_fails_every_route(metrics):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>+3.25%</html>")

    racer, cache = _racer(handler, [THINGPROXY, DIRECT], metrics)

    with pytest.raises(AllRoutesFailedError) as exc_info:
        await racer.race(TARGET, KIMCHI)

    message = str(exc_info.value)
    assert message.startswith("All relay routes failed - kimchi_premium")
    assert "payload empty or too short" in message
    assert {f["route"] for f in exc_info.value.failed_routes} == {"thingproxy", "direct"}
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_extraction_failure_counts_as_route_failure(metrics):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=_page("no percentages here"))

    racer, _ = _racer(handler, [DIRECT], metrics)

    with pytest.raises(AllRoutesFailedError, match="could not be parsed"):
        await racer.race(TARGET, KIMCHI)


@pytest.mark.asyncio
async def test_attempt_timeout_is_reported_per_route(metrics):
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(1.0)
        return httpx.Response(200, text=_page("+3.25%"))

    racer, _ = _racer(handler, [DIRECT], metrics)
    request = RaceRequest(name="kimchi_premium", extractor=extract_kimchi_premium, timeout=0.05)

    with pytest.raises(AllRoutesFailedError) as exc_info:
        await racer.race(TARGET, request)

    assert "timed out after 0.05s" in str(exc_info.value)


@pytest.mark.asyncio
async def test_no_routes_configured(metrics):
    racer, _ = _racer(lambda request: httpx.Response(200), [], metrics)

    with pytest.raises(AllRoutesFailedError, match="No relay routes configured"):
        await racer.race(TARGET, KIMCHI)
