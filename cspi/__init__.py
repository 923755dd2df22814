"""cspi - Bitcoin composite sentiment and positioning index.

Collects on-chain, sentiment and market-structure indicators from public
sources, folds whatever is available into a single 0-100 score and maps it to
a buy/sell tier. Both synchronous and asynchronous entry points are provided.
"""

import asyncio
from collections.abc import Coroutine
from typing import Any

from cspi.core.config.settings import ConfigManager, CSPIConfig
from cspi.core.models import (
    CollectionResult,
    CSPIBreakdown,
    CSPILevel,
    IndicatorName,
    MarketSnapshot,
    SellSignals,
)
from cspi.core.services.engine import MarketEngine

# global engine instance
_engine: MarketEngine | None = None
_loop: asyncio.AbstractEventLoop | None = None


def get_engine() -> MarketEngine:
    """Return the global engine, creating it from the active configuration."""
    global _engine
    if _engine is None:
        _engine = MarketEngine(ConfigManager().get_config())
    return _engine


def _run_sync(coro: Coroutine[Any, Any, Any]) -> Any:
    """Run ``coro`` on the facade's private loop.

    The global engine holds an HTTP client bound to the loop it first ran on,
    so every synchronous call reuses the same loop.
    """
    global _loop
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        pass
    else:
        coro.close()
        raise RuntimeError("Synchronous cspi calls cannot run inside an event loop; use the *_async variants")

    if _loop is None or _loop.is_closed():
        _loop = asyncio.new_event_loop()
    return _loop.run_until_complete(coro)


def collect_all() -> CollectionResult:
    """Run one collection cycle synchronously.

    Examples:
        >>> import cspi
        >>> result = cspi.collect_all()
        >>> result.snapshot.cspi_level
    """
    return _run_sync(get_engine().collect_all())


async def collect_all_async() -> CollectionResult:
    """Run one collection cycle.

    Examples:
        >>> import asyncio
        >>> import cspi
        >>>
        >>> async def main():
        ...     result = await cspi.collect_all_async()
        ...     print(result.snapshot.cspi_score)
        >>>
        >>> asyncio.run(main())
    """
    return await get_engine().collect_all()


def get_current() -> MarketSnapshot:
    """Return a copy of the latest snapshot without fetching anything."""
    return get_engine().get_current()


def test_indicator(name: str) -> Any | None:
    """Probe a single collector by name; returns its value or None."""
    return _run_sync(get_engine().test_indicator(name))


async def test_indicator_async(name: str) -> Any | None:
    """Async variant of :func:`test_indicator`."""
    return await get_engine().test_indicator(name)


# keep pytest from collecting the probe when imported into a test module
test_indicator.__test__ = False  # type: ignore[attr-defined]
test_indicator_async.__test__ = False  # type: ignore[attr-defined]


__version__ = "0.1.0"

__all__ = [
    "MarketEngine",
    "ConfigManager",
    "CSPIConfig",
    "CollectionResult",
    "CSPIBreakdown",
    "CSPILevel",
    "IndicatorName",
    "MarketSnapshot",
    "SellSignals",
    "get_engine",
    "collect_all",
    "collect_all_async",
    "get_current",
    "test_indicator",
    "test_indicator_async",
]
