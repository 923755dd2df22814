"""Market commands: refresh, probe and indicators."""

from __future__ import annotations

import asyncio
from dataclasses import asdict, is_dataclass
from typing import Any, Mapping

import typer

from cspi.core.exceptions import CSPIError
from cspi.core.models import CollectionResult, FearGreedReading, PriceQuote
from cspi.core.services.engine import MarketEngine

from .constants import PROVIDER_EXIT_CODE, SYSTEM_EXIT_CODE, VALIDATION_EXIT_CODE
from .formatters import Rows
from .utils import emit_error, prepare_output


def register(app: typer.Typer) -> None:
    """Register market commands on the root CLI application."""

    app.command("refresh")(refresh_command)
    app.command("probe")(probe_command)
    app.command("indicators")(indicators_command)


def create_engine() -> MarketEngine:
    """Factory hook returning a fresh :class:`MarketEngine`."""

    return MarketEngine()


def refresh_command(ctx: typer.Context) -> None:
    """Run one collection cycle and print snapshot, breakdown and sell signals."""

    formatter, stream = prepare_output(ctx)
    try:
        result = asyncio.run(_refresh())
    except ValueError as error:
        emit_error(str(error), "VALIDATION_ERROR")
        raise typer.Exit(code=VALIDATION_EXIT_CODE) from error

    formatter.render(result_sections(result), stream=stream)
    if not result.success:
        emit_error(result.error or "collection failed", "COLLECTION_FAILED")
        raise typer.Exit(code=SYSTEM_EXIT_CODE)


def probe_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Collector name, e.g. mvrv or kimchi_premium."),
) -> None:
    """Run a single collector and print its value."""

    formatter, stream = prepare_output(ctx)
    try:
        known, value = asyncio.run(_probe(name))
    except ValueError as error:
        emit_error(str(error), "VALIDATION_ERROR")
        raise typer.Exit(code=VALIDATION_EXIT_CODE) from error

    if name not in known:
        emit_error(f"Unknown indicator '{name}'", "UNKNOWN_INDICATOR", details={"available": known})
        raise typer.Exit(code=VALIDATION_EXIT_CODE)
    if value is None:
        emit_error(f"{name} returned no value", "INDICATOR_UNAVAILABLE")
        raise typer.Exit(code=PROVIDER_EXIT_CODE)

    formatter.render({"probe": [{"indicator": name, **_value_fields(value)}]}, stream=stream)


def indicators_command(ctx: typer.Context) -> None:
    """List the configured collectors."""

    formatter, stream = prepare_output(ctx)
    try:
        rows = asyncio.run(_list_collectors())
    except CSPIError as error:
        emit_error(error.message, error.error_code, details=error.details)
        raise typer.Exit(code=SYSTEM_EXIT_CODE) from error
    formatter.render({"indicators": rows}, stream=stream)


async def _refresh() -> CollectionResult:
    async with create_engine() as engine:
        return await engine.collect_all()


async def _probe(name: str) -> tuple[list[str], Any]:
    async with create_engine() as engine:
        known = list(engine.collectors)
        if name not in engine.collectors:
            return known, None
        return known, await engine.test_indicator(name)


async def _list_collectors() -> list[dict[str, object]]:
    async with create_engine() as engine:
        return [
            {"indicator": name, "collector": type(collector).__name__}
            for name, collector in engine.collectors.items()
        ]


def result_sections(result: CollectionResult) -> dict[str, Rows]:
    """Flatten a collection result into formatter sections."""

    snapshot = result.snapshot.model_dump(mode="json")
    sections: dict[str, Rows] = {
        "snapshot": [{"field": key, "value": value} for key, value in snapshot.items()],
        "indicators": [
            {
                "indicator": name,
                "status": "ok" if outcome.ok else "failed",
                "value": _display_value(outcome.value),
                "detail": outcome.reason,
            }
            for name, outcome in result.outcomes.items()
        ],
    }
    if result.breakdown is not None:
        breakdown = result.breakdown
        sections["breakdown"] = [
            {
                "indicator": indicator.value,
                "normalized": breakdown.normalized_values[indicator],
                "weight": round(breakdown.adjusted_weights[indicator], 4),
                "contribution": contribution,
            }
            for indicator, contribution in breakdown.contributions.items()
        ]
    if result.sell_signals is not None:
        sections["sell_signals"] = [
            {"stage": stage_name, **stage.model_dump()} for stage_name, stage in result.sell_signals
        ]
    return sections


def _display_value(value: Any) -> Any:
    if isinstance(value, PriceQuote):
        return value.price
    if isinstance(value, FearGreedReading):
        return value.value
    return value


def _value_fields(value: Any) -> Mapping[str, object]:
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    return {"value": value}


__all__ = [
    "register",
    "create_engine",
    "refresh_command",
    "probe_command",
    "indicators_command",
    "result_sections",
]
