"""
FastAPI application factory.
"""

import time
import uuid
from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from cspi import __version__
from cspi.core.config import ConfigManager
from cspi.core.exceptions import CSPIError
from cspi.core.services.engine import MarketEngine
from cspi.web.models import ErrorResponse
from cspi.web.routes import health_router, market_router, metrics_router

EngineFactory = Callable[[], MarketEngine]


def _default_engine() -> MarketEngine:
    return MarketEngine(ConfigManager().get_config())


def create_app(engine_factory: EngineFactory | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        engine_factory: builds the engine at startup; defaults to one configured
            from ``~/.cspi/config.toml`` and ``CSPI_*`` variables
    """
    factory = engine_factory or _default_engine

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        engine = factory()
        app.state.engine = engine
        app.state.start_time = time.time()
        logger.info("CSPI web service started")
        try:
            yield
        finally:
            await engine.aclose()
            logger.info("CSPI web service stopped")

    app = FastAPI(
        title="cspi - Bitcoin composite sentiment index",
        description="Collects Bitcoin sentiment indicators and serves the composite score",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    _setup_middleware(app)
    _setup_routes(app)
    _setup_exception_handlers(app)
    return app


def _setup_middleware(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)


def _setup_routes(app: FastAPI) -> None:
    app.include_router(health_router, tags=["health"])
    app.include_router(market_router, tags=["market"])
    app.include_router(metrics_router)


def _error_response(status_code: int, payload: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=payload.model_dump(mode="json"))


def _setup_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(CSPIError)
    async def cspi_exception_handler(request: Request, exc: CSPIError) -> JSONResponse:
        return _error_response(
            400,
            ErrorResponse(
                error=exc.__class__.__name__,
                message=exc.message,
                details={"error_code": exc.error_code, "context": exc.details},
                request_id=request.headers.get("X-Request-ID") or str(uuid.uuid4()),
            ),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return _error_response(
            exc.status_code,
            ErrorResponse(
                error="HTTPException",
                message=str(exc.detail),
                details={"status_code": exc.status_code},
                request_id=request.headers.get("X-Request-ID") or str(uuid.uuid4()),
            ),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.opt(exception=exc).error(f"Unhandled error on {request.url.path}: {exc}")
        return _error_response(
            500,
            ErrorResponse(
                error="InternalServerError",
                message="internal server error",
                details={"type": type(exc).__name__},
                request_id=request.headers.get("X-Request-ID") or str(uuid.uuid4()),
            ),
        )


app = create_app()
