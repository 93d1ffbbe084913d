"""
PerpSignal Backend - FastAPI Application

Main entry point for the signal API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST

from perpsignal.api.v1 import router as api_v1_router
from perpsignal.core.config import settings
from perpsignal.core.logging import configure_logging
from perpsignal.services.cache import close_redis, init_redis
from perpsignal.services.runtime import (
    get_signal_runtime,
    start_signal_runtime,
    stop_signal_runtime,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    configure_logging(settings.log_level)
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}, policy: {settings.decision_policy}")

    redis_client = await init_redis()
    if redis_client:
        logger.info("Redis cache connected")
    else:
        logger.info("Redis unavailable - using in-memory cache")

    if settings.enable_runtime:
        await start_signal_runtime()
    else:
        logger.info("Signal runtime disabled (enable_runtime=false)")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await stop_signal_runtime()
    await close_redis()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    PerpSignal Trading Signal API

    ## Pipeline
    - **Indicators**: ten streaming trackers (trend, momentum, volatility, volume, perp)
    - **Scoring**: bounded category scores with an ordered reason trail
    - **Aggregation**: market bias, confidence and risk level
    - **Decision**: direction with ATR-scaled stop-loss and take-profit

    Signals only. No orders are placed.
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }


@app.get("/metrics")
async def metrics():
    """Runtime evaluation counters."""
    runtime = get_signal_runtime()
    return {
        "runtime_running": runtime.is_running,
        "symbols": runtime.symbols,
        **runtime.metrics.snapshot(),
    }


@app.get("/metrics/prometheus")
async def prometheus_metrics():
    """Prometheus text exposition of the runtime collectors."""
    runtime = get_signal_runtime()
    return Response(content=runtime.metrics.export(), media_type=CONTENT_TYPE_LATEST)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "PerpSignal Backend API",
        "docs": "/docs",
        "health": "/health",
    }
