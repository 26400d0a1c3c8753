"""FastAPI application for the Pediatric Vitals Risk Service."""

import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from app.api import patients_router, reference_ranges_router, risk_router, vitals_router
from app.core.config import settings
from app.core.database import check_db, close_db, init_db
from app.services.reference_ranges import get_reference_range_service
from app.services.risk_scorer import get_risk_scorer_service

logger = logging.getLogger(__name__)

SERVICE_NAME = "paeds-vitals-risk"
VERSION = "0.1.0"


def prewarm_all_services() -> dict[str, Any]:
    """Create the scoring singletons before the first request.

    Returns:
        Dictionary with the number of services, their stats and the time taken.
    """
    start_time = time.perf_counter()
    services = {
        "risk_scorer": get_risk_scorer_service().get_stats(),
        "reference_ranges": get_reference_range_service().get_stats(),
    }
    elapsed_ms = (time.perf_counter() - start_time) * 1000

    return {
        "services_loaded": len(services),
        "total_prewarm_time_ms": round(elapsed_ms, 2),
        "services": services,
    }


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create tables in debug mode, prewarm services, and dispose the pool on shutdown."""
    startup_start = time.perf_counter()

    if settings.debug:
        await init_db()

    app.state.prewarm_stats = prewarm_all_services()
    app.state.startup_time_ms = (time.perf_counter() - startup_start) * 1000
    logger.info(
        f"{SERVICE_NAME} {VERSION} ready in {app.state.startup_time_ms:.0f}ms "
        f"(band table {app.state.prewarm_stats['services']['risk_scorer']['band_version']})"
    )

    yield

    await close_db()


app = FastAPI(
    title=settings.app_name,
    description="API for logging pediatric vital signs and scoring clinical deterioration risk.",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(patients_router)
app.include_router(vitals_router)
app.include_router(risk_router)
app.include_router(reference_ranges_router)


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, Any]:
    """Liveness probe. Does not touch the database."""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": VERSION,
        "timestamp": datetime.now(UTC).isoformat(),
    }


@app.get("/ready", tags=["Health"])
async def readiness_check() -> dict[str, Any]:
    """Readiness probe.

    Reports "ready" only when the database answers a trivial query.
    """
    try:
        database_ok = await check_db()
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"Readiness check failed: database unavailable ({e})")
        database_ok = False

    prewarm_stats = getattr(app.state, "prewarm_stats", {})

    return {
        "status": "ready" if database_ok else "not_ready",
        "service": SERVICE_NAME,
        "version": VERSION,
        "timestamp": datetime.now(UTC).isoformat(),
        "database": "ok" if database_ok else "unavailable",
        "startup_time_ms": getattr(app.state, "startup_time_ms", 0),
        "prewarmed_services": prewarm_stats.get("services_loaded", 0),
    }


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "service": "Pediatric Vitals Risk Service API",
        "version": VERSION,
        "docs": "/docs",
        "health": "/health",
        "ready": "/ready",
    }
