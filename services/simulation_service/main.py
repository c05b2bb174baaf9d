"""Simulation Service Main Application"""
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from services.simulation_service.api import simulations
from shared.config import settings
from shared.domain.exceptions import DomainException
from shared.observability import configure_logging

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    configure_logging(settings)
    logger.info("Starting Simulation Service", environment=settings.environment)
    yield
    logger.info("Simulation Service shutdown complete")


app = FastAPI(
    title="School Simulation Service",
    description="Day-by-day simulation of courses, instructors and participants",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.include_router(
    simulations.router, prefix=f"{settings.api_v1_prefix}/simulations", tags=["Simulations"]
)


@app.exception_handler(DomainException)
async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    """Handle domain exceptions."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "simulation_service",
    }


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": "Simulation Service",
        "version": "0.1.0",
        "status": "operational",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "services.simulation_service.main:app",
        host=settings.simulation_service_host,
        port=settings.simulation_service_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
