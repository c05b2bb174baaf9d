"""
Simulation API Endpoints

Create simulations from a catalog, advance them day by day and inspect
their state.
"""

from pathlib import Path
from typing import Any
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse

from services.simulation_service.registry import SimulationRegistry, SimulationRun, get_registry
from services.simulation_service.reports import render_school
from services.simulation_service.schemas import (
    DayReport,
    SimulationAdvance,
    SimulationCreate,
    SimulationSummary,
)
from services.simulation_service.snapshots import save_snapshot

logger = structlog.get_logger(__name__)

router = APIRouter()


def _summary(run: SimulationRun) -> SimulationSummary:
    return SimulationSummary(id=run.id, seed=run.seed, **run.school.summary())


@router.post("", response_model=SimulationSummary, status_code=status.HTTP_201_CREATED)
async def create_simulation(
    request: SimulationCreate, registry: SimulationRegistry = Depends(get_registry)
) -> SimulationSummary:
    """
    Create a simulation from catalog text.

    Args:
        request: Catalog and optional seed
        registry: Simulation registry

    Returns:
        SimulationSummary: The new simulation on day 1
    """
    run = registry.create(request.catalog, seed=request.seed)
    return _summary(run)


@router.post("/{simulation_id}/days", response_model=list[DayReport])
async def advance_simulation(
    simulation_id: UUID,
    request: SimulationAdvance,
    registry: SimulationRegistry = Depends(get_registry),
) -> list[DayReport]:
    """Simulate a number of days and return one report per day."""
    run = registry.get(simulation_id)
    logger.info("Advancing simulation", simulation_id=str(simulation_id), days=request.days)
    return run.orchestrator.run(request.days)


@router.get("/{simulation_id}", response_model=SimulationSummary)
async def get_simulation(
    simulation_id: UUID, registry: SimulationRegistry = Depends(get_registry)
) -> SimulationSummary:
    return _summary(registry.get(simulation_id))


@router.get("/{simulation_id}/state")
async def get_simulation_state(
    simulation_id: UUID, registry: SimulationRegistry = Depends(get_registry)
) -> dict[str, Any]:
    """Full school state: every entity set and the day counter."""
    return registry.get(simulation_id).school.model_dump(mode="json")


@router.get("/{simulation_id}/report", response_class=PlainTextResponse)
async def get_simulation_report(
    simulation_id: UUID, registry: SimulationRegistry = Depends(get_registry)
) -> str:
    return render_school(registry.get(simulation_id).school)


@router.post("/{simulation_id}/snapshot")
async def snapshot_simulation(
    simulation_id: UUID, registry: SimulationRegistry = Depends(get_registry)
) -> dict[str, str]:
    """Save the simulation's school under the configured snapshot directory."""
    run = registry.get(simulation_id)
    path = Path(registry.settings.snapshot_dir) / f"{simulation_id}.json"
    save_snapshot(run.school, path)
    return {"path": str(path)}


@router.delete("/{simulation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_simulation(
    simulation_id: UUID, registry: SimulationRegistry = Depends(get_registry)
) -> None:
    registry.delete(simulation_id)
