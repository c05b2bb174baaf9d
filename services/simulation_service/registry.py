"""
Simulation Registry

In-memory store of running simulations, keyed by ID. Each entry owns its
school, its orchestrator and the seed it was started with.
"""

import random
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

import structlog

from services.simulation_service.loader import load_catalog
from services.simulation_service.orchestrator import SimulationOrchestrator
from shared.config import Settings, get_settings
from shared.domain.exceptions import EntityNotFoundError
from shared.domain.school import School

logger = structlog.get_logger(__name__)


@dataclass
class SimulationRun:
    """One registered simulation."""

    id: UUID
    orchestrator: SimulationOrchestrator
    seed: int | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def school(self) -> School:
        return self.orchestrator.school


class SimulationRegistry:
    """Keeps simulations alive between API calls."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self._runs: dict[UUID, SimulationRun] = {}

    def create(self, catalog: str, seed: int | None = None) -> SimulationRun:
        """
        Load a catalog and register a new simulation.

        Raises:
            SubjectsNotFoundError: If the catalog has no subject
        """
        seed = seed if seed is not None else self.settings.random_seed
        school = load_catalog(catalog, school_name=self.settings.school_name)
        orchestrator = SimulationOrchestrator(
            school, settings=self.settings, rng=random.Random(seed)
        )
        run = SimulationRun(id=uuid4(), orchestrator=orchestrator, seed=seed)
        self._runs[run.id] = run

        logger.info("Simulation registered", simulation_id=str(run.id), school=school.name, seed=seed)
        return run

    def get(self, simulation_id: UUID) -> SimulationRun:
        try:
            return self._runs[simulation_id]
        except KeyError:
            raise EntityNotFoundError("Simulation", str(simulation_id)) from None

    def delete(self, simulation_id: UUID) -> None:
        self.get(simulation_id)
        del self._runs[simulation_id]

    def __len__(self) -> int:
        return len(self._runs)


_registry: SimulationRegistry | None = None


def get_registry() -> SimulationRegistry:
    """Get or create the process-wide registry (FastAPI dependency)."""
    global _registry

    if _registry is None:
        _registry = SimulationRegistry()

    return _registry
