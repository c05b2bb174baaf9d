"""
Simulation Orchestrator

Wraps the daily pipeline with population changes:

1. New participants and instructors arrive
2. The school simulates one day
3. Idle instructors, fully certified participants and idle participants may leave

Departures happen after the day counter has moved, so their events carry
the following day's number while being reported with the simulated day.
"""

import random

import structlog

from services.simulation_service.population import PopulationGenerator
from services.simulation_service.schemas import DayReport
from services.simulation_service.simulator import SchoolSimulator
from shared.config import Settings, get_settings
from shared.domain.exceptions import ValidationError
from shared.domain.school import School

logger = structlog.get_logger(__name__)


class SimulationOrchestrator:
    """
    Runs a school for a number of days.

    A single random source feeds both the population generator and the
    matching passes, so a seed reproduces a whole run.
    """

    def __init__(
        self,
        school: School,
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ):
        self.school = school
        self.settings = settings or get_settings()
        self.rng = rng or random.Random(self.settings.random_seed)
        self.simulator = SchoolSimulator(school, settings=self.settings, rng=self.rng)
        self.population = PopulationGenerator(self.rng, settings=self.settings)

    def run_day(self) -> DayReport:
        """
        Simulate one full day including arrivals and departures.

        Returns:
            DayReport: Report covering the whole day
        """
        self.population.arrivals(self.school)
        report = self.simulator.simulate_one_day()
        self.population.attrition(self.school)
        report = report.extended(self.school.journal.drain())

        return report

    def run(self, days: int) -> list[DayReport]:
        """
        Simulate a number of days.

        Args:
            days: Number of days to run (must be positive)

        Returns:
            list: One report per simulated day

        Raises:
            ValidationError: If days is not positive
        """
        if days <= 0:
            raise ValidationError(
                "The number of days must be greater than 0", field="days", value=days
            )

        logger.info("Simulation started", school=self.school.name, days=days)
        reports = [self.run_day() for _ in range(days)]
        logger.info("Simulation finished", **self.school.summary())
        return reports
