"""
School Simulator

Runs the once-per-day pipeline over a School:

1. Open a course for every subject without an active one
2. Assign idle instructors to courses lacking one
3. Enroll unenrolled participants into open courses
4. Advance every course and remove finished or cancelled ones
5. Move the day counter forward

Newly created courses take part in both matching passes on the day they are
created but cannot start before their start offset elapses.
"""

import random

import structlog

from services.simulation_service.matching import assign_instructors, assign_participants
from services.simulation_service.schemas import DayReport
from shared.config import Settings, get_settings
from shared.domain.academic import Course
from shared.domain.school import School
from shared.verification.school_invariants import InvariantMonitor, assert_school_invariants

logger = structlog.get_logger(__name__)


class SchoolSimulator:
    """
    Daily simulation engine for a school.

    The random source is injected so runs can be reproduced; when omitted
    it is seeded from ``settings.random_seed``.
    """

    def __init__(
        self,
        school: School,
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ):
        """
        Initialize simulator.

        Args:
            school: School to simulate
            settings: Simulation settings (defaults to the cached settings)
            rng: Random source for shuffling
        """
        self.school = school
        self.settings = settings or get_settings()
        self.rng = rng or random.Random(self.settings.random_seed)
        self.monitor = InvariantMonitor()

    def open_courses(self) -> list[Course]:
        """Create a pending course for every subject that is not being taught."""
        return [
            self.school.create_course(
                subject.id,
                self.settings.course_start_offset_days,
                capacity=self.settings.course_capacity,
            )
            for subject in self.school.subjects_not_taught()
        ]

    def simulate_one_day(self) -> DayReport:
        """
        Run the daily pipeline once.

        Returns:
            DayReport: Counters and events of the simulated day, including
            any events recorded since the previous report

        Raises:
            InvariantViolationError: If verification is enabled and the
                school ends the day in an inconsistent state
        """
        day = self.school.days_running
        log = logger.bind(school=self.school.name, day=day)
        log.info("Simulating day")

        try:
            created = self.open_courses()
            assigned = assign_instructors(self.school)
            enrolled = assign_participants(self.school, self.rng)
            removed = self.school.advance_courses()
            self.school.end_day()

            if self.settings.verify_invariants:
                assert_school_invariants(self.school, monitor=self.monitor)
        finally:
            events = self.school.journal.drain()

        report = DayReport.from_domain_events(day, events)
        log.info(
            "Day simulated",
            courses_created=len(created),
            instructors_assigned=len(assigned),
            participants_enrolled=len(enrolled),
            courses_removed=len(removed),
        )
        return report

    def simulate(self, days: int) -> list[DayReport]:
        """Run the pipeline for a number of days."""
        return [self.simulate_one_day() for _ in range(days)]
