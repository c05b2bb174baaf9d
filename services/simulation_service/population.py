"""
Population Generator

Daily arrivals and departures of participants and instructors.
All randomness comes from the injected random source.
"""

import random

import structlog

from shared.config import Settings, get_settings
from shared.domain.eligibility import InstructorCategory
from shared.domain.entities import Instructor, Participant
from shared.domain.school import School

logger = structlog.get_logger(__name__)

MALE_NAMES = ("Albert", "Logan", "Ethan", "Daniel", "Carlos", "Anthony", "Paul", "Charles")
FEMALE_NAMES = ("Amelia", "Olivia", "Isabella", "Mia", "Isabel", "Ana", "Alessia", "Fiona")
FAMILY_NAMES = ("Miller", "Williams", "Clark", "Hall", "Bell", "Russell", "Tamajo", "Kuhn")

MIN_AGE = 16
AGE_SPAN = 50


class PopulationGenerator:
    """
    Generates people and decides who joins or leaves the school each day.
    """

    def __init__(self, rng: random.Random, settings: Settings | None = None):
        """
        Initialize generator.

        Args:
            rng: Random source
            settings: Arrival and attrition rates (defaults to the cached settings)
        """
        self.rng = rng
        self.settings = settings or get_settings()

    def gender(self) -> str:
        return "M" if self.rng.randrange(2) == 0 else "F"

    def age(self) -> int:
        """Age between 16 and 65 inclusive."""
        return self.rng.randrange(AGE_SPAN) + MIN_AGE

    def name(self, gender: str) -> str:
        first_names = MALE_NAMES if gender == "M" else FEMALE_NAMES
        first = first_names[self.rng.randrange(len(first_names))]
        family = FAMILY_NAMES[self.rng.randrange(len(FAMILY_NAMES))]
        return f"{first} {family}"

    def participant(self) -> Participant:
        gender = self.gender()
        return Participant(name=self.name(gender), gender=gender, age=self.age())

    def instructor(self, category: InstructorCategory) -> Instructor:
        gender = self.gender()
        return Instructor(name=self.name(gender), gender=gender, age=self.age(), category=category)

    def join_probabilities(self) -> dict[InstructorCategory, float]:
        """Daily probability that one instructor of each category is hired."""
        return {
            InstructorCategory.TEACHER: self.settings.teacher_join_probability,
            InstructorCategory.DEMONSTRATOR: self.settings.demonstrator_join_probability,
            InstructorCategory.OO_TRAINER: self.settings.oo_trainer_join_probability,
            InstructorCategory.GUI_TRAINER: self.settings.gui_trainer_join_probability,
        }

    def arrivals(self, school: School) -> tuple[list[Participant], list[Instructor]]:
        """
        Admit the day's new participants and instructors.

        Between 0 and ``max_participants_arriving - 1`` participants join,
        and each instructor category independently hires one instructor
        with its join probability.

        Returns:
            Tuple of (new participants, new instructors)
        """
        participants = [
            self.participant()
            for _ in range(self.rng.randrange(self.settings.max_participants_arriving))
        ]
        for participant in participants:
            school.add_participant(participant)

        instructors = []
        for category, probability in self.join_probabilities().items():
            if self.rng.random() <= probability:
                instructor = self.instructor(category)
                school.add_instructor(instructor)
                instructors.append(instructor)

        logger.info(
            "Arrivals",
            day=school.days_running,
            participants=len(participants),
            instructors=len(instructors),
        )
        return participants, instructors

    def attrition(self, school: School) -> tuple[int, int]:
        """
        Remove the people leaving the school.

        In order: idle instructors leave with ``instructor_leave_percent``
        chance, participants holding every certificate leave, idle
        participants leave with ``participant_leave_percent`` chance.

        Returns:
            Tuple of (instructors removed, participants removed)
        """
        instructors_left = 0
        for instructor in school.idle_instructors():
            if self.rng.randrange(100) <= self.settings.instructor_leave_percent:
                school.remove_instructor(instructor.id)
                instructors_left += 1

        catalog = set(school.subjects)
        participants_left = 0
        for participant in list(school.participants.values()):
            if catalog.issubset(participant.certificates):
                school.remove_participant(participant.id, reason="graduated")
                participants_left += 1

        for participant in school.unenrolled_participants():
            if self.rng.randrange(100) <= self.settings.participant_leave_percent:
                school.remove_participant(participant.id, reason="idle")
                participants_left += 1

        logger.info(
            "Departures",
            day=school.days_running,
            instructors=instructors_left,
            participants=participants_left,
        )
        return instructors_left, participants_left
