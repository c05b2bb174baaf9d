"""
Academic Domain Models

Subjects (the catalog) and courses (live offerings of a subject).
A course owns a lifecycle state machine advanced once per simulated day.
"""

from enum import Enum
from typing import TYPE_CHECKING, Any
from uuid import UUID

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from shared.domain.entities import AbstractEntity

if TYPE_CHECKING:
    from shared.domain.school import School

logger = structlog.get_logger(__name__)

DEFAULT_COURSE_CAPACITY = 3


class Subject(BaseModel):
    """
    Teachable unit of content.

    Prerequisites are subject IDs; only non-negative IDs lower than the
    subject's own ID are accepted, anything else is dropped with a warning.
    The list is kept sorted ascending. Duplicates are tolerated.
    """

    model_config = ConfigDict(use_enum_values=False)

    id: int = Field(..., ge=0, description="Unique subject ID (also its level)")
    description: str = Field(default="", description="Subject title")
    specialism: int = Field(..., description="Teaching qualification required")
    duration: int = Field(..., description="Running days of a course")
    prerequisites: list[int] = Field(default_factory=list)
    has_course: bool = Field(default=False, description="Whether an active course exists")

    @field_validator("duration", mode="before")
    @classmethod
    def repair_duration(cls, v: Any) -> int:
        """Courses must run at least one day."""
        duration = int(v)
        if duration <= 0:
            logger.warning("Subject duration must be positive, using 1 day", duration=duration)
            return 1
        return duration

    @field_validator("prerequisites")
    @classmethod
    def filter_prerequisites(cls, v: list[int], info: ValidationInfo) -> list[int]:
        """Drop prerequisites that are negative or not lower than the subject ID."""
        subject_id = info.data.get("id")
        if subject_id is None:
            return sorted(v)
        return _valid_prerequisites(subject_id, v)

    def set_prerequisites(self, prerequisites: list[int]) -> None:
        """Replace the prerequisites, dropping invalid entries."""
        self.prerequisites = _valid_prerequisites(self.id, prerequisites)

    def add_prerequisites(self, prerequisites: list[int]) -> None:
        """Merge new prerequisites into the existing ones, dropping invalid entries."""
        self.prerequisites = sorted(
            [*self.prerequisites, *_valid_prerequisites(self.id, prerequisites)]
        )

    def __lt__(self, other: "Subject") -> bool:
        return (self.description, self.id) < (other.description, other.id)


def _valid_prerequisites(subject_id: int, prerequisites: list[int]) -> list[int]:
    valid = []
    for prerequisite in prerequisites:
        if prerequisite < 0 or prerequisite >= subject_id:
            logger.warning(
                "Only non negative and lower level prerequisites can be added",
                subject_id=subject_id,
                prerequisite=prerequisite,
            )
            continue
        valid.append(prerequisite)
    return sorted(valid)


class CourseState(str, Enum):
    """Course lifecycle state."""

    PENDING = "pending"
    RUNNING = "running"
    FINISHED = "finished"
    CANCELLED = "cancelled"


class Course(AbstractEntity):
    """
    One scheduled offering of a subject.

    Lifecycle: PENDING → RUNNING → FINISHED, or PENDING → CANCELLED when the
    start day arrives without an instructor or without participants.
    Instructor and roster are stored as IDs and resolved through the School.
    """

    subject_id: int = Field(..., ge=0)
    days_until_start: int = Field(..., ge=0)
    days_to_run: int = Field(..., ge=0)
    capacity: int = Field(default=DEFAULT_COURSE_CAPACITY, ge=1)
    participant_ids: list[UUID] = Field(default_factory=list)
    instructor_id: UUID | None = Field(default=None)
    is_cancelled: bool = Field(default=False)

    @classmethod
    def for_subject(
        cls, subject: Subject, days_until_start: int, capacity: int = DEFAULT_COURSE_CAPACITY
    ) -> "Course":
        """Create a pending course whose running days come from the subject."""
        return cls(
            subject_id=subject.id,
            days_until_start=days_until_start,
            days_to_run=subject.duration,
            capacity=capacity,
        )

    @property
    def status(self) -> int:
        """
        Course status as a single integer.

        Negative: starts in -status days. Positive: days left to run.
        Zero: finished (or cancelled).
        """
        if self.days_until_start > 0:
            return -self.days_until_start
        if self.days_to_run > 0:
            return self.days_to_run
        return 0

    @property
    def state(self) -> CourseState:
        """Current lifecycle state."""
        if self.is_cancelled:
            return CourseState.CANCELLED
        if self.days_until_start > 0:
            return CourseState.PENDING
        if self.days_to_run > 0:
            return CourseState.RUNNING
        return CourseState.FINISHED

    @property
    def size(self) -> int:
        """Number of enrolled participants."""
        return len(self.participant_ids)

    @property
    def is_full(self) -> bool:
        """Check if course is at capacity."""
        return self.size >= self.capacity

    @property
    def has_started(self) -> bool:
        return self.days_until_start == 0

    @property
    def has_instructor(self) -> bool:
        return self.instructor_id is not None

    @property
    def is_terminal(self) -> bool:
        """Finished or cancelled courses are removed from the school."""
        return self.state in (CourseState.FINISHED, CourseState.CANCELLED)

    def validate_business_rules(self) -> bool:
        """Validate course business rules."""
        if self.size > self.capacity:
            raise ValueError("Course roster exceeds capacity")
        if len(set(self.participant_ids)) != self.size:
            raise ValueError("Participant enrolled twice in the same course")
        return True

    def advance(self, school: "School") -> bool:
        """
        Apply one simulated day to the lifecycle.

        Args:
            school: School resolving subject, instructor and participant IDs

        Returns:
            bool: True if the course is finished or cancelled and must be removed
        """
        if self.is_cancelled:
            return True

        if self.days_until_start > 0:
            self.days_until_start -= 1
            if self.days_until_start == 0:
                if not self.has_instructor or self.size == 0:
                    self._cancel(school)
                else:
                    school.notify_course_started(self)
        elif self.days_to_run > 0:
            self.days_to_run -= 1
            if self.days_to_run == 0:
                self._complete(school)

        return self.is_terminal

    def _cancel(self, school: "School") -> None:
        had_instructor = self.has_instructor
        enrolled = self.size

        self.is_cancelled = True
        self.days_to_run = 0
        self._release_instructor(school)
        self._release_participants(school)
        school.get_subject(self.subject_id).has_course = False

        school.notify_course_cancelled(self, had_instructor=had_instructor, enrolled=enrolled)

    def _complete(self, school: "School") -> None:
        graduates = list(self.participant_ids)
        for participant_id in graduates:
            school.get_participant(participant_id).graduate(self.subject_id)

        self._release_instructor(school)
        self._release_participants(school)
        school.get_subject(self.subject_id).has_course = False

        school.notify_course_finished(self, graduates=graduates)

    def _release_instructor(self, school: "School") -> None:
        if self.instructor_id is None:
            return
        school.get_instructor(self.instructor_id).unassign_course()
        self.instructor_id = None

    def _release_participants(self, school: "School") -> None:
        for participant_id in self.participant_ids:
            school.get_participant(participant_id).release()
        self.participant_ids = []
