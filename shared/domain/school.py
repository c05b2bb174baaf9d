"""
School Aggregate

The School exclusively owns every subject, course, participant and
instructor. Courses and people reference each other by ID only; the School
resolves those IDs and is the single place where entities are destroyed.

The model is a plain pydantic model so a full snapshot is simply its JSON dump.
"""

from typing import Any
from uuid import UUID

import structlog
from pydantic import BaseModel, Field, PrivateAttr

from shared.config import get_settings
from shared.domain.academic import DEFAULT_COURSE_CAPACITY, Course, Subject
from shared.domain.entities import Instructor, Participant
from shared.domain.exceptions import EntityAlreadyExistsError, EntityNotFoundError, ValidationError
from shared.domain.policies import PolicyEngine, create_default_enrollment_policy_engine
from shared.events.base import DomainEvent, EventMetadata
from shared.events.journal import EventJournal
from shared.events.school_events import (
    CertificateGrantedEvent,
    CourseCancelledEvent,
    CourseCreatedEvent,
    CourseFinishedEvent,
    CourseStartedEvent,
    EnrollmentDeniedEvent,
    InstructorAssignedEvent,
    InstructorJoinedEvent,
    InstructorLeftEvent,
    ParticipantEnrolledEvent,
    ParticipantJoinedEvent,
    ParticipantLeftEvent,
)

logger = structlog.get_logger(__name__)


def _default_journal() -> EventJournal:
    return EventJournal(max_history=get_settings().event_history_limit)


class School(BaseModel):
    """
    World state of the simulation.

    Entity sets are dicts keyed by ID and iterate in insertion order, which
    gives matching passes a stable, reproducible order.
    """

    name: str = Field(default="Default")
    days_running: int = Field(default=1, ge=1, description="Current simulated day")
    subjects: dict[int, Subject] = Field(default_factory=dict)
    courses: dict[UUID, Course] = Field(default_factory=dict)
    participants: dict[UUID, Participant] = Field(default_factory=dict)
    instructors: dict[UUID, Instructor] = Field(default_factory=dict)

    _journal: EventJournal = PrivateAttr(default_factory=_default_journal)
    _policy_engine: PolicyEngine = PrivateAttr(
        default_factory=create_default_enrollment_policy_engine
    )

    @property
    def journal(self) -> EventJournal:
        """Event journal collecting everything that happens in the school."""
        return self._journal

    @property
    def policy_engine(self) -> PolicyEngine:
        """Enrollment policy engine."""
        return self._policy_engine

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_subject(self, subject_id: int) -> Subject:
        try:
            return self.subjects[subject_id]
        except KeyError:
            raise EntityNotFoundError("Subject", str(subject_id)) from None

    def get_course(self, course_id: UUID) -> Course:
        try:
            return self.courses[course_id]
        except KeyError:
            raise EntityNotFoundError("Course", str(course_id)) from None

    def get_participant(self, participant_id: UUID) -> Participant:
        try:
            return self.participants[participant_id]
        except KeyError:
            raise EntityNotFoundError("Participant", str(participant_id)) from None

    def get_instructor(self, instructor_id: UUID) -> Instructor:
        try:
            return self.instructors[instructor_id]
        except KeyError:
            raise EntityNotFoundError("Instructor", str(instructor_id)) from None

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------

    def add_subject(self, subject: Subject) -> bool:
        """
        Add a subject to the catalog.

        Returns:
            bool: False if a subject with the same ID already exists
        """
        if subject.id in self.subjects:
            logger.warning("Subject already in catalog", subject_id=subject.id)
            return False
        self.subjects[subject.id] = subject
        return True

    def add_participant(self, participant: Participant) -> bool:
        """
        Admit a participant.

        Returns:
            bool: False if the participant already attends the school
        """
        if participant.id in self.participants:
            return False
        self.participants[participant.id] = participant
        self._emit(
            ParticipantJoinedEvent,
            participant.id,
            "Participant",
            name=participant.name,
        )
        return True

    def remove_participant(self, participant_id: UUID, reason: str = "idle") -> bool:
        """
        Remove a participant, dropping it from any roster it is on.

        Returns:
            bool: False if the participant does not exist
        """
        participant = self.participants.pop(participant_id, None)
        if participant is None:
            return False
        if participant.course_id is not None and participant.course_id in self.courses:
            course = self.courses[participant.course_id]
            course.participant_ids = [p for p in course.participant_ids if p != participant_id]
            participant.release()
        self._emit(
            ParticipantLeftEvent,
            participant.id,
            "Participant",
            name=participant.name,
            reason=reason,
        )
        return True

    def add_instructor(self, instructor: Instructor) -> bool:
        """
        Hire an instructor.

        Returns:
            bool: False if the instructor already works at the school
        """
        if instructor.id in self.instructors:
            return False
        self.instructors[instructor.id] = instructor
        self._emit(
            InstructorJoinedEvent,
            instructor.id,
            "Instructor",
            name=instructor.name,
            category=instructor.category.value,
        )
        return True

    def remove_instructor(self, instructor_id: UUID) -> bool:
        """
        Remove an instructor, freeing the course it was assigned to.

        Returns:
            bool: False if the instructor does not exist
        """
        instructor = self.instructors.pop(instructor_id, None)
        if instructor is None:
            return False
        if instructor.course_id is not None and instructor.course_id in self.courses:
            self.courses[instructor.course_id].instructor_id = None
            instructor.unassign_course()
        self._emit(
            InstructorLeftEvent,
            instructor.id,
            "Instructor",
            name=instructor.name,
            category=instructor.category.value,
        )
        return True

    # ------------------------------------------------------------------
    # Demand snapshots
    # ------------------------------------------------------------------

    def subjects_not_taught(self) -> list[Subject]:
        """Subjects without an active course."""
        return [s for s in self.subjects.values() if not s.has_course]

    def idle_instructors(self) -> list[Instructor]:
        """Instructors without a course."""
        return [i for i in self.instructors.values() if not i.is_teaching]

    def unenrolled_participants(self) -> list[Participant]:
        """Participants without a course."""
        return [p for p in self.participants.values() if not p.is_enrolled]

    def courses_requiring_instructor(self) -> list[Course]:
        """Courses with no instructor assigned."""
        return [c for c in self.courses.values() if not c.has_instructor]

    def open_courses(self) -> list[Course]:
        """Courses that are neither full nor started."""
        return [c for c in self.courses.values() if not c.is_full and c.status < 0]

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    def create_course(
        self,
        subject_id: int,
        start_offset_days: int,
        capacity: int = DEFAULT_COURSE_CAPACITY,
    ) -> Course:
        """
        Open a pending course for a subject.

        Args:
            subject_id: Subject to teach
            start_offset_days: Days until the course starts (>= 1)
            capacity: Roster capacity

        Returns:
            Course: The new course, already registered with the school
        """
        subject = self.get_subject(subject_id)
        if subject.has_course:
            raise EntityAlreadyExistsError(
                "Course",
                message=f"Subject {subject_id} already has an active course",
            )
        if start_offset_days < 1:
            raise ValidationError(
                "A course must start at least one day after creation",
                field="start_offset_days",
                value=start_offset_days,
            )

        course = Course.for_subject(subject, start_offset_days, capacity=capacity)
        subject.has_course = True
        self.courses[course.id] = course

        logger.info(
            "Course created",
            course_id=str(course.id),
            subject_id=subject.id,
            days_until_start=start_offset_days,
        )
        self._emit(
            CourseCreatedEvent,
            course.id,
            "Course",
            subject_id=subject.id,
            days_until_start=start_offset_days,
            duration=subject.duration,
        )
        return course

    def assign_instructor(self, course_id: UUID, instructor_id: UUID) -> bool:
        """
        Assign an instructor to a course.

        Fails without raising when the course already has an instructor or
        is over, or the instructor is teaching or not qualified.

        Returns:
            bool: True if the instructor now teaches the course
        """
        course = self.get_course(course_id)
        instructor = self.get_instructor(instructor_id)

        if course.has_instructor or course.is_terminal:
            return False

        subject = self.get_subject(course.subject_id)
        if not instructor.assign_course(course.id, subject.specialism):
            return False

        course.instructor_id = instructor.id
        logger.info(
            "Instructor assigned",
            course_id=str(course.id),
            subject_id=subject.id,
            instructor_id=str(instructor.id),
        )
        self._emit(
            InstructorAssignedEvent,
            course.id,
            "Course",
            subject_id=subject.id,
            instructor_id=instructor.id,
        )
        return True

    def enrol_participant(self, course_id: UUID, participant_id: UUID) -> bool:
        """
        Enroll a participant into a course.

        The enrollment policies decide; a refusal is informational and is
        reported through the journal rather than raised.

        Returns:
            bool: True if the participant joined the roster
        """
        course = self.get_course(course_id)
        participant = self.get_participant(participant_id)
        subject = self.get_subject(course.subject_id)

        if participant.is_enrolled or course.is_cancelled:
            return False

        context = self._build_policy_context(participant, course, subject)
        allowed, results = self._policy_engine.evaluate_all(participant.id, course.id, context)

        if not allowed:
            failed = results[-1]
            logger.info(
                "Enrollment denied",
                participant=participant.name,
                subject_id=subject.id,
                reason=failed.reason,
            )
            self._emit(
                EnrollmentDeniedEvent,
                course.id,
                "Course",
                subject_id=subject.id,
                participant_id=participant.id,
                reason=failed.reason,
                violated_rules=failed.violated_rules,
            )
            return False

        course.participant_ids = [*course.participant_ids, participant.id]
        participant.enrol(course.id)

        logger.info(
            "Participant enrolled",
            participant=participant.name,
            course_id=str(course.id),
            subject_id=subject.id,
            enrolled=course.size,
        )
        self._emit(
            ParticipantEnrolledEvent,
            course.id,
            "Course",
            subject_id=subject.id,
            participant_id=participant.id,
        )
        return True

    def advance_courses(self) -> list[Course]:
        """
        Advance every course one day and remove finished or cancelled ones.

        Returns:
            list: Courses removed today
        """
        removed: list[Course] = []
        for course in list(self.courses.values()):
            if course.advance(self):
                del self.courses[course.id]
                removed.append(course)
        return removed

    def end_day(self) -> int:
        """Move the day counter forward. Returns the new day."""
        self.days_running += 1
        return self.days_running

    # ------------------------------------------------------------------
    # Course lifecycle notifications
    # ------------------------------------------------------------------

    def notify_course_started(self, course: Course) -> None:
        logger.info("Course started", course_id=str(course.id), subject_id=course.subject_id)
        self._emit(
            CourseStartedEvent,
            course.id,
            "Course",
            subject_id=course.subject_id,
            enrolled=course.size,
        )

    def notify_course_cancelled(self, course: Course, had_instructor: bool, enrolled: int) -> None:
        logger.info(
            "Course cancelled",
            course_id=str(course.id),
            subject_id=course.subject_id,
            had_instructor=had_instructor,
            enrolled=enrolled,
        )
        self._emit(
            CourseCancelledEvent,
            course.id,
            "Course",
            subject_id=course.subject_id,
            had_instructor=had_instructor,
            enrolled=enrolled,
        )

    def notify_course_finished(self, course: Course, graduates: list[UUID]) -> None:
        logger.info(
            "Course finished",
            course_id=str(course.id),
            subject_id=course.subject_id,
            graduates=len(graduates),
        )
        for participant_id in graduates:
            self._emit(
                CertificateGrantedEvent,
                participant_id,
                "Participant",
                subject_id=course.subject_id,
            )
        self._emit(
            CourseFinishedEvent,
            course.id,
            "Course",
            subject_id=course.subject_id,
            graduates=graduates,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def summary(self) -> dict[str, Any]:
        """Entity counts for reporting."""
        return {
            "name": self.name,
            "day": self.days_running,
            "subjects": len(self.subjects),
            "courses": len(self.courses),
            "participants": len(self.participants),
            "instructors": len(self.instructors),
            "idle_instructors": len(self.idle_instructors()),
            "unenrolled_participants": len(self.unenrolled_participants()),
        }

    def _build_policy_context(
        self, participant: Participant, course: Course, subject: Subject
    ) -> dict[str, Any]:
        return {
            "subject_id": subject.id,
            "subject_prerequisites": subject.prerequisites,
            "participant_certificates": participant.certificates,
            "course_days_until_start": course.days_until_start,
            "course_capacity": course.capacity,
            "course_enrolled": course.size,
        }

    def _emit(
        self,
        event_cls: type[DomainEvent],
        aggregate_id: Any,
        aggregate_type: str,
        **payload: Any,
    ) -> None:
        event = event_cls(
            metadata=EventMetadata(day=self.days_running),
            aggregate_id=str(aggregate_id),
            aggregate_type=aggregate_type,
            **payload,
        )
        self._journal.record(event)
