"""
School Domain Events

Events emitted while the school runs: course lifecycle, matching outcomes,
arrivals and departures.
"""

from typing import ClassVar
from uuid import UUID

from pydantic import Field

from shared.events.base import DomainEvent


class CourseCreatedEvent(DomainEvent):
    """Event emitted when a course is opened for a subject with no active course."""

    EVENT_TYPE: ClassVar[str] = "school.course.created"

    subject_id: int = Field(...)
    days_until_start: int = Field(...)
    duration: int = Field(...)


class InstructorAssignedEvent(DomainEvent):
    """Event emitted when an idle instructor takes a course."""

    EVENT_TYPE: ClassVar[str] = "school.course.instructor_assigned"

    subject_id: int = Field(...)
    instructor_id: UUID = Field(...)


class ParticipantEnrolledEvent(DomainEvent):
    """Event emitted when a participant joins a course roster."""

    EVENT_TYPE: ClassVar[str] = "school.enrollment.participant_enrolled"

    subject_id: int = Field(...)
    participant_id: UUID = Field(...)


class EnrollmentDeniedEvent(DomainEvent):
    """
    Event emitted when an enrollment attempt is refused.

    Informational only: the matching pass moves on to the next candidate.
    """

    EVENT_TYPE: ClassVar[str] = "school.enrollment.denied"

    subject_id: int = Field(...)
    participant_id: UUID = Field(...)
    reason: str = Field(...)
    violated_rules: list[str] = Field(default_factory=list)


class CourseStartedEvent(DomainEvent):
    """Event emitted when a pending course begins to run."""

    EVENT_TYPE: ClassVar[str] = "school.course.started"

    subject_id: int = Field(...)
    enrolled: int = Field(...)


class CourseCancelledEvent(DomainEvent):
    """Event emitted when a course reaches its start day without an instructor or participants."""

    EVENT_TYPE: ClassVar[str] = "school.course.cancelled"

    subject_id: int = Field(...)
    had_instructor: bool = Field(...)
    enrolled: int = Field(...)


class CourseFinishedEvent(DomainEvent):
    """Event emitted when a running course completes."""

    EVENT_TYPE: ClassVar[str] = "school.course.finished"

    subject_id: int = Field(...)
    graduates: list[UUID] = Field(default_factory=list)


class CertificateGrantedEvent(DomainEvent):
    """Event emitted for every participant graduating from a course."""

    EVENT_TYPE: ClassVar[str] = "school.participant.certificate_granted"

    subject_id: int = Field(...)


class ParticipantJoinedEvent(DomainEvent):
    """Event emitted when a participant joins the school."""

    EVENT_TYPE: ClassVar[str] = "school.participant.joined"

    name: str = Field(...)


class ParticipantLeftEvent(DomainEvent):
    """Event emitted when a participant leaves the school."""

    EVENT_TYPE: ClassVar[str] = "school.participant.left"

    name: str = Field(...)
    reason: str = Field(..., description="graduated or idle")


class InstructorJoinedEvent(DomainEvent):
    """Event emitted when an instructor is hired."""

    EVENT_TYPE: ClassVar[str] = "school.instructor.joined"

    name: str = Field(...)
    category: str = Field(...)


class InstructorLeftEvent(DomainEvent):
    """Event emitted when an idle instructor leaves."""

    EVENT_TYPE: ClassVar[str] = "school.instructor.left"

    name: str = Field(...)
    category: str = Field(...)
