"""
Simulation Schemas

Pydantic models describing the outcome of simulated days and the
request/response bodies of the simulation API.
"""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from shared.events.base import DomainEvent
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

# DayReport counter field -> event type it counts
EVENT_COUNTERS: dict[str, str] = {
    "courses_created": CourseCreatedEvent.EVENT_TYPE,
    "instructors_assigned": InstructorAssignedEvent.EVENT_TYPE,
    "participants_enrolled": ParticipantEnrolledEvent.EVENT_TYPE,
    "enrollments_denied": EnrollmentDeniedEvent.EVENT_TYPE,
    "courses_started": CourseStartedEvent.EVENT_TYPE,
    "courses_cancelled": CourseCancelledEvent.EVENT_TYPE,
    "courses_finished": CourseFinishedEvent.EVENT_TYPE,
    "certificates_granted": CertificateGrantedEvent.EVENT_TYPE,
    "participants_joined": ParticipantJoinedEvent.EVENT_TYPE,
    "participants_left": ParticipantLeftEvent.EVENT_TYPE,
    "instructors_joined": InstructorJoinedEvent.EVENT_TYPE,
    "instructors_left": InstructorLeftEvent.EVENT_TYPE,
}


class DayReport(BaseModel):
    """Everything that happened during one simulated day."""

    day: int = Field(..., ge=1, description="Day that was simulated")
    courses_created: int = 0
    instructors_assigned: int = 0
    participants_enrolled: int = 0
    enrollments_denied: int = 0
    courses_started: int = 0
    courses_cancelled: int = 0
    courses_finished: int = 0
    certificates_granted: int = 0
    participants_joined: int = 0
    participants_left: int = 0
    instructors_joined: int = 0
    instructors_left: int = 0
    events: list[dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def from_events(cls, day: int, events: list[dict[str, Any]]) -> "DayReport":
        """
        Build a report by counting serialized events.

        Args:
            day: Simulated day
            events: Events as produced by ``DomainEvent.to_dict``

        Returns:
            DayReport: Report with per-type counters filled in
        """
        counters = {
            field: sum(1 for event in events if event["event_type"] == event_type)
            for field, event_type in EVENT_COUNTERS.items()
        }
        return cls(day=day, events=list(events), **counters)

    @classmethod
    def from_domain_events(cls, day: int, events: list[DomainEvent]) -> "DayReport":
        return cls.from_events(day, [event.to_dict() for event in events])

    def extended(self, events: list[DomainEvent]) -> "DayReport":
        """Return a copy of the report that also covers ``events``."""
        return DayReport.from_events(self.day, [*self.events, *(e.to_dict() for e in events)])


class SimulationCreate(BaseModel):
    """Request body for creating a simulation."""

    catalog: str = Field(..., min_length=1, description="Catalog text, one entity per line")
    seed: int | None = Field(default=None, description="Random seed for reproducible runs")


class SimulationAdvance(BaseModel):
    """Request body for advancing a simulation."""

    days: int = Field(default=1, ge=1, le=365)


class SimulationSummary(BaseModel):
    """Response body describing a simulation."""

    id: UUID
    seed: int | None = None
    name: str
    day: int
    subjects: int
    courses: int
    participants: int
    instructors: int
    idle_instructors: int
    unenrolled_participants: int
