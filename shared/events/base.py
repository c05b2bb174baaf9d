"""
Base Event Classes

Foundation for the simulation's event journal.
All domain events inherit from these base classes.
"""

from abc import ABC
from datetime import datetime
from typing import Any, ClassVar
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class EventMetadata(BaseModel):
    """
    Event metadata for tracking.

    Records both wall-clock time and the simulated day the event belongs to.
    """

    model_config = ConfigDict(frozen=True)

    event_id: UUID = Field(default_factory=uuid4, description="Unique event ID")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Event occurrence time")
    day: int = Field(..., ge=1, description="Simulated school day")
    service: str = Field(default="simulation_service", description="Originating service name")
    version: int = Field(default=1, description="Event schema version")


class Event(BaseModel, ABC):
    """
    Abstract base event class.

    All events in the system inherit from this class.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    metadata: EventMetadata = Field(...)

    EVENT_TYPE: ClassVar[str] = "base.event"

    @classmethod
    def get_event_type(cls) -> str:
        """Get the event type identifier."""
        return cls.EVENT_TYPE

    def get_aggregate_id(self) -> str | None:
        """
        Get the aggregate root ID this event belongs to.

        Subclasses should override to provide specific aggregate ID.

        Returns:
            str: Aggregate root ID or None
        """
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert event to dictionary for serialization."""
        return {
            "event_type": self.get_event_type(),
            "metadata": self.metadata.model_dump(mode="json"),
            "payload": self.model_dump(mode="json", exclude={"metadata"}),
        }


class DomainEvent(Event, ABC):
    """
    Domain event representing a significant occurrence in the school.

    Domain events are facts about things that have happened in the simulation.
    They are immutable once recorded.
    """

    aggregate_id: str = Field(..., description="ID of aggregate root (course, subject or person)")
    aggregate_type: str = Field(..., description="Type of aggregate (e.g., 'Course', 'Participant')")

    def get_aggregate_id(self) -> str | None:
        """Get the aggregate root ID."""
        return self.aggregate_id
