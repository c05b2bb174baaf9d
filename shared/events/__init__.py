"""
Event System

Provides domain events and the in-memory event journal used by the simulation.
"""

from shared.events.base import DomainEvent, Event, EventMetadata
from shared.events.journal import EventJournal

__all__ = [
    # Base Events
    "Event",
    "DomainEvent",
    "EventMetadata",
    # Journal
    "EventJournal",
]
