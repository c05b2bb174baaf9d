"""
Event Journal

In-memory, ordered record of domain events with synchronous subscribers.
The simulation drains it once per day to build its day report.
"""

from collections import defaultdict, deque
from collections.abc import Callable
from typing import TypeVar

import structlog

from shared.events.base import DomainEvent

logger = structlog.get_logger(__name__)

TEvent = TypeVar("TEvent", bound=DomainEvent)

EventHandler = Callable[[DomainEvent], None]


class EventJournal:
    """
    Ordered event log with type-based subscriptions.

    Supports:
    - Multiple handlers per event type
    - Polymorphic subscription (handlers on a base class see subclasses)
    - Draining pending events for reporting
    """

    def __init__(self, max_history: int | None = None):
        """
        Initialize journal.

        Args:
            max_history: Maximum events kept in history, oldest dropped first
                (None = unlimited)
        """
        self._handlers: dict[type[DomainEvent], list[EventHandler]] = defaultdict(list)
        self._pending: list[DomainEvent] = []
        self._history: deque[DomainEvent] = deque(maxlen=max_history)

    def subscribe(self, event_type: type[TEvent], handler: EventHandler) -> None:
        """
        Register a handler for events of a type and its subclasses.

        Args:
            event_type: Event type class
            handler: Callable invoked with each matching event
        """
        if handler not in self._handlers[event_type]:
            self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type[TEvent], handler: EventHandler) -> None:
        """Remove a previously registered handler."""
        if handler in self._handlers[event_type]:
            self._handlers[event_type].remove(handler)

    def record(self, event: DomainEvent) -> None:
        """
        Record an event and notify subscribers.

        Args:
            event: Event to record
        """
        self._pending.append(event)
        self._history.append(event)

        for base_type in type(event).__mro__:
            if issubclass(base_type, DomainEvent):
                for handler in self._handlers.get(base_type, []):
                    handler(event)

        logger.debug(
            "Event recorded",
            event_type=event.get_event_type(),
            aggregate_id=event.get_aggregate_id(),
            day=event.metadata.day,
        )

    def drain(self) -> list[DomainEvent]:
        """
        Return and clear events recorded since the last drain.

        Returns:
            Pending events in recording order
        """
        events = self._pending
        self._pending = []
        return events

    def of_type(self, event_type: type[TEvent]) -> list[TEvent]:
        """
        Get history filtered by event type.

        Args:
            event_type: Event type class

        Returns:
            Matching events in recording order
        """
        return [e for e in self._history if isinstance(e, event_type)]

    def history(self) -> list[DomainEvent]:
        """Get a copy of the full event history."""
        return list(self._history)

    def __len__(self) -> int:
        return len(self._history)
