"""Calendar service interface."""

from datetime import datetime
from typing import Protocol

from fingrowth.core.calendar import Event


class CalendarService(Protocol):
    """Interface for reading busy time from any calendar backend."""

    def request_access(self) -> bool:
        """Return True when events can be read."""
        ...

    def fetch_events(self, start: datetime, end: datetime) -> list[Event]:
        """Fetch events in the half-open range [start, end)."""
        ...

    def create_draft_event(self, title: str, when: datetime) -> Event:
        """Build a suggested event near the given time."""
        ...
