"""Ports - interfaces/protocols for external dependencies."""

from .store import ObjectStore
from .calendar_repo import CalendarService

__all__ = [
    "ObjectStore",
    "CalendarService",
]
