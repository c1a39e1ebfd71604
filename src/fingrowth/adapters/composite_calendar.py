"""Composite calendar adapter - combines multiple calendar accounts."""

from datetime import datetime

from fingrowth.config import Config
from fingrowth.core.calendar import Event, draft_event, sort_events_by_start

from .google_calendar import GoogleCalendarAdapter


class CompositeCalendarAdapter:
    """
    Composite calendar adapter over every configured Google account.

    Implements CalendarService protocol.
    """

    def __init__(self, config: Config):
        self.config = config
        self._adapters: list[GoogleCalendarAdapter] = [
            GoogleCalendarAdapter(
                config_folder=account.config_folder,
                label=account.label,
                calendars=account.calendars or None,
                client_secret_file=config.google_client_secret_file,
                timezone=config.timezone,
            )
            for account in config.gcal_accounts
        ]

    @property
    def adapters(self) -> list[GoogleCalendarAdapter]:
        return self._adapters

    def request_access(self) -> bool:
        """True when at least one account can be read."""
        granted = False
        for adapter in self._adapters:
            granted = adapter.request_access() or granted
        return granted

    def fetch_events(self, start: datetime, end: datetime) -> list[Event]:
        """Fetch events from all accounts in [start, end)."""
        events = []
        for adapter in self._adapters:
            events.extend(adapter.fetch_events(start, end))
        return sort_events_by_start(events)

    def create_draft_event(self, title: str, when: datetime) -> Event:
        label = self._adapters[0].label if self._adapters else ""
        return draft_event(title, when, calendar=label)
