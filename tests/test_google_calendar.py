"""Tests for Google Calendar adapters."""

from datetime import datetime
from unittest.mock import MagicMock, patch
from zoneinfo import ZoneInfo

from fingrowth.adapters.composite_calendar import CompositeCalendarAdapter
from fingrowth.adapters.google_calendar import GoogleCalendarAdapter
from fingrowth.config import Config, GcalAccount
from fingrowth.core.calendar import Event

TZ = ZoneInfo("Europe/Bucharest")
DAY_START = datetime(2025, 1, 15)
DAY_END = datetime(2025, 1, 16)


def fake_service(calendars, events):
    service = MagicMock()
    service.calendarList().list().execute.return_value = {"items": calendars}
    service.events().list().execute.return_value = {"items": events}
    return service


class TestGoogleCalendarAdapter:
    def test_label_from_config_folder(self):
        adapter = GoogleCalendarAdapter(config_folder="/home/coach/.gcal/work")
        assert adapter.label == "work"

    def test_explicit_label(self):
        adapter = GoogleCalendarAdapter(config_folder="/home/coach/.gcal/work", label="Work")
        assert adapter.label == "Work"

    def test_token_path(self):
        adapter = GoogleCalendarAdapter(config_folder="/home/coach/.gcal/work")
        assert adapter._token_path.name == "token.json"
        assert adapter._token_path.parent.name == "work"

    def test_request_access_without_token(self, tmp_path):
        adapter = GoogleCalendarAdapter(config_folder=str(tmp_path))
        assert adapter.request_access() is False

    @patch("fingrowth.adapters.google_calendar.GoogleCalendarAdapter._build_service")
    def test_fetch_events_timed(self, mock_build):
        mock_build.return_value = fake_service(
            [{"summary": "Sessions", "id": "sessions@group", "backgroundColor": "#ff0000"}],
            [
                {
                    "summary": "Intro call",
                    "start": {"dateTime": "2025-01-15T10:00:00+02:00"},
                    "end": {"dateTime": "2025-01-15T10:30:00+02:00"},
                    "location": "Zoom",
                },
            ],
        )

        adapter = GoogleCalendarAdapter(config_folder="/tmp/test", label="Work", calendars=["Sessions"])
        events = adapter.fetch_events(DAY_START, DAY_END)

        assert len(events) == 1
        event = events[0]
        assert event.title == "Intro call"
        assert event.start == datetime(2025, 1, 15, 10, 0, tzinfo=TZ)
        assert event.duration_minutes() == 30
        assert event.location == "Zoom"
        assert event.calendar == "Work"
        assert event.color == "#ff0000"
        assert event.source == "google_calendar"
        assert not event.all_day

    @patch("fingrowth.adapters.google_calendar.GoogleCalendarAdapter._build_service")
    def test_fetch_events_all_day(self, mock_build):
        mock_build.return_value = fake_service(
            [],
            [{"summary": "Conference", "start": {"date": "2025-01-15"}, "end": {"date": "2025-01-16"}}],
        )

        events = GoogleCalendarAdapter(config_folder="/tmp/test").fetch_events(DAY_START, DAY_END)

        assert events[0].all_day
        assert events[0].format_time() == "Toată ziua"

    @patch("fingrowth.adapters.google_calendar.GoogleCalendarAdapter._build_service")
    def test_fetch_events_sorted_and_untitled(self, mock_build):
        mock_build.return_value = fake_service(
            [],
            [
                {"start": {"dateTime": "2025-01-15T14:00:00+02:00"}, "end": {"dateTime": "2025-01-15T15:00:00+02:00"}},
                {"summary": "Early", "start": {"dateTime": "2025-01-15T08:00:00+02:00"}},
                {"summary": "No start"},
            ],
        )

        events = GoogleCalendarAdapter(config_folder="/tmp/test").fetch_events(DAY_START, DAY_END)

        assert [e.title for e in events] == ["Early", "Untitled"]
        assert events[0].end is None

    @patch("fingrowth.adapters.google_calendar.GoogleCalendarAdapter._build_service")
    def test_fetch_events_api_error_returns_empty(self, mock_build):
        service = MagicMock()
        service.calendarList().list().execute.side_effect = RuntimeError("quota")
        mock_build.return_value = service

        assert GoogleCalendarAdapter(config_folder="/tmp/test").fetch_events(DAY_START, DAY_END) == []

    @patch("fingrowth.adapters.google_calendar.GoogleCalendarAdapter._build_service")
    def test_fetch_events_without_credentials(self, mock_build):
        mock_build.return_value = None
        assert GoogleCalendarAdapter(config_folder="/tmp/test").fetch_events(DAY_START, DAY_END) == []

    def test_resolve_calendars_falls_back_to_primary(self):
        service = fake_service(
            [{"summary": "me@example.com", "id": "me@example.com", "primary": True, "backgroundColor": "#00f"}],
            [],
        )
        adapter = GoogleCalendarAdapter(config_folder="/tmp/test", calendars=["Missing"])
        assert adapter._resolve_calendars(service) == [("primary", "#00f")]

    def test_create_draft_event(self):
        adapter = GoogleCalendarAdapter(config_folder="/tmp/test", label="Work")
        event = adapter.create_draft_event("Follow-up", datetime(2025, 1, 15, 9, 20))

        assert event.start == datetime(2025, 1, 15, 10, 0)
        assert event.end == datetime(2025, 1, 15, 11, 0)
        assert event.calendar == "Work"
        assert event.source == "draft"


class TestCompositeCalendarAdapter:
    def make_config(self):
        return Config(
            gcal_accounts=[
                GcalAccount(config_folder="/tmp/work", label="Work", calendars=["Sessions"]),
                GcalAccount(config_folder="/tmp/home", label="Home"),
            ],
            google_client_secret_file="~/secret.json",
        )

    def test_builds_adapter_per_account(self):
        composite = CompositeCalendarAdapter(self.make_config())

        assert [a.label for a in composite.adapters] == ["Work", "Home"]
        assert composite.adapters[0].calendars == ["Sessions"]
        assert composite.adapters[1].calendars is None
        assert composite.adapters[0].client_secret_file == "~/secret.json"

    def test_no_accounts(self):
        composite = CompositeCalendarAdapter(Config())
        assert composite.request_access() is False
        assert composite.fetch_events(DAY_START, DAY_END) == []
        assert composite.create_draft_event("Call", datetime(2025, 1, 15, 9, 0)).calendar == ""

    def test_request_access_any_account(self):
        composite = CompositeCalendarAdapter(self.make_config())
        with patch.object(composite.adapters[0], "request_access", return_value=False), \
                patch.object(composite.adapters[1], "request_access", return_value=True):
            assert composite.request_access() is True

    def test_fetch_events_merges_sorted(self):
        composite = CompositeCalendarAdapter(self.make_config())
        late = Event(title="Late", start=datetime(2025, 1, 15, 16, 0), end=datetime(2025, 1, 15, 17, 0))
        early = Event(title="Early", start=datetime(2025, 1, 15, 9, 0), end=datetime(2025, 1, 15, 10, 0))

        with patch.object(composite.adapters[0], "fetch_events", return_value=[late]), \
                patch.object(composite.adapters[1], "fetch_events", return_value=[early]):
            events = composite.fetch_events(DAY_START, DAY_END)

        assert [e.title for e in events] == ["Early", "Late"]
