"""Google Calendar API adapter."""

import logging
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

from fingrowth.core.calendar import Event, draft_event, sort_events_by_start

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/calendar.readonly"]


class GoogleCalendarAdapter:
    """
    Reads busy time from Google Calendar via the API.

    Implements CalendarService protocol.
    """

    def __init__(
        self,
        config_folder: str,
        label: str | None = None,
        calendars: list[str] | None = None,
        client_secret_file: str = "",
        timezone: str = "Europe/Bucharest",
    ):
        self.config_folder = config_folder
        self.label = label or Path(config_folder).name
        self.calendars = calendars
        self.client_secret_file = client_secret_file
        self.timezone = timezone
        self._token_path = Path(config_folder).expanduser() / "token.json"

    def _get_credentials(self):
        """Load credentials from token.json, refreshing if needed."""
        from google.auth.transport.requests import Request
        from google.oauth2.credentials import Credentials

        if not self._token_path.exists():
            logger.warning(f"No token.json for {self.label} - run 'fingrowth cal-auth'")
            return None

        creds = Credentials.from_authorized_user_file(str(self._token_path), SCOPES)

        if creds.expired and creds.refresh_token:
            try:
                creds.refresh(Request())
                self._token_path.write_text(creds.to_json())
                self._token_path.chmod(0o600)
            except Exception as e:
                logger.warning(f"Failed to refresh token for {self.label}: {e}")
                return None

        return creds

    def _build_service(self):
        """Build a Google Calendar API service."""
        from googleapiclient.discovery import build

        creds = self._get_credentials()
        if not creds:
            return None
        return build("calendar", "v3", credentials=creds)

    def _resolve_calendars(self, service) -> list[tuple[str, str]]:
        """Resolve display name filters to (calendar id, colour) pairs."""
        result = service.calendarList().list().execute()
        by_name = {}
        primary = ("primary", "")
        for entry in result.get("items", []):
            pair = (entry["id"], entry.get("backgroundColor", ""))
            by_name[entry.get("summary", "")] = pair
            if entry.get("primary"):
                primary = ("primary", pair[1])

        if not self.calendars:
            return [primary]

        resolved = []
        for name in self.calendars:
            if name in by_name:
                resolved.append(by_name[name])
            else:
                logger.warning(f"Calendar '{name}' not found for {self.label}")
        return resolved or [primary]

    def authenticate(self) -> bool:
        """Run OAuth flow for this account. Returns True on success."""
        from google_auth_oauthlib.flow import InstalledAppFlow

        if not self.client_secret_file:
            logger.error("No client secret file configured")
            return False

        secret_path = Path(self.client_secret_file).expanduser()
        if not secret_path.exists():
            logger.error(f"Client secret file not found: {secret_path}")
            return False

        flow = InstalledAppFlow.from_client_secrets_file(str(secret_path), SCOPES)
        creds = flow.run_local_server(port=0)

        token_dir = self._token_path.parent
        token_dir.mkdir(parents=True, exist_ok=True)
        self._token_path.write_text(creds.to_json())
        self._token_path.chmod(0o600)
        return True

    def request_access(self) -> bool:
        """True when a usable token exists for this account."""
        try:
            return self._get_credentials() is not None
        except Exception as e:
            logger.warning(f"Google Calendar credentials unusable for {self.label}: {e}")
            return False

    def fetch_events(self, start: datetime, end: datetime) -> list[Event]:
        """Fetch events in [start, end)."""
        try:
            return self._fetch_events_api(start, end)
        except Exception as e:
            logger.warning(f"Google Calendar API error for {self.label}: {e}")
            return []

    def _localize(self, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=ZoneInfo(self.timezone))
        return value

    def _fetch_events_api(self, start: datetime, end: datetime) -> list[Event]:
        service = self._build_service()
        if not service:
            return []

        tz = ZoneInfo(self.timezone)
        time_min = self._localize(start).isoformat()
        time_max = self._localize(end).isoformat()

        events = []
        for cal_id, color in self._resolve_calendars(service):
            result = (
                service.events()
                .list(
                    calendarId=cal_id,
                    timeMin=time_min,
                    timeMax=time_max,
                    singleEvents=True,
                    orderBy="startTime",
                    timeZone=self.timezone,
                )
                .execute()
            )

            for item in result.get("items", []):
                start_raw = item.get("start", {})
                end_raw = item.get("end", {})

                if "date" in start_raw:
                    start_dt = datetime.fromisoformat(start_raw["date"]).replace(tzinfo=tz)
                    end_dt = datetime.fromisoformat(end_raw["date"]).replace(tzinfo=tz) if "date" in end_raw else None
                    all_day = True
                elif "dateTime" in start_raw:
                    start_dt = datetime.fromisoformat(start_raw["dateTime"]).astimezone(tz)
                    end_dt = datetime.fromisoformat(end_raw["dateTime"]).astimezone(tz) if "dateTime" in end_raw else None
                    all_day = False
                else:
                    continue

                events.append(
                    Event(
                        title=item.get("summary", "Untitled"),
                        start=start_dt,
                        end=end_dt,
                        location=item.get("location", ""),
                        calendar=self.label,
                        all_day=all_day,
                        source="google_calendar",
                        color=color,
                    )
                )

        return sort_events_by_start(events)

    def create_draft_event(self, title: str, when: datetime) -> Event:
        """Suggested one-hour event at the next full hour. Not written to Google."""
        return draft_event(title, when, calendar=self.label)
