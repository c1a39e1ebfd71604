"""Pure day view logic - activities on a date and the external timeline."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from .formatting import format_gap_duration, format_time
from .models import Activity, ActivityType
from .periods import round_up_to_hour, start_of_day

DEFAULT_MIN_GAP = timedelta(seconds=60)
MAX_INDICATOR_COLORS = 3


@dataclass
class Event:
    """An external calendar event."""

    title: str
    start: datetime
    end: datetime | None
    location: str = ""
    calendar: str = ""
    all_day: bool = False
    source: str = ""
    color: str = ""

    def format_time(self) -> str:
        """Format the event time for display."""
        if self.all_day:
            return "Toată ziua"
        return format_time(self.start)

    def duration_minutes(self) -> int | None:
        """Event duration in minutes, or None if no end time."""
        if not self.end:
            return None
        return int((self.end - self.start).total_seconds() / 60)


@dataclass
class FreeGap:
    """Unbooked time between two external events."""

    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def format(self) -> str:
        return f"{format_time(self.start)}-{format_time(self.end)} ({format_gap_duration(self.duration)})"


TimelineItem = Event | FreeGap


@dataclass
class DayView:
    """Billable sessions and external availability for one day, kept apart."""

    date: date
    activities: list[Activity]
    timeline: list[TimelineItem] = field(default_factory=list)


def occurs_on(activity: Activity, day: date | datetime) -> bool:
    """Inclusive day membership; end dates before the start count as the start."""
    if activity.start_date is None or activity.end_date is None:
        return False
    check = start_of_day(day)
    first = start_of_day(activity.start_date)
    last = start_of_day(max(activity.start_date, activity.end_date))
    return first <= check <= last


def activities_on_date(activities: list[Activity], day: date | datetime) -> list[Activity]:
    return [a for a in activities if occurs_on(a, day)]


def has_activity_on_date(activities: list[Activity], day: date | datetime) -> bool:
    return any(occurs_on(a, day) for a in activities)


def activity_colors_on_date(activities: list[Activity], day: date | datetime) -> list[str]:
    """Distinct type colours for a day's indicator dots, in type order."""
    present = {ActivityType.parse(a.activity_type) for a in activities_on_date(activities, day)}
    return [t.color for t in ActivityType if t in present][:MAX_INDICATOR_COLORS]


def sort_events_by_start(events: list[Event]) -> list[Event]:
    """Sort events by start time."""
    return sorted(events, key=lambda e: e.start)


def build_timeline(
    events: list[Event],
    min_gap: timedelta = DEFAULT_MIN_GAP,
) -> list[TimelineItem]:
    """
    Interleave a day's external events with synthesized free gaps.

    Pure function - no I/O. All-day events lead the list and take no part in
    gap detection. A gap is added only when it is longer than min_gap.
    """
    all_day = [e for e in events if e.all_day]
    timed = sort_events_by_start([e for e in events if not e.all_day])

    timeline: list[TimelineItem] = list(all_day)
    busy_until: datetime | None = None

    for event in timed:
        event_end = event.end or event.start
        if busy_until is not None and event.start - busy_until > min_gap:
            timeline.append(FreeGap(start=busy_until, end=event.start))
        timeline.append(event)
        busy_until = event_end if busy_until is None else max(busy_until, event_end)

    return timeline


def build_day_view(
    activities: list[Activity],
    events: list[Event],
    day: date,
    min_gap: timedelta = DEFAULT_MIN_GAP,
) -> DayView:
    return DayView(
        date=day,
        activities=activities_on_date(activities, day),
        timeline=build_timeline(events, min_gap),
    )


def draft_event(title: str, when: datetime, calendar: str = "") -> Event:
    """A one-hour event suggestion starting at the next full hour."""
    start = round_up_to_hour(when)
    return Event(
        title=title,
        start=start,
        end=start + timedelta(hours=1),
        calendar=calendar,
        source="draft",
    )
