"""Period boundary helpers. Weeks always start on Monday."""

import calendar
from datetime import date, datetime, time, timedelta


def _as_datetime(d: date | datetime) -> datetime:
    if isinstance(d, datetime):
        return d
    return datetime.combine(d, time.min)


def start_of_day(d: date | datetime) -> datetime:
    dt = _as_datetime(d)
    return datetime.combine(dt.date(), time.min, tzinfo=dt.tzinfo)


def end_of_day(d: date | datetime) -> datetime:
    """Last instant of the calendar day."""
    dt = _as_datetime(d)
    return datetime.combine(dt.date(), time.max, tzinfo=dt.tzinfo)


def start_of_week(d: date | datetime) -> datetime:
    day = start_of_day(d)
    return day - timedelta(days=day.weekday())


def end_of_week(d: date | datetime) -> datetime:
    return end_of_day(start_of_week(d) + timedelta(days=6))


def start_of_month(d: date | datetime) -> datetime:
    return start_of_day(d).replace(day=1)


def end_of_month(d: date | datetime) -> datetime:
    first = start_of_month(d)
    last_day = calendar.monthrange(first.year, first.month)[1]
    return end_of_day(first.replace(day=last_day))


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def add_months(d: date, months: int) -> date:
    """Move by whole calendar months, clamping the day to the target month."""
    index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    return d.replace(year=year, month=month, day=min(d.day, days_in_month(year, month)))


def round_up_to_hour(d: datetime) -> datetime:
    """Advance to the next full hour when minutes are set, dropping seconds."""
    rounded = d.replace(minute=0, second=0, microsecond=0)
    if d.minute > 0:
        rounded += timedelta(hours=1)
    return rounded
