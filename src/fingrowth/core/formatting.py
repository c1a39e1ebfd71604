"""Display formatting shared by reports, exports and the CLI."""

from datetime import date, datetime, timedelta

CURRENCY_SYMBOL = "€"

MONTH_NAMES = [
    "ianuarie",
    "februarie",
    "martie",
    "aprilie",
    "mai",
    "iunie",
    "iulie",
    "august",
    "septembrie",
    "octombrie",
    "noiembrie",
    "decembrie",
]

MONTH_ABBREVIATIONS = [
    "ian.",
    "feb.",
    "mar.",
    "apr.",
    "mai",
    "iun.",
    "iul.",
    "aug.",
    "sept.",
    "oct.",
    "nov.",
    "dec.",
]


def format_date_short(d: date | datetime | None) -> str:
    if d is None:
        return ""
    return d.strftime("%d.%m.%Y")


def format_date_medium(d: date | datetime | None) -> str:
    if d is None:
        return ""
    return f"{d.day} {MONTH_ABBREVIATIONS[d.month - 1]} {d.year}"


def format_date_range(start: date | datetime, end: date | datetime) -> str:
    return f"{format_date_short(start)} – {format_date_short(end)}"


def format_time(d: datetime) -> str:
    return d.strftime("%H:%M")


def format_month_year(d: date | datetime) -> str:
    return f"{MONTH_NAMES[d.month - 1].capitalize()} {d.year}"


def format_hours(hours: float) -> str:
    """2 -> '2 ore', 2.5 -> '2.5 ore'."""
    if hours == int(hours):
        return f"{hours:.0f} ore"
    return f"{hours:.1f} ore"


def format_currency(amount: float) -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{abs(amount):,.2f}"


def format_gap_duration(duration: timedelta) -> str:
    """Hours and minutes from one hour up, minutes only below."""
    minutes = int(duration.total_seconds() // 60)
    hours, rest = divmod(minutes, 60)
    if hours >= 1:
        return f"{hours}h {rest}m"
    return f"{rest}m"
