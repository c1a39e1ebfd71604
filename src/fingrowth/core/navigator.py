"""Report period cursor and month grid layout."""

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum

from .formatting import format_date_range, format_month_year
from .periods import (
    add_months,
    days_in_month,
    end_of_day,
    end_of_month,
    end_of_week,
    start_of_day,
    start_of_month,
    start_of_week,
)


class PeriodKind(Enum):
    WEEK = "week"
    MONTH = "month"
    CUSTOM = "custom"


@dataclass
class PeriodNavigator:
    """Selected report period. Week and month step around a cursor date."""

    kind: PeriodKind = PeriodKind.MONTH
    cursor: date | None = None
    custom_start: date | None = None
    custom_end: date | None = None

    def __post_init__(self):
        today = date.today()
        if self.cursor is None:
            self.cursor = today
        if self.custom_start is None:
            self.custom_start = add_months(today, -1)
        if self.custom_end is None:
            self.custom_end = today
        self.set_custom(self.custom_start, self.custom_end)

    @property
    def can_step(self) -> bool:
        return self.kind is not PeriodKind.CUSTOM

    def set_custom(self, start: date, end: date) -> None:
        """Set the custom range; an end before the start is clamped to it."""
        self.custom_start = start
        self.custom_end = max(start, end)

    def step(self, amount: int) -> None:
        if self.kind is PeriodKind.WEEK:
            self.cursor = self.cursor + timedelta(weeks=amount)
        elif self.kind is PeriodKind.MONTH:
            self.cursor = add_months(self.cursor, amount)

    def range(self) -> tuple[datetime, datetime]:
        if self.kind is PeriodKind.WEEK:
            return start_of_week(self.cursor), end_of_week(self.cursor)
        if self.kind is PeriodKind.MONTH:
            return start_of_month(self.cursor), end_of_month(self.cursor)
        return start_of_day(self.custom_start), end_of_day(self.custom_end)

    def label(self) -> str:
        start, end = self.range()
        if self.kind is PeriodKind.WEEK:
            return f"Săptămâna {format_date_range(start, end)}"
        if self.kind is PeriodKind.MONTH:
            return format_month_year(self.cursor)
        return format_date_range(start, end)


@dataclass
class MonthGrid:
    """Calendar layout for one month, Monday-first. Blank cells are None."""

    year: int
    month: int
    days_in_month: int
    offset: int
    rows: list[list[date | None]]


def month_grid(reference: date) -> MonthGrid:
    first = reference.replace(day=1)
    count = days_in_month(first.year, first.month)
    # Monday=0 .. Sunday=6, the position of day 1 in a Monday-first week
    offset = first.weekday()
    cells: list[date | None] = [None] * offset
    cells.extend(first.replace(day=day) for day in range(1, count + 1))
    row_count = math.ceil(len(cells) / 7)
    cells.extend([None] * (row_count * 7 - len(cells)))
    rows = [cells[i : i + 7] for i in range(0, len(cells), 7)]
    return MonthGrid(
        year=first.year,
        month=first.month,
        days_in_month=count,
        offset=offset,
        rows=rows,
    )
