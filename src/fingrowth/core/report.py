"""Pure report aggregation logic - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import datetime

from .models import Activity, ActivityType, InvoiceFilter
from .navigator import PeriodNavigator


@dataclass
class BreakdownItem:
    """Totals for one activity type."""

    type: ActivityType
    total: float
    count: int


@dataclass
class ReportSummary:
    """Derived totals over a set of activities."""

    count: int = 0
    total_amount: float = 0.0
    total_hours: float = 0.0
    average_per_hour: float = 0.0
    breakdown: list[BreakdownItem] = field(default_factory=list)


@dataclass
class Report:
    """A filtered period report ready for display or export."""

    label: str
    start: datetime
    end: datetime
    invoice_filter: InvoiceFilter
    activities: list[Activity]
    summary: ReportSummary


def filter_activities(
    activities: list[Activity],
    start: datetime,
    end: datetime,
    invoice_filter: InvoiceFilter = InvoiceFilter.ALL,
) -> list[Activity]:
    """
    Activities whose start date falls in [start, end] and match the invoice filter.

    Only the start date decides period membership; an activity that starts
    before the period and runs into it is excluded.
    """
    return [
        a
        for a in activities
        if a.start_date is not None
        and start <= a.start_date <= end
        and invoice_filter.matches(a.is_invoiced)
    ]


def breakdown_by_type(activities: list[Activity]) -> list[BreakdownItem]:
    """Group by type, largest total first. Ties keep first-seen order."""
    groups: dict[ActivityType, BreakdownItem] = {}
    for activity in activities:
        activity_type = ActivityType.parse(activity.activity_type)
        item = groups.get(activity_type)
        if item is None:
            item = groups[activity_type] = BreakdownItem(type=activity_type, total=0.0, count=0)
        item.total += activity.total_amount
        item.count += 1
    return sorted(groups.values(), key=lambda item: item.total, reverse=True)


def summarize(activities: list[Activity]) -> ReportSummary:
    total_amount = sum(a.total_amount for a in activities)
    total_hours = sum(a.hours for a in activities)
    return ReportSummary(
        count=len(activities),
        total_amount=total_amount,
        total_hours=total_hours,
        average_per_hour=total_amount / total_hours if total_hours else 0.0,
        breakdown=breakdown_by_type(activities),
    )


def build_report(
    activities: list[Activity],
    period: PeriodNavigator,
    invoice_filter: InvoiceFilter = InvoiceFilter.ALL,
) -> Report:
    """
    Assemble the report for the navigator's current period.

    Pure function - no I/O. Activity order is preserved from the input.
    """
    start, end = period.range()
    selected = filter_activities(activities, start, end, invoice_filter)
    return Report(
        label=period.label(),
        start=start,
        end=end,
        invoice_filter=invoice_filter,
        activities=selected,
        summary=summarize(selected),
    )
