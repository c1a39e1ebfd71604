"""Functional core - pure business logic with no I/O."""

from .models import Activity, ActivityType, Client, InvoiceFilter, normalize_client_name
from .report import BreakdownItem, Report, ReportSummary, build_report, filter_activities, summarize
from .calendar import (
    DayView,
    Event,
    FreeGap,
    activities_on_date,
    activity_colors_on_date,
    build_day_view,
    build_timeline,
)
from .navigator import MonthGrid, PeriodKind, PeriodNavigator, month_grid
from .pagination import ReportPage, paginate
from .export import activities_to_csv, export_filename

__all__ = [
    # Models
    "Activity",
    "ActivityType",
    "Client",
    "InvoiceFilter",
    "normalize_client_name",
    # Report
    "BreakdownItem",
    "Report",
    "ReportSummary",
    "build_report",
    "filter_activities",
    "summarize",
    # Day view
    "DayView",
    "Event",
    "FreeGap",
    "activities_on_date",
    "activity_colors_on_date",
    "build_day_view",
    "build_timeline",
    # Navigation
    "MonthGrid",
    "PeriodKind",
    "PeriodNavigator",
    "month_grid",
    # Pages and export
    "ReportPage",
    "paginate",
    "activities_to_csv",
    "export_filename",
]
