"""Shared workflow layer between the CLI and the adapters.

Each function wires config-resolved adapters to the pure core and returns
plain results for the caller to display.
"""

import asyncio
import logging
from datetime import date, timedelta
from pathlib import Path

from .adapters.composite_calendar import CompositeCalendarAdapter
from .adapters.json_store import JsonFileStore, StoreError
from .adapters.pdf_report import PdfReportRenderer
from .config import Config, data_file_path
from .core.calendar import DayView, Event, activity_colors_on_date, build_day_view
from .core.export import activities_to_csv, export_filename
from .core.models import Activity, Client, InvoiceFilter
from .core.navigator import MonthGrid, PeriodNavigator, month_grid
from .core.pagination import ReportPage, paginate
from .core.periods import start_of_day
from .core.report import Report, build_report, summarize
from .ports import CalendarService, ObjectStore

logger = logging.getLogger(__name__)


def get_store(config: Config) -> JsonFileStore:
    """Resolve the data file from config."""
    return JsonFileStore(data_file_path(config))


def get_calendar(config: Config) -> CompositeCalendarAdapter:
    return CompositeCalendarAdapter(config)


def save_record(store: ObjectStore, record: Activity | Client) -> bool:
    """
    Persist a record, reporting failure instead of raising.

    The caller keeps its in-memory record either way so the edit can be retried.
    """
    try:
        store.save(record)
    except StoreError as e:
        logger.error(f"Failed to save {type(record).__name__.lower()} {record.id}: {e}")
        return False
    return True


def generate_report(
    store: ObjectStore,
    period: PeriodNavigator,
    invoice_filter: InvoiceFilter = InvoiceFilter.ALL,
) -> Report:
    """Build the report for a period from the store's activities, newest first."""
    return build_report(store.list_activities(), period, invoice_filter)


def report_pages(report: Report) -> list[ReportPage]:
    return paginate(
        report.activities,
        report.label,
        report.summary.total_amount,
        report.summary.total_hours,
    )


def export_csv(report: Report, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / export_filename(report.label, "csv")
    path.write_text(activities_to_csv(report.activities, report.label), encoding="utf-8")
    return path


def export_pdf(report: Report, output_dir: Path, generated_on: date | None = None) -> Path:
    path = output_dir / export_filename(report.label, "pdf")
    return PdfReportRenderer(generated_on).write(report_pages(report), path)


def client_pages(store: ObjectStore, client: Client) -> list[ReportPage]:
    """All of a client's activities, newest first, paginated like a period report."""
    activities = store.activities_for_client(client.id)
    summary = summarize(activities)
    return paginate(activities, f"Activitate {client.name}", summary.total_amount, summary.total_hours)


def export_client_pdf(
    store: ObjectStore,
    client: Client,
    output_dir: Path,
    generated_on: date | None = None,
) -> Path:
    pages = client_pages(store, client)
    path = output_dir / export_filename(pages[0].period_label, "pdf")
    return PdfReportRenderer(generated_on).write(pages, path)


async def fetch_day_events(calendar: CalendarService, day: date) -> list[Event]:
    """
    Fetch external events for one day.

    Access denial and adapter failures give an empty list, never an error.
    """
    start = start_of_day(day)
    try:
        granted = await asyncio.to_thread(calendar.request_access)
        if not granted:
            logger.warning("Calendar access not granted - showing no external events")
            return []
        return await asyncio.to_thread(calendar.fetch_events, start, start + timedelta(days=1))
    except Exception as e:
        logger.warning(f"Failed to fetch calendar events for {day}: {e}")
        return []


async def load_day_view(
    store: ObjectStore,
    calendar: CalendarService | None,
    day: date,
    min_gap: timedelta = timedelta(seconds=60),
) -> DayView:
    """Activities on the day plus the external timeline, as two separate lists."""
    events = await fetch_day_events(calendar, day) if calendar is not None else []
    return build_day_view(store.list_activities(ascending=True), events, day, min_gap)


def month_overview(store: ObjectStore, reference: date) -> tuple[MonthGrid, dict[date, list[str]]]:
    """Month grid plus indicator colours for each day that has activities."""
    grid = month_grid(reference)
    activities = store.list_activities(ascending=True)
    colors = {}
    for row in grid.rows:
        for day in row:
            if day is None:
                continue
            day_colors = activity_colors_on_date(activities, day)
            if day_colors:
                colors[day] = day_colors
    return grid, colors
