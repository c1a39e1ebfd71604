"""fingrowth CLI - coaching activity tracker."""

import asyncio
import json
import logging
import sys
from datetime import date, datetime, timedelta
from functools import wraps
from pathlib import Path

import click

from .adapters.json_store import JsonFileStore, StoreError
from .config import Config, export_dir_path, load_config
from .core.calendar import Event, FreeGap
from .core.formatting import (
    format_currency,
    format_date_medium,
    format_date_short,
    format_gap_duration,
    format_hours,
    format_month_year,
    format_time,
)
from .core.models import Activity, ActivityType, Client, InvoiceFilter, normalize_client_name
from .core.navigator import PeriodKind, PeriodNavigator
from .core.report import Report, summarize
from .workflows import (
    export_csv,
    export_client_pdf,
    export_pdf,
    generate_report,
    get_calendar,
    get_store,
    load_day_view,
    month_overview,
    save_record,
)

DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%d %H:%M"]
TYPE_CHOICES = [t.name.lower() for t in ActivityType]
WEEKDAY_HEADER = ["Lu", "Ma", "Mi", "Jo", "Vi", "Sâ", "Du"]


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _open_store(config: Config) -> JsonFileStore:
    try:
        return get_store(config)
    except StoreError as e:
        _fail(str(e))


def _save(store: JsonFileStore, record: Activity | Client) -> None:
    if not save_record(store, record):
        _fail(f"Could not save {type(record).__name__.lower()}, see log for details")


def _resolve_client(store: JsonFileStore, name_or_id: str) -> Client:
    client = store.find_client(name_or_id)
    if client is None:
        _fail(f"No client named '{name_or_id}'")
    return client


def _resolve_activity(store: JsonFileStore, id_prefix: str) -> Activity:
    matches = [a for a in store.list_activities() if a.id.startswith(id_prefix)]
    if not matches:
        _fail(f"No activity with id '{id_prefix}'")
    if len(matches) > 1:
        _fail(f"Activity id '{id_prefix}' is ambiguous ({len(matches)} matches)")
    return matches[0]


def _activity_dict(activity: Activity) -> dict:
    return {
        "id": activity.id,
        "type": ActivityType.parse(activity.activity_type).value,
        "client": activity.client_name,
        "start_date": activity.start_date.isoformat() if activity.start_date else None,
        "end_date": activity.end_date.isoformat() if activity.end_date else None,
        "hours": activity.hours,
        "cost_per_hour": activity.cost_per_hour,
        "total_amount": activity.total_amount,
        "is_invoiced": activity.is_invoiced,
        "notes": activity.notes,
    }


def _activity_line(activity: Activity) -> str:
    activity_type = ActivityType.parse(activity.activity_type).display_name
    client = activity.client_name or "Fără client"
    status = "Facturat" if activity.is_invoiced else "Nefacturat"
    return (
        f"{activity.id[:8]}  {format_date_short(activity.start_date):10}  "
        f"{activity_type:13} {client:20.20} {format_hours(activity.hours):>9} "
        f"{format_currency(activity.total_amount):>12}  {status}"
    )


def period_options(func):
    """Shared options selecting a report period and invoice filter."""

    @click.option("--period", "-p", type=click.Choice([k.value for k in PeriodKind]), default="month",
                  show_default=True, help="Report period")
    @click.option("--date", "-d", "cursor", type=click.DateTime(DATE_FORMATS), default=None,
                  help="Any date inside the week/month (default: today)")
    @click.option("--offset", "-o", type=int, default=0, help="Step the week/month by N periods")
    @click.option("--from", "start", type=click.DateTime(DATE_FORMATS), default=None,
                  help="Custom period start")
    @click.option("--to", "end", type=click.DateTime(DATE_FORMATS), default=None,
                  help="Custom period end")
    @click.option("--invoice", type=click.Choice([f.value for f in InvoiceFilter]), default="all",
                  show_default=True, help="Invoice status filter")
    @wraps(func)
    def wrapper(period, cursor, offset, start, end, invoice, **kwargs):
        navigator = PeriodNavigator(kind=PeriodKind(period), cursor=cursor.date() if cursor else None)
        if navigator.kind is PeriodKind.CUSTOM:
            if start is None or end is None:
                raise click.UsageError("--from and --to are required for a custom period")
            navigator.set_custom(start.date(), end.date())
        else:
            navigator.step(offset)
        return func(navigator=navigator, invoice_filter=InvoiceFilter(invoice), **kwargs)

    return wrapper


@click.group()
@click.version_option(package_name="fingrowth")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """fingrowth - coaching activity and earnings tracker."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


# ============== Clients ==============


@main.group()
def client():
    """Manage clients."""


@client.command("add")
@click.argument("name")
@click.option("--email", default=None, help="Contact email")
@click.option("--phone", default=None, help="Contact phone")
def client_add(name: str, email: str | None, phone: str | None):
    """Add a client."""
    try:
        name = normalize_client_name(name)
    except ValueError as e:
        _fail(str(e))

    store = _open_store(load_config())
    new_client = Client(name=name, email=email or None, phone=phone or None)
    _save(store, new_client)
    click.echo(f"✓ Client '{new_client.name}' added")


@client.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def client_list(as_json: bool):
    """List clients by name."""
    store = _open_store(load_config())
    clients = store.list_clients()

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "id": c.id,
                        "name": c.name,
                        "email": c.email,
                        "phone": c.phone,
                        "activities": len(store.activities_for_client(c.id)),
                    }
                    for c in clients
                ],
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    if not clients:
        click.echo("No clients yet.")
        return

    for c in clients:
        contact = " · ".join(v for v in (c.email, c.phone) if v)
        suffix = f"  ({contact})" if contact else ""
        click.echo(f"• {c.name}{suffix}")


@client.command("show")
@click.argument("name")
def client_show(name: str):
    """Show a client's activities and totals."""
    store = _open_store(load_config())
    found = _resolve_client(store, name)
    activities = store.activities_for_client(found.id)
    summary = summarize(activities)

    click.echo(found.name)
    if found.email:
        click.echo(f"  Email: {found.email}")
    if found.phone:
        click.echo(f"  Telefon: {found.phone}")
    click.echo(
        f"  Total: {format_currency(summary.total_amount)} · {format_hours(summary.total_hours)} · "
        f"{summary.count} sesiuni"
    )
    unbilled = summarize([a for a in activities if not a.is_invoiced])
    if unbilled.count:
        click.echo(f"  De facturat: {format_currency(unbilled.total_amount)} ({unbilled.count} sesiuni)")

    if activities:
        click.echo()
        for activity in activities:
            click.echo(_activity_line(activity))


@client.command("delete")
@click.argument("name")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
def client_delete(name: str, yes: bool):
    """Delete a client. Their activities are kept without a client."""
    store = _open_store(load_config())
    found = _resolve_client(store, name)
    count = len(store.activities_for_client(found.id))
    if not yes and not click.confirm(f"Delete '{found.name}' ({count} activities will be detached)?"):
        return
    try:
        store.delete(found)
    except StoreError as e:
        _fail(str(e))
    click.echo(f"✓ Client '{found.name}' deleted")


# ============== Activities ==============


@main.group()
def activity():
    """Manage activities."""


@activity.command("add")
@click.option("--type", "-t", "type_name", type=click.Choice(TYPE_CHOICES), default="coaching",
              show_default=True, help="Activity type")
@click.option("--client", "-c", "client_name", default=None, help="Client name or id")
@click.option("--start", "-s", type=click.DateTime(DATE_FORMATS), required=True, help="Start date")
@click.option("--end", "-e", type=click.DateTime(DATE_FORMATS), default=None,
              help="End date (default: start)")
@click.option("--hours", "-h", type=float, required=True, help="Hours worked")
@click.option("--rate", "-r", type=float, required=True, help="Cost per hour")
@click.option("--invoiced/--not-invoiced", default=False, help="Invoice status")
@click.option("--notes", "-n", default=None, help="Free text notes")
def activity_add(type_name, client_name, start, end, hours, rate, invoiced, notes):
    """Record an activity."""
    store = _open_store(load_config())
    record = Activity(
        activity_type=ActivityType.parse(type_name),
        client=_resolve_client(store, client_name) if client_name else None,
        start_date=start,
        end_date=end or start,
        hours=hours,
        cost_per_hour=rate,
        is_invoiced=invoiced,
        notes=notes,
    )
    try:
        record.normalize()
    except ValueError as e:
        _fail(str(e))
    _save(store, record)
    click.echo(f"✓ Activity {record.id[:8]} saved ({format_currency(record.total_amount)})")


@activity.command("list")
@click.option("--client", "-c", "client_name", default=None, help="Only this client's activities")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def activity_list(client_name: str | None, as_json: bool):
    """List activities, newest first."""
    store = _open_store(load_config())
    if client_name:
        activities = store.activities_for_client(_resolve_client(store, client_name).id)
    else:
        activities = store.list_activities()

    if as_json:
        click.echo(json.dumps([_activity_dict(a) for a in activities], indent=2, ensure_ascii=False))
        return

    if not activities:
        click.echo("No activities yet.")
        return

    for a in activities:
        click.echo(_activity_line(a))


@activity.command("edit")
@click.argument("activity_id")
@click.option("--type", "-t", "type_name", type=click.Choice(TYPE_CHOICES), default=None)
@click.option("--client", "-c", "client_name", default=None, help="Client name or id")
@click.option("--no-client", is_flag=True, help="Detach the client")
@click.option("--start", "-s", type=click.DateTime(DATE_FORMATS), default=None)
@click.option("--end", "-e", type=click.DateTime(DATE_FORMATS), default=None)
@click.option("--hours", "-h", type=float, default=None)
@click.option("--rate", "-r", type=float, default=None)
@click.option("--notes", "-n", default=None)
def activity_edit(activity_id, type_name, client_name, no_client, start, end, hours, rate, notes):
    """Change fields of an activity."""
    store = _open_store(load_config())
    record = _resolve_activity(store, activity_id)

    if type_name:
        record.activity_type = ActivityType.parse(type_name)
    if no_client:
        record.client = None
    elif client_name:
        record.client = _resolve_client(store, client_name)
    if start:
        record.start_date = start
    if end:
        record.end_date = end
    if hours is not None:
        record.hours = hours
    if rate is not None:
        record.cost_per_hour = rate
    if notes is not None:
        record.notes = notes or None

    try:
        record.normalize()
    except ValueError as e:
        _fail(str(e))
    _save(store, record)
    click.echo(f"✓ Activity {record.id[:8]} updated ({format_currency(record.total_amount)})")


@activity.command("invoice")
@click.argument("activity_id")
@click.option("--undo", is_flag=True, help="Mark as not invoiced")
def activity_invoice(activity_id: str, undo: bool):
    """Mark an activity as invoiced."""
    store = _open_store(load_config())
    record = _resolve_activity(store, activity_id)
    record.is_invoiced = not undo
    _save(store, record)
    click.echo(f"✓ Activity {record.id[:8]} {'not ' if undo else ''}invoiced")


@activity.command("delete")
@click.argument("activity_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
def activity_delete(activity_id: str, yes: bool):
    """Delete an activity."""
    store = _open_store(load_config())
    record = _resolve_activity(store, activity_id)
    if not yes and not click.confirm(f"Delete activity {record.id[:8]}?"):
        return
    try:
        store.delete(record)
    except StoreError as e:
        _fail(str(e))
    click.echo(f"✓ Activity {record.id[:8]} deleted")


# ============== Reports ==============


def _show_report(report: Report) -> None:
    summary = report.summary
    click.echo(f"Raport: {report.label}\n")
    click.echo(f"  Total încasat: {format_currency(summary.total_amount)}")
    click.echo(f"  Sesiuni:       {summary.count}")
    click.echo(f"  Total ore:     {format_hours(summary.total_hours)}")
    click.echo(f"  Medie/oră:     {format_currency(summary.average_per_hour)}")

    if summary.breakdown:
        click.echo("\nDefalcare pe tip")
        for item in summary.breakdown:
            sessions = "sesiune" if item.count == 1 else "sesiuni"
            click.echo(
                f"  {item.type.display_name:13} {item.count:3} {sessions:8} {format_currency(item.total):>12}"
            )

    click.echo()
    if not report.activities:
        click.echo("Nicio activitate în această perioadă.")
        return
    click.echo("Activități")
    for a in report.activities:
        click.echo(_activity_line(a))


@main.command()
@period_options
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def report(navigator: PeriodNavigator, invoice_filter: InvoiceFilter, as_json: bool):
    """Earnings report for a week, month or custom range."""
    store = _open_store(load_config())
    result = generate_report(store, navigator, invoice_filter)

    if as_json:
        summary = result.summary
        click.echo(
            json.dumps(
                {
                    "label": result.label,
                    "start": result.start.isoformat(),
                    "end": result.end.isoformat(),
                    "invoice_filter": result.invoice_filter.value,
                    "total_amount": summary.total_amount,
                    "total_hours": summary.total_hours,
                    "average_per_hour": summary.average_per_hour,
                    "count": summary.count,
                    "breakdown": [
                        {"type": item.type.value, "total": item.total, "count": item.count}
                        for item in summary.breakdown
                    ],
                    "activities": [_activity_dict(a) for a in result.activities],
                },
                indent=2,
                ensure_ascii=False,
            )
        )
        return

    _show_report(result)


@main.group()
def export():
    """Export a period report to CSV or PDF."""


@export.command("csv")
@period_options
@click.option("--output", "output_dir", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Directory for the file (default: FINGROWTH_HOME/exports)")
def export_csv_cmd(navigator: PeriodNavigator, invoice_filter: InvoiceFilter, output_dir: Path | None):
    """Write the report activities as CSV."""
    config = load_config()
    result = generate_report(_open_store(config), navigator, invoice_filter)
    path = export_csv(result, output_dir or export_dir_path(config))
    click.echo(f"✓ CSV saved to {path}")


@export.command("pdf")
@period_options
@click.option("--output", "output_dir", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Directory for the file (default: FINGROWTH_HOME/exports)")
def export_pdf_cmd(navigator: PeriodNavigator, invoice_filter: InvoiceFilter, output_dir: Path | None):
    """Write the report as a paginated PDF."""
    config = load_config()
    result = generate_report(_open_store(config), navigator, invoice_filter)
    path = export_pdf(result, output_dir or export_dir_path(config))
    click.echo(f"✓ PDF saved to {path}")


@export.command("client")
@click.argument("name")
@click.option("--output", "output_dir", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Directory for the file (default: FINGROWTH_HOME/exports)")
def export_client_cmd(name: str, output_dir: Path | None):
    """Write all of a client's activities as a paginated PDF."""
    config = load_config()
    store = _open_store(config)
    found = _resolve_client(store, name)
    if not store.activities_for_client(found.id):
        _fail(f"'{found.name}' has no activities to export")
    path = export_client_pdf(store, found, output_dir or export_dir_path(config))
    click.echo(f"✓ PDF saved to {path}")


# ============== Calendar ==============


@main.group()
def calendar():
    """Month overview and day timeline."""


@calendar.command("month")
@click.option("--month", "-m", type=click.DateTime(["%Y-%m"]), default=None,
              help="Month to show (YYYY-MM), defaults to this month")
def calendar_month(month: datetime | None):
    """Month grid; days with activities are marked with their type initials."""
    store = _open_store(load_config())
    reference = month.date() if month else date.today()
    grid, colors = month_overview(store, reference)
    initials = {t.color: t.display_name[0] for t in ActivityType}

    click.echo(format_month_year(reference))
    click.echo(" ".join(f"{d:>5}" for d in WEEKDAY_HEADER))
    for row in grid.rows:
        cells = []
        for day in row:
            if day is None:
                cells.append(" " * 5)
                continue
            marks = "".join(initials[c] for c in colors.get(day, []))
            cells.append(f"{day.day:>2}{marks:<3}")
        click.echo(" ".join(cells))


def _show_timeline(items: list[Event | FreeGap]) -> None:
    if not items:
        click.echo("  No external events.")
        return
    for item in items:
        if isinstance(item, FreeGap):
            click.echo(f"  Liber {item.format()}")
            continue
        end = f"-{format_time(item.end)}" if item.end and not item.all_day else ""
        minutes = None if item.all_day else item.duration_minutes()
        length = f" ({format_gap_duration(timedelta(minutes=minutes))})" if minutes else ""
        where = f" [{item.calendar}]" if item.calendar else ""
        click.echo(f"  {item.format_time()}{end}{length}  {item.title}{where}")


@calendar.command("day")
@click.option("--date", "-d", "target_date", type=click.DateTime(["%Y-%m-%d"]), default=None,
              help="Date to view (YYYY-MM-DD), defaults to today")
@click.option("--no-external", is_flag=True, help="Skip external calendar events")
def calendar_day(target_date: datetime | None, no_external: bool):
    """Activities and external availability for a day."""
    config = load_config()
    store = _open_store(config)
    day = target_date.date() if target_date else date.today()
    calendar_service = None if no_external or not config.gcal_accounts else get_calendar(config)

    view = asyncio.run(
        load_day_view(store, calendar_service, day, timedelta(seconds=config.timeline_min_gap_seconds))
    )

    click.echo(f"### {format_date_medium(day)}\n")
    click.echo("Sesiuni")
    if view.activities:
        for a in view.activities:
            click.echo(_activity_line(a))
    else:
        click.echo("  Nu ai nicio sesiune programată pentru această zi.")

    click.echo("\nCalendar")
    _show_timeline(view.timeline)


@calendar.command("draft")
@click.argument("title")
@click.option("--at", "when", type=click.DateTime(DATE_FORMATS), default=None,
              help="Suggested time (default: now)")
def calendar_draft(title: str, when: datetime | None):
    """Suggest a one-hour calendar slot at the next full hour."""
    config = load_config()
    event = get_calendar(config).create_draft_event(title, when or datetime.now())
    click.echo(f"{event.title}: {format_date_medium(event.start)} {format_time(event.start)}-{format_time(event.end)}")


@main.command("cal-auth")
@click.option("--account", default=None, help="Label of account to authenticate (default: all)")
def cal_auth(account: str | None):
    """Authenticate with Google Calendar."""
    config = load_config()

    if not config.gcal_accounts:
        _fail("No calendar accounts configured in fingrowth.conf")

    if not config.google_client_secret_file:
        _fail("GOOGLE_CLIENT_SECRET_FILE not set in fingrowth.conf")

    for adapter in get_calendar(config).adapters:
        if account and adapter.label != account:
            continue

        click.echo(f"\nAuthenticating: {adapter.label}")
        if adapter.authenticate():
            click.echo(f"  ✓ Token saved to {adapter._token_path}")
        else:
            click.echo("  ✗ Authentication failed", err=True)


if __name__ == "__main__":
    main()
