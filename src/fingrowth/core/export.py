"""CSV export of report activities."""

from .formatting import format_date_medium
from .models import Activity, ActivityType

CSV_HEADER = "Data Start,Data End,Client,Tip Activitate,Ore,Cost/Ora,Total,Status,Notite"
NO_CLIENT = "Fara client"


def _clean_notes(notes: str | None) -> str:
    return (notes or "").replace("\n", " ").replace(",", ";")


def activity_csv_row(activity: Activity) -> str:
    client = activity.client_name or NO_CLIENT
    activity_type = ActivityType.parse(activity.activity_type).display_name
    status = "Facturat" if activity.is_invoiced else "Nefacturat"
    return (
        f"{format_date_medium(activity.start_date)},"
        f"{format_date_medium(activity.end_date)},"
        f'"{client}",'
        f"{activity_type},"
        f"{activity.hours:.1f},"
        f"{activity.cost_per_hour:.2f},"
        f"{activity.total_amount:.2f},"
        f"{status},"
        f'"{_clean_notes(activity.notes)}"'
    )


def activities_to_csv(activities: list[Activity], period_label: str) -> str:
    lines = [f"Raport Activitate: {period_label}", CSV_HEADER]
    lines.extend(activity_csv_row(a) for a in activities)
    return "\n".join(lines) + "\n"


def export_filename(period_label: str, extension: str) -> str:
    return f"Raport_{period_label.replace(' ', '_')}.{extension}"
