"""Split report activities into printable pages."""

from dataclasses import dataclass

from .models import Activity

FIRST_PAGE_SIZE = 12
PAGE_SIZE = 18


@dataclass
class ReportPage:
    """One printable page. Totals are for the whole report, not the page."""

    period_label: str
    activities: list[Activity]
    total_amount: float
    total_hours: float
    total_count: int
    page_number: int
    total_pages: int

    @property
    def is_first_page(self) -> bool:
        return self.page_number == 1


def chunked(items: list, size: int) -> list[list]:
    return [items[i : i + size] for i in range(0, len(items), size)]


def paginate(
    activities: list[Activity],
    period_label: str,
    total_amount: float,
    total_hours: float,
    first_page_size: int = FIRST_PAGE_SIZE,
    page_size: int = PAGE_SIZE,
) -> list[ReportPage]:
    """
    Lay activities out over pages; the first page is shorter to fit the summary.

    There is always at least one page so the summary header renders even
    for an empty report.
    """
    chunks = [activities[:first_page_size]] + chunked(activities[first_page_size:], page_size)
    total_pages = len(chunks)
    return [
        ReportPage(
            period_label=period_label,
            activities=chunk,
            total_amount=total_amount,
            total_hours=total_hours,
            total_count=len(activities),
            page_number=number,
            total_pages=total_pages,
        )
        for number, chunk in enumerate(chunks, start=1)
    ]
