"""Adapters - I/O implementations of ports."""

from .json_store import JsonFileStore, StoreError
from .google_calendar import GoogleCalendarAdapter
from .composite_calendar import CompositeCalendarAdapter
from .pdf_report import PdfReportRenderer

__all__ = [
    "JsonFileStore",
    "StoreError",
    "GoogleCalendarAdapter",
    "CompositeCalendarAdapter",
    "PdfReportRenderer",
]
