"""Shared fixtures."""

from datetime import datetime

import pytest

from fingrowth.core.models import Activity, ActivityType, Client


@pytest.fixture
def acme():
    return Client(name="Acme Corp", email="contact@acme.com")


@pytest.fixture
def make_activity():
    """Factory for normalized activities."""
    def _make(
        start: datetime | None,
        end: datetime | None = None,
        hours: float = 1.0,
        rate: float = 100.0,
        activity_type: ActivityType = ActivityType.COACHING,
        invoiced: bool = False,
        client: Client | None = None,
        notes: str | None = None,
    ) -> Activity:
        activity = Activity(
            activity_type=activity_type,
            start_date=start,
            end_date=end if end is not None else start,
            hours=hours,
            cost_per_hour=rate,
            is_invoiced=invoiced,
            client=client,
            notes=notes,
        )
        return activity.normalize()
    return _make
