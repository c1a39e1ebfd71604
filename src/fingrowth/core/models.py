"""Domain records - activities, clients and their enumerations."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


def new_id() -> str:
    return uuid.uuid4().hex


class ActivityType(Enum):
    """Kind of billable session. Values are the stored raw strings."""

    COACHING = "Coaching"
    WORKSHOP = "Workshop"
    TEAM_COACHING = "Team Coaching"
    OTHERS = "Altele"

    @classmethod
    def parse(cls, raw: str | None) -> "ActivityType":
        """Parse a stored value, falling back to OTHERS for anything unknown."""
        if isinstance(raw, ActivityType):
            return raw
        if not isinstance(raw, str):
            return cls.OTHERS
        for member in cls:
            if raw == member.value or raw.strip().lower() == member.name.lower():
                return member
        return cls.OTHERS

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def color(self) -> str:
        return _TYPE_COLORS[self]


_TYPE_COLORS = {
    ActivityType.COACHING: "blue",
    ActivityType.WORKSHOP: "purple",
    ActivityType.TEAM_COACHING: "green",
    ActivityType.OTHERS: "orange",
}


class InvoiceFilter(Enum):
    """Invoice status filter for reports."""

    ALL = "all"
    INVOICED = "invoiced"
    NOT_INVOICED = "not-invoiced"

    def matches(self, is_invoiced: bool) -> bool:
        if self is InvoiceFilter.INVOICED:
            return is_invoiced
        if self is InvoiceFilter.NOT_INVOICED:
            return not is_invoiced
        return True


@dataclass
class Client:
    """A billing counterparty."""

    name: str
    email: str | None = None
    phone: str | None = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class Activity:
    """A billable session record."""

    activity_type: ActivityType = ActivityType.COACHING
    start_date: datetime | None = None
    end_date: datetime | None = None
    hours: float = 0.0
    cost_per_hour: float = 0.0
    client: Client | None = None
    is_invoiced: bool = False
    notes: str | None = None
    total_amount: float = 0.0
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def client_name(self) -> str | None:
        return self.client.name if self.client else None

    def normalize(self) -> "Activity":
        """Apply save-time rules in place: clamp end date, recompute total."""
        if self.hours < 0:
            raise ValueError("hours must be non-negative")
        if self.cost_per_hour < 0:
            raise ValueError("cost per hour must be non-negative")
        if self.start_date and self.end_date and self.end_date < self.start_date:
            self.end_date = self.start_date
        self.total_amount = self.hours * self.cost_per_hour
        return self


def normalize_client_name(name: str | None) -> str:
    """Trim a client name, rejecting empty ones."""
    trimmed = (name or "").strip()
    if not trimmed:
        raise ValueError("client name is required")
    return trimmed
