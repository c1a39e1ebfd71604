"""File-based object store adapter."""

import json
import logging
from datetime import datetime
from pathlib import Path

from fingrowth.core.models import Activity, ActivityType, Client

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class StoreError(Exception):
    """Raised when the store file cannot be read or written."""


def _dt_to_str(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _dt_from_str(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        logger.debug(f"Ignoring malformed date: {value!r}")
        return None


class JsonFileStore:
    """
    JSON file object store.

    Implements ObjectStore protocol. Everything lives in one file that is
    rewritten after each change. Activities are stored with the id of their
    client and re-linked to the Client objects on load.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()
        self._clients: dict[str, Client] = {}
        self._activities: dict[str, Activity] = {}
        # Last content known to be on disk, restored when a write fails
        self._written: dict = {}
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Failed to read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StoreError(f"Failed to read {self.path}: expected a JSON object")
        self._restore(data)
        self._written = data

    def _restore(self, data: dict) -> None:
        self._clients = {}
        self._activities = {}

        for item in data.get("clients", []):
            try:
                client = self._client_from_dict(item)
            except (KeyError, TypeError, AttributeError) as e:
                logger.debug(f"Skipping malformed client: {e}")
                continue
            self._clients[client.id] = client

        for item in data.get("activities", []):
            try:
                activity = self._activity_from_dict(item)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.debug(f"Skipping malformed activity: {e}")
                continue
            self._activities[activity.id] = activity

    def _flush(self) -> None:
        """
        Write every record to the file.

        On failure the store is rebuilt from the last written content, so the
        failed change is not persisted by a later write. Records held by the
        caller keep their edits for a retry.
        """
        data = {
            "version": SCHEMA_VERSION,
            "clients": [self._client_to_dict(c) for c in self._clients.values()],
            "activities": [self._activity_to_dict(a) for a in self._activities.values()],
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(data, indent=2, ensure_ascii=False))
            tmp_path.replace(self.path)
        except OSError as e:
            self._restore(self._written)
            raise StoreError(f"Failed to write {self.path}: {e}") from e
        self._written = data

    # ---- Serialization ----

    @staticmethod
    def _client_to_dict(client: Client) -> dict:
        return {
            "id": client.id,
            "name": client.name,
            "email": client.email,
            "phone": client.phone,
            "created_at": _dt_to_str(client.created_at),
        }

    @staticmethod
    def _client_from_dict(item: dict) -> Client:
        return Client(
            id=item["id"],
            name=item["name"],
            email=item.get("email"),
            phone=item.get("phone"),
            created_at=_dt_from_str(item.get("created_at")) or datetime.now(),
        )

    @staticmethod
    def _activity_to_dict(activity: Activity) -> dict:
        return {
            "id": activity.id,
            "activity_type": ActivityType.parse(activity.activity_type).value,
            "client_id": activity.client.id if activity.client else None,
            "start_date": _dt_to_str(activity.start_date),
            "end_date": _dt_to_str(activity.end_date),
            "hours": activity.hours,
            "cost_per_hour": activity.cost_per_hour,
            "total_amount": activity.total_amount,
            "is_invoiced": activity.is_invoiced,
            "notes": activity.notes,
            "created_at": _dt_to_str(activity.created_at),
        }

    def _activity_from_dict(self, item: dict) -> Activity:
        client_id = item.get("client_id")
        return Activity(
            id=item["id"],
            activity_type=ActivityType.parse(item.get("activity_type")),
            client=self._clients.get(client_id) if client_id else None,
            start_date=_dt_from_str(item.get("start_date")),
            end_date=_dt_from_str(item.get("end_date")),
            hours=float(item.get("hours", 0)),
            cost_per_hour=float(item.get("cost_per_hour", 0)),
            total_amount=float(item.get("total_amount", 0)),
            is_invoiced=bool(item.get("is_invoiced", False)),
            notes=item.get("notes"),
            created_at=_dt_from_str(item.get("created_at")) or datetime.now(),
        )

    # ---- Queries ----

    def list_activities(self, ascending: bool = False) -> list[Activity]:
        """All activities by start date; undated ones sort last."""
        dated = [a for a in self._activities.values() if a.start_date is not None]
        undated = [a for a in self._activities.values() if a.start_date is None]
        return sorted(dated, key=lambda a: a.start_date, reverse=not ascending) + undated

    def list_clients(self) -> list[Client]:
        return sorted(self._clients.values(), key=lambda c: c.name.casefold())

    def get_activity(self, activity_id: str) -> Activity | None:
        return self._activities.get(activity_id)

    def get_client(self, client_id: str) -> Client | None:
        return self._clients.get(client_id)

    def find_client(self, name_or_id: str) -> Client | None:
        """Look a client up by id, then by case-insensitive name."""
        if name_or_id in self._clients:
            return self._clients[name_or_id]
        wanted = name_or_id.strip().casefold()
        for client in self._clients.values():
            if client.name.casefold() == wanted:
                return client
        return None

    def activities_for_client(self, client_id: str) -> list[Activity]:
        return [
            a for a in self.list_activities()
            if a.client is not None and a.client.id == client_id
        ]

    # ---- Writes ----

    def save(self, record: Activity | Client) -> None:
        """Insert or update a record and write the file."""
        if isinstance(record, Activity):
            record.normalize()
            if record.client is not None and record.client.id not in self._clients:
                self._clients[record.client.id] = record.client
            self._activities[record.id] = record
        elif isinstance(record, Client):
            self._clients[record.id] = record
        else:
            raise TypeError(f"Cannot store {type(record).__name__}")
        self._flush()

    def delete(self, record: Activity | Client) -> None:
        if isinstance(record, Activity):
            self._activities.pop(record.id, None)
        elif isinstance(record, Client):
            self._clients.pop(record.id, None)
            for activity in self._activities.values():
                if activity.client is not None and activity.client.id == record.id:
                    activity.client = None
        else:
            raise TypeError(f"Cannot delete {type(record).__name__}")
        self._flush()
