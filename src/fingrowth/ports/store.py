"""Object store interface."""

from typing import Protocol

from fingrowth.core.models import Activity, Client


class ObjectStore(Protocol):
    """Interface for persisting clients and activities."""

    def list_activities(self, ascending: bool = False) -> list[Activity]:
        """All activities ordered by start date (newest first by default)."""
        ...

    def list_clients(self) -> list[Client]:
        """All clients ordered by name."""
        ...

    def get_activity(self, activity_id: str) -> Activity | None:
        ...

    def get_client(self, client_id: str) -> Client | None:
        ...

    def activities_for_client(self, client_id: str) -> list[Activity]:
        """Activities linked to a client."""
        ...

    def save(self, record: Activity | Client) -> None:
        """Insert or update a record."""
        ...

    def delete(self, record: Activity | Client) -> None:
        """Remove a record. Deleting a client detaches its activities."""
        ...
