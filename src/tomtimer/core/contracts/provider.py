"""Remote provider adapter contract.

Every concrete provider (Todoist, Reminders bridges, ...) implements this
interface so the sync engine never depends on one remote system.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType

from tomtimer.core.contracts.record import Collection, CreateRecordInput, RemoteRecord, UpdateRecordInput


class Provider(ABC):
    @abstractmethod
    async def __aenter__(self) -> Provider: ...  # pragma: no cover

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...  # pragma: no cover

    @abstractmethod
    async def authenticate(self) -> None:
        """Verify access to the remote store.

        Raises:
            AuthenticationError: If access is denied.
        """

    @abstractmethod
    async def list_collections(self) -> list[Collection]: ...  # pragma: no cover

    @abstractmethod
    async def fetch_records(self, collection_id: str) -> list[RemoteRecord]: ...  # pragma: no cover

    @abstractmethod
    async def get_record(self, remote_identifier: str) -> RemoteRecord:
        """Fetch a single record.

        Raises:
            RemoteItemNotFoundError: If the identifier no longer resolves.
        """

    @abstractmethod
    async def create_record(self, collection_id: str, input: CreateRecordInput) -> str:
        """Create a record and return the identifier assigned by the remote store."""

    @abstractmethod
    async def update_record(self, remote_identifier: str, input: UpdateRecordInput) -> None:
        """Overwrite title, notes and completion of a record.

        Raises:
            RemoteItemNotFoundError: If the identifier no longer resolves.
        """

    @abstractmethod
    async def delete_record(self, remote_identifier: str) -> None:
        """Delete a record.

        Raises:
            RemoteItemNotFoundError: If the identifier no longer resolves.
        """
