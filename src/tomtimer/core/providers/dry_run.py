"""Dry-run provider: real reads, recorded writes."""

from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType

from tomtimer.core.contracts.exceptions import RemoteItemNotFoundError
from tomtimer.core.contracts.provider import Provider
from tomtimer.core.contracts.record import Collection, CreateRecordInput, RemoteRecord, UpdateRecordInput


@dataclass(frozen=True)
class DryRunOperation:
    """Deterministic dry-run operation log entry."""

    sequence: int
    name: str
    remote_identifier: str | None
    payload: dict[str, str]


class DryRunProvider(Provider):
    """Wraps a provider so a sync pass can be previewed without remote writes.

    Reads go through to *inner* (when given); ``create_record``,
    ``update_record`` and ``delete_record`` are only recorded. Records created
    during the run get ``dry-run-N`` identifiers and behave as existing for
    later updates and deletes within the same run.
    """

    def __init__(self, inner: Provider | None = None) -> None:
        self._inner = inner
        self._counter = 0
        self._created: set[str] = set()
        self._deleted: set[str] = set()
        self._operations: list[DryRunOperation] = []

    @property
    def operations(self) -> tuple[DryRunOperation, ...]:
        return tuple(self._operations)

    def _record_operation(self, name: str, remote_identifier: str | None, payload: dict[str, str] | None = None) -> None:
        self._operations.append(
            DryRunOperation(
                sequence=len(self._operations) + 1,
                name=name,
                remote_identifier=remote_identifier,
                payload=payload or {},
            )
        )

    async def __aenter__(self) -> DryRunProvider:
        if self._inner is not None:
            await self._inner.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._inner is not None:
            await self._inner.__aexit__(exc_type, exc_val, exc_tb)

    async def authenticate(self) -> None:
        if self._inner is not None:
            await self._inner.authenticate()

    async def list_collections(self) -> list[Collection]:
        if self._inner is None:
            return []
        return await self._inner.list_collections()

    async def fetch_records(self, collection_id: str) -> list[RemoteRecord]:
        if self._inner is None:
            return []
        return await self._inner.fetch_records(collection_id)

    async def get_record(self, remote_identifier: str) -> RemoteRecord:
        if self._inner is None or remote_identifier in self._created or remote_identifier in self._deleted:
            raise RemoteItemNotFoundError(
                f"Record not available in dry run: {remote_identifier}",
                remote_identifier=remote_identifier,
            )
        return await self._inner.get_record(remote_identifier)

    async def create_record(self, collection_id: str, input: CreateRecordInput) -> str:
        self._counter += 1
        remote_identifier = f"dry-run-{self._counter}"
        self._created.add(remote_identifier)
        self._record_operation(
            "create_record",
            remote_identifier,
            {"collection_id": collection_id, "title": input.title, "completed": str(input.completed).lower()},
        )
        return remote_identifier

    async def update_record(self, remote_identifier: str, input: UpdateRecordInput) -> None:
        self._record_operation(
            "update_record",
            remote_identifier,
            {"title": input.title, "completed": str(input.completed).lower()},
        )
        if remote_identifier in self._deleted:
            raise RemoteItemNotFoundError(
                f"Record deleted in dry run: {remote_identifier}",
                remote_identifier=remote_identifier,
            )

    async def delete_record(self, remote_identifier: str) -> None:
        self._record_operation("delete_record", remote_identifier)
        self._deleted.add(remote_identifier)
