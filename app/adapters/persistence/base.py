"""Document gateway interfaces.

Services depend on this abstraction (not on a concrete driver) so the
in-memory store used for development and tests can be replaced by a real
document database without touching the service layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

Record = dict[str, Any]


@dataclass(frozen=True)
class WriteAck:
    """Acknowledgement returned by update/delete operations.

    Attributes:
        matched: Number of documents matched by the id filter.
        modified: Number of documents changed (updated or deleted).
    """

    matched: int
    modified: int


class AbstractDocumentGateway(ABC):
    """Interface for collection-oriented document stores.

    Every stored record carries a string ``id`` assigned on insert; the id is
    immutable afterwards. Implementations raise ``PersistenceAppError`` when
    the underlying store rejects an operation.
    """

    @abstractmethod
    async def find_all(self, collection: str) -> list[Record]:
        """Return every record of a collection in insertion order."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, collection: str, record_id: str) -> Record | None:
        """Return the record with the given id, or None when absent."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_field(self, collection: str, field: str, value: Any) -> Record | None:
        """Return the first record whose ``field`` equals ``value``, or None."""
        raise NotImplementedError

    @abstractmethod
    async def insert(self, collection: str, fields: Record) -> Record:
        """Store a new record and return it including its generated id."""
        raise NotImplementedError

    @abstractmethod
    async def update_fields(self, collection: str, record_id: str, fields: Record) -> WriteAck:
        """Set the given fields on an existing record (``$set`` semantics)."""
        raise NotImplementedError

    @abstractmethod
    async def delete_by_id(self, collection: str, record_id: str) -> WriteAck:
        """Remove the record with the given id."""
        raise NotImplementedError
