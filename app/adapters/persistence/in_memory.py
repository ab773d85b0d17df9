"""In-memory document store.

Notes:
- Per-process only: data is lost on restart and not shared across workers.
- Thread-safe: uses a lock around shared state; each call is atomic on its
  own, sequences of calls are not.
"""

from __future__ import annotations

import copy
import logging
import threading
import uuid
from typing import Any, Callable, Mapping

from app.adapters.persistence.base import AbstractDocumentGateway, Record, WriteAck
from app.core.errors import PersistenceAppError

logger = logging.getLogger(__name__)


def _new_object_id() -> str:
    # 24 hex chars, same shape as a document database ObjectId
    return uuid.uuid4().hex[:24]


class InMemoryDocumentGateway(AbstractDocumentGateway):
    """Document gateway keeping collections in process memory.

    Records are stored as deep copies and returned as deep copies, so callers
    can never mutate stored state by accident. Unique field indexes can be
    declared per collection; an insert or update that would duplicate an
    indexed value raises ``PersistenceAppError``, like a duplicate-key error
    from a real document database.
    """

    def __init__(
        self,
        *,
        unique_fields: Mapping[str, tuple[str, ...]] | None = None,
        id_factory: Callable[[], str] = _new_object_id,
    ) -> None:
        """Initialize the store.

        Args:
            unique_fields: Collection name → fields that must be unique.
            id_factory: Generator for new record ids.
        """
        self._unique_fields = {name: tuple(fields) for name, fields in (unique_fields or {}).items()}
        self._id_factory = id_factory
        self._lock = threading.RLock()
        self._collections: dict[str, dict[str, Record]] = {}

    def _collection(self, name: str) -> dict[str, Record]:
        return self._collections.setdefault(name, {})

    def _check_unique_locked(
        self,
        collection: str,
        fields: Mapping[str, Any],
        *,
        exclude_id: str | None = None,
    ) -> None:
        for field in self._unique_fields.get(collection, ()):
            if field not in fields:
                continue
            for record_id, record in self._collection(collection).items():
                if record_id != exclude_id and record.get(field) == fields[field]:
                    raise PersistenceAppError(
                        code="duplicate_key",
                        message=f"Duplicate value for unique field '{field}'",
                        details={"collection": collection, "field": field},
                    )

    async def find_all(self, collection: str) -> list[Record]:
        with self._lock:
            return [copy.deepcopy(record) for record in self._collection(collection).values()]

    async def find_by_id(self, collection: str, record_id: str) -> Record | None:
        with self._lock:
            record = self._collection(collection).get(record_id)
            return copy.deepcopy(record) if record is not None else None

    async def find_by_field(self, collection: str, field: str, value: Any) -> Record | None:
        with self._lock:
            for record in self._collection(collection).values():
                if record.get(field) == value:
                    return copy.deepcopy(record)
            return None

    async def insert(self, collection: str, fields: Record) -> Record:
        if "id" in fields:
            raise PersistenceAppError(
                code="id_not_allowed",
                message="Record ids are generated by the store",
                details={"collection": collection},
            )

        with self._lock:
            self._check_unique_locked(collection, fields)
            record_id = self._id_factory()
            record = {"id": record_id, **copy.deepcopy(fields)}
            self._collection(collection)[record_id] = record

            logger.debug(
                "gateway.insert",
                extra={"collection": collection, "size": len(self._collection(collection))},
            )
            return copy.deepcopy(record)

    async def update_fields(self, collection: str, record_id: str, fields: Record) -> WriteAck:
        changes = {key: value for key, value in fields.items() if key != "id"}

        with self._lock:
            record = self._collection(collection).get(record_id)
            if record is None:
                return WriteAck(matched=0, modified=0)

            self._check_unique_locked(collection, changes, exclude_id=record_id)
            modified = any(record.get(key) != value for key, value in changes.items())
            record.update(copy.deepcopy(changes))

            logger.debug(
                "gateway.update",
                extra={"collection": collection, "modified": modified},
            )
            return WriteAck(matched=1, modified=int(modified))

    async def delete_by_id(self, collection: str, record_id: str) -> WriteAck:
        with self._lock:
            removed = self._collection(collection).pop(record_id, None)

            logger.debug(
                "gateway.delete",
                extra={"collection": collection, "deleted": removed is not None},
            )
            deleted = int(removed is not None)
            return WriteAck(matched=deleted, modified=deleted)

    def clear(self) -> None:
        """Drop every collection."""

        with self._lock:
            self._collections.clear()
