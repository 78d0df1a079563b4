"""
Document store: the collaborator interface every workflow writes through.

Semantics:
  - Collections hold JSON-like documents keyed by opaque string ids.
  - A single create/update/delete is atomic.
  - Multi-document atomicity exists only through an explicit WriteBatch:
    every operation in the batch is validated first, then all are applied,
    or none is.
  - update() may carry an ``expect`` mapping (optimistic precondition). The
    write is refused with PreconditionFailed when any expected field differs
    from the stored value at commit time.
  - delete() is idempotent: deleting a missing id is not an error.

Timestamps are stored as fixed-width UTC ISO-8601 strings (microsecond
precision) so that lexical order equals chronological order for both
backends.
"""
from __future__ import annotations

import enum
import uuid
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal


# ── Errors ────────────────────────────────────────────────────────────────────

class StoreError(Exception):
    """Base class for document store failures."""


class DocumentNotFound(StoreError):
    def __init__(self, collection: str, doc_id: str) -> None:
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"{collection}/{doc_id} does not exist")


class DocumentExists(StoreError):
    def __init__(self, collection: str, doc_id: str) -> None:
        self.collection = collection
        self.doc_id = doc_id
        super().__init__(f"{collection}/{doc_id} already exists")


class PreconditionFailed(StoreError):
    """The stored document no longer matches the expected field values."""

    def __init__(self, collection: str, doc_id: str, expected: Mapping[str, Any]) -> None:
        self.collection = collection
        self.doc_id = doc_id
        self.expected = dict(expected)
        super().__init__(f"{collection}/{doc_id} does not match {self.expected}")


# ── Encoding ──────────────────────────────────────────────────────────────────

def encode_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def encode_value(value: Any) -> Any:
    """Convert a Python value to the JSON-compatible form kept in the store."""
    if isinstance(value, datetime):
        return encode_timestamp(value)
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, Mapping):
        return {str(k): encode_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [encode_value(v) for v in value]
    return value


def new_document_id() -> str:
    return uuid.uuid4().hex


# ── Values ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Document:
    id: str
    data: dict[str, Any]
    version: int = 1

    def as_record(self) -> dict[str, Any]:
        """Document fields with the id folded in, ready for model validation."""
        return {**self.data, "id": self.id}


@dataclass(frozen=True)
class WriteOp:
    kind: Literal["create", "update", "delete"]
    collection: str
    doc_id: str
    data: dict[str, Any] = field(default_factory=dict)
    expect: dict[str, Any] | None = None


def matches(data: Mapping[str, Any], expected: Mapping[str, Any]) -> bool:
    return all(data.get(key) == value for key, value in expected.items())


# ── Batch ─────────────────────────────────────────────────────────────────────

class WriteBatch:
    """Collects writes and commits them as one all-or-nothing unit."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self._ops: list[WriteOp] = []
        self._committed = False

    def __len__(self) -> int:
        return len(self._ops)

    def create(
        self, collection: str, data: Mapping[str, Any], doc_id: str | None = None
    ) -> str:
        doc_id = doc_id or new_document_id()
        self._ops.append(WriteOp("create", collection, doc_id, encode_value(data)))
        return doc_id

    def update(
        self,
        collection: str,
        doc_id: str,
        changes: Mapping[str, Any],
        *,
        expect: Mapping[str, Any] | None = None,
    ) -> None:
        self._ops.append(
            WriteOp(
                "update",
                collection,
                doc_id,
                encode_value(changes),
                encode_value(expect) if expect is not None else None,
            )
        )

    def delete(self, collection: str, doc_id: str) -> None:
        self._ops.append(WriteOp("delete", collection, doc_id))

    async def commit(self) -> list[Document | None]:
        """Apply every queued write atomically.

        Returns one entry per operation, in order: the resulting document for
        create/update, None for delete.
        """
        if self._committed:
            raise StoreError("Write batch has already been committed")
        self._committed = True
        if not self._ops:
            return []
        return await self._store.apply(self._ops)


# ── Store interface ───────────────────────────────────────────────────────────

class DocumentStore(ABC):
    """Abstract document store. Backends implement get/query/apply."""

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Document | None:
        """Read one document, or None if it does not exist."""

    @abstractmethod
    async def query(
        self,
        collection: str,
        *,
        where: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Document]:
        """Equality-filtered, optionally ordered read over one collection."""

    @abstractmethod
    async def apply(self, ops: list[WriteOp]) -> list[Document | None]:
        """Validate and apply ``ops`` atomically (see WriteBatch.commit)."""

    async def startup(self) -> None:
        """Prepare backing resources. No-op by default."""

    async def close(self) -> None:
        """Release backing resources. No-op by default."""

    def batch(self) -> WriteBatch:
        return WriteBatch(self)

    # Single-document conveniences, each a one-operation batch.

    async def create(
        self, collection: str, data: Mapping[str, Any], doc_id: str | None = None
    ) -> Document:
        batch = self.batch()
        doc_id = batch.create(collection, data, doc_id)
        (doc,) = await batch.commit()
        return _written(doc, collection, doc_id)

    async def update(
        self,
        collection: str,
        doc_id: str,
        changes: Mapping[str, Any],
        *,
        expect: Mapping[str, Any] | None = None,
    ) -> Document:
        batch = self.batch()
        batch.update(collection, doc_id, changes, expect=expect)
        (doc,) = await batch.commit()
        return _written(doc, collection, doc_id)

    async def delete(self, collection: str, doc_id: str) -> None:
        batch = self.batch()
        batch.delete(collection, doc_id)
        await batch.commit()


def _written(doc: Document | None, collection: str, doc_id: str) -> Document:
    if doc is None:
        raise StoreError(f"Backend returned no document for write to {collection}/{doc_id}")
    return doc
