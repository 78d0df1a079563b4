"""In-process document store for tests and local development."""
from __future__ import annotations

import asyncio
import copy
from collections.abc import Mapping
from typing import Any

from caseflow.store.base import (
    Document,
    DocumentExists,
    DocumentNotFound,
    DocumentStore,
    PreconditionFailed,
    WriteOp,
    encode_value,
    matches,
)

_DELETED = object()


class MemoryDocumentStore(DocumentStore):
    """Dict-backed store.

    Every call suspends once (``latency`` seconds, 0 by default) before it
    touches data, so concurrent coroutines interleave the way they would
    against a remote store. apply() validates and writes with no suspension
    in between, which is what makes a batch atomic on a single event loop.
    """

    def __init__(self, *, latency: float = 0.0) -> None:
        self._latency = latency
        self._collections: dict[str, dict[str, Document]] = {}

    async def _pause(self) -> None:
        await asyncio.sleep(self._latency)

    def _lookup(self, collection: str, doc_id: str) -> Document | None:
        return self._collections.get(collection, {}).get(doc_id)

    async def get(self, collection: str, doc_id: str) -> Document | None:
        await self._pause()
        doc = self._lookup(collection, doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    async def query(
        self,
        collection: str,
        *,
        where: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Document]:
        await self._pause()
        expected = encode_value(where or {})
        docs = [
            doc
            for doc in self._collections.get(collection, {}).values()
            if matches(doc.data, expected)
        ]
        if order_by is not None:
            docs.sort(key=lambda d: str(d.data.get(order_by) or ""), reverse=descending)
        if limit is not None:
            docs = docs[:limit]
        return copy.deepcopy(docs)

    async def apply(self, ops: list[WriteOp]) -> list[Document | None]:
        await self._pause()
        # Stage every write against a view of the current state; nothing
        # reaches self._collections until all operations have validated.
        staged: dict[tuple[str, str], Any] = {}
        results: list[Document | None] = []

        def current(collection: str, doc_id: str) -> Document | None:
            key = (collection, doc_id)
            if key in staged:
                value = staged[key]
                return None if value is _DELETED else value
            return self._lookup(collection, doc_id)

        for op in ops:
            key = (op.collection, op.doc_id)
            existing = current(op.collection, op.doc_id)
            if op.kind == "create":
                if existing is not None:
                    raise DocumentExists(op.collection, op.doc_id)
                doc = Document(op.doc_id, copy.deepcopy(op.data), 1)
                staged[key] = doc
                results.append(doc)
            elif op.kind == "update":
                if existing is None:
                    raise DocumentNotFound(op.collection, op.doc_id)
                if op.expect is not None and not matches(existing.data, op.expect):
                    raise PreconditionFailed(op.collection, op.doc_id, op.expect)
                doc = Document(
                    op.doc_id,
                    {**existing.data, **copy.deepcopy(op.data)},
                    existing.version + 1,
                )
                staged[key] = doc
                results.append(doc)
            else:
                staged[key] = _DELETED
                results.append(None)

        for (collection, doc_id), value in staged.items():
            docs = self._collections.setdefault(collection, {})
            if value is _DELETED:
                docs.pop(doc_id, None)
            else:
                docs[doc_id] = value
        return copy.deepcopy(results)
