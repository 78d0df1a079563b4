"""
SQL-backed document store (SQLAlchemy 2.0 async).

Every collection lives in the single ``documents`` table, keyed by
(collection, doc_id). Document bodies are JSON (JSONB on PostgreSQL).

A WriteBatch commits inside one database transaction. Updates read the row
FOR UPDATE, check the ``expect`` precondition, then write guarded by the row
version; a version mismatch aborts the transaction with PreconditionFailed,
so a batch is either fully applied or rolled back.
"""
from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy.orm import Mapped, mapped_column

from caseflow.database import Base, create_session_factory
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


class DocumentRow(Base):
    __tablename__ = "documents"

    collection: Mapped[str] = mapped_column(sa.String(64), primary_key=True)
    doc_id: Mapped[str] = mapped_column(sa.String(64), primary_key=True)
    data: Mapped[dict] = mapped_column(
        sa.JSON().with_variant(JSONB(), "postgresql"), nullable=False
    )
    version: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (sa.Index("ix_documents_collection", "collection"),)


def _field_equals(field: str, value: Any) -> sa.ColumnElement[bool]:
    element = DocumentRow.data[field]
    if value is None:
        return element.as_string().is_(None)
    if isinstance(value, bool):
        return element.as_boolean() == value
    if isinstance(value, int):
        return element.as_integer() == value
    if isinstance(value, float):
        return element.as_float() == value
    return element.as_string() == str(value)


class SqlDocumentStore(DocumentStore):
    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._session_factory = create_session_factory(engine)

    async def startup(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        await self._engine.dispose()

    async def get(self, collection: str, doc_id: str) -> Document | None:
        async with self._session_factory() as session:
            result = await session.execute(
                sa.select(DocumentRow.data, DocumentRow.version).where(
                    DocumentRow.collection == collection,
                    DocumentRow.doc_id == doc_id,
                )
            )
            row = result.one_or_none()
        if row is None:
            return None
        return Document(doc_id, dict(row.data), row.version)

    async def query(
        self,
        collection: str,
        *,
        where: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Document]:
        stmt = sa.select(DocumentRow.doc_id, DocumentRow.data, DocumentRow.version).where(
            DocumentRow.collection == collection
        )
        for field, value in encode_value(where or {}).items():
            stmt = stmt.where(_field_equals(field, value))
        if order_by is not None:
            key = DocumentRow.data[order_by].as_string()
            stmt = stmt.order_by(key.desc() if descending else key.asc())
        if limit is not None:
            stmt = stmt.limit(limit)
        async with self._session_factory() as session:
            rows = (await session.execute(stmt)).all()
        return [Document(r.doc_id, dict(r.data), r.version) for r in rows]

    async def apply(self, ops: list[WriteOp]) -> list[Document | None]:
        async with self._session_factory() as session:
            async with session.begin():
                return [await self._apply_one(session, op) for op in ops]

    async def _apply_one(self, session: AsyncSession, op: WriteOp) -> Document | None:
        now = datetime.now(timezone.utc)
        pk = (DocumentRow.collection == op.collection, DocumentRow.doc_id == op.doc_id)

        if op.kind == "delete":
            await session.execute(sa.delete(DocumentRow).where(*pk))
            return None

        current = (
            await session.execute(
                sa.select(DocumentRow.data, DocumentRow.version).where(*pk).with_for_update()
            )
        ).one_or_none()

        if op.kind == "create":
            if current is not None:
                raise DocumentExists(op.collection, op.doc_id)
            await session.execute(
                sa.insert(DocumentRow).values(
                    collection=op.collection,
                    doc_id=op.doc_id,
                    data=op.data,
                    version=1,
                    created_at=now,
                    updated_at=now,
                )
            )
            return Document(op.doc_id, dict(op.data), 1)

        if current is None:
            raise DocumentNotFound(op.collection, op.doc_id)
        if op.expect is not None and not matches(current.data, op.expect):
            raise PreconditionFailed(op.collection, op.doc_id, op.expect)
        merged = {**current.data, **op.data}
        result = await session.execute(
            sa.update(DocumentRow)
            .where(*pk, DocumentRow.version == current.version)
            .values(data=merged, version=current.version + 1, updated_at=now)
        )
        if result.rowcount == 0:
            raise PreconditionFailed(op.collection, op.doc_id, op.expect or {})
        return Document(op.doc_id, merged, current.version + 1)
