"""
SQLAlchemy-backed document store.

All collections share one ``documents`` table keyed by (collection, id)
with the record body in a JSON column. ``created_at`` is mirrored into an
indexed column so whole-collection scans can be sorted by the database.
Filtering on body fields server-side is only attempted when the store is
configured with ``compound_queries``.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Mapping

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from promptbench.core.errors import NotFoundError

from ..db.base import Base
from ..models.document import Document
from .base import DocumentStore, StoreCapabilities, encode_value, parse_timestamp, to_record


logger = logging.getLogger(__name__)


def new_document_id() -> str:
    return uuid.uuid4().hex


def _created_at_column(body: Mapping[str, Any]) -> datetime | None:
    ts = parse_timestamp(body.get("created_at"))
    return ts.replace(tzinfo=None) if ts else None


class SqlDocumentStore(DocumentStore):
    def __init__(
        self,
        database_url: str,
        capabilities: StoreCapabilities | None = None,
        engine: AsyncEngine | None = None,
    ):
        self.database_url = database_url
        self.capabilities = capabilities or StoreCapabilities()
        self._engine = engine
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None

    async def initialize(self) -> None:
        if self._engine is None:
            self._engine = create_async_engine(self.database_url, future=True)
        self._sessionmaker = async_sessionmaker(self._engine, expire_on_commit=False)
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Document store ready at %s", self._engine.url.render_as_string(hide_password=True))

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._sessionmaker = None

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        if self._sessionmaker is None:
            raise RuntimeError("Document store is not initialized")
        async with self._sessionmaker() as session:
            yield session

    async def get(self, collection: str, doc_id: str) -> dict | None:
        async with self._session() as session:
            row = await session.get(Document, (collection, doc_id))
            return to_record(row.id, row.data) if row is not None else None

    async def add(self, collection: str, data: Mapping[str, Any]) -> dict:
        return await self.set(collection, new_document_id(), data)

    async def set(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> dict:
        body = encode_value(dict(data))
        body.pop("id", None)
        async with self._session() as session:
            row = await session.get(Document, (collection, doc_id))
            if row is None:
                row = Document(collection=collection, id=doc_id)
                session.add(row)
            row.data = body
            row.created_at = _created_at_column(body)
            await session.commit()
        return to_record(doc_id, body)

    async def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> dict:
        changes = encode_value(dict(fields))
        changes.pop("id", None)
        async with self._session() as session:
            row = await session.get(Document, (collection, doc_id))
            if row is None:
                raise NotFoundError(f"Document {collection}/{doc_id} not found")
            body = {**(row.data or {}), **changes}
            # Assign a new dict so the JSON column is flagged dirty.
            row.data = body
            if "created_at" in changes:
                row.created_at = _created_at_column(body)
            await session.commit()
        return to_record(doc_id, body)

    async def delete(self, collection: str, doc_id: str) -> None:
        async with self._session() as session:
            await session.execute(
                delete(Document).where(Document.collection == collection, Document.id == doc_id)
            )
            await session.commit()

    async def count(self, collection: str) -> int:
        async with self._session() as session:
            result = await session.execute(
                select(func.count()).select_from(Document).where(Document.collection == collection)
            )
            return int(result.scalar_one())

    async def _scan(
        self,
        collection: str,
        filters: Mapping[str, Any] | None,
        order_by: str | None,
        descending: bool,
    ) -> list[dict]:
        stmt = select(Document).where(Document.collection == collection)
        for field, value in (filters or {}).items():
            column = Document.data[field]
            if isinstance(value, bool):
                stmt = stmt.where(column.as_boolean() == value)
            elif isinstance(value, int):
                stmt = stmt.where(column.as_integer() == value)
            elif isinstance(value, float):
                stmt = stmt.where(column.as_float() == value)
            else:
                stmt = stmt.where(column.as_string() == str(value))
        if order_by:
            sort_col = Document.created_at if order_by == "created_at" else Document.data[order_by].as_string()
            stmt = stmt.order_by(sort_col.desc() if descending else sort_col.asc())
        async with self._session() as session:
            result = await session.execute(stmt)
            return [to_record(row.id, row.data) for row in result.scalars().all()]
