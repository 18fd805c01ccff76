from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from ..db.base import Base, JsonType


class Document(Base):
    """One record of a named collection, stored as a JSON body."""

    __tablename__ = "documents"

    collection: Mapped[str] = mapped_column(String(64), primary_key=True)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    data: Mapped[dict] = mapped_column(JsonType, default=dict)
    # Copy of the body's created_at (UTC), kept as a column so scans can sort server-side.
    created_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True, index=True)
