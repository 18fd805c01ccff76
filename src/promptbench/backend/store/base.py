"""
Document store contract.

Records live in named collections as JSON bodies keyed by a string id. Any
document database offering get / add / set / update / delete / query /
count can back it.

Timestamps are encoded to ISO-8601 strings on write, and every read returns
``{"id": ..., **body}`` with timestamp fields as ISO-8601 strings whatever
the backend's native representation.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Iterable, Mapping


logger = logging.getLogger(__name__)

CLIENTS = "clients"
SCENARIOS = "scenarios"
SIMULATION_RUNS = "simulation_runs"
FINAL_PROMPT_SUGGESTIONS = "final_prompt_suggestions"

COLLECTIONS = (CLIENTS, SCENARIOS, SIMULATION_RUNS, FINAL_PROMPT_SUGGESTIONS)

TIMESTAMP_FIELDS = ("created_at", "updated_at")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: Any) -> datetime | None:
    """Decode a stored timestamp (datetime or ISO string) to an aware UTC datetime."""
    if isinstance(value, datetime):
        return to_utc(value)
    if isinstance(value, str) and value:
        try:
            return to_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
        except ValueError:
            return None
    return None


def encode_value(value: Any) -> Any:
    """Make a value JSON-storable; datetimes become UTC ISO-8601 strings."""
    if isinstance(value, datetime):
        return to_utc(value).isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {str(k): encode_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [encode_value(v) for v in value]
    return value


def to_record(doc_id: str, body: Mapping[str, Any]) -> dict:
    record = {"id": doc_id, **body}
    for field in TIMESTAMP_FIELDS:
        value = record.get(field)
        if isinstance(value, datetime):
            record[field] = to_utc(value).isoformat()
    return record


def matches(record: Mapping[str, Any], filters: Mapping[str, Any]) -> bool:
    return all(record.get(field) == value for field, value in filters.items())


def sort_records(records: Iterable[dict], order_by: str, descending: bool = True) -> list[dict]:
    """Sort records client-side; missing or unparsable timestamps sort as the epoch."""
    if order_by in TIMESTAMP_FIELDS:
        def key(record):
            return parse_timestamp(record.get(order_by)) or _EPOCH
    else:
        def key(record):
            value = record.get(order_by)
            return (value is not None, value if value is not None else "")
    return sorted(records, key=key, reverse=descending)


@dataclass(frozen=True)
class StoreCapabilities:
    """What a backend can answer server-side.

    sorted_scan: order a whole collection by a field.
    compound_queries: filter on body fields and order in the same query.
    """

    sorted_scan: bool = True
    compound_queries: bool = False


class DocumentStore(ABC):
    """Abstract document store with an explicit initialize/close lifecycle."""

    capabilities: StoreCapabilities = StoreCapabilities()

    async def initialize(self) -> None:
        """Open connections and prepare storage."""

    async def close(self) -> None:
        """Release connections."""

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> dict | None:
        """Return the record or None when absent."""

    @abstractmethod
    async def add(self, collection: str, data: Mapping[str, Any]) -> dict:
        """Insert with a store-assigned id and return the stored record."""

    @abstractmethod
    async def set(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> dict:
        """Create or fully overwrite the record with the given id."""

    @abstractmethod
    async def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> dict:
        """Overwrite the named fields of an existing record.

        Raises:
            NotFoundError: If the record does not exist
        """

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        """Delete the record; deleting an absent record is not an error."""

    @abstractmethod
    async def count(self, collection: str) -> int:
        """Number of records in the collection."""

    @abstractmethod
    async def _scan(
        self,
        collection: str,
        filters: Mapping[str, Any] | None,
        order_by: str | None,
        descending: bool,
    ) -> list[dict]:
        """Backend query. Only called with combinations the capabilities allow."""

    async def query(
        self,
        collection: str,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = "created_at",
        descending: bool = True,
    ) -> list[dict]:
        """
        Query a collection with equality filters and an optional sort.

        Combinations the backend cannot serve are answered by scanning the
        unfiltered collection and filtering/sorting in memory.

        Args:
            collection: Collection name
            filters: Field -> value equality filters; None values are ignored
            order_by: Field to sort on, or None for backend order
            descending: Sort direction

        Returns:
            List of records
        """
        filters = {k: v for k, v in (filters or {}).items() if v is not None}
        caps = self.capabilities

        if filters and not caps.compound_queries:
            records = await self._scan(collection, None, None, descending)
            records = [r for r in records if matches(r, filters)]
            return sort_records(records, order_by, descending) if order_by else records

        if order_by and not caps.sorted_scan:
            records = await self._scan(collection, filters or None, None, descending)
            return sort_records(records, order_by, descending)

        return await self._scan(collection, filters or None, order_by, descending)
