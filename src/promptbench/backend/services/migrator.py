"""
One-time migration from the legacy relational database into the document store.

Each legacy table maps onto the collection of the same name. Rows keep
their ids, are defaulted the same way new records are, and are only written
when no document with that id exists yet, so re-running is a no-op.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Mapping

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from promptbench.core.errors import ValidationError
from promptbench.core.records import DEFAULT_MESSAGE_COUNT, DEFAULT_SCENARIO_TYPE

from ..store import (
    CLIENTS,
    COLLECTIONS,
    FINAL_PROMPT_SUGGESTIONS,
    SCENARIOS,
    SIMULATION_RUNS,
    DocumentStore,
    utcnow,
)
from ..store.base import parse_timestamp


logger = logging.getLogger(__name__)


class RelationalSource:
    """Read-only access to the legacy tables."""

    def __init__(self, url: str | None = None, engine: AsyncEngine | None = None):
        if engine is None and not url:
            raise ValidationError("No migration source configured")
        self._engine = engine or create_async_engine(url, future=True)

    async def fetch_all(self, table: str) -> list[dict]:
        # Table names come from the fixed collection list, never from callers.
        if table not in COLLECTIONS:
            raise ValidationError(f"Unknown table: {table}")
        async with self._engine.connect() as conn:
            result = await conn.execute(text(f"SELECT * FROM {table} ORDER BY created_at DESC"))
            return [dict(row) for row in result.mappings().all()]

    async def count(self, table: str) -> int:
        if table not in COLLECTIONS:
            raise ValidationError(f"Unknown table: {table}")
        async with self._engine.connect() as conn:
            result = await conn.execute(text(f"SELECT COUNT(*) FROM {table}"))
            return int(result.scalar_one())

    async def close(self) -> None:
        await self._engine.dispose()


def _timestamp(value: Any):
    return parse_timestamp(value) or utcnow()


def _list(value: Any) -> list:
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return []
    return value if isinstance(value, list) else []


def _bool(value: Any) -> bool:
    if value is None:
        return True
    return bool(value)


def convert_client(row: Mapping[str, Any]) -> dict:
    return {
        "name": row.get("name") or "",
        "industry": row.get("industry") or "",
        "description": row.get("description") or "",
        "tone_of_voice": row.get("tone_of_voice") or "",
        "products_or_services": row.get("products_or_services") or "",
        "policies": row.get("policies") or "",
        "extra_context": row.get("extra_context") or "",
        "base_system_prompt": row.get("base_system_prompt") or "",
        "created_at": _timestamp(row.get("created_at")),
        "updated_at": _timestamp(row.get("updated_at")),
    }


def convert_scenario(row: Mapping[str, Any]) -> dict:
    return {
        "client_id": row.get("client_id") or "",
        "name": row.get("name") or "",
        "type": row.get("type") or DEFAULT_SCENARIO_TYPE,
        "description": row.get("description") or "",
        "customer_persona": row.get("customer_persona") or "",
        "goal": row.get("goal") or "",
        "message_count": row.get("message_count") or DEFAULT_MESSAGE_COUNT,
        "is_active": _bool(row.get("is_active")),
        "created_at": _timestamp(row.get("created_at")),
    }


def convert_simulation_run(row: Mapping[str, Any]) -> dict:
    return {
        "client_id": row.get("client_id") or "",
        "scenario_id": row.get("scenario_id") or "",
        "status": row.get("status") or "pending",
        "conversation": _list(row.get("conversation")),
        "score": row.get("score") or 0,
        "evaluation_summary": row.get("evaluation_summary") or "",
        "detailed_feedback": row.get("detailed_feedback") or "",
        "prompt_improvement_suggestions": _list(row.get("prompt_improvement_suggestions")),
        "created_at": _timestamp(row.get("created_at")),
    }


def convert_final_prompt(row: Mapping[str, Any]) -> dict:
    return {
        "client_id": row.get("client_id") or "",
        "source_simulation_run_ids": _list(row.get("source_simulation_run_ids")),
        "combined_prompt": row.get("combined_prompt") or "",
        "rationale": row.get("rationale") or "",
        "created_at": _timestamp(row.get("created_at")),
    }


CONVERTERS: dict[str, Callable[[Mapping[str, Any]], dict]] = {
    CLIENTS: convert_client,
    SCENARIOS: convert_scenario,
    SIMULATION_RUNS: convert_simulation_run,
    FINAL_PROMPT_SUGGESTIONS: convert_final_prompt,
}


class Migrator:
    def __init__(self, store: DocumentStore, source: RelationalSource):
        self.store = store
        self.source = source

    async def run(self, collection_name: str | None = None) -> dict:
        """
        Copy legacy rows into the document store.

        Args:
            collection_name: Restrict the migration to one collection; all when None

        Returns:
            ``{"success", "message", "results"}`` where results maps each
            collection to ``{"total", "migrated"}``
        """
        if collection_name and collection_name not in CONVERTERS:
            raise ValidationError(f"Unknown collection: {collection_name}")
        names = [collection_name] if collection_name else list(COLLECTIONS)

        results = {}
        for name in names:
            results[name] = await self._migrate_collection(name)

        total = sum(r["migrated"] for r in results.values())
        return {
            "success": True,
            "message": f"Migration complete! Migrated {total} documents.",
            "results": results,
        }

    async def _migrate_collection(self, name: str) -> dict:
        rows = await self.source.fetch_all(name)
        convert = CONVERTERS[name]
        migrated = 0
        for row in rows:
            doc_id = str(row["id"])
            if await self.store.get(name, doc_id) is not None:
                continue
            await self.store.set(name, doc_id, convert(row))
            migrated += 1
        logger.info("Migrated %d of %d %s", migrated, len(rows), name)
        return {"total": len(rows), "migrated": migrated}

    async def status(self) -> dict:
        source_clients = await self.source.count(CLIENTS)
        destination_clients = await self.store.count(CLIENTS)
        return {
            "status": {
                "source": {"clients": source_clients},
                "destination": {"clients": destination_clients},
            },
            "needsMigration": source_clients > destination_clients,
        }
