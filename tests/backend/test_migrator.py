"""
Tests for the one-time relational -> document store migration.
"""

import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine

from promptbench.backend.services.migrator import Migrator, RelationalSource
from promptbench.backend.store import CLIENTS, SCENARIOS, SIMULATION_RUNS
from promptbench.core.errors import ValidationError


SCHEMA = [
    """CREATE TABLE clients (
        id TEXT PRIMARY KEY, name TEXT, industry TEXT, description TEXT,
        tone_of_voice TEXT, products_or_services TEXT, policies TEXT,
        extra_context TEXT, base_system_prompt TEXT, created_at TEXT, updated_at TEXT)""",
    """CREATE TABLE scenarios (
        id TEXT PRIMARY KEY, client_id TEXT, name TEXT, type TEXT, description TEXT,
        customer_persona TEXT, goal TEXT, message_count INTEGER, is_active BOOLEAN, created_at TEXT)""",
    """CREATE TABLE simulation_runs (
        id TEXT PRIMARY KEY, client_id TEXT, scenario_id TEXT, status TEXT, conversation TEXT,
        score INTEGER, evaluation_summary TEXT, detailed_feedback TEXT,
        prompt_improvement_suggestions TEXT, created_at TEXT)""",
    """CREATE TABLE final_prompt_suggestions (
        id TEXT PRIMARY KEY, client_id TEXT, source_simulation_run_ids TEXT,
        combined_prompt TEXT, rationale TEXT, created_at TEXT)""",
]

ROWS = [
    "INSERT INTO clients (id, name, industry, created_at) VALUES ('c1', 'Acme', NULL, '2024-01-02T03:04:05Z')",
    "INSERT INTO clients (id, name, created_at) VALUES ('c2', 'Globex', 'not a date')",
    "INSERT INTO scenarios (id, client_id, name, message_count, is_active) VALUES ('s1', 'c1', 'Refund', NULL, NULL)",
    """INSERT INTO simulation_runs (id, client_id, scenario_id, status, conversation, score, prompt_improvement_suggestions)
       VALUES ('r1', 'c1', 's1', NULL, '[{"role": "customer", "content": "hi", "turn": 1}]', NULL, 'oops')""",
    """INSERT INTO final_prompt_suggestions (id, client_id, source_simulation_run_ids, combined_prompt)
       VALUES ('p1', 'c1', '["r1"]', 'Prompt')""",
]


@pytest_asyncio.fixture
async def source(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'legacy.db'}")
    async with engine.begin() as conn:
        for statement in SCHEMA + ROWS:
            await conn.execute(text(statement))
    source = RelationalSource(engine=engine)
    try:
        yield source
    finally:
        await source.close()


@pytest.mark.asyncio
async def test_migration_copies_and_defaults(store, source):
    result = await Migrator(store, source).run()

    assert result["success"] is True
    assert result["message"] == "Migration complete! Migrated 5 documents."
    assert result["results"]["clients"] == {"total": 2, "migrated": 2}
    assert result["results"]["final_prompt_suggestions"] == {"total": 1, "migrated": 1}

    client = await store.get(CLIENTS, "c1")
    assert client["industry"] == ""
    assert client["created_at"].startswith("2024-01-02T03:04:05")
    assert (await store.get(CLIENTS, "c2"))["created_at"]

    scenario = await store.get(SCENARIOS, "s1")
    assert scenario["message_count"] == 8
    assert scenario["is_active"] is True
    assert scenario["type"] == "general"

    run = await store.get(SIMULATION_RUNS, "r1")
    assert run["status"] == "pending"
    assert run["score"] == 0
    assert run["conversation"] == [{"role": "customer", "content": "hi", "turn": 1}]
    assert run["prompt_improvement_suggestions"] == []


@pytest.mark.asyncio
async def test_second_run_migrates_nothing(store, source):
    migrator = Migrator(store, source)
    await migrator.run()
    result = await migrator.run()
    assert all(r["migrated"] == 0 for r in result["results"].values())
    assert result["message"] == "Migration complete! Migrated 0 documents."


@pytest.mark.asyncio
async def test_existing_documents_are_not_overwritten(store, source):
    await store.set(CLIENTS, "c1", {"name": "Acme (edited)"})
    result = await Migrator(store, source).run("clients")
    assert list(result["results"]) == ["clients"]
    assert result["results"]["clients"] == {"total": 2, "migrated": 1}
    assert (await store.get(CLIENTS, "c1"))["name"] == "Acme (edited)"


@pytest.mark.asyncio
async def test_status_reports_client_counts(store, source):
    migrator = Migrator(store, source)
    before = await migrator.status()
    assert before == {
        "status": {"source": {"clients": 2}, "destination": {"clients": 0}},
        "needsMigration": True,
    }
    await migrator.run("clients")
    after = await migrator.status()
    assert after["needsMigration"] is False


@pytest.mark.asyncio
async def test_unknown_collection_rejected(store, source):
    with pytest.raises(ValidationError):
        await Migrator(store, source).run("users")


def test_source_requires_url():
    with pytest.raises(ValidationError, match="No migration source"):
        RelationalSource(None)
