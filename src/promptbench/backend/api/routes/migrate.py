"""Legacy data migration routes.

``GET`` reports whether the source holds more clients than the store;
``POST`` copies every (or one named) collection, skipping ids already present.
"""

from typing import Optional

from litestar import Router, get, post
from litestar.exceptions import ValidationException

from ...core.state import AppState
from ...schemas import MigrateRequest
from ...services.migrator import CONVERTERS, Migrator, RelationalSource


def _migrator(bench: AppState) -> Migrator:
    return Migrator(bench.store, RelationalSource(bench.settings.migration_source_url))


@get()
async def migration_status(bench: AppState) -> dict:
    migrator = _migrator(bench)
    try:
        return await migrator.status()
    finally:
        await migrator.source.close()


@post(status_code=200)
async def run_migration(bench: AppState, data: Optional[MigrateRequest] = None) -> dict:
    collection_name = data.collection_name if data else None
    if collection_name and collection_name not in CONVERTERS:
        raise ValidationException(f"Unknown collection: {collection_name}")
    migrator = _migrator(bench)
    try:
        return await migrator.run(collection_name)
    finally:
        await migrator.source.close()


router = Router(path="/migrate", route_handlers=[migration_status, run_migration])
