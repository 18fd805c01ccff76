"""
Command line entry point.

    promptbench serve [--host HOST] [--port PORT] [--reload]
    promptbench migrate [--collection NAME] [--status]
"""

import argparse
import asyncio
import json
import logging

from promptbench.backend.core.config import get_settings
from promptbench.backend.services.migrator import Migrator, RelationalSource
from promptbench.backend.store import COLLECTIONS, SqlDocumentStore, StoreCapabilities


logger = logging.getLogger(__name__)


def serve(args):
    import uvicorn

    uvicorn.run(
        "promptbench.backend.main:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


async def _migrate(args) -> dict:
    settings = get_settings()
    store = SqlDocumentStore(
        settings.database_url,
        capabilities=StoreCapabilities(compound_queries=settings.store_compound_queries),
    )
    source = RelationalSource(args.source or settings.migration_source_url)
    await store.initialize()
    try:
        migrator = Migrator(store, source)
        if args.status:
            return await migrator.status()
        return await migrator.run(args.collection)
    finally:
        await source.close()
        await store.close()


def migrate(args):
    result = asyncio.run(_migrate(args))
    print(json.dumps(result, indent=2))


def main(argv=None):
    parser = argparse.ArgumentParser(prog="promptbench")
    sub = parser.add_subparsers(dest="command", required=True)

    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)
    p_serve.add_argument("--reload", action="store_true")
    p_serve.set_defaults(func=serve)

    p_migrate = sub.add_parser("migrate", help="Copy legacy relational data into the document store")
    p_migrate.add_argument("--collection", choices=COLLECTIONS, default=None)
    p_migrate.add_argument("--source", default=None, help="Source database URL (overrides MIGRATION_SOURCE_URL)")
    p_migrate.add_argument("--status", action="store_true", help="Only report source/destination client counts")
    p_migrate.set_defaults(func=migrate)

    args = parser.parse_args(argv)
    logging.basicConfig(level=get_settings().log_level)
    args.func(args)


if __name__ == "__main__":
    main()
