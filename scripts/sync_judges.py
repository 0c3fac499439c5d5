"""
Mirror CourtListener judges into the local database.

Usage:
    python -m scripts.sync_judges sync [--limit 100] [--max-pages N]
    python -m scripts.sync_judges search "Judge Name"
"""

import argparse
import asyncio
import logging
import sys

from judgedex.config import settings
from judgedex.core.cache import InMemoryResponseCache
from judgedex.core.logging_config import configure_logging
from judgedex.courtlistener.client import CourtListenerClient
from judgedex.database import engine, session_scope
from judgedex.judges.sync import JudgeSyncService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sync CourtListener judges into the database")
    commands = parser.add_subparsers(dest="command", required=True)

    sync = commands.add_parser("sync", help="page through every CourtListener person")
    sync.add_argument("--limit", type=int, default=100)
    sync.add_argument("--max-pages", type=int, default=None)

    search = commands.add_parser("search", help="sync the first match for a name")
    search.add_argument("term")
    return parser


async def run(args: argparse.Namespace) -> int:
    if not settings.COURTLISTENER_TOKEN:
        logger.error("COURTLISTENER_TOKEN environment variable is required")
        return 1

    client = CourtListenerClient(
        base_url=settings.COURTLISTENER_BASE_URL,
        token=settings.COURTLISTENER_TOKEN,
        cache=InMemoryResponseCache(),
        timeout=settings.COURTLISTENER_TIMEOUT,
    )
    try:
        async with session_scope() as db:
            service = JudgeSyncService(db, client)
            if args.command == "sync":
                await service.sync_judges(limit=args.limit, max_pages=args.max_pages)
                logger.info("Sync completed successfully")
            else:
                judge = await service.search_and_sync_judge(args.term)
                if judge:
                    logger.info("Judge found and synced: %s (%s)", judge.display_name, judge.id)
                else:
                    logger.info("No judge found")
    except Exception:
        logger.exception("Sync failed")
        return 1
    finally:
        await client.aclose()
        await engine.dispose()
    return 0


def main(argv=None) -> int:
    configure_logging(settings.LOG_LEVEL)
    args = build_parser().parse_args(argv)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
