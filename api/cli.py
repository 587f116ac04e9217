#!/usr/bin/env python3
"""CLI for Trip Share database management tasks.

Usage:
    python -m cli <command>

Commands:
    migrate        Run database migrations
    create-tables  Create missing tables straight from the models (local only)
    check-db       Verify the configured database is reachable
"""

import argparse
import asyncio
import sys

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from core.config import get_settings
from core.logger import bind_contextvars, configure_logging, get_logger

logger = get_logger(__name__)


def cmd_migrate(target: str) -> int:
    """Run database migrations."""
    from alembic import command
    from scripts.migrate import MigrationScriptsNotFoundError, get_alembic_config

    try:
        cfg = get_alembic_config()
    except MigrationScriptsNotFoundError as e:
        logger.error("cli.migrate.unavailable", path=str(e.path))
        return 1

    logger.info("cli.migrate.started", target=target)
    command.upgrade(cfg, target)
    logger.info("cli.migrate.completed", target=target)
    return 0


async def _create_tables() -> None:
    from core.database import create_engine, create_tables, dispose_engine

    engine = create_engine()
    try:
        await create_tables(engine)
    finally:
        await dispose_engine(engine)


def cmd_create_tables() -> int:
    """Create tables from the models without migration history."""
    asyncio.run(_create_tables())
    return 0


async def _check_db() -> None:
    from core.database import create_engine, dispose_engine, init_db

    engine = create_engine()
    try:
        await init_db(engine)
    finally:
        await dispose_engine(engine)


def cmd_check_db() -> int:
    try:
        asyncio.run(_check_db())
    except (SQLAlchemyError, OSError, TimeoutError) as e:
        logger.error("cli.check_db.failed", error=str(e))
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    configure_logging()

    parser = argparse.ArgumentParser(
        description="Trip Share CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    migrate = subparsers.add_parser(
        "migrate",
        help="Run database migrations",
    )
    migrate.add_argument(
        "target",
        nargs="?",
        default="head",
        help="Target revision (default: head)",
    )
    subparsers.add_parser(
        "create-tables",
        help="Create missing tables from the models (local development only)",
    )
    subparsers.add_parser(
        "check-db",
        help="Verify the configured database is reachable",
    )

    args = parser.parse_args(argv)
    bind_contextvars(cli_command=args.command)

    if args.command is not None:
        try:
            get_settings()
        except ValidationError as e:
            logger.error("cli.settings.invalid", error=str(e))
            return 2

    if args.command == "migrate":
        return cmd_migrate(args.target)
    elif args.command == "create-tables":
        return cmd_create_tables()
    elif args.command == "check-db":
        return cmd_check_db()
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
