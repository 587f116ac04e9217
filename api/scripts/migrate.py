#!/usr/bin/env python3
"""Run Alembic migrations for the configured database.

Usage:
    cd api
    python -m scripts.migrate upgrade
    python -m scripts.migrate downgrade -1
    python -m scripts.migrate current
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from alembic import command
from alembic.config import Config

API_DIR = Path(__file__).resolve().parents[1]


class MigrationScriptsNotFoundError(FileNotFoundError):
    """Raised when the alembic/ directory is not next to the installed code.

    Migration scripts are not shipped in the wheel. Run migrations from a
    source checkout or an editable install (pip install -e .).
    """

    def __init__(self, path: Path):
        self.path = path
        super().__init__(
            f"Migration scripts not found at {path}. "
            "Run migrations from a source checkout or an editable install."
        )


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run Alembic migrations")
    sub = parser.add_subparsers(dest="cmd", required=True)

    upgrade = sub.add_parser("upgrade", help="Apply migrations")
    upgrade.add_argument(
        "target",
        nargs="?",
        default="head",
        help="Target revision (default: head)",
    )

    downgrade = sub.add_parser("downgrade", help="Revert migrations")
    downgrade.add_argument(
        "target",
        nargs="?",
        default="-1",
        help="Target revision (default: -1)",
    )

    sub.add_parser("current", help="Show current revision")
    sub.add_parser("history", help="Show revision history")

    stamp = sub.add_parser(
        "stamp",
        help="Mark a revision as applied without running migrations",
    )
    stamp.add_argument(
        "target",
        nargs="?",
        default="head",
        help="Target revision (default: head)",
    )

    return parser.parse_args(argv)


def get_alembic_config() -> Config:
    """Alembic config built in code; there is no alembic.ini."""
    # env.py imports app modules as top-level packages
    if str(API_DIR) not in sys.path:
        sys.path.insert(0, str(API_DIR))

    script_location = API_DIR / "alembic"
    if not (script_location / "env.py").is_file():
        raise MigrationScriptsNotFoundError(script_location)

    cfg = Config()
    cfg.set_main_option("script_location", str(script_location))
    return cfg


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    cfg = get_alembic_config()

    match args.cmd:
        case "upgrade":
            command.upgrade(cfg, args.target)
        case "downgrade":
            command.downgrade(cfg, args.target)
        case "current":
            command.current(cfg)
        case "history":
            command.history(cfg)
        case "stamp":
            command.stamp(cfg, args.target)
        case _:
            raise ValueError(f"Unknown command: {args.cmd}")


if __name__ == "__main__":
    main()
