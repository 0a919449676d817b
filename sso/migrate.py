# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Apply versioned SQL migrations to the SQLite storage.

Files are named ``<version>_<name>.sql`` or ``<version>_<name>.up.sql`` and run
in numeric version order. ``.down.sql`` files are rollbacks and are never
applied here.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from sqlalchemy import Engine, create_engine, text

from sso.shared.logging import logger

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"
DEFAULT_TABLE = "schema_migrations"


@dataclass(frozen=True, slots=True)
class Migration:
    version: int
    name: str
    path: Path


def _split_statements(sql: str) -> list[str]:
    return [stmt.strip() for stmt in sql.split(";") if stmt.strip()]


def discover(migrations: Path) -> list[Migration]:
    found: dict[int, Migration] = {}
    for path in migrations.glob("*.sql"):
        if path.name.endswith(".down.sql"):
            continue
        name = path.name.removesuffix(".sql").removesuffix(".up")
        prefix = name.split("_", 1)[0]
        if not prefix.isdigit():
            logger.warning(f"migrate: skipping {path.name}, no numeric version prefix")
            continue
        version = int(prefix)
        if version in found:
            raise ValueError(
                f"duplicate migration version {version}: "
                f"{found[version].path.name} and {path.name}"
            )
        found[version] = Migration(version=version, name=name, path=path)
    return [found[version] for version in sorted(found)]


def _ensure_table(engine: Engine, table: str) -> None:
    with engine.begin() as connection:
        connection.exec_driver_sql(
            f'CREATE TABLE IF NOT EXISTS "{table}" (version INTEGER PRIMARY KEY)'
        )


def applied_versions(engine: Engine, table: str = DEFAULT_TABLE) -> set[int]:
    _ensure_table(engine, table)
    with engine.connect() as connection:
        rows = connection.exec_driver_sql(f'SELECT version FROM "{table}"')
        return {int(row[0]) for row in rows}


def apply_migration(engine: Engine, migration: Migration, table: str = DEFAULT_TABLE) -> None:
    sql = migration.path.read_text(encoding="utf-8")
    with engine.begin() as connection:
        for statement in _split_statements(sql):
            connection.exec_driver_sql(statement)
        connection.execute(
            text(f'INSERT INTO "{table}" (version) VALUES (:version)'),
            {"version": migration.version},
        )
    logger.info(f"migrate: applied {migration.path.name} version={migration.version}")


def migrate(storage: Path, migrations: Path, table: str = DEFAULT_TABLE) -> list[str]:
    """Apply pending migrations and return the names of those that ran."""
    if not migrations.is_dir():
        raise FileNotFoundError(f"migrations directory not found: {migrations}")

    available = discover(migrations)
    storage.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{storage}")
    try:
        done = applied_versions(engine, table)
        pending = [m for m in available if m.version not in done]
        for migration in pending:
            apply_migration(engine, migration, table)
        return [m.name for m in pending]
    finally:
        engine.dispose()


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Apply SQL migrations to the storage")
    parser.add_argument("--storage", type=Path, required=True, help="Path to the SQLite file")
    parser.add_argument(
        "--migrations",
        type=Path,
        default=MIGRATIONS_DIR,
        help="Directory with <version>_<name>[.up].sql migrations",
    )
    parser.add_argument(
        "--table",
        default=DEFAULT_TABLE,
        help="Name of the migrations tracking table",
    )
    args = parser.parse_args(argv)

    applied = migrate(args.storage, args.migrations, args.table)
    if not applied:
        print("No new migrations to apply")
        return
    print("Migrations applied successfully")


if __name__ == "__main__":
    main()
