"""
Database schema + migrations for the mpvremote store.

Design notes:
- We use SQLite `PRAGMA user_version` as the schema version.
- Migrations are forward-only (no downgrade support).
- v1 is the table layout shared with the mpv-remote Node.js service, so an
  existing `remote.db` created by it is picked up as version 0 and upgraded
  in place (all v1 statements are `IF NOT EXISTS`).

`current_time` is an SQLite keyword (CURRENT_TIME) and must be quoted wherever
it is used as a column reference.
"""

from __future__ import annotations

import logging
from typing import Final

import aiosqlite

logger = logging.getLogger(__name__)

# Bump when you change the schema and add a migration in `migrate()`.
SCHEMA_VERSION: Final[int] = 2


class SchemaVersionError(RuntimeError):
    """Raised when the database schema cannot be brought to `SCHEMA_VERSION`."""


async def ensure_schema(conn: aiosqlite.Connection) -> None:
    """
    Create or migrate schema to current version.

    This function assumes:
    - `conn` is an open aiosqlite connection
    - foreign_keys pragma is enabled by the caller
    """
    cursor = await conn.execute("PRAGMA user_version;")
    row = await cursor.fetchone()
    current = int(row[0]) if row is not None else 0

    if current > SCHEMA_VERSION:
        raise SchemaVersionError(
            f"Database schema version {current} is newer than supported {SCHEMA_VERSION}."
        )

    if current == SCHEMA_VERSION:
        return

    logger.info("Migrating store schema from v%d to v%d", current, SCHEMA_VERSION)
    await migrate(conn, from_version=current, to_version=SCHEMA_VERSION)
    await conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION};")
    await conn.commit()


async def migrate(conn: aiosqlite.Connection, *, from_version: int, to_version: int) -> None:
    """
    Perform forward-only migrations.

    Keep migrations small. If you need a big refactor, create a new DB.
    """
    # v0 -> v1
    if from_version == 0 and to_version >= 1:
        # Collection type: Movies - 1, TVShows - 2, Music - 3
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS collection (
                id INTEGER PRIMARY KEY ASC,
                name TEXT NOT NULL,
                type INTEGER NOT NULL
            )
            """
        )
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS collection_entry (
                id INTEGER PRIMARY KEY ASC,
                collection_id INTEGER NOT NULL,
                path TEXT NOT NULL,
                CONSTRAINT fk_collection
                    FOREIGN KEY (collection_id)
                    REFERENCES collection(id)
                    ON DELETE CASCADE
            )
            """
        )
        await conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_collection_entry_collection
            ON collection_entry(collection_id);
            """
        )
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS mediastatus (
                id INTEGER PRIMARY KEY ASC,
                directory TEXT,
                file_name TEXT NOT NULL,
                "current_time" REAL,
                finished INTEGER
            )
            """
        )
        await conn.commit()
        from_version = 1

    # v1 -> v2
    if from_version == 1 and to_version >= 2:
        # (directory, file_name) becomes an enforced key so progress can be
        # written with a single UPSERT. Older databases may already hold
        # duplicates from the read-then-write path; keep the newest row.
        cursor = await conn.execute(
            """
            DELETE FROM mediastatus
            WHERE id NOT IN (
                SELECT MAX(id) FROM mediastatus GROUP BY directory, file_name
            )
            """
        )
        if cursor.rowcount:
            logger.warning("Removed %d duplicate mediastatus rows", cursor.rowcount)
        await conn.execute(
            """
            CREATE UNIQUE INDEX IF NOT EXISTS ux_mediastatus_location
            ON mediastatus(directory, file_name);
            """
        )
        await conn.commit()
        from_version = 2

    if from_version != to_version:
        raise SchemaVersionError(f"No migration path from {from_version} to {to_version}.")
