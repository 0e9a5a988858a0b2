"""
Tests for mpvremote.core.db.schema.

Covers fresh databases as well as databases created by the older Node.js
service (tables present, user_version 0, possible duplicate progress rows).
"""

from __future__ import annotations

from pathlib import Path

import aiosqlite
import pytest

from mpvremote.core.db.schema import SCHEMA_VERSION, SchemaVersionError, ensure_schema, migrate
from mpvremote.core.store import MediaStore

LEGACY_MEDIASTATUS = """
CREATE TABLE mediastatus(
    id INTEGER PRIMARY KEY ASC,
    directory TEXT,
    file_name TEXT NOT NULL,
    "current_time" REAL,
    finished INTEGER
)
"""


async def _user_version(conn: aiosqlite.Connection) -> int:
    cursor = await conn.execute("PRAGMA user_version;")
    row = await cursor.fetchone()
    return int(row[0])


async def _table_names(conn: aiosqlite.Connection) -> set[str]:
    cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table';")
    return {r[0] for r in await cursor.fetchall()}


class TestEnsureSchema:
    async def test_fresh_database(self) -> None:
        async with aiosqlite.connect(":memory:") as conn:
            await ensure_schema(conn)

            assert await _user_version(conn) == SCHEMA_VERSION
            assert {"collection", "collection_entry", "mediastatus"} <= await _table_names(conn)

    async def test_rerun_is_noop(self) -> None:
        async with aiosqlite.connect(":memory:") as conn:
            await ensure_schema(conn)
            await ensure_schema(conn)
            assert await _user_version(conn) == SCHEMA_VERSION

    async def test_newer_database_is_rejected(self) -> None:
        async with aiosqlite.connect(":memory:") as conn:
            await conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION + 1};")
            with pytest.raises(SchemaVersionError):
                await ensure_schema(conn)

    async def test_unknown_migration_path(self) -> None:
        async with aiosqlite.connect(":memory:") as conn:
            with pytest.raises(SchemaVersionError):
                await migrate(conn, from_version=SCHEMA_VERSION, to_version=SCHEMA_VERSION + 1)

    async def test_mediastatus_location_is_unique(self) -> None:
        async with aiosqlite.connect(":memory:") as conn:
            await ensure_schema(conn)
            await conn.execute(
                "INSERT INTO mediastatus (directory, file_name) VALUES ('/a', 'x.mkv');"
            )
            with pytest.raises(aiosqlite.IntegrityError):
                await conn.execute(
                    "INSERT INTO mediastatus (directory, file_name) VALUES ('/a', 'x.mkv');"
                )


class TestLegacyDatabase:
    async def test_duplicates_are_collapsed(self, tmp_path: Path) -> None:
        db_path = tmp_path / "remote.db"
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute(LEGACY_MEDIASTATUS)
            await conn.executemany(
                'INSERT INTO mediastatus (directory, file_name, "current_time", finished) '
                "VALUES (?, ?, ?, ?)",
                [
                    ("/movies", "a.mkv", 10.0, 0),
                    ("/movies", "a.mkv", 20.0, 0),
                    ("/movies", "b.mkv", 30.0, 1),
                ],
            )
            await conn.commit()

        async with MediaStore(db_path, sep="/") as store:
            rows = await store.get_media_status_entries(directory="/movies")

        assert [(r.file_name, r.current_time) for r in rows] == [("a.mkv", 20.0), ("b.mkv", 30.0)]

    async def test_existing_collections_are_kept(self, tmp_path: Path) -> None:
        db_path = tmp_path / "remote.db"
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute(
                "CREATE TABLE collection("
                "id INTEGER PRIMARY KEY ASC, name TEXT NOT NULL, type INTEGER NOT NULL)"
            )
            await conn.execute("INSERT INTO collection (name, type) VALUES ('Old', 2);")
            await conn.commit()

        async with MediaStore(db_path) as store:
            collections = await store.get_collections()

        assert [(c.name, c.type) for c in collections] == [("Old", 2)]
