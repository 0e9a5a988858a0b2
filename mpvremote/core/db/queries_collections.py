"""
Collection and collection entry queries.

Design:
- Functions are *pure DB helpers*: they take an open `aiosqlite.Connection`
  and return materialized dataclasses.
- These functions assume `conn.row_factory = aiosqlite.Row`.
- Writes do not commit; the caller owns the transaction.

Important:
- Do NOT interpolate user input into SQL.
"""

from __future__ import annotations

import aiosqlite

from mpvremote.core.db.models import CollectionEntryRow, CollectionRow

# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


def _row_to_collection(row: aiosqlite.Row) -> CollectionRow:
    return CollectionRow(id=int(row["id"]), name=str(row["name"]), type=int(row["type"]))


async def insert_collection(conn: aiosqlite.Connection, name: str, type_: int) -> int:
    """Insert a collection. Returns the new collection ID."""
    cursor = await conn.execute(
        "INSERT INTO collection (name, type) VALUES (?, ?);",
        (name, int(type_)),
    )
    return int(cursor.lastrowid)


async def get_collection_by_id(
    conn: aiosqlite.Connection, collection_id: int
) -> CollectionRow | None:
    cursor = await conn.execute(
        "SELECT id, name, type FROM collection WHERE id = ?;",
        (int(collection_id),),
    )
    row = await cursor.fetchone()
    return _row_to_collection(row) if row is not None else None


async def list_collections(conn: aiosqlite.Connection) -> list[CollectionRow]:
    cursor = await conn.execute("SELECT id, name, type FROM collection ORDER BY id;")
    rows = await cursor.fetchall()
    return [_row_to_collection(r) for r in rows]


async def update_collection(
    conn: aiosqlite.Connection,
    collection_id: int,
    *,
    name: str | None,
    type_: int | None,
) -> bool:
    """Overwrite only the non-None fields. Returns True if the row exists."""
    cursor = await conn.execute(
        """
        UPDATE collection
        SET name = COALESCE(?, name),
            type = COALESCE(?, type)
        WHERE id = ?
        """,
        (name, type_, int(collection_id)),
    )
    return cursor.rowcount > 0


async def delete_collection(conn: aiosqlite.Connection, collection_id: int) -> bool:
    """Delete a collection; entries go with it (ON DELETE CASCADE)."""
    cursor = await conn.execute("DELETE FROM collection WHERE id = ?;", (int(collection_id),))
    return cursor.rowcount > 0


# ---------------------------------------------------------------------------
# Collection entries
# ---------------------------------------------------------------------------


def _row_to_entry(row: aiosqlite.Row) -> CollectionEntryRow:
    return CollectionEntryRow(
        id=int(row["id"]),
        collection_id=int(row["collection_id"]),
        path=str(row["path"]),
    )


async def insert_entry(conn: aiosqlite.Connection, collection_id: int, path: str) -> int:
    """Insert a collection entry. Returns the new entry ID."""
    cursor = await conn.execute(
        "INSERT INTO collection_entry (collection_id, path) VALUES (?, ?);",
        (int(collection_id), path),
    )
    return int(cursor.lastrowid)


async def get_entry_by_id(conn: aiosqlite.Connection, entry_id: int) -> CollectionEntryRow | None:
    cursor = await conn.execute(
        "SELECT id, collection_id, path FROM collection_entry WHERE id = ?;",
        (int(entry_id),),
    )
    row = await cursor.fetchone()
    return _row_to_entry(row) if row is not None else None


async def list_entries(
    conn: aiosqlite.Connection, collection_id: int
) -> list[CollectionEntryRow]:
    cursor = await conn.execute(
        """
        SELECT id, collection_id, path
        FROM collection_entry
        WHERE collection_id = ?
        ORDER BY id
        """,
        (int(collection_id),),
    )
    rows = await cursor.fetchall()
    return [_row_to_entry(r) for r in rows]


async def update_entry_path(
    conn: aiosqlite.Connection,
    collection_id: int,
    entry_id: int,
    path: str | None,
) -> bool:
    """
    Update an entry's path (None keeps the current one).

    Scoped to `collection_id` so an update cannot move entries between
    collections. Returns True if the entry exists in that collection.
    """
    cursor = await conn.execute(
        """
        UPDATE collection_entry
        SET path = COALESCE(?, path)
        WHERE id = ? AND collection_id = ?
        """,
        (path, int(entry_id), int(collection_id)),
    )
    return cursor.rowcount > 0


async def delete_entry(conn: aiosqlite.Connection, entry_id: int) -> bool:
    cursor = await conn.execute("DELETE FROM collection_entry WHERE id = ?;", (int(entry_id),))
    return cursor.rowcount > 0
