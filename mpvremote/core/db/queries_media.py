"""
Media status queries.

Design:
- Functions are *pure DB helpers*: they take an open `aiosqlite.Connection`
  and return materialized dataclasses.
- Callers pass already decomposed `(directory, file_name)` keys; see
  `mpvremote.core.db.paths`.
- These functions assume `conn.row_factory = aiosqlite.Row`.
- Writes do not commit; the caller owns the transaction.
"""

from __future__ import annotations

import aiosqlite

from mpvremote.core.db.models import MediaStatusRow

_COLUMNS = 'id, directory, file_name, "current_time", finished'


def _row_to_media_status(row: aiosqlite.Row) -> MediaStatusRow:
    current_time = row["current_time"]
    return MediaStatusRow(
        id=int(row["id"]),
        directory=row["directory"],
        file_name=str(row["file_name"]),
        current_time=float(current_time) if current_time is not None else None,
        finished=bool(row["finished"]),
    )


async def get_media_status(
    conn: aiosqlite.Connection, directory: str, file_name: str
) -> MediaStatusRow | None:
    cursor = await conn.execute(
        f"""
        SELECT {_COLUMNS}
        FROM mediastatus
        WHERE directory = ? AND file_name = ?
        """,
        (directory, file_name),
    )
    row = await cursor.fetchone()
    return _row_to_media_status(row) if row is not None else None


async def list_media_status_by_directory(
    conn: aiosqlite.Connection, directory: str
) -> list[MediaStatusRow]:
    cursor = await conn.execute(
        f"""
        SELECT {_COLUMNS}
        FROM mediastatus
        WHERE directory = ?
        ORDER BY file_name
        """,
        (directory,),
    )
    rows = await cursor.fetchall()
    return [_row_to_media_status(r) for r in rows]


async def list_media_status(conn: aiosqlite.Connection) -> list[MediaStatusRow]:
    cursor = await conn.execute(f"SELECT {_COLUMNS} FROM mediastatus")
    rows = await cursor.fetchall()
    return [_row_to_media_status(r) for r in rows]


async def upsert_media_status(
    conn: aiosqlite.Connection,
    directory: str,
    file_name: str,
    *,
    current_time: float,
    finished: bool,
) -> None:
    """Insert or update progress for `(directory, file_name)` in one statement."""
    await conn.execute(
        """
        INSERT INTO mediastatus (directory, file_name, "current_time", finished)
        VALUES (:directory, :file_name, :current_time, :finished)
        ON CONFLICT(directory, file_name) DO UPDATE SET
            "current_time" = excluded."current_time",
            finished       = excluded.finished
        """,
        {
            "directory": directory,
            "file_name": file_name,
            "current_time": float(current_time),
            "finished": 1 if finished else 0,
        },
    )


async def count_media_status(conn: aiosqlite.Connection) -> int:
    cursor = await conn.execute("SELECT COUNT(*) AS c FROM mediastatus;")
    row = await cursor.fetchone()
    return int(row["c"]) if row else 0
