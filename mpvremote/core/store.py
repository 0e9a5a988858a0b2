"""
Playback progress + collections store.

Goals:
- SQLite + aiosqlite, async/await friendly.
- One connection owned by one `MediaStore` instance; the host creates it once
  and hands it to whatever needs it (request handlers, CLI).
- Every write runs in a single transaction and either fully applies or
  rolls back.
- Failures surface as typed `MediaStoreError` subclasses.

Note:
- Models/DTOs live in `mpvremote.core.db.models`
- Schema/migrations live in `mpvremote.core.db.schema`
- Query functions live in `mpvremote.core.db.queries_*` modules
"""

from __future__ import annotations

import logging
import math
import os
from contextlib import asynccontextmanager, contextmanager
from dataclasses import replace
from pathlib import Path
from typing import AsyncIterator, Iterator

import aiosqlite

from mpvremote.config import DEFAULT_FINISHED_PERCENT, DEFAULT_MIN_PERCENT, RemoteSettings
from mpvremote.core.db import queries_collections, queries_media
from mpvremote.core.db.models import (
    CollectionEntryRow,
    CollectionRow,
    CollectionUpdate,
    EntryInput,
    MediaStatusRow,
    NewCollection,
)
from mpvremote.core.db.paths import split_media_path, strip_trailing_sep
from mpvremote.core.db.schema import SchemaVersionError
from mpvremote.core.db.schema import ensure_schema as ensure_schema_sql

logger = logging.getLogger(__name__)


class MediaStoreError(RuntimeError):
    """Base error for MediaStore operations."""


class NotFoundError(MediaStoreError):
    """Raised when an update or delete targets a row that does not exist."""


class ConstraintViolationError(MediaStoreError):
    """Raised when a write breaks a schema constraint (foreign key, NOT NULL, ...)."""


class StorageUnavailableError(MediaStoreError):
    """Raised when the database cannot be used (not open, locked, corrupt, ...)."""


class MediaStoreNotReadyError(StorageUnavailableError):
    """Raised when operations are attempted before the store is opened."""


class MediaStore:
    """
    Async access layer for the mpvremote database.

    Usage:
        store = MediaStore(settings.db_path)
        await store.initialize()
        ... operations ...
        await store.close()

    or:
        async with MediaStore(":memory:") as store:
            ...
    """

    def __init__(
        self,
        db_path: str | Path,
        *,
        finished_percent: float = DEFAULT_FINISHED_PERCENT,
        min_percent: float = DEFAULT_MIN_PERCENT,
        sep: str = os.sep,
    ) -> None:
        self._db_path = str(db_path)
        self._finished_percent = float(finished_percent)
        self._min_percent = float(min_percent)
        self._sep = sep
        self._conn: aiosqlite.Connection | None = None

    @classmethod
    def from_settings(cls, settings: RemoteSettings) -> MediaStore:
        return cls(
            settings.db_path,
            finished_percent=settings.finished_percent,
            min_percent=settings.min_percent,
        )

    @property
    def db_path(self) -> str:
        return self._db_path

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    async def open(self) -> None:
        if self._conn is not None:
            return

        try:
            if self._db_path != ":memory:":
                Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
            conn = await aiosqlite.connect(self._db_path)
        except (OSError, aiosqlite.Error) as e:
            logger.error("Could not open store at %s: %s", self._db_path, e)
            raise StorageUnavailableError(f"Could not open {self._db_path}: {e}") from e

        try:
            conn.row_factory = aiosqlite.Row
            await conn.execute("PRAGMA foreign_keys = ON;")
        except aiosqlite.Error as e:
            await conn.close()
            logger.error("Could not configure store at %s: %s", self._db_path, e)
            raise StorageUnavailableError(f"Could not open {self._db_path}: {e}") from e

        self._conn = conn
        logger.info("Opened store at %s", self._db_path)

    async def close(self) -> None:
        if self._conn is None:
            return
        await self._conn.close()
        self._conn = None

    async def ensure_schema(self) -> None:
        """Create or migrate schema to current version."""
        conn = self._require_conn()
        with self._translate_errors("ensure schema"):
            try:
                await ensure_schema_sql(conn)
            except SchemaVersionError as e:
                logger.error("Unusable store schema in %s: %s", self._db_path, e)
                raise StorageUnavailableError(str(e)) from e

    async def initialize(self) -> None:
        """Open the database and make sure the tables exist."""
        await self.open()
        try:
            await self.ensure_schema()
        except BaseException:
            await self.close()
            raise

    async def __aenter__(self) -> MediaStore:
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _require_conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise MediaStoreNotReadyError("MediaStore is not open. Call await store.open() first.")
        return self._conn

    @contextmanager
    def _translate_errors(self, action: str) -> Iterator[None]:
        try:
            yield
        except aiosqlite.IntegrityError as e:
            logger.warning("Constraint violation during %s: %s", action, e)
            raise ConstraintViolationError(f"{action}: {e}") from e
        except aiosqlite.Error as e:
            logger.error("Storage error during %s: %s", action, e)
            raise StorageUnavailableError(f"{action}: {e}") from e

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        conn = self._require_conn()
        try:
            yield conn
            await conn.commit()
        except BaseException:
            await conn.rollback()
            raise

    # ===========================================================================
    # Media status
    # ===========================================================================

    async def get_media_status_entries(
        self,
        filepath: str | None = None,
        directory: str | None = None,
    ) -> MediaStatusRow | list[MediaStatusRow] | None:
        """
        Look up playback progress.

        - `filepath`: the row for that single file, or None.
        - `directory`: all rows directly in that directory, ordered by file name.
        - neither: every row.

        `filepath` takes precedence when both are given.
        """
        if filepath is not None:
            return await self.get_media_status(filepath)

        conn = self._require_conn()
        with self._translate_errors("media status lookup"):
            if directory is not None:
                return await queries_media.list_media_status_by_directory(
                    conn, strip_trailing_sep(directory, self._sep)
                )
            return await queries_media.list_media_status(conn)

    async def get_media_status(self, filepath: str) -> MediaStatusRow | None:
        """Typed shortcut for the single-file lookup."""
        conn = self._require_conn()
        dir_name, file_name = split_media_path(filepath, self._sep)
        with self._translate_errors("media status lookup"):
            return await queries_media.get_media_status(conn, dir_name, file_name)

    async def create_media_status_entry(
        self, filepath: str, time: float, finished: bool
    ) -> MediaStatusRow:
        """Insert or update progress for a file. Returns the stored row."""
        dir_name, file_name = split_media_path(filepath, self._sep)

        with self._translate_errors("media status upsert"):
            async with self._transaction() as conn:
                await queries_media.upsert_media_status(
                    conn, dir_name, file_name, current_time=time, finished=finished
                )
            row = await queries_media.get_media_status(conn, dir_name, file_name)

        if row is None:
            raise StorageUnavailableError("Upsert failed: mediastatus row not found after write.")
        logger.debug(
            "Stored progress for %s: %.1fs finished=%s", filepath, row.current_time, row.finished
        )
        return row

    async def add_media_status_entry(
        self, filepath: str, time: float | str, percent_pos: float | str
    ) -> MediaStatusRow | None:
        """
        Record playback progress reported by the player.

        Files watched past `finished_percent` are marked finished. Progress at
        or below `min_percent` is ignored (returns None, nothing is written) so
        that barely started files do not show up as in progress.
        """
        time_value = _parse_float(time, "time")
        percent = _parse_float(percent_pos, "percent_pos")

        if percent >= self._finished_percent:
            finished = True
        elif percent <= self._min_percent:
            logger.debug("Skipping progress for %s at %.1f%%", filepath, percent)
            return None
        else:
            finished = False

        return await self.create_media_status_entry(filepath, time_value, finished)

    async def count_media_status(self) -> int:
        conn = self._require_conn()
        with self._translate_errors("media status count"):
            return await queries_media.count_media_status(conn)

    # ===========================================================================
    # Collections
    # ===========================================================================

    async def create_collection(self, data: NewCollection) -> CollectionRow:
        """Create a collection and its entries. Returns it with `paths` populated."""
        with self._translate_errors("create collection"):
            async with self._transaction() as conn:
                collection_id = await queries_collections.insert_collection(
                    conn, data.name, data.type
                )
                for element in data.paths:
                    await self._insert_entry(conn, collection_id, element)

            collection = await queries_collections.get_collection_by_id(conn, collection_id)
            entries = await queries_collections.list_entries(conn, collection_id)

        if collection is None:
            raise StorageUnavailableError("Insert failed: collection row not found after write.")
        logger.info(
            "Created collection %d (%s) with %d paths", collection.id, data.name, len(entries)
        )
        return replace(collection, paths=tuple(entries))

    async def get_collections(
        self, collection_id: int | None = None
    ) -> CollectionRow | list[CollectionRow] | None:
        """
        With an id: that collection with `paths` populated, or None.
        Without (or with a falsy id such as 0): every collection, `paths` left
        as None.
        """
        if collection_id:
            return await self.get_collection(collection_id)

        conn = self._require_conn()
        with self._translate_errors("collection lookup"):
            return await queries_collections.list_collections(conn)

    async def get_collection(self, collection_id: int) -> CollectionRow | None:
        """Typed shortcut for `get_collections(collection_id)`."""
        conn = self._require_conn()
        with self._translate_errors("collection lookup"):
            collection = await queries_collections.get_collection_by_id(conn, collection_id)
            if collection is None:
                return None
            entries = await queries_collections.list_entries(conn, collection.id)
        return replace(collection, paths=tuple(entries))

    async def update_collection(self, collection_id: int, data: CollectionUpdate) -> CollectionRow:
        """
        Partially update a collection.

        None fields keep their value. Entries without an id are added, entries
        with an id have their path replaced. Everything is applied in one
        transaction.
        """
        with self._translate_errors("update collection"):
            async with self._transaction() as conn:
                found = await queries_collections.update_collection(
                    conn, collection_id, name=data.name, type_=data.type
                )
                if not found:
                    raise NotFoundError(f"Collection {collection_id} does not exist")

                for element in data.paths:
                    if element.id is None:
                        await self._insert_entry(conn, collection_id, element)
                        continue
                    updated = await queries_collections.update_entry_path(
                        conn, collection_id, element.id, element.path
                    )
                    if not updated:
                        raise NotFoundError(
                            f"Collection entry {element.id} does not exist in collection {collection_id}"
                        )

        collection = await self.get_collection(collection_id)
        if collection is None:
            raise NotFoundError(f"Collection {collection_id} does not exist")
        logger.info("Updated collection %d", collection_id)
        return collection

    async def delete_collection(self, collection_id: int) -> None:
        """Delete a collection together with its entries."""
        with self._translate_errors("delete collection"):
            async with self._transaction() as conn:
                if not await queries_collections.delete_collection(conn, collection_id):
                    raise NotFoundError(f"Collection {collection_id} does not exist")
        logger.info("Deleted collection %d", collection_id)

    # ===========================================================================
    # Collection entries
    # ===========================================================================

    async def create_collection_entry(
        self, collection_id: int, data: EntryInput
    ) -> CollectionEntryRow:
        with self._translate_errors("create collection entry"):
            async with self._transaction() as conn:
                entry_id = await self._insert_entry(conn, collection_id, data)
            entry = await queries_collections.get_entry_by_id(conn, entry_id)

        if entry is None:
            raise StorageUnavailableError("Insert failed: entry row not found after write.")
        return entry

    async def get_collection_entries(self, collection_id: int) -> list[CollectionEntryRow]:
        conn = self._require_conn()
        with self._translate_errors("collection entry lookup"):
            return await queries_collections.list_entries(conn, collection_id)

    async def delete_collection_entry(self, entry_id: int) -> None:
        with self._translate_errors("delete collection entry"):
            async with self._transaction() as conn:
                if not await queries_collections.delete_entry(conn, entry_id):
                    raise NotFoundError(f"Collection entry {entry_id} does not exist")

    async def _insert_entry(
        self, conn: aiosqlite.Connection, collection_id: int, element: EntryInput
    ) -> int:
        if element.path is None:
            raise ValueError("Collection entry needs a path")
        return await queries_collections.insert_entry(conn, collection_id, element.path)


def _parse_float(value: float | str, name: str) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be a number, got {value!r}") from e
    if not math.isfinite(result):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return result
