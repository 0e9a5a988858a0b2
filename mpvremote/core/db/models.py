"""
DB models (DTOs) for the mpvremote store.

This module is intentionally lightweight:
- No DB connection knowledge
- No SQL
- Pure dataclasses + helper functions
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Mapping


class CollectionType(IntEnum):
    """Known collection kinds. Stored as plain integers."""

    MOVIES = 1
    TV_SHOWS = 2
    MUSIC = 3


@dataclass(frozen=True, slots=True)
class CollectionEntryRow:
    """A filesystem path that belongs to a collection."""

    id: int
    collection_id: int
    path: str


@dataclass(frozen=True, slots=True)
class CollectionRow:
    """
    Collection record as stored in SQLite.

    `paths` is only populated by single-collection lookups; list queries
    leave it as None so callers know the entries were not fetched.
    """

    id: int
    name: str
    type: int
    paths: tuple[CollectionEntryRow, ...] | None = None


@dataclass(frozen=True, slots=True)
class MediaStatusRow:
    """Playback progress for a single file."""

    id: int
    directory: str | None
    file_name: str
    current_time: float | None
    finished: bool


@dataclass(frozen=True, slots=True)
class EntryInput:
    """
    Input record for a collection entry.

    Without `id` the entry is created; with `id` the existing entry's path is
    updated (a None path leaves it unchanged).
    """

    path: str | None = None
    id: int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EntryInput:
        # Request payloads send 0 / "" for entries that have no row yet
        return cls(path=data.get("path"), id=normalize_int(data.get("id")) or None)


@dataclass(frozen=True, slots=True)
class NewCollection:
    """Input record used to create a collection (and optionally its entries)."""

    name: str
    type: int = CollectionType.MOVIES
    paths: tuple[EntryInput, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> NewCollection:
        name = data.get("name")
        if name is None:
            raise ValueError("Collection needs a name")
        return cls(
            name=name,
            type=normalize_int(data.get("type")) or CollectionType.MOVIES,
            paths=tuple(EntryInput.from_dict(p) for p in data.get("paths") or ()),
        )


@dataclass(frozen=True, slots=True)
class CollectionUpdate:
    """
    Partial update for a collection.

    None fields are left untouched (COALESCE semantics).
    """

    name: str | None = None
    type: int | None = None
    paths: tuple[EntryInput, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CollectionUpdate:
        return cls(
            name=data.get("name"),
            type=normalize_int(data.get("type")),
            paths=tuple(EntryInput.from_dict(p) for p in data.get("paths") or ()),
        )


def normalize_int(value: Any) -> int | None:
    """Normalize optional integer fields (coerce to int, keep None and "")."""
    if value is None or value == "":
        return None
    return int(value)
