"""
Internal DB subpackage for mpvremote.

Splits the store into focused units (models, schema/migrations, and query
groups) while keeping `MediaStore` as the single public interface.
External code should import `MediaStore` from `mpvremote.core.store`.
"""

from __future__ import annotations

# Models / DTOs
from .models import (
    CollectionEntryRow,
    CollectionRow,
    CollectionType,
    CollectionUpdate,
    EntryInput,
    MediaStatusRow,
    NewCollection,
)

# Path keys
from .paths import join_media_path, split_media_path, strip_trailing_sep

# Schema / migrations
from .schema import SCHEMA_VERSION, ensure_schema, migrate

__all__ = [
    # models
    "CollectionType",
    "CollectionRow",
    "CollectionEntryRow",
    "MediaStatusRow",
    "NewCollection",
    "CollectionUpdate",
    "EntryInput",
    # paths
    "split_media_path",
    "join_media_path",
    "strip_trailing_sep",
    # schema
    "SCHEMA_VERSION",
    "ensure_schema",
    "migrate",
]
