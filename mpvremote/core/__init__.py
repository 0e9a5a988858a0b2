"""
Core store for mpvremote.

`MediaStore` is the public interface; the `db` subpackage holds its models,
schema and query helpers.
"""

from mpvremote.core.store import (
    ConstraintViolationError,
    MediaStore,
    MediaStoreError,
    MediaStoreNotReadyError,
    NotFoundError,
    StorageUnavailableError,
)

__all__ = [
    "MediaStore",
    "MediaStoreError",
    "MediaStoreNotReadyError",
    "NotFoundError",
    "ConstraintViolationError",
    "StorageUnavailableError",
]
