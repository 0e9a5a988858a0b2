"""
Path decomposition for media status keys.

Media status rows are keyed by `(directory, file_name)`. Both parts are derived
from the full file path reported by the player, so every read and write must
go through the same split.
"""

from __future__ import annotations

import os


def strip_trailing_sep(path: str, sep: str = os.sep) -> str:
    """Remove a single trailing separator, if present."""
    if path.endswith(sep):
        return path[: -len(sep)]
    return path


def split_media_path(filepath: str, sep: str = os.sep) -> tuple[str, str]:
    """
    Split a full file path into `(directory, file_name)`.

    Examples (sep="/"):
        "/movies/a.mkv"  -> ("/movies", "a.mkv")
        "/movies/show/"  -> ("/movies", "show")
        "a.mkv"          -> ("", "a.mkv")
    """
    parts = strip_trailing_sep(filepath, sep).split(sep)
    file_name = parts.pop()
    return sep.join(parts), file_name


def join_media_path(directory: str | None, file_name: str, sep: str = os.sep) -> str:
    """
    Inverse of `split_media_path` for absolute paths.

    A bare file name ("a.mkv") and a file in the root directory ("/a.mkv") both
    split to an empty directory; the root form is the one rebuilt here.
    """
    if directory is None:
        return file_name
    return f"{directory}{sep}{file_name}"
