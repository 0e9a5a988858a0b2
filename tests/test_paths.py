"""
Tests for mpvremote.core.db.paths.
"""

from __future__ import annotations

import pytest

from mpvremote.core.db.paths import join_media_path, split_media_path, strip_trailing_sep


class TestStripTrailingSep:
    def test_strips_one_separator(self) -> None:
        assert strip_trailing_sep("/movies/", "/") == "/movies"

    def test_strips_only_one(self) -> None:
        assert strip_trailing_sep("/movies//", "/") == "/movies/"

    def test_leaves_plain_path(self) -> None:
        assert strip_trailing_sep("/movies", "/") == "/movies"

    def test_windows_separator(self) -> None:
        assert strip_trailing_sep("C:\\Movies\\", "\\") == "C:\\Movies"


class TestSplitMediaPath:
    def test_absolute_file(self) -> None:
        assert split_media_path("/movies/action/a.mkv", "/") == ("/movies/action", "a.mkv")

    def test_trailing_separator(self) -> None:
        assert split_media_path("/shows/season1/", "/") == ("/shows", "season1")

    def test_file_in_root(self) -> None:
        assert split_media_path("/a.mkv", "/") == ("", "a.mkv")

    def test_bare_name(self) -> None:
        assert split_media_path("a.mkv", "/") == ("", "a.mkv")

    def test_windows_path(self) -> None:
        assert split_media_path("D:\\Videos\\clip.mp4", "\\") == ("D:\\Videos", "clip.mp4")

    def test_forward_slashes_are_not_separators_on_windows(self) -> None:
        assert split_media_path("D:\\Videos/clip.mp4", "\\") == ("D:", "Videos/clip.mp4")

    @pytest.mark.parametrize(
        "path",
        [
            "/movies/a.mkv",
            "/movies/with space/b c.mkv",
            "/deep/er/and/deeper/x",
            "/a.mkv",
            "/shows/season1/",
            "/music/album/",
        ],
    )
    def test_split_then_join_restores_path(self, path: str) -> None:
        directory, file_name = split_media_path(path, "/")
        assert join_media_path(directory, file_name, "/") == strip_trailing_sep(path, "/")

    def test_join_without_directory(self) -> None:
        assert join_media_path(None, "a.mkv", "/") == "a.mkv"
