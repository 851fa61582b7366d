"""Tests for media resource locators."""

from __future__ import annotations

import os
from pathlib import Path

from playlist_codec.mrl import Mrl


def test_empty_mrl() -> None:
    mrl = Mrl()
    assert mrl.is_empty()
    assert not mrl.is_local_file()
    assert mrl.to_local_file() == ""
    assert mrl.name == ""


def test_plain_path_is_local() -> None:
    mrl = Mrl("/music/one.mp3", "One")
    assert mrl.is_local_file()
    assert mrl.to_local_file() == "/music/one.mp3"
    assert mrl.to_string() == "/music/one.mp3"
    assert mrl.file_name == "one.mp3"
    assert mrl.name == "One"


def test_windows_drive_is_not_a_scheme() -> None:
    mrl = Mrl("C:\\music\\one.mp3")
    assert mrl.scheme == ""
    assert mrl.is_local_file()


def test_file_uri_is_local() -> None:
    mrl = Mrl("file:///music/my%20song.mp3")
    assert mrl.scheme == "file"
    assert mrl.is_local_file()
    if os.name != "nt":
        assert mrl.to_local_file() == "/music/my song.mp3"


def test_remote_uri() -> None:
    mrl = Mrl("HTTP://example.com/radio/stream%201.mp3")
    assert mrl.scheme == "http"
    assert not mrl.is_local_file()
    assert mrl.to_local_file() == ""
    assert mrl.file_name == "stream 1.mp3"


def test_from_path_keeps_location(tmp_path: Path) -> None:
    path = tmp_path / "song.mp3"
    mrl = Mrl.from_path(path)
    assert mrl.location == str(path)
    assert str(mrl) == str(path)


def test_equality_uses_location_and_name() -> None:
    assert Mrl("a") == Mrl("a")
    assert Mrl("a", "x") != Mrl("a")
