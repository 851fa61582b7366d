"""Pytest configuration for playlist-codec."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_user_dirs(monkeypatch, tmp_path: Path) -> Path:
    """Keep config and log files out of the real home directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("APPDATA", str(home / "AppData"))
    monkeypatch.setenv("LOCALAPPDATA", str(home / "LocalAppData"))
    monkeypatch.delenv("PLAYLIST_CODEC_LOG_DIR", raising=False)
    monkeypatch.setattr(Path, "home", lambda: home)
    return home


@pytest.fixture
def media_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "media"
    directory.mkdir()
    for name in ("b.mp3", "a.mp3", "readme.txt"):
        (directory / name).write_text(name, encoding="utf-8")
    return directory
