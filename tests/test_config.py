"""Tests for config persistence."""

from __future__ import annotations

import json
import os
from pathlib import Path

from playlist_codec import config


def test_load_defaults_when_missing(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    loaded = config.load_config()
    assert loaded == config.CodecConfig()


def test_load_defaults_when_corrupt(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    config_path = tmp_path / "config.json"
    config_path.write_text("{not-json", encoding="utf-8")
    loaded = config.load_config()
    assert loaded == config.CodecConfig()


def test_load_defaults_when_not_a_mapping(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    (tmp_path / "config.json").write_text("[1, 2]", encoding="utf-8")
    assert config.load_config() == config.CodecConfig()


def test_load_defaults_when_read_fails(monkeypatch, tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text("{}", encoding="utf-8")

    def boom(*_args, **_kwargs) -> str:
        raise OSError("nope")

    monkeypatch.setattr(config, "get_config_path", lambda: config_path)
    monkeypatch.setattr(Path, "read_text", boom)
    loaded = config.load_config()
    assert loaded == config.CodecConfig()


def test_save_load_round_trip(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    original = config.CodecConfig(
        default_encoding="cp1252",
        default_format="pls",
        media_extensions=(".mp3", ".ogg"),
    )
    config.save_config(original)
    loaded = config.load_config()
    assert loaded == original


def test_save_config_atomic_write(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config, "get_config_dir", lambda: tmp_path)
    replaced: list[tuple[Path, Path]] = []

    def fake_replace(src: Path, dest: Path) -> None:
        replaced.append((src, dest))
        assert src.exists()
        data = json.loads(src.read_text(encoding="utf-8"))
        assert "media_extensions" in data
        dest.write_text(json.dumps(data), encoding="utf-8")

    monkeypatch.setattr(config.os, "replace", fake_replace)
    config.save_config(config.CodecConfig())
    assert replaced
    src, dest = replaced[0]
    assert src.suffix == ".tmp"
    assert dest.name == "config.json"


def test_config_from_mapping_sanitizes_values() -> None:
    raw = {
        "default_encoding": 5,
        "default_format": "xspf",
        "media_extensions": "mp3",
    }
    cfg = config._config_from_mapping(raw)
    assert cfg.default_encoding is None
    assert cfg.default_format == "m3u8"
    assert cfg.media_extensions == config.DEFAULT_MEDIA_EXTENSIONS


def test_config_from_mapping_normalizes_extensions() -> None:
    raw = {
        "default_format": " PLS ",
        "media_extensions": ["MP3", "*.ogg", ".Flac", "", 3, "mp3", "*"],
    }
    cfg = config._config_from_mapping(raw)
    assert cfg.default_format == "pls"
    assert cfg.media_extensions == (".mp3", ".ogg", ".flac")


def test_get_config_dir_os_defaults(monkeypatch, tmp_path: Path) -> None:
    if os.name == "nt":
        monkeypatch.setenv("APPDATA", str(tmp_path))
        path = config.get_config_dir("codec")
        assert path == tmp_path / "codec"
        monkeypatch.delenv("APPDATA", raising=False)
        monkeypatch.setattr(config.Path, "home", lambda: tmp_path)
        path = config.get_config_dir("codec")
        assert path == tmp_path / "AppData" / "Roaming" / "codec"
    else:
        monkeypatch.setattr(config, "_is_macos", lambda: False)
        xdg = tmp_path / "xdg"
        monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg))
        path = config.get_config_dir("codec")
        assert path == xdg / "codec"
        assert path.is_dir()
