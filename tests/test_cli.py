"""Tests for CLI parsing and dispatch."""

from __future__ import annotations

from pathlib import Path
import sys

import pytest

from playlist_codec import cli
from playlist_codec.config import CodecConfig


@pytest.fixture(autouse=True)
def quiet_cli(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(cli, "init_logging", lambda: tmp_path / "app.log")
    monkeypatch.setattr(cli, "load_config", lambda: CodecConfig())
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)


def test_parse_show() -> None:
    args = cli.build_parser().parse_args(["show", "list.m3u", "--encoding", "cp1252"])
    assert args.command == "show"
    assert args.source == "list.m3u"
    assert args.encoding == "cp1252"
    assert args.format is None
    assert args.no_tags is False


def test_parse_rejects_unknown_format() -> None:
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["convert", "a.pls", "b.x", "--format", "xspf"])


def test_parse_requires_command() -> None:
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


def test_convert_pls_to_m3u(tmp_path: Path, capsys) -> None:
    source = tmp_path / "in.pls"
    source.write_text("[playlist]\nFile1=/m/a.mp3\nFile2=/m/b.mp3\n", encoding="utf-8")
    dest = tmp_path / "out.m3u"
    assert cli.main(["convert", str(source), str(dest)]) == 0
    assert dest.read_text(encoding="utf-8") == (
        "#EXTM3U\n#EXTINF:0,\n/m/a.mp3\n#EXTINF:0,\n/m/b.mp3\n"
    )
    assert "Wrote 2 entries" in capsys.readouterr().out


def test_convert_uses_default_format_for_unknown_suffix(tmp_path: Path) -> None:
    source = tmp_path / "in.pls"
    source.write_text("File1=a\n", encoding="utf-8")
    dest = tmp_path / "out.txt"
    assert cli.main(["convert", str(source), str(dest)]) == 0
    assert dest.read_text(encoding="utf-8").startswith("#EXTM3U\n")


def test_convert_missing_source(tmp_path: Path, capsys) -> None:
    exit_code = cli.main(
        ["convert", str(tmp_path / "missing.pls"), str(tmp_path / "out.m3u")]
    )
    assert exit_code == 1
    assert "Could not read playlist" in capsys.readouterr().err


def test_scan_writes_sorted_directory(media_dir: Path, tmp_path: Path) -> None:
    dest = tmp_path / "scan.pls"
    assert cli.main(["scan", str(media_dir), str(dest)]) == 0
    text = dest.read_text(encoding="utf-8")
    assert f"File1={media_dir / 'a.mp3'}" in text
    assert f"File2={media_dir / 'b.mp3'}" in text
    assert "readme.txt" not in text


def test_scan_rejects_non_directory(tmp_path: Path, capsys) -> None:
    assert cli.main(["scan", str(tmp_path / "nope"), str(tmp_path / "x.pls")]) == 1
    assert "Not a directory" in capsys.readouterr().err


def test_show_prints_entries(tmp_path: Path, capsys) -> None:
    source = tmp_path / "list.m3u"
    source.write_text("#EXTM3U\n#EXTINF:180,Song One\n/music/one.mp3\n", encoding="utf-8")
    assert cli.main(["show", str(source), "--no-tags"]) == 0
    out = capsys.readouterr().out
    assert "Song One" in out
    assert "one.mp3" in out


def test_show_with_explicit_format(tmp_path: Path, capsys) -> None:
    source = tmp_path / "list.txt"
    source.write_text("File1=/x/track.flac\n", encoding="utf-8")
    assert cli.main(["show", str(source), "--format", "pls", "--no-tags"]) == 0
    assert "track.flac" in capsys.readouterr().out


def test_show_unknown_type_fails(tmp_path: Path, capsys) -> None:
    source = tmp_path / "list.txt"
    source.write_text("File1=a\n", encoding="utf-8")
    assert cli.main(["show", str(source)]) == 1
    assert "Could not read playlist" in capsys.readouterr().err
