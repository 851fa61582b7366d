"""Command-line interface for playlist-codec."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

from rich.console import Console
from rich.table import Table

from playlist_codec.config import CodecConfig, load_config
from playlist_codec.logging_setup import init_logging
from playlist_codec.metadata import display_title
from playlist_codec.playlist import (
    MediaNameFilter,
    Playlist,
    PlaylistType,
    detect_type,
)

logger = logging.getLogger(__name__)

FORMAT_CHOICES = [
    kind.value for kind in PlaylistType if kind is not PlaylistType.UNKNOWN
]


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="playlist-codec", description="Read and write PLS/M3U playlists"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", help="List the entries of a playlist")
    show.add_argument("source", help="Playlist file")
    show.add_argument("--encoding", default=None, help="Text encoding of SOURCE")
    show.add_argument("--format", choices=FORMAT_CHOICES, default=None)
    show.add_argument(
        "--no-tags",
        action="store_true",
        help="Do not read audio tags for entries without a name",
    )

    convert = sub.add_parser("convert", help="Rewrite a playlist in another format")
    convert.add_argument("source", help="Playlist file to read")
    convert.add_argument("dest", help="Playlist file to write")
    convert.add_argument("--encoding", default=None, help="Text encoding of SOURCE")
    convert.add_argument(
        "--format", choices=FORMAT_CHOICES, default=None, help="Format of DEST"
    )

    scan = sub.add_parser("scan", help="Build a playlist from a directory")
    scan.add_argument("directory", help="Directory holding media files")
    scan.add_argument("dest", help="Playlist file to write")
    scan.add_argument(
        "--format", choices=FORMAT_CHOICES, default=None, help="Format of DEST"
    )

    return parser


def _dest_type(dest: str, requested: Optional[str], cfg: CodecConfig) -> PlaylistType:
    if requested:
        return PlaylistType.from_name(requested)
    kind = detect_type(dest)
    if kind is PlaylistType.UNKNOWN:
        kind = PlaylistType.from_name(cfg.default_format)
    return kind


def _load(
    source: str, encoding: Optional[str], kind: PlaylistType, cfg: CodecConfig
) -> Optional[Playlist]:
    playlist = Playlist()
    if not playlist.load(source, encoding or cfg.default_encoding, kind):
        print(f"Could not read playlist: {source}", file=sys.stderr)
        return None
    return playlist


def _save(playlist: Playlist, dest: str, kind: PlaylistType) -> int:
    if not playlist.save(dest, kind):
        print(f"Could not write playlist: {dest}", file=sys.stderr)
        return 1
    print(f"Wrote {len(playlist)} entries to {dest}")
    return 0


def _cmd_show(args: argparse.Namespace, cfg: CodecConfig) -> int:
    kind = PlaylistType.from_name(args.format)
    playlist = _load(args.source, args.encoding, kind, cfg)
    if playlist is None:
        return 1
    table = Table(title=args.source)
    table.add_column("#", justify="right")
    table.add_column("Title")
    table.add_column("Location", overflow="fold")
    for number, mrl in enumerate(playlist, start=1):
        table.add_row(
            str(number),
            display_title(mrl, use_tags=not args.no_tags),
            mrl.to_string(),
        )
    Console().print(table)
    return 0


def _cmd_convert(args: argparse.Namespace, cfg: CodecConfig) -> int:
    playlist = _load(args.source, args.encoding, PlaylistType.UNKNOWN, cfg)
    if playlist is None:
        return 1
    return _save(playlist, args.dest, _dest_type(args.dest, args.format, cfg))


def _cmd_scan(args: argparse.Namespace, cfg: CodecConfig) -> int:
    directory = Path(args.directory)
    if not directory.is_dir():
        print(f"Not a directory: {directory}", file=sys.stderr)
        return 1
    playlist = Playlist().load_all(directory, MediaNameFilter.from_config(cfg))
    return _save(playlist, args.dest, _dest_type(args.dest, args.format, cfg))


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Entry point for the CLI."""
    init_logging()

    def excepthook(exc_type, exc, tb) -> None:
        logger.exception("Uncaught exception", exc_info=(exc_type, exc, tb))

    sys.excepthook = excepthook

    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    cfg = load_config()

    if args.command == "show":
        exit_code = _cmd_show(args, cfg)
    elif args.command == "convert":
        exit_code = _cmd_convert(args, cfg)
    else:
        exit_code = _cmd_scan(args, cfg)
    logger.info("Command %s exit code=%s", args.command, exit_code)
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
