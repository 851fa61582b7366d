"""Playlist I/O helpers (PLS/M3U/M3U8)."""

from __future__ import annotations

import codecs
import locale
import logging
import os
import re
from typing import BinaryIO, Iterator, Optional

from playlist_codec.mrl import Mrl
from playlist_codec.playlist import Playlist, PlaylistSource, PlaylistType, detect_type

logger = logging.getLogger(__name__)

PLS_LENGTH_UNKNOWN = -1
PLS_VERSION = 2

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")
_PLS_FILE_RE = re.compile(r"^File\d+=(.+)$")
_EXTINF_RE = re.compile(r"#EXTINF\s*:\s*(?P<num>-?\d+)\s*,\s*(?P<name>.*)$")

_BOMS = (
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF32_LE, "utf-32-le"),
    (codecs.BOM_UTF32_BE, "utf-32-be"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)


def _split_lines(text: str) -> Iterator[str]:
    return iter(_LINE_BREAK_RE.split(text))


def _resolve_encoding(encoding: Optional[str]) -> str:
    codec = encoding or locale.getpreferredencoding(False) or "utf-8"
    try:
        info = codecs.lookup(codec)
    except LookupError:
        logger.warning("Unknown encoding %r, falling back to utf-8", codec)
        return "utf-8"
    # base64, hex, rot13 and friends are codecs but not text encodings.
    if not getattr(info, "_is_text_encoding", True):
        logger.warning("%r is not a text encoding, falling back to utf-8", codec)
        return "utf-8"
    return codec


def decode_bytes(data: bytes | str, encoding: Optional[str] = None) -> str:
    """Decode playlist bytes; a byte order mark wins over ``encoding``.

    Text already decoded by a text-mode stream is returned as is.
    """
    if isinstance(data, str):
        return data[1:] if data.startswith("\ufeff") else data
    for bom, bom_codec in _BOMS:
        if data.startswith(bom):
            return data[len(bom) :].decode(bom_codec, errors="replace")
    return data.decode(_resolve_encoding(encoding), errors="replace")


def encode_pls(playlist: Playlist, newline: str = os.linesep) -> str:
    """Serialize ``playlist`` as a PLS document.

    Durations are not tracked, so every ``Length`` is written as -1.
    """
    lines = ["[playlist]", f"NumberOfEntries={len(playlist)}", ""]
    for number, mrl in enumerate(playlist, start=1):
        lines.append(f"File{number}={mrl.to_string()}")
        lines.append(f"Length{number}={PLS_LENGTH_UNKNOWN}")
        lines.append("")
    lines.append(f"Version={PLS_VERSION}")
    return newline.join(lines) + newline


def decode_pls(text: str) -> Playlist:
    """Parse a PLS document.

    Entries come back in the order their ``FileN=`` lines appear in the
    text; the numbers and the header are not consulted.
    """
    playlist = Playlist()
    for line in _split_lines(text):
        if not line:
            continue
        match = _PLS_FILE_RE.match(line)
        if match:
            playlist.append(Mrl(match.group(1)))
    return playlist


def encode_m3u(playlist: Playlist) -> str:
    """Serialize ``playlist`` as extended M3U, always with ``\\n`` line ends."""
    lines = ["#EXTM3U"]
    for mrl in playlist:
        lines.append("#EXTINF:0,")
        lines.append(mrl.to_string())
    return "\n".join(lines) + "\n"


def _next_location(lines: Iterator[str]) -> str:
    for raw in lines:
        line = raw.strip()
        if line and not line.startswith("#"):
            return line
    return ""


def decode_m3u(text: str, plain_line_is_location: bool = False) -> Playlist:
    """Parse an extended M3U document.

    ``#EXTINF`` supplies the name for the next non-comment line. A plain line
    read outside an ``#EXTINF`` pair is skipped and the following plain line
    is used as the location instead; pass ``plain_line_is_location=True`` to
    take the plain line itself.
    """
    playlist = Playlist()
    lines = _split_lines(text)
    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        name = ""
        location = ""
        if line.startswith("#"):
            match = _EXTINF_RE.search(line)
            if match:
                name = match.group("name")
                location = _next_location(lines)
        elif plain_line_is_location:
            location = line
        else:
            location = _next_location(lines)
        if location:
            playlist.append(Mrl(location, name))
    return playlist


def _read_all(stream: BinaryIO) -> bytes | str:
    """Read a whole stream from the start, leaving its position untouched."""
    if not stream.seekable():
        return stream.read()
    pos = stream.tell()
    stream.seek(0)
    try:
        return stream.read()
    finally:
        stream.seek(pos)


def read_pls(stream: BinaryIO, encoding: Optional[str] = None) -> Playlist:
    return decode_pls(decode_bytes(_read_all(stream), encoding))


def read_m3u(
    stream: BinaryIO,
    encoding: Optional[str] = None,
    plain_line_is_location: bool = False,
) -> Playlist:
    return decode_m3u(
        decode_bytes(_read_all(stream), encoding),
        plain_line_is_location=plain_line_is_location,
    )


def write_pls(stream: BinaryIO, playlist: Playlist, encoding: str = "utf-8") -> None:
    stream.write(encode_pls(playlist).encode(encoding, errors="replace"))


def write_m3u(stream: BinaryIO, playlist: Playlist, encoding: str = "utf-8") -> None:
    stream.write(encode_m3u(playlist).encode(encoding, errors="replace"))


def save_playlist(
    playlist: Playlist,
    path: str | os.PathLike[str],
    kind: PlaylistType = PlaylistType.UNKNOWN,
    encoding: Optional[str] = None,
) -> bool:
    """Write ``playlist`` to ``path``; return False if it could not be saved."""
    if kind is PlaylistType.UNKNOWN:
        kind = detect_type(path)
    if kind is PlaylistType.UNKNOWN:
        logger.warning("Cannot save %s: unknown playlist type", path)
        return False
    if kind is PlaylistType.M3U8:
        codec = "utf-8"
    else:
        codec = _resolve_encoding(encoding or "utf-8")
    try:
        with open(path, "wb") as stream:
            if kind is PlaylistType.PLS:
                write_pls(stream, playlist, codec)
            else:
                write_m3u(stream, playlist, codec)
    except OSError:
        logger.exception("Failed to save playlist to %s", path)
        return False
    logger.debug("Saved %d entries to %s as %s", len(playlist), path, kind.value)
    return True


def _load_stream(
    playlist: Playlist,
    stream: BinaryIO,
    encoding: Optional[str],
    kind: PlaylistType,
) -> bool:
    name = getattr(stream, "name", "")
    if kind is PlaylistType.UNKNOWN and isinstance(name, str):
        kind = detect_type(name)
    if kind is PlaylistType.PLS:
        loaded = read_pls(stream, encoding)
    elif kind is PlaylistType.M3U:
        loaded = read_m3u(stream, encoding)
    elif kind is PlaylistType.M3U8:
        loaded = read_m3u(stream, "utf-8")
    else:
        logger.warning("Cannot load %s: unknown playlist type", name or stream)
        return False
    playlist.extend(loaded)
    logger.debug("Loaded %d entries from %s", len(playlist), name or stream)
    return True


def load_playlist(
    playlist: Playlist,
    source: PlaylistSource,
    encoding: Optional[str] = None,
    kind: PlaylistType = PlaylistType.UNKNOWN,
) -> bool:
    """Replace the contents of ``playlist`` with the entries read from ``source``.

    ``source`` is a path, a binary stream or a media reference. Remote media
    references are not fetched and always fail.
    """
    playlist.clear()
    if isinstance(source, (str, os.PathLike)):
        if kind is PlaylistType.UNKNOWN:
            kind = detect_type(source)
        try:
            with open(source, "rb") as stream:
                return _load_stream(playlist, stream, encoding, kind)
        except OSError:
            logger.warning("Cannot read playlist %s", source, exc_info=True)
            return False
    if hasattr(source, "read"):
        if getattr(source, "closed", False):
            name = getattr(source, "name", None)
            if not isinstance(name, str):
                logger.warning("Cannot reopen closed stream %r", source)
                return False
            return load_playlist(playlist, name, encoding, kind)
        try:
            return _load_stream(playlist, source, encoding, kind)
        except OSError:
            logger.warning("Cannot read playlist stream %r", source, exc_info=True)
            playlist.clear()
            return False
    if hasattr(source, "is_local_file"):
        if not source.is_local_file():
            logger.info("Remote playlist %s is not supported", source.to_string())
            return False
        return load_playlist(playlist, source.to_local_file(), encoding, kind)
    raise TypeError(f"unsupported playlist source: {source!r}")
