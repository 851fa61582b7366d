"""Playlist modeling for playlist-codec."""

from __future__ import annotations

from enum import Enum
import fnmatch
import logging
import os
from pathlib import Path
from typing import (
    TYPE_CHECKING,
    BinaryIO,
    Iterable,
    Iterator,
    Optional,
    Union,
    overload,
)

from playlist_codec.config import DEFAULT_MEDIA_EXTENSIONS, CodecConfig
from playlist_codec.mrl import MediaReference, Mrl

if TYPE_CHECKING:
    from playlist_codec.settings_store import SettingsStore

SUPPORTED_EXTENSIONS = DEFAULT_MEDIA_EXTENSIONS

logger = logging.getLogger(__name__)


PlaylistSource = Union[str, os.PathLike, BinaryIO, MediaReference]


class PlaylistType(Enum):
    """Playlist file formats."""

    PLS = "pls"
    M3U = "m3u"
    M3U8 = "m3u8"
    UNKNOWN = "unknown"

    @classmethod
    def from_name(cls, value: str | None) -> PlaylistType:
        """Map a user supplied format name to a type, UNKNOWN when unrecognised."""
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value.strip().lstrip(".").lower())
        except ValueError:
            return cls.UNKNOWN


def detect_type(file_name: str | os.PathLike[str]) -> PlaylistType:
    """Infer the playlist type from a file name suffix."""
    base = os.path.basename(os.fspath(file_name))
    if "." not in base:
        return PlaylistType.UNKNOWN
    suffix = base.rsplit(".", 1)[1].lower()
    if suffix == "pls":
        return PlaylistType.PLS
    if suffix == "m3u":
        return PlaylistType.M3U
    if suffix == "m3u8":
        return PlaylistType.M3U8
    return PlaylistType.UNKNOWN


class MediaNameFilter:
    """Glob patterns selecting media files in a directory."""

    def __init__(self, patterns: Iterable[str] | None = None) -> None:
        if patterns is None:
            patterns = (f"*{ext}" for ext in SUPPORTED_EXTENSIONS)
        self._patterns = frozenset(patterns)

    @classmethod
    def from_config(cls, cfg: CodecConfig) -> MediaNameFilter:
        return cls(f"*{ext}" for ext in cfg.media_extensions)

    def patterns(self) -> frozenset[str]:
        return self._patterns

    def matches(self, file_name: str) -> bool:
        lowered = file_name.lower()
        return any(
            fnmatch.fnmatchcase(lowered, pattern.lower()) for pattern in self._patterns
        )


class Playlist:
    """An ordered list of media references.

    Entries may repeat. The order is what gets written to disk and what a
    player walks through.
    """

    @overload
    def __init__(self) -> None: ...

    @overload
    def __init__(self, entries: Mrl) -> None: ...

    @overload
    def __init__(self, entries: Iterable[Mrl]) -> None: ...

    def __init__(self, entries: Mrl | Iterable[Mrl] | None = None) -> None:
        if entries is None:
            self._entries: list[Mrl] = []
        elif isinstance(entries, Mrl):
            self._entries = [entries]
        else:
            self._entries = list(entries)

    @classmethod
    def from_source(
        cls,
        source: PlaylistSource,
        encoding: Optional[str] = None,
        kind: PlaylistType = PlaylistType.UNKNOWN,
    ) -> Playlist:
        """Build a playlist by loading ``source``; empty if loading fails."""
        playlist = cls()
        playlist.load(source, encoding, kind)
        return playlist

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Mrl]:
        return iter(self._entries)

    @overload
    def __getitem__(self, index: int) -> Mrl: ...

    @overload
    def __getitem__(self, index: slice) -> list[Mrl]: ...

    def __getitem__(self, index: int | slice) -> Mrl | list[Mrl]:
        return self._entries[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Playlist):
            return self._entries == other._entries
        if isinstance(other, list):
            return self._entries == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"Playlist({self._entries!r})"

    def is_empty(self) -> bool:
        return not self._entries

    def append(self, mrl: Mrl) -> None:
        self._entries.append(mrl)

    def extend(self, mrls: Iterable[Mrl]) -> None:
        self._entries.extend(mrls)

    def clear(self) -> None:
        self._entries.clear()

    def locations(self) -> list[str]:
        return [mrl.to_string() for mrl in self._entries]

    def load_all(
        self, directory: Path | str, name_filter: MediaNameFilter | None = None
    ) -> Playlist:
        """Replace the contents with the media files found in ``directory``."""
        self.clear()
        name_filter = name_filter or MediaNameFilter()
        root = Path(directory).absolute()
        try:
            children = list(root.iterdir())
        except OSError:
            logger.warning("Cannot list directory %s", root, exc_info=True)
            return self
        files = sorted(
            path.name
            for path in children
            if path.is_file() and name_filter.matches(path.name)
        )
        for name in files:
            self.append(Mrl.from_path(root / name))
        logger.debug("Loaded %d entries from directory %s", len(self), root)
        return self

    def save(
        self,
        path: str | os.PathLike[str],
        kind: PlaylistType = PlaylistType.UNKNOWN,
        encoding: Optional[str] = None,
    ) -> bool:
        from playlist_codec.playlist_io import save_playlist

        return save_playlist(self, path, kind, encoding)

    def load(
        self,
        source: PlaylistSource,
        encoding: Optional[str] = None,
        kind: PlaylistType = PlaylistType.UNKNOWN,
    ) -> bool:
        from playlist_codec.playlist_io import load_playlist

        return load_playlist(self, source, encoding, kind)

    def save_to_store(self, name: str, store: SettingsStore) -> None:
        from playlist_codec.playlist_store import save_to_store

        save_to_store(name, self, store)

    def load_from_store(self, name: str, store: SettingsStore) -> Playlist:
        from playlist_codec.playlist_store import load_from_store

        self.clear()
        self.extend(load_from_store(name, store))
        return self
