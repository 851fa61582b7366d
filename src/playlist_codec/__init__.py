"""Read and write PLS/M3U playlists."""

from playlist_codec.mrl import MediaReference, Mrl
from playlist_codec.playlist import MediaNameFilter, Playlist, PlaylistType, detect_type
from playlist_codec.playlist_io import load_playlist, save_playlist
from playlist_codec.playlist_store import load_from_store, save_to_store
from playlist_codec.settings_store import (
    MemorySettingsStore,
    SettingsStore,
    SQLiteSettingsStore,
)

__all__ = [
    "MediaNameFilter",
    "MediaReference",
    "MemorySettingsStore",
    "Mrl",
    "Playlist",
    "PlaylistType",
    "SQLiteSettingsStore",
    "SettingsStore",
    "detect_type",
    "load_from_store",
    "load_playlist",
    "save_playlist",
    "save_to_store",
]
