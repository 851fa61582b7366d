"""Persist playlists as indexed arrays in a settings store."""

from __future__ import annotations

import logging

from playlist_codec.mrl import Mrl
from playlist_codec.playlist import Playlist
from playlist_codec.settings_store import SettingsStore

logger = logging.getLogger(__name__)

MRL_KEY = "mrl"
NAME_KEY = "name"


def save_to_store(name: str, playlist: Playlist, store: SettingsStore) -> None:
    """Write ``playlist`` as the array ``name``, one element per entry."""
    store.begin_write_array(name, len(playlist))
    for index, mrl in enumerate(playlist):
        store.set_array_index(index)
        store.set_value(MRL_KEY, mrl.to_string())
        store.set_value(NAME_KEY, mrl.name)
    store.end_array()


def load_from_store(name: str, store: SettingsStore) -> Playlist:
    """Read the array ``name`` back; elements without a location are skipped."""
    playlist = Playlist()
    size = store.begin_read_array(name)
    for index in range(size):
        store.set_array_index(index)
        mrl = Mrl(
            _as_text(store.value(MRL_KEY, "")),
            _as_text(store.value(NAME_KEY, "")),
        )
        if mrl.is_empty():
            logger.debug("Skipping empty entry %d in %s", index, name)
            continue
        playlist.append(mrl)
    store.end_array()
    return playlist


def _as_text(value: object) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)
