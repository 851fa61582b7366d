"""Configuration persistence for playlist-codec."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

DEFAULT_MEDIA_EXTENSIONS = (
    ".mp3",
    ".flac",
    ".wav",
    ".ogg",
    ".oga",
    ".opus",
    ".m4a",
    ".aac",
    ".wma",
    ".ape",
    ".mka",
    ".mkv",
    ".mp4",
    ".m4v",
    ".avi",
    ".mov",
    ".wmv",
    ".webm",
    ".mpg",
    ".mpeg",
    ".ts",
    ".flv",
)
PLAYLIST_FORMATS = ("pls", "m3u", "m3u8")


@dataclass(frozen=True)
class CodecConfig:
    """Immutable user configuration loaded from disk."""

    default_encoding: Optional[str] = None
    default_format: str = "m3u8"
    media_extensions: tuple[str, ...] = DEFAULT_MEDIA_EXTENSIONS


def get_config_dir(app_name: str = "playlist-codec") -> Path:
    """Return the per-user config directory for the current platform."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            root = Path(base)
        else:
            root = Path.home() / "AppData" / "Roaming"
        return _ensure_dir(root / app_name)
    elif os.name == "posix":
        if _is_macos():
            return _ensure_dir(
                Path.home() / "Library" / "Application Support" / app_name
            )
        base = os.environ.get("XDG_CONFIG_HOME")
        root = Path(base) if base else Path.home() / ".config"
        return _ensure_dir(root / app_name)
    else:
        return _ensure_dir(Path.home() / ".config" / app_name)


def load_config() -> CodecConfig:
    """Load configuration from disk, falling back to defaults on error."""
    path = get_config_path()
    if not path.exists():
        return CodecConfig()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.exception("Failed to load config from %s", path)
        return CodecConfig()
    if not isinstance(raw, dict):
        return CodecConfig()
    return _config_from_mapping(raw)


def save_config(cfg: CodecConfig) -> None:
    """Persist configuration to disk atomically."""
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_suffix(".tmp")
    data = {
        "default_encoding": cfg.default_encoding,
        "default_format": cfg.default_format,
        "media_extensions": list(cfg.media_extensions),
    }
    temp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    os.replace(temp_path, path)


def get_config_path() -> Path:
    """Return the full config file path."""
    return get_config_dir() / "config.json"


def _ensure_dir(path: Path) -> Path:
    """Create the directory if needed and return the path."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def _is_macos() -> bool:
    """Return True when running on macOS."""
    return os.uname().sysname == "Darwin" if hasattr(os, "uname") else False  # pyright: ignore[reportAttributeAccessIssue]


def _get_str(
    raw: dict[str, Any],
    key: str,
    default: str,
    *,
    allowed: tuple[str, ...] | None = None,
) -> str:
    """Fetch a non-empty string value, optionally restricted to ``allowed``."""
    value = raw.get(key, default)
    if not isinstance(value, str) or not value:
        return default
    value = value.strip().lower() if allowed else value
    if allowed and value not in allowed:
        return default
    return value


def _get_extensions(raw: dict[str, Any], key: str) -> tuple[str, ...]:
    """Fetch a list of file extensions, normalised to ``.ext`` lower case."""
    value = raw.get(key)
    if not isinstance(value, list):
        return DEFAULT_MEDIA_EXTENSIONS
    extensions: list[str] = []
    for item in value:
        if not isinstance(item, str) or not item.strip(" .*"):
            continue
        ext = "." + item.strip().lstrip("*").lstrip(".").lower()
        if ext not in extensions:
            extensions.append(ext)
    return tuple(extensions) or DEFAULT_MEDIA_EXTENSIONS


def _config_from_mapping(raw: dict[str, Any]) -> CodecConfig:
    """Normalize raw JSON data into a CodecConfig."""
    encoding = raw.get("default_encoding")
    if encoding is not None and (not isinstance(encoding, str) or not encoding):
        encoding = None
    return CodecConfig(
        default_encoding=encoding,
        default_format=_get_str(
            raw, "default_format", "m3u8", allowed=PLAYLIST_FORMATS
        ),
        media_extensions=_get_extensions(raw, "media_extensions"),
    )
