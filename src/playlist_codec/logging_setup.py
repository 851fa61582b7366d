"""Logging setup for the playlist-codec command line."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import os
from pathlib import Path
from typing import Optional

from playlist_codec.config import get_config_dir

LOG_LEVEL_ENV = "PLAYLIST_CODEC_LOG_LEVEL"
LOG_DIR_ENV = "PLAYLIST_CODEC_LOG_DIR"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def log_dir() -> Path:
    """Directory for log files: ``$PLAYLIST_CODEC_LOG_DIR`` or ``<config>/logs``."""
    override = os.getenv(LOG_DIR_ENV)
    if override:
        return Path(override)
    return get_config_dir() / "logs"


def resolve_level(value: Optional[str]) -> int:
    """Turn a level name or number into a logging level, INFO if invalid."""
    if not value:
        return logging.INFO
    value = value.strip()
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value.upper())
    return level if isinstance(level, int) else logging.INFO


def _is_console(handler: logging.Handler) -> bool:
    return isinstance(handler, logging.StreamHandler) and not isinstance(
        handler, logging.FileHandler
    )


def _make_file_handler(path: Path, level: int) -> RotatingFileHandler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path, maxBytes=2_000_000, backupCount=5, encoding="utf-8"
    )
    handler.setLevel(level)
    return handler


def init_logging(app_name: str = "playlist_codec") -> Path:
    """Attach a rotating log file and a stderr handler to the root logger.

    Calling it again does not add duplicate handlers. Returns the log file.
    """
    log_path = log_dir() / "playlist-codec.log"
    level = resolve_level(os.getenv(LOG_LEVEL_ENV))
    formatter = logging.Formatter(LOG_FORMAT)
    root = logging.getLogger()
    root.setLevel(level)

    if not any(isinstance(h, RotatingFileHandler) for h in root.handlers):
        try:
            file_handler = _make_file_handler(log_path, level)
        except OSError:
            logging.getLogger(app_name).warning(
                "Cannot write log file %s", log_path, exc_info=True
            )
        else:
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)

    if not any(_is_console(h) for h in root.handlers):
        console = logging.StreamHandler()
        # The console only carries problems; details go to the file.
        console.setLevel(max(level, logging.WARNING))
        console.setFormatter(formatter)
        root.addHandler(console)

    logging.getLogger(app_name).debug("Logging initialized at %s", log_path)
    return log_path


def set_console_level(level: int) -> None:
    """Adjust console (stderr) handler level."""
    for handler in logging.getLogger().handlers:
        if _is_console(handler):
            handler.setLevel(level)
