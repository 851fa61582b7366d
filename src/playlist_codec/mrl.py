"""Media resource locators."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
import re
from typing import Protocol
from urllib.parse import unquote, urlsplit
from urllib.request import url2pathname

_SCHEME_RE = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*):")


class MediaReference(Protocol):
    """What the playlist code needs from a media reference."""

    @property
    def name(self) -> str: ...

    def is_empty(self) -> bool: ...

    def is_local_file(self) -> bool: ...

    def to_string(self) -> str: ...

    def to_local_file(self) -> str: ...


@dataclass(frozen=True)
class Mrl:
    """A local path or URI with an optional display name."""

    location: str = ""
    name: str = ""

    @classmethod
    def from_path(cls, path: Path | str, name: str = "") -> Mrl:
        return cls(location=os.fspath(path), name=name)

    @property
    def scheme(self) -> str:
        match = _SCHEME_RE.match(self.location)
        if match is None:
            return ""
        scheme = match.group(1).lower()
        # "C:\music" is a drive letter, not a scheme.
        if len(scheme) == 1:
            return ""
        return scheme

    @property
    def file_name(self) -> str:
        if self.is_local_file():
            return Path(self.to_local_file()).name
        path = urlsplit(self.location).path.rstrip("/")
        return unquote(path.rsplit("/", 1)[-1])

    def is_empty(self) -> bool:
        return not self.location

    def is_local_file(self) -> bool:
        if self.is_empty():
            return False
        return self.scheme in ("", "file")

    def to_string(self) -> str:
        return self.location

    def to_local_file(self) -> str:
        if not self.is_local_file():
            return ""
        if self.scheme == "file":
            return url2pathname(urlsplit(self.location).path)
        return self.location

    def __str__(self) -> str:
        return self.location
