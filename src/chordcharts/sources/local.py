"""Chopro files on the local filesystem."""

from pathlib import Path

from ..exceptions import SourceError
from .base import SongSource


class LocalFileSource(SongSource):
    """Reads UTF-8 chopro files by path."""

    @classmethod
    def can_handle(cls, location: str) -> bool:
        return "://" not in location

    def fetch(self, location: str) -> str:
        try:
            return Path(location).read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceError(location, str(exc)) from exc
