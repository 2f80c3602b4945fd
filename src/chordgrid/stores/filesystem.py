"""Song store backed by a local directory of ``.cho`` files."""

import logging
from datetime import datetime, timezone
from pathlib import Path

from ..exceptions import SongNotFoundError, StorageError
from .base import SongStore, StoredSong, normalize_key, song_id

logger = logging.getLogger(__name__)


class FileSongStore(SongStore):
    """Songs kept as ``<root>/<key>.cho`` files."""

    def __init__(self, root: str | Path = "."):
        self.root = Path(root)

    @classmethod
    def can_handle(cls, location: str) -> bool:
        return "://" not in location or location.startswith("file://")

    @classmethod
    def from_location(cls, location: str) -> "FileSongStore":
        return cls(location.removeprefix("file://") or ".")

    def _path(self, key: str) -> Path:
        path = (self.root / normalize_key(key)).resolve()
        if not path.is_relative_to(self.root.resolve()):
            raise StorageError(key, 0, "key escapes the store directory")
        return path

    def get(self, key: str) -> str:
        path = self._path(key)
        if not path.is_file():
            raise SongNotFoundError(normalize_key(key))
        logger.info("reading %s", path)
        return path.read_text(encoding="utf-8")

    def put(self, key: str, content: str) -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("writing %s", path)
        path.write_text(content, encoding="utf-8")

    def delete(self, key: str) -> None:
        path = self._path(key)
        if not path.is_file():
            raise SongNotFoundError(normalize_key(key))
        logger.info("deleting %s", path)
        path.unlink()

    def list(self) -> list[StoredSong]:
        songs = []
        for path in sorted(self.root.rglob("*.cho")):
            key = path.relative_to(self.root).as_posix()
            stat = path.stat()
            modified = datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat()
            songs.append(StoredSong(id=song_id(key), key=key, last_modified=modified, size=stat.st_size))
        return songs
