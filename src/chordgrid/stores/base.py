from abc import ABC, abstractmethod
from dataclasses import dataclass

SONG_SUFFIX = ".cho"


@dataclass
class StoredSong:
    """One entry of a store listing."""

    id: str  # key without the .cho suffix
    key: str
    last_modified: str | None = None
    size: int | None = None


def normalize_key(key: str) -> str:
    """Return *key* with the ``.cho`` suffix every stored song carries."""
    key = key.strip().lstrip("/")
    return key if key.endswith(SONG_SUFFIX) else f"{key}{SONG_SUFFIX}"


def song_id(key: str) -> str:
    return key[: -len(SONG_SUFFIX)] if key.endswith(SONG_SUFFIX) else key


class SongStore(ABC):
    """Abstract base class for places songs are kept."""

    @classmethod
    @abstractmethod
    def can_handle(cls, location: str) -> bool:
        """Return True if this store can serve the given location."""

    @classmethod
    def from_location(cls, location: str) -> "SongStore":
        """Instantiate the store for *location*."""
        return cls(location)

    @abstractmethod
    def get(self, key: str) -> str:
        """Return the ChordPro text stored under *key*.

        Raises SongNotFoundError if there is none, StorageError on other failures.
        """

    @abstractmethod
    def put(self, key: str, content: str) -> None:
        """Store *content* under *key*, replacing any previous version."""

    @abstractmethod
    def list(self) -> list[StoredSong]:
        """Return every stored song, ordered by key."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove *key*."""
