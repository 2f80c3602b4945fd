"""Song store resolution.

A store location comes from ``--store`` or from the settings
(``CHORDGRID_STORE``, else ``CHORDGRID_API_ENDPOINT``, else ``.``)::

    https://api.example.com/songs  → ApiSongStore
    file:///srv/songs              → FileSongStore("/srv/songs")
    songs/                         → FileSongStore("songs/")

Stores are tried in order and the first whose ``can_handle`` accepts the
location wins, so URL schemes are claimed before the directory fallback.
"""

from .exceptions import UnsupportedStoreError
from .stores.api import ApiSongStore
from .stores.base import SongStore
from .stores.filesystem import FileSongStore

_STORES: list[type[SongStore]] = [
    ApiSongStore,
    FileSongStore,
]


def get_store(location: str) -> SongStore:
    """Return the song store that serves *location*.

    Raises UnsupportedStoreError if no store matches.
    """
    for cls in _STORES:
        if cls.can_handle(location):
            return cls.from_location(location)
    raise UnsupportedStoreError(location)
