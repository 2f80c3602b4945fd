"""Song store behind a presigned-URL API.

The API is a single endpoint taking JSON ``POST`` bodies:

    {"operation": "list"}                      → {"songs": [{id, key, lastModified, size}]}
    {"operation": "get", "key": "x.cho"}       → {"url": ..., "key": ..., "expiresIn": ...}
    {"operation": "put", "key": "x.cho",
     "contentType": "text/plain; charset=utf-8"} → {"url": ..., "key": ..., "expiresIn": ...}
    {"operation": "delete", "key": "x.cho"}    → {"success": true}

Failed requests answer with a non-2xx status and ``{"error": "<message>"}``.
Song content itself never passes through the API: it is downloaded from or
uploaded to the returned presigned URL.
"""

import logging

import httpx

from ..exceptions import ConfigurationError, SongNotFoundError, StorageError
from .base import SongStore, StoredSong, normalize_key

logger = logging.getLogger(__name__)

CONTENT_TYPE = "text/plain; charset=utf-8"
TIMEOUT = 15


class ApiSongStore(SongStore):
    """Songs kept behind an HTTP API that hands out presigned URLs."""

    def __init__(self, endpoint: str, client: httpx.Client | None = None):
        if not endpoint:
            raise ConfigurationError(
                "API endpoint not configured. Set the CHORDGRID_API_ENDPOINT environment variable."
            )
        self.endpoint = endpoint
        self.client = client or httpx.Client(follow_redirects=True, timeout=TIMEOUT)

    @classmethod
    def can_handle(cls, location: str) -> bool:
        return location.startswith(("http://", "https://"))

    def _call(self, key: str, body: dict) -> dict:
        """POST *body* to the API and return its JSON answer."""
        try:
            resp = self.client.post(self.endpoint, json=body)
        except httpx.RequestError as exc:
            raise StorageError(key, 0, str(exc)) from exc

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if resp.status_code == 404:
            raise SongNotFoundError(key)
        if not resp.is_success:
            raise StorageError(key, resp.status_code, data.get("error") or "API request failed")
        return data

    def _presigned_url(self, key: str, data: dict) -> str:
        url = data.get("url")
        if not url:
            raise StorageError(key, 0, "API response has no presigned URL")
        return url

    def get(self, key: str) -> str:
        key = normalize_key(key)
        url = self._presigned_url(key, self._call(key, {"operation": "get", "key": key}))
        logger.info("downloading %s", key)
        try:
            resp = self.client.get(url)
        except httpx.RequestError as exc:
            raise StorageError(key, 0, str(exc)) from exc
        if resp.status_code in (403, 404):
            # object storage answers 403 for missing keys on presigned GETs
            raise SongNotFoundError(key)
        if not resp.is_success:
            raise StorageError(key, resp.status_code, resp.reason_phrase)
        return resp.text

    def put(self, key: str, content: str) -> None:
        key = normalize_key(key)
        body = {"operation": "put", "key": key, "contentType": CONTENT_TYPE}
        url = self._presigned_url(key, self._call(key, body))
        logger.info("uploading %s (%d bytes)", key, len(content.encode("utf-8")))
        try:
            resp = self.client.put(url, content=content.encode("utf-8"), headers={"Content-Type": CONTENT_TYPE})
        except httpx.RequestError as exc:
            raise StorageError(key, 0, str(exc)) from exc
        if not resp.is_success:
            raise StorageError(key, resp.status_code, resp.reason_phrase)

    def delete(self, key: str) -> None:
        key = normalize_key(key)
        logger.info("deleting %s", key)
        self._call(key, {"operation": "delete", "key": key})

    def list(self) -> list[StoredSong]:
        data = self._call("", {"operation": "list"})
        songs = [
            StoredSong(
                id=entry.get("id") or "",
                key=entry.get("key") or "",
                last_modified=entry.get("lastModified"),
                size=entry.get("size"),
            )
            for entry in data.get("songs") or []
        ]
        return sorted(songs, key=lambda s: s.key)
