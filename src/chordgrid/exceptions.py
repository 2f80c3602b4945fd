class ChordGridError(Exception):
    """Base exception for chordgrid."""


class ProtectedContentError(ChordGridError):
    """Raised when an edit would discard lyrics attached to a measure."""

    def __init__(self, measure_index: int):
        self.measure_index = measure_index
        super().__init__(f"Measure {measure_index + 1} carries lyrics and cannot be deleted")


class StorageError(ChordGridError):
    """Raised when a song store request fails."""

    def __init__(self, key: str, status_code: int, reason: str = ""):
        self.key = key
        self.status_code = status_code
        self.reason = reason
        message = f"Storage error for {key}"
        if status_code:
            message += f" (HTTP {status_code})"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class SongNotFoundError(StorageError):
    """Raised when a song key does not exist in the store."""

    def __init__(self, key: str):
        super().__init__(key, 404, "song not found")


class ConfigurationError(ChordGridError):
    """Raised when a required setting is missing or invalid."""


class UnsupportedStoreError(ChordGridError):
    """Raised when no store matches the given location."""

    def __init__(self, location: str):
        self.location = location
        super().__init__(f"No song store found for location: {location}")
