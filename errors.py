"""Error types raised across the spelling game."""

from typing import Optional


class SpellingGameError(Exception):
    """Base class for all game errors."""


class ValidationError(SpellingGameError):
    """User input was rejected (empty word, no image)."""


class AssetFetchError(SpellingGameError):
    """An image URL could not be turned into an inline image."""


class RemoteSyncError(SpellingGameError):
    """A call to the remote document store failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
