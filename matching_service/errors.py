"""
Exceptions raised by the matching engine and its store.
"""


class MatchingError(Exception):
    """Base class for matching engine errors."""


class PreferencesNotFoundError(MatchingError):
    """Raised when a user has not saved any preferences yet."""

    def __init__(self, user_id: str):
        super().__init__(f"Preferences not found for user {user_id}")
        self.user_id = user_id


class MatchingStoreError(MatchingError):
    """Raised when the backing store cannot be read."""
