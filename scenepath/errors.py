"""Error types raised by the ScenePath core."""

from typing import Optional


class ScenePathError(Exception):
    """Base class for ScenePath errors"""


class ProviderUnavailable(ScenePathError):
    """A directions or POI provider failed, timed out or returned garbage."""


class StoreWriteFailed(ScenePathError):
    """Committing a collected item to the store failed."""


class StoreReadFailed(ScenePathError):
    """Loading collected items from the store failed."""


class AlreadyCollected(ScenePathError):
    """The point (or one within the duplicate radius, same category) was already collected.

    Not a fault: a normal negative result of a collect attempt.
    """

    def __init__(self, message: str, existing: Optional[object] = None):
        super().__init__(message)
        self.existing = existing
