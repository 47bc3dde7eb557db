from abc import ABC, abstractmethod


class BaseSessionBackend(ABC):
    """Contract for session-scoped key/value text storage."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored text for key, or None when absent.

        Raises:
            SessionStorageError: if the backend cannot be read.
        """

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store text under key.

        Raises:
            SessionStorageError: if the backend cannot be written.
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key. Missing keys are ignored."""
