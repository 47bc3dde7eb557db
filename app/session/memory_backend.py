from app.processor.exceptions import SessionStorageError
from app.session.base import BaseSessionBackend


class MemorySessionBackend(BaseSessionBackend):
    """Process-local session storage. Lost when the process exits."""

    def __init__(self, quota_bytes: int | None = None) -> None:
        self._items: dict[str, str] = {}
        self._quota_bytes = quota_bytes

    def get(self, key: str) -> str | None:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        if self._quota_bytes is not None:
            used = sum(len(v) for k, v in self._items.items() if k != key)
            if used + len(value) > self._quota_bytes:
                raise SessionStorageError(
                    f"Session quota of {self._quota_bytes} bytes exceeded writing '{key}'"
                )
        self._items[key] = value

    def delete(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)
