"""Typed JSON blob cache over a session backend."""

import json
from collections.abc import Callable
from typing import Any, TypeVar

from app.logging.logger import Log
from app.processor.exceptions import SessionStorageError
from app.session.base import BaseSessionBackend

T = TypeVar("T")

FILES_KEY = "docsummary_processing_files"
PROGRESS_KEY = "docsummary_current_progress"
LAST_RESULT_KEY = "docsummary_last_result"
SESSION_KEYS = (FILES_KEY, PROGRESS_KEY, LAST_RESULT_KEY)


class SessionStore:
    """save/load/clear small JSON values; never raises on storage trouble."""

    def __init__(self, backend: BaseSessionBackend) -> None:
        self._backend = backend

    def save(self, key: str, value: Any) -> None:
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as exc:
            Log.warning(f"Failed to serialize session value: {exc}", key=key)
            return
        try:
            self._backend.set(key, payload)
        except SessionStorageError as exc:
            Log.warning(f"Failed to save to session storage: {exc}", key=key)

    def load(self, key: str, factory: Callable[[Any], T] | None = None) -> T | Any | None:
        """Return the stored value, or None when missing or corrupt."""
        try:
            payload = self._backend.get(key)
        except SessionStorageError as exc:
            Log.warning(f"Failed to load from session storage: {exc}", key=key)
            return None
        if payload is None:
            return None
        try:
            value = json.loads(payload)
            if value is None or factory is None:
                return value
            return factory(value)
        except (ValueError, TypeError, KeyError) as exc:
            Log.warning(f"Discarding corrupt session value: {exc}", key=key)
            return None

    def clear(self, key: str) -> None:
        try:
            self._backend.delete(key)
        except SessionStorageError as exc:
            Log.warning(f"Failed to clear session storage: {exc}", key=key)

    def clear_all(self) -> None:
        for key in SESSION_KEYS:
            self.clear(key)
