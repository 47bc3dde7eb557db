import json
from pathlib import Path

from app.processor.exceptions import SessionStorageError
from app.session.base import BaseSessionBackend


def session_file_path(session_dir: Path, session_id: str) -> Path:
    """Build path to a session file: {session_dir}/{session_id}.json"""
    return session_dir / f"{session_id}.json"


class FileSessionBackend(BaseSessionBackend):
    """Keeps all keys of one session in a single JSON object on disk.

    Two processes sharing a session id overwrite each other; the last writer wins.
    """

    def __init__(self, session_dir: Path, session_id: str) -> None:
        self._path = session_file_path(session_dir, session_id)

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        items = self._read()
        items[key] = value
        self._write(items)

    def delete(self, key: str) -> None:
        items = self._read()
        if key in items:
            del items[key]
            self._write(items)

    def _read(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise SessionStorageError(f"Failed to read session file {self._path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise SessionStorageError(f"Session file {self._path} must hold a JSON object")
        return {str(k): str(v) for k, v in raw.items()}

    def _write(self, items: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(items), encoding="utf-8")
        except OSError as exc:
            raise SessionStorageError(f"Failed to write session file {self._path}: {exc}") from exc
