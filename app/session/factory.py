from pathlib import Path

from app.config.settings import Settings
from app.session.base import BaseSessionBackend
from app.session.file_backend import FileSessionBackend
from app.session.memory_backend import MemorySessionBackend


class SessionBackendFactory:
    """Creates the session backend for the configured session directory."""

    @classmethod
    def create(cls, settings: Settings) -> BaseSessionBackend:
        if not settings.session_dir:
            return MemorySessionBackend()
        return FileSessionBackend(Path(settings.session_dir), settings.session_id)
