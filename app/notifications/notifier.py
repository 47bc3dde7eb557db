from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass

from app.logging.logger import Log


@dataclass(frozen=True)
class Notification:
    level: str  # "success" or "error"
    message: str


class BaseNotifier(ABC):
    """User-facing success/error channel."""

    @abstractmethod
    def success(self, message: str) -> None: ...

    @abstractmethod
    def error(self, message: str) -> None: ...


class LogNotifier(BaseNotifier):
    """Writes notifications to the application log and keeps the latest ones."""

    def __init__(self, history_size: int = 100) -> None:
        self.history: deque[Notification] = deque(maxlen=history_size)

    def success(self, message: str) -> None:
        self.history.append(Notification("success", message))
        Log.info(f"[notify] {message}")

    def error(self, message: str) -> None:
        self.history.append(Notification("error", message))
        Log.error(f"[notify] {message}")
