from collections.abc import Callable

from app.logging.logger import Log
from app.processor.models import ProcessingProgress

ProgressCallback = Callable[[ProcessingProgress], None]


class ProgressPublisher:
    """Observer list for progress events."""

    def __init__(self) -> None:
        self._subscribers: list[ProgressCallback] = []

    def subscribe(self, callback: ProgressCallback) -> Callable[[], None]:
        """Register callback; the returned callable unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, progress: ProcessingProgress) -> None:
        Log.debug(
            f"Progress {progress.stage} {progress.progress:.0f}%: {progress.message}",
            batch=progress.batch_id,
        )
        for callback in list(self._subscribers):
            callback(progress)
