from app.config.settings import Settings
from app.extraction.factory import ExtractorFactory
from app.processing.base import BaseProcessingClient
from app.processing.local_client import LocalProcessingClient
from app.processing.webhook_client import WebhookProcessingClient
from app.summarization.summarizer import Summarizer


class ProcessingClientFactory:
    """Creates the configured processing backend."""

    BACKENDS = ("webhook", "local")

    @classmethod
    def create(cls, settings: Settings, summarizer: Summarizer) -> BaseProcessingClient:
        backend = settings.processing_backend.lower()
        if backend == "webhook":
            return WebhookProcessingClient(
                webhook_url=settings.processing_webhook_url,
                timeout_seconds=settings.processing_webhook_timeout_seconds,
            )
        if backend == "local":
            return LocalProcessingClient(ExtractorFactory.from_settings(settings), summarizer)
        raise ValueError(
            f"Unknown processing backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
        )
