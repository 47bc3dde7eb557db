import time
from collections.abc import Callable, Sequence

from app.config.settings import Settings
from app.database.repositories.document_records_repository import DocumentRecordsRepository
from app.delivery.base import BaseDeliveryClient
from app.delivery.factory import DeliveryClientFactory
from app.logging.logger import Log
from app.processing.base import BaseProcessingClient
from app.processing.factory import ProcessingClientFactory
from app.processor.exceptions import BatchInProgressError
from app.processor.models import (
    ConnectionStatus,
    DeliveryResult,
    DocumentSummaryResult,
    ProcessingProgress,
    ProcessingStats,
    SummaryOptions,
    UploadedFile,
    new_id,
)
from app.processor.pipeline import PipelineContext, PipelineStep
from app.processor.progress import ProgressCallback, ProgressPublisher
from app.processor.steps import (
    DeliverSummariesStep,
    PersistRecordsStep,
    ProcessDocumentsStep,
    ReconcileDocumentsStep,
    ValidateBatchStep,
)
from app.summarization.summarizer import Summarizer


class DocumentSummaryService:
    """Orchestrates one batch through the processing pipeline.

    Pipeline: validate -> extract/summarize (collaborator) -> reconcile ->
    deliver (optional) -> persist. Every step reports progress through the
    shared publisher; a failure in any step ends the batch with an ``error``
    event and an unsuccessful result.
    """

    def __init__(
        self,
        *,
        steps: Sequence[PipelineStep],
        progress: ProgressPublisher,
        processing_client: BaseProcessingClient,
        delivery_client: BaseDeliveryClient | None = None,
        records_repo: DocumentRecordsRepository | None = None,
    ) -> None:
        self._steps = list(steps)
        self._progress = progress
        self._processing_client = processing_client
        self._delivery_client = delivery_client
        self._records_repo = records_repo
        self._busy = False
        self._last_result: DocumentSummaryResult | None = None

    @property
    def is_processing(self) -> bool:
        return self._busy

    @property
    def last_result(self) -> DocumentSummaryResult | None:
        return self._last_result

    @property
    def delivery_client(self) -> BaseDeliveryClient | None:
        return self._delivery_client

    def subscribe(self, callback: ProgressCallback) -> Callable[[], None]:
        return self._progress.subscribe(callback)

    def process_documents(
        self,
        files: Sequence[UploadedFile],
        options: SummaryOptions | None = None,
        batch_id: str | None = None,
    ) -> DocumentSummaryResult:
        """Run one batch and return its result.

        Raises:
            BatchInProgressError: if another batch is still running.
        """
        if self._busy:
            raise BatchInProgressError("Another batch is already being processed")

        self._busy = True
        started = time.monotonic()
        context = PipelineContext(
            batch_id=batch_id or new_id(),
            files=tuple(files),
            options=options or SummaryOptions(),
        )
        Log.info(f"Processing batch of {len(context.files)} file(s)", batch=context.batch_id)
        try:
            for step in self._steps:
                context = step.run(context)
        except Exception as exc:
            context.error_message = str(exc)
            Log.error(f"Document processing failed: {exc}", batch=context.batch_id)
            self._publish(context, "error", 0, "Processing failed", error=context.error_message)
            result = DocumentSummaryResult(
                documents=(),
                total_processing_time=_elapsed_ms(started),
                success=False,
                error=context.error_message,
            )
        else:
            self._publish(context, "complete", 100, "Processing complete!")
            result = DocumentSummaryResult(
                documents=tuple(context.documents),
                total_processing_time=_elapsed_ms(started),
                success=True,
                delivery=tuple(context.delivery) if context.delivery is not None else None,
            )
            Log.info(
                f"Batch complete: {len(result.documents)} document(s) "
                f"in {result.total_processing_time}ms",
                batch=context.batch_id,
            )
        finally:
            self._busy = False

        self._last_result = result
        return result

    def get_processing_stats(self) -> ProcessingStats:
        """Read record-store statistics; zeros when the store is unavailable."""
        if self._records_repo is None:
            return ProcessingStats()
        try:
            return self._records_repo.fetch_processing_stats()
        except Exception as exc:
            Log.warning(f"Failed to get stats: {exc}")
            return ProcessingStats()

    def test_processing_connection(self) -> ConnectionStatus:
        return self._processing_client.test_connection()

    def test_delivery_connection(self) -> ConnectionStatus:
        if self._delivery_client is None:
            return ConnectionStatus(False, _DELIVERY_NOT_CONFIGURED)
        return self._delivery_client.test_connection()

    def send_test_message(self, phone_number: str) -> DeliveryResult:
        if self._delivery_client is None:
            return DeliveryResult(
                success=False,
                phone_number=phone_number,
                timestamp=time.time(),
                error=_DELIVERY_NOT_CONFIGURED,
            )
        return self._delivery_client.send_test_message(phone_number)

    def close(self) -> None:
        """Close the processing and delivery collaborators."""
        self._processing_client.close()
        if self._delivery_client is not None:
            self._delivery_client.close()

    def _publish(
        self,
        context: PipelineContext,
        stage: str,
        progress: float,
        message: str,
        error: str | None = None,
    ) -> None:
        self._progress.publish(
            ProcessingProgress(
                stage=stage,
                progress=progress,
                message=message,
                error=error,
                batch_id=context.batch_id,
            )
        )


_DELIVERY_NOT_CONFIGURED = (
    "WhatsApp delivery not configured. Set WHATSAPP_PROVIDER and its credentials"
)


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


def build_service(
    settings: Settings,
    summarizer: Summarizer,
    records_repo: DocumentRecordsRepository | None = None,
    processing_client: BaseProcessingClient | None = None,
    delivery_client: BaseDeliveryClient | None = None,
) -> DocumentSummaryService:
    """Build a DocumentSummaryService with all required collaborators."""
    progress = ProgressPublisher()
    if processing_client is None:
        processing_client = ProcessingClientFactory.create(settings, summarizer)
    if delivery_client is None:
        delivery_client = DeliveryClientFactory.create(settings)
    steps: list[PipelineStep] = [
        ValidateBatchStep(
            progress,
            max_files=settings.max_files_per_session,
            max_file_size_bytes=settings.max_file_size_bytes,
        ),
        ProcessDocumentsStep(progress, processing_client),
        ReconcileDocumentsStep(progress),
        DeliverSummariesStep(progress, delivery_client),
        PersistRecordsStep(progress, records_repo),
    ]
    return DocumentSummaryService(
        steps=steps,
        progress=progress,
        processing_client=processing_client,
        delivery_client=delivery_client,
        records_repo=records_repo,
    )
