import time

from app.database.repositories.document_records_repository import DocumentRecordsRepository
from app.delivery.base import BaseDeliveryClient
from app.logging.logger import Log
from app.processing.base import BaseProcessingClient
from app.processing.models import ProcessingRequest
from app.processor.exceptions import PersistenceWriteError
from app.processor.models import DeliveryResult
from app.processor.pipeline import PipelineContext, PipelineStep
from app.processor.progress import ProgressPublisher
from app.processor.validator import validate_batch


class ValidateBatchStep(PipelineStep):
    def __init__(
        self,
        progress: ProgressPublisher,
        *,
        max_files: int,
        max_file_size_bytes: int,
    ) -> None:
        super().__init__(progress)
        self._max_files = max_files
        self._max_file_size_bytes = max_file_size_bytes

    def run(self, context: PipelineContext) -> PipelineContext:
        self.report(context, "uploading", 10, "Validating and preparing files...")
        validate_batch(
            context.files,
            context.options,
            max_files=self._max_files,
            max_file_size_bytes=self._max_file_size_bytes,
        )
        Log.info(f"Validated {len(context.files)} file(s)", batch=context.batch_id)
        return context


class ProcessDocumentsStep(PipelineStep):
    """Hands each file to the processing collaborator, one call per file."""

    def __init__(self, progress: ProgressPublisher, client: BaseProcessingClient) -> None:
        super().__init__(progress)
        self._client = client

    def run(self, context: PipelineContext) -> PipelineContext:
        self.report(context, "extracting", 30, "Extracting text from documents...")
        phone_number = context.options.phone_number if context.options.send_to_whatsapp else None
        total = len(context.files)
        for index, upload in enumerate(context.files):
            self.report(
                context,
                "extracting",
                30 + index / total * 30,
                f"Extracting text from {upload.name}...",
                upload=upload,
            )
            response = self._client.process_documents(
                ProcessingRequest(
                    files=(upload,),
                    options=context.options,
                    phone_number=phone_number,
                )
            )
            context.documents.extend(response.documents)
            if response.whatsapp_delivery is not None:
                context.remote_deliveries.append(response.whatsapp_delivery)
        Log.info(
            f"Processing collaborator returned {len(context.documents)} document(s)",
            batch=context.batch_id,
        )
        return context


class ReconcileDocumentsStep(PipelineStep):
    """Keeps only results whose filename matches a submitted file."""

    def run(self, context: PipelineContext) -> PipelineContext:
        self.report(context, "summarizing", 70, "Collecting summaries...")
        submitted = {upload.name for upload in context.files}
        matched = []
        for document in context.documents:
            if document.filename in submitted:
                matched.append(document)
            else:
                Log.debug(
                    f"Dropping result for unknown file {document.filename!r}",
                    batch=context.batch_id,
                )
        context.documents = matched
        return context


class DeliverSummariesStep(PipelineStep):
    def __init__(
        self,
        progress: ProgressPublisher,
        delivery_client: BaseDeliveryClient | None,
    ) -> None:
        super().__init__(progress)
        self._delivery_client = delivery_client

    def run(self, context: PipelineContext) -> PipelineContext:
        options = context.options
        if not options.send_to_whatsapp or not options.phone_number:
            return context

        self.report(context, "sending", 85, "Sending summaries to WhatsApp...")
        if context.remote_deliveries:
            context.delivery = [
                DeliveryResult(
                    success=remote.success,
                    phone_number=options.phone_number,
                    timestamp=time.time(),
                    message_id=remote.message_id,
                    error=remote.error,
                )
                for remote in context.remote_deliveries
            ]
        elif self._delivery_client is not None:
            context.delivery = self._delivery_client.send_multiple_summaries(
                options.phone_number, context.documents
            )
        else:
            Log.warning("WhatsApp delivery requested but no delivery client is configured")
            return context

        delivered = sum(result.success for result in context.delivery)
        Log.info(
            f"Delivery finished: {delivered}/{len(context.delivery)} message(s) sent",
            batch=context.batch_id,
        )
        return context


class PersistRecordsStep(PipelineStep):
    """Writes metadata and summaries; failures are logged and never raised."""

    def __init__(
        self,
        progress: ProgressPublisher,
        records_repo: DocumentRecordsRepository | None,
    ) -> None:
        super().__init__(progress)
        self._records_repo = records_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if self._records_repo is None:
            return context
        for document in context.documents:
            try:
                self._records_repo.insert_document(document)
            except PersistenceWriteError as exc:
                Log.error(f"Failed to save document: {exc}", batch=context.batch_id)
            try:
                self._records_repo.insert_summary(document)
            except PersistenceWriteError as exc:
                Log.error(f"Failed to save summary: {exc}", batch=context.batch_id)
        return context
