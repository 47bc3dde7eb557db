"""Observable per-file processing state for a UI or CLI front end."""

from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import Any

from app.chat.document_chat import ChatAnswer, DocumentChat
from app.chat.exceptions import ChatError
from app.delivery.phone import is_valid_phone_number
from app.logging.logger import Log
from app.notifications.notifier import BaseNotifier
from app.processor.exceptions import BatchInProgressError
from app.processor.models import (
    FAILED,
    ConnectionStatus,
    DeliveryResult,
    DocumentSummaryResult,
    ProcessedDocument,
    ProcessingFile,
    ProcessingProgress,
    ProcessingStats,
    SummaryDocument,
    SummaryOptions,
    UploadedFile,
    new_id,
    status_for_stage,
)
from app.processor.processor import DocumentSummaryService
from app.session.store import FILES_KEY, LAST_RESULT_KEY, PROGRESS_KEY, SessionStore


@dataclass(frozen=True)
class FileStats:
    total: int
    uploading: int
    extracting: int
    summarizing: int
    sending: int
    completed: int
    failed: int

    @property
    def in_progress(self) -> int:
        return self.uploading + self.extracting + self.summarizing + self.sending


def _files_from_raw(raw: Any) -> list[ProcessingFile]:
    if not isinstance(raw, list):
        raise ValueError("Stored file list must be a JSON array")
    return [ProcessingFile.from_dict(item) for item in raw]


class ProcessingState:
    """Tracks every queued file and mirrors the state into the session store.

    Progress events are routed by (batch id, file id): events from any batch
    other than the active one are ignored, events naming a file update only
    that file, and the rest apply to every file of the active batch.
    """

    def __init__(
        self,
        service: DocumentSummaryService,
        store: SessionStore,
        notifier: BaseNotifier,
        chat: DocumentChat | None = None,
        summary_documents_enabled: bool = True,
    ) -> None:
        self._service = service
        self._store = store
        self._notifier = notifier
        self._chat = chat
        self._summary_documents_enabled = summary_documents_enabled

        self._files: list[ProcessingFile] = store.load(FILES_KEY, _files_from_raw) or []
        self._current_progress: ProcessingProgress | None = store.load(
            PROGRESS_KEY, ProcessingProgress.from_dict
        )
        self._last_result: DocumentSummaryResult | None = store.load(
            LAST_RESULT_KEY, DocumentSummaryResult.from_dict
        )
        self._is_processing = False
        self._active_batch_id: str | None = None
        self._unsubscribe = service.subscribe(self._on_progress)

    @property
    def files(self) -> list[ProcessingFile]:
        return list(self._files)

    @property
    def is_processing(self) -> bool:
        return self._is_processing

    @property
    def current_progress(self) -> ProcessingProgress | None:
        return self._current_progress

    @property
    def last_result(self) -> DocumentSummaryResult | None:
        return self._last_result

    def close(self) -> None:
        """Stop listening to the service's progress events."""
        self._unsubscribe()

    def add_files(
        self,
        uploads: list[UploadedFile],
        options: SummaryOptions | None = None,
    ) -> DocumentSummaryResult | None:
        """Queue a batch, process it and fold the outcome into the file list."""
        if self._is_processing or self._service.is_processing:
            self._notifier.error("A batch is already being processed")
            return None

        batch_id = new_id()
        batch = [ProcessingFile(id=u.id, batch_id=batch_id, file=u) for u in uploads]
        self._files.extend(batch)
        self._save_files()
        self._is_processing = True
        self._active_batch_id = batch_id

        try:
            result = self._service.process_documents(uploads, options, batch_id=batch_id)
        except BatchInProgressError as exc:
            self._fail_batch(batch_id, str(exc))
            self._notifier.error(str(exc))
            return None
        finally:
            self._is_processing = False
            self._active_batch_id = None
            self._set_progress(None)

        self._last_result = result
        self._store.save(LAST_RESULT_KEY, result.to_dict())

        if result.success:
            self._complete_batch(batch_id, result)
            self._notifier.success(
                f"Successfully processed {len(result.documents)} document(s)"
            )
        else:
            self._fail_batch(batch_id, result.error or "Processing failed")
            self._notifier.error(f"Processing failed: {result.error}")
        return result

    def process_and_send(
        self,
        uploads: list[UploadedFile],
        phone_number: str,
        options: SummaryOptions | None = None,
    ) -> DocumentSummaryResult | None:
        """add_files with WhatsApp delivery to phone_number."""
        full_options = replace(
            options or SummaryOptions(), send_to_whatsapp=True, phone_number=phone_number
        )
        return self.add_files(uploads, full_options)

    def send_to_delivery(self, phone_number: str) -> list[DeliveryResult] | None:
        """Resend completed summaries straight through the delivery collaborator."""
        completed = [f for f in self._files if f.status == "completed" and f.summary]
        if not completed:
            self._notifier.error("No completed summaries to send")
            return None

        client = self._service.delivery_client
        if client is None:
            self._notifier.error("WhatsApp delivery is not configured")
            return None

        documents = [
            ProcessedDocument(
                id=f.id,
                filename=f.file.name,
                file_type=f.file.content_type,
                summary=f.summary or "",
                word_count=f.word_count or 0,
                processing_time=f.processing_time or 0,
            )
            for f in completed
        ]
        self._is_processing = True
        try:
            results = client.send_multiple_summaries(phone_number, documents)
        except Exception as exc:
            Log.error(f"Failed to send summaries: {exc}")
            self._notifier.error(f"Failed to send to WhatsApp: {exc}")
            return None
        finally:
            self._is_processing = False

        failed = [r for r in results if not r.success]
        if failed:
            self._notifier.error(
                f"Failed to send {len(failed)} of {len(results)} message(s): {failed[0].error}"
            )
        else:
            noun = "summary" if len(completed) == 1 else "summaries"
            self._notifier.success(
                f"Successfully sent {len(completed)} {noun} to {phone_number}"
            )
        return results

    def test_delivery_connection(self) -> ConnectionStatus:
        status = self._service.test_delivery_connection()
        if status.success:
            self._notifier.success("WhatsApp connection is working!")
        else:
            self._notifier.error(f"WhatsApp connection failed: {status.error}")
        return status

    def send_test_message(self, phone_number: str) -> DeliveryResult:
        result = self._service.send_test_message(phone_number)
        if result.success:
            self._notifier.success(f"Test message sent to {phone_number}")
        else:
            self._notifier.error(f"Failed to send test message: {result.error}")
        return result

    def remove_file(self, file_id: str) -> bool:
        remaining = [f for f in self._files if f.id != file_id]
        removed = len(remaining) != len(self._files)
        self._files = remaining
        self._save_files()
        return removed

    def clear_files(self) -> None:
        self._files = []
        self._save_files()
        self._set_progress(None)
        self._last_result = None
        self._store.clear(LAST_RESULT_KEY)

    def clear_all_data(self) -> None:
        self._files = []
        self._current_progress = None
        self._last_result = None
        self._store.clear_all()
        self._notifier.success("All data cleared")

    def get_stats(self) -> FileStats:
        counts = {status: 0 for status in ("uploading", "extracting", "summarizing", "sending")}
        counts.update(completed=0, failed=0)
        for f in self._files:
            counts[f.status] = counts.get(f.status, 0) + 1
        return FileStats(total=len(self._files), **counts)

    def get_processing_stats(self) -> ProcessingStats:
        return self._service.get_processing_stats()

    @staticmethod
    def validate_phone_number(phone_number: str) -> bool:
        return is_valid_phone_number(phone_number)

    def generate_summary_document(
        self,
        file_id: str,
        output_dir: Path | None = None,
    ) -> SummaryDocument | None:
        """Render a completed summary as a plain-text report, optionally saved to disk."""
        if not self._summary_documents_enabled:
            self._notifier.error("Summary downloads are disabled")
            return None
        target = next(
            (
                f
                for f in self._files
                if f.id == file_id and f.status == "completed" and f.summary
            ),
            None,
        )
        if target is None:
            self._notifier.error("Summary not found or not completed")
            return None

        document = SummaryDocument(
            filename=f"{target.file.stem}_summary.txt",
            content=_render_summary_report(target),
        )
        if output_dir is not None:
            path = output_dir / document.filename
            try:
                output_dir.mkdir(parents=True, exist_ok=True)
                path.write_text(document.content, encoding="utf-8")
            except OSError as exc:
                self._notifier.error(f"Failed to write summary: {exc}")
                return None
            document = replace(document, path=path)

        self._notifier.success("Summary downloaded successfully")
        return document

    def ask(self, question: str) -> ChatAnswer:
        """Answer a follow-up question from the completed summaries.

        Raises:
            ChatError: if chat is not configured or the question cannot be answered.
        """
        if self._chat is None:
            raise ChatError("Document chat is not configured")
        documents = [
            ProcessedDocument(
                id=f.id,
                filename=f.file.name,
                file_type=f.file.content_type,
                summary=f.summary or "",
                word_count=f.word_count or 0,
                processing_time=f.processing_time or 0,
            )
            for f in self._files
            if f.status == "completed" and f.summary
        ]
        return self._chat.ask(question, documents)

    def _on_progress(self, progress: ProcessingProgress) -> None:
        if progress.batch_id is None or progress.batch_id != self._active_batch_id:
            Log.debug("Ignoring progress from inactive batch", batch=progress.batch_id)
            return

        self._set_progress(progress)
        status = status_for_stage(progress.stage)
        for f in self._files:
            if f.batch_id != progress.batch_id:
                continue
            if progress.file_id is not None and f.id != progress.file_id:
                continue
            f.advance(status, progress.progress, progress.error)
        self._save_files()

    def _complete_batch(self, batch_id: str, result: DocumentSummaryResult) -> None:
        by_name = {doc.filename: doc for doc in reversed(result.documents)}
        for f in self._files:
            if f.batch_id != batch_id or f.status == FAILED:
                continue
            document = by_name.get(f.file.name)
            if document is None:
                continue
            f.status = "completed"
            f.progress = 100
            f.summary = document.summary
            f.word_count = document.word_count
            f.processing_time = document.processing_time
        self._save_files()

    def _fail_batch(self, batch_id: str, message: str) -> None:
        for f in self._files:
            if f.batch_id == batch_id and f.status != "completed":
                f.status = FAILED
                f.error = message
        self._save_files()

    def _set_progress(self, progress: ProcessingProgress | None) -> None:
        self._current_progress = progress
        if progress is None:
            self._store.clear(PROGRESS_KEY)
        else:
            self._store.save(PROGRESS_KEY, progress.to_dict())

    def _save_files(self) -> None:
        self._store.save(FILES_KEY, [f.to_dict() for f in self._files])


def _render_summary_report(processing_file: ProcessingFile) -> str:
    seconds = round((processing_file.processing_time or 0) / 1000)
    return (
        "Document Summary Report\n"
        "=======================\n\n"
        f"File: {processing_file.file.name}\n"
        f"Processed: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n"
        f"Word Count: {processing_file.word_count or 0}\n"
        f"Processing Time: {seconds}s\n\n"
        "Summary:\n"
        "--------\n"
        f"{processing_file.summary}\n\n"
        "Generated by docsummary\n"
    )
