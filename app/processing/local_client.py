import time

from app.extraction.exceptions import ExtractionError
from app.extraction.factory import ExtractorFactory
from app.logging.logger import Log
from app.processing.base import BaseProcessingClient
from app.processing.models import ProcessingRequest, ProcessingResponse
from app.processor.models import (
    ConnectionStatus,
    ProcessedDocument,
    SummaryOptions,
    UploadedFile,
    new_id,
)
from app.summarization.exceptions import SummarizationError
from app.summarization.summarizer import Summarizer

MIN_TEXT_LENGTH = 50


class LocalProcessingClient(BaseProcessingClient):
    """Extracts and summarizes in-process.

    A file that fails is reported as a document carrying the error in its
    summary; the rest of the batch still runs.
    """

    def __init__(self, extractors: ExtractorFactory, summarizer: Summarizer) -> None:
        self._extractors = extractors
        self._summarizer = summarizer

    def process_documents(self, request: ProcessingRequest) -> ProcessingResponse:
        documents = [self._process_one(upload, request.options) for upload in request.files]
        return ProcessingResponse(
            success=True,
            documents=documents,
            message=f"Processed {len(documents)} document(s)",
        )

    def test_connection(self) -> ConnectionStatus:
        return ConnectionStatus(True)

    def _process_one(self, upload: UploadedFile, options: SummaryOptions) -> ProcessedDocument:
        start = time.monotonic()
        try:
            text = self._extractors.for_file(upload).extract(upload.data)
            if len(text) < MIN_TEXT_LENGTH:
                raise ExtractionError("Document appears to be empty or too short to summarize")
            summary = self._summarizer.summarize(text, options)
        except (ExtractionError, SummarizationError) as exc:
            Log.error(f"Failed to process {upload.name}: {exc}")
            return ProcessedDocument(
                id=new_id(),
                filename=upload.name,
                file_type=upload.content_type,
                summary=f"Error processing document: {exc}",
                word_count=0,
                processing_time=0,
            )
        return ProcessedDocument(
            id=new_id(),
            filename=upload.name,
            file_type=upload.content_type,
            summary=summary,
            word_count=len(text.split()),
            processing_time=int((time.monotonic() - start) * 1000),
            extracted_text=text,
        )
