"""End-to-end batch through the in-process backend with real extractors."""

import io

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from app.config.settings import Settings
from app.delivery.example_adapter import ExampleDeliveryClient
from app.notifications.notifier import LogNotifier
from app.processor.models import SummaryOptions, UploadedFile
from app.processor.processor import build_service
from app.session.memory_backend import MemorySessionBackend
from app.session.store import SessionStore
from app.state.processing_state import ProcessingState
from app.summarization.factory import SummarizerFactory

SENTENCE = "The research team measured river temperatures across twelve sites in spring."


@pytest.fixture()
def report_pdf_bytes() -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, SENTENCE)
    c.drawString(72, 700, "Warmer readings were found downstream of the power plant.")
    c.save()
    return buf.getvalue()


@pytest.mark.parametrize("pdf_engine", ["pdfplumber", "pymupdf"])
def test_batch_of_pdf_docx_and_text(
    pdf_engine: str,
    report_pdf_bytes: bytes,
    sample_docx_bytes: bytes,
) -> None:
    settings = Settings(
        processing_backend="local",
        pdf_engine=pdf_engine,
        ai_provider="example",
        session_dir="",
    )
    delivery = ExampleDeliveryClient()
    service = build_service(
        settings, SummarizerFactory.create(settings), delivery_client=delivery
    )
    notifier = LogNotifier()
    state = ProcessingState(service, SessionStore(MemorySessionBackend()), notifier)
    uploads = [
        UploadedFile.from_bytes("river.pdf", report_pdf_bytes),
        UploadedFile.from_bytes("memo.docx", sample_docx_bytes),
        UploadedFile.from_bytes("notes.txt", ((SENTENCE + " ") * 2).encode()),
    ]

    result = state.process_and_send(uploads, "+1 555 123 4567", SummaryOptions())

    assert result is not None and result.success
    by_name = {f.file.name: f for f in state.files}
    assert by_name["river.pdf"].status == "completed"
    assert "river temperatures" in (by_name["river.pdf"].summary or "")
    assert by_name["notes.txt"].word_count == len(SENTENCE.split()) * 2
    # the two-paragraph fixture is below the minimum text length
    assert (by_name["memo.docx"].summary or "").startswith("Error processing document:")
    assert len(delivery.sent) == 5
    assert delivery.sent[0][0] == "whatsapp:+15551234567"
