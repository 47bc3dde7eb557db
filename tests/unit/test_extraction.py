from unittest.mock import patch

import pytest

from app.extraction.docx_adapter import DocxAdapter
from app.extraction.exceptions import ExtractionError, UnsupportedDocumentTypeError
from app.extraction.factory import ExtractorFactory
from app.extraction.pdfplumber_adapter import PdfPlumberAdapter
from app.extraction.pymupdf_adapter import PyMuPdfAdapter
from app.extraction.text_adapter import PlainTextAdapter
from app.processor.models import UploadedFile


def _make_settings(pdf_engine: str):  # type: ignore[no-untyped-def]
    """Create a minimal Settings-like object with only pdf_engine."""
    with patch("app.config.settings.Settings") as mock_cls:
        settings = mock_cls.return_value
        settings.pdf_engine = pdf_engine
        return settings


class TestPdfPlumberAdapter:
    def test_extract_returns_text(self, sample_pdf_bytes: bytes) -> None:
        result = PdfPlumberAdapter().extract(sample_pdf_bytes)
        assert "Hello PDF World" in result

    def test_extract_multi_page(self, multi_page_pdf_bytes: bytes) -> None:
        result = PdfPlumberAdapter().extract(multi_page_pdf_bytes)
        assert "Page one content" in result
        assert "Page two content" in result

    def test_extract_empty_pdf_returns_empty_string(self, empty_pdf_bytes: bytes) -> None:
        assert PdfPlumberAdapter().extract(empty_pdf_bytes) == ""

    def test_extract_raises_on_invalid_bytes(self) -> None:
        with pytest.raises(ExtractionError):
            PdfPlumberAdapter().extract(b"not a pdf")


class TestPyMuPdfAdapter:
    def test_extract_returns_text(self, sample_pdf_bytes: bytes) -> None:
        result = PyMuPdfAdapter().extract(sample_pdf_bytes)
        assert "Hello PDF World" in result
        assert result == result.strip()

    def test_extract_raises_on_invalid_bytes(self) -> None:
        with pytest.raises(ExtractionError):
            PyMuPdfAdapter().extract(b"not a pdf")


class TestDocxAdapter:
    def test_extract_joins_non_empty_paragraphs(self, sample_docx_bytes: bytes) -> None:
        assert DocxAdapter().extract(sample_docx_bytes) == "First paragraph\nSecond paragraph"

    def test_extract_raises_on_invalid_bytes(self) -> None:
        with pytest.raises(ExtractionError, match="DOCX"):
            DocxAdapter().extract(b"not a docx")


class TestPlainTextAdapter:
    def test_decodes_utf8(self) -> None:
        assert PlainTextAdapter().extract("  Grüße  \n".encode()) == "Grüße"

    def test_invalid_utf8_raises(self) -> None:
        with pytest.raises(ExtractionError, match="UTF-8"):
            PlainTextAdapter().extract(b"\xff\xfe\xfa")


class TestExtractorFactory:
    def test_creates_pdfplumber_engine(self) -> None:
        factory = ExtractorFactory.from_settings(_make_settings("pdfplumber"))
        upload = UploadedFile(name="a.pdf", content_type="application/pdf", size=1)
        assert isinstance(factory.for_file(upload), PdfPlumberAdapter)

    def test_engine_is_case_insensitive(self) -> None:
        factory = ExtractorFactory.from_settings(_make_settings("PyMuPDF"))
        upload = UploadedFile(name="a.pdf", content_type="application/pdf", size=1)
        assert isinstance(factory.for_file(upload), PyMuPdfAdapter)

    def test_raises_for_unknown_engine(self) -> None:
        with pytest.raises(ValueError, match="Unknown PDF engine"):
            ExtractorFactory.from_settings(_make_settings("unknown"))

    @pytest.mark.parametrize(
        ("name", "content_type", "expected"),
        [
            ("a.docx", "application/vnd.openxmlformats-officedocument.wordprocessingml.document", DocxAdapter),
            ("a.docx", "application/octet-stream", DocxAdapter),
            ("a.txt", "text/plain", PlainTextAdapter),
            ("a.pdf", "", PdfPlumberAdapter),
        ],
    )
    def test_dispatches_on_type(self, name: str, content_type: str, expected: type) -> None:
        factory = ExtractorFactory(PdfPlumberAdapter())
        upload = UploadedFile(name=name, content_type=content_type, size=1)
        assert isinstance(factory.for_file(upload), expected)

    def test_unsupported_type_raises(self) -> None:
        factory = ExtractorFactory(PdfPlumberAdapter())
        upload = UploadedFile(name="a.png", content_type="image/png", size=1)
        with pytest.raises(UnsupportedDocumentTypeError):
            factory.for_file(upload)
