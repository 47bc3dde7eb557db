from app.config.settings import Settings
from app.extraction.base import BaseTextExtractor
from app.extraction.docx_adapter import DocxAdapter
from app.extraction.exceptions import UnsupportedDocumentTypeError
from app.extraction.pdfplumber_adapter import PdfPlumberAdapter
from app.extraction.pymupdf_adapter import PyMuPdfAdapter
from app.extraction.text_adapter import PlainTextAdapter
from app.processor.models import UploadedFile


class ExtractorFactory:
    """Picks the extractor for an uploaded file's type."""

    PDF_ENGINES: dict[str, type[BaseTextExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    def __init__(self, pdf_extractor: BaseTextExtractor) -> None:
        self._pdf = pdf_extractor
        self._docx = DocxAdapter()
        self._text = PlainTextAdapter()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ExtractorFactory":
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.PDF_ENGINES.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.PDF_ENGINES)}"
            )
        return cls(adapter_cls())

    def for_file(self, upload: UploadedFile) -> BaseTextExtractor:
        content_type = upload.content_type.lower()
        name = upload.name.lower()
        if "pdf" in content_type or name.endswith(".pdf"):
            return self._pdf
        if "word" in content_type or "document" in content_type or name.endswith(".docx"):
            return self._docx
        if content_type.startswith("text/") or name.endswith(".txt"):
            return self._text
        raise UnsupportedDocumentTypeError(f"Unsupported file type: {upload.content_type}")
