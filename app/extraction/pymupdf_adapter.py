import pymupdf

from app.extraction.base import BaseTextExtractor
from app.extraction.exceptions import ExtractionError


class PyMuPdfAdapter(BaseTextExtractor):
    """Extracts text from PDF using PyMuPDF."""

    def extract(self, data: bytes) -> str:
        try:
            with pymupdf.open(stream=data, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [page.get_text() for page in doc]
        except Exception as exc:
            raise ExtractionError(f"Failed to extract text from PDF: {exc}") from exc
        return "\n".join(pages).strip()
