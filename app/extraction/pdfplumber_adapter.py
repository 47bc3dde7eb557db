import io

import pdfplumber

from app.extraction.base import BaseTextExtractor
from app.extraction.exceptions import ExtractionError


class PdfPlumberAdapter(BaseTextExtractor):
    """Extracts text from PDF using pdfplumber."""

    def extract(self, data: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:
            raise ExtractionError(f"Failed to extract text from PDF: {exc}") from exc
        return "\n".join(pages).strip()
