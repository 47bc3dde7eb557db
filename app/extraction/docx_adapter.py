import io

import docx

from app.extraction.base import BaseTextExtractor
from app.extraction.exceptions import ExtractionError


class DocxAdapter(BaseTextExtractor):
    """Extracts paragraph text from Word documents using python-docx."""

    def extract(self, data: bytes) -> str:
        try:
            document = docx.Document(io.BytesIO(data))
        except Exception as exc:
            raise ExtractionError(f"Failed to extract text from DOCX: {exc}") from exc
        paragraphs = [p.text for p in document.paragraphs if p.text.strip()]
        return "\n".join(paragraphs).strip()
