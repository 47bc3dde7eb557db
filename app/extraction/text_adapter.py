from app.extraction.base import BaseTextExtractor
from app.extraction.exceptions import ExtractionError


class PlainTextAdapter(BaseTextExtractor):
    """Decodes plain-text uploads as UTF-8."""

    def extract(self, data: bytes) -> str:
        try:
            return data.decode("utf-8").strip()
        except UnicodeDecodeError as exc:
            raise ExtractionError(f"Text file is not valid UTF-8: {exc}") from exc
