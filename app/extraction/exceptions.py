class ExtractionError(Exception):
    """Raised when text cannot be extracted from a document."""


class UnsupportedDocumentTypeError(ExtractionError):
    """Raised when no extractor handles the document's type."""
