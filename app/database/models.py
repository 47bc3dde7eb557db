from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class DocumentRecord:
    """Represents a row of the documents table."""

    id: str
    filename: str
    file_type: str
    word_count: int
    processing_time: int
    status: str
    expires_at: datetime
    created_at: datetime | None = None


@dataclass(frozen=True)
class SummaryRecord:
    """Represents a row of the document_summaries table."""

    id: str
    document_id: str
    summary_text: str
    word_count: int
    created_at: datetime
