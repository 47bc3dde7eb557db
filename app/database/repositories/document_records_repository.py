from datetime import datetime, timedelta, timezone

import psycopg
from psycopg.rows import dict_row

from app.database.connection import get_connection
from app.database.models import DocumentRecord, SummaryRecord
from app.processor.exceptions import PersistenceWriteError
from app.processor.models import ProcessedDocument, ProcessingStats, new_id


class DocumentRecordsRepository:
    """Database operations for the documents and document_summaries tables."""

    def __init__(self, retention_hours: int = 24) -> None:
        self._retention = timedelta(hours=retention_hours)

    def insert_document(self, document: ProcessedDocument) -> DocumentRecord:
        """Insert document metadata with status 'completed'.

        Raises:
            PersistenceWriteError: if the insert fails.
        """
        record = DocumentRecord(
            id=document.id,
            filename=document.filename,
            file_type=document.file_type,
            word_count=document.word_count,
            processing_time=document.processing_time,
            status="completed",
            expires_at=_utcnow() + self._retention,
        )
        try:
            with get_connection() as conn:
                conn.execute(
                    """
                    INSERT INTO documents
                        (id, filename, file_type, word_count, processing_time,
                         status, expires_at)
                    VALUES (%s, %s, %s, %s, %s, %s, %s)
                    """,
                    (
                        record.id,
                        record.filename,
                        record.file_type,
                        record.word_count,
                        record.processing_time,
                        record.status,
                        record.expires_at,
                    ),
                )
                conn.commit()
        except (psycopg.Error, RuntimeError) as exc:
            raise PersistenceWriteError(
                f"Failed to save document {document.id}: {exc}"
            ) from exc
        return record

    def insert_summary(self, document: ProcessedDocument) -> SummaryRecord:
        """Insert the summary row referencing an inserted document.

        Raises:
            PersistenceWriteError: if the insert fails.
        """
        record = SummaryRecord(
            id=new_id(),
            document_id=document.id,
            summary_text=document.summary,
            word_count=len(document.summary.split()),
            created_at=_utcnow(),
        )
        try:
            with get_connection() as conn:
                conn.execute(
                    """
                    INSERT INTO document_summaries
                        (id, document_id, summary_text, word_count, created_at)
                    VALUES (%s, %s, %s, %s, %s)
                    """,
                    (
                        record.id,
                        record.document_id,
                        record.summary_text,
                        record.word_count,
                        record.created_at,
                    ),
                )
                conn.commit()
        except (psycopg.Error, RuntimeError) as exc:
            raise PersistenceWriteError(
                f"Failed to save summary for document {document.id}: {exc}"
            ) from exc
        return record

    def fetch_processing_stats(self) -> ProcessingStats:
        """Aggregate counts, average completed processing time and success rate."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT
                        COUNT(*) AS total_documents,
                        COUNT(*) FILTER (WHERE status = 'completed') AS completed_documents,
                        COALESCE(
                            AVG(processing_time) FILTER (WHERE status = 'completed'), 0
                        ) AS avg_processing_time,
                        (SELECT COUNT(*) FROM document_summaries) AS total_summaries
                    FROM documents
                    """
                )
                row = cur.fetchone()

        if row is None or not row["total_documents"]:
            total_summaries = int(row["total_summaries"]) if row else 0
            return ProcessingStats(total_summaries=total_summaries)

        total = int(row["total_documents"])
        completed = int(row["completed_documents"])
        return ProcessingStats(
            total_documents=total,
            total_summaries=int(row["total_summaries"]),
            avg_processing_time=float(row["avg_processing_time"]),
            success_rate=completed / total * 100,
        )

    def delete_expired(self) -> int:
        """Delete documents past expires_at; summaries cascade. Returns rows removed."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM documents WHERE expires_at < NOW()")
                deleted = cur.rowcount
            conn.commit()
        return deleted


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)
