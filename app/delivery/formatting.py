"""WhatsApp message bodies for summary delivery."""

from collections.abc import Sequence

from app.processor.models import ProcessedDocument

_RULE = "━" * 28


def header_message(document_count: int) -> str:
    return (
        "📄 *Document Summary Report*\n\n"
        f"I've processed {document_count} document(s) for you. "
        "Here are the summaries:\n\n"
    )


def summary_message(
    document: ProcessedDocument,
    index: int | None = None,
    total: int | None = None,
) -> str:
    header = (
        f"📄 *Document {index}/{total}*\n" if index and total else "📄 *Document Summary*\n"
    )
    return (
        f"{header}{_RULE}\n\n"
        f"📋 *{document.filename}*\n\n"
        f"📝 *Summary:*\n{document.summary}\n\n"
        "📊 *Details:*\n"
        f"• Word count: {document.word_count:,}\n"
        f"• Processing time: {round(document.processing_time / 1000)}s\n"
        f"• File type: {document.file_type}\n\n"
        f"{_RULE}"
    )


def footer_message(documents: Sequence[ProcessedDocument]) -> str:
    total_words = sum(d.word_count for d in documents)
    avg_ms = sum(d.processing_time for d in documents) / len(documents) if documents else 0
    return (
        "\n✅ *Summary Complete!*\n\n"
        "📊 *Processing Stats:*\n"
        f"• Total words processed: {total_words:,}\n"
        f"• Average processing time: {round(avg_ms / 1000)}s\n"
        f"• Documents processed: {len(documents)}\n"
    )


def connection_test_message(sender: str, sent_at: str) -> str:
    return (
        "🤖 *Test message from docsummary*\n\n"
        "Your WhatsApp integration is working correctly!\n\n"
        f"📱 From: {sender}\n"
        f"📅 Timestamp: {sent_at}\n\n"
        "_This is an automated test message._"
    )
