from dataclasses import dataclass, field
from typing import Any

from app.processor.models import ProcessedDocument, SummaryOptions, UploadedFile, new_id


@dataclass(frozen=True)
class ProcessingRequest:
    """Request sent to the processing collaborator."""

    files: tuple[UploadedFile, ...]
    options: SummaryOptions
    phone_number: str | None = None


@dataclass(frozen=True)
class RemoteDelivery:
    """Delivery outcome reported by the processing collaborator itself."""

    success: bool
    message_id: str | None = None
    error: str | None = None


@dataclass
class ProcessingResponse:
    """Response of the processing collaborator."""

    success: bool
    documents: list[ProcessedDocument] = field(default_factory=list)
    whatsapp_delivery: RemoteDelivery | None = None
    message: str = ""
    error: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any], file_type: str = "") -> "ProcessingResponse":
        """Build a response from the webhook's camelCase JSON body."""
        documents = [
            ProcessedDocument(
                id=str(raw.get("id") or "").strip() or new_id(),
                filename=str(raw.get("filename", "")),
                file_type=str(raw.get("fileType", file_type)),
                summary=str(raw.get("summary", "")),
                word_count=int(raw.get("wordCount", 0) or 0),
                processing_time=int(raw.get("processingTime", 0) or 0),
            )
            for raw in payload.get("documents") or []
            if isinstance(raw, dict)
        ]
        delivery_raw = payload.get("whatsappDelivery")
        delivery = None
        if isinstance(delivery_raw, dict):
            delivery = RemoteDelivery(
                success=bool(delivery_raw.get("success", False)),
                message_id=delivery_raw.get("messageId"),
                error=delivery_raw.get("error"),
            )
        return cls(
            success=bool(payload.get("success", False)),
            documents=documents,
            whatsapp_delivery=delivery,
            message=str(payload.get("message", "")),
            error=payload.get("error"),
        )
