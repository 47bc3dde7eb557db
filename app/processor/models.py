import mimetypes
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

STATUS_ORDER: tuple[str, ...] = (
    "uploading",
    "extracting",
    "summarizing",
    "sending",
    "completed",
)
FAILED = "failed"
TERMINAL_STATUSES = frozenset({"completed", FAILED})
PROGRESS_STAGES = frozenset(
    {"uploading", "extracting", "summarizing", "sending", "complete", "error"}
)
SUMMARY_STYLES = frozenset({"concise", "detailed", "bullet-points"})

_STAGE_TO_STATUS = {"complete": "completed", "error": FAILED}


def new_id() -> str:
    return uuid.uuid4().hex


def status_for_stage(stage: str) -> str:
    """Map a progress stage onto the per-file status it implies."""
    return _STAGE_TO_STATUS.get(stage, stage)


@dataclass(frozen=True)
class UploadedFile:
    """A file handle submitted for processing."""

    name: str
    content_type: str
    size: int
    data: bytes = field(default=b"", repr=False)
    id: str = field(default_factory=new_id)

    @classmethod
    def from_path(cls, path: Path) -> "UploadedFile":
        data = path.read_bytes()
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return cls(name=path.name, content_type=content_type, size=len(data), data=data)

    @classmethod
    def from_bytes(cls, name: str, data: bytes, content_type: str = "") -> "UploadedFile":
        resolved = content_type or mimetypes.guess_type(name)[0] or "application/octet-stream"
        return cls(name=name, content_type=resolved, size=len(data), data=data)

    @property
    def stem(self) -> str:
        return Path(self.name).stem

    def to_dict(self) -> dict[str, Any]:
        """Metadata only; file bytes are never serialized."""
        return {
            "id": self.id,
            "name": self.name,
            "content_type": self.content_type,
            "size": self.size,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "UploadedFile":
        return cls(
            id=str(raw["id"]),
            name=str(raw["name"]),
            content_type=str(raw.get("content_type", "")),
            size=int(raw.get("size", 0)),
        )


@dataclass(frozen=True)
class SummaryOptions:
    """Per-batch summarization and delivery options."""

    style: str = "concise"
    language: str = "English"
    max_length: int = 500
    send_to_whatsapp: bool = False
    phone_number: str | None = None

    def ai_options(self) -> dict[str, object]:
        return {"language": self.language, "style": self.style, "maxLength": self.max_length}


@dataclass
class ProcessingFile:
    """Per-file processing state tracked by ProcessingState."""

    id: str
    batch_id: str
    file: UploadedFile
    status: str = "uploading"
    progress: int = 0
    summary: str | None = None
    word_count: int | None = None
    processing_time: int | None = None
    error: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def advance(self, status: str, progress: float, error: str | None = None) -> bool:
        """Apply a status/progress update if it moves the file forward.

        Returns False when the update would leave a terminal state or move
        backwards along STATUS_ORDER.
        """
        if self.is_terminal:
            return False
        if status == FAILED:
            self.status = FAILED
            self.progress = max(0, min(100, int(progress)))
            self.error = error
            return True
        if status not in STATUS_ORDER:
            return False
        if STATUS_ORDER.index(status) < STATUS_ORDER.index(self.status):
            return False
        self.status = status
        self.progress = max(self.progress, min(100, int(progress)))
        if error is not None:
            self.error = error
        return True

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "batch_id": self.batch_id,
            "file": self.file.to_dict(),
            "status": self.status,
            "progress": self.progress,
            "summary": self.summary,
            "word_count": self.word_count,
            "processing_time": self.processing_time,
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ProcessingFile":
        status = str(raw["status"])
        if status not in STATUS_ORDER and status != FAILED:
            raise ValueError(f"Unknown file status: {status!r}")
        return cls(
            id=str(raw["id"]),
            batch_id=str(raw.get("batch_id", "")),
            file=UploadedFile.from_dict(raw["file"]),
            status=status,
            progress=int(raw.get("progress", 0)),
            summary=raw.get("summary"),
            word_count=raw.get("word_count"),
            processing_time=raw.get("processing_time"),
            error=raw.get("error"),
        )


@dataclass(frozen=True)
class ProcessingProgress:
    """A single progress event; only the latest one is retained."""

    stage: str
    progress: float
    message: str
    current_file: str | None = None
    error: str | None = None
    batch_id: str | None = None
    file_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "stage": self.stage,
            "progress": self.progress,
            "message": self.message,
            "current_file": self.current_file,
            "error": self.error,
            "batch_id": self.batch_id,
            "file_id": self.file_id,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ProcessingProgress":
        stage = str(raw["stage"])
        if stage not in PROGRESS_STAGES:
            raise ValueError(f"Unknown progress stage: {stage!r}")
        return cls(
            stage=stage,
            progress=float(raw["progress"]),
            message=str(raw.get("message", "")),
            current_file=raw.get("current_file"),
            error=raw.get("error"),
            batch_id=raw.get("batch_id"),
            file_id=raw.get("file_id"),
        )


@dataclass(frozen=True)
class ProcessedDocument:
    """A summarized document as returned by a processing client."""

    id: str
    filename: str
    file_type: str
    summary: str
    word_count: int
    processing_time: int
    extracted_text: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "filename": self.filename,
            "file_type": self.file_type,
            "summary": self.summary,
            "word_count": self.word_count,
            "processing_time": self.processing_time,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ProcessedDocument":
        return cls(
            id=str(raw["id"]),
            filename=str(raw["filename"]),
            file_type=str(raw.get("file_type", "")),
            summary=str(raw.get("summary", "")),
            word_count=int(raw.get("word_count", 0)),
            processing_time=int(raw.get("processing_time", 0)),
        )


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of one message sent through the delivery collaborator."""

    success: bool
    phone_number: str
    timestamp: float
    message_id: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "phone_number": self.phone_number,
            "timestamp": self.timestamp,
            "message_id": self.message_id,
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "DeliveryResult":
        return cls(
            success=bool(raw["success"]),
            phone_number=str(raw.get("phone_number", "")),
            timestamp=float(raw.get("timestamp", 0.0)),
            message_id=raw.get("message_id"),
            error=raw.get("error"),
        )


@dataclass(frozen=True)
class DocumentSummaryResult:
    """Outcome of one processing batch."""

    documents: tuple[ProcessedDocument, ...]
    total_processing_time: int
    success: bool
    delivery: tuple[DeliveryResult, ...] | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "documents": [d.to_dict() for d in self.documents],
            "total_processing_time": self.total_processing_time,
            "success": self.success,
            "delivery": (
                [d.to_dict() for d in self.delivery] if self.delivery is not None else None
            ),
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "DocumentSummaryResult":
        delivery = raw.get("delivery")
        return cls(
            documents=tuple(ProcessedDocument.from_dict(d) for d in raw["documents"]),
            total_processing_time=int(raw.get("total_processing_time", 0)),
            success=bool(raw["success"]),
            delivery=(
                tuple(DeliveryResult.from_dict(d) for d in delivery)
                if delivery is not None
                else None
            ),
            error=raw.get("error"),
        )


@dataclass(frozen=True)
class ProcessingStats:
    """Aggregate statistics read from the record store."""

    total_documents: int = 0
    total_summaries: int = 0
    avg_processing_time: float = 0.0
    success_rate: float = 0.0


@dataclass(frozen=True)
class SummaryDocument:
    """Plain-text summary report ready for download."""

    filename: str
    content: str
    media_type: str = "text/plain"
    path: Path | None = None


@dataclass(frozen=True)
class ConnectionStatus:
    """Result of a collaborator connectivity check."""

    success: bool
    error: str | None = None
