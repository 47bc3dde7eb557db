"""Pre-flight validation of a processing batch.

All checks run before any remote call; the first failure rejects the whole batch.
"""

from collections.abc import Sequence

from app.processor.exceptions import DocumentValidationError
from app.processor.models import SummaryOptions, UploadedFile

SUPPORTED_CONTENT_TYPES = frozenset(
    {
        "application/pdf",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/msword",
        "text/plain",
    }
)
SUPPORTED_EXTENSIONS = (".pdf", ".docx", ".txt")


def validate_batch(
    files: Sequence[UploadedFile],
    options: SummaryOptions,
    *,
    max_files: int,
    max_file_size_bytes: int,
) -> None:
    """Raise DocumentValidationError if the batch cannot be processed."""
    if not files:
        raise DocumentValidationError("No files provided for processing")
    if options.send_to_whatsapp and not options.phone_number:
        raise DocumentValidationError("Phone number required for WhatsApp delivery")
    if len(files) > max_files:
        raise DocumentValidationError(f"Maximum {max_files} files allowed per session")
    for upload in files:
        _validate_file(upload, max_file_size_bytes)


def is_supported(upload: UploadedFile) -> bool:
    if upload.content_type.lower() in SUPPORTED_CONTENT_TYPES:
        return True
    return upload.name.lower().endswith(SUPPORTED_EXTENSIONS)


def _validate_file(upload: UploadedFile, max_file_size_bytes: int) -> None:
    if upload.size > max_file_size_bytes:
        max_mb = max_file_size_bytes / (1024 * 1024)
        raise DocumentValidationError(
            f"File {upload.name} exceeds maximum size of {max_mb:g}MB"
        )
    if not is_supported(upload):
        raise DocumentValidationError(
            f"File type not supported: {upload.name}. Supported types: PDF, DOCX, TXT"
        )
