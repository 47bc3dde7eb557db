class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class DocumentValidationError(ProcessorError):
    """Raised when a batch fails pre-flight validation."""


class BatchInProgressError(ProcessorError):
    """Raised when a batch is submitted while another one is still running."""


class RemoteProcessingError(ProcessorError):
    """Raised when the processing collaborator fails or reports no success."""


class PersistenceWriteError(ProcessorError):
    """Raised when a record-store write fails."""


class SessionStorageError(ProcessorError):
    """Raised when the session store cannot be read or written."""
