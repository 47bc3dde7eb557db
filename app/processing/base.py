from abc import ABC, abstractmethod

from app.processing.models import ProcessingRequest, ProcessingResponse
from app.processor.models import ConnectionStatus


class BaseProcessingClient(ABC):
    """Contract for the collaborator that extracts and summarizes documents."""

    @abstractmethod
    def process_documents(self, request: ProcessingRequest) -> ProcessingResponse:
        """Extract and summarize every file of the request.

        Raises:
            RemoteProcessingError: if the collaborator fails or reports no success.
        """

    @abstractmethod
    def test_connection(self) -> ConnectionStatus:
        """Check that the collaborator is reachable."""

    def close(self) -> None:
        """Release network resources. Collaborators without any keep the default."""
