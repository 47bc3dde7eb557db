from abc import ABC, abstractmethod
from collections.abc import Sequence

from app.processor.models import ConnectionStatus, DeliveryResult, ProcessedDocument


class BaseDeliveryClient(ABC):
    """Contract for messaging gateways that deliver summaries."""

    @abstractmethod
    def send_multiple_summaries(
        self,
        phone_number: str,
        documents: Sequence[ProcessedDocument],
    ) -> list[DeliveryResult]:
        """Send a header, one message per document and a footer.

        Failures are reported in the returned results, never raised.
        """

    @abstractmethod
    def test_connection(self) -> ConnectionStatus:
        """Check that the gateway accepts requests."""

    @abstractmethod
    def send_test_message(self, phone_number: str) -> DeliveryResult:
        """Send a fixed test message."""

    def close(self) -> None:
        """Release network resources. Gateways without any keep the default."""
