"""Offline delivery client.

Selected with WHATSAPP_PROVIDER=example. Records messages instead of sending them.
"""

import time
from collections.abc import Sequence

from app.delivery import formatting
from app.delivery.base import BaseDeliveryClient
from app.delivery.phone import format_whatsapp_number
from app.logging.logger import Log
from app.processor.models import ConnectionStatus, DeliveryResult, ProcessedDocument, new_id


class ExampleDeliveryClient(BaseDeliveryClient):
    """Keeps every message body in ``sent`` as (recipient, body) pairs."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    def send_multiple_summaries(
        self,
        phone_number: str,
        documents: Sequence[ProcessedDocument],
    ) -> list[DeliveryResult]:
        bodies = [formatting.header_message(len(documents))]
        bodies.extend(
            formatting.summary_message(doc, i, len(documents))
            for i, doc in enumerate(documents, start=1)
        )
        bodies.append(formatting.footer_message(documents))
        return [self._record(phone_number, body) for body in bodies]

    def test_connection(self) -> ConnectionStatus:
        return ConnectionStatus(True)

    def send_test_message(self, phone_number: str) -> DeliveryResult:
        body = formatting.connection_test_message("example", time.ctime())
        return self._record(phone_number, body)

    def _record(self, phone_number: str, body: str) -> DeliveryResult:
        to = format_whatsapp_number(phone_number)
        self.sent.append((to, body))
        Log.debug(f"Example delivery to {to}: {len(body)} chars")
        return DeliveryResult(
            success=True, phone_number=to, timestamp=time.time(), message_id=new_id()
        )
