import time
from collections.abc import Callable, Sequence
from datetime import datetime

import httpx

from app.delivery import formatting
from app.delivery.base import BaseDeliveryClient
from app.delivery.phone import digits_only, format_whatsapp_number
from app.logging.logger import Log
from app.processor.models import ConnectionStatus, DeliveryResult, ProcessedDocument


class TwilioDeliveryClient(BaseDeliveryClient):
    """Sends WhatsApp messages through the Twilio REST API."""

    API_ROOT = "https://api.twilio.com/2010-04-01"

    def __init__(
        self,
        *,
        account_sid: str,
        auth_token: str,
        whatsapp_number: str,
        timeout_seconds: int = 30,
        message_interval_seconds: float = 2.0,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._account_sid = account_sid
        self._whatsapp_number = whatsapp_number
        self._interval = message_interval_seconds
        self._sleep = sleep
        self._client = httpx.Client(
            auth=(account_sid, auth_token),
            timeout=timeout_seconds,
            transport=transport,
        )

    @property
    def messages_url(self) -> str:
        return f"{self.API_ROOT}/Accounts/{self._account_sid}/Messages.json"

    def send_text_message(self, phone_number: str, body: str) -> DeliveryResult:
        to = format_whatsapp_number(phone_number)
        cleaned = digits_only(phone_number)
        if len(cleaned) < 7 or len(cleaned) > 15:
            return DeliveryResult(
                success=False,
                phone_number=phone_number,
                timestamp=time.time(),
                error="Invalid phone number format",
            )

        payload = {"From": self._whatsapp_number, "To": to, "Body": body}
        try:
            response = self._client.post(self.messages_url, data=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            error = _error_message(exc.response) or str(exc)
            Log.error(f"Twilio WhatsApp API error: {error}", to=to)
            return DeliveryResult(
                success=False, phone_number=to, timestamp=time.time(), error=error
            )
        except httpx.HTTPError as exc:
            Log.error(f"Twilio WhatsApp API error: {exc}", to=to)
            return DeliveryResult(
                success=False, phone_number=to, timestamp=time.time(), error=str(exc)
            )

        return DeliveryResult(
            success=True,
            phone_number=to,
            timestamp=time.time(),
            message_id=_json_field(response, "sid"),
        )

    def send_multiple_summaries(
        self,
        phone_number: str,
        documents: Sequence[ProcessedDocument],
    ) -> list[DeliveryResult]:
        results = [self.send_text_message(phone_number, formatting.header_message(len(documents)))]
        for index, document in enumerate(documents, start=1):
            # Twilio rate limit
            if index > 1:
                self._sleep(self._interval)
            body = formatting.summary_message(document, index, len(documents))
            results.append(self.send_text_message(phone_number, body))
        results.append(self.send_text_message(phone_number, formatting.footer_message(documents)))
        Log.info(
            f"Delivered {sum(r.success for r in results)}/{len(results)} messages",
            documents=len(documents),
        )
        return results

    def test_connection(self) -> ConnectionStatus:
        try:
            response = self._client.get(f"{self.API_ROOT}/Accounts/{self._account_sid}.json")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            return ConnectionStatus(False, _error_message(exc.response) or str(exc))
        except httpx.HTTPError as exc:
            return ConnectionStatus(False, str(exc))

        status = _json_field(response, "status")
        if status == "active":
            return ConnectionStatus(True)
        return ConnectionStatus(False, f"Account status: {status}")

    def close(self) -> None:
        self._client.close()

    def send_test_message(self, phone_number: str) -> DeliveryResult:
        sent_at = datetime.now().strftime("%c")
        body = formatting.connection_test_message(self._whatsapp_number, sent_at)
        return self.send_text_message(phone_number, body)


def _json_field(response: httpx.Response, key: str) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        value = body.get(key)
        return str(value) if value else None
    return None


def _error_message(response: httpx.Response) -> str | None:
    return _json_field(response, "message")
