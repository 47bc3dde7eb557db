import json
import uuid
from datetime import datetime, timezone

import httpx

from app.logging.logger import Log
from app.processing.base import BaseProcessingClient
from app.processing.models import ProcessingRequest, ProcessingResponse
from app.processor.exceptions import RemoteProcessingError
from app.processor.models import ConnectionStatus, UploadedFile


class WebhookProcessingClient(BaseProcessingClient):
    """Posts documents to a workflow-automation webhook.

    The webhook handles one file per call, so a batch becomes one multipart
    POST per file and the responses are merged.
    """

    def __init__(
        self,
        *,
        webhook_url: str,
        timeout_seconds: int,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not webhook_url:
            raise ValueError("webhook_url is required for the webhook processing backend")
        self._webhook_url = webhook_url
        self._client = httpx.Client(timeout=timeout_seconds, transport=transport)

    def process_documents(self, request: ProcessingRequest) -> ProcessingResponse:
        if not request.files:
            raise RemoteProcessingError("No file provided for processing")

        merged = ProcessingResponse(success=True)
        for upload in request.files:
            response = self._post_file(upload, request)
            merged.documents.extend(response.documents)
            if response.whatsapp_delivery is not None:
                merged.whatsapp_delivery = response.whatsapp_delivery
            merged.message = response.message
        return merged

    def test_connection(self) -> ConnectionStatus:
        data = {"test": "true", "timestamp": _now_iso()}
        try:
            response = self._client.post(self._webhook_url, data=data)
        except httpx.HTTPError as exc:
            return ConnectionStatus(False, str(exc))
        if response.is_error:
            return ConnectionStatus(
                False, f"HTTP error! status: {response.status_code} - {response.reason_phrase}"
            )
        return ConnectionStatus(True)

    def close(self) -> None:
        self._client.close()

    def _post_file(self, upload: UploadedFile, request: ProcessingRequest) -> ProcessingResponse:
        data = {
            "options": json.dumps(request.options.ai_options()),
            "timestamp": _now_iso(),
            "sessionId": str(uuid.uuid4()),
            "filename": upload.name,
            "fileType": upload.content_type,
            "fileSize": str(upload.size),
        }
        if request.phone_number:
            data["phoneNumber"] = request.phone_number
        files = {"data": (upload.name, upload.data, upload.content_type)}

        Log.info(
            "Sending document to processing webhook",
            filename=upload.name,
            file_type=upload.content_type,
            file_size=upload.size,
        )
        try:
            response = self._client.post(self._webhook_url, data=data, files=files)
        except httpx.HTTPError as exc:
            raise RemoteProcessingError(f"Processing webhook request failed: {exc}") from exc

        if response.is_error:
            raise RemoteProcessingError(
                f"Processing webhook error: HTTP {response.status_code} - {response.reason_phrase}"
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise RemoteProcessingError(f"Processing webhook returned invalid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise RemoteProcessingError("Processing webhook response must be a JSON object")

        result = ProcessingResponse.from_payload(payload, file_type=upload.content_type)
        if not result.success:
            raise RemoteProcessingError(
                result.error or result.message or "Webhook processing failed"
            )
        return result


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
