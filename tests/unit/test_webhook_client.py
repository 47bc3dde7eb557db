import json
from collections.abc import Callable

import httpx
import pytest

from app.processing.models import ProcessingRequest, ProcessingResponse
from app.processing.webhook_client import WebhookProcessingClient
from app.processor.exceptions import RemoteProcessingError
from app.processor.models import SummaryOptions, UploadedFile

URL = "https://hooks.example.com/webhook/summarize"


def _make_client(handler: Callable[[httpx.Request], httpx.Response]) -> WebhookProcessingClient:
    return WebhookProcessingClient(
        webhook_url=URL,
        timeout_seconds=5,
        transport=httpx.MockTransport(handler),
    )


def _upload(name: str = "report.pdf") -> UploadedFile:
    return UploadedFile(name=name, content_type="application/pdf", size=8, data=b"%PDF-1.4")


def _ok_payload(filename: str = "report.pdf") -> dict:
    return {
        "success": True,
        "message": "done",
        "documents": [
            {
                "id": "doc-1",
                "filename": filename,
                "summary": "A summary.",
                "wordCount": 321,
                "processingTime": 1500,
            }
        ],
    }


class TestProcessDocuments:
    def test_parses_documents(self) -> None:
        client = _make_client(lambda request: httpx.Response(200, json=_ok_payload()))

        response = client.process_documents(
            ProcessingRequest(files=(_upload(),), options=SummaryOptions())
        )

        assert response.success is True
        assert len(response.documents) == 1
        document = response.documents[0]
        assert document.id == "doc-1"
        assert document.summary == "A summary."
        assert document.word_count == 321
        assert document.processing_time == 1500
        assert document.file_type == "application/pdf"

    def test_posts_multipart_form(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_ok_payload())

        client = _make_client(handler)
        client.process_documents(
            ProcessingRequest(
                files=(_upload(),),
                options=SummaryOptions(style="detailed", max_length=200),
                phone_number="+15551234567",
            )
        )

        body = seen[0].read().decode("utf-8", errors="replace")
        assert seen[0].method == "POST"
        assert str(seen[0].url) == URL
        assert seen[0].headers["content-type"].startswith("multipart/form-data")
        assert 'name="data"; filename="report.pdf"' in body
        assert 'name="filename"' in body
        assert 'name="fileSize"' in body
        assert 'name="phoneNumber"' in body
        assert "+15551234567" in body
        assert json.dumps({"language": "English", "style": "detailed", "maxLength": 200}) in body

    def test_one_post_per_file(self) -> None:
        names: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            body = request.read().decode("utf-8", errors="replace")
            name = "a.pdf" if 'filename="a.pdf"' in body else "b.pdf"
            names.append(name)
            return httpx.Response(200, json=_ok_payload(name))

        client = _make_client(handler)
        response = client.process_documents(
            ProcessingRequest(files=(_upload("a.pdf"), _upload("b.pdf")), options=SummaryOptions())
        )

        assert names == ["a.pdf", "b.pdf"]
        assert [d.filename for d in response.documents] == ["a.pdf", "b.pdf"]

    def test_http_error_status_raises(self) -> None:
        client = _make_client(lambda request: httpx.Response(500))
        with pytest.raises(RemoteProcessingError, match="HTTP 500"):
            client.process_documents(ProcessingRequest(files=(_upload(),), options=SummaryOptions()))

    def test_network_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused")

        client = _make_client(handler)
        with pytest.raises(RemoteProcessingError, match="connection refused"):
            client.process_documents(ProcessingRequest(files=(_upload(),), options=SummaryOptions()))

    def test_invalid_json_raises(self) -> None:
        client = _make_client(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(RemoteProcessingError, match="invalid JSON"):
            client.process_documents(ProcessingRequest(files=(_upload(),), options=SummaryOptions()))

    def test_unsuccessful_payload_raises_with_error(self) -> None:
        client = _make_client(
            lambda request: httpx.Response(200, json={"success": False, "error": "quota hit"})
        )
        with pytest.raises(RemoteProcessingError, match="quota hit"):
            client.process_documents(ProcessingRequest(files=(_upload(),), options=SummaryOptions()))

    def test_unsuccessful_payload_without_details(self) -> None:
        client = _make_client(lambda request: httpx.Response(200, json={"success": False}))
        with pytest.raises(RemoteProcessingError, match="Webhook processing failed"):
            client.process_documents(ProcessingRequest(files=(_upload(),), options=SummaryOptions()))

    def test_empty_request_raises(self) -> None:
        client = _make_client(lambda request: httpx.Response(200, json=_ok_payload()))
        with pytest.raises(RemoteProcessingError, match="No file provided"):
            client.process_documents(ProcessingRequest(files=(), options=SummaryOptions()))

    def test_requires_url(self) -> None:
        with pytest.raises(ValueError, match="webhook_url is required"):
            WebhookProcessingClient(webhook_url="", timeout_seconds=5)


class TestConnection:
    def test_success(self) -> None:
        client = _make_client(lambda request: httpx.Response(200, json={}))
        assert client.test_connection().success is True

    def test_error_status(self) -> None:
        client = _make_client(lambda request: httpx.Response(404))
        status = client.test_connection()
        assert status.success is False
        assert "404" in (status.error or "")


class TestProcessingResponse:
    def test_from_payload_reads_remote_delivery(self) -> None:
        payload = _ok_payload()
        payload["whatsappDelivery"] = {"success": True, "messageId": "SM1"}
        response = ProcessingResponse.from_payload(payload)
        assert response.whatsapp_delivery is not None
        assert response.whatsapp_delivery.message_id == "SM1"

    def test_from_payload_skips_malformed_documents(self) -> None:
        response = ProcessingResponse.from_payload({"success": True, "documents": ["junk"]})
        assert response.documents == []

    def test_from_payload_generates_ids_for_documents_without_one(self) -> None:
        response = ProcessingResponse.from_payload(
            {
                "success": True,
                "documents": [{"filename": "a.pdf"}, {"id": "  ", "filename": "b.pdf"}],
            }
        )
        ids = [document.id for document in response.documents]
        assert all(ids)
        assert ids[0] != ids[1]


class TestClose:
    def test_close_closes_http_client(self) -> None:
        client = _make_client(lambda request: httpx.Response(200, json=_ok_payload()))
        client.close()
        with pytest.raises(RuntimeError):
            client.process_documents(
                ProcessingRequest(files=(_upload(),), options=SummaryOptions())
            )
