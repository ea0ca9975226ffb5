from unittest.mock import MagicMock, patch

import httpx
import openai
import pytest
from google.api_core import exceptions as google_exceptions

from complyscan.ocr.exceptions import OcrBackendError, OcrNetworkError
from complyscan.ocr.google_vision_adapter import GoogleVisionAdapter
from complyscan.ocr.openai_vision_adapter import OpenAIVisionAdapter


def _vision_response(text: str, confidences: list[float], error: str = "") -> MagicMock:
    response = MagicMock()
    response.error.message = error
    response.full_text_annotation.text = text
    page = MagicMock()
    page.blocks = [MagicMock(confidence=c) for c in confidences]
    response.full_text_annotation.pages = [page]
    return response


class TestGoogleVisionAdapter:
    def test_returns_text_and_block_confidences(self) -> None:
        client = MagicMock()
        client.document_text_detection.return_value = _vision_response("Hello", [0.9, 0.8])
        page = GoogleVisionAdapter(client).detect_document_text(b"img", "image/png")
        assert page.text == "Hello"
        assert page.block_confidences == [0.9, 0.8]

    def test_error_payload_raises_backend_error(self) -> None:
        client = MagicMock()
        client.document_text_detection.return_value = _vision_response("", [], error="Bad image")
        with pytest.raises(OcrBackendError, match="Bad image"):
            GoogleVisionAdapter(client).detect_document_text(b"img", "image/png")

    def test_unavailable_maps_to_network_error(self) -> None:
        client = MagicMock()
        client.document_text_detection.side_effect = google_exceptions.ServiceUnavailable("down")
        with pytest.raises(OcrNetworkError):
            GoogleVisionAdapter(client).detect_document_text(b"img", "image/png")

    def test_api_error_maps_to_backend_error(self) -> None:
        client = MagicMock()
        client.document_text_detection.side_effect = google_exceptions.PermissionDenied("no")
        with pytest.raises(OcrBackendError):
            GoogleVisionAdapter(client).detect_document_text(b"img", "image/png")


class TestOpenAIVisionAdapter:
    _TARGET = "complyscan.ocr.openai_vision_adapter.openai.OpenAI"

    def _adapter(self, mock_client: MagicMock) -> OpenAIVisionAdapter:
        with patch(self._TARGET, return_value=mock_client):
            return OpenAIVisionAdapter(api_key="k", model="gpt-4o", timeout_seconds=10)

    def test_sends_image_as_data_url(self) -> None:
        mock_client = MagicMock()
        choice = MagicMock()
        choice.message.content = "Transcribed"
        mock_client.chat.completions.create.return_value = MagicMock(choices=[choice])
        page = self._adapter(mock_client).detect_document_text(b"img", "image/png")
        assert page.text == "Transcribed"
        assert page.block_confidences == []
        content = mock_client.chat.completions.create.call_args.kwargs["messages"][0]["content"]
        assert content[1]["image_url"]["url"].startswith("data:image/png;base64,")

    def test_no_choices_raises(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.return_value = MagicMock(choices=[])
        with pytest.raises(OcrBackendError, match="no choices"):
            self._adapter(mock_client).detect_document_text(b"img", "image/png")

    def test_connection_error_maps_to_network_error(self) -> None:
        mock_client = MagicMock()
        mock_client.chat.completions.create.side_effect = openai.APIConnectionError(
            request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        )
        with pytest.raises(OcrNetworkError):
            self._adapter(mock_client).detect_document_text(b"img", "image/png")
