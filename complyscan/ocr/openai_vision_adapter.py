import httpx
import openai

from complyscan.ocr.client_base import BaseOcrClient
from complyscan.ocr.exceptions import OcrBackendError, OcrNetworkError
from complyscan.ocr.models import OcrPage
from complyscan.ocr.sources import to_data_url

TRANSCRIBE_PROMPT = (
    "Transcribe all text visible in this document image exactly as written. "
    "Preserve line breaks and reading order. Return only the transcribed text."
)


class OpenAIVisionAdapter(BaseOcrClient):
    """OCR through a vision-capable chat model. Reports no block confidences."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._model = model
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )

    def detect_document_text(self, image_bytes: bytes, mime_type: str) -> OcrPage:
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                temperature=0.0,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": TRANSCRIBE_PROMPT},
                            {
                                "type": "image_url",
                                "image_url": {"url": to_data_url(image_bytes, mime_type)},
                            },
                        ],
                    }
                ],
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise OcrNetworkError(f"OCR provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise OcrBackendError(f"OCR provider API error: {exc}") from exc

        if not response.choices:
            raise OcrBackendError("OCR provider returned no choices")
        return OcrPage(text=response.choices[0].message.content or "")
