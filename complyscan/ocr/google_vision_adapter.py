from google.api_core import exceptions as google_exceptions
from google.cloud import vision

from complyscan.ocr.client_base import BaseOcrClient
from complyscan.ocr.exceptions import OcrBackendError, OcrNetworkError
from complyscan.ocr.models import OcrPage


class GoogleVisionAdapter(BaseOcrClient):
    """Document text detection through Google Cloud Vision.

    Credentials are resolved by the client library (``GOOGLE_APPLICATION_CREDENTIALS``).
    """

    def __init__(self, client: vision.ImageAnnotatorClient | None = None) -> None:
        self._client = client or vision.ImageAnnotatorClient()

    def detect_document_text(self, image_bytes: bytes, mime_type: str) -> OcrPage:
        try:
            response = self._client.document_text_detection(
                image=vision.Image(content=image_bytes)
            )
        except (google_exceptions.ServiceUnavailable, google_exceptions.DeadlineExceeded) as exc:
            raise OcrNetworkError(f"Vision API network error: {exc}") from exc
        except google_exceptions.GoogleAPICallError as exc:
            raise OcrBackendError(f"Vision API error: {exc}") from exc

        if response.error.message:
            raise OcrBackendError(f"Vision API error: {response.error.message}")

        annotation = response.full_text_annotation
        confidences = [
            float(block.confidence)
            for page in annotation.pages
            for block in page.blocks
        ]
        return OcrPage(text=annotation.text or "", block_confidences=confidences)
