from abc import ABC, abstractmethod

from complyscan.ocr.models import OcrPage


class BaseOcrClient(ABC):
    """Contract for provider-specific document OCR backends."""

    @abstractmethod
    def detect_document_text(self, image_bytes: bytes, mime_type: str) -> OcrPage:
        """Return the text detected in one image with its block confidences."""
