from abc import ABC, abstractmethod


class BasePdfExtractor(ABC):
    """Contract for PDF text-layer adapters."""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> str:
        """Extract the embedded text of every page as one normalized string.

        Raises:
            PdfExtractionError: if extraction fails for any reason.
        """

    @abstractmethod
    def page_count(self, pdf_bytes: bytes) -> int:
        """Return the number of pages in the document.

        Raises:
            PdfExtractionError: if the document cannot be opened.
        """


class BasePageRenderer(ABC):
    """Contract for PDF page rasterizers used by the strategy cascade."""

    name: str = "renderer"

    @abstractmethod
    def render(self, pdf_bytes: bytes, page_number: int, scale: float) -> bytes | None:
        """Render one 1-based page to PNG bytes.

        Page numbers past the end of the document clamp to the last page.
        Returns None when the backend produced no image; may raise on failure.
        """
