"""Converts PDF pages to PNG images through an ordered fallback cascade."""

import base64
import binascii
import re
import time
from collections.abc import Callable, Mapping, Sequence

from complyscan.logging.logger import Log
from complyscan.pdf.base import BasePageRenderer
from complyscan.pdf.exceptions import InvalidPdfDataUrlError, RasterizationError
from complyscan.pdf.pdfplumber_adapter import PdfPlumberRenderer
from complyscan.pdf.pymupdf_adapter import PyMuPdfRenderer
from complyscan.pdf.strategies import DEFAULT_STRATEGIES, RasterStrategy
from complyscan.progress import ProgressCallback, report

_PDF_DATA_URL = re.compile(r"^data:application/pdf;base64,(.+)$", re.DOTALL)

FAILURE_MESSAGE = (
    "All {count} PDF conversion methods failed. "
    "This PDF may be corrupted or password-protected. "
    "Please try: (1) Converting the PDF to PNG/JPG images first, "
    "(2) Ensuring the PDF is not password-protected, "
    "(3) Using a different PDF file."
)


def decode_pdf_data_url(pdf_data_url: str) -> bytes:
    """Return the raw bytes of a ``data:application/pdf;base64,...`` URL.

    Raises:
        InvalidPdfDataUrlError: if the value is not a base64 PDF data URL.
    """
    if not pdf_data_url or not isinstance(pdf_data_url, str):
        raise InvalidPdfDataUrlError("Invalid PDF data URL")
    match = _PDF_DATA_URL.match(pdf_data_url)
    if match is None:
        raise InvalidPdfDataUrlError("Invalid PDF data URL format")
    try:
        return base64.b64decode(match.group(1), validate=False)
    except (binascii.Error, ValueError) as exc:
        raise InvalidPdfDataUrlError(f"Invalid PDF base64 payload: {exc}") from exc


def default_renderers() -> dict[str, BasePageRenderer]:
    return {
        PyMuPdfRenderer.name: PyMuPdfRenderer(),
        PdfPlumberRenderer.name: PdfPlumberRenderer(),
    }


class PdfRasterizer:
    """Tries each strategy in order until one yields an image.

    A strategy that raises or returns nothing falls through to the next one;
    only exhausting the whole list is an error.
    """

    def __init__(
        self,
        *,
        renderers: Mapping[str, BasePageRenderer] | None = None,
        strategies: Sequence[RasterStrategy] = DEFAULT_STRATEGIES,
        pause_seconds: float = 0.05,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._renderers = dict(renderers) if renderers is not None else default_renderers()
        self._strategies = tuple(strategies)
        self._pause_seconds = pause_seconds
        self._sleep = sleep
        unknown = {s.renderer for s in self._strategies} - set(self._renderers)
        if unknown:
            raise ValueError(f"Strategies reference unknown renderers: {sorted(unknown)}")

    @property
    def strategies(self) -> tuple[RasterStrategy, ...]:
        return self._strategies

    def convert_pdf_page_to_image(
        self,
        pdf_data_url: str,
        page_number: int = 1,
        on_progress: ProgressCallback | None = None,
    ) -> str:
        """Rasterize one page of a PDF data URL and return a PNG data URL."""
        pdf_bytes = decode_pdf_data_url(pdf_data_url)
        png = self.convert_pdf_bytes_page(pdf_bytes, page_number, on_progress)
        return "data:image/png;base64," + base64.b64encode(png).decode("ascii")

    def convert_pdf_bytes_page(
        self,
        pdf_bytes: bytes,
        page_number: int = 1,
        on_progress: ProgressCallback | None = None,
    ) -> bytes:
        """Rasterize one page of raw PDF bytes and return PNG bytes.

        Raises:
            RasterizationError: once every strategy has failed.
        """
        count = len(self._strategies)
        report(on_progress, 0, f"Starting PDF conversion with {count} backup methods...")

        for index, strategy in enumerate(self._strategies):
            report(
                on_progress,
                30 + index * 3,
                f"Trying method {index + 1}/{count}: {strategy.name}...",
            )
            image = self._attempt(strategy, pdf_bytes, page_number, index)
            if image:
                report(on_progress, 100, "PDF conversion successful!")
                return image
            if self._pause_seconds > 0 and index < count - 1:
                self._sleep(self._pause_seconds)

        raise RasterizationError(FAILURE_MESSAGE.format(count=count))

    def _attempt(
        self,
        strategy: RasterStrategy,
        pdf_bytes: bytes,
        page_number: int,
        index: int,
    ) -> bytes | None:
        if strategy.delay_seconds > 0:
            self._sleep(strategy.delay_seconds)
        renderer = self._renderers[strategy.renderer]
        try:
            return renderer.render(pdf_bytes, page_number, strategy.scale)
        except Exception as exc:
            Log.debug(f"Method {index + 1} ({strategy.name}) failed: {exc}")
            return None
