from collections.abc import Sequence

from complyscan.logging.logger import Log
from complyscan.ocr.client_base import BaseOcrClient
from complyscan.ocr.exceptions import ExtractionError, OcrBackendError
from complyscan.ocr.models import OCRResult, SourceFile
from complyscan.ocr.sources import (
    RemoteFileFetcher,
    decode_base64,
    ensure_supported,
    load_source,
)
from complyscan.pdf.base import BasePdfExtractor
from complyscan.pdf.exceptions import PdfExtractionError, RasterizationError
from complyscan.pdf.rasterizer import PdfRasterizer
from complyscan.progress import ProgressCallback, report, scaled

DEFAULT_CONFIDENCE = 0.9
MIN_PAGE_TEXT_CHARS = 10
TEXT_LAYER_WORDS_PER_PAGE = 20
TEXT_LAYER_MIN_WORDS = 10
TEXT_LAYER_MIN_CHARS = 50


def mean_confidence(confidences: Sequence[float]) -> float:
    if not confidences:
        return DEFAULT_CONFIDENCE
    return sum(confidences) / len(confidences)


class TextExtractor:
    """Turns an image or PDF into plain text plus a confidence estimate.

    Images go straight to the OCR backend. PDFs are rasterized page by page
    through the strategy cascade and each page image is OCR'd; a page that
    fails is replaced with a placeholder so the rest of the document survives.
    """

    def __init__(
        self,
        *,
        ocr_client: BaseOcrClient,
        rasterizer: PdfRasterizer,
        page_counters: Sequence[BasePdfExtractor],
        text_layer: BasePdfExtractor | None = None,
        fetcher: RemoteFileFetcher | None = None,
        max_pages: int = 500,
    ) -> None:
        self._ocr_client = ocr_client
        self._rasterizer = rasterizer
        self._page_counters = tuple(page_counters)
        self._text_layer = text_layer
        self._fetcher = fetcher or RemoteFileFetcher()
        self._max_pages = max_pages

    def extract_text(
        self,
        source_url: str,
        on_progress: ProgressCallback | None = None,
    ) -> OCRResult:
        """Extract text from an HTTP(S) URL or a base64 ``data:`` URL.

        Raises:
            UnsupportedFileTypeError: if the MIME type is not allowed.
            InvalidDataUrlError: if the data URL is malformed.
            SourceFetchError: if the remote download fails.
            ExtractionError: if no page produced any text.
            OcrBackendError: if the OCR backend fails on an image.
        """
        source = load_source(source_url, self._fetcher)
        return self._extract(source, on_progress)

    def extract_text_from_base64(
        self,
        data: str,
        mime_type: str,
        on_progress: ProgressCallback | None = None,
    ) -> OCRResult:
        source = SourceFile(data=decode_base64(data), mime_type=ensure_supported(mime_type))
        return self._extract(source, on_progress)

    def _extract(self, source: SourceFile, on_progress: ProgressCallback | None) -> OCRResult:
        if source.is_pdf:
            return self._extract_pdf(source.data, on_progress)
        return self._extract_image(source, on_progress)

    def _extract_image(
        self,
        source: SourceFile,
        on_progress: ProgressCallback | None,
    ) -> OCRResult:
        report(on_progress, 10, "Extracting text from image...")
        page = self._ocr_client.detect_document_text(source.data, source.mime_type)
        report(on_progress, 100, "Text extraction complete")
        return OCRResult(
            text=page.text.strip(),
            confidence=mean_confidence(page.block_confidences),
            page_count=1,
            mime_type=source.mime_type,
        )

    def _extract_pdf(self, pdf_bytes: bytes, on_progress: ProgressCallback | None) -> OCRResult:
        report(on_progress, 5, "Reading PDF...")
        total_pages = self.count_pages(pdf_bytes)

        if self._text_layer is not None:
            result = self._try_text_layer(pdf_bytes, total_pages)
            if result is not None:
                report(on_progress, 100, "Text extraction complete")
                return result

        pages = min(total_pages, self._max_pages)
        if total_pages > pages:
            Log.warning(f"PDF has {total_pages} pages, processing the first {pages}")
        report(on_progress, 20, f"Converting {pages} PDF page(s) to images...")

        sections: list[str] = []
        confidences: list[float] = []
        failures: list[str] = []
        succeeded = 0
        for page_number in range(1, pages + 1):
            start = 20 + (page_number - 1) / pages * 75
            report(on_progress, start, f"Processing page {page_number} of {pages}...")
            header = f"--- PAGE {page_number} OF {pages} ---"
            try:
                image = self._rasterizer.convert_pdf_bytes_page(
                    pdf_bytes,
                    page_number,
                    scaled(on_progress, start, 75 / pages * 0.5),
                )
                page = self._ocr_client.detect_document_text(image, "image/png")
            except (RasterizationError, OcrBackendError) as exc:
                Log.warning(f"Page {page_number} of {pages} failed: {exc}")
                failures.append(str(exc))
                sections.append(f"--- PAGE {page_number} OF {pages} (PROCESSING FAILED) ---")
                continue

            text = page.text.strip()
            if len(text) < MIN_PAGE_TEXT_CHARS:
                sections.append(f"{header}\n[No text detected on this page]")
                continue
            sections.append(f"{header}\n{text}")
            confidences.extend(page.block_confidences)
            succeeded += 1

        if succeeded == 0:
            message = (
                f"Failed to extract text from any of the {pages} page(s). "
                "This PDF may be corrupted, password-protected, or contain only blank pages."
            )
            if failures:
                message = f"{message} {failures[-1]}"
            raise ExtractionError(message)

        Log.info(f"OCR extracted text from {succeeded}/{pages} PDF page(s)")
        report(on_progress, 100, "Text extraction complete")
        return OCRResult(
            text="\n\n".join(sections),
            confidence=mean_confidence(confidences),
            page_count=pages,
            mime_type="application/pdf",
        )

    def count_pages(self, pdf_bytes: bytes) -> int:
        """Page count from the first counter that can open the file, else 1."""
        for counter in self._page_counters:
            try:
                count = counter.page_count(pdf_bytes)
            except PdfExtractionError as exc:
                Log.debug(f"{type(counter).__name__} could not count pages: {exc}")
                continue
            if count > 0:
                return count
        return 1

    def _try_text_layer(self, pdf_bytes: bytes, total_pages: int) -> OCRResult | None:
        if self._text_layer is None:
            return None
        try:
            text = self._text_layer.extract(pdf_bytes)
        except PdfExtractionError as exc:
            Log.info(f"No usable text layer, falling back to OCR: {exc}")
            return None

        words = len(text.split())
        min_words = (
            total_pages * TEXT_LAYER_WORDS_PER_PAGE if total_pages > 1 else TEXT_LAYER_MIN_WORDS
        )
        if words < min_words or len(text) <= TEXT_LAYER_MIN_CHARS:
            Log.info(
                f"Text layer too sparse ({words} words for {total_pages} page(s)), "
                "falling back to OCR"
            )
            return None
        return OCRResult(
            text=text,
            confidence=min(0.95, 0.7 + words / 1000 * 0.25),
            page_count=total_pages,
            mime_type="application/pdf",
        )
